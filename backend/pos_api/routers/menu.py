"""
Menu router - /api/menu/*
"""

from fastapi import APIRouter, Depends

from pos_api.core.dependencies import get_menu_service
from pos_api.services.domain import MenuService
from pos_shared.config.constants import MenuTag
from pos_shared.utils.schemas import MenuItemOutput, UpdateMenuAvailabilityRequest

router = APIRouter(prefix="/api/menu", tags=["menu"])


@router.get("", response_model=list[MenuItemOutput])
def list_menu(
    tag: MenuTag | None = None,
    service: MenuService = Depends(get_menu_service),
) -> list[MenuItemOutput]:
    """Full catalog, or the available items carrying ``tag``."""
    return [MenuItemOutput.from_item(item) for item in service.list_items(tag)]


@router.get("/{menu_item_id}", response_model=MenuItemOutput)
def get_menu_item(menu_item_id: str, service: MenuService = Depends(get_menu_service)) -> MenuItemOutput:
    return MenuItemOutput.from_item(service.get_item(menu_item_id))


@router.patch("/{menu_item_id}/availability", response_model=MenuItemOutput)
def set_availability(
    menu_item_id: str,
    body: UpdateMenuAvailabilityRequest,
    service: MenuService = Depends(get_menu_service),
) -> MenuItemOutput:
    return MenuItemOutput.from_item(service.set_available(menu_item_id, body.available))
