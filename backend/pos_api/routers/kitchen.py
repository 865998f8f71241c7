"""
Kitchen router - /api/kitchen/*
Read-only kitchen display; transitions go through /api/orders.
"""

from fastapi import APIRouter, Depends

from pos_api.core.dependencies import get_kitchen_service
from pos_api.services.domain import KitchenService
from pos_shared.utils.schemas import KitchenQueueOutput

router = APIRouter(prefix="/api/kitchen", tags=["kitchen"])


@router.get("/queue", response_model=KitchenQueueOutput)
def get_kitchen_queue(service: KitchenService = Depends(get_kitchen_service)) -> KitchenQueueOutput:
    """
    Pending and cooking orders, oldest first.

    Each ticket carries its age in minutes and whether it is overdue.
    """
    return KitchenQueueOutput.from_queue(service.queue())
