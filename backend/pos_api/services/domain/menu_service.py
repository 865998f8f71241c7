"""
Menu Domain Service.

Menu items carry explicit capability tags; views such as the KTV menu are a
tag filter over the catalog rather than a list of category names. Order and
session lines are snapshots of the menu item at the time they are added.
"""

from collections.abc import Iterable

from pos_api.models import MenuItem, OrderItem
from pos_api.repositories import MenuItemRepository
from pos_shared.config.constants import Limits, MenuTag
from pos_shared.config.logging import get_logger
from pos_shared.utils.exceptions import ValidationError

from .base_service import DomainService

logger = get_logger(__name__)


def filter_menu(items: Iterable[MenuItem], tag: MenuTag) -> list[MenuItem]:
    """Available items carrying ``tag``, in catalog order."""
    return [item for item in items if item.available and item.has_tag(tag)]


def snapshot_item(menu_item: MenuItem, quantity: int) -> OrderItem:
    """
    Order line copied from a menu item.

    Raises:
        ValidationError: quantity out of range or the item is unavailable
    """
    if not Limits.MIN_QUANTITY <= quantity <= Limits.MAX_QUANTITY:
        raise ValidationError(
            f"Quantity must be between {Limits.MIN_QUANTITY} and {Limits.MAX_QUANTITY}",
            field="quantity",
            value=quantity,
        )
    if not menu_item.available:
        raise ValidationError(f"Menu item '{menu_item.name}' is not available", menu_item_id=menu_item.id)

    return OrderItem(
        reference_id=menu_item.id,
        name=menu_item.name,
        unit_price_cents=menu_item.price_cents,
        quantity=quantity,
    )


class MenuService(DomainService):
    """Catalog reads, tag views and line snapshots."""

    def __init__(self, store, **collaborators):
        super().__init__(store, **collaborators)
        self._items = MenuItemRepository(store)

    def list_items(self, tag: MenuTag | None = None) -> list[MenuItem]:
        items = self._items.find_all()
        if tag is None:
            return items
        return filter_menu(items, tag)

    def get_item(self, menu_item_id: str) -> MenuItem:
        return self._items.get(menu_item_id)

    def ktv_menu(self) -> list[MenuItem]:
        return self.list_items(MenuTag.KTV_SERVABLE)

    def retail_catalog(self) -> list[MenuItem]:
        return self.list_items(MenuTag.RETAIL)

    def add_item(self, item: MenuItem) -> MenuItem:
        created = self._items.add(item)
        logger.info("Menu item added", menu_item_id=created.id, price_cents=created.price_cents)
        return created

    def set_available(self, menu_item_id: str, available: bool) -> MenuItem:
        item = self._items.get(menu_item_id)
        if item.available == available:
            return item
        return self._items.save(item.model_copy(update={"available": available}))

    def snapshot(self, menu_item_id: str, quantity: int = 1) -> OrderItem:
        return snapshot_item(self._items.get(menu_item_id), quantity)

    def snapshot_lines(self, lines: Iterable[tuple[str, int]]) -> list[OrderItem]:
        """Snapshots for ``(menu_item_id, quantity)`` pairs."""
        return [self.snapshot(menu_item_id, quantity) for menu_item_id, quantity in lines]
