"""
Menu Item Repository.
"""

from pos_api.models import MenuItem
from pos_shared.config.constants import Collections
from pos_shared.infrastructure.store import CollectionStore

from .base import DocumentRepository


class MenuItemRepository(DocumentRepository[MenuItem]):
    collection = Collections.MENU_ITEMS
    document_type = MenuItem
    entity_name = "Menu item"


def get_menu_item_repository(store: CollectionStore) -> MenuItemRepository:
    return MenuItemRepository(store)
