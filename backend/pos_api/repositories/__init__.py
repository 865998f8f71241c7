"""
Repository Pattern implementation.
Typed document access on top of the collection store.

Usage:
    from pos_api.repositories import SqlCollectionStore, get_order_repository

    store = SqlCollectionStore(db)
    orders = get_order_repository(store)
    order = orders.get("ORD-1A2B3C4D5E6F")
"""

from .store import SqlCollectionStore
from .base import DocumentRepository
from .order import OrderRepository, get_order_repository
from .ktv_room import KTVRoomRepository, get_ktv_room_repository
from .hotel_room import HotelRoomRepository, get_hotel_room_repository
from .menu_item import MenuItemRepository, get_menu_item_repository
from .payment_record import PaymentRecordRepository, get_payment_record_repository

__all__ = [
    # Store
    "SqlCollectionStore",
    # Base
    "DocumentRepository",
    # Orders
    "OrderRepository",
    "get_order_repository",
    # KTV
    "KTVRoomRepository",
    "get_ktv_room_repository",
    # Hotel
    "HotelRoomRepository",
    "get_hotel_room_repository",
    # Menu
    "MenuItemRepository",
    "get_menu_item_repository",
    # Payments
    "PaymentRecordRepository",
    "get_payment_record_repository",
]
