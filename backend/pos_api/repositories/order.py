"""
Order Repository - Data access for orders.
"""

from collections.abc import Iterable

from pos_api.models import Order
from pos_shared.config.constants import Collections, OrderSource, OrderStatus
from pos_shared.infrastructure.store import CollectionStore

from .base import DocumentRepository


class OrderRepository(DocumentRepository[Order]):
    """Repository for Order documents."""

    collection = Collections.ORDERS
    document_type = Order
    entity_name = "Order"

    def find_by_status(self, statuses: Iterable[OrderStatus]) -> list[Order]:
        wanted = set(statuses)
        return [order for order in self.find_all() if order.status in wanted]

    def find_by_table(self, table_identifier: str) -> list[Order]:
        return [order for order in self.find_all() if order.table_identifier == table_identifier]

    def find_by_source(self, source: OrderSource) -> list[Order]:
        return [order for order in self.find_all() if order.source == source]


def get_order_repository(store: CollectionStore) -> OrderRepository:
    return OrderRepository(store)
