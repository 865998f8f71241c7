"""
Base class for domain services.

Architecture:
    Router (thin) → Service (business logic) → Repository → CollectionStore

Every service is built from the same collaborators: the collection store,
an audit sink, a receipt printer, a clock and the settings. Routers and the
CLI build them through ``pos_api.core.dependencies``; tests pass fakes.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from pos_api.models import Order
from pos_api.services.audit import AuditSink, emit_audit
from pos_api.services.printing import ReceiptPrinter, print_receipt
from pos_shared.config.settings import Settings, get_settings
from pos_shared.infrastructure.store import CollectionStore

from .session_clock import utc_now


Clock = Callable[[], datetime]


class DomainService:
    """Holds the shared collaborators of a domain service."""

    def __init__(
        self,
        store: CollectionStore,
        *,
        audit: AuditSink | None = None,
        printer: ReceiptPrinter | None = None,
        clock: Clock = utc_now,
        settings: Settings | None = None,
    ):
        self._store = store
        self._audit = audit
        self._printer = printer
        self._clock = clock
        self._settings = settings or get_settings()

    @property
    def store(self) -> CollectionStore:
        return self._store

    @property
    def settings(self) -> Settings:
        return self._settings

    def now(self) -> datetime:
        return self._clock()

    def audit(self, action: str, level: str = "info", **details: Any) -> None:
        emit_audit(self._audit, level, action, **details)

    def print_receipt(self, order: Order) -> None:
        print_receipt(self._printer, order)

    def collaborators(self) -> dict[str, Any]:
        """Keyword arguments for building a sibling service on the same collaborators."""
        return {
            "audit": self._audit,
            "printer": self._printer,
            "clock": self._clock,
            "settings": self._settings,
        }
