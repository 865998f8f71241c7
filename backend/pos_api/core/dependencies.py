"""
FastAPI dependency providers.

Each request gets a session-scoped ``SqlCollectionStore`` and services built
on it with the default collaborators. Tests override ``get_db`` (and, where
needed, ``get_clock`` / ``get_receipt_printer``) through
``app.dependency_overrides``.
"""

from typing import Any

from fastapi import Depends
from sqlalchemy.orm import Session

from pos_api.repositories import SqlCollectionStore
from pos_api.services.audit import AuditSink, CollectionAuditSink
from pos_api.services.printing import LoggingReceiptPrinter, ReceiptPrinter
from pos_api.services.domain import (
    Clock,
    FinanceService,
    HotelService,
    KitchenService,
    KTVService,
    MenuService,
    OrderService,
    PaymentReconciler,
    utc_now,
)
from pos_shared.config.settings import Settings, get_settings
from pos_shared.infrastructure.db import get_db
from pos_shared.infrastructure.store import CollectionStore


def get_store(db: Session = Depends(get_db)) -> CollectionStore:
    return SqlCollectionStore(db)


def get_audit_sink(store: CollectionStore = Depends(get_store)) -> AuditSink:
    return CollectionAuditSink(store)


def get_receipt_printer(settings: Settings = Depends(get_settings)) -> ReceiptPrinter:
    return LoggingReceiptPrinter(settings)


def get_clock() -> Clock:
    return utc_now


def get_collaborators(
    audit: AuditSink = Depends(get_audit_sink),
    printer: ReceiptPrinter = Depends(get_receipt_printer),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    return {"audit": audit, "printer": printer, "clock": clock, "settings": settings}


def get_order_service(
    store: CollectionStore = Depends(get_store),
    collaborators: dict[str, Any] = Depends(get_collaborators),
) -> OrderService:
    return OrderService(store, **collaborators)


def get_payment_reconciler(
    store: CollectionStore = Depends(get_store),
    collaborators: dict[str, Any] = Depends(get_collaborators),
) -> PaymentReconciler:
    return PaymentReconciler(store, **collaborators)


def get_kitchen_service(
    store: CollectionStore = Depends(get_store),
    collaborators: dict[str, Any] = Depends(get_collaborators),
) -> KitchenService:
    return KitchenService(store, **collaborators)


def get_ktv_service(
    store: CollectionStore = Depends(get_store),
    collaborators: dict[str, Any] = Depends(get_collaborators),
) -> KTVService:
    return KTVService(store, **collaborators)


def get_hotel_service(
    store: CollectionStore = Depends(get_store),
    collaborators: dict[str, Any] = Depends(get_collaborators),
) -> HotelService:
    return HotelService(store, **collaborators)


def get_menu_service(
    store: CollectionStore = Depends(get_store),
    collaborators: dict[str, Any] = Depends(get_collaborators),
) -> MenuService:
    return MenuService(store, **collaborators)


def get_finance_service(
    store: CollectionStore = Depends(get_store),
    collaborators: dict[str, Any] = Depends(get_collaborators),
) -> FinanceService:
    return FinanceService(store, **collaborators)
