"""
Orders router - /api/orders/*
Creation, item editing, status transitions and payment.
"""

from fastapi import APIRouter, Depends, Header, Query, status

from pos_api.core.concurrency import check_if_match
from pos_api.core.dependencies import get_menu_service, get_order_service, get_payment_reconciler
from pos_api.services.domain import MenuService, OrderService, PaymentReconciler
from pos_shared.config.constants import Collections, OrderSource, OrderStatus
from pos_shared.utils.schemas import (
    AddItemsRequest,
    CancelOrderRequest,
    CreateOrderRequest,
    OrderOutput,
    PayRequest,
    RetailSaleRequest,
)

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=list[OrderOutput])
def list_orders(
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    source: OrderSource | None = None,
    table: str | None = None,
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    orders = service.list_orders(status=status_filter, source=source, table_identifier=table)
    return [OrderOutput.from_order(order) for order in orders]


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def create_order(
    body: CreateOrderRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    """Create a PENDING order from menu items. The service charge rate is frozen now."""
    order = service.create_from_menu(
        body.table_identifier,
        body.source,
        [item.as_line() for item in body.items],
        notes=body.notes,
    )
    return OrderOutput.from_order(order)


@router.post("/retail-sale", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def retail_sale(
    body: RetailSaleRequest,
    menu: MenuService = Depends(get_menu_service),
    payments: PaymentReconciler = Depends(get_payment_reconciler),
) -> OrderOutput:
    """Supermarket checkout: one completed SUPERMARKET order, no service charge."""
    items = menu.snapshot_lines(item.as_line() for item in body.items)
    return OrderOutput.from_order(payments.retail_sale(items, body.payment_method))


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    return OrderOutput.from_order(service.get_order(order_id))


@router.post("/{order_id}/items", response_model=OrderOutput)
def add_items(
    order_id: str,
    body: AddItemsRequest,
    if_match: str | None = Header(default=None),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    """Add items while the order is PENDING or COOKING."""
    check_if_match(service.get_order(order_id), Collections.ORDERS, if_match)
    order = service.add_menu_items(order_id, [item.as_line() for item in body.items])
    return OrderOutput.from_order(order)


@router.post("/{order_id}/accept", response_model=OrderOutput)
def accept_order(
    order_id: str,
    if_match: str | None = Header(default=None),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    check_if_match(service.get_order(order_id), Collections.ORDERS, if_match)
    return OrderOutput.from_order(service.accept(order_id))


@router.post("/{order_id}/serve", response_model=OrderOutput)
def serve_order(
    order_id: str,
    if_match: str | None = Header(default=None),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    check_if_match(service.get_order(order_id), Collections.ORDERS, if_match)
    return OrderOutput.from_order(service.serve(order_id))


@router.post("/{order_id}/cancel", response_model=OrderOutput)
def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    if_match: str | None = Header(default=None),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    check_if_match(service.get_order(order_id), Collections.ORDERS, if_match)
    reason = body.reason if body else None
    return OrderOutput.from_order(service.cancel(order_id, reason=reason))


@router.post("/{order_id}/pay", response_model=OrderOutput)
def pay_order(
    order_id: str,
    body: PayRequest,
    if_match: str | None = Header(default=None),
    service: OrderService = Depends(get_order_service),
    payments: PaymentReconciler = Depends(get_payment_reconciler),
) -> OrderOutput:
    """
    Record payment on a SERVED order.

    TAKEOUT orders complete immediately; others stay SERVED until /complete.
    """
    check_if_match(service.get_order(order_id), Collections.ORDERS, if_match)
    return OrderOutput.from_order(payments.pay(order_id, body.payment_method))


@router.post("/{order_id}/complete", response_model=OrderOutput)
def complete_order(
    order_id: str,
    if_match: str | None = Header(default=None),
    service: OrderService = Depends(get_order_service),
    payments: PaymentReconciler = Depends(get_payment_reconciler),
) -> OrderOutput:
    check_if_match(service.get_order(order_id), Collections.ORDERS, if_match)
    return OrderOutput.from_order(payments.complete(order_id))
