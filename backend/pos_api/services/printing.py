"""
Receipt printing collaborators.

The printer itself (thermal printer, cloud print service) is external; the
engine only calls ``ReceiptPrinter(order)`` once per confirmed payment.
"""

from typing import Protocol

from pos_api.models import Order
from pos_shared.config.logging import get_logger, printer_logger
from pos_shared.config.settings import Settings, get_settings
from pos_shared.utils.money import format_cents

logger = get_logger(__name__)


class ReceiptPrinter(Protocol):
    def __call__(self, order: Order) -> None: ...


def format_receipt(order: Order, store_name: str = "", currency_symbol: str = "") -> str:
    """Plain-text receipt for an order."""
    lines = []
    if store_name:
        lines.append(store_name)
    lines.append(f"Order {order.id}  [{order.source.value}]  {order.table_identifier}")
    lines.append(order.created_at.strftime("%Y-%m-%d %H:%M"))
    lines.append("-" * 32)
    for item in order.items:
        amount = format_cents(item.subtotal_cents, currency_symbol)
        lines.append(f"{item.quantity} x {item.name}  {amount}")
    lines.append("-" * 32)
    lines.append(f"Subtotal  {format_cents(order.subtotal_cents, currency_symbol)}")
    if order.service_charge_cents:
        lines.append(f"Service   {format_cents(order.service_charge_cents, currency_symbol)}")
    lines.append(f"TOTAL     {format_cents(order.total_cents, currency_symbol)}")
    if order.payment_method is not None:
        lines.append(f"Paid by   {order.payment_method.value}")
    if order.notes:
        lines.append(f"Notes: {order.notes}")
    return "\n".join(lines)


class LoggingReceiptPrinter:
    """Render the receipt and write it to the ``pos.printer`` logger."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()

    def __call__(self, order: Order) -> None:
        receipt = format_receipt(order, self._settings.store_name, self._settings.currency_symbol)
        printer_logger.info("Receipt printed", order_id=order.id, receipt=receipt)


def print_receipt(printer: ReceiptPrinter | None, order: Order) -> None:
    """Send an order to the printer. Printer failures are logged, not raised."""
    if printer is None:
        return
    try:
        printer(order)
    except Exception:
        logger.error("Receipt printer failed", order_id=order.id, exc_info=True)
