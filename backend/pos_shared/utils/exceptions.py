"""
Centralized domain exceptions for consistent error handling.

Every error carries the HTTP status the API surface should answer with and
is logged once, with context, when raised.

Usage:
    from pos_shared.utils.exceptions import InvalidTransitionError, NotFoundError

    raise NotFoundError("Order", order_id)
    raise InvalidTransitionError("Order", order.status, "cancel", order_id=order.id)
"""

from typing import Any

from fastapi import HTTPException, status

from pos_shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class to ensure consistent
    logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        self.context = log_context
        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return self.detail


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Order", "ORD-1a2b3c")
        raise NotFoundError("KTV room", room_id)
    """

    def __init__(self, entity: str, entity_id: str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} '{entity_id}' not found"
        else:
            detail = f"{entity} not found"

        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Quantity must be at least 1", field="quantity", value=0)
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            **log_context,
        )


class InvalidTransitionError(ValidationError):
    """An order status change that is not permitted from the current status."""

    def __init__(self, entity: str, current_status: str, event: str, **log_context: Any):
        current = getattr(current_status, "value", current_status)
        attempted = getattr(event, "value", event)
        detail = f"Invalid transition for {entity}: cannot '{attempted}' from status '{current}'"

        self.current_status = current
        self.event = attempted
        super().__init__(detail, entity=entity, current_status=current, event=attempted, **log_context)


class NotReadyForPaymentError(ValidationError):
    """Payment attempted on an order that has not been served."""

    def __init__(self, order_id: str, current_status: str, **log_context: Any):
        current = getattr(current_status, "value", current_status)
        detail = f"Order '{order_id}' is not ready for payment (status '{current}')"

        self.order_id = order_id
        self.current_status = current
        super().__init__(detail, order_id=order_id, current_status=current, **log_context)


class EmptyOrderError(ValidationError):
    """Checkout or order creation attempted with no line items."""

    def __init__(self, **log_context: Any):
        super().__init__("Order has no items", **log_context)


class SessionNotActiveError(ValidationError):
    """KTV billing or checkout requested on a room with no active session."""

    def __init__(self, room_id: str, **log_context: Any):
        self.room_id = room_id
        super().__init__(f"KTV room '{room_id}' has no active session", room_id=room_id, **log_context)


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("Room is not available")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            **log_context,
        )


class AlreadyPaidError(ConflictError):
    """A payment method is already recorded for the order."""

    def __init__(self, order_id: str, payment_method: str | None = None, **log_context: Any):
        self.order_id = order_id
        super().__init__(
            f"Order '{order_id}' is already paid",
            order_id=order_id,
            payment_method=getattr(payment_method, "value", payment_method),
            **log_context,
        )


class RoomNotAvailableError(ConflictError):
    """A KTV room operation was attempted from the wrong room status."""

    def __init__(self, room_id: str, current_status: str, expected_status: str, **log_context: Any):
        current = getattr(current_status, "value", current_status)
        expected = getattr(expected_status, "value", expected_status)
        self.room_id = room_id
        self.current_status = current
        super().__init__(
            f"KTV room '{room_id}' is '{current}', expected '{expected}'",
            room_id=room_id,
            current_status=current,
            expected_status=expected,
            **log_context,
        )


class DuplicateEntityError(ConflictError):
    """Entity already exists."""

    def __init__(self, entity: str, identifier: str, **log_context: Any):
        super().__init__(
            f"{entity} '{identifier}' already exists",
            entity=entity,
            identifier=identifier,
            **log_context,
        )


class StaleRecordError(ConflictError):
    """The record changed since it was read (optimistic concurrency check)."""

    def __init__(
        self,
        collection: str,
        record_id: str,
        expected_version: int,
        actual_version: int | None = None,
        **log_context: Any,
    ):
        self.collection = collection
        self.record_id = record_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"{collection}/{record_id} was modified concurrently; reload and retry",
            collection=collection,
            record_id=record_id,
            expected_version=expected_version,
            actual_version=actual_version,
            **log_context,
        )


# =============================================================================
# 503 Persistence Errors
# =============================================================================


class PersistenceFailureError(AppException):
    """The collection store operation failed. Local state was not changed."""

    def __init__(self, operation: str, collection: str, **log_context: Any):
        self.operation = operation
        self.collection = collection
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Storage error during {operation} on '{collection}'. Please try again.",
            log_level="error",
            operation=operation,
            collection=collection,
            **log_context,
        )
