"""
Audit logging collaborators.

Services receive an ``AuditSink`` and call it with ``(level, action, details)``
after a write has been confirmed. Sinks are fire-and-forget: a failing sink
is logged and never undoes or fails the operation that triggered it.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from pos_shared.config.constants import Collections
from pos_shared.config.logging import audit_logger, get_logger
from pos_shared.infrastructure.store import CollectionStore

logger = get_logger(__name__)

AUDIT_LEVELS = ("info", "warning", "error")


class AuditSink(Protocol):
    def __call__(self, level: str, action: str, details: dict[str, Any]) -> None: ...


class LoggingAuditSink:
    """Write audit entries to the ``pos.audit`` logger."""

    def __call__(self, level: str, action: str, details: dict[str, Any]) -> None:
        log_fn = getattr(audit_logger, level if level in AUDIT_LEVELS else "info")
        log_fn(action, **details)


class CollectionAuditSink(LoggingAuditSink):
    """
    Log the entry and persist it in the ``audit_logs`` collection.

    Entry ids use the ``audit:<timestamp>:<suffix>`` key scheme so a plain
    listing of the collection reads chronologically.
    """

    def __init__(self, store: CollectionStore):
        self._store = store

    def __call__(self, level: str, action: str, details: dict[str, Any]) -> None:
        super().__call__(level, action, details)
        now = datetime.now(timezone.utc)
        self._store.create(
            Collections.AUDIT_LOGS,
            {
                "id": f"audit:{now.strftime('%Y%m%dT%H%M%S%f')}:{uuid.uuid4().hex[:6]}",
                "timestamp": now.isoformat(),
                "level": level,
                "action": action,
                "details": details,
            },
        )


def emit_audit(sink: AuditSink | None, level: str, action: str, **details: Any) -> None:
    """Send one audit entry. Sink failures are logged, not raised."""
    if sink is None:
        return
    try:
        sink(level, action, details)
    except Exception:
        logger.error("Audit sink failed", action=action, exc_info=True)
