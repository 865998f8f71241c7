"""
Optimistic concurrency at the HTTP edge.

Clients send the ``version`` they last read in ``If-Match``; a mismatch
means another terminal changed the record in between. The store repeats
the check atomically on write.
"""

from pos_api.models import Document
from pos_shared.utils.exceptions import StaleRecordError, ValidationError


def check_if_match(document: Document, collection: str, if_match: str | None) -> None:
    """Raise StaleRecordError when ``if_match`` names another version."""
    if if_match is None:
        return
    raw = if_match.strip().removeprefix("W/").strip('"')
    try:
        expected = int(raw)
    except ValueError:
        raise ValidationError("If-Match must carry a record version", value=if_match) from None
    if expected != document.version:
        raise StaleRecordError(collection, document.id, expected, document.version)
