"""
Menu item document.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from pos_shared.config.constants import Limits, MenuTag

from .base import Document


class MenuItem(Document):
    """A sellable dish, drink or retail product with explicit capability tags."""

    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price_cents: int = Field(ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)
    tags: frozenset[MenuTag] = frozenset()
    available: bool = True
    description: Optional[str] = None

    def has_tag(self, tag: MenuTag) -> bool:
        return tag in self.tags
