"""Clothing item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import uuid4

from models.taxonomy import OUTER_CATEGORY, validate_category


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ClothingItem:
    """One garment or accessory belonging to an outfit.

    ``item_type`` is free text so detected labels such as "カーディガン" survive
    untouched. ``has_item`` separates items the user confirmed owning from items
    that were only detected in the photo.
    """

    outfit_id: str
    category: str
    color: str
    item_type: str
    has_item: bool = False
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: str = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        self.category = validate_category(self.category)
        self.color = str(self.color).strip()
        self.item_type = str(self.item_type).strip()
        self.has_item = bool(self.has_item)

    @property
    def is_outer_layer(self) -> bool:
        return self.category == OUTER_CATEGORY


def from_raw_metadata(outfit_id: str, metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from loose detection or request payloads."""

    required_fields = ["category", "color", "item_type"]
    missing = [name for name in required_fields if not metadata.get(name)]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    return ClothingItem(
        outfit_id=outfit_id,
        category=str(metadata["category"]),
        color=str(metadata["color"]),
        item_type=str(metadata["item_type"]),
        has_item=bool(metadata.get("has_item", False)),
    )


__all__ = ["ClothingItem", "from_raw_metadata"]
