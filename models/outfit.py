"""Outfit schemas and the computed stats view."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse
from uuid import uuid4

from models.clothing_item import ClothingItem
from models.taxonomy import validate_season


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _validate_image_url(value: str) -> str:
    cleaned = str(value or "").strip()
    parsed = urlparse(cleaned)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"image_url must be an absolute http(s) URL, got {value!r}")
    return cleaned


@dataclass
class Outfit:
    """A saved clothing combination, represented primarily by one image."""

    user_id: str
    image_url: str
    season: Optional[str] = None
    style: Optional[str] = None
    is_favorite: bool = False
    is_archived: bool = False
    items: List[ClothingItem] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: str = field(default_factory=_utc_now)
    updated_at: str = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("user_id is required for an outfit")
        self.image_url = _validate_image_url(self.image_url)
        self.season = validate_season(self.season)
        if self.style is not None:
            self.style = str(self.style).strip() or None
        self.is_favorite = bool(self.is_favorite)
        self.is_archived = bool(self.is_archived)

    @property
    def has_outer_layer(self) -> bool:
        return any(item.is_outer_layer for item in self.items)


@dataclass(frozen=True)
class OutfitWithStats:
    """An outfit joined with its items and wear statistics.

    ``wear_count`` and ``last_worn`` are recomputed from wear history on every
    read and never stored.
    """

    outfit: Outfit
    wear_count: int = 0
    last_worn: Optional[date] = None

    @property
    def id(self) -> str:
        return self.outfit.id

    @property
    def items(self) -> List[ClothingItem]:
        return self.outfit.items

    @property
    def has_outer_layer(self) -> bool:
        return self.outfit.has_outer_layer

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self.outfit)
        payload["wear_count"] = self.wear_count
        payload["last_worn"] = self.last_worn.isoformat() if self.last_worn else None
        return payload


__all__ = ["Outfit", "OutfitWithStats"]
