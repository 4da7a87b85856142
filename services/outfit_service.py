"""Closet operations: outfits with wear stats, flags and wear recording."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence

from closet_app.logging_config import get_logger, log_event
from logic.wear_stats import attach_wear_stats
from models.clothing_item import from_raw_metadata
from models.outfit import Outfit, OutfitWithStats
from models.taxonomy import DEFAULT_SEASON
from models.wear_history import WearRecord, parse_worn_date
from tools.observability import instrument_operation
from tools.outfit_store import OutfitStore


LOGGER = get_logger(__name__)


class OutfitNotFoundError(LookupError):
    """The outfit does not exist or belongs to another user."""

    def __init__(self, outfit_id: str) -> None:
        super().__init__(f"Outfit {outfit_id} not found")
        self.outfit_id = outfit_id


class OutfitService:
    """Thin layer over :class:`OutfitStore` enforcing ownership and computing stats."""

    def __init__(self, store: OutfitStore, today: Callable[[], date] = date.today) -> None:
        self.store = store
        self.today = today

    @instrument_operation("list_outfits_with_stats")
    def list_outfits_with_stats(self, user_id: str, archived: bool = False) -> List[OutfitWithStats]:
        """Return the collection (or archive) newest first with wear stats attached."""

        outfits = self.store.list_outfits(user_id, archived=archived)
        if not outfits:
            return []
        records = self.store.list_wear_records(user_id, [outfit.id for outfit in outfits])
        return attach_wear_stats(outfits, records)

    @instrument_operation("create_outfit")
    def create_outfit(
        self,
        user_id: str,
        image_url: str,
        items: Sequence[Dict[str, Any]] = (),
        season: Optional[str] = None,
        style: Optional[str] = None,
        is_archived: bool = False,
    ) -> Outfit:
        outfit = Outfit(
            user_id=user_id,
            image_url=image_url,
            season=season or DEFAULT_SEASON,
            style=style,
            is_archived=is_archived,
            is_favorite=False,
        )
        outfit.items = [from_raw_metadata(outfit.id, raw) for raw in items]
        return self.store.create_outfit(outfit)

    @instrument_operation("update_outfit")
    def update_outfit(self, user_id: str, outfit_id: str, changes: Dict[str, object]) -> Outfit:
        updated = self.store.update_outfit(user_id, outfit_id, changes)
        if updated is None:
            raise OutfitNotFoundError(outfit_id)
        return updated

    def set_favorite(self, user_id: str, outfit_id: str, is_favorite: bool) -> Outfit:
        return self.update_outfit(user_id, outfit_id, {"is_favorite": is_favorite})

    def set_archived(self, user_id: str, outfit_id: str, is_archived: bool) -> Outfit:
        return self.update_outfit(user_id, outfit_id, {"is_archived": is_archived})

    @instrument_operation("delete_outfit")
    def delete_outfit(self, user_id: str, outfit_id: str) -> None:
        if not self.store.delete_outfit(user_id, outfit_id):
            raise OutfitNotFoundError(outfit_id)

    @instrument_operation("record_wear")
    def record_wear(self, user_id: str, outfit_id: str, worn_date: date | str | None = None) -> WearRecord:
        """Insert one wear record, defaulting to today.

        Raises :class:`OutfitNotFoundError` for unknown or foreign outfits and
        :class:`tools.outfit_store.WearAlreadyRecordedError` when the date is
        already recorded.
        """

        if self.store.get_outfit(user_id, outfit_id) is None:
            raise OutfitNotFoundError(outfit_id)

        record = WearRecord(
            outfit_id=outfit_id,
            user_id=user_id,
            worn_date=parse_worn_date(worn_date) if worn_date is not None else self.today(),
        )
        stored = self.store.add_wear_record(record)
        log_event(
            LOGGER,
            logging.INFO,
            "wear_recorded",
            outfit_id=outfit_id,
            worn_date=stored.worn_date.isoformat(),
        )
        return stored


__all__ = ["OutfitService", "OutfitNotFoundError"]
