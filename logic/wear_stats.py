"""Wear-history aggregation into per-outfit statistics."""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Sequence

from models.outfit import Outfit, OutfitWithStats
from models.wear_history import WearRecord, WearStats


def aggregate_wear_history(records: Iterable[WearRecord]) -> Dict[str, WearStats]:
    """Group wear records by outfit into ``{count, last_worn}``.

    Outfits with no records are absent from the result; callers default to a
    count of zero and no last-worn date.
    """

    counts: Dict[str, int] = {}
    latest: Dict[str, date] = {}
    for record in records:
        counts[record.outfit_id] = counts.get(record.outfit_id, 0) + 1
        current = latest.get(record.outfit_id)
        if current is None or record.worn_date > current:
            latest[record.outfit_id] = record.worn_date

    return {
        outfit_id: WearStats(count=count, last_worn=latest[outfit_id])
        for outfit_id, count in counts.items()
    }


def attach_wear_stats(outfits: Sequence[Outfit], records: Iterable[WearRecord]) -> List[OutfitWithStats]:
    """Join outfits with stats computed from ``records``, preserving outfit order."""

    stats = aggregate_wear_history(records)
    empty = WearStats()
    joined = []
    for outfit in outfits:
        outfit_stats = stats.get(outfit.id, empty)
        joined.append(
            OutfitWithStats(outfit=outfit, wear_count=outfit_stats.count, last_worn=outfit_stats.last_worn)
        )
    return joined


__all__ = ["aggregate_wear_history", "attach_wear_stats"]
