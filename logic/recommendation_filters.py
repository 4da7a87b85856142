"""Deterministic filtering functions for weather and wear recency."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from closet_app.config import (
    DEFAULT_COLD_THRESHOLD_C,
    DEFAULT_HOT_THRESHOLD_C,
    DEFAULT_RECENCY_WINDOW_DAYS,
)
from models.outfit import OutfitWithStats


@dataclass(frozen=True)
class FilteringResult:
    """Captures the outcome of a single filtering step."""

    items: List[OutfitWithStats]
    removed: Dict[str, str]
    debug: Dict[str, object]


def filter_by_weather(
    outfits: Sequence[OutfitWithStats],
    temperature: float,
    cold_threshold_c: float = DEFAULT_COLD_THRESHOLD_C,
    hot_threshold_c: float = DEFAULT_HOT_THRESHOLD_C,
) -> FilteringResult:
    """Keep outfits whose outer layer suits the temperature.

    Below the cold threshold only outfits with an outer item survive, above the
    hot threshold only outfits without one. When that would leave nothing, the
    filter is dropped for this call and the input comes back unchanged.
    """

    removed: Dict[str, str] = {}
    kept: List[OutfitWithStats] = []
    if temperature < cold_threshold_c:
        band = "cold"
    elif temperature > hot_threshold_c:
        band = "hot"
    else:
        band = "mild"

    for outfit in outfits:
        reason = None
        if band == "cold" and not outfit.has_outer_layer:
            reason = "no outer layer for cold weather"
        elif band == "hot" and outfit.has_outer_layer:
            reason = "outer layer too warm for hot weather"
        if reason:
            removed[outfit.id] = reason
        else:
            kept.append(outfit)

    fallback_applied = bool(outfits) and not kept
    if fallback_applied:
        kept = list(outfits)
        removed = {}

    debug = {
        "input_count": len(outfits),
        "kept_count": len(kept),
        "removed_count": len(removed),
        "temperature_c": temperature,
        "band": band,
        "thresholds_c": {"cold": f"<{cold_threshold_c}", "hot": f">{hot_threshold_c}"},
        "fallback_applied": fallback_applied,
    }
    return FilteringResult(items=kept, removed=removed, debug=debug)


def filter_recently_worn(
    outfits: Sequence[OutfitWithStats],
    today: Optional[date] = None,
    window_days: int = DEFAULT_RECENCY_WINDOW_DAYS,
) -> FilteringResult:
    """Drop outfits last worn on or after ``today - window_days``.

    Never-worn outfits always pass.
    """

    reference = today or date.today()
    cutoff = reference - timedelta(days=window_days)
    removed: Dict[str, str] = {}
    kept: List[OutfitWithStats] = []
    for outfit in outfits:
        if outfit.last_worn is not None and outfit.last_worn >= cutoff:
            removed[outfit.id] = f"worn on {outfit.last_worn.isoformat()}"
        else:
            kept.append(outfit)

    debug = {
        "input_count": len(outfits),
        "kept_count": len(kept),
        "removed_count": len(removed),
        "today": reference.isoformat(),
        "cutoff": cutoff.isoformat(),
    }
    return FilteringResult(items=kept, removed=removed, debug=debug)


__all__ = ["FilteringResult", "filter_by_weather", "filter_recently_worn"]
