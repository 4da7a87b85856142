"""Outfit-of-the-day recommendation pipeline."""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Callable, List, Optional

from closet_app.config import AppConfig
from closet_app.logging_config import get_logger, log_event, operation_context
from logic.recommendation_filters import filter_by_weather, filter_recently_worn
from logic.selection import select_outfits
from logic.validation import RecommendationFilters
from logic.wear_stats import attach_wear_stats
from models.outfit import OutfitWithStats
from models.weather import WeatherSnapshot
from tools.outfit_store import OutfitStore, OutfitStoreError


LOGGER = get_logger(__name__)


class RecommendationEngine:
    """Suggests outfits for today from a user's non-archived closet.

    The pipeline is read-only: fetch outfits with items and wear history,
    compute wear stats, optionally drop recently worn outfits, optionally match
    the weather, then shuffle and truncate. Any failure while reading the closet
    yields an empty list; ``recommend`` never raises for data-source errors.
    """

    def __init__(
        self,
        store: OutfitStore,
        config: AppConfig | None = None,
        rng: random.Random | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.config = config or AppConfig()
        self.rng = rng or random.Random()
        self.today = today

    def recommend(
        self,
        user_id: str,
        filters: RecommendationFilters | None = None,
        weather: Optional[WeatherSnapshot] = None,
        count: int | None = None,
    ) -> List[OutfitWithStats]:
        filters = filters or RecommendationFilters()
        requested = self.config.default_recommendation_count if count is None else count

        with operation_context("service:recommendation.recommend") as correlation_id:
            try:
                outfits = self.store.list_outfits(user_id, archived=False, favorite_only=filters.favorite_only)
                records = self.store.list_wear_records(user_id, [outfit.id for outfit in outfits]) if outfits else []
                candidates = attach_wear_stats(outfits, records)
            except Exception as exc:  # noqa: BLE001
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "recommendation_store_failed",
                    correlation_id=correlation_id,
                    user_id=user_id,
                    error=type(exc).__name__,
                    store_error=isinstance(exc, OutfitStoreError),
                    exc_info=True,
                )
                return []

            steps: dict = {"fetched": len(candidates)}

            if filters.exclude_worn_recently:
                recency = filter_recently_worn(
                    candidates, today=self.today(), window_days=self.config.recency_window_days
                )
                candidates = recency.items
                steps["recency"] = recency.debug

            if filters.match_weather and weather is not None:
                weather_result = filter_by_weather(
                    candidates,
                    weather.temperature,
                    cold_threshold_c=self.config.cold_threshold_c,
                    hot_threshold_c=self.config.hot_threshold_c,
                )
                candidates = weather_result.items
                steps["weather"] = weather_result.debug

            selected = select_outfits(candidates, requested, rng=self.rng)
            log_event(
                LOGGER,
                logging.INFO,
                "recommendation_completed",
                correlation_id=correlation_id,
                user_id=user_id,
                requested=requested,
                returned=len(selected),
                weather_available=weather is not None,
                steps=steps,
            )
            return selected


__all__ = ["RecommendationEngine"]
