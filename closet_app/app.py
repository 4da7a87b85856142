"""Closet app bootstrap."""

from __future__ import annotations

import logging
import random

from closet_app.config import AppConfig
from closet_app.logging_config import configure_logging, get_logger, log_event
from services.outfit_service import OutfitService
from services.recommendation_engine import RecommendationEngine
from services.weather_service import WeatherService
from tools.outfit_store import OutfitStore, SQLiteOutfitStore
from tools.weather_provider import StaticWeatherProvider, WeatherProvider


LOGGER = get_logger(__name__)


class ClosetApp:
    """Wires together the store, the weather provider and the services.

    Every collaborator can be passed in; anything omitted is built from the
    config so tests can swap in fakes without touching module state.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        store: OutfitStore | None = None,
        weather_provider: WeatherProvider | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        configure_logging(self.config.log_level)

        self.store = store or SQLiteOutfitStore(self.config.database_path)
        if weather_provider is None:
            weather_provider = _provider_from_config(self.config)
        self.weather_service = WeatherService(weather_provider, default_city=self.config.default_city)
        self.outfits = OutfitService(self.store)
        self.recommendations = RecommendationEngine(self.store, config=self.config, rng=rng)

        log_event(
            LOGGER,
            logging.INFO,
            "app_initialised",
            environment=self.config.environment or "local",
            weather_provider=type(weather_provider).__name__ if weather_provider else None,
        )
        if weather_provider is None:
            # /weather answers 503 and location-based matching is skipped.
            log_event(LOGGER, logging.WARNING, "weather_disabled", reason="no weather provider configured")


def _provider_from_config(config: AppConfig) -> WeatherProvider | None:
    if config.weather_provider == "static":
        return StaticWeatherProvider()
    return None


__all__ = ["ClosetApp"]
