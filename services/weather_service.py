"""Weather lookups that never fail a recommendation."""

from __future__ import annotations

import logging
from typing import Optional

from closet_app.logging_config import get_logger, log_event, operation_context
from models.weather import WeatherSnapshot
from tools.weather_provider import WeatherProvider, WeatherUnavailableError


LOGGER = get_logger(__name__)


class WeatherService:
    """Resolves a snapshot by city or coordinate, degrading failures to ``None``."""

    def __init__(self, provider: WeatherProvider | None = None, default_city: str | None = None) -> None:
        self.provider = provider
        self.default_city = default_city

    def current(
        self,
        city: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> Optional[WeatherSnapshot]:
        """Return the current snapshot, or ``None`` when no weather is available.

        Coordinates win over a city name; without either the configured default
        city is used.
        """

        with operation_context("service:weather.current") as correlation_id:
            if self.provider is None:
                return None

            try:
                if latitude is not None and longitude is not None:
                    snapshot = self.provider.get_by_location(latitude, longitude)
                elif city or self.default_city:
                    snapshot = self.provider.get_by_city(city or self.default_city)  # type: ignore[arg-type]
                else:
                    return None
            except WeatherUnavailableError as exc:
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "weather_unavailable",
                    correlation_id=correlation_id,
                    city=city,
                    reason=str(exc),
                )
                return None
            except Exception as exc:  # noqa: BLE001
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "weather_unavailable",
                    correlation_id=correlation_id,
                    city=city,
                    reason=type(exc).__name__,
                    exc_info=True,
                )
                return None

            log_event(
                LOGGER,
                logging.INFO,
                "weather_resolved",
                correlation_id=correlation_id,
                condition=snapshot.condition,
                temperature=snapshot.temperature,
            )
            return snapshot


__all__ = ["WeatherService"]
