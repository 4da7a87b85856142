"""Weather provider abstractions and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from models.weather import WeatherSnapshot


LOGGER = logging.getLogger(__name__)


class WeatherUnavailableError(RuntimeError):
    """The provider could not produce a snapshot."""


class WeatherProvider(ABC):
    """Abstract weather provider interface.

    Concrete forecast clients live outside this package; anything that can turn
    a city name or a coordinate into a :class:`WeatherSnapshot` fits here.
    """

    @abstractmethod
    def get_by_city(self, city: str) -> WeatherSnapshot:
        """Return the current snapshot for a named city."""

    @abstractmethod
    def get_by_location(self, latitude: float, longitude: float) -> WeatherSnapshot:
        """Return the current snapshot for a coordinate."""


class StaticWeatherProvider(WeatherProvider):
    """Offline deterministic provider for tests and local runs.

    ``by_city`` overrides the default snapshot for specific cities; unknown
    cities and every coordinate get the default.
    """

    def __init__(
        self,
        snapshot: WeatherSnapshot | None = None,
        by_city: Optional[Dict[str, WeatherSnapshot]] = None,
    ) -> None:
        self.snapshot = snapshot or WeatherSnapshot(
            temperature=18.0,
            feels_like=18.0,
            condition="clear",
            description="Clear sky",
            icon="100",
        )
        self.by_city = dict(by_city or {})

    def get_by_city(self, city: str) -> WeatherSnapshot:
        if not city:
            raise ValueError("city is required for weather lookups")
        LOGGER.info("Returning static forecast", extra={"city": city})
        return self.by_city.get(city, self.snapshot)

    def get_by_location(self, latitude: float, longitude: float) -> WeatherSnapshot:
        LOGGER.info("Returning static forecast for coordinates")
        return self.snapshot


__all__ = ["WeatherProvider", "StaticWeatherProvider", "WeatherUnavailableError"]
