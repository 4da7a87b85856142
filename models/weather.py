"""Weather snapshot model."""

from __future__ import annotations

from dataclasses import dataclass

from models.taxonomy import is_rainy, validate_weather_condition, weather_icon


@dataclass(frozen=True)
class WeatherSnapshot:
    """Point-in-time reading used to bias recommendations. Never persisted."""

    temperature: float
    feels_like: float
    condition: str
    description: str = ""
    icon: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "temperature", float(self.temperature))
        object.__setattr__(self, "feels_like", float(self.feels_like))
        object.__setattr__(self, "condition", validate_weather_condition(self.condition))

    @property
    def is_rainy(self) -> bool:
        return is_rainy(self.condition)

    @property
    def emoji(self) -> str:
        return weather_icon(self.condition)


__all__ = ["WeatherSnapshot"]
