"""Canonical taxonomy definitions for outfits, clothing items and weather.

This module centralises the canonical labels for clothing categories, season
tags and weather conditions. Helper functions keep validation logic consistent
across the data models, the store and the HTTP layer.
"""

from typing import Dict, List


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_")


CATEGORIES: List[str] = ["top", "bottom", "outer", "dress", "shoes", "accessory"]
OUTER_CATEGORY = "outer"

SEASONS: List[str] = ["spring", "summer", "fall", "winter", "all"]
DEFAULT_SEASON = "all"

WEATHER_CONDITIONS: List[str] = ["clear", "clouds", "rain", "snow", "thunderstorm", "drizzle", "mist"]
RAINY_CONDITIONS = {"rain", "drizzle", "thunderstorm"}

WEATHER_ICONS: Dict[str, str] = {
    "clear": "☀️",
    "clouds": "☁️",
    "rain": "🌧️",
    "snow": "❄️",
    "thunderstorm": "⛈️",
    "drizzle": "🌦️",
    "mist": "🌫️",
}


def validate_category(value: str) -> str:
    """Validate and normalise a clothing category.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    key = _normalize_key(value)
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {CATEGORIES}")
    return key


def validate_season(value: str | None) -> str | None:
    """Validate an optional season tag."""

    if value is None:
        return None
    key = _normalize_key(value)
    if key not in SEASONS:
        raise ValueError(f"Unsupported season '{value}'. Allowed: {SEASONS}")
    return key


def validate_weather_condition(value: str) -> str:
    key = _normalize_key(value)
    if key not in WEATHER_CONDITIONS:
        raise ValueError(f"Unsupported weather condition '{value}'. Allowed: {WEATHER_CONDITIONS}")
    return key


def is_rainy(condition: str) -> bool:
    """Return True for conditions where rain gear matters."""

    return _normalize_key(condition) in RAINY_CONDITIONS


def weather_icon(condition: str) -> str:
    return WEATHER_ICONS.get(_normalize_key(condition), WEATHER_ICONS["clouds"])


__all__ = [
    "CATEGORIES",
    "OUTER_CATEGORY",
    "SEASONS",
    "DEFAULT_SEASON",
    "WEATHER_CONDITIONS",
    "validate_category",
    "validate_season",
    "validate_weather_condition",
    "is_rainy",
    "weather_icon",
]
