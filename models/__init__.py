"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing_item import ClothingItem, from_raw_metadata
from models.outfit import Outfit, OutfitWithStats
from models.wear_history import WearRecord, WearStats
from models.weather import WeatherSnapshot

__all__ = [
    "ClothingItem",
    "from_raw_metadata",
    "Outfit",
    "OutfitWithStats",
    "WearRecord",
    "WearStats",
    "WeatherSnapshot",
]
