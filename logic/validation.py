"""Pydantic schemas and helpers for validating service and HTTP payloads."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.taxonomy import validate_category, validate_season, validate_weather_condition
from models.weather import WeatherSnapshot


class RecommendationFilters(BaseModel):
    """Switches for the recommendation pipeline."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    exclude_worn_recently: bool = Field(False, alias="excludeWornRecently")
    match_weather: bool = Field(False, alias="matchWeather")
    favorite_only: bool = Field(False, alias="favoriteOnly")


class WeatherPayload(BaseModel):
    """Weather snapshot as supplied by a client."""

    temperature: float
    feels_like: Optional[float] = None
    condition: str = "clouds"
    description: str = ""
    icon: str = ""

    @field_validator("condition")
    @classmethod
    def _validate_condition(cls, value: str) -> str:
        return validate_weather_condition(value)

    def to_snapshot(self) -> WeatherSnapshot:
        return WeatherSnapshot(
            temperature=self.temperature,
            feels_like=self.temperature if self.feels_like is None else self.feels_like,
            condition=self.condition,
            description=self.description,
            icon=self.icon,
        )


class RecommendationRequest(RecommendationFilters):
    """Body of a recommendation request."""

    count: Optional[int] = Field(None, ge=1)
    weather: Optional[WeatherPayload] = None
    city: Optional[str] = Field(None, min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @model_validator(mode="after")
    def _validate_coordinates(self) -> "RecommendationRequest":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be supplied together")
        return self

    def filters(self) -> RecommendationFilters:
        return RecommendationFilters(
            exclude_worn_recently=self.exclude_worn_recently,
            match_weather=self.match_weather,
            favorite_only=self.favorite_only,
        )


class ClothingItemInput(BaseModel):
    """Input contract for one clothing item on outfit creation."""

    category: str
    color: str = Field(min_length=1)
    item_type: str = Field(min_length=1)
    has_item: bool = False

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str) -> str:
        return validate_category(value)


class CreateOutfitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(min_length=1, alias="imageUrl")
    items: List[ClothingItemInput] = []
    season: Optional[str] = None
    style: Optional[str] = None
    is_archived: bool = Field(False, alias="isArchived")

    @field_validator("season")
    @classmethod
    def _validate_season(cls, value: Optional[str]) -> Optional[str]:
        return validate_season(value)


class UpdateOutfitRequest(BaseModel):
    """Partial update of outfit flags and tags."""

    is_favorite: Optional[bool] = None
    is_archived: Optional[bool] = None
    season: Optional[str] = None
    style: Optional[str] = None

    @field_validator("season")
    @classmethod
    def _validate_season(cls, value: Optional[str]) -> Optional[str]:
        return validate_season(value)

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class RecordWearRequest(BaseModel):
    outfit_id: str = Field(min_length=1)
    worn_date: Optional[date] = None


__all__ = [
    "RecommendationFilters",
    "WeatherPayload",
    "RecommendationRequest",
    "ClothingItemInput",
    "CreateOutfitRequest",
    "UpdateOutfitRequest",
    "RecordWearRequest",
]
