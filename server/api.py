"""FastAPI server exposing closet and recommendation endpoints."""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from closet_app.app import ClosetApp
from closet_app.logging_config import get_logger, log_event, operation_context
from logic.validation import (
    CreateOutfitRequest,
    RecommendationRequest,
    RecordWearRequest,
    UpdateOutfitRequest,
    WeatherPayload,
)
from models.weather import WeatherSnapshot
from services.outfit_service import OutfitNotFoundError
from tools.outfit_store import OutfitStoreError, WearAlreadyRecordedError

LOGGER = get_logger(__name__)


def create_app(closet: ClosetApp | None = None) -> FastAPI:
    """Build the FastAPI instance around a (possibly injected) :class:`ClosetApp`."""

    api = FastAPI(title="Outfit Closet", version="0.1.0")
    api.state.closet = closet or ClosetApp()

    def get_closet(request: Request) -> ClosetApp:
        return request.app.state.closet

    def current_user(x_user_id: Optional[str] = Header(None)) -> str:
        if not x_user_id:
            raise HTTPException(status_code=401, detail="Authentication required")
        return x_user_id

    @api.middleware("http")
    async def bind_request_id(request: Request, call_next):
        """Scope one correlation id to the request, honouring ``X-Request-Id``."""

        name = f"http:{request.method} {request.url.path}"
        with operation_context(name, request.headers.get("x-request-id")) as correlation_id:
            response = await call_next(request)
        response.headers["X-Request-Id"] = correlation_id
        return response

    @api.exception_handler(OutfitStoreError)
    async def store_error_handler(_: Request, exc: OutfitStoreError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"success": False, "error": "Outfit store unavailable"})

    @api.exception_handler(OutfitNotFoundError)
    async def not_found_handler(_: Request, exc: OutfitNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"success": False, "error": str(exc)})

    @api.get("/healthz")
    async def healthcheck(closet: ClosetApp = Depends(get_closet)) -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "outfit-closet",
            "environment": closet.config.environment or "local",
        }

    @api.get("/outfits")
    def list_outfits(
        archived: bool = Query(False),
        user_id: str = Depends(current_user),
        closet: ClosetApp = Depends(get_closet),
    ) -> dict:
        outfits = closet.outfits.list_outfits_with_stats(user_id, archived=archived)
        return {"success": True, "outfits": [outfit.to_dict() for outfit in outfits]}

    @api.post("/outfits", status_code=201)
    def create_outfit(
        request: CreateOutfitRequest,
        user_id: str = Depends(current_user),
        closet: ClosetApp = Depends(get_closet),
    ) -> dict:
        try:
            outfit = closet.outfits.create_outfit(
                user_id,
                image_url=request.image_url,
                items=[item.model_dump() for item in request.items],
                season=request.season,
                style=request.style,
                is_archived=request.is_archived,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"success": True, "outfit": asdict(outfit)}

    @api.patch("/outfits/{outfit_id}")
    def update_outfit(
        outfit_id: str,
        request: UpdateOutfitRequest,
        user_id: str = Depends(current_user),
        closet: ClosetApp = Depends(get_closet),
    ) -> dict:
        changes = request.changes()
        if not changes:
            raise HTTPException(status_code=400, detail="No changes supplied")
        outfit = closet.outfits.update_outfit(user_id, outfit_id, changes)
        return {"success": True, "outfit": asdict(outfit)}

    @api.delete("/outfits/{outfit_id}")
    def delete_outfit(
        outfit_id: str,
        user_id: str = Depends(current_user),
        closet: ClosetApp = Depends(get_closet),
    ) -> dict:
        closet.outfits.delete_outfit(user_id, outfit_id)
        return {"success": True, "message": "Outfit deleted"}

    @api.post("/wear-history", status_code=201)
    def record_wear(
        request: RecordWearRequest,
        user_id: str = Depends(current_user),
        closet: ClosetApp = Depends(get_closet),
    ) -> dict:
        try:
            record = closet.outfits.record_wear(user_id, request.outfit_id, request.worn_date)
        except WearAlreadyRecordedError as exc:
            raise HTTPException(status_code=409, detail="Already recorded for this date") from exc
        return {
            "success": True,
            "message": "Wear recorded",
            "outfit_id": record.outfit_id,
            "worn_date": record.worn_date.isoformat(),
        }

    @api.post("/recommendations")
    def recommend(
        request: RecommendationRequest,
        user_id: str = Depends(current_user),
        closet: ClosetApp = Depends(get_closet),
    ) -> dict:
        return _recommend(closet, user_id, request)

    @api.get("/recommendations")
    def recommend_from_query(
        exclude_worn_recently: bool = Query(False, alias="excludeWornRecently"),
        match_weather: bool = Query(False, alias="matchWeather"),
        favorite_only: bool = Query(False, alias="favoriteOnly"),
        count: Optional[int] = Query(None),
        weather: Optional[str] = Query(None),
        city: Optional[str] = Query(None),
        latitude: Optional[float] = Query(None),
        longitude: Optional[float] = Query(None),
        user_id: str = Depends(current_user),
        closet: ClosetApp = Depends(get_closet),
    ) -> dict:
        """Query-string form; ``weather`` is a JSON object and is ignored when malformed."""

        try:
            request = RecommendationRequest(
                exclude_worn_recently=exclude_worn_recently,
                match_weather=match_weather,
                favorite_only=favorite_only,
                count=count,
                weather=_parse_weather_param(weather),
                city=city,
                latitude=latitude,
                longitude=longitude,
            )
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _recommend(closet, user_id, request)

    @api.get("/weather")
    def current_weather(
        city: Optional[str] = Query(None),
        latitude: Optional[float] = Query(None, ge=-90, le=90),
        longitude: Optional[float] = Query(None, ge=-180, le=180),
        closet: ClosetApp = Depends(get_closet),
    ) -> dict:
        weather = closet.weather_service.current(city=city, latitude=latitude, longitude=longitude)
        if weather is None:
            raise HTTPException(status_code=503, detail="Weather unavailable")
        return {"success": True, "weather": _weather_dict(weather)}

    return api


def _parse_weather_param(raw: Optional[str]) -> Optional[WeatherPayload]:
    if not raw:
        return None
    try:
        return WeatherPayload.model_validate_json(raw)
    except ValidationError as exc:
        log_event(LOGGER, logging.WARNING, "weather_param_ignored", error_count=exc.error_count())
        return None


def _recommend(closet: ClosetApp, user_id: str, request: RecommendationRequest) -> dict:
    count = min(
        request.count or closet.config.default_recommendation_count,
        closet.config.max_recommendation_count,
    )
    weather: Optional[WeatherSnapshot]
    if request.weather is not None:
        weather = request.weather.to_snapshot()
    elif request.match_weather:
        weather = closet.weather_service.current(
            city=request.city, latitude=request.latitude, longitude=request.longitude
        )
    else:
        weather = None

    outfits = closet.recommendations.recommend(user_id, request.filters(), weather=weather, count=count)
    return {
        "success": True,
        "recommendations": [outfit.to_dict() for outfit in outfits],
        "weather": _weather_dict(weather),
    }


def _weather_dict(weather: Optional[WeatherSnapshot]) -> Optional[dict]:
    if weather is None:
        return None
    return {
        "temperature": weather.temperature,
        "feels_like": weather.feels_like,
        "condition": weather.condition,
        "description": weather.description,
        "icon": weather.icon,
        "emoji": weather.emoji,
        "is_rainy": weather.is_rainy,
    }


def get_app() -> FastAPI:
    """Expose a FastAPI instance for ASGI servers."""

    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
