"""HTTP surface tests using FastAPI's TestClient with an injected closet."""

from __future__ import annotations

import random
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from closet_app.app import ClosetApp
from closet_app.config import AppConfig
from models.weather import WeatherSnapshot
from server.api import create_app
from tools.weather_provider import StaticWeatherProvider

HEADERS = {"X-User-Id": "user-1"}


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    provider = StaticWeatherProvider(
        snapshot=WeatherSnapshot(temperature=4.0, feels_like=1.0, condition="snow", description="light snow"),
        by_city={"那覇": WeatherSnapshot(temperature=31.0, feels_like=34.0, condition="clear")},
    )
    closet = ClosetApp(
        config=AppConfig(database_path=str(tmp_path / "closet.db"), max_recommendation_count=5),
        weather_provider=provider,
        rng=random.Random(0),
    )
    return TestClient(create_app(closet))


def _create(client: TestClient, with_outer: bool = False, **extra) -> dict:
    items = [{"category": "top", "color": "white", "item_type": "tee"}]
    if with_outer:
        items.append({"category": "outer", "color": "black", "item_type": "down jacket"})
    response = client.post(
        "/outfits",
        json={"imageUrl": "https://cdn.example.com/look.jpg", "items": items, **extra},
        headers=HEADERS,
    )
    assert response.status_code == 201, response.text
    return response.json()["outfit"]


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_requires_user_header(client: TestClient) -> None:
    assert client.get("/outfits").status_code == 401
    assert client.post("/recommendations", json={}).status_code == 401


def test_create_and_list_outfits(client: TestClient) -> None:
    created = _create(client, with_outer=True, style="street")

    assert created["season"] == "all"
    assert [item["category"] for item in created["items"]] == ["top", "outer"]

    listed = client.get("/outfits", headers=HEADERS).json()["outfits"]
    assert [o["id"] for o in listed] == [created["id"]]
    assert listed[0]["wear_count"] == 0
    assert listed[0]["last_worn"] is None

    assert client.get("/outfits", headers={"X-User-Id": "someone-else"}).json()["outfits"] == []


def test_create_outfit_rejects_bad_payloads(client: TestClient) -> None:
    relative = client.post("/outfits", json={"imageUrl": "look.jpg"}, headers=HEADERS)
    unknown_category = client.post(
        "/outfits",
        json={"imageUrl": "https://cdn.example.com/a.jpg", "items": [{"category": "hat", "color": "red", "item_type": "cap"}]},
        headers=HEADERS,
    )

    assert relative.status_code == 400
    assert unknown_category.status_code == 422


def test_update_and_delete_outfit(client: TestClient) -> None:
    outfit = _create(client)

    favorited = client.patch(f"/outfits/{outfit['id']}", json={"is_favorite": True}, headers=HEADERS)
    assert favorited.status_code == 200
    assert favorited.json()["outfit"]["is_favorite"] is True

    assert client.patch(f"/outfits/{outfit['id']}", json={}, headers=HEADERS).status_code == 400
    assert client.patch("/outfits/missing", json={"is_archived": True}, headers=HEADERS).status_code == 404

    assert client.delete(f"/outfits/{outfit['id']}", headers=HEADERS).status_code == 200
    assert client.delete(f"/outfits/{outfit['id']}", headers=HEADERS).status_code == 404


def test_record_wear_conflicts_on_same_date(client: TestClient) -> None:
    outfit = _create(client)
    body = {"outfit_id": outfit["id"], "worn_date": "2025-03-30"}

    first = client.post("/wear-history", json=body, headers=HEADERS)
    second = client.post("/wear-history", json=body, headers=HEADERS)
    missing = client.post("/wear-history", json={"outfit_id": "ghost"}, headers=HEADERS)

    assert first.status_code == 201
    assert first.json()["worn_date"] == "2025-03-30"
    assert second.status_code == 409
    assert second.json()["detail"] == "Already recorded for this date"
    assert missing.status_code == 404

    listed = client.get("/outfits", headers=HEADERS).json()["outfits"]
    assert listed[0]["wear_count"] == 1
    assert listed[0]["last_worn"] == "2025-03-30"


def test_recommendations_with_supplied_weather(client: TestClient) -> None:
    coat = _create(client, with_outer=True)
    _create(client)

    response = client.post(
        "/recommendations",
        json={"matchWeather": True, "weather": {"temperature": 3, "condition": "rain"}, "count": 4},
        headers=HEADERS,
    )

    payload = response.json()
    assert response.status_code == 200
    assert [o["id"] for o in payload["recommendations"]] == [coat["id"]]
    assert payload["weather"]["feels_like"] == 3
    assert payload["weather"]["is_rainy"] is True


def test_recommendations_resolve_weather_from_provider(client: TestClient) -> None:
    _create(client, with_outer=True)
    tee = _create(client)

    response = client.post("/recommendations", json={"matchWeather": True, "city": "那覇"}, headers=HEADERS)

    payload = response.json()
    assert [o["id"] for o in payload["recommendations"]] == [tee["id"]]
    assert payload["weather"]["temperature"] == 31.0


def test_recommendations_cap_count_and_skip_weather(client: TestClient) -> None:
    for _ in range(7):
        _create(client)

    response = client.post("/recommendations", json={"count": 50}, headers=HEADERS)

    payload = response.json()
    assert len(payload["recommendations"]) == 5
    assert payload["weather"] is None


def test_recommendations_validate_payload(client: TestClient) -> None:
    assert client.post("/recommendations", json={"count": 0}, headers=HEADERS).status_code == 422
    assert client.post("/recommendations", json={"latitude": 35.0}, headers=HEADERS).status_code == 422


def test_weather_endpoint(client: TestClient) -> None:
    unavailable = client.get("/weather")
    by_coordinates = client.get("/weather", params={"latitude": 43.06, "longitude": 141.35})

    assert unavailable.status_code == 503
    assert by_coordinates.status_code == 200
    assert by_coordinates.json()["weather"]["emoji"] == "❄️"


def test_recommendations_from_query_string(client: TestClient) -> None:
    coat = _create(client, with_outer=True)
    _create(client)

    response = client.get(
        "/recommendations",
        params={"matchWeather": "true", "weather": '{"temperature": 2, "condition": "snow"}', "count": 4},
        headers=HEADERS,
    )

    payload = response.json()
    assert response.status_code == 200
    assert [o["id"] for o in payload["recommendations"]] == [coat["id"]]
    assert payload["weather"]["condition"] == "snow"


def test_query_string_ignores_malformed_weather(client: TestClient) -> None:
    _create(client, with_outer=True)
    _create(client)

    response = client.get(
        "/recommendations",
        params={"matchWeather": "true", "weather": "{not json", "city": "那覇"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert len(response.json()["recommendations"]) == 1
    assert response.json()["weather"]["temperature"] == 31.0


def test_query_string_validates_coordinates(client: TestClient) -> None:
    response = client.get("/recommendations", params={"latitude": 35.0}, headers=HEADERS)

    assert response.status_code == 422


def test_request_id_is_echoed(client: TestClient) -> None:
    supplied = client.get("/healthz", headers={"X-Request-Id": "req-42"})
    generated = client.get("/healthz")

    assert supplied.headers["X-Request-Id"] == "req-42"
    assert len(generated.headers["X-Request-Id"]) == 32


def test_configured_static_provider_serves_weather(tmp_path: Path) -> None:
    closet = ClosetApp(config=AppConfig(database_path=str(tmp_path / "closet.db"), weather_provider="static"))
    client = TestClient(create_app(closet))

    response = client.get("/weather", params={"city": "Osaka"})

    assert isinstance(closet.weather_service.provider, StaticWeatherProvider)
    assert response.status_code == 200
    assert response.json()["weather"]["condition"] == "clear"


def test_no_provider_means_weather_unavailable(tmp_path: Path) -> None:
    closet = ClosetApp(config=AppConfig(database_path=str(tmp_path / "closet.db")))
    client = TestClient(create_app(closet))

    assert closet.weather_service.provider is None
    assert client.get("/weather", params={"city": "Osaka"}).status_code == 503
