"""Recommendation pipeline coverage against SQLite and failing stores."""

from __future__ import annotations

import random
import sqlite3
from datetime import date, timedelta
from pathlib import Path
from typing import List

import pytest

from closet_app.config import AppConfig
from logic.validation import RecommendationFilters
from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.wear_history import WearRecord
from models.weather import WeatherSnapshot
from services.recommendation_engine import RecommendationEngine
from tools.outfit_store import OutfitStore, OutfitStoreError, SQLiteOutfitStore

TODAY = date(2025, 11, 30)
USER = "user-1"


def _weather(temperature: float) -> WeatherSnapshot:
    return WeatherSnapshot(temperature=temperature, feels_like=temperature, condition="clouds", description="cloudy")


def _add_outfit(
    store: SQLiteOutfitStore,
    outfit_id: str,
    has_outer: bool = False,
    user_id: str = USER,
    **kwargs,
) -> Outfit:
    outfit = Outfit(id=outfit_id, user_id=user_id, image_url=f"https://example.com/{outfit_id}.jpg", **kwargs)
    outfit.items = [ClothingItem(outfit_id=outfit_id, category="bottom", color="indigo", item_type="jeans")]
    if has_outer:
        outfit.items.append(ClothingItem(outfit_id=outfit_id, category="outer", color="camel", item_type="coat"))
    return store.create_outfit(outfit)


def _wear(store: SQLiteOutfitStore, outfit_id: str, days_ago: int) -> None:
    store.add_wear_record(WearRecord(outfit_id=outfit_id, user_id=USER, worn_date=TODAY - timedelta(days=days_ago)))


def _ids(outfits) -> List[str]:
    return sorted(outfit.id for outfit in outfits)


@pytest.fixture()
def store(tmp_path: Path) -> SQLiteOutfitStore:
    return SQLiteOutfitStore(tmp_path / "closet.db")


@pytest.fixture()
def engine(store: SQLiteOutfitStore) -> RecommendationEngine:
    return RecommendationEngine(store, config=AppConfig(), rng=random.Random(0), today=lambda: TODAY)


def test_excludes_archived_and_other_users(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "mine")
    _add_outfit(store, "archived", is_archived=True)
    _add_outfit(store, "theirs", user_id="someone-else")

    result = engine.recommend(USER, RecommendationFilters(), count=10)

    assert _ids(result) == ["mine"]


def test_returns_fewer_than_requested_without_padding(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "a")
    _add_outfit(store, "b")

    result = engine.recommend(USER, RecommendationFilters(), count=4)

    assert len(result) == 2
    assert _ids(result) == ["a", "b"]


def test_truncates_to_requested_count(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    for index in range(6):
        _add_outfit(store, f"o-{index}")

    result = engine.recommend(USER, RecommendationFilters(), count=3)

    assert len(result) == 3
    assert len(set(_ids(result))) == 3


def test_default_count_comes_from_config(store: SQLiteOutfitStore) -> None:
    for index in range(6):
        _add_outfit(store, f"o-{index}")
    engine = RecommendationEngine(store, config=AppConfig(default_recommendation_count=2), rng=random.Random(1))

    assert len(engine.recommend(USER)) == 2


def test_favorite_only(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "fav", is_favorite=True)
    _add_outfit(store, "plain")

    result = engine.recommend(USER, RecommendationFilters(favorite_only=True), count=5)

    assert _ids(result) == ["fav"]


def test_exclude_worn_recently_uses_wear_history(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "never")
    _add_outfit(store, "yesterday")
    _add_outfit(store, "last-week")
    _wear(store, "yesterday", 1)
    _wear(store, "yesterday", 10)
    _wear(store, "last-week", 7)

    result = engine.recommend(USER, RecommendationFilters(exclude_worn_recently=True), count=5)

    assert _ids(result) == ["last-week", "never"]
    stats = {outfit.id: (outfit.wear_count, outfit.last_worn) for outfit in result}
    assert stats["last-week"] == (1, TODAY - timedelta(days=7))
    assert stats["never"] == (0, None)


def test_match_weather_cold_prefers_outer_layers(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "coat", has_outer=True)
    _add_outfit(store, "tee")

    result = engine.recommend(USER, RecommendationFilters(match_weather=True), weather=_weather(5), count=5)

    assert _ids(result) == ["coat"]


def test_match_weather_falls_back_when_nothing_fits(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "tee")
    _add_outfit(store, "shorts")

    result = engine.recommend(USER, RecommendationFilters(match_weather=True), weather=_weather(5), count=5)

    assert _ids(result) == ["shorts", "tee"]


def test_match_weather_without_snapshot_is_a_noop(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "coat", has_outer=True)
    _add_outfit(store, "tee")

    result = engine.recommend(USER, RecommendationFilters(match_weather=True), weather=None, count=5)

    assert _ids(result) == ["coat", "tee"]


def test_weather_ignored_unless_requested(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "coat", has_outer=True)
    _add_outfit(store, "tee")

    result = engine.recommend(USER, RecommendationFilters(), weather=_weather(35), count=5)

    assert _ids(result) == ["coat", "tee"]


def test_recency_runs_before_weather(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    """The weather fallback restores the post-recency list, not the fetched one."""

    _add_outfit(store, "coat-worn", has_outer=True)
    _add_outfit(store, "tee")
    _wear(store, "coat-worn", 0)

    filters = RecommendationFilters(exclude_worn_recently=True, match_weather=True)
    result = engine.recommend(USER, filters, weather=_weather(3), count=5)

    assert _ids(result) == ["tee"]


def test_seeded_rng_makes_order_reproducible(store: SQLiteOutfitStore) -> None:
    for index in range(8):
        _add_outfit(store, f"o-{index}")

    first = RecommendationEngine(store, rng=random.Random(99)).recommend(USER, count=8)
    second = RecommendationEngine(store, rng=random.Random(99)).recommend(USER, count=8)

    assert [o.id for o in first] == [o.id for o in second]


def test_recommend_is_read_only(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "a", is_favorite=True)
    _wear(store, "a", 5)

    engine.recommend(USER, RecommendationFilters(exclude_worn_recently=True, favorite_only=True), count=1)

    assert len(store.list_wear_records(USER, ["a"])) == 1
    assert store.get_outfit(USER, "a").is_favorite is True


class _UnavailableStore(OutfitStore):
    def list_outfits(self, user_id: str, archived: bool = False, favorite_only: bool = False):
        raise OutfitStoreError("connection refused")


class _HistoryFailsStore(OutfitStore):
    def list_outfits(self, user_id: str, archived: bool = False, favorite_only: bool = False):
        return [Outfit(user_id=user_id, image_url="https://example.com/x.jpg")]

    def list_wear_records(self, user_id, outfit_ids):
        raise OutfitStoreError("timeout")


@pytest.mark.parametrize("failing_store", [_UnavailableStore(), _HistoryFailsStore()])
def test_store_failures_yield_empty_list(failing_store: OutfitStore) -> None:
    engine = RecommendationEngine(failing_store, rng=random.Random(0))

    assert engine.recommend(USER, RecommendationFilters(exclude_worn_recently=True), count=3) == []


def test_empty_closet_returns_empty(engine: RecommendationEngine) -> None:
    assert engine.recommend(USER, RecommendationFilters(match_weather=True), weather=_weather(0), count=3) == []


class _ConnectionDownStore(OutfitStore):
    def list_outfits(self, user_id: str, archived: bool = False, favorite_only: bool = False):
        raise ConnectionError("db down")


def test_non_store_exceptions_yield_empty_list() -> None:
    engine = RecommendationEngine(_ConnectionDownStore(), rng=random.Random(0))

    assert engine.recommend(USER, count=3) == []


def test_undecodable_row_yields_empty_list(store: SQLiteOutfitStore, engine: RecommendationEngine) -> None:
    _add_outfit(store, "a")
    with sqlite3.connect(store.database_path) as conn:
        conn.execute("UPDATE clothing_items SET category = 'hat' WHERE outfit_id = 'a'")

    assert engine.recommend(USER, count=3) == []
