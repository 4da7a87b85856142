"""Outfit storage abstractions and SQLite implementation."""
from __future__ import annotations

import contextlib
import sqlite3
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.wear_history import WearRecord

_UPDATABLE_FIELDS = {"is_favorite", "is_archived", "season", "style"}
_IN_CLAUSE_CHUNK = 500


class OutfitStoreError(RuntimeError):
    """The outfit store could not be reached or a query failed."""


class ConstraintViolationError(OutfitStoreError):
    """A write was rejected by a table constraint."""

    def __init__(self, message: str, constraint: str) -> None:
        super().__init__(message)
        self.constraint = constraint


class WearAlreadyRecordedError(OutfitStoreError):
    """The outfit already has a wear record for that date."""

    def __init__(self, outfit_id: str, worn_date: date) -> None:
        super().__init__(f"Outfit {outfit_id} is already recorded as worn on {worn_date.isoformat()}")
        self.outfit_id = outfit_id
        self.worn_date = worn_date


class OutfitStore:
    """Persistence interface for outfits, their items and wear history."""

    def create_outfit(self, outfit: Outfit) -> Outfit:
        raise NotImplementedError

    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        raise NotImplementedError

    def list_outfits(self, user_id: str, archived: bool = False, favorite_only: bool = False) -> List[Outfit]:
        raise NotImplementedError

    def update_outfit(self, user_id: str, outfit_id: str, changes: Dict[str, object]) -> Optional[Outfit]:
        raise NotImplementedError

    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        raise NotImplementedError

    def add_wear_record(self, record: WearRecord) -> WearRecord:
        raise NotImplementedError

    def list_wear_records(self, user_id: str, outfit_ids: Sequence[str]) -> List[WearRecord]:
        raise NotImplementedError


def _chunks(values: Sequence[str], size: int = _IN_CLAUSE_CHUNK) -> Iterator[Sequence[str]]:
    for start in range(0, len(values), size):
        yield values[start : start + size]


def _constraint_kind(exc: sqlite3.IntegrityError) -> str:
    message = str(exc).upper()
    if "UNIQUE" in message:
        return "unique"
    if "FOREIGN KEY" in message:
        return "foreign_key"
    if "NOT NULL" in message:
        return "not_null"
    return "check"


class SQLiteOutfitStore(OutfitStore):
    """Local SQLite-backed store for outfits.

    Each operation opens its own connection with foreign keys enabled so that
    deleting an outfit cascades to its clothing items and wear history.
    """

    def __init__(self, database_path: str | Path = "data/closet.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn: sqlite3.Connection | None = None
        try:
            conn = self._connect()
            with conn:
                yield conn
        except sqlite3.IntegrityError as exc:
            raise ConstraintViolationError(str(exc), _constraint_kind(exc)) from exc
        except sqlite3.Error as exc:
            raise OutfitStoreError(f"Outfit store query failed: {exc}") from exc
        except ValueError as exc:
            # Rows that no longer satisfy the model validators.
            raise OutfitStoreError(f"Stored row could not be decoded: {exc}") from exc
        finally:
            if conn is not None:
                conn.close()

    def _ensure_tables(self) -> None:
        with self._transaction() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS outfits (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    image_url TEXT NOT NULL,
                    season TEXT,
                    style TEXT,
                    is_favorite INTEGER NOT NULL DEFAULT 0,
                    is_archived INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_outfits_user_archived ON outfits (user_id, is_archived);

                CREATE TABLE IF NOT EXISTS clothing_items (
                    id TEXT PRIMARY KEY,
                    outfit_id TEXT NOT NULL REFERENCES outfits (id) ON DELETE CASCADE,
                    category TEXT NOT NULL,
                    color TEXT NOT NULL,
                    item_type TEXT NOT NULL,
                    has_item INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_clothing_items_outfit ON clothing_items (outfit_id);

                CREATE TABLE IF NOT EXISTS wear_history (
                    id TEXT PRIMARY KEY,
                    outfit_id TEXT NOT NULL REFERENCES outfits (id) ON DELETE CASCADE,
                    user_id TEXT NOT NULL,
                    worn_date TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    UNIQUE (outfit_id, worn_date)
                );
                """
            )

    def create_outfit(self, outfit: Outfit) -> Outfit:
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO outfits (
                    id, user_id, image_url, season, style, is_favorite, is_archived, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    outfit.id,
                    outfit.user_id,
                    outfit.image_url,
                    outfit.season,
                    outfit.style,
                    int(outfit.is_favorite),
                    int(outfit.is_archived),
                    outfit.created_at,
                    outfit.updated_at,
                ),
            )
            conn.executemany(
                """
                INSERT INTO clothing_items (id, outfit_id, category, color, item_type, has_item, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (item.id, outfit.id, item.category, item.color, item.item_type, int(item.has_item), item.created_at)
                    for item in outfit.items
                ],
            )
        return outfit

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> ClothingItem:
        return ClothingItem(
            id=row["id"],
            outfit_id=row["outfit_id"],
            category=row["category"],
            color=row["color"],
            item_type=row["item_type"],
            has_item=bool(row["has_item"]),
            created_at=row["created_at"],
        )

    @staticmethod
    def _row_to_outfit(row: sqlite3.Row, items: List[ClothingItem]) -> Outfit:
        return Outfit(
            id=row["id"],
            user_id=row["user_id"],
            image_url=row["image_url"],
            season=row["season"],
            style=row["style"],
            is_favorite=bool(row["is_favorite"]),
            is_archived=bool(row["is_archived"]),
            items=items,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _load_items(self, conn: sqlite3.Connection, outfit_ids: Sequence[str]) -> Dict[str, List[ClothingItem]]:
        items: Dict[str, List[ClothingItem]] = {outfit_id: [] for outfit_id in outfit_ids}
        for chunk in _chunks(list(outfit_ids)):
            placeholders = ", ".join("?" for _ in chunk)
            cursor = conn.execute(
                f"SELECT * FROM clothing_items WHERE outfit_id IN ({placeholders}) ORDER BY rowid",
                tuple(chunk),
            )
            for row in cursor.fetchall():
                items[row["outfit_id"]].append(self._row_to_item(row))
        return items

    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM outfits WHERE user_id = ? AND id = ?",
                (user_id, outfit_id),
            ).fetchone()
            if not row:
                return None
            items = self._load_items(conn, [outfit_id])
            return self._row_to_outfit(row, items[outfit_id])

    def list_outfits(self, user_id: str, archived: bool = False, favorite_only: bool = False) -> List[Outfit]:
        query = "SELECT * FROM outfits WHERE user_id = ? AND is_archived = ?"
        params: list = [user_id, int(archived)]
        if favorite_only:
            query += " AND is_favorite = 1"
        query += " ORDER BY created_at DESC, id"

        with self._transaction() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
            items = self._load_items(conn, [row["id"] for row in rows])
            return [self._row_to_outfit(row, items[row["id"]]) for row in rows]

    def update_outfit(self, user_id: str, outfit_id: str, changes: Dict[str, object]) -> Optional[Outfit]:
        current = self.get_outfit(user_id, outfit_id)
        if not current:
            return None

        for key, value in changes.items():
            if key in _UPDATABLE_FIELDS:
                setattr(current, key, value)
        current.updated_at = datetime.now(timezone.utc).isoformat()
        validated = Outfit(
            id=current.id,
            user_id=current.user_id,
            image_url=current.image_url,
            season=current.season,
            style=current.style,
            is_favorite=current.is_favorite,
            is_archived=current.is_archived,
            items=current.items,
            created_at=current.created_at,
            updated_at=current.updated_at,
        )

        with self._transaction() as conn:
            conn.execute(
                """
                UPDATE outfits
                SET season = ?, style = ?, is_favorite = ?, is_archived = ?, updated_at = ?
                WHERE user_id = ? AND id = ?
                """,
                (
                    validated.season,
                    validated.style,
                    int(validated.is_favorite),
                    int(validated.is_archived),
                    validated.updated_at,
                    user_id,
                    outfit_id,
                ),
            )
        return validated

    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        with self._transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM outfits WHERE user_id = ? AND id = ?",
                (user_id, outfit_id),
            )
            return cursor.rowcount > 0

    def add_wear_record(self, record: WearRecord) -> WearRecord:
        try:
            with self._transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO wear_history (id, outfit_id, user_id, worn_date, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        record.outfit_id,
                        record.user_id,
                        record.worn_date.isoformat(),
                        record.created_at,
                    ),
                )
        except ConstraintViolationError as exc:
            if exc.constraint == "unique":
                raise WearAlreadyRecordedError(record.outfit_id, record.worn_date) from exc
            raise
        return record

    def list_wear_records(self, user_id: str, outfit_ids: Sequence[str]) -> List[WearRecord]:
        records: List[WearRecord] = []
        with self._transaction() as conn:
            for chunk in _chunks(list(outfit_ids)):
                placeholders = ", ".join("?" for _ in chunk)
                cursor = conn.execute(
                    f"""
                    SELECT * FROM wear_history
                    WHERE user_id = ? AND outfit_id IN ({placeholders})
                    ORDER BY worn_date DESC
                    """,
                    (user_id, *chunk),
                )
                records.extend(
                    WearRecord(
                        id=row["id"],
                        outfit_id=row["outfit_id"],
                        user_id=row["user_id"],
                        worn_date=row["worn_date"],
                        created_at=row["created_at"],
                    )
                    for row in cursor.fetchall()
                )
        return records


__all__ = [
    "OutfitStore",
    "SQLiteOutfitStore",
    "OutfitStoreError",
    "ConstraintViolationError",
    "WearAlreadyRecordedError",
]
