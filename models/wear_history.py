"""Wear history records and the statistics derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional
from uuid import uuid4


def parse_worn_date(value: date | str) -> date:
    """Coerce an ISO calendar date string (or a datetime) into a date."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"worn_date must be an ISO calendar date (YYYY-MM-DD), got {value!r}") from exc


@dataclass
class WearRecord:
    """A fact that an outfit was worn on a given calendar date."""

    outfit_id: str
    user_id: str
    worn_date: date
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def __post_init__(self) -> None:
        self.worn_date = parse_worn_date(self.worn_date)


@dataclass(frozen=True)
class WearStats:
    count: int = 0
    last_worn: Optional[date] = None


__all__ = ["WearRecord", "WearStats", "parse_worn_date"]
