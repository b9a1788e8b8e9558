# tests/helpers.py

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func
from sqlmodel import Session, select

PASSWORD = "Passw0rd!"


def count(engine, model, **filters) -> int:
    """Row count read through a short-lived session (never left open)."""
    with Session(engine) as s:
        stmt = select(func.count()).select_from(model)
        for name, value in filters.items():
            stmt = stmt.where(getattr(model, name) == value)
        return s.exec(stmt).one()


def at(hour: int, minute: int = 0, day: int = 7) -> datetime:
    return datetime(2030, 1, day, hour, minute, tzinfo=timezone.utc)
