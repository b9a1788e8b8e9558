"""
Interval conflict validation for an account's tasks.

A task occupies the half-open interval ``[start, start + duration)``. Two
intervals ``[s1, e1)`` and ``[s2, e2)`` intersect iff ``s1 < e2 and s2 < e1``,
so a task ending at 10:00 and one starting at 10:00 never conflict.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlmodel import Session, select

from ..core.errors import OverlapError
from ..db.models import Task

logger = logging.getLogger(__name__)


def normalize_instant(value: datetime) -> datetime:
    """Instants are aware UTC; naive input is taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def task_end(start: datetime, duration_hours: float) -> datetime:
    return start + timedelta(hours=duration_hours)


def intervals_overlap(s1: datetime, e1: datetime, s2: datetime, e2: datetime) -> bool:
    return s1 < e2 and s2 < e1


def find_conflict(
    session: Session,
    account_id: uuid.UUID,
    start: datetime,
    duration: float,
    exclude_task_id: Optional[uuid.UUID] = None,
) -> Optional[Task]:
    """Return the earliest task of the account that intersects the candidate."""
    start = normalize_instant(start)
    end = task_end(start, duration)

    # Anything starting at or after the candidate's end cannot intersect it.
    stmt = (
        select(Task)
        .where(Task.account_id == account_id)
        .where(Task.start < end)
        .order_by(Task.start)
    )
    if exclude_task_id is not None:
        stmt = stmt.where(Task.id != exclude_task_id)

    for existing in session.exec(stmt):
        existing_start = normalize_instant(existing.start)
        if intervals_overlap(start, end, existing_start, task_end(existing_start, existing.duration)):
            return existing
    return None


def check_no_overlap(
    session: Session,
    account_id: uuid.UUID,
    start: datetime,
    duration: float,
    exclude_task_id: Optional[uuid.UUID] = None,
) -> bool:
    return find_conflict(session, account_id, start, duration, exclude_task_id) is None


def ensure_no_overlap(
    session: Session,
    account_id: uuid.UUID,
    start: datetime,
    duration: float,
    exclude_task_id: Optional[uuid.UUID] = None,
) -> None:
    conflict = find_conflict(session, account_id, start, duration, exclude_task_id)
    if conflict is not None:
        logger.info(
            "rejecting task for account %s at %s (%.2fh): overlaps task %s",
            account_id, start, duration, conflict.id,
        )
        raise OverlapError("This time slot overlaps with an existing task.", conflicting_task_id=conflict.id)
