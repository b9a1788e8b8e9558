"""
Audit stamping for entities tagged with :func:`auditable`.

The stamps are written by a ``before_flush`` hook, so every flush inside a
:func:`~timeplanner.db.session.transaction` scope (explicit stage flushes,
autoflush before queries, and the final commit) fills them in. The acting
account is taken from ``session.info["actor_id"]``, which the transaction
scope sets.
"""

import logging
from datetime import datetime, timezone
from typing import Set, Type

from sqlalchemy import event
from sqlmodel import Session

logger = logging.getLogger(__name__)

AUDITABLE: Set[Type] = set()


def auditable(cls):
    """Class decorator: opt a table model into audit stamping."""
    AUDITABLE.add(cls)
    return cls


def is_auditable(obj) -> bool:
    return type(obj) in AUDITABLE


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def stamp(session: Session, now: datetime = None) -> int:
    """Populate audit fields on pending and modified auditable objects."""
    now = now or utcnow()
    actor_id = session.info.get("actor_id")
    stamped = 0

    for obj in session.new:
        if not is_auditable(obj):
            continue
        if obj.created_at is None:
            obj.created_at = now
        if obj.created_by is None:
            obj.created_by = actor_id
        _stamp_deleted(obj, now, actor_id)
        stamped += 1

    for obj in session.dirty:
        if not is_auditable(obj) or not session.is_modified(obj, include_collections=False):
            continue
        obj.updated_at = now
        obj.updated_by = actor_id
        _stamp_deleted(obj, now, actor_id)
        stamped += 1

    return stamped


def _stamp_deleted(obj, now: datetime, actor_id) -> None:
    if getattr(obj, "is_deleted", False) and getattr(obj, "deleted_at", None) is None:
        obj.deleted_at = now
        obj.deleted_by = actor_id


@event.listens_for(Session, "before_flush")
def _before_flush(session, flush_context, instances):
    count = stamp(session)
    if count:
        logger.debug("audit: stamped %d object(s) for actor %s", count, session.info.get("actor_id"))
