import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from ..core.config import settings
from ..core.errors import OperationCancelled

logger = logging.getLogger(__name__)


def _is_memory(url) -> bool:
    return url.database in (None, "", ":memory:")


def build_engine(url: str, echo: bool = False, busy_timeout: float = 5.0) -> Engine:
    """
    Create an engine whose transactions serialize writers per database.

    SQLite: every transaction starts with ``BEGIN IMMEDIATE`` so the
    overlap check and the insert that follows it cannot interleave with
    another writer. Other backends run at SERIALIZABLE.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, isolation_level="SERIALIZABLE")

    kwargs = {"connect_args": {"check_same_thread": False, "timeout": busy_timeout}}
    if _is_memory(parsed):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, echo=echo, **kwargs)

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


def init_db(bind: Optional[Engine] = None) -> None:
    from . import models  # noqa: F401
    bind = bind or engine
    if bind.url.get_backend_name() == "sqlite" and not _is_memory(bind.url):
        Path(bind.url.database).parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(bind)
    logger.info("database ready at %s", bind.url.render_as_string(hide_password=True))


def get_session(request: Request):
    with Session(request.app.state.engine) as session:
        yield session


def check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelled()


@contextmanager
def transaction(
    session: Session,
    *,
    actor_id=None,
    cancel_event: Optional[threading.Event] = None,
) -> Iterator[Session]:
    """
    Explicit unit of work: commit on success, roll back on any exception.

    ``actor_id`` is exposed to the audit hook for the duration of the scope.
    A set ``cancel_event`` at commit time rolls everything back.
    """
    previous_actor = session.info.get("actor_id")
    session.info["actor_id"] = actor_id
    try:
        yield session
        check_cancelled(cancel_event)
        session.commit()
    except BaseException:
        session.rollback()
        raise
    finally:
        session.info["actor_id"] = previous_actor
