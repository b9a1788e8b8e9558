"""
Account identity: creation, credential checks, token resolution, removal,
and registration with an optional import of local data.
"""

import hashlib
import logging
import secrets
import threading
import uuid
from typing import Optional, Tuple

from sqlalchemy import delete, func
from sqlmodel import Session, select
from werkzeug.security import check_password_hash, generate_password_hash

from ..core.errors import ConflictError, MigrationFailedError, UnauthorizedError
from ..db.models import Account, Category, Task, TaskTemplate
from ..db.session import transaction
from ..schemas.migration import MigrationBundle
from .migration import MigrationReport, migrate_account_data

logger = logging.getLogger(__name__)


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _issue_token(account: Account) -> str:
    token = secrets.token_urlsafe(32)
    account.token_hash = _hash_token(token)
    return token


def find_by_email(session: Session, email: str) -> Optional[Account]:
    return session.exec(select(Account).where(func.lower(Account.email) == email.strip().lower())).first()


def create_account(session: Session, email: str, password: str) -> Tuple[Account, str]:
    with transaction(session):
        if find_by_email(session, email) is not None:
            raise ConflictError("A user with this email already exists.")
        account = Account(email=email.strip().lower(), password_hash=generate_password_hash(password))
        token = _issue_token(account)
        session.add(account)
    session.refresh(account)
    logger.info("account %s created", account.id)
    return account, token


def authenticate(session: Session, email: str, password: str) -> Tuple[Account, str]:
    with transaction(session):
        account = find_by_email(session, email)
        if account is None or not check_password_hash(account.password_hash, password):
            logger.warning("failed login attempt for %s", email)
            raise UnauthorizedError("Invalid email or password.")
        token = _issue_token(account)
        session.add(account)
    session.refresh(account)
    logger.info("account %s logged in", account.id)
    return account, token


def resolve_token(session: Session, token: Optional[str]) -> Account:
    if not token:
        raise UnauthorizedError()
    account = session.exec(select(Account).where(Account.token_hash == _hash_token(token))).first()
    if account is None:
        raise UnauthorizedError("Invalid or expired token.")
    return account


def delete_account(session: Session, account_id: uuid.UUID) -> None:
    """Remove an account together with every record it owns."""
    with transaction(session, actor_id=account_id):
        session.exec(delete(Task).where(Task.account_id == account_id))
        session.exec(delete(TaskTemplate).where(TaskTemplate.account_id == account_id))
        session.exec(delete(Category).where(Category.account_id == account_id))
        session.exec(delete(Account).where(Account.id == account_id))
    logger.info("account %s deleted", account_id)


def register(
    session: Session,
    email: str,
    password: str,
    bundle: Optional[MigrationBundle] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Tuple[Account, str, Optional[MigrationReport]]:
    """
    Create an account and, if ``bundle`` carries any categories, import it.

    The import runs in its own transaction. If it fails for any reason the
    import is rolled back, the new account is deleted again, and
    :class:`MigrationFailedError` is raised, so registration as a whole
    either fully succeeds or leaves nothing behind.
    """
    account, token = create_account(session, email, password)
    account_id = account.id

    if bundle is None or not bundle.categories:
        return account, token, None

    try:
        with transaction(session, actor_id=account_id, cancel_event=cancel_event):
            report = migrate_account_data(session, account_id, bundle, cancel_event=cancel_event)
    except Exception as exc:
        logger.exception("migration failed for account %s, rolling back registration", account_id)
        delete_account(session, account_id)
        errors = getattr(exc, "errors", None) or []
        raise MigrationFailedError(
            "Importing your local data failed; the account was not created.",
            errors=errors,
        ) from exc

    session.refresh(account)
    return account, token, report
