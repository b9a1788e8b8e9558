import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, update
from sqlmodel import Session, select

from ..core.config import settings
from ..core.errors import ConflictError, NotFoundError
from ..db.audit import utcnow
from ..db.models import Category, Task, TaskTemplate
from ..db.session import transaction

logger = logging.getLogger(__name__)


def active_categories(account_id: uuid.UUID):
    return (
        select(Category)
        .where(Category.account_id == account_id)
        .where(Category.is_deleted == False)  # noqa: E712
    )


def get_category(session: Session, account_id: uuid.UUID, category_id: uuid.UUID) -> Category:
    """Resolve a live category owned by the account, or raise NotFoundError."""
    category = session.exec(active_categories(account_id).where(Category.id == category_id)).first()
    if category is None:
        raise NotFoundError(f"Category with ID {category_id} not found.")
    return category


def find_by_name(session: Session, account_id: uuid.UUID, name: str) -> Optional[Category]:
    stmt = active_categories(account_id).where(func.lower(Category.name) == name.strip().lower())
    return session.exec(stmt).first()


def _ensure_name_free(session: Session, account_id: uuid.UUID, name: str, exclude_id: Optional[uuid.UUID] = None) -> None:
    existing = find_by_name(session, account_id, name)
    if existing is not None and existing.id != exclude_id:
        raise ConflictError(f"A category named '{name}' already exists.")


def list_categories(session: Session, account_id: uuid.UUID) -> List[Category]:
    return list(session.exec(active_categories(account_id).order_by(Category.name)))


def create_category(session: Session, account_id: uuid.UUID, name: str, color: str, cancel_event=None) -> Category:
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        _ensure_name_free(session, account_id, name)
        category = Category(account_id=account_id, name=name.strip(), color=color)
        session.add(category)
    session.refresh(category)
    logger.info("category %s created for account %s", category.id, account_id)
    return category


def update_category(
    session: Session,
    account_id: uuid.UUID,
    category_id: uuid.UUID,
    name: str,
    color: str,
    cancel_event=None,
) -> Category:
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        category = get_category(session, account_id, category_id)
        _ensure_name_free(session, account_id, name, exclude_id=category.id)
        if _is_fallback(session, account_id, category) and name.strip().lower() != category.name.lower():
            raise ConflictError(f"The default '{category.name}' category cannot be renamed.")
        category.name = name.strip()
        category.color = color
        session.add(category)
    session.refresh(category)
    return category


def _is_fallback(session: Session, account_id: uuid.UUID, category: Category) -> bool:
    fallback = find_by_name(session, account_id, settings.FALLBACK_CATEGORY_NAME)
    return fallback is not None and fallback.id == category.id


def get_or_create_fallback(session: Session, account_id: uuid.UUID) -> Category:
    """The account's "Other" category, created on first use. Caller owns the transaction."""
    fallback = find_by_name(session, account_id, settings.FALLBACK_CATEGORY_NAME)
    if fallback is None:
        fallback = Category(
            account_id=account_id,
            name=settings.FALLBACK_CATEGORY_NAME,
            color=settings.FALLBACK_CATEGORY_COLOR,
        )
        session.add(fallback)
        session.flush()
        logger.info("created fallback category %s for account %s", fallback.id, account_id)
    return fallback


def delete_category(session: Session, account_id: uuid.UUID, category_id: uuid.UUID, cancel_event=None) -> Category:
    """
    Soft-delete a category after moving its tasks and templates to the
    fallback category. The fallback category itself cannot be deleted.
    """
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        category = get_category(session, account_id, category_id)
        fallback = get_or_create_fallback(session, account_id)
        if category.id == fallback.id:
            raise ConflictError(f"The default '{fallback.name}' category cannot be deleted.")

        now = utcnow()
        moved_tasks = session.exec(
            update(Task)
            .where(Task.account_id == account_id)
            .where(Task.category_id == category.id)
            .values(category_id=fallback.id, updated_at=now, updated_by=account_id)
        ).rowcount
        moved_templates = session.exec(
            update(TaskTemplate)
            .where(TaskTemplate.account_id == account_id)
            .where(TaskTemplate.category_id == category.id)
            .values(category_id=fallback.id, updated_at=now, updated_by=account_id)
        ).rowcount

        category.is_deleted = True
        session.add(category)

    logger.info(
        "category %s deleted for account %s; moved %d task(s), %d template(s) to %s",
        category_id, account_id, moved_tasks, moved_templates, fallback.id,
    )
    return category
