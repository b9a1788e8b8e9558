import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from sqlmodel import Session, select

from ..core.errors import NotFoundError, ValidationFailed
from ..db.models import Category, Task
from ..db.session import transaction
from ..schemas.tasks import TaskOut
from .categories import get_category
from .scheduling import ensure_no_overlap, normalize_instant
from .templates import get_template

logger = logging.getLogger(__name__)


def to_out(task: Task, category: Category) -> TaskOut:
    return TaskOut(
        id=task.id,
        title=task.title,
        start=task.start,
        duration=task.duration,
        category_id=task.category_id,
        category_name=category.name,
        category_color=category.color,
        template_id=task.template_id,
    )


def get_task(session: Session, account_id: uuid.UUID, task_id: uuid.UUID) -> Task:
    task = session.exec(
        select(Task).where(Task.id == task_id).where(Task.account_id == account_id)
    ).first()
    if task is None:
        raise NotFoundError(f"Task with ID {task_id} not found.")
    return task


def list_tasks(session: Session, account_id: uuid.UUID, start_date: date, end_date: date) -> List[TaskOut]:
    """Tasks starting on any day from ``start_date`` through ``end_date`` inclusive."""
    if end_date < start_date:
        raise ValidationFailed.for_field("end_date", "end_date must not be before start_date.")
    lower = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    upper = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
    rows = session.exec(
        select(Task, Category)
        .join(Category, Category.id == Task.category_id)
        .where(Task.account_id == account_id)
        .where(Task.start >= lower)
        .where(Task.start < upper)
        .order_by(Task.start)
    ).all()
    return [to_out(t, c) for t, c in rows]


def create_task(
    session: Session,
    account_id: uuid.UUID,
    title: str,
    start: datetime,
    duration: float,
    category_id: uuid.UUID,
    template_id: Optional[uuid.UUID] = None,
    cancel_event=None,
) -> TaskOut:
    start = normalize_instant(start)
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        category = get_category(session, account_id, category_id)
        if template_id is not None:
            get_template(session, account_id, template_id)
        ensure_no_overlap(session, account_id, start, duration)
        task = Task(
            account_id=account_id,
            title=title,
            start=start,
            duration=duration,
            category_id=category.id,
            template_id=template_id,
        )
        session.add(task)
    logger.info("task %s created for account %s at %s", task.id, account_id, start)
    return to_out(task, category)


def create_task_from_template(
    session: Session,
    account_id: uuid.UUID,
    template_id: uuid.UUID,
    start: datetime,
    cancel_event=None,
) -> TaskOut:
    start = normalize_instant(start)
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        template = get_template(session, account_id, template_id)
        category = get_category(session, account_id, template.category_id)
        ensure_no_overlap(session, account_id, start, template.duration)
        task = Task(
            account_id=account_id,
            title=template.title,
            start=start,
            duration=template.duration,
            category_id=category.id,
            template_id=template.id,
        )
        session.add(task)
    logger.info("task %s created from template %s for account %s", task.id, template_id, account_id)
    return to_out(task, category)


def update_task(
    session: Session,
    account_id: uuid.UUID,
    task_id: uuid.UUID,
    title: str,
    start: datetime,
    duration: float,
    category_id: uuid.UUID,
    template_id: Optional[uuid.UUID] = None,
    cancel_event=None,
) -> TaskOut:
    start = normalize_instant(start)
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        task = get_task(session, account_id, task_id)
        category = get_category(session, account_id, category_id)
        if template_id is not None:
            get_template(session, account_id, template_id)
        ensure_no_overlap(session, account_id, start, duration, exclude_task_id=task.id)
        task.title = title
        task.start = start
        task.duration = duration
        task.category_id = category.id
        task.template_id = template_id
        session.add(task)
    return to_out(task, category)


def delete_task(session: Session, account_id: uuid.UUID, task_id: uuid.UUID, cancel_event=None) -> None:
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        session.delete(get_task(session, account_id, task_id))
