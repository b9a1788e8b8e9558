import logging
import uuid
from typing import List

from sqlalchemy import update
from sqlmodel import Session, select

from ..core.errors import NotFoundError
from ..db.models import Category, Task, TaskTemplate
from ..db.session import transaction
from ..schemas.templates import TemplateOut
from .categories import get_category

logger = logging.getLogger(__name__)


def to_out(template: TaskTemplate, category: Category) -> TemplateOut:
    return TemplateOut(
        id=template.id,
        title=template.title,
        duration=template.duration,
        category_id=template.category_id,
        category_name=category.name,
        category_color=category.color,
    )


def get_template(session: Session, account_id: uuid.UUID, template_id: uuid.UUID) -> TaskTemplate:
    template = session.exec(
        select(TaskTemplate)
        .where(TaskTemplate.id == template_id)
        .where(TaskTemplate.account_id == account_id)
    ).first()
    if template is None:
        raise NotFoundError(f"Task template with ID {template_id} not found.")
    return template


def list_templates(session: Session, account_id: uuid.UUID) -> List[TemplateOut]:
    rows = session.exec(
        select(TaskTemplate, Category)
        .join(Category, Category.id == TaskTemplate.category_id)
        .where(TaskTemplate.account_id == account_id)
        .order_by(TaskTemplate.title)
    ).all()
    return [to_out(t, c) for t, c in rows]


def create_template(
    session: Session,
    account_id: uuid.UUID,
    title: str,
    duration: float,
    category_id: uuid.UUID,
    cancel_event=None,
) -> TemplateOut:
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        category = get_category(session, account_id, category_id)
        template = TaskTemplate(
            account_id=account_id,
            title=title,
            duration=duration,
            category_id=category.id,
        )
        session.add(template)
    return to_out(template, category)


def update_template(
    session: Session,
    account_id: uuid.UUID,
    template_id: uuid.UUID,
    title: str,
    duration: float,
    category_id: uuid.UUID,
    cancel_event=None,
) -> TemplateOut:
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        template = get_template(session, account_id, template_id)
        category = get_category(session, account_id, category_id)
        template.title = title
        template.duration = duration
        template.category_id = category.id
        session.add(template)
    return to_out(template, category)


def delete_template(session: Session, account_id: uuid.UUID, template_id: uuid.UUID, cancel_event=None) -> None:
    with transaction(session, actor_id=account_id, cancel_event=cancel_event):
        template = get_template(session, account_id, template_id)
        # tasks keep their own copy of the data; only the link goes away
        session.exec(
            update(Task)
            .where(Task.account_id == account_id)
            .where(Task.template_id == template.id)
            .values(template_id=None)
        )
        session.delete(template)
    logger.info("template %s deleted for account %s", template_id, account_id)
