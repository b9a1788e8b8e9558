"""
Import of locally held planning data into a freshly created account.

The bundle references its own records through client-minted identifiers.
Records are created stage by stage (categories, templates, tasks), each
stage flushed so that its durable identifiers exist before the next stage
resolves references against them.

References that cannot be resolved are skipped, not fatal: a template whose
category is missing from the bundle is dropped, and so is a task whose
category cannot be resolved either directly or through its template. The
skips are counted in the returned :class:`MigrationReport`.

A malformed ``start`` on any task aborts the whole import. Imported tasks
are not checked for overlaps.

This function does not commit. The caller wraps it in a single
:func:`~timeplanner.db.session.transaction` so that any failure discards
all three stages together.
"""

import logging
import threading
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Dict, Optional

from sqlmodel import Session

from ..core.errors import ValidationFailed
from ..db.models import Category, Task, TaskTemplate
from ..db.session import check_cancelled
from ..schemas.migration import MigrationBundle
from .scheduling import normalize_instant

logger = logging.getLogger(__name__)


@dataclass
class MigrationReport:
    categories_created: int = 0
    templates_created: int = 0
    templates_skipped: int = 0
    tasks_created: int = 0
    tasks_skipped: int = 0

    @property
    def skipped(self) -> int:
        return self.templates_skipped + self.tasks_skipped

    def as_dict(self) -> dict:
        return asdict(self)


def parse_instant(value: str, index: int) -> datetime:
    """Parse an ISO-8601 timestamp as written by ``Date.toISOString()`` and friends."""
    raw = (value or "").strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        return normalize_instant(datetime.fromisoformat(raw))
    except ValueError:
        raise ValidationFailed.for_field(
            f"tasks[{index}].start", f"'{value}' is not a valid ISO-8601 timestamp."
        ) from None


def migrate_account_data(
    session: Session,
    account_id: uuid.UUID,
    bundle: MigrationBundle,
    cancel_event: Optional[threading.Event] = None,
) -> MigrationReport:
    report = MigrationReport()

    # 1. categories
    category_ids: Dict[str, uuid.UUID] = {}
    categories: Dict[uuid.UUID, Category] = {}
    for item in bundle.categories:
        category = Category(account_id=account_id, name=item.name, color=item.color)
        session.add(category)
        category_ids[item.client_id] = category.id
        categories[category.id] = category
        report.categories_created += 1
    session.flush()
    check_cancelled(cancel_event)

    # 2. templates
    template_ids: Dict[str, uuid.UUID] = {}
    templates: Dict[uuid.UUID, TaskTemplate] = {}
    for item in bundle.templates:
        category_id = category_ids.get(item.category_client_id)
        if category_id is None:
            logger.debug("migration: template '%s' skipped, unknown category %r", item.title, item.category_client_id)
            report.templates_skipped += 1
            continue
        template = TaskTemplate(
            account_id=account_id,
            title=item.title,
            duration=item.duration,
            category_id=category_id,
        )
        session.add(template)
        templates[template.id] = template
        if item.client_id:
            template_ids[item.client_id] = template.id
        report.templates_created += 1
    session.flush()
    check_cancelled(cancel_event)

    # 3. tasks
    for index, item in enumerate(bundle.tasks):
        template_id = template_ids.get(item.template_client_id) if item.template_client_id else None
        if template_id is not None:
            template = templates[template_id]
            title, duration = template.title, template.duration
            category_id = template.category_id if template.category_id in categories else None
        else:
            title, duration = item.title, item.duration
            category_id = category_ids.get(item.category_client_id)

        if category_id is None:
            logger.debug("migration: task '%s' skipped, unresolved category", item.title)
            report.tasks_skipped += 1
            continue

        session.add(Task(
            account_id=account_id,
            title=title,
            start=parse_instant(item.start, index),
            duration=duration,
            category_id=category_id,
            template_id=template_id,
        ))
        report.tasks_created += 1

    # 4. task batch
    session.flush()
    check_cancelled(cancel_event)

    if report.skipped:
        logger.warning(
            "migration for account %s skipped %d template(s) and %d task(s) with unresolved references",
            account_id, report.templates_skipped, report.tasks_skipped,
        )
    logger.info("migration for account %s: %s", account_id, report.as_dict())
    return report
