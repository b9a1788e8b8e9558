# tests/test_tasks.py

from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlmodel import Session, select

from timeplanner.core.errors import NotFoundError, OperationCancelled, OverlapError, ValidationFailed
from timeplanner.db.models import Task, TaskTemplate
from timeplanner.services.accounts import create_account
from timeplanner.services.categories import create_category
from timeplanner.services.tasks import (
    create_task,
    create_task_from_template,
    delete_task,
    list_tasks,
    update_task,
)
from timeplanner.services.templates import (
    create_template,
    delete_template,
    list_templates,
    update_template,
)

from .helpers import PASSWORD, at


def test_create_task_in_foreign_category_not_found(session, account, work) -> None:
    other, _ = create_account(session, "bob@example.com", PASSWORD)
    with pytest.raises(NotFoundError):
        create_task(session, other.id, "Sneaky", at(9), 1.0, work.id)


def test_create_task_with_foreign_template_not_found(session, account, work) -> None:
    template = create_template(session, account.id, "Focus", 1.0, work.id)
    other, _ = create_account(session, "bob@example.com", PASSWORD)
    mine = create_category(session, other.id, "Mine", "#000000")
    with pytest.raises(NotFoundError):
        create_task(session, other.id, "Sneaky", at(9), 1.0, mine.id, template_id=template.id)


def test_create_from_template_copies_template(session, account, work) -> None:
    template = create_template(session, account.id, "Gym", 1.5, work.id)
    task = create_task_from_template(session, account.id, template.id, at(7))

    assert (task.title, task.duration, task.category_id, task.template_id) == (
        "Gym", 1.5, work.id, template.id,
    )
    assert task.category_name == "Work"

    with pytest.raises(OverlapError):
        create_task_from_template(session, account.id, template.id, at(8))
    assert create_task_from_template(session, account.id, template.id, at(8, 30)).start == at(8, 30)


def test_list_tasks_by_inclusive_day_range(session, account, work) -> None:
    create_task(session, account.id, "Mon", at(9, day=7), 1.0, work.id)
    create_task(session, account.id, "Tue late", at(23, day=8), 0.5, work.id)
    create_task(session, account.id, "Wed", at(9, day=9), 1.0, work.id)

    titles = [t.title for t in list_tasks(session, account.id, date(2030, 1, 7), date(2030, 1, 8))]
    assert titles == ["Mon", "Tue late"]

    with pytest.raises(ValidationFailed):
        list_tasks(session, account.id, date(2030, 1, 8), date(2030, 1, 7))


def test_update_missing_task_not_found(session, account, work) -> None:
    task = create_task(session, account.id, "Focus", at(9), 1.0, work.id)
    other, _ = create_account(session, "bob@example.com", PASSWORD)
    other_cat = create_category(session, other.id, "Work", "#000000")
    with pytest.raises(NotFoundError):
        update_task(session, other.id, task.id, "Stolen", at(9), 1.0, other_cat.id)


def test_delete_task(session, account, work) -> None:
    task = create_task(session, account.id, "Focus", at(9), 1.0, work.id)
    delete_task(session, account.id, task.id)
    assert session.get(Task, task.id) is None
    with pytest.raises(NotFoundError):
        delete_task(session, account.id, task.id)
    # slot is free again
    assert create_task(session, account.id, "Again", at(9), 1.0, work.id).title == "Again"


def test_template_crud(session, account, work) -> None:
    home = create_category(session, account.id, "Home", "#111111")
    b = create_template(session, account.id, "B", 1.0, work.id)
    create_template(session, account.id, "A", 2.0, home.id)

    listed = list_templates(session, account.id)
    assert [t.title for t in listed] == ["A", "B"]
    assert listed[0].category_name == "Home"

    updated = update_template(session, account.id, b.id, "B2", 0.5, home.id)
    assert (updated.title, updated.duration, updated.category_color) == ("B2", 0.5, "#111111")


def test_delete_template_unlinks_tasks(session, account, work) -> None:
    template = create_template(session, account.id, "Gym", 1.0, work.id)
    task = create_task_from_template(session, account.id, template.id, at(7))

    delete_template(session, account.id, template.id)

    assert session.get(TaskTemplate, template.id) is None
    kept = session.exec(select(Task).where(Task.id == task.id)).one()
    assert kept.template_id is None
    assert kept.title == "Gym"
    with pytest.raises(NotFoundError):
        delete_template(session, account.id, template.id)


def test_task_audit_stamps(session, account, work) -> None:
    task = create_task(session, account.id, "Focus", at(9), 1.0, work.id)
    row = session.get(Task, task.id)
    assert row.created_by == account.id
    assert row.updated_at is None

    update_task(session, account.id, task.id, "Focus", at(10), 1.0, work.id)
    row = session.get(Task, task.id)
    assert row.updated_by == account.id


def test_stored_start_reads_back_as_the_same_utc_instant(session, engine, account, work) -> None:
    local = datetime(2030, 1, 7, 11, 0, tzinfo=timezone(timedelta(hours=2)))
    task_id = create_task(session, account.id, "Focus", local, 1.0, work.id).id
    session.close()

    with Session(engine) as fresh:
        stored = fresh.get(Task, task_id).start
    assert stored == at(9)
    assert stored.utcoffset() == timedelta(0)


def test_cancelled_create_leaves_no_task(session, account, work) -> None:
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(OperationCancelled):
        create_task(session, account.id, "Focus", at(9), 1.0, work.id, cancel_event=cancel)

    assert list(session.exec(select(Task).where(Task.account_id == account.id))) == []
    # nothing was held back from the slot either
    assert create_task(session, account.id, "Focus", at(9), 1.0, work.id).title == "Focus"
