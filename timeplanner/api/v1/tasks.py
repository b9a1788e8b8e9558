import uuid
from datetime import date
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...db.models import Account
from ...db.session import get_session
from ...schemas.tasks import TaskFromTemplateIn, TaskIn, TaskOut
from ...services import tasks as svc
from ..deps import current_account

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.get("", response_model=List[TaskOut])
def list_range(
    start_date: date,
    end_date: date,
    account: Account = Depends(current_account),
    session: Session = Depends(get_session),
):
    return svc.list_tasks(session, account.id, start_date, end_date)

@router.post("", response_model=TaskOut, status_code=201)
def create(body: TaskIn, account: Account = Depends(current_account), session: Session = Depends(get_session)):
    return svc.create_task(
        session, account.id, body.title, body.start, body.duration, body.category_id, body.template_id
    )

@router.post("/from-template", response_model=TaskOut, status_code=201)
def create_from_template(
    body: TaskFromTemplateIn,
    account: Account = Depends(current_account),
    session: Session = Depends(get_session),
):
    return svc.create_task_from_template(session, account.id, body.template_id, body.start)

@router.put("/{task_id}", response_model=TaskOut)
def update(
    task_id: uuid.UUID,
    body: TaskIn,
    account: Account = Depends(current_account),
    session: Session = Depends(get_session),
):
    return svc.update_task(
        session, account.id, task_id, body.title, body.start, body.duration, body.category_id, body.template_id
    )

@router.delete("/{task_id}", status_code=204)
def delete(task_id: uuid.UUID, account: Account = Depends(current_account), session: Session = Depends(get_session)):
    svc.delete_task(session, account.id, task_id)
