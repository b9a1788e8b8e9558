import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...db.models import Account
from ...db.session import get_session
from ...schemas.templates import TemplateIn, TemplateOut
from ...services import templates as svc
from ..deps import current_account

router = APIRouter(prefix="/task-templates", tags=["task-templates"])

@router.get("", response_model=List[TemplateOut])
def list_all(account: Account = Depends(current_account), session: Session = Depends(get_session)):
    return svc.list_templates(session, account.id)

@router.post("", response_model=TemplateOut, status_code=201)
def create(body: TemplateIn, account: Account = Depends(current_account), session: Session = Depends(get_session)):
    return svc.create_template(session, account.id, body.title, body.duration, body.category_id)

@router.put("/{template_id}", response_model=TemplateOut)
def update(
    template_id: uuid.UUID,
    body: TemplateIn,
    account: Account = Depends(current_account),
    session: Session = Depends(get_session),
):
    return svc.update_template(session, account.id, template_id, body.title, body.duration, body.category_id)

@router.delete("/{template_id}", status_code=204)
def delete(template_id: uuid.UUID, account: Account = Depends(current_account), session: Session = Depends(get_session)):
    svc.delete_template(session, account.id, template_id)
