import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...db.models import Account
from ...db.session import get_session
from ...schemas.categories import CategoryIn, CategoryOut
from ...services import categories as svc
from ..deps import current_account

router = APIRouter(prefix="/categories", tags=["categories"])

@router.get("", response_model=List[CategoryOut])
def list_all(account: Account = Depends(current_account), session: Session = Depends(get_session)):
    return svc.list_categories(session, account.id)

@router.post("", response_model=CategoryOut, status_code=201)
def create(body: CategoryIn, account: Account = Depends(current_account), session: Session = Depends(get_session)):
    return svc.create_category(session, account.id, body.name, body.color)

@router.put("/{category_id}", response_model=CategoryOut)
def update(
    category_id: uuid.UUID,
    body: CategoryIn,
    account: Account = Depends(current_account),
    session: Session = Depends(get_session),
):
    return svc.update_category(session, account.id, category_id, body.name, body.color)

@router.delete("/{category_id}", status_code=204)
def delete(category_id: uuid.UUID, account: Account = Depends(current_account), session: Session = Depends(get_session)):
    svc.delete_category(session, account.id, category_id)
