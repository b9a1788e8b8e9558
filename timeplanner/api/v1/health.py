from fastapi import APIRouter, Depends
from sqlmodel import Session, text

from ...db.session import get_session

router = APIRouter()

@router.get("/health")
def health(session: Session = Depends(get_session)):
    session.exec(text("SELECT 1"))
    return {"status": "ok"}
