from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...db.session import get_session
from ...schemas.auth import AuthOut, LoginIn, RegisterIn
from ...schemas.migration import MigrationReportOut
from ...services.accounts import authenticate, register

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=AuthOut, status_code=201)
def register_account(body: RegisterIn, session: Session = Depends(get_session)):
    account, token, report = register(session, body.email, body.password, body.migration_data)
    return AuthOut(
        account_id=account.id,
        access_token=token,
        migration=MigrationReportOut(**report.as_dict()) if report else None,
    )

@router.post("/login", response_model=AuthOut)
def login(body: LoginIn, session: Session = Depends(get_session)):
    account, token = authenticate(session, body.email, body.password)
    return AuthOut(account_id=account.id, access_token=token)
