from typing import Optional

from fastapi import Depends, Header
from sqlmodel import Session

from ..db.models import Account
from ..db.session import get_session
from ..services.accounts import resolve_token


def bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def current_account(
    token: Optional[str] = Depends(bearer_token),
    session: Session = Depends(get_session),
) -> Account:
    return resolve_token(session, token)
