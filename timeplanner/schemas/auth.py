import re
import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..core.config import settings
from .migration import MigrationBundle, MigrationReportOut


class RegisterIn(BaseModel):
    email: EmailStr
    password: str
    migration_data: Optional[MigrationBundle] = Field(default=None, alias="migrationData")

    class Config:
        populate_by_name = True

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        problems = []
        if len(v) < settings.PASSWORD_MIN_LENGTH:
            problems.append(f"at least {settings.PASSWORD_MIN_LENGTH} characters")
        if not re.search(r"[A-Z]", v):
            problems.append("an uppercase letter")
        if not re.search(r"[a-z]", v):
            problems.append("a lowercase letter")
        if not re.search(r"[0-9]", v):
            problems.append("a number")
        if not re.search(r"[^a-zA-Z0-9]", v):
            problems.append("a non-alphanumeric character")
        if problems:
            raise ValueError("Password must contain " + ", ".join(problems) + ".")
        return v


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class AuthOut(BaseModel):
    account_id: uuid.UUID
    access_token: str
    token_type: str = "bearer"
    migration: Optional[MigrationReportOut] = None
