import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from .audit import auditable, utcnow


class Account(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(max_length=254, unique=True, index=True)
    password_hash: str
    token_hash: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)


@auditable
class Category(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    account_id: uuid.UUID = Field(foreign_key="account.id", index=True)
    name: str = Field(max_length=100)
    color: str = Field(max_length=7)

    created_at: Optional[datetime] = None
    created_by: Optional[uuid.UUID] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[uuid.UUID] = None

    # soft delete
    is_deleted: bool = Field(default=False, index=True)
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[uuid.UUID] = None


@auditable
class TaskTemplate(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    account_id: uuid.UUID = Field(foreign_key="account.id", index=True)
    title: str = Field(max_length=200)
    duration: float  # hours
    category_id: uuid.UUID = Field(foreign_key="category.id", index=True)

    created_at: Optional[datetime] = None
    created_by: Optional[uuid.UUID] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[uuid.UUID] = None


@auditable
class Task(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    account_id: uuid.UUID = Field(foreign_key="account.id", index=True)
    title: str = Field(max_length=200)
    start: datetime = Field(index=True)  # UTC
    duration: float  # hours
    category_id: uuid.UUID = Field(foreign_key="category.id", index=True)
    template_id: Optional[uuid.UUID] = Field(default=None, foreign_key="tasktemplate.id")

    created_at: Optional[datetime] = None
    created_by: Optional[uuid.UUID] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[uuid.UUID] = None
