import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TaskIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    start: datetime
    duration: float = Field(gt=0, description="hours")
    category_id: uuid.UUID
    template_id: Optional[uuid.UUID] = None


class TaskFromTemplateIn(BaseModel):
    template_id: uuid.UUID
    start: datetime


class TaskOut(BaseModel):
    id: uuid.UUID
    title: str
    start: datetime
    duration: float
    category_id: uuid.UUID
    category_name: str
    category_color: str
    template_id: Optional[uuid.UUID] = None
