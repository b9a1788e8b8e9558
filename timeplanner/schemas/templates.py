import uuid

from pydantic import BaseModel, Field


class TemplateIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    duration: float = Field(gt=0, description="hours")
    category_id: uuid.UUID


class TemplateOut(BaseModel):
    id: uuid.UUID
    title: str
    duration: float
    category_id: uuid.UUID
    category_name: str
    category_color: str
