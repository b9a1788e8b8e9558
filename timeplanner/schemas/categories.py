import uuid

from pydantic import BaseModel, Field

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CategoryIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(pattern=HEX_COLOR)


class CategoryOut(BaseModel):
    id: uuid.UUID
    name: str
    color: str

    class Config:
        from_attributes = True
