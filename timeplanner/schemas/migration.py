"""
Bundle of locally held planning data imported at registration.

Identifiers inside the bundle are the ones the local store minted
(``id``, ``categoryId``, ``templateId``); they only cross-reference records
within the same bundle.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class _BundleItem(BaseModel):
    class Config:
        populate_by_name = True
        extra = "ignore"


class CategoryMigrationItem(_BundleItem):
    client_id: str = Field(alias="id")
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(max_length=7)


class TemplateMigrationItem(_BundleItem):
    client_id: Optional[str] = Field(default=None, alias="id")
    title: str = Field(min_length=1, max_length=200)
    duration: float = Field(gt=0)
    category_client_id: str = Field(alias="categoryId")


class TaskMigrationItem(_BundleItem):
    title: str = Field(min_length=1, max_length=200)
    start: str
    duration: float = Field(gt=0)
    category_client_id: str = Field(default="", alias="categoryId")
    template_client_id: Optional[str] = Field(default=None, alias="templateId")


class MigrationBundle(_BundleItem):
    categories: List[CategoryMigrationItem] = Field(default_factory=list)
    templates: List[TemplateMigrationItem] = Field(default_factory=list)
    tasks: List[TaskMigrationItem] = Field(default_factory=list)


class MigrationReportOut(BaseModel):
    categories_created: int
    templates_created: int
    templates_skipped: int
    tasks_created: int
    tasks_skipped: int
