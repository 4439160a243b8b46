"""Data models for the BINAH topic API.

This module defines Pydantic models for the topics table:
- Topic: A knowledge-base entry as returned by the API
- TopicWrite: Request body for creating or updating a topic
- CategoryCount: Number of topics stored under one category
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from common.utils import split_keywords, to_date_string, to_utc_iso


class Topic(BaseModel):
    id: int = Field(..., description="Primary key (auto-generated)")
    title: str = Field(..., description="Topic title")
    category: Optional[str] = Field(None, description="Classification label")
    keywords: List[str] = Field(default_factory=list, description="Search keywords")
    preview: Optional[str] = Field(
        None, description="Markup-free excerpt derived from content"
    )
    content: Optional[str] = Field(None, description="Body text, may contain markup")
    author: Optional[str] = Field(None, description="Author display name")
    created_date: Optional[datetime] = Field(
        None, description="Timestamp when topic was created"
    )
    date: str = Field(..., description="Creation date as YYYY-MM-DD")
    views: int = Field(0, description="Number of recorded views")
    helpful: int = Field(0, description="Number of 'helpful' votes")

    @classmethod
    def from_db_row(cls, row: dict) -> "Topic":
        row = dict(row)
        row["keywords"] = split_keywords(row.get("keywords"))
        row["date"] = to_date_string(row.get("created_date"))
        return cls(**row)

    @field_serializer("created_date")
    def _serialize_created_date(self, value: Optional[datetime]) -> Optional[str]:
        return to_utc_iso(value) if value is not None else None


class TopicWrite(BaseModel):
    """Body of POST /api/topics and PUT /api/topics/{id}.

    Keywords may be sent as a list or as an already comma-joined string.
    The two increment flags only matter on update, where they switch the
    request from a full rewrite to a counter bump.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    category: Optional[str] = None
    keywords: Union[List[str], str, None] = None
    content: Optional[str] = None
    author: Optional[str] = None
    increment_view: bool = Field(False, alias="incrementView")
    increment_helpful: bool = Field(False, alias="incrementHelpful")

    @field_validator("title", "category", "content", "author", mode="before")
    @classmethod
    def _numbers_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("increment_view", "increment_helpful", mode="before")
    @classmethod
    def _truthy_flag(cls, value) -> bool:
        return bool(value)


class CategoryCount(BaseModel):
    category: Optional[str] = Field(None, description="Category label")
    count: int = Field(..., description="Number of topics in the category")

    @classmethod
    def from_db_row(cls, row: dict) -> "CategoryCount":
        return cls(**row)
