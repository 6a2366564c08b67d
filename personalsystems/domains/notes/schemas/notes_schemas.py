"""Note and idea request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NoteUpsert(BaseModel):
    id: Optional[str] = Field(default=None, min_length=1, max_length=255)
    title: str = Field(min_length=1, max_length=255)
    content: Optional[str] = None
    pinned: bool = False


class IdeaUpsert(BaseModel):
    id: Optional[str] = Field(default=None, min_length=1, max_length=255)
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    pinned: bool = False


class NoteResponse(BaseModel):
    id: str
    title: str
    content: Optional[str]
    pinned: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class IdeaResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    category: Optional[str]
    pinned: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
