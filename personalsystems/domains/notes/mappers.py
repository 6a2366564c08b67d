"""Note and idea mappers for DTO responses."""

from __future__ import annotations

from personalsystems.domains.notes.models import Idea, Note
from personalsystems.domains.notes.schemas.notes_schemas import IdeaResponse, NoteResponse


def map_note(note: Note) -> dict:
    return NoteResponse(
        id=note.id,
        title=note.title,
        content=note.content,
        pinned=bool(note.pinned),
        created_at=note.created_at,
        updated_at=note.updated_at,
    ).model_dump(mode="json")


def map_idea(idea: Idea) -> dict:
    return IdeaResponse(
        id=idea.id,
        title=idea.title,
        description=idea.description,
        category=idea.category,
        pinned=bool(idea.pinned),
        created_at=idea.created_at,
        updated_at=idea.updated_at,
    ).model_dump(mode="json")
