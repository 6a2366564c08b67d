"""Note and idea services: list, upsert by id, delete."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from personalsystems.domains.notes.models import Idea, Note
from personalsystems.extensions import db


def list_notes(user_id: int) -> List[Note]:
    return Note.query.filter_by(user_id=user_id).order_by(Note.updated_at.desc()).all()


def upsert_note(
    user_id: int,
    *,
    title: str,
    id: Optional[str] = None,
    content: Optional[str] = None,
    pinned: bool = False,
) -> Tuple[Note, bool]:
    title_norm = (title or "").strip()
    if not title_norm:
        raise ValueError("validation_error")
    note = db.session.get(Note, id) if id else None
    if note is not None and note.user_id != user_id:
        raise ValueError("not_found")
    created = note is None
    if created:
        note = Note(user_id=user_id)
        if id:
            note.id = id
        db.session.add(note)
    note.title = title_norm
    note.content = content
    note.pinned = bool(pinned)
    if not created:
        note.updated_at = datetime.utcnow()
    db.session.commit()
    return note, created


def delete_note(user_id: int, note_id: str) -> bool:
    note = Note.query.filter_by(id=note_id, user_id=user_id).first()
    if not note:
        return False
    db.session.delete(note)
    db.session.commit()
    return True


def list_ideas(user_id: int) -> List[Idea]:
    return Idea.query.filter_by(user_id=user_id).order_by(Idea.updated_at.desc()).all()


def upsert_idea(
    user_id: int,
    *,
    title: str,
    id: Optional[str] = None,
    description: Optional[str] = None,
    category: Optional[str] = None,
    pinned: bool = False,
) -> Tuple[Idea, bool]:
    title_norm = (title or "").strip()
    if not title_norm:
        raise ValueError("validation_error")
    idea = db.session.get(Idea, id) if id else None
    if idea is not None and idea.user_id != user_id:
        raise ValueError("not_found")
    created = idea is None
    if created:
        idea = Idea(user_id=user_id)
        if id:
            idea.id = id
        db.session.add(idea)
    idea.title = title_norm
    idea.description = description
    idea.category = (category or "").strip() or None
    idea.pinned = bool(pinned)
    if not created:
        idea.updated_at = datetime.utcnow()
    db.session.commit()
    return idea, created


def delete_idea(user_id: int, idea_id: str) -> bool:
    idea = Idea.query.filter_by(id=idea_id, user_id=user_id).first()
    if not idea:
        return False
    db.session.delete(idea)
    db.session.commit()
    return True
