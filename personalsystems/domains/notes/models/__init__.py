"""Notes domain models."""

from personalsystems.domains.notes.models.notes_models import Idea, Note

__all__ = ["Note", "Idea"]
