"""Typed schemas for user IO."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from personalsystems.core.users.models import User


class UserResponse(BaseModel):
    # Response should not re-validate persisted emails.
    id: int
    email: str
    name: Optional[str] = None
    plan: str
    auth_provider: str
    marketing_consent: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


def serialize_user(user: "User") -> dict:
    """Build the JSON-ready user payload."""
    return UserResponse.model_validate(user).model_dump(mode="json")
