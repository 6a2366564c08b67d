"""Authentication service layer."""

from __future__ import annotations

import logging
from typing import Optional

from flask_jwt_extended import create_access_token
from sqlalchemy import func

from personalsystems.core.auth.oauth import SocialIdentity
from personalsystems.core.auth.password import hash_password, verify_password
from personalsystems.core.auth.schemas import SignupRequest
from personalsystems.core.users.models import AUTH_PROVIDER_EMAIL, User
from personalsystems.domains.habits.models import Entry, Habit
from personalsystems.domains.notes.models import Idea, Note
from personalsystems.extensions import db

logger = logging.getLogger(__name__)

OWNED_MODELS = (Habit, Entry, Note, Idea)


def _find_by_email(email: str) -> Optional[User]:
    return User.query.filter(func.lower(User.email) == email.strip().lower()).first()


def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user if credentials are valid."""
    user = _find_by_email(email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_token(user: User) -> str:
    return create_access_token(identity=str(user.id))


def register_user(payload: SignupRequest) -> User:
    """Create an email/password account."""
    if _find_by_email(payload.email):
        raise ValueError("email_already_exists")

    user = User(
        email=payload.email,
        name=(payload.name or "").strip() or None,
        password_hash=hash_password(payload.password),
        auth_provider=AUTH_PROVIDER_EMAIL,
        marketing_consent=payload.marketing_consent,
    )
    _add_user(user)
    logger.info("Registered user %s", user.id)
    return user


def find_or_create_social_user(identity: SocialIdentity) -> User:
    """Match by provider id, then by email (linking the provider), else create."""
    user = User.query.filter_by(
        auth_provider=identity.provider, provider_user_id=identity.provider_user_id
    ).first()
    if user is None:
        user = _find_by_email(identity.email)
        if user is not None and not user.provider_user_id:
            user.provider_user_id = identity.provider_user_id
            if not user.name and identity.name:
                user.name = identity.name
            db.session.commit()
    if user is not None:
        if not user.is_active:
            raise ValueError("account_disabled")
        return user

    user = User(
        email=identity.email,
        name=identity.name,
        auth_provider=identity.provider,
        provider_user_id=identity.provider_user_id,
    )
    _add_user(user)
    logger.info("Registered %s user %s", identity.provider, user.id)
    return user


def claim_unowned_rows(user: User) -> int:
    """Attach rows written before accounts existed to ``user``."""
    claimed = 0
    for model in OWNED_MODELS:
        claimed += (
            db.session.query(model)
            .filter(model.user_id.is_(None))
            .update({model.user_id: user.id}, synchronize_session=False)
        )
    return claimed


def _add_user(user: User) -> None:
    is_first = db.session.query(User.id).first() is None
    db.session.add(user)
    db.session.flush()
    if is_first:
        claimed = claim_unowned_rows(user)
        if claimed:
            logger.info("User %s claimed %d unowned rows", user.id, claimed)
    db.session.commit()
