"""Third-party identity verification (Google ID tokens, Facebook access tokens)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests
from flask import current_app

logger = logging.getLogger(__name__)

GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
FACEBOOK_ME_URL = "https://graph.facebook.com/me"


class OAuthVerificationError(Exception):
    """Raised when a provider token cannot be verified."""

    pass


class OAuthConfigurationError(OAuthVerificationError):
    """Raised when the provider is not configured."""

    pass


@dataclass
class SocialIdentity:
    provider: str
    provider_user_id: str
    email: str
    name: Optional[str] = None


def _timeout() -> float:
    return float(current_app.config.get("OAUTH_TIMEOUT_SECONDS", 10))


def verify_google_credential(credential: str) -> SocialIdentity:
    """
    Verify a Google ID token via the tokeninfo endpoint.

    Raises:
        OAuthConfigurationError: If GOOGLE_CLIENT_ID is not set
        OAuthVerificationError: If the token is rejected or belongs to another client
    """
    client_id = current_app.config.get("GOOGLE_CLIENT_ID")
    if not client_id:
        raise OAuthConfigurationError("GOOGLE_CLIENT_ID is not configured")
    try:
        resp = requests.get(GOOGLE_TOKENINFO_URL, params={"id_token": credential}, timeout=_timeout())
    except requests.RequestException as e:
        logger.error(f"Google token verification failed: {e}")
        raise OAuthVerificationError("Google verification request failed") from e

    if resp.status_code != 200:
        logger.warning(f"Google rejected ID token: {resp.status_code}")
        raise OAuthVerificationError("Invalid Google credential")

    info = resp.json()
    if info.get("aud") != client_id:
        logger.warning("Google ID token audience mismatch")
        raise OAuthVerificationError("Invalid Google credential")
    if not info.get("email") or not info.get("sub"):
        raise OAuthVerificationError("Google credential has no email")
    return SocialIdentity(
        provider="google",
        provider_user_id=str(info["sub"]),
        email=info["email"].strip().lower(),
        name=info.get("name"),
    )


def verify_facebook_token(access_token: str) -> SocialIdentity:
    """
    Resolve a Facebook user access token through the Graph API.

    Raises:
        OAuthConfigurationError: If FACEBOOK_APP_ID is not set
        OAuthVerificationError: If the token is rejected or carries no email
    """
    if not current_app.config.get("FACEBOOK_APP_ID"):
        raise OAuthConfigurationError("FACEBOOK_APP_ID is not configured")
    try:
        resp = requests.get(
            FACEBOOK_ME_URL,
            params={"fields": "id,name,email", "access_token": access_token},
            timeout=_timeout(),
        )
    except requests.RequestException as e:
        logger.error(f"Facebook token verification failed: {e}")
        raise OAuthVerificationError("Facebook verification request failed") from e

    if resp.status_code != 200:
        logger.warning(f"Facebook rejected access token: {resp.status_code}")
        raise OAuthVerificationError("Invalid Facebook token")

    info = resp.json()
    if not info.get("email") or not info.get("id"):
        raise OAuthVerificationError("Facebook account has no email")
    return SocialIdentity(
        provider="facebook",
        provider_user_id=str(info["id"]),
        email=info["email"].strip().lower(),
        name=info.get("name"),
    )
