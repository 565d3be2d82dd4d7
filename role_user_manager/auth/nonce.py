"""
Action-scoped security tokens.

A token is a short-lived HS256 JWT bound to one action scope and one user, so a token
issued for the dashboard cannot be replayed against the role manager, nor by another user.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings

from role_user_manager.settings import NONCE_LIFETIME

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def _signing_key(action: str) -> str:
    return f"{settings.SECRET_KEY}:{action}"


def create_nonce(user, action: str) -> str:
    now = datetime.now(tz=timezone.utc)
    payload = {
        "act": action,
        "uid": user.pk,
        "iat": now,
        "exp": now + timedelta(seconds=NONCE_LIFETIME),
    }
    return jwt.encode(payload, _signing_key(action), algorithm=ALGORITHM)


def verify_nonce(token: str, user, action: str) -> bool:
    if not token or user is None or not user.is_authenticated:
        return False

    try:
        payload = jwt.decode(token, _signing_key(action), algorithms=[ALGORITHM])
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected {action} token for user {user.pk}: {str(e)}")
        return False

    return payload.get("act") == action and payload.get("uid") == user.pk
