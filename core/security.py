"""Bearer-token gate for the inventory API.

Tokens are issued elsewhere; this module only checks them and hands the
route the identity found in the ``sub`` claim. ``create_access_token`` is
kept for tooling and tests that need a valid token.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from core.errors import AuthenticationException
from core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

ANONYMOUS_USER = "anonymous"


def create_access_token(subject: str, settings: Optional[Settings] = None, expires_delta: Optional[timedelta] = None) -> str:
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise AuthenticationException("Not authorized") from exc
    subject = payload.get("sub")
    if not subject:
        logger.warning("Rejected bearer token without subject")
        raise AuthenticationException("Not authorized")
    return subject


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> str:
    if not settings.auth_enabled:
        return ANONYMOUS_USER
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationException("Not authorized, no token")
    return decode_access_token(credentials.credentials, settings)
