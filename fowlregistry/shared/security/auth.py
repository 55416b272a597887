"""
Bearer token authentication.

Tokens are HS256 JWTs issued by the identity provider; the caller's uid
is the `sub` claim. A missing or invalid token yields no caller, and each
use case decides whether an anonymous caller is acceptable.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from fowlregistry.core.config import settings
from fowlregistry.domain.errors import UnauthenticatedError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

DEFAULT_TOKEN_TTL = timedelta(hours=1)


def create_access_token(uid: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed token for uid. Used by tooling and tests."""
    claims = {
        "sub": uid,
        "exp": datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_TTL),
    }
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_caller_uid(token: str) -> Optional[str]:
    """Return the uid carried by token, or None if it does not verify."""
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as exc:
        logger.info("Rejected bearer token: %s", type(exc).__name__)
        return None
    uid = claims.get("sub")
    return uid if isinstance(uid, str) and uid else None


def get_caller_uid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """FastAPI dependency: the authenticated caller's uid, or None."""
    if credentials is None:
        return None
    return decode_caller_uid(credentials.credentials)


def require_caller_uid(caller_uid: Optional[str] = Depends(get_caller_uid)) -> str:
    """FastAPI dependency for routes that never serve anonymous callers."""
    if not caller_uid:
        raise UnauthenticatedError()
    return caller_uid
