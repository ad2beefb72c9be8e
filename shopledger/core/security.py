from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException, status

from shopledger.config import get_settings
from shopledger.core.session import SessionContext

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _load_api_keys() -> dict[str, str]:
    """Parse ``API_KEYS`` as ``key`` or ``key:user_id`` entries, comma separated."""
    settings = get_settings()
    keys = {}
    if settings.API_KEYS:
        for value in settings.API_KEYS.split(","):
            value = value.strip()
            if not value:
                continue
            key, _, user_id = value.partition(":")
            keys[key.strip()] = user_id.strip() or settings.DEFAULT_USER_ID
    return keys


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    scheme, _, token = (authorization or "").strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _session_from_jwt(token: str) -> SessionContext:
    settings = get_settings()
    if not settings.JWT_SECRET:
        raise _unauthorized("JWT auth is not configured")

    import jwt

    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options={"verify_aud": bool(settings.JWT_AUDIENCE)},
        )
    except jwt.ExpiredSignatureError as exc:
        raise _unauthorized("Session expired") from exc
    except jwt.PyJWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise _unauthorized("Invalid JWT") from exc

    user_id = claims.get("sub") or claims.get("uid")
    if not user_id:
        raise _unauthorized("JWT has no subject")
    return SessionContext(
        user_id=str(user_id),
        user_name=claims.get("name"),
        user_email=claims.get("email"),
    )


def authenticate_request(
    api_key: Optional[str],
    authorization: Optional[str],
    *,
    require_auth: bool = False,
) -> Optional[SessionContext]:
    """Resolve the caller to a session: API key first, then bearer JWT."""
    user_id = _load_api_keys().get(api_key or "")
    if user_id:
        return SessionContext(user_id=user_id)

    token = _bearer_token(authorization)
    if token:
        return _session_from_jwt(token)

    if require_auth:
        raise _unauthorized("Not authenticated")
    return None


__all__ = ["authenticate_request"]
