"""Bearer token verification.

Tokens are issued elsewhere; this module only verifies them and turns the
``sub`` and ``role`` claims into an ``Actor``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ..config import AppConfig
from ..db.models import Role
from ..errors import ConfigurationError
from ..workflow.context import Actor

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)
BearerCreds = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)]


def decode_token(token: str, config: AppConfig) -> Actor:
    """Verify a token and extract the actor.

    Raises:
        HTTPException: 401 if the token is invalid or lacks the expected claims
    """
    try:
        payload = jwt.decode(
            token, config.require_jwt_secret(), algorithms=[config.auth.algorithm]
        )
    except ConfigurationError as e:
        logger.error("Token verification unavailable: %s", e)
        raise HTTPException(status_code=500, detail=str(e)) from e
    except JWTError as e:
        raise HTTPException(status_code=401, detail="Invalid or expired token") from e

    try:
        return Actor(user_id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=401, detail="Token is missing user claims") from e


def get_actor(request: Request, creds: BearerCreds) -> Actor:
    """FastAPI dependency resolving the authenticated actor."""
    if creds is None or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Authentication required")
    return decode_token(creds.credentials, request.app.state.config)


CurrentActor = Annotated[Actor, Depends(get_actor)]


def issue_token(config: AppConfig, user_id: int, role: Role | str, hours: int = 12) -> str:
    """Sign a token for local tooling and tests."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": Role(role).value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=hours)).timestamp()),
    }
    return jwt.encode(payload, config.require_jwt_secret(), algorithm=config.auth.algorithm)
