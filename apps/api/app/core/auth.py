from __future__ import annotations

import logging
from typing import Any

from jose import JWTError, jwt
from starlette.requests import Request

from app.core.config import get_settings
from app.platform.security.context import Principal, SecurityContext


logger = logging.getLogger("app.auth")

_BEARER_PREFIX = "Bearer "


def get_bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    return authorization[len(_BEARER_PREFIX):]


def _role_claims(payload: dict[str, Any]) -> frozenset[str]:
    roles = payload.get("roles", payload.get("role", []))
    if isinstance(roles, str):
        return frozenset({roles})
    if not isinstance(roles, list):
        return frozenset()
    return frozenset(str(role) for role in roles if role)


def principal_from_token(token: str | None) -> Principal | None:
    """Decode a bearer JWT into a Principal; invalid or missing tokens yield None."""

    if not token:
        return None

    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        logger.info("auth.invalid_token", extra={"error": str(exc)})
        return None

    subject = payload.get("sub")
    name = payload.get("name") or payload.get("unique_name")
    return Principal(
        name=str(name) if name else None,
        user_id=str(subject) if subject else None,
        roles=_role_claims(payload),
    )


def get_request_security_context(request: Request) -> SecurityContext | None:
    return getattr(request.state, "security_context", None)
