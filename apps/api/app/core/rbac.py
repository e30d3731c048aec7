from fastapi import Depends, HTTPException, status

from app.core.auth import get_request_security_context
from app.platform.security.context import SecurityContext
from app.platform.security.identity import get_user_id
from app.platform.security.rating import has_elevated_role


def require_elevated_role(ctx: SecurityContext | None = Depends(get_request_security_context)) -> str:
    """Admit only authenticated callers holding Admin or SubAdmin; returns their user id."""

    user_id = get_user_id(ctx)
    if not has_elevated_role(ctx):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Elevated role required")
    return user_id


def require_authenticated_user(ctx: SecurityContext | None = Depends(get_request_security_context)) -> str:
    """Admit any caller with a resolvable user id; returns it."""

    return get_user_id(ctx)
