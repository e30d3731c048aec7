from __future__ import annotations

from app.platform.security.context import SecurityContext, current_context
from app.platform.security.errors import UnauthorizedError


def get_user_id(ctx: SecurityContext | None) -> str:
    """Resolve the authenticated user's id, raising UnauthorizedError when it is absent."""

    if ctx is None or ctx.principal is None:
        raise UnauthorizedError()

    user_id = ctx.principal.user_id
    if not user_id:
        raise UnauthorizedError()
    return user_id


def require_user_id() -> str:
    return get_user_id(current_context())
