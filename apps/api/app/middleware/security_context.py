from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.context import reset_security_context, set_security_context
from app.core.auth import get_bearer_token, principal_from_token
from app.platform.security.context import SecurityContext


class SecurityContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[no-untyped-def]
        token = get_bearer_token(request.headers.get("authorization"))
        ctx = SecurityContext(principal=principal_from_token(token))
        request.state.security_context = ctx
        reset_token = set_security_context(ctx)
        try:
            return await call_next(request)
        finally:
            reset_security_context(reset_token)
