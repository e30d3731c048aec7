from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.platform.security.context import SecurityContext

correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
security_context_var: ContextVar[SecurityContext | None] = ContextVar("security_context", default=None)


def set_correlation_id(value: str | None) -> Token[str | None]:
    return correlation_id_var.set(value)


def reset_correlation_id(token: Token[str | None]) -> None:
    correlation_id_var.reset(token)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


def set_security_context(value: SecurityContext | None) -> Token[SecurityContext | None]:
    return security_context_var.set(value)


def reset_security_context(token: Token[SecurityContext | None]) -> None:
    security_context_var.reset(token)


def get_security_context() -> SecurityContext | None:
    return security_context_var.get()
