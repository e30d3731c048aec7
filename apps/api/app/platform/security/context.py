from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import Lock
from typing import Protocol

from app.context import get_security_context


logger = logging.getLogger("app.security.context")


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity and its role claims."""

    name: str | None = None
    user_id: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def identity(self) -> str | None:
        return self.user_id or self.name


@dataclass(slots=True)
class SecurityContext:
    """Ambient security state for one request; `principal` is None when unauthenticated."""

    principal: Principal | None = None


class ContextProvider(Protocol):
    """Source of the current caller's security context."""

    def get_context(self) -> SecurityContext | None:
        ...


class ContextVarContextProvider:
    """Reads the request-scoped context bound by the security context middleware."""

    def get_context(self) -> SecurityContext | None:
        return get_security_context()


class StaticContextProvider:
    """Returns a fixed context. Used by tests and background jobs."""

    def __init__(self, context: SecurityContext | None = None) -> None:
        self.context = context

    def get_context(self) -> SecurityContext | None:
        return self.context


_CONTEXT_PROVIDER: ContextProvider | None = None
_CONTEXT_LOCK = Lock()


def initialize(provider: ContextProvider | None) -> None:
    """Install the process-wide context provider. Passing None uninstalls it."""

    global _CONTEXT_PROVIDER
    with _CONTEXT_LOCK:
        _CONTEXT_PROVIDER = provider


def get_context_provider() -> ContextProvider | None:
    """Get the installed context provider, if any."""

    return _CONTEXT_PROVIDER


def resolve_context(provider: ContextProvider | None) -> SecurityContext | None:
    if provider is None:
        return None
    try:
        return provider.get_context()
    except Exception as exc:
        logger.warning("security_context.unavailable", extra={"error": str(exc)})
        return None


def current_context() -> SecurityContext | None:
    return resolve_context(get_context_provider())


def current_principal() -> Principal | None:
    ctx = current_context()
    if ctx is None:
        return None
    return ctx.principal


def current_roles() -> frozenset[str]:
    principal = current_principal()
    if principal is None:
        return frozenset()
    return principal.roles
