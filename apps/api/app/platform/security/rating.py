from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Hashable
from decimal import Decimal
from threading import Lock
from typing import Any, Protocol

from app.metrics import observe_rating_cache_hit, observe_rating_cache_miss, observe_rating_masked
from app.platform.security.context import (
    ContextProvider,
    SecurityContext,
    get_context_provider,
    resolve_context,
)


logger = logging.getLogger("app.security.rating")

ELEVATED_ROLES: frozenset[str] = frozenset({"Admin", "SubAdmin"})
ZERO_RATING = Decimal("0")
DEFAULT_CACHE_MAX_ENTRIES = 10_000

CacheKey = tuple[Hashable, ...]


class RatableEntity(Protocol):
    """Anything exposing a decimal rating. `rating_identity` is optional."""

    rating: Decimal | None


class RatingCache:
    """Thread-safe bounded cache of exposed ratings with least-recently-used eviction."""

    def __init__(self, max_entries: int = DEFAULT_CACHE_MAX_ENTRIES) -> None:
        self._lock = Lock()
        self._entries: OrderedDict[CacheKey, Decimal] = OrderedDict()
        self._max_entries = max(1, max_entries)

    def get(self, key: CacheKey) -> Decimal | None:
        with self._lock:
            value = self._entries.get(key)
            if value is not None:
                self._entries.move_to_end(key)
            return value

    def set(self, key: CacheKey, value: Decimal) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def has_elevated_role(ctx: SecurityContext | None) -> bool:
    if ctx is None or ctx.principal is None:
        return False
    return not ELEVATED_ROLES.isdisjoint(ctx.principal.roles)


def _entity_kind(entity: Any) -> str:
    return type(entity).__name__


def _entity_identity(entity: Any) -> Hashable:
    identity = getattr(entity, "rating_identity", None)
    if identity is None:
        return ("ref", id(entity))
    return ("key", identity)


def _cache_key(entity: Any, rating: Decimal, ctx: SecurityContext | None) -> CacheKey:
    principal = ctx.principal if ctx is not None else None
    if principal is None:
        principal_key: Hashable = None
        role_snapshot: tuple[str, ...] = ()
    else:
        principal_key = principal.identity
        role_snapshot = tuple(sorted(principal.roles))
    return (_entity_kind(entity), _entity_identity(entity), rating, principal_key, role_snapshot)


class RatingSecurity:
    """Exposes entity ratings only to callers holding an elevated role.

    The context provider is either given explicitly or read from the
    process-wide slot on every call, so re-initialization is visible
    immediately. Every failure path returns a zero rating.
    """

    def __init__(
        self,
        provider: ContextProvider | None = None,
        *,
        use_installed_provider: bool = True,
        cache: RatingCache | None = None,
    ) -> None:
        self._provider = provider
        self._use_installed_provider = use_installed_provider and provider is None
        self.cache = cache if cache is not None else RatingCache()

    @property
    def provider(self) -> ContextProvider | None:
        if self._use_installed_provider:
            return get_context_provider()
        return self._provider

    def get_secure_rating(self, entity: RatableEntity | None) -> Decimal:
        if entity is None:
            return ZERO_RATING

        rating = getattr(entity, "rating", None)
        if rating is None or rating == ZERO_RATING:
            return ZERO_RATING

        try:
            return self._resolve(entity, Decimal(rating))
        except Exception as exc:
            logger.warning(
                "rating.resolve_failed",
                extra={"entity_type": _entity_kind(entity), "error": str(exc)},
            )
            return ZERO_RATING

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("rating.cache_cleared")

    def _resolve(self, entity: RatableEntity, rating: Decimal) -> Decimal:
        ctx = resolve_context(self.provider)
        key = _cache_key(entity, rating, ctx)

        cached = self.cache.get(key)
        if cached is not None:
            observe_rating_cache_hit()
            return cached

        observe_rating_cache_miss()
        if has_elevated_role(ctx):
            exposed = rating
        else:
            exposed = ZERO_RATING
            observe_rating_masked(entity_type=_entity_kind(entity))

        self.cache.set(key, exposed)
        return exposed


_RATING_SECURITY = RatingSecurity()
_RATING_LOCK = Lock()


def get_rating_security() -> RatingSecurity:
    """Get the process-wide rating accessor."""

    return _RATING_SECURITY


def configure_rating_security(*, max_entries: int) -> None:
    """Replace the process-wide accessor with one using a cache of the given capacity."""

    global _RATING_SECURITY
    with _RATING_LOCK:
        _RATING_SECURITY = RatingSecurity(cache=RatingCache(max_entries=max_entries))


def get_secure_rating(entity: RatableEntity | None) -> Decimal:
    """Return the entity's rating for elevated callers and zero for everyone else."""

    return get_rating_security().get_secure_rating(entity)


def clear_cache() -> None:
    get_rating_security().clear_cache()
