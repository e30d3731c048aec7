from app.platform.security.context import (
    ContextProvider,
    ContextVarContextProvider,
    Principal,
    SecurityContext,
    StaticContextProvider,
    current_context,
    current_principal,
    current_roles,
    get_context_provider,
    initialize,
)
from app.platform.security.errors import AuthorizationError, UnauthorizedError
from app.platform.security.identity import get_user_id, require_user_id
from app.platform.security.rating import (
    ELEVATED_ROLES,
    ZERO_RATING,
    RatableEntity,
    RatingCache,
    RatingSecurity,
    clear_cache,
    get_rating_security,
    get_secure_rating,
    has_elevated_role,
)

__all__ = [
    "ContextProvider",
    "ContextVarContextProvider",
    "Principal",
    "SecurityContext",
    "StaticContextProvider",
    "current_context",
    "current_principal",
    "current_roles",
    "get_context_provider",
    "initialize",
    "AuthorizationError",
    "UnauthorizedError",
    "get_user_id",
    "require_user_id",
    "ELEVATED_ROLES",
    "ZERO_RATING",
    "RatableEntity",
    "RatingCache",
    "RatingSecurity",
    "clear_cache",
    "get_rating_security",
    "get_secure_rating",
    "has_elevated_role",
]
