import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from app.core.auth import get_request_security_context
from app.core.config import get_settings
from app.core.rbac import require_elevated_role
from app.metrics import generate_metrics_payload, metrics_content_type
from app.platform.security.context import SecurityContext
from app.platform.security.rating import clear_cache, has_elevated_role
from app.sessions.api import router as sessions_router
from app.users.api import router as users_router

logger = logging.getLogger("app.admin")

router = APIRouter()
router.include_router(users_router)
router.include_router(sessions_router)


@router.get("/health", tags=["system"])
def health() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.app_env,
    }


@router.get("/me", tags=["auth"])
def me(ctx: SecurityContext | None = Depends(get_request_security_context)) -> dict[str, str | bool | list[str] | None]:
    principal = ctx.principal if ctx is not None else None
    if principal is None:
        return {"authenticated": False, "user_id": None, "name": None, "roles": []}
    return {
        "authenticated": True,
        "user_id": principal.user_id,
        "name": principal.name,
        "roles": sorted(principal.roles),
    }


@router.delete("/admin/rating-cache", status_code=status.HTTP_204_NO_CONTENT, tags=["admin"])
def clear_rating_cache(user_id: str = Depends(require_elevated_role)) -> Response:
    clear_cache()
    logger.info("rating.cache_cleared_by_admin", extra={"cleared_by": user_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/metrics", tags=["system"])
def metrics(ctx: SecurityContext | None = Depends(get_request_security_context)) -> Response:
    settings = get_settings()
    if not settings.metrics_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    if not has_elevated_role(ctx):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Elevated role required")
    return Response(content=generate_metrics_payload(), media_type=metrics_content_type())
