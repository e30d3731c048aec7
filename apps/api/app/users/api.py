from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_request_security_context
from app.core.database import get_db
from app.core.rbac import require_authenticated_user
from app.platform.security.context import SecurityContext
from app.users.schemas import UserBasicRead, UserDetailedRead
from app.users.service import user_service


router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_authenticated_user)])


@router.get("", response_model=list[UserDetailedRead] | list[UserBasicRead])
def list_users(
    db: Session = Depends(get_db),
    ctx: SecurityContext | None = Depends(get_request_security_context),
) -> list[UserDetailedRead] | list[UserBasicRead]:
    return user_service.list_users(db, ctx)


@router.get("/me", response_model=UserDetailedRead)
def get_me(
    db: Session = Depends(get_db),
    ctx: SecurityContext | None = Depends(get_request_security_context),
) -> UserDetailedRead:
    return user_service.get_current_user(db, ctx)


@router.get("/{user_id}", response_model=UserDetailedRead | UserBasicRead)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    ctx: SecurityContext | None = Depends(get_request_security_context),
) -> UserDetailedRead | UserBasicRead:
    return user_service.get_user(db, ctx, user_id)
