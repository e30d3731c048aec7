from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.platform.security.context import SecurityContext
from app.platform.security.identity import get_user_id
from app.platform.security.rating import has_elevated_role
from app.users.models import User
from app.users.repository import UserRepository
from app.users.schemas import UserBasicRead, UserDetailedRead


@dataclass(slots=True)
class UserService:
    repository: UserRepository = UserRepository()

    def list_users(self, session: Session, ctx: SecurityContext | None) -> list[UserDetailedRead] | list[UserBasicRead]:
        if has_elevated_role(ctx):
            return self.repository.list_detailed(session)
        return self.repository.list_basic(session)

    def get_user(self, session: Session, ctx: SecurityContext | None, user_id: str) -> UserDetailedRead | UserBasicRead:
        user = self._require(session, user_id)
        if has_elevated_role(ctx):
            return self.repository.to_detailed(user)
        return self.repository.to_basic(user)

    def get_current_user(self, session: Session, ctx: SecurityContext | None) -> UserDetailedRead:
        # UnauthorizedError propagates; the app maps it to a 401.
        return self.repository.to_detailed(self._require(session, get_user_id(ctx)))

    def _require(self, session: Session, user_id: str) -> User:
        user = self.repository.get(session, user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
        return user


user_service = UserService()
