from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.platform.security.rating import get_secure_rating
from app.users.models import User
from app.users.schemas import UserBasicRead, UserDetailedRead


class UserRepository:
    def list_detailed(self, session: Session) -> list[UserDetailedRead]:
        return [self.to_detailed(row) for row in self._ordered(session)]

    def list_basic(self, session: Session) -> list[UserBasicRead]:
        return [self.to_basic(row) for row in self._ordered(session)]

    def get(self, session: Session, user_id: str) -> User | None:
        return session.get(User, user_id)

    @staticmethod
    def _ordered(session: Session) -> Sequence[User]:
        return session.scalars(select(User).order_by(User.last_name.asc(), User.first_name.asc())).all()

    @staticmethod
    def to_basic(user: User) -> UserBasicRead:
        return UserBasicRead(
            id=user.id,
            user_name=user.user_name,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            preferred=user.preferred,
            preferred_plus=user.preferred_plus,
            active=user.active,
        )

    @staticmethod
    def to_detailed(user: User) -> UserDetailedRead:
        return UserDetailedRead(
            id=user.id,
            user_name=user.user_name,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            rating=get_secure_rating(user),
            preferred=user.preferred,
            preferred_plus=user.preferred_plus,
            active=user.active,
            date_created=user.date_created,
            roles=user.role_names,
        )
