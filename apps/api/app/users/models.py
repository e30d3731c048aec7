from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Numeric, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


user_role_table = Table(
    "app_user_role",
    Base.metadata,
    Column("user_id", String(128), ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", String(128), ForeignKey("app_role.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    __tablename__ = "app_role"

    id: Mapped[str] = mapped_column(String(128), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)


class User(Base):
    __tablename__ = "app_user"

    id: Mapped[str] = mapped_column(String(128), primary_key=True, default=new_id)
    user_name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    rating: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("0"))
    preferred: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    preferred_plus: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    date_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    roles: Mapped[list[Role]] = relationship(Role, secondary=user_role_table, lazy="selectin")

    @property
    def rating_identity(self) -> str | None:
        return self.id

    @property
    def role_names(self) -> list[str]:
        return sorted(role.name for role in self.roles)
