from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HockeySession(Base):
    __tablename__ = "hockey_session"

    session_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    create_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    roster: Mapped[list[RosterPlayer]] = relationship(
        "RosterPlayer",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class RosterPlayer(Base):
    """Current roster entry for one player in one session."""

    __tablename__ = "session_roster"

    session_roster_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("hockey_session.session_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(128), ForeignKey("app_user.id"), nullable=False)
    first_name: Mapped[str] = mapped_column(String(256), nullable=False)
    last_name: Mapped[str] = mapped_column(String(256), nullable=False)
    team_assignment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_playing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_regular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    player_status: Mapped[str] = mapped_column(String(32), nullable=False, default="Regular")
    rating: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("0"))
    preferred: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    preferred_plus: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    session: Mapped[HockeySession] = relationship("HockeySession", back_populates="roster")

    __table_args__ = (Index("ix_session_roster_session", "session_id", "team_assignment", "position"),)

    @property
    def rating_identity(self) -> int | None:
        return self.session_roster_id
