from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.platform.security.rating import get_secure_rating
from app.sessions.models import HockeySession, RosterPlayer
from app.sessions.schemas import RosterPlayerRead


class RosterRepository:
    def session_exists(self, session: Session, session_id: int) -> bool:
        return session.get(HockeySession, session_id) is not None

    def list_roster(self, session: Session, session_id: int) -> list[RosterPlayerRead]:
        rows = session.scalars(
            select(RosterPlayer)
            .where(RosterPlayer.session_id == session_id)
            .order_by(RosterPlayer.team_assignment.asc(), RosterPlayer.position.asc(), RosterPlayer.last_name.asc())
        ).all()
        return [self.to_read(row) for row in rows]

    @staticmethod
    def to_read(player: RosterPlayer) -> RosterPlayerRead:
        return RosterPlayerRead(
            session_roster_id=player.session_roster_id,
            session_id=player.session_id,
            user_id=player.user_id,
            first_name=player.first_name,
            last_name=player.last_name,
            team_assignment=player.team_assignment,
            is_playing=player.is_playing,
            is_regular=player.is_regular,
            player_status=player.player_status,
            rating=get_secure_rating(player),
            preferred=player.preferred,
            preferred_plus=player.preferred_plus,
            position=player.position,
            joined_at=player.joined_at,
        )
