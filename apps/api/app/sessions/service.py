from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.sessions.repository import RosterRepository
from app.sessions.schemas import RosterPlayerRead


@dataclass(slots=True)
class RosterService:
    repository: RosterRepository = RosterRepository()

    def get_roster(self, session: Session, session_id: int) -> list[RosterPlayerRead]:
        if not self.repository.session_exists(session, session_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="session not found")
        return self.repository.list_roster(session, session_id)


roster_service = RosterService()
