from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.rbac import require_authenticated_user
from app.sessions.schemas import RosterPlayerRead
from app.sessions.service import roster_service


router = APIRouter(prefix="/sessions", tags=["sessions"], dependencies=[Depends(require_authenticated_user)])


@router.get("/{session_id}/roster", response_model=list[RosterPlayerRead])
def get_session_roster(session_id: int, db: Session = Depends(get_db)) -> list[RosterPlayerRead]:
    return roster_service.get_roster(db, session_id)
