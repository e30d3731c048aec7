from app.sessions.api import router
from app.sessions.models import HockeySession, RosterPlayer
from app.sessions.repository import RosterRepository
from app.sessions.schemas import RosterPlayerRead
from app.sessions.service import RosterService, roster_service

__all__ = [
    "router",
    "HockeySession",
    "RosterPlayer",
    "RosterRepository",
    "RosterPlayerRead",
    "RosterService",
    "roster_service",
]
