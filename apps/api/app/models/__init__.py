from app.sessions.models import HockeySession, RosterPlayer
from app.users.models import Role, User

__all__ = [
	"HockeySession",
	"Role",
	"RosterPlayer",
	"User",
]
