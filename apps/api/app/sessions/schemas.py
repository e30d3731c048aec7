from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class RosterPlayerRead(BaseModel):
    session_roster_id: int
    session_id: int
    user_id: str
    first_name: str
    last_name: str
    team_assignment: int
    is_playing: bool
    is_regular: bool
    player_status: str
    rating: Decimal
    preferred: bool
    preferred_plus: bool
    position: int
    joined_at: datetime
