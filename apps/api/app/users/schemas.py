from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class UserBasicRead(BaseModel):
    id: str
    user_name: str
    email: str | None
    first_name: str | None
    last_name: str | None
    preferred: bool
    preferred_plus: bool
    active: bool


class UserDetailedRead(UserBasicRead):
    rating: Decimal
    date_created: datetime
    roles: list[str]
