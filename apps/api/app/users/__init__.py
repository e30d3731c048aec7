from app.users.api import router
from app.users.models import Role, User
from app.users.repository import UserRepository
from app.users.schemas import UserBasicRead, UserDetailedRead
from app.users.service import UserService, user_service

__all__ = [
    "router",
    "Role",
    "User",
    "UserRepository",
    "UserBasicRead",
    "UserDetailedRead",
    "UserService",
    "user_service",
]
