"""
User service
Registration, login checks and the bootstrap admin account
"""
import logging
from typing import Optional
from stayease.config import Settings
from stayease.exceptions import DuplicateUsernameError
from stayease.models.entities import User
from stayease.models.schemas import RegisterRequest, PublicUser
from stayease.security.auth import get_password_hash, verify_password
from stayease.storage.base import Storage

logger = logging.getLogger(__name__)


def to_public(user: User) -> PublicUser:
    """Public projection, without the password hash"""
    return PublicUser.model_validate(user.model_dump(exclude={"password_hash"}))


class UserService:
    """User service"""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def register(self, data: RegisterRequest) -> User:
        """Create a regular account"""
        if await self.storage.get_user_by_username(data.username):
            raise DuplicateUsernameError()

        fields = data.model_dump(exclude={"password"})
        fields["password_hash"] = get_password_hash(data.password)
        fields["is_admin"] = False

        user = await self.storage.create_user(fields)
        logger.info(f"User registered: {user.username}")
        return user

    async def authenticate(self, username: str, password: str) -> Optional[User]:
        """The user when the credentials match, else None"""
        user = await self.storage.get_user_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for username: {username}")
            return None
        return user

    async def ensure_admin_user(self, settings: Settings) -> Optional[User]:
        """Create the configured admin account when it is missing"""
        if not settings.ADMIN_PASSWORD:
            return None

        existing = await self.storage.get_user_by_username(settings.ADMIN_USERNAME)
        if existing:
            return existing

        user = await self.storage.create_user({
            "username": settings.ADMIN_USERNAME,
            "password_hash": get_password_hash(settings.ADMIN_PASSWORD),
            "email": settings.ADMIN_EMAIL,
            "is_admin": True,
        })
        logger.info(f"Admin account created: {user.username}")
        return user
