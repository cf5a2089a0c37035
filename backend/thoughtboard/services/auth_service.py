from uuid import UUID
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from thoughtboard.models.user import User
from thoughtboard.schemas.auth import SignupRequest
from thoughtboard.exceptions import (
    UsernameTakenException,
    InvalidCredentialsException,
    UserNotFoundException,
)
from thoughtboard.utils.security import hash_password, verify_password, create_user_token, decode_token
from thoughtboard.utils.logging_config import auth_logger


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create_user(self, user_data: SignupRequest) -> User:
        """
        Register a new user.

        The pre-check gives the common case a clean error; the unique index
        still catches two signups racing for the same name.
        """
        if await self.get_user_by_username(user_data.username):
            raise UsernameTakenException()

        user = User(
            username=user_data.username,
            password_hash=hash_password(user_data.password),
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            auth_logger.warning(f"Signup lost a race for username: {user_data.username}")
            raise UsernameTakenException()
        await self.db.refresh(user)
        auth_logger.info(f"User registered: {user.username}")
        return user

    async def authenticate_user(self, username: str, password: str) -> User:
        user = await self.get_user_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            auth_logger.warning(f"Failed authentication attempt for username: {username}")
            raise InvalidCredentialsException()
        auth_logger.info(f"User authenticated successfully: {username}")
        return user

    def create_token(self, user: User) -> dict:
        return {
            "token": create_user_token(str(user.id)),
            "user": {"id": user.id, "username": user.username},
        }

    async def get_user_from_token(self, token: str) -> User | None:
        """
        Resolve an access token to its user.

        Returns None for an unusable token. A well-formed token whose user
        no longer exists raises UserNotFoundException.
        """
        payload = decode_token(token)
        if not payload or payload.get("type") != "access":
            auth_logger.warning("Invalid or expired access token")
            return None
        user_id = payload.get("sub")
        if not user_id:
            auth_logger.warning("Token missing subject (user_id)")
            return None
        try:
            user_uuid = UUID(user_id)
        except ValueError:
            auth_logger.warning("Token subject is not a user id")
            return None
        user = await self.get_user_by_id(user_uuid)
        if not user:
            auth_logger.warning(f"Token subject {user_uuid} has no user")
            raise UserNotFoundException()
        auth_logger.debug(f"User retrieved from token: {user.username}")
        return user
