"""User service — registration, login checks, profile updates, upgrades.

Service layer separates business logic from HTTP routing.
API routes call services, services call the database.
"""

import uuid

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chirpy.auth.password import hash_password, verify_password
from chirpy.db.models import Chirp, RefreshToken, User
from chirpy.errors import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    StoreError,
    UserNotFoundError,
    ValidationFailedError,
)

logger = structlog.get_logger()


def _require_credentials(email: str, password: str) -> None:
    if not email:
        raise ValidationFailedError("email field cannot be empty")
    if not password:
        raise ValidationFailedError("password field cannot be empty")


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise EmailAlreadyRegisteredError("email already registered") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("user.store_failed", action=action, exc_info=e)
            raise StoreError(f"could not {action}") from e

    async def create_user(self, email: str, password: str) -> User:
        _require_credentials(email, password)
        user = User(email=email, hashed_password=hash_password(password))
        self.db.add(user)
        await self._commit("create user")
        logger.info("user.created", user_id=str(user.id))
        return user

    async def get_by_email(self, email: str) -> User | None:
        try:
            result = await self.db.execute(select(User).where(User.email == email))
        except SQLAlchemyError as e:
            raise StoreError("could not read user") from e
        return result.scalars().first()

    async def get_user(self, user_id: uuid.UUID) -> User:
        try:
            user = await self.db.get(User, user_id)
        except SQLAlchemyError as e:
            raise StoreError("could not read user") from e
        if user is None:
            raise UserNotFoundError(f"user {user_id} not found")
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Check email/password. Unknown email and wrong password look the same."""
        _require_credentials(email, password)
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError("email or password mismatch")
        return user

    async def update_credentials(
        self, user_id: uuid.UUID, email: str, password: str
    ) -> User:
        _require_credentials(email, password)
        user = await self.get_user(user_id)
        user.email = email
        user.hashed_password = hash_password(password)
        await self._commit("update user")
        return user

    async def upgrade_to_red(self, user_id: uuid.UUID) -> User:
        user = await self.get_user(user_id)
        user.is_chirpy_red = True
        await self._commit("upgrade user")
        logger.info("user.upgraded", user_id=str(user_id))
        return user

    async def remove_all(self) -> None:
        """Delete every user with their chirps and refresh tokens."""
        try:
            for model in (RefreshToken, Chirp, User):
                await self.db.execute(delete(model))
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError("could not reset users") from e
        await self._commit("reset users")
        logger.warning("user.all_removed")
