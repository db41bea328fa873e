"""Refresh token store — issue, look up and revoke opaque refresh tokens.

A refresh token is 32 random bytes, hex-encoded, and is its own primary
key. Tokens are never rotated or deleted: a token stays exchangeable until
it expires or is revoked, and revocation is permanent.

Lifecycle:
    active ──(expires_at passes)──→ expired   (computed on read)
    active ──(revoke)──────────────→ revoked  (stored, terminal)

Database faults are raised as StoreError, never as not-found.
"""

import secrets
import uuid
from datetime import timedelta
from enum import Enum

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chirpy.db.models import RefreshToken, utcnow
from chirpy.errors import RefreshTokenNotFoundError, StoreError

logger = structlog.get_logger()

REFRESH_TOKEN_BYTES = 32
DEFAULT_REFRESH_TOKEN_TTL = timedelta(days=60)


class RevokeOutcome(str, Enum):
    REVOKED = "revoked"
    ALREADY_REVOKED = "already_revoked"


def generate_refresh_token() -> str:
    """Random 256-bit value as 64 lowercase hex characters."""
    return secrets.token_hex(REFRESH_TOKEN_BYTES)


class RefreshTokenService:
    """Persistence for refresh tokens."""

    def __init__(self, db: AsyncSession, ttl: timedelta = DEFAULT_REFRESH_TOKEN_TTL):
        self.db = db
        self.ttl = ttl

    async def issue(self, user_id: uuid.UUID, token: str | None = None) -> RefreshToken:
        """Persist a new active refresh token for user_id.

        Multiple live tokens per user are allowed (one per login).
        """
        now = utcnow()
        record = RefreshToken(
            token=token or generate_refresh_token(),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            expires_at=now + self.ttl,
            revoked_at=None,
        )
        try:
            self.db.add(record)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("refresh_token.issue_failed", user_id=str(user_id), exc_info=e)
            raise StoreError("could not persist refresh token") from e
        return record

    async def lookup(self, token: str) -> RefreshToken:
        """Fetch a refresh token by value. Raises RefreshTokenNotFoundError."""
        q = (
            select(RefreshToken)
            .where(RefreshToken.token == token)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(q)
        except SQLAlchemyError as e:
            logger.error("refresh_token.lookup_failed", exc_info=e)
            raise StoreError("could not read refresh token") from e

        record = result.scalars().first()
        if record is None:
            raise RefreshTokenNotFoundError("refresh token not found")
        return record

    async def revoke(self, token: str) -> RevokeOutcome:
        """Revoke a refresh token.

        Only sets revoked_at if it is still unset, so concurrent revokes
        keep the first timestamp. Revoking twice is not an error.
        """
        now = utcnow()
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.revoked_at.is_(None))
            .values(revoked_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("refresh_token.revoke_failed", exc_info=e)
            raise StoreError("could not revoke refresh token") from e

        if result.rowcount:
            logger.info("refresh_token.revoked")
            return RevokeOutcome.REVOKED

        # Nothing updated: either unknown or revoked earlier.
        await self.lookup(token)
        return RevokeOutcome.ALREADY_REVOKED
