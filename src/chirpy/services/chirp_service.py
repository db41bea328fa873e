"""Chirp service — create, list, fetch and delete chirps.

Deletion is the one ownership-guarded mutation: the chirp is resolved
first (404), ownership checked second (403), and only then removed.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chirpy.auth.guard import authorize_owner
from chirpy.db.models import Chirp
from chirpy.errors import ChirpNotFoundError, StoreError, ValidationFailedError

logger = structlog.get_logger()

MAX_CHIRP_LENGTH = 140
PROFANE_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})
CENSORED = "****"


def validate_chirp_body(body: str) -> None:
    if not body:
        raise ValidationFailedError("body cannot be empty")
    if len(body) > MAX_CHIRP_LENGTH:
        raise ValidationFailedError("Chirp is too long")


def censor(body: str) -> str:
    """Replace profane words (whole words, any case) with ****."""
    words = body.split(" ")
    return " ".join(CENSORED if w.lower() in PROFANE_WORDS else w for w in words)


class ChirpService:
    """Business logic for chirps."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_chirp(self, user_id: uuid.UUID, body: str) -> Chirp:
        validate_chirp_body(body)
        chirp = Chirp(user_id=user_id, body=censor(body))
        self.db.add(chirp)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("chirp.create_failed", user_id=str(user_id), exc_info=e)
            raise StoreError("could not create chirp") from e
        return chirp

    async def list_chirps(
        self,
        author_id: uuid.UUID | None = None,
        newest_first: bool = False,
    ) -> list[Chirp]:
        q = select(Chirp)
        if author_id is not None:
            q = q.where(Chirp.user_id == author_id)
        order = Chirp.created_at.desc() if newest_first else Chirp.created_at.asc()
        try:
            result = await self.db.execute(q.order_by(order))
        except SQLAlchemyError as e:
            raise StoreError("could not list chirps") from e
        return list(result.scalars().all())

    async def get_chirp(self, chirp_id: uuid.UUID) -> Chirp:
        try:
            chirp = await self.db.get(Chirp, chirp_id)
        except SQLAlchemyError as e:
            raise StoreError("could not read chirp") from e
        if chirp is None:
            raise ChirpNotFoundError(f"chirp {chirp_id} not found")
        return chirp

    async def delete_chirp(self, chirp_id: uuid.UUID, principal: uuid.UUID) -> None:
        chirp = await self.get_chirp(chirp_id)
        authorize_owner(principal, chirp.user_id)

        try:
            await self.db.delete(chirp)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("chirp.delete_failed", chirp_id=str(chirp_id), exc_info=e)
            raise StoreError("could not delete chirp") from e
        logger.info("chirp.deleted", chirp_id=str(chirp_id), user_id=str(principal))
