"""Chirps API.

- POST /chirps → create (requires access token)
- GET /chirps?author_id=&sort=asc|desc → list
- GET /chirps/{chirp_id} → fetch one
- DELETE /chirps/{chirp_id} → delete own chirp (404 → 403 → 204)
- POST /validate_chirp → length check without saving
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from chirpy.auth.dependencies import get_current_user_id
from chirpy.db.engine import get_db
from chirpy.errors import ChirpNotFoundError, ValidationFailedError
from chirpy.schemas.chirp import ChirpCreate, ChirpRead, ChirpValidation
from chirpy.services.chirp_service import ChirpService, validate_chirp_body

router = APIRouter()


def _chirp_svc(db: AsyncSession = Depends(get_db)) -> ChirpService:
    return ChirpService(db)


def _chirp_id(chirp_id: str) -> uuid.UUID:
    """Unparseable ids can't name an existing chirp, so they are a 404."""
    try:
        return uuid.UUID(chirp_id)
    except ValueError as e:
        raise ChirpNotFoundError(f"invalid chirp id {chirp_id!r}") from e


@router.post("/chirps", response_model=ChirpRead, status_code=201)
async def create_chirp(
    body: ChirpCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    svc: ChirpService = Depends(_chirp_svc),
):
    return await svc.create_chirp(user_id, body.body)


@router.get("/chirps", response_model=list[ChirpRead])
async def list_chirps(
    author_id: Optional[str] = None,
    sort: str = Query("asc", pattern="^(asc|desc)$"),
    svc: ChirpService = Depends(_chirp_svc),
):
    author_uuid = None
    if author_id:
        try:
            author_uuid = uuid.UUID(author_id)
        except ValueError as e:
            raise ValidationFailedError("invalid author_id") from e
    return await svc.list_chirps(author_id=author_uuid, newest_first=sort == "desc")


@router.get("/chirps/{chirp_id}", response_model=ChirpRead)
async def get_chirp(chirp_id: str, svc: ChirpService = Depends(_chirp_svc)):
    return await svc.get_chirp(_chirp_id(chirp_id))


@router.delete("/chirps/{chirp_id}", status_code=204)
async def delete_chirp(
    chirp_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    svc: ChirpService = Depends(_chirp_svc),
):
    """Delete a chirp. Only its author may do this."""
    await svc.delete_chirp(_chirp_id(chirp_id), principal=user_id)
    return Response(status_code=204)


@router.post("/validate_chirp", response_model=ChirpValidation)
async def validate_chirp(body: ChirpCreate):
    validate_chirp_body(body.body)
    return ChirpValidation(valid=True)
