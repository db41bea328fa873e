"""Users API — registration and profile updates.

- POST /users → create an account (201, 409 if the email is taken)
- PUT /users → change own email/password (requires access token)
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chirpy.auth.dependencies import get_current_user_id
from chirpy.db.engine import get_db
from chirpy.schemas.user import Credentials, UserRead
from chirpy.services.user_service import UserService

router = APIRouter(prefix="/users")


def _user_svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.post("", response_model=UserRead, status_code=201)
async def create_user(body: Credentials, svc: UserService = Depends(_user_svc)):
    """Create a new user account."""
    return await svc.create_user(body.email, body.password)


@router.put("", response_model=UserRead)
async def update_user(
    body: Credentials,
    user_id: uuid.UUID = Depends(get_current_user_id),
    svc: UserService = Depends(_user_svc),
):
    """Update the authenticated user's email and password."""
    return await svc.update_credentials(user_id, body.email, body.password)
