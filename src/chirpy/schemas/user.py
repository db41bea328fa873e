"""Pydantic schemas for users and sessions."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class Credentials(BaseModel):
    """Body for register, login and profile update."""
    email: str = ""
    password: str = ""


class UserRead(BaseModel):
    id: uuid.UUID
    email: str
    is_chirpy_red: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LoginResponse(UserRead):
    """User info plus both session credentials — tokens only appear here."""
    token: str
    refresh_token: str


class AccessTokenResponse(BaseModel):
    token: str


class RevokeResponse(BaseModel):
    status: str
