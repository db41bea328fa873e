"""Pydantic schemas for chirps."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class ChirpCreate(BaseModel):
    body: str = ""


class ChirpRead(BaseModel):
    id: uuid.UUID
    body: str
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ChirpValidation(BaseModel):
    valid: bool
