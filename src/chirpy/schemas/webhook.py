"""Pydantic schemas for incoming Polka webhooks."""

from pydantic import BaseModel, Field

USER_UPGRADED = "user.upgraded"


class PolkaEventData(BaseModel):
    user_id: str = ""


class PolkaEvent(BaseModel):
    event: str = ""
    data: PolkaEventData = Field(default_factory=PolkaEventData)
