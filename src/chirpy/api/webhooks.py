"""Polka webhook receiver.

Polka (the payment provider) calls POST /polka/webhooks with
"Authorization: ApiKey <key>". Any key problem is a 401 before the body
is even looked at, so nothing changes for a bad caller.
"""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from chirpy.auth.dependencies import require_polka_key
from chirpy.db.engine import get_db
from chirpy.errors import UserNotFoundError, ValidationFailedError
from chirpy.schemas.webhook import USER_UPGRADED, PolkaEvent
from chirpy.services.user_service import UserService

router = APIRouter(prefix="/polka")


@router.post("/webhooks", status_code=204, dependencies=[Depends(require_polka_key)])
async def receive_polka_event(body: PolkaEvent, db: AsyncSession = Depends(get_db)):
    """Handle a Polka event. Only user.upgraded does anything."""
    if not body.event:
        raise ValidationFailedError("event field cannot be empty")
    if not body.data.user_id:
        raise ValidationFailedError("data.user_id field cannot be empty")
    if body.event != USER_UPGRADED:
        return Response(status_code=204)

    try:
        user_id = uuid.UUID(body.data.user_id)
    except ValueError as e:
        raise UserNotFoundError(f"invalid user id {body.data.user_id!r}") from e

    await UserService(db).upgrade_to_red(user_id)
    return Response(status_code=204)
