"""FastAPI auth dependencies.

Used as Depends() in route handlers. The AuthGuard lives on app.state,
put there by create_app(), so tests can build apps with their own secrets.

Two mechanisms:
1. Bearer JWT access token (users)
2. ApiKey in the Authorization header (Polka webhooks)
"""

import uuid

from fastapi import Depends, Request

from chirpy.auth.guard import AuthGuard


def get_auth_guard(request: Request) -> AuthGuard:
    return request.app.state.auth_guard


async def get_current_user_id(
    request: Request,
    guard: AuthGuard = Depends(get_auth_guard),
) -> uuid.UUID:
    """The principal behind a Bearer access token (401 otherwise)."""
    return guard.authenticate_session(request.headers)


async def require_polka_key(
    request: Request,
    guard: AuthGuard = Depends(get_auth_guard),
) -> None:
    """Reject any caller without the webhook API key (401)."""
    guard.authenticate_service_call(request.headers)
