"""Session API — login, refresh, revoke.

- POST /login → email/password → access token + refresh token
- POST /refresh → "Bearer <refresh token>" → new access token
- POST /revoke → "Bearer <refresh token>" → refresh token revoked

Refresh never re-checks the password and never rotates the refresh token.
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from chirpy.auth.dependencies import get_auth_guard
from chirpy.auth.guard import AuthGuard
from chirpy.auth.headers import get_bearer_token
from chirpy.db.engine import get_db
from chirpy.errors import AuthenticationError, RefreshTokenNotFoundError
from chirpy.schemas.user import (
    AccessTokenResponse,
    Credentials,
    LoginResponse,
    RevokeResponse,
)
from chirpy.services.refresh_token_service import RefreshTokenService, RevokeOutcome
from chirpy.services.user_service import UserService

router = APIRouter()


def _refresh_store(
    db: AsyncSession = Depends(get_db),
    guard: AuthGuard = Depends(get_auth_guard),
) -> RefreshTokenService:
    return RefreshTokenService(db, ttl=guard.refresh_token_ttl)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: Credentials,
    db: AsyncSession = Depends(get_db),
    store: RefreshTokenService = Depends(_refresh_store),
    guard: AuthGuard = Depends(get_auth_guard),
):
    """Login with email and password → access + refresh tokens."""
    user = await UserService(db).authenticate(body.email, body.password)
    refresh = await store.issue(user.id)

    return LoginResponse(
        id=user.id,
        email=user.email,
        is_chirpy_red=user.is_chirpy_red,
        created_at=user.created_at,
        updated_at=user.updated_at,
        token=guard.issue_access_token(user.id),
        refresh_token=refresh.token,
    )


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(
    request: Request,
    store: RefreshTokenService = Depends(_refresh_store),
    guard: AuthGuard = Depends(get_auth_guard),
):
    """Exchange a refresh token for a new access token."""
    token = get_bearer_token(request.headers)
    try:
        access_token = await guard.exchange(token, store)
    except RefreshTokenNotFoundError as e:
        # An unknown refresh token is a bad credential here, not a missing resource.
        raise AuthenticationError("refresh token not found") from e
    return AccessTokenResponse(token=access_token)


@router.post(
    "/revoke",
    status_code=204,
    responses={200: {"model": RevokeResponse}},
)
async def revoke(
    request: Request,
    store: RefreshTokenService = Depends(_refresh_store),
):
    """Revoke a refresh token. Revoking twice reports already_revoked."""
    token = get_bearer_token(request.headers)
    outcome = await store.revoke(token)
    if outcome is RevokeOutcome.ALREADY_REVOKED:
        return Response(
            content=RevokeResponse(status=outcome.value).model_dump_json(),
            status_code=200,
            media_type="application/json",
        )
    return Response(status_code=204)
