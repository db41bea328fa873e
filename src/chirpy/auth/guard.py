"""AuthGuard — turns request credentials into a principal and checks rights.

The guard is built once at startup with the signing secret and webhook
API key (see chirpy.main.create_app) and is read-only afterwards, so it
is safe to share across concurrent requests.

Every failure raised here is an AuthenticationError subclass (or
ForbiddenError for ownership). The specific subclass is for server-side
logs; clients only ever see the generic 401/403.
"""

import hmac
import uuid
from datetime import timedelta
from typing import Mapping

from chirpy.auth.headers import get_api_key, get_bearer_token
from chirpy.auth.jwt import DEFAULT_ISSUER, create_access_token, verify_access_token
from chirpy.db.models import utcnow
from chirpy.errors import (
    ForbiddenError,
    InvalidApiKeyError,
    RefreshTokenExpiredError,
    RefreshTokenRevokedError,
)
from chirpy.services.refresh_token_service import (
    DEFAULT_REFRESH_TOKEN_TTL,
    RefreshTokenService,
)

DEFAULT_ACCESS_TOKEN_TTL = timedelta(hours=1)


def authorize_owner(principal: uuid.UUID, resource_owner: uuid.UUID) -> None:
    """Raise ForbiddenError unless principal owns the resource.

    Callers resolve the resource first (404 if missing), then call this,
    and only mutate after it returns.
    """
    if principal != resource_owner:
        raise ForbiddenError(f"user {principal} does not own this resource")


class AuthGuard:
    """Session and service-call authentication."""

    def __init__(
        self,
        token_secret: str,
        api_key: str,
        access_token_ttl: timedelta = DEFAULT_ACCESS_TOKEN_TTL,
        refresh_token_ttl: timedelta = DEFAULT_REFRESH_TOKEN_TTL,
        issuer: str = DEFAULT_ISSUER,
    ):
        if not token_secret:
            raise ValueError("token_secret must not be empty")
        self._token_secret = token_secret
        self._api_key = api_key
        self.access_token_ttl = access_token_ttl
        self.refresh_token_ttl = refresh_token_ttl
        self.issuer = issuer

    @classmethod
    def from_settings(cls, settings) -> "AuthGuard":
        return cls(
            token_secret=settings.jwt_secret,
            api_key=settings.polka_key,
            access_token_ttl=timedelta(seconds=settings.access_token_expire_seconds),
            refresh_token_ttl=timedelta(days=settings.refresh_token_expire_days),
            issuer=settings.jwt_issuer,
        )

    # ─── Access tokens ──────────────────────────────────

    def issue_access_token(self, user_id: uuid.UUID) -> str:
        return create_access_token(
            user_id, self._token_secret, self.access_token_ttl, issuer=self.issuer
        )

    def authenticate_session(self, headers: Mapping[str, str]) -> uuid.UUID:
        """Resolve "Authorization: Bearer <access token>" to a user id."""
        token = get_bearer_token(headers)
        return verify_access_token(token, self._token_secret, issuer=self.issuer)

    # ─── Refresh exchange ───────────────────────────────

    async def exchange(self, refresh_token: str, store: RefreshTokenService) -> str:
        """Trade a refresh token for a new access token.

        The refresh token is neither rotated nor consumed; it stays usable
        until it expires or is revoked. Raises RefreshTokenNotFoundError,
        RefreshTokenExpiredError or RefreshTokenRevokedError.
        """
        record = await store.lookup(refresh_token)
        if record.is_expired(utcnow()):
            raise RefreshTokenExpiredError("refresh token has expired")
        if record.is_revoked:
            raise RefreshTokenRevokedError("refresh token has been revoked")
        return self.issue_access_token(record.user_id)

    # ─── Service calls (webhooks) ───────────────────────

    def authenticate_service_call(self, headers: Mapping[str, str]) -> None:
        """Check "Authorization: ApiKey <key>" against the configured key."""
        presented = get_api_key(headers)
        if not self._api_key or not hmac.compare_digest(
            presented.encode("utf-8"), self._api_key.encode("utf-8")
        ):
            raise InvalidApiKeyError("api key mismatch")
