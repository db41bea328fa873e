"""Error taxonomy shared by the auth core, services and API layer.

Every failure the service reports is one of these classes. Each class
carries a coarse ErrorKind, the HTTP status it maps to and a terse public
message. The exception message (str(exc)) is internal detail: it is logged
server-side and never sent to the client, so callers cannot tell a bad
signature from an expired token or a wrong API key.
"""

from enum import Enum


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    INTERNAL = "internal"


class ChirpyError(Exception):
    """Base class for all expected failures."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    public_message: str = "Internal Server Error"


# ─── 401 ─────────────────────────────────────────────────


class AuthenticationError(ChirpyError):
    """No usable credential of any kind."""

    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401
    public_message = "Unauthorized"
    # Scheme named in the WWW-Authenticate challenge.
    challenge = "Bearer"

    def __init__(self, message: str = "", challenge: str | None = None):
        super().__init__(message)
        if challenge:
            self.challenge = challenge


class MissingHeaderError(AuthenticationError):
    """Authorization header absent or empty."""


class MalformedHeaderError(AuthenticationError):
    """Authorization header does not start with the expected scheme."""


class EmptyCredentialError(AuthenticationError):
    """Nothing follows the scheme prefix."""


class InvalidSignatureError(AuthenticationError):
    """Access token signature does not verify (or the token is not a JWT)."""


class TokenExpiredError(AuthenticationError):
    """Access token is past its expiry."""


class MalformedSubjectError(AuthenticationError):
    """Access token subject is not a user id."""


class InvalidApiKeyError(AuthenticationError):
    """Service caller presented the wrong API key."""

    challenge = "ApiKey"


class InvalidCredentialsError(AuthenticationError):
    """Email/password login failed."""


class RefreshTokenExpiredError(AuthenticationError):
    """Refresh token is past its expiry."""


class RefreshTokenRevokedError(AuthenticationError):
    """Refresh token has been revoked."""


# ─── 403 ─────────────────────────────────────────────────


class ForbiddenError(ChirpyError):
    """Authenticated, but not allowed to touch this resource."""

    kind = ErrorKind.FORBIDDEN
    status_code = 403
    public_message = "Forbidden"


# ─── 404 ─────────────────────────────────────────────────


class NotFoundError(ChirpyError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    public_message = "Not Found"


class RefreshTokenNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class ChirpNotFoundError(NotFoundError):
    pass


# ─── 409 / 400 ───────────────────────────────────────────


class ConflictError(ChirpyError):
    kind = ErrorKind.CONFLICT
    status_code = 409
    public_message = "Conflict"


class EmailAlreadyRegisteredError(ConflictError):
    public_message = "Email already registered"


class ValidationFailedError(ChirpyError):
    """Request content is invalid. The message is safe to show."""

    kind = ErrorKind.BAD_REQUEST
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.public_message = message


# ─── 500 ─────────────────────────────────────────────────


class StoreError(ChirpyError):
    """The database failed in a way unrelated to the request itself."""
