"""JWT access token creation and verification.

Access tokens are HS256-signed and carry the issuer, issued-at,
expiry and the user id as subject. Verification is fully stateless: no
revocation list is consulted, so a token is good until it expires.
Refresh tokens are not JWTs (see chirpy.services.refresh_token_service).
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from chirpy.errors import InvalidSignatureError, MalformedSubjectError, TokenExpiredError

ALGORITHM = "HS256"
DEFAULT_ISSUER = "chirpy"


def create_access_token(
    user_id: uuid.UUID,
    secret: str,
    expires_in: timedelta,
    issuer: str = DEFAULT_ISSUER,
) -> str:
    """Create a signed access token for user_id.

    Each token gets a random jti, so two tokens issued in the same second
    for the same user are still distinct.
    """
    issued_at = datetime.now(timezone.utc).replace(microsecond=0)
    payload = {
        "iss": issuer,
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + expires_in,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_access_token(
    token: str,
    secret: str,
    issuer: Optional[str] = None,
) -> uuid.UUID:
    """Verify an access token and return its subject.

    Raises TokenExpiredError, InvalidSignatureError or MalformedSubjectError.
    The signature is checked before any claim.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            issuer=issuer,
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("access token has expired") from e
    except jwt.exceptions.InvalidSubjectError as e:
        raise MalformedSubjectError(f"access token subject is not a string: {e}") from e
    except jwt.InvalidTokenError as e:
        raise InvalidSignatureError(f"invalid access token: {e}") from e

    try:
        return uuid.UUID(str(payload.get("sub", "")))
    except ValueError as e:
        raise MalformedSubjectError("access token subject is not a user id") from e
