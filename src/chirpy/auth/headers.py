"""Authorization header parsing.

Two schemes share the one header:
- "Bearer <token>" for access and refresh tokens
- "ApiKey <key>" for webhook callers

Works on any mapping of header names to values: Starlette's Headers
(case-insensitive) or a plain dict in tests.
"""

from typing import Mapping

from chirpy.errors import EmptyCredentialError, MalformedHeaderError, MissingHeaderError

AUTHORIZATION = "Authorization"
BEARER_SCHEME = "Bearer"
API_KEY_SCHEME = "ApiKey"


def _authorization_value(headers: Mapping[str, str]) -> str:
    value = headers.get(AUTHORIZATION)
    if value is None:
        value = headers.get(AUTHORIZATION.lower())
    return value or ""


def extract_credential(headers: Mapping[str, str], scheme: str) -> str:
    """Return the credential that follows "<scheme> " in the header.

    Raises MissingHeaderError, MalformedHeaderError or EmptyCredentialError.
    """
    value = _authorization_value(headers)
    if not value:
        raise MissingHeaderError("authorization header not provided", challenge=scheme)

    prefix = f"{scheme} "
    if not value.startswith(prefix):
        raise MalformedHeaderError(
            f"authorization header is not a {scheme} credential", challenge=scheme
        )

    credential = value[len(prefix):]
    if not credential:
        raise EmptyCredentialError(f"{scheme} credential is empty", challenge=scheme)
    return credential


def get_bearer_token(headers: Mapping[str, str]) -> str:
    return extract_credential(headers, BEARER_SCHEME)


def get_api_key(headers: Mapping[str, str]) -> str:
    return extract_credential(headers, API_KEY_SCHEME)
