"""Authentication and authorization.

Two authentication paths:
1. Users → email/password → signed JWT access token + opaque refresh token
2. Webhook callers (Polka) → static API key in the Authorization header

Access tokens resolve to a user id (the principal). Ownership checks
compare that principal against the owner of the resource being mutated.
"""
