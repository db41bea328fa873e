"""Password hashing utilities.

Uses bcrypt. bcrypt salts automatically and its checkpw does the
comparison, so plaintexts are never compared directly.
"""

import bcrypt

BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt. Hashes start with "$2b$"."""
    pw_bytes = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its stored hash.

    A malformed hash is reported as a plain mismatch so that callers
    cannot distinguish the two.
    """
    try:
        pw_bytes = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError, AttributeError):
        return False
