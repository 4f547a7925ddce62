"""Security primitives for password workflows."""

from __future__ import annotations

import hashlib
import hmac
import secrets

TEMP_PASSWORD_CHARSET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!@#$%^&*"
_PBKDF2_ITERATIONS = 120_000


def hash_password(password: str, salt: str | None = None) -> str:
    """Return ``salt$digest`` using PBKDF2-SHA256."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, hashed_password: str) -> bool:
    """Constant-time comparison for hashed password values."""
    salt, sep, _ = hashed_password.partition("$")
    if not sep:
        return False
    candidate = hash_password(password=password, salt=salt)
    return hmac.compare_digest(candidate, hashed_password)


def generate_temp_password(length: int = 12) -> str:
    return "".join(secrets.choice(TEMP_PASSWORD_CHARSET) for _ in range(length))
