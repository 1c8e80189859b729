"""Password hashing and verification using bcrypt directly."""

import bcrypt

# bcrypt ignores everything past 72 bytes; newer releases raise instead.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a plain-text password with a fresh salt."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if ``plain_password`` matches ``hashed_password``."""
    return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
