"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import logging

import bcrypt

from auth.errors import InputError, PasswordHashError
from config.settings import config

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt (auto-salted, work factor 10 by default)."""
    raw = password.encode()
    if len(raw) > MAX_PASSWORD_BYTES:
        raise InputError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    try:
        salt = bcrypt.gensalt(rounds=rounds or config.bcrypt_rounds)
        return bcrypt.hashpw(raw, salt).decode()
    except (ValueError, TypeError, OSError) as exc:
        logger.exception("Password hashing failed")
        raise PasswordHashError() from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    raw = password.encode()
    # Older bcrypt releases compare only the first 72 bytes.
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode())
    except (ValueError, TypeError):
        return False
