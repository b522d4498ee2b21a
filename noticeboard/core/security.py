"""Security helpers (hashing and verification)."""

from __future__ import annotations

from argon2 import PasswordHasher, exceptions as argon_exc, extract_parameters

_ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Create an Argon2 hash suitable for ADMIN_PASSWORD_HASH."""
    return _ph.hash(password)


def is_valid_hash(stored_hash: str | None) -> bool:
    """True when ``stored_hash`` is a well-formed Argon2 encoded hash."""
    if not stored_hash:
        return False
    try:
        extract_parameters(stored_hash)
    except argon_exc.InvalidHashError:
        return False
    return True


def verify_password(password: str, stored_hash: str | None) -> bool:
    if not stored_hash:
        return False
    try:
        return _ph.verify(stored_hash, password or "")
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False
