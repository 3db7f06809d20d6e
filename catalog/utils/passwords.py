"""
Password and one-time code hashing.

Argon2id through argon2-cffi; verification never raises, it only answers
whether the candidate matches the stored hash.
"""
from __future__ import annotations

import secrets

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from argon2.low_level import Type

_argon2 = PasswordHasher(time_cost=2, memory_cost=102400, parallelism=8, hash_len=32, type=Type.ID)

RESET_CODE_LENGTH = 6


def hash_password(password: str) -> str:
    return _argon2.hash(password)


def verify_password(password: str, encoded_hash: str) -> bool:
    if not password or not encoded_hash:
        return False
    try:
        return _argon2.verify(encoded_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def generate_verification_token() -> str:
    """Return a 64-char hex token used in email verification links."""
    return secrets.token_hex(32)


def generate_reset_code(length: int = RESET_CODE_LENGTH) -> str:
    """Return a zero-padded numeric code, e.g. '042917'."""
    return "".join(secrets.choice("0123456789") for _ in range(length))
