"""
Core module - password hashing and session token utilities.
"""
from authcore.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
