"""
Security utilities for password hashing and JWT token management.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import ValidationError

from passlib.context import CryptContext

from authcore.exceptions import InvalidToken
from authcore.schemas.auth import TokenPayload

# Unsalted hex SHA-256, so the same password always yields the same digest
pwd_context = CryptContext(schemes=["hex_sha256"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Digest a password (UTF-8) to the 64-char hex SHA-256 stored on the user."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, password_digest: str) -> bool:
    """
    Check a login password against a stored digest.

    The supplied password is digested the same way as at registration and
    the two digests are compared in constant time.
    """
    return pwd_context.verify(plain_password, password_digest)


def create_access_token(
    secret: str,
    user_id: str,
    algorithm: str = "HS256",
    expires_delta: Optional[timedelta] = None,
    issued_at: Optional[datetime] = None,
) -> str:
    """
    Create a signed session token for a user.

    Args:
        secret: Signing secret
        user_id: Unique user identifier, stored as the ``sub`` claim
        algorithm: JWS algorithm
        expires_delta: Token lifetime; no ``exp`` claim when None
        issued_at: Issue time, defaults to now. Kept with sub-second
            precision in ``iat`` so it can be compared with the user's
            credentials change marker.

    Returns:
        Encoded JWT token string
    """
    now = issued_at or datetime.now(timezone.utc)
    payload = {"sub": user_id, "iat": now.timestamp()}
    if expires_delta is not None:
        payload["exp"] = now + expires_delta

    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(secret: str, token: str, algorithm: str = "HS256") -> TokenPayload:
    """
    Verify and decode a session token.

    Claims beyond sub/iat/exp are ignored.

    Raises:
        InvalidToken: If the signature does not match, the token is
            malformed or expired, or the claim has no subject
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
        return TokenPayload.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        raise InvalidToken() from exc
