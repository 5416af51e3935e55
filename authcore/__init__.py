"""
authcore - credential storage, password verification and cookie sessions
for async server applications.
"""
from authcore.config import AuthOptions, DatabaseOptions, JWTOptions
from authcore.database.connections import DatabaseAdapter
from authcore.exceptions import (
    AuthError,
    InvalidCredentials,
    InvalidToken,
    StoreNotReady,
    UserAlreadyExists,
    UserNotFound,
)
from authcore.models.user import User
from authcore.schemas.auth import AuthResponse, RegisterRequest, UserUpdate
from authcore.services.auth_service import AuthService

__version__ = "0.1.0"

__all__ = [
    "AuthOptions",
    "DatabaseOptions",
    "JWTOptions",
    "DatabaseAdapter",
    "AuthService",
    "User",
    "AuthResponse",
    "RegisterRequest",
    "UserUpdate",
    "AuthError",
    "UserAlreadyExists",
    "InvalidCredentials",
    "UserNotFound",
    "InvalidToken",
    "StoreNotReady",
]
