"""
Request/response schemas.
"""
from authcore.schemas.auth import (
    AuthResponse,
    RegisterRequest,
    TokenPayload,
    UserUpdate,
)

__all__ = ["AuthResponse", "RegisterRequest", "TokenPayload", "UserUpdate"]
