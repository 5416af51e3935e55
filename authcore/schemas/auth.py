"""
Authentication request/response schemas.
"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from authcore.models.user import User


class RegisterRequest(BaseModel):
    """Credentials for a new account."""
    email: EmailStr = Field(..., description="User email address (must be unique)")
    username: str = Field(..., min_length=1, description="Username (must be unique)")
    password: str = Field(..., min_length=1, description="Plain text password")
    name: str = Field(default="", description="Display name")
    pfp: str = Field(default="", description="Profile picture reference")


class UserUpdate(BaseModel):
    """
    Partial profile update.

    Only the fields explicitly set are applied. Unknown keys, ``id``
    included, are ignored.
    """
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = None
    pfp: Optional[str] = None

    class Config:
        extra = "ignore"


class AuthResponse(BaseModel):
    """Token plus the public user it was issued for."""
    token: str = Field(..., description="Signed session token")
    user: User


class TokenPayload(BaseModel):
    """Decoded session token claim."""
    id: str = Field(..., alias="sub", description="Subject (user ID)")
    iat: Optional[float] = Field(None, description="Issued at, unix seconds")
    exp: Optional[float] = Field(None, description="Expiration, unix seconds")

    class Config:
        populate_by_name = True
        extra = "ignore"
