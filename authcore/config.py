"""
Construction-time configuration for the authentication core.
"""
from typing import Optional

from pydantic import BaseModel, Field


class DatabaseOptions(BaseModel):
    """MongoDB connection options."""

    uri: str = Field(default="mongodb://localhost:27017", description="MongoDB connection URI")
    name: str = Field(default="auth", description="Database holding the users collection")
    ready_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="How long a store call waits for the connection to become ready",
    )


class JWTOptions(BaseModel):
    """Session token options."""

    secret: str = Field(..., min_length=1, description="Signing secret")
    cookie: str = Field(default="auth.token", description="Session cookie name")
    algorithm: str = "HS256"
    expire_minutes: Optional[int] = Field(
        default=60 * 24 * 7,
        gt=0,
        description="Token lifetime in minutes, None for tokens without expiry",
    )


class AuthOptions(BaseModel):
    """Top-level options passed to AuthService."""

    domain: str = Field(..., description="Cookie domain scope")
    database: DatabaseOptions = Field(default_factory=DatabaseOptions)
    jwt: JWTOptions
