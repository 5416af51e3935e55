"""
User models for the auth database.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field

from authcore.database.connections import DatabaseAdapter


class User(BaseModel):
    """
    Public identity record.

    Built from a users document; the password digest and any other
    store-internal fields are dropped on the way in.
    """
    id: str = Field(..., alias="_id", description="MongoDB ObjectId as string")
    email: str = Field(..., description="Unique email address")
    username: str = Field(..., description="Unique username")
    name: str = Field(default="", description="Display name")
    pfp: str = Field(default="", description="Profile picture reference")

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "User":
        return cls.model_validate(DatabaseAdapter.transform_id(doc))


class UserInDB(User):
    """User document as stored in auth.users, including credential fields."""
    password_digest: str = Field(..., description="Hex SHA-256 digest of the password")
    credentials_changed_at: Optional[float] = Field(
        None,
        description="Unix time of the last password change; tokens issued earlier are rejected",
    )

    def to_user(self) -> User:
        return User.model_validate(self.model_dump(include=set(User.model_fields)))
