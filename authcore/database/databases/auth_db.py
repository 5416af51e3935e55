"""
Auth database configuration.
Stores user identity and authentication data.
"""
from motor.motor_asyncio import AsyncIOMotorDatabase


class Collections:
    """Collection names in the auth database."""
    USERS = "users"


# Fields that must be unique across all users
UNIQUE_USER_FIELDS = ("email", "username")


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create unique indexes so duplicate identifiers fail at insert time."""
    users = db[Collections.USERS]
    for field in UNIQUE_USER_FIELDS:
        await users.create_index(field, unique=True)
