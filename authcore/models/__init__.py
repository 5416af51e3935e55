"""
Data models.
"""
from authcore.models.user import User, UserInDB

__all__ = ["User", "UserInDB"]
