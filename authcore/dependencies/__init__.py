"""
Dependencies for dependency injection in routes.
"""
from authcore.dependencies.auth import SessionUser, session_user

__all__ = ["SessionUser", "session_user"]
