"""
Authentication dependencies for route handlers.
"""
from typing import Annotated, Awaitable, Callable, Optional

from fastapi import Depends, Request

from authcore.models.user import User
from authcore.services.auth_service import AuthService


def session_user(auth: AuthService) -> Callable[[Request], Awaitable[Optional[User]]]:
    """
    Build a dependency resolving the request's session cookie to a user.

    The dependency yields None for anonymous requests; mapping that to a
    401 is left to the application.

    Usage:
        get_user = session_user(auth)

        @app.get("/me")
        async def me(user: Optional[User] = Depends(get_user)):
            ...
    """
    async def get_session_user(request: Request) -> Optional[User]:
        return await auth.read_session(request)

    return get_session_user


def SessionUser(auth: AuthService):
    """``Annotated`` alias for route signatures: ``user: SessionUser(auth)``."""
    return Annotated[Optional[User], Depends(session_user(auth))]
