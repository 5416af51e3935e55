"""
Authentication service: user records, credentials and cookie sessions.
"""
import logging
from datetime import datetime, timedelta, timezone
from http.cookies import SimpleCookie
from typing import Any, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request, Response
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError
from pymongo.errors import DuplicateKeyError

from authcore.config import AuthOptions
from authcore.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from authcore.database.connections import DatabaseAdapter
from authcore.database.databases import auth_db
from authcore.exceptions import (
    InvalidCredentials,
    InvalidToken,
    UserAlreadyExists,
    UserNotFound,
)
from authcore.models.user import User, UserInDB
from authcore.schemas.auth import AuthResponse, RegisterRequest, UserUpdate

logger = logging.getLogger(__name__)

USERS = auth_db.Collections.USERS


def _identifier_query(email: Optional[str], username: Optional[str]) -> dict[str, Any]:
    clauses = []
    if email is not None:
        clauses.append({"email": email})
    if username is not None:
        clauses.append({"username": username})
    return {"$or": clauses}


def _normalize_email(identifier: str) -> str:
    """Normalize an identifier the way EmailStr does on storage; non-emails pass through."""
    try:
        return validate_email(identifier)[1]
    except PydanticCustomError:
        return identifier


def _login_query(identifier: str) -> dict[str, Any]:
    return _identifier_query(_normalize_email(identifier), identifier)


class AuthService:
    """
    Session manager.

    Holds no per-session state: every call is a short sequence of store
    round trips plus hashing and token work. The store adapter is injected
    so one connection can be shared across the process.
    """

    def __init__(
        self,
        options: Union[AuthOptions, dict],
        db: Optional[DatabaseAdapter] = None,
    ):
        """
        Args:
            options: Domain, database and token options
            db: Shared store adapter; built from ``options.database`` when None
        """
        if isinstance(options, dict):
            options = AuthOptions(**options)
        self.options = options
        self.db = db or DatabaseAdapter(options.database)
        self.domain = options.domain
        self.cookie_name = options.jwt.cookie

    async def connect(self) -> None:
        await self.db.connect()

    async def close(self) -> None:
        await self.db.close()

    # -------------------------------------------------------------------------
    # Tokens and cookies
    # -------------------------------------------------------------------------

    def generate_token(self, user: User, issued_at: Optional[datetime] = None) -> str:
        """Issue a signed session token whose subject is ``user.id``."""
        jwt_options = self.options.jwt
        expires_delta = None
        if jwt_options.expire_minutes is not None:
            expires_delta = timedelta(minutes=jwt_options.expire_minutes)
        return create_access_token(
            jwt_options.secret,
            user.id,
            algorithm=jwt_options.algorithm,
            expires_delta=expires_delta,
            issued_at=issued_at,
        )

    def get_cookie_string(self, token: str) -> str:
        """
        Build a ``Set-Cookie`` header value carrying ``token``.

        An empty token produces a clearing cookie with ``Max-Age=0``.
        """
        cookie: SimpleCookie = SimpleCookie()
        cookie[self.cookie_name] = token
        morsel = cookie[self.cookie_name]
        morsel["domain"] = self.domain
        morsel["path"] = "/"
        morsel["httponly"] = True
        morsel["secure"] = True
        morsel["samesite"] = "Strict"
        if not token:
            morsel["max-age"] = 0
        return cookie.output(header="").strip()

    # -------------------------------------------------------------------------
    # User lifecycle
    # -------------------------------------------------------------------------

    async def register(self, credentials: Union[RegisterRequest, dict]) -> AuthResponse:
        """
        Register a new user and issue a token for it.

        Args:
            credentials: email, username, password and optional name/pfp

        Returns:
            AuthResponse with the new token and public user

        Raises:
            UserAlreadyExists: If the email or username is taken
        """
        if isinstance(credentials, dict):
            credentials = RegisterRequest(**credentials)

        existing = await self.db.find(
            USERS, _identifier_query(credentials.email, credentials.username)
        )
        if existing:
            raise UserAlreadyExists()

        user_doc = credentials.model_dump(exclude={"password"})
        user_doc["password_digest"] = hash_password(credentials.password)
        changed_at = datetime.now(timezone.utc)
        user_doc["credentials_changed_at"] = changed_at.timestamp()

        # The unique indexes catch a concurrent registration that passed the check above
        try:
            inserted_id = await self.db.insert_one(USERS, user_doc)
        except DuplicateKeyError as exc:
            raise UserAlreadyExists() from exc

        user = User.from_document({**user_doc, "_id": inserted_id})
        logger.info(f"Registered user {user.id}")

        return AuthResponse(token=self.generate_token(user, issued_at=changed_at), user=user)

    async def check_identifier(self, identifier: str) -> bool:
        """Whether any user already uses ``identifier`` as email or username."""
        users = await self.db.find(USERS, _login_query(identifier))
        return len(users) > 0

    async def authenticate(self, identifier: str, password: str) -> AuthResponse:
        """
        Authenticate by email or username and password.

        Raises:
            InvalidCredentials: If no user matches or the password is wrong.
                The two cases are indistinguishable to the caller.
        """
        candidates = await self.db.find(USERS, _login_query(identifier))

        for doc in candidates:
            record = UserInDB.from_document(doc)
            if verify_password(password, record.password_digest):
                user = record.to_user()
                return AuthResponse(token=self.generate_token(user), user=user)

        logger.warning("Failed authentication attempt")
        raise InvalidCredentials()

    async def update_user(
        self, user_id: str, update: Union[UserUpdate, dict]
    ) -> AuthResponse:
        """
        Apply a partial update to a user and re-issue its token.

        A ``password`` key is stored as a fresh digest and invalidates
        tokens issued before the change. The id itself is never updated.

        Raises:
            UserNotFound: If no user has ``user_id``
            UserAlreadyExists: If the new email or username belongs to another user
        """
        if isinstance(update, dict):
            update = UserUpdate(**update)

        object_id = self._object_id(user_id, UserNotFound)
        users = await self.db.find(USERS, {"_id": object_id})
        if not users:
            raise UserNotFound()

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        changed_at = None

        if "email" in changes or "username" in changes:
            query = _identifier_query(changes.get("email"), changes.get("username"))
            query["_id"] = {"$ne": object_id}
            if await self.db.find(USERS, query):
                raise UserAlreadyExists()

        if "password" in changes:
            changes["password_digest"] = hash_password(changes.pop("password"))
            changed_at = datetime.now(timezone.utc)
            changes["credentials_changed_at"] = changed_at.timestamp()

        if changes:
            try:
                await self.db.update_one(USERS, {"_id": object_id}, {"$set": changes})
            except DuplicateKeyError as exc:
                raise UserAlreadyExists() from exc
            logger.info(f"Updated user {user_id}: {sorted(changes)}")

        # Issued at the marker itself, so the new token outlives the change it follows
        user = User.from_document({**users[0], **changes})
        return AuthResponse(token=self.generate_token(user, issued_at=changed_at), user=user)

    async def delete_user(self, user_id: str) -> bool:
        """
        Delete a user.

        Raises:
            UserNotFound: If no user has ``user_id``
        """
        object_id = self._object_id(user_id, UserNotFound)
        users = await self.db.find(USERS, {"_id": object_id})
        if not users:
            raise UserNotFound()

        deleted = await self.db.delete_one(USERS, {"_id": object_id})
        logger.info(f"Deleted user {user_id}")
        return deleted

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def get_user(self, token: str) -> User:
        """
        Resolve a session token to the live user it was issued for.

        Raises:
            InvalidToken: If the token does not verify, is older than the
                user's last password change, or its user no longer exists
        """
        jwt_options = self.options.jwt
        claim = decode_token(jwt_options.secret, token, algorithm=jwt_options.algorithm)

        object_id = self._object_id(claim.id, InvalidToken)
        users = await self.db.find(USERS, {"_id": object_id})
        if not users:
            raise InvalidToken()

        record = UserInDB.from_document(users[0])
        if record.credentials_changed_at is not None:
            if claim.iat is None or claim.iat < record.credentials_changed_at:
                raise InvalidToken()

        return record.to_user()

    async def read_session(self, request: Request) -> Optional[User]:
        """
        Return the user for the request's session cookie.

        A missing or invalid session is a normal outcome and yields None.
        """
        token = request.cookies.get(self.cookie_name)
        if not token:
            return None

        try:
            return await self.get_user(token)
        except InvalidToken:
            logger.debug("Rejected session cookie")
            return None

    def write_session(self, response: Response, user: Optional[User]) -> None:
        """
        Set the session cookie for ``user`` on ``response``, or clear it
        when ``user`` is None.
        """
        cookie_args = dict(
            key=self.cookie_name,
            path="/",
            domain=self.domain,
            secure=True,
            httponly=True,
            samesite="Strict",
        )
        if user is None:
            response.set_cookie(value="", max_age=0, **cookie_args)
        else:
            response.set_cookie(value=self.generate_token(user), **cookie_args)

    @staticmethod
    def _object_id(user_id: str, error: type) -> ObjectId:
        try:
            return ObjectId(user_id)
        except (InvalidId, TypeError) as exc:
            raise error() from exc
