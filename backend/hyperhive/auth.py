"""User accounts, password hashing and bearer tokens."""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.orm import Session

from .auth_models import AuthPayload, LoginRequest, SignupRequest, UserPayload
from .config import Settings, get_settings
from .db.models import UserModel
from .errors import ConflictError, UnauthorizedError, ValidationFailure

logger = logging.getLogger(__name__)

HASH_ALGORITHM = "pbkdf2_sha256"
HASH_ITERATIONS = 120_000
TOKEN_ALGORITHM = "HS256"
MIN_PASSWORD_LENGTH = 6
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")


def hash_password(password: str, *, iterations: int = HASH_ITERATIONS) -> str:
    """One-way hash with a fresh random salt, encoded as ``algorithm$iterations$salt$digest``."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), iterations)
    return f"{HASH_ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt, expected = encoded.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != HASH_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), rounds)
    return hmac.compare_digest(digest.hex(), expected)


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_PATTERN.match(email))


def create_access_token(settings: Settings, user: UserPayload) -> Tuple[str, datetime]:
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=settings.jwt_expiry_minutes)
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "name": f"{user.first_name} {user.last_name}",
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": expires_at,
        "jti": secrets.token_hex(8),
    }
    token = jwt.encode(claims, settings.require("jwt_secret_key"), algorithm=TOKEN_ALGORITHM)
    return token, expires_at


def decode_access_token(settings: Settings, token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(
            token,
            settings.require("jwt_secret_key"),
            algorithms=[TOKEN_ALGORITHM],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except jwt.PyJWTError as exc:
        raise UnauthorizedError("Invalid or expired token") from exc


def _to_payload(model: UserModel) -> UserPayload:
    return UserPayload(
        id=model.id,
        email=model.email,
        first_name=model.first_name,
        last_name=model.last_name,
        created_at=model.created_at,
    )


class UserService:
    def __init__(self, session: Session, settings: Settings) -> None:
        self._session = session
        self._settings = settings

    def get_active_by_email(self, email: str) -> Optional[UserModel]:
        stmt = select(UserModel).where(UserModel.email == email, UserModel.is_active.is_(True))
        return self._session.execute(stmt).scalar_one_or_none()

    def signup(self, request: SignupRequest) -> AuthPayload:
        if not all(value.strip() for value in (request.email, request.password, request.first_name, request.last_name)):
            raise ValidationFailure("All fields are required")
        if not is_valid_email(request.email):
            raise ValidationFailure("Invalid email format")
        if len(request.password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailure(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if self.get_active_by_email(request.email) is not None:
            raise ConflictError("User with this email already exists")

        model = UserModel(
            email=request.email,
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            is_active=True,
        )
        self._session.add(model)
        self._session.flush()
        logger.info("Registered user %s", model.id)
        return self._issue(model)

    def login(self, request: LoginRequest) -> AuthPayload:
        if not request.email.strip() or not request.password.strip():
            raise ValidationFailure("Email and password are required")
        model = self.get_active_by_email(request.email)
        if model is None or not verify_password(request.password, model.password_hash):
            raise UnauthorizedError("Invalid email or password")
        return self._issue(model)

    def _issue(self, model: UserModel) -> AuthPayload:
        user = _to_payload(model)
        token, expires_at = create_access_token(self._settings, user)
        return AuthPayload(token=token, user=user, expires_at=expires_at)


def require_authenticated_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> Optional[Dict[str, Any]]:
    """Bearer-token guard; a no-op returning None while HYPERHIVE_AUTH_ENABLED is off."""
    if not settings.auth_enabled:
        return None
    if not authorization:
        raise UnauthorizedError("Missing authorization token")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError("Invalid authorization header format. Use 'Bearer <token>'")
    return decode_access_token(settings, parts[1])


__all__ = [
    "UserService",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "is_valid_email",
    "require_authenticated_user",
    "verify_password",
]
