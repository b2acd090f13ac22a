import os
import hmac
import hashlib
import base64
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Header, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from core.config import Settings
from core.db import get_session
from core.errors import InvalidSession, InvalidToken, NotFoundError, Unauthenticated
from models.models_user import User

logger = logging.getLogger("pagewatch.auth")

HASH_SCHEME = "pbkdf2_sha256"


def _pbkdf2(password: str, salt: str, iterations: int) -> str:
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return base64.b64encode(dk).decode("utf-8")


def hash_password(password: str, iterations: int = 100_000, salt: Optional[str] = None) -> str:
    if not salt:
        salt = base64.b64encode(os.urandom(16)).decode("utf-8")
    return f"{HASH_SCHEME}${iterations}${salt}${_pbkdf2(password, salt, iterations)}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        scheme, iterations, salt, digest = password_hash.split("$", 3)
        if scheme != HASH_SCHEME:
            return False
        candidate = _pbkdf2(password, salt, int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(candidate, digest)


def create_token(user_id: int, settings: Settings, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=settings.token_ttl_days)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session(token: str, settings: Settings) -> int:
    """Return the user id embedded in a valid, unexpired token."""
    try:
        data = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
        return int(data["sub"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as e:
        raise InvalidSession() from e


@dataclass(frozen=True)
class CurrentUser:
    id: int
    full_name: str
    email: str


@dataclass(frozen=True)
class RequestContext:
    user: CurrentUser


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_request_context(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
    s: Session = Depends(get_session),
) -> RequestContext:
    if not authorization:
        raise Unauthenticated()
    token = authorization[7:] if authorization.lower().startswith("bearer ") else authorization
    try:
        uid = verify_session(token.strip(), settings)
    except InvalidSession:
        raise InvalidToken()
    user = s.scalar(select(User).where(User.id == uid).limit(1))
    if not user:
        logger.info("token subject %s no longer exists", uid)
        raise NotFoundError("User not found")
    return RequestContext(user=CurrentUser(id=user.id, full_name=user.full_name, email=user.email))
