import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.auth import create_token, hash_password, verify_password
from core.config import Settings
from core.errors import DuplicateEmail, InvalidCredentials
from models.models_user import User

logger = logging.getLogger("pagewatch.users")


def signup(s: Session, settings: Settings, full_name: str, email: str, password: str) -> str:
    ph = hash_password(password, iterations=settings.password_iterations)
    try:
        with s.begin():
            existing = s.scalar(select(User.id).where(User.email == email).limit(1))
            if existing is not None:
                raise DuplicateEmail()
            u = User(full_name=full_name, email=email, password_hash=ph)
            s.add(u)
            s.flush()
            user_id = u.id
    except IntegrityError:
        # lost the race against a concurrent signup; the unique constraint caught it
        logger.info("signup rejected by unique constraint for %s", email)
        raise DuplicateEmail()
    except DuplicateEmail:
        logger.info("signup rejected, email already registered: %s", email)
        raise
    logger.info("user %s signed up", user_id)
    return create_token(user_id, settings)


def login(s: Session, settings: Settings, email: str, password: str) -> str:
    u = s.scalar(select(User).where(User.email == email).limit(1))
    if not u or not verify_password(password, u.password_hash):
        raise InvalidCredentials()
    logger.info("user %s logged in", u.id)
    return create_token(u.id, settings)
