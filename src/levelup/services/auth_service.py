"""Credential hashing and the login check."""

from __future__ import annotations

import logging
from functools import lru_cache

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import User
from ..schemas import GENERIC_ERROR_MESSAGE, ErrorKind, Identity, ServiceResult

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."


@lru_cache(maxsize=None)
def _dummy_hash() -> str:
    """Hash checked when no user matches, so unknown usernames cost the same as wrong passwords."""

    return hash_password("levelup-dummy-password")


class InvalidCredentials(Exception):
    """Raised when a username/password pair does not identify exactly one user."""


def hash_password(plain_password: str) -> str:
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is malformed
        return False


def verify_credentials(session: Session, username: str, password: str) -> User:
    """Return the single user matching ``username`` and ``password``."""

    candidates = session.execute(select(User).where(User.username == username)).scalars().all()
    matches = [user for user in candidates if verify_password(password, user.password_hash)]
    if not candidates:
        verify_password(password, _dummy_hash())
    if len(matches) != 1:
        raise InvalidCredentials()
    return matches[0]


def authenticate(session: Session, username: str, password: str) -> ServiceResult[Identity]:
    """Check a login attempt and return the identity for the session store.

    Unknown usernames and wrong passwords produce the same result.
    """

    username = (username or "").strip()
    if not username or not password:
        return ServiceResult.fail(INVALID_CREDENTIALS_MESSAGE, ErrorKind.INVALID_CREDENTIALS, status_code=401)

    try:
        user = verify_credentials(session, username, password)
    except InvalidCredentials:
        logger.info("failed login attempt")
        return ServiceResult.fail(INVALID_CREDENTIALS_MESSAGE, ErrorKind.INVALID_CREDENTIALS, status_code=401)
    except SQLAlchemyError:
        logger.exception("login lookup failed")
        return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)

    logger.info("user %s signed in as %s", user.username, user.role.value)
    return ServiceResult.ok("Signed in.", Identity.model_validate(user))
