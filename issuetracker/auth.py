import os
import time
import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional, Union
from fastapi import Request
from jose import jwt, JWTError
from sqlmodel import Session, select

from .accounts.models import User
from .db import get_session
from .exceptions import AuthenticationFailed, AuthorizationDenied, LoginRequired
from .logging_config import set_username
from .models import ADMIN_ROLE, RequestContext

logger = logging.getLogger(__name__)

SESSION_SECRET = os.getenv("SESSION_SECRET", "issues-secret")
SESSION_ALG = os.getenv("SESSION_ALG", "HS256")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(60*60*8)))
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "issues_session")


def authenticate_user(s: Session, username: str, password: str) -> User:
    user = s.exec(select(User).where(User.username == username)).first()
    if not user:
        raise AuthenticationFailed("Incorrect username")
    if user.password != password:
        raise AuthenticationFailed("Incorrect password")
    return user


def create_session_token(user: User) -> str:
    now = int(time.time())
    payload = {
        "sub": str(user.id),
        "exp": now + SESSION_MAX_AGE,
        "iat": now,
    }
    return jwt.encode(payload, SESSION_SECRET, algorithm=SESSION_ALG)


def decode_session_token(token: str) -> Optional[int]:
    """Return the user id stored in ``token``, or None if it is unusable."""
    try:
        payload = jwt.decode(token, SESSION_SECRET, algorithms=[SESSION_ALG])
    except JWTError:
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def current_user(request: Request) -> User:
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        raise LoginRequired()
    user_id = decode_session_token(token)
    if user_id is None:
        raise LoginRequired("Invalid session")
    with get_session() as s:
        user = s.get(User, user_id)
    if user is None:
        logger.warning("Session refers to missing user id %s", user_id)
        raise LoginRequired("Unknown session user")
    return user


# Role requirements for a route

@dataclass(frozen=True)
class AnyRole:
    pass


@dataclass(frozen=True)
class Exactly:
    role: str


@dataclass(frozen=True)
class OneOf:
    roles: FrozenSet[str]


RequiredRole = Union[AnyRole, Exactly, OneOf]

ADMIN = Exactly(ADMIN_ROLE)


def role_allows(required: RequiredRole, role: str) -> bool:
    if isinstance(required, AnyRole):
        return True
    if isinstance(required, Exactly):
        return role == required.role
    if isinstance(required, OneOf):
        return role in required.roles
    raise TypeError(f"Unknown role requirement: {required!r}")


def require(required: RequiredRole = AnyRole()):
    """Build a dependency that resolves the session and checks its role."""
    async def dependency(request: Request) -> RequestContext:
        user = current_user(request)
        set_username(user.username)
        if not role_allows(required, user.role):
            logger.warning("Role %r denied for %s %s", user.role, request.method, request.url.path)
            raise AuthorizationDenied(f"Role '{user.role}' may not access this page")
        return RequestContext(user_id=user.id, username=user.username, role=user.role)
    return dependency
