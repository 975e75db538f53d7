"""
Authentication and authorization
Cookie sessions: the session id lives server-side in the storage's session
store, the cookie carries it inside a signed JWT.
"""
import bcrypt
import logging
import secrets
from datetime import datetime, timedelta, UTC
from typing import Optional
from fastapi import Depends, HTTPException, status, Request, Response
from jose import JWTError, jwt
from stayease.config import Settings
from stayease.models.entities import User
from stayease.storage.base import Storage
from stayease.storage.selector import get_storage

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def get_password_hash(password: str) -> str:
    """Hash a password"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its hash"""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False


def get_app_settings(request: Request) -> Settings:
    """Dependency: settings the application was built with"""
    return request.app.state.settings


def create_session_token(sid: str, settings: Settings) -> str:
    """Sign a session id into the cookie value"""
    expire = datetime.now(UTC) + timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS)
    return jwt.encode({"sid": sid, "exp": expire}, settings.SESSION_SECRET, algorithm=ALGORITHM)


def decode_session_token(token: str, settings: Settings) -> Optional[str]:
    """Session id from a cookie value, or None when invalid or expired"""
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None
    return payload.get("sid")


async def start_session(response: Response, user: User, storage: Storage,
                        settings: Settings) -> str:
    """Create a session for the user and set the cookie"""
    sid = secrets.token_urlsafe(32)
    await storage.session_store.set(sid, {"user_id": user.id})
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(sid, settings),
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    return sid


async def end_session(request: Request, response: Response, storage: Storage,
                      settings: Settings) -> None:
    """Destroy the current session, if any, and clear the cookie"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    sid = decode_session_token(token, settings) if token else None
    if sid:
        await storage.session_store.destroy(sid)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, httponly=True, samesite="lax")


async def get_optional_user(
    request: Request,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
) -> Optional[User]:
    """The logged-in user, or None for anonymous requests"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None

    sid = decode_session_token(token, settings)
    if sid is None:
        return None

    session = await storage.session_store.get(sid)
    if not session:
        return None

    user = await storage.get_user(session["user_id"])
    if user is None:
        logger.warning("Session refers to a user that no longer exists")
    return user


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Get the logged-in user"""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return user


async def require_admin(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Admin-only endpoints"""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Admin access required"
        )
    return user
