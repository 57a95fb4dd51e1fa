import logging

from fastapi import Depends, Request, Response
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from wocuum.config import Settings, get_settings
from wocuum.db import get_db
from wocuum.errors import AuthenticationFailed
from wocuum.utils.sessions import RequestContext, SessionStore, sign_session_id, unsign_session_id

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password, hashed_password):
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    """Hash a password for storage."""
    return pwd_context.hash(password)


def get_session_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SessionStore:
    return SessionStore(db, settings.SESSION_MAX_AGE_SECONDS)


def get_request_context(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
) -> RequestContext:
    """Resolve the session cookie into a request context; anonymous if anything is off."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return RequestContext()

    session_id = unsign_session_id(token, settings.SESSION_SECRET)
    if session_id is None:
        logger.warning("Ignoring session cookie with an invalid signature")
        return RequestContext()

    data = store.get(session_id)
    if data is None:
        return RequestContext()
    return RequestContext.from_session(session_id, data)


def require_auth(context: RequestContext = Depends(get_request_context)) -> RequestContext:
    if not context.is_authenticated:
        raise AuthenticationFailed("Authentication required")
    return context


def set_session_cookie(response: Response, session_id: str, settings: Settings):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=sign_session_id(session_id, settings.SESSION_SECRET),
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


def clear_session_cookie(response: Response, settings: Settings):
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
