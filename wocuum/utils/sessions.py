"""
Server-side sessions.

Session payloads live in the ``session`` table. The cookie only carries the
session id, signed with SESSION_SECRET so ids cannot be guessed or forged.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from jose import JWSError, jws
from sqlalchemy.orm import Session

from wocuum.db import utcnow
from wocuum.models.session import SessionRecord

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def generate_session_id() -> str:
    return secrets.token_urlsafe(32)


def sign_session_id(session_id: str, secret: str) -> str:
    return jws.sign(session_id.encode("utf-8"), secret, algorithm=ALGORITHM)


def unsign_session_id(token: str, secret: str) -> Optional[str]:
    """Return the session id inside a signed cookie value, or None if it was tampered with."""
    try:
        return jws.verify(token, secret, algorithms=[ALGORITHM]).decode("utf-8")
    except (JWSError, UnicodeDecodeError):
        return None


@dataclass
class RequestContext:
    """Who is making the request, resolved once from the session cookie."""

    session_id: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def from_session(cls, session_id: str, data: dict) -> "RequestContext":
        return cls(
            session_id=session_id,
            user_id=data.get("userId"),
            email=data.get("email"),
            role=data.get("role"),
        )


class SessionStore:
    def __init__(self, db: Session, max_age_seconds: int):
        self.db = db
        self.max_age = timedelta(seconds=max_age_seconds)

    def create(self, data: dict) -> str:
        session_id = generate_session_id()
        record = SessionRecord(sid=session_id, sess=data, expire=utcnow() + self.max_age)
        self.db.add(record)
        self.db.commit()
        return session_id

    def get(self, session_id: str) -> Optional[dict]:
        record = self.db.query(SessionRecord).filter(SessionRecord.sid == session_id).first()
        if record is None:
            return None
        if record.expire < utcnow():
            # expired
            self.db.delete(record)
            self.db.commit()
            return None
        return dict(record.sess)

    def destroy(self, session_id: str) -> None:
        deleted = self.db.query(SessionRecord).filter(SessionRecord.sid == session_id).delete()
        self.db.commit()
        if deleted:
            logger.debug(f"Destroyed session {session_id[:8]}...")

    def cleanup_expired(self) -> int:
        deleted = self.db.query(SessionRecord).filter(SessionRecord.expire < utcnow()).delete()
        self.db.commit()
        return deleted
