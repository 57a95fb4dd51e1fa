from sqlalchemy import JSON, Column, DateTime, String

from wocuum.db import Base


class SessionRecord(Base):
    """Server-side session row, looked up by the id carried in the session cookie."""

    __tablename__ = "session"

    sid = Column(String, primary_key=True)
    sess = Column(JSON, nullable=False)
    expire = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<SessionRecord {self.sid[:8]}... (expire={self.expire})>"
