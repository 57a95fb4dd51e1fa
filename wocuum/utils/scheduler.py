import asyncio
import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from wocuum.utils.sessions import SessionStore

logger = logging.getLogger(__name__)


class SessionSweeper:
    """
    Periodically deletes expired rows from the session table.

    Expired sessions are already refused when read, so the sweep only keeps
    the table small. A failed sweep is logged and retried on the next tick.
    """

    def __init__(self, session_factory: Callable[[], Session], interval_seconds: int, max_age_seconds: int):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.max_age_seconds = max_age_seconds
        self._task: Optional[asyncio.Task] = None

    def sweep(self) -> int:
        """Run one cleanup pass and return the number of sessions removed."""
        db = self.session_factory()
        try:
            deleted = SessionStore(db, self.max_age_seconds).cleanup_expired()
            logger.info(f"Expired sessions cleaned up. Deleted: {deleted} sessions")
            return deleted
        except Exception as e:
            logger.error(f"Failed to cleanup expired sessions: {e}", exc_info=True)
            return 0
        finally:
            db.close()

    def start(self):
        if self.is_running():
            logger.warning("Session sweeper is already running")
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Session cleanup scheduler started (every {self.interval_seconds}s)")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Session cleanup scheduler stopped")

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self):
        while True:
            await asyncio.to_thread(self.sweep)
            await asyncio.sleep(self.interval_seconds)
