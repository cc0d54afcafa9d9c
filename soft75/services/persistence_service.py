"""
Persistence collaborator for the challenge tracker.

Saves ChallengeState and DailyChecklist objects through the repositories.
A failed save is logged and kept pending; the in-memory objects stay
authoritative until a later save or retry_pending() succeeds.
"""
import logging
import threading
from datetime import date, datetime
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from soft75.database import SessionLocal
from soft75.domain import ChallengeState, DailyChecklist
from soft75.repositories.challenge_repository import (
    ChallengeStateRepository, DailyChecklistRepository
)

logger = logging.getLogger("soft75.persistence")


class PersistenceService:
    """Store-backed persistence with retry of failed saves"""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory
        self._lock = threading.RLock()
        self._pending_state: Optional[ChallengeState] = None
        self._pending_checklists: Dict[date, DailyChecklist] = {}

    @property
    def has_pending(self) -> bool:
        return self._pending_state is not None or bool(self._pending_checklists)

    def load_state(self, now: datetime) -> ChallengeState:
        """
        Get the challenge state.

        Returns the unsaved in-memory state while a save is outstanding.
        Creates a NotStarted state starting today when none exists.
        """
        with self._lock:
            if self._pending_state is not None:
                return self._pending_state

            db = self.session_factory()
            try:
                state = ChallengeStateRepository.get(db)
            finally:
                db.close()

            if state is None:
                state = ChallengeState(start_date=now.date())
                logger.info(f"Created challenge state starting {state.start_date}")
                self.save(state)
            return state

    def load_checklist(self, target_date: date) -> Optional[DailyChecklist]:
        """Get the checklist for a date, or None if that day has no record"""
        with self._lock:
            pending = self._pending_checklists.get(target_date)
            if pending is not None:
                return pending

            db = self.session_factory()
            try:
                return DailyChecklistRepository.get_by_date(db, target_date)
            finally:
                db.close()

    def save(self, state: ChallengeState, checklist: Optional[DailyChecklist] = None) -> bool:
        """
        Save state (and checklist) in one transaction.

        Never raises; failures are logged and retried later.

        Returns:
            True if everything outstanding was written
        """
        with self._lock:
            self._pending_state = state
            if checklist is not None:
                self._pending_checklists[checklist.date] = checklist
            return self._flush()

    def save_checklist(self, checklist: DailyChecklist) -> bool:
        """Save a checklist on its own (e.g. when a new day begins)"""
        with self._lock:
            self._pending_checklists[checklist.date] = checklist
            return self._flush()

    def retry_pending(self) -> bool:
        """Re-attempt an outstanding save"""
        with self._lock:
            if not self.has_pending:
                return True
            logger.info("Retrying pending challenge save")
            return self._flush()

    def discard_pending(self) -> None:
        with self._lock:
            self._pending_state = None
            self._pending_checklists.clear()

    def _flush(self) -> bool:
        db = self.session_factory()
        try:
            if self._pending_state is not None:
                ChallengeStateRepository.put(db, self._pending_state)
            for checklist in self._pending_checklists.values():
                DailyChecklistRepository.put(db, checklist)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Saving challenge state failed, will retry: {e}")
            return False
        finally:
            db.close()

        self._pending_state = None
        self._pending_checklists.clear()
        return True
