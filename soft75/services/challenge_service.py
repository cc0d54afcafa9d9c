"""
Challenge service.
Single owner of the challenge: runs the tracker under a lock, saves the
result, and hands emitted snapshots to the widget and notification
collaborators without waiting for them.
"""
import logging
import threading
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from soft75.constants import DEBUG_ENABLED, OUTCOME_FORGIVEN, OUTCOME_NO_CHANGE
from soft75.domain import ChallengeState, DailyChecklist, ChallengeSnapshot
from soft75.exceptions import DeveloperOptionsDisabledException, DatabaseException
from soft75.repositories.challenge_repository import (
    ChallengeStateRepository, DailyChecklistRepository
)
from soft75.repositories.notification_repository import NotificationRepository
from soft75.repositories.settings_repository import SettingsRepository
from soft75.services.challenge_tracker import ChallengeTracker, TrackerResult
from soft75.services.notification_service import NotificationService
from soft75.services.persistence_service import PersistenceService
from soft75.services.widget_service import WidgetService
from soft75.services import scheduler_service

logger = logging.getLogger("soft75.challenge")

Transition = Tuple[TrackerResult, ChallengeState, DailyChecklist]


class ChallengeService:
    """Service for challenge operations"""

    def __init__(
        self,
        persistence: PersistenceService,
        widget_service: Optional[WidgetService] = None,
        dispatch=None,
        debug: bool = DEBUG_ENABLED
    ):
        self.persistence = persistence
        self.session_factory = persistence.session_factory
        self.widget_service = widget_service or WidgetService()
        self.dispatch = dispatch or scheduler_service.dispatch
        self.debug = debug
        # Guards the whole load-evaluate-save sequence
        self._lock = threading.Lock()

    def get_state(self, now: datetime) -> ChallengeState:
        with self._lock:
            return self.persistence.load_state(now)

    def get_today(self, now: datetime) -> DailyChecklist:
        """Today's checklist, created when the day has no record yet"""
        with self._lock:
            return self._load_today(now)

    def toggle_task(self, task: str, now: datetime) -> Transition:
        """
        Toggle a task on today's checklist and evaluate completion.

        A forgiven gap is evaluated once more so today's completion counts
        right away and tomorrow sees a one-day gap.

        Args:
            task: Task identifier (unknown identifiers change nothing)
            now: Current instant

        Returns:
            Tuple of (result, state, checklist)
        """
        with self._lock:
            state = self.persistence.load_state(now)
            today = self._load_today(now)
            tracker = ChallengeTracker(state, today)

            if today.toggle_task(task, one_way=self._one_way_tasks()):
                self.persistence.save(state, today)

            result = self._evaluate(tracker, today, now)
            self._finish(tracker, result)
            return result, state, today

    def record_completion(self, now: datetime) -> Transition:
        """Evaluate today's checklist without toggling anything"""
        with self._lock:
            state = self.persistence.load_state(now)
            today = self._load_today(now)
            tracker = ChallengeTracker(state, today)
            result = self._evaluate(tracker, today, now)
            self._finish(tracker, result)
            return result, state, today

    def reset_challenge(self, now: datetime) -> Transition:
        with self._lock:
            state = self.persistence.load_state(now)
            today = self._load_today(now)
            tracker = ChallengeTracker(state, today)
            result = tracker.reset_challenge(now)
            self._finish(tracker, result)
            return result, state, today

    def jump_to_day(self, day: int, now: datetime) -> Transition:
        """
        Developer preview of a later day.

        Raises:
            DeveloperOptionsDisabledException: Outside debug mode
            ValueError: If day is negative
        """
        if not self.debug or not self._developer_options_enabled():
            raise DeveloperOptionsDisabledException("Jump to day")

        with self._lock:
            state = self.persistence.load_state(now)
            today = self._load_today(now)
            tracker = ChallengeTracker(state, today)
            result = tracker.jump_to_day(day, now)
            self._finish(tracker, result)
            return result, state, today

    def update_forgiveness(
        self,
        now: datetime,
        forgive_missed_day: Optional[bool] = None,
        forgive_missed_task: Optional[bool] = None
    ) -> ChallengeState:
        with self._lock:
            state = self.persistence.load_state(now)
            if forgive_missed_day is not None:
                state.forgive_missed_day = forgive_missed_day
            if forgive_missed_task is not None:
                state.forgive_missed_task = forgive_missed_task
            self.persistence.save(state)
            return state

    def clear_all_data(self, now: datetime) -> ChallengeState:
        """
        Delete every checklist and notification and start a fresh challenge.

        Raises:
            DatabaseException: If the store could not be cleared
        """
        with self._lock:
            db = self.session_factory()
            try:
                DailyChecklistRepository.delete_all(db)
                NotificationRepository.delete_all(db)
                ChallengeStateRepository.delete(db)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise DatabaseException("clear", str(e))
            finally:
                db.close()

            self.persistence.discard_pending()
            state = self.persistence.load_state(now)
            today = self._load_today(now)
            logger.info("All challenge data cleared")

            snapshot = ChallengeTracker(state, today).snapshot()
            self.dispatch(self._export_widget, snapshot)
            return state

    def _load_today(self, now: datetime) -> DailyChecklist:
        today = self.persistence.load_checklist(now.date())
        if today is None:
            today = DailyChecklist(date=now.date())
            self.persistence.save_checklist(today)
        return today

    def _evaluate(self, tracker: ChallengeTracker, today: DailyChecklist, now: datetime) -> TrackerResult:
        result = tracker.record_completion_if_ready(today, now)
        if result.outcome == OUTCOME_FORGIVEN:
            self.persistence.save(tracker.state, today)
            result = tracker.record_completion_if_ready(today, now)
        return result

    def _finish(self, tracker: ChallengeTracker, result: TrackerResult) -> None:
        if result.outcome == OUTCOME_NO_CHANGE:
            return

        self.persistence.save(tracker.state, tracker.today)

        if result.snapshot is not None:
            self.dispatch(self._export_widget, result.snapshot)
            self.dispatch(self._check_milestones, result.previous_streak, result.snapshot)

    def _export_widget(self, snapshot: ChallengeSnapshot) -> None:
        self.widget_service.export(snapshot)

    def _check_milestones(self, previous_streak: int, snapshot: ChallengeSnapshot) -> None:
        db = self.session_factory()
        try:
            NotificationService(db).check_milestones(previous_streak, snapshot)
        except Exception as e:
            logger.error(f"Milestone check failed: {e}")
        finally:
            db.close()

    def _one_way_tasks(self) -> bool:
        db = self.session_factory()
        try:
            return bool(SettingsRepository.get(db).one_way_tasks)
        finally:
            db.close()

    def _developer_options_enabled(self) -> bool:
        db = self.session_factory()
        try:
            return bool(SettingsRepository.get(db).developer_options_enabled)
        finally:
            db.close()
