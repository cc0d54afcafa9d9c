"""
Challenge state machine.

Decides whether a day's completion advances the streak, is forgiven, or
resets the challenge. Pure and clock-free: every operation receives `now`
and returns a TrackerResult describing what happened. Not thread-safe;
callers serialise access (see ChallengeService).
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from soft75.constants import (
    TASK_LABELS,
    OUTCOME_NO_CHANGE, OUTCOME_ADVANCED, OUTCOME_FORGIVEN, OUTCOME_RESET, OUTCOME_JUMPED,
    GAP_FIRST, GAP_SAME_DAY, GAP_CONSECUTIVE
)
from soft75.domain import ChallengeState, DailyChecklist, ChallengeSnapshot
from soft75.services.date_service import DateService

logger = logging.getLogger("soft75.challenge")


@dataclass
class TrackerResult:
    """Outcome of one tracker operation"""
    outcome: str
    changed: bool
    previous_streak: int
    snapshot: Optional[ChallengeSnapshot] = None


class ChallengeTracker:
    """Owns one ChallengeState and today's DailyChecklist and mutates both"""

    def __init__(self, state: ChallengeState, today: DailyChecklist):
        self.state = state
        self.today = today
        self.date_service = DateService()

    def snapshot(self) -> ChallengeSnapshot:
        return ChallengeSnapshot(
            current_day=self.state.current_day,
            streak_count=self.state.streak_count,
            tasks=self.today.tasks()
        )

    def record_completion_if_ready(self, today: DailyChecklist, now: datetime) -> TrackerResult:
        """
        Evaluate today's checklist after a task toggle.

        At most one increment per calendar day. A skipped day either resets
        the challenge or, with forgive_missed_day, moves last_completed_date
        to yesterday so the next evaluation sees a one-day gap.

        Args:
            today: The checklist being evaluated; becomes the tracked day
            now: Current instant supplied by the caller

        Returns:
            TrackerResult with the transition taken
        """
        self.today = today
        previous_streak = self.state.streak_count

        if not today.is_fully_complete():
            return TrackerResult(OUTCOME_NO_CHANGE, False, previous_streak)

        current_date = self.date_service.calendar_day(now)
        gap = self.date_service.classify_gap(self.state.last_completed_date, current_date)

        if gap == GAP_SAME_DAY:
            return TrackerResult(OUTCOME_NO_CHANGE, False, previous_streak)

        if gap in (GAP_FIRST, GAP_CONSECUTIVE):
            return self._advance(today, previous_streak)

        if self.state.forgive_missed_day:
            self.state.last_completed_date = self.date_service.yesterday(current_date)
            logger.info(f"Missed day forgiven, last completion moved to {self.state.last_completed_date}")
            return TrackerResult(OUTCOME_FORGIVEN, True, previous_streak)

        logger.info(
            f"Missed day since {self.state.last_completed_date}, resetting at day {self.state.current_day}"
        )
        return self.reset_challenge(now)

    def _advance(self, today: DailyChecklist, previous_streak: int) -> TrackerResult:
        self.state.current_day += 1
        self.state.streak_count += 1
        self.state.last_completed_date = today.date
        logger.info(f"Challenge advanced to day {self.state.current_day}")
        return TrackerResult(OUTCOME_ADVANCED, True, previous_streak, self.snapshot())

    def reset_challenge(self, now: datetime) -> TrackerResult:
        """Start the challenge over from now"""
        previous_streak = self.state.streak_count

        self.state.streak_count = 0
        self.state.current_day = 0
        self.state.last_completed_date = None
        self.state.start_date = self.date_service.calendar_day(now)
        self.state.reset_count += 1
        self.today.reset()

        logger.info(f"Challenge reset (reset #{self.state.reset_count})")
        return TrackerResult(OUTCOME_RESET, True, previous_streak, self.snapshot())

    def jump_to_day(self, day: int, now: datetime) -> TrackerResult:
        """
        Developer preview: pretend `day` days were completed.

        The emitted snapshot shows every task done; today's real checklist
        is left untouched.

        Raises:
            ValueError: If day is negative
        """
        if day < 0:
            raise ValueError(f"Cannot jump to negative day {day}")

        previous_streak = self.state.streak_count
        self.state.current_day = day
        self.state.streak_count = day

        if day == 0:
            self.state.last_completed_date = None
        else:
            last = self.state.start_date + timedelta(days=day - 1)
            self.state.last_completed_date = min(last, self.date_service.calendar_day(now))

        snapshot = ChallengeSnapshot(
            current_day=self.state.current_day,
            streak_count=self.state.streak_count,
            tasks={label: True for label in TASK_LABELS.values()}
        )
        logger.info(f"Jumped to day {day}")
        return TrackerResult(OUTCOME_JUMPED, True, previous_streak, snapshot)
