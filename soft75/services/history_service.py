"""
History statistics service.
Read-only numbers for the history screen: completion calendar, best streak,
per-task rates and badges.
"""
from datetime import date, timedelta
from typing import Dict, List
from sqlalchemy.orm import Session

from soft75.constants import BADGES, CHALLENGE_LENGTH_DAYS, TASK_LABELS
from soft75.domain import ChallengeState, DailyChecklist
from soft75.repositories.challenge_repository import DailyChecklistRepository
from soft75.services.date_service import DateService


class HistoryService:
    """Service for challenge history"""

    def __init__(self, db: Session):
        self.db = db
        self.checklist_repo = DailyChecklistRepository()
        self.date_service = DateService()

    def get_history(self, state: ChallengeState, today: date, days: int = 30) -> dict:
        """
        Build history statistics.

        Args:
            state: Current challenge state
            today: Last day of the completion calendar
            days: Length of the completion calendar

        Returns:
            Dictionary matching HistoryResponse
        """
        entries = self.checklist_repo.get_all(self.db)

        return {
            "current_day": state.current_day,
            "current_streak": state.streak_count,
            "total_completed": sum(1 for e in entries if e.is_fully_complete()),
            "best_streak": self.best_streak(entries),
            "progress_percent": self.progress_percent(state.current_day),
            "projected_end_date": self.date_service.projected_end_date(state.start_date),
            "completion_by_date": self.completion_by_date(entries, today, days),
            "streak_trend": self.streak_trend(entries),
            "task_rates": self.task_rates(entries),
            "badges": self.badges(state.current_day),
        }

    @staticmethod
    def best_streak(entries: List[DailyChecklist]) -> int:
        """Longest run of fully completed consecutive calendar days"""
        best = 0
        running = 0
        previous = None
        for entry in sorted(entries, key=lambda e: e.date):
            if not entry.is_fully_complete():
                running = 0
            elif previous is not None and entry.date - previous == timedelta(days=1) and running:
                running += 1
            else:
                running = 1
            best = max(best, running)
            previous = entry.date
        return best

    def completion_by_date(self, entries: List[DailyChecklist], today: date, days: int) -> List[dict]:
        completed = {e.date: e.is_fully_complete() for e in entries}
        return [
            {"date": day, "completed": completed.get(day, False)}
            for day in self.date_service.last_n_days(today, days)
        ]

    @staticmethod
    def streak_trend(entries: List[DailyChecklist]) -> List[int]:
        """Running count of completed days, one value per stored day"""
        trend = []
        count = 0
        for entry in sorted(entries, key=lambda e: e.date):
            if entry.is_fully_complete():
                count += 1
            trend.append(count)
        return trend

    @staticmethod
    def task_rates(entries: List[DailyChecklist]) -> List[Dict]:
        if not entries:
            return []

        total = len(entries)
        rates = []
        for label in TASK_LABELS.values():
            done = sum(1 for e in entries if e.tasks()[label])
            rates.append({"task": label, "rate": round(done / total, 4)})
        return rates

    @staticmethod
    def badges(current_day: int) -> List[Dict]:
        return [
            {"title": title, "unlocked": current_day >= required}
            for title, required in BADGES
        ]

    @staticmethod
    def progress_percent(current_day: int) -> int:
        return min(int(current_day / CHALLENGE_LENGTH_DAYS * 100), 100)
