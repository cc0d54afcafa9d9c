"""
Notification service.
Stores milestone alerts and daily check-in reminders for the client to display.
"""
import logging
from typing import List
from sqlalchemy.orm import Session

from soft75.models import Notification
from soft75.domain import ChallengeSnapshot
from soft75.repositories.settings_repository import SettingsRepository
from soft75.repositories.notification_repository import NotificationRepository
from soft75.exceptions import NotificationNotFoundException, ValidationException
from soft75.constants import (
    NOTIFICATION_DAILY_REMINDER, NOTIFICATION_MILESTONE,
    DAILY_REMINDER_TITLE, DAILY_REMINDER_BODY, MILESTONE_TITLE, MILESTONE_BODY
)

logger = logging.getLogger("soft75.notifications")


class NotificationService:
    """Service for reminder and milestone notifications"""

    def __init__(self, db: Session):
        self.db = db
        self.settings_repo = SettingsRepository()
        self.notification_repo = NotificationRepository()

    @staticmethod
    def parse_milestone_days(value: str) -> List[int]:
        """
        Parse comma separated milestone thresholds.

        Raises:
            ValidationException: If a threshold is not a positive integer
        """
        days = []
        for part in (value or "").split(","):
            part = part.strip()
            if not part:
                continue
            try:
                day = int(part)
            except ValueError:
                raise ValidationException("milestone_days", f"'{part}' is not a number")
            if day <= 0:
                raise ValidationException("milestone_days", f"{day} must be positive")
            days.append(day)
        return sorted(set(days))

    def check_milestones(self, previous_streak: int, snapshot: ChallengeSnapshot) -> List[Notification]:
        """
        Fire a milestone alert for every threshold the streak just crossed.

        Args:
            previous_streak: Streak before the transition
            snapshot: Snapshot emitted by the transition

        Returns:
            Created notifications
        """
        settings = self.settings_repo.get(self.db)
        if not settings.milestone_reminder_enabled:
            return []

        crossed = [
            day for day in self.parse_milestone_days(settings.milestone_days)
            if previous_streak < day <= snapshot.streak_count
        ]

        created = []
        for day in crossed:
            notification = Notification(
                kind=NOTIFICATION_MILESTONE,
                title=MILESTONE_TITLE,
                body=MILESTONE_BODY.format(day=day),
                milestone_day=day
            )
            created.append(self.notification_repo.create(self.db, notification))
            logger.info(f"Milestone reached: {day}-day streak")
        return created

    def send_daily_reminder(self) -> Notification:
        notification = Notification(
            kind=NOTIFICATION_DAILY_REMINDER,
            title=DAILY_REMINDER_TITLE,
            body=DAILY_REMINDER_BODY
        )
        logger.info("Daily reminder sent")
        return self.notification_repo.create(self.db, notification)

    def list_notifications(self, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        return self.notification_repo.get_all(self.db, unread_only, limit)

    def mark_read(self, notification_id: int) -> Notification:
        notification = self.notification_repo.get_by_id(self.db, notification_id)
        if not notification:
            raise NotificationNotFoundException(notification_id)
        notification.read = True
        return self.notification_repo.update(self.db, notification)
