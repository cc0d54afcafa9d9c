"""
Date calculation service.
Single place for calendar-day arithmetic used by the challenge tracker.
"""
from datetime import datetime, timedelta, date
from typing import List, Optional

from soft75.constants import (
    GAP_FIRST, GAP_SAME_DAY, GAP_CONSECUTIVE, GAP_MISSED, CHALLENGE_LENGTH_DAYS
)
from soft75.exceptions import InvalidTimeFormatException


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def calendar_day(now: datetime) -> date:
        """Calendar day an instant falls on"""
        return now.date()

    @staticmethod
    def classify_gap(last_completed: Optional[date], today: date) -> str:
        """
        Classify the gap between the last accepted completion and today.

        Args:
            last_completed: Date of the last full completion, or None
            today: Calendar day being evaluated

        Returns:
            GAP_FIRST when nothing was completed yet,
            GAP_SAME_DAY when today already counted (or the stored date is ahead of today),
            GAP_CONSECUTIVE when the last completion was yesterday,
            GAP_MISSED when at least one whole day was skipped
        """
        if last_completed is None:
            return GAP_FIRST

        days = (today - last_completed).days
        if days <= 0:
            return GAP_SAME_DAY
        if days == 1:
            return GAP_CONSECUTIVE
        return GAP_MISSED

    @staticmethod
    def yesterday(today: date) -> date:
        return today - timedelta(days=1)

    @staticmethod
    def projected_end_date(start_date: date) -> date:
        """Last day of a challenge started on start_date"""
        return start_date + timedelta(days=CHALLENGE_LENGTH_DAYS - 1)

    @staticmethod
    def parse_time(time_str: str) -> tuple[int, int]:
        """
        Parse time string into hour and minute.

        Args:
            time_str: Time string in "HH:MM" format

        Returns:
            Tuple of (hour, minute)

        Raises:
            InvalidTimeFormatException: If time string is invalid
        """
        try:
            parts = time_str.split(":")
            hour = int(parts[0])
            minute = int(parts[1])
        except (ValueError, IndexError, AttributeError):
            raise InvalidTimeFormatException(str(time_str))

        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise InvalidTimeFormatException(time_str)
        return hour, minute

    @staticmethod
    def last_n_days(today: date, days: int) -> List[date]:
        """Dates from today-days+1 up to today, oldest first"""
        return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
