"""
In-memory challenge domain objects.
Plain dataclasses; persistence maps them to rows in soft75.models.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional

from soft75.constants import (
    TASK_WATER, TASK_READING, TASK_DIET, TASK_WORKOUT, TASK_LABELS,
    CHALLENGE_LENGTH_DAYS, PHASE_NOT_STARTED, PHASE_IN_PROGRESS, PHASE_FINISHED
)

# task id -> attribute holding its flag
_TASK_FIELDS = {
    TASK_WATER: "water_done",
    TASK_READING: "reading_done",
    TASK_DIET: "diet_done",
    TASK_WORKOUT: "workout_done",
}


@dataclass
class DailyChecklist:
    """One calendar day's four task flags."""
    date: date
    water_done: bool = False
    reading_done: bool = False
    diet_done: bool = False
    workout_done: bool = False

    def toggle_task(self, task: str, one_way: bool = True) -> bool:
        """
        Mark a task as done.

        In one-way mode a done task stays done. With one_way=False the flag
        flips. Unknown task identifiers are ignored.

        Returns:
            True if the flag changed
        """
        attr = _TASK_FIELDS.get(task)
        if attr is None:
            return False

        current = getattr(self, attr)
        if one_way:
            if current:
                return False
            setattr(self, attr, True)
            return True

        setattr(self, attr, not current)
        return True

    def is_fully_complete(self) -> bool:
        return (
            self.water_done
            and self.reading_done
            and self.diet_done
            and self.workout_done
        )

    def reset(self) -> None:
        for attr in _TASK_FIELDS.values():
            setattr(self, attr, False)

    def tasks(self) -> Dict[str, bool]:
        """Task label -> done flag"""
        return {
            TASK_LABELS[task]: getattr(self, attr)
            for task, attr in _TASK_FIELDS.items()
        }


@dataclass
class ChallengeState:
    """The single long-lived challenge record."""
    start_date: date
    current_day: int = 0
    streak_count: int = 0
    last_completed_date: Optional[date] = None
    reset_count: int = 0
    forgive_missed_day: bool = False
    # Stored but not consulted by the tracker
    forgive_missed_task: bool = False

    @property
    def phase(self) -> str:
        if self.current_day <= 0:
            return PHASE_NOT_STARTED
        if self.current_day < CHALLENGE_LENGTH_DAYS:
            return PHASE_IN_PROGRESS
        return PHASE_FINISHED


@dataclass
class ChallengeSnapshot:
    """Exported view consumed by the widget and notification collaborators."""
    current_day: int
    streak_count: int
    tasks: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "currentDay": self.current_day,
            "streakCount": self.streak_count,
            "tasks": dict(self.tasks),
        }
