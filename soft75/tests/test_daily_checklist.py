"""
Tests for the DailyChecklist domain object.
"""
import pytest
from datetime import date

from soft75.domain import DailyChecklist, ChallengeState


class TestToggleTask:
    """Tests for toggle_task"""

    def test_toggle_marks_task_done(self, today):
        checklist = DailyChecklist(date=today)

        changed = checklist.toggle_task("water")

        assert changed is True
        assert checklist.water_done is True
        assert checklist.reading_done is False

    def test_done_task_stays_done_in_one_way_mode(self, today):
        """Toggling an already-done task should not undo it"""
        checklist = DailyChecklist(date=today, diet_done=True)

        changed = checklist.toggle_task("diet")

        assert changed is False
        assert checklist.diet_done is True

    def test_free_toggle_flips_flag(self, today):
        checklist = DailyChecklist(date=today, workout_done=True)

        changed = checklist.toggle_task("workout", one_way=False)

        assert changed is True
        assert checklist.workout_done is False

    def test_unknown_task_is_noop(self, today):
        checklist = DailyChecklist(date=today)

        assert checklist.toggle_task("meditation") is False
        assert checklist.toggle_task("meditation", one_way=False) is False
        assert checklist.tasks() == DailyChecklist(date=today).tasks()


class TestCompletion:
    """Tests for is_fully_complete and reset"""

    @pytest.mark.parametrize("missing", ["water", "reading", "diet", "workout"])
    def test_three_of_four_is_not_complete(self, today, missing):
        checklist = DailyChecklist(date=today)
        for task in ("water", "reading", "diet", "workout"):
            if task != missing:
                checklist.toggle_task(task)

        assert checklist.is_fully_complete() is False

    def test_all_four_is_complete(self, complete_checklist):
        assert complete_checklist.is_fully_complete() is True

    def test_reset_clears_flags_keeps_date(self, complete_checklist, today):
        complete_checklist.reset()

        assert complete_checklist.date == today
        assert not any(complete_checklist.tasks().values())

    def test_tasks_uses_fixed_labels(self, today):
        checklist = DailyChecklist(date=today, reading_done=True)

        assert checklist.tasks() == {
            "💧 Water": False,
            "📖 Read": True,
            "🥗 Diet": False,
            "🏃‍♂️ Workout": False,
        }


class TestChallengePhase:
    """Tests for ChallengeState.phase"""

    def test_phases(self):
        state = ChallengeState(start_date=date(2026, 1, 1))
        assert state.phase == "not_started"

        state.current_day = 1
        assert state.phase == "in_progress"

        state.current_day = 74
        assert state.phase == "in_progress"

        state.current_day = 75
        assert state.phase == "finished"
