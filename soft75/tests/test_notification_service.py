"""
Tests for NotificationService.
"""
import pytest

from soft75.domain import ChallengeSnapshot
from soft75.exceptions import NotificationNotFoundException, ValidationException
from soft75.services.notification_service import NotificationService


def _snapshot(streak):
    return ChallengeSnapshot(current_day=streak, streak_count=streak, tasks={})


class TestMilestones:
    """Tests for check_milestones"""

    def test_fires_when_threshold_reached(self, db_session, default_settings):
        service = NotificationService(db_session)

        created = service.check_milestones(6, _snapshot(7))

        assert len(created) == 1
        assert created[0].milestone_day == 7
        assert created[0].body == "You've reached a 7-day streak! Keep it up!"

    def test_no_alert_between_thresholds(self, db_session, default_settings):
        service = NotificationService(db_session)

        assert service.check_milestones(7, _snapshot(8)) == []

    def test_jump_crosses_several_thresholds(self, db_session, default_settings):
        service = NotificationService(db_session)

        created = service.check_milestones(0, _snapshot(74))

        assert [n.milestone_day for n in created] == [7, 30]

    def test_reset_never_fires(self, db_session, default_settings):
        service = NotificationService(db_session)

        assert service.check_milestones(40, _snapshot(0)) == []

    def test_disabled_milestones(self, db_session, default_settings):
        default_settings.milestone_reminder_enabled = False
        db_session.commit()
        service = NotificationService(db_session)

        assert service.check_milestones(6, _snapshot(7)) == []

    def test_parse_milestone_days(self):
        assert NotificationService.parse_milestone_days("30, 7,75,7") == [7, 30, 75]

    @pytest.mark.parametrize("value", ["7,x", "0", "7,-3"])
    def test_parse_rejects_bad_values(self, value):
        with pytest.raises(ValidationException):
            NotificationService.parse_milestone_days(value)


class TestReminders:
    """Tests for daily reminders and reading notifications"""

    def test_daily_reminder_stored(self, db_session, default_settings):
        service = NotificationService(db_session)

        notification = service.send_daily_reminder()

        assert notification.kind == "daily_reminder"
        assert notification.title == "75Soft: Daily Check-In"
        assert notification.read is False

    def test_mark_read_and_filter(self, db_session, default_settings):
        service = NotificationService(db_session)
        first = service.send_daily_reminder()
        service.send_daily_reminder()

        service.mark_read(first.id)

        assert len(service.list_notifications()) == 2
        assert len(service.list_notifications(unread_only=True)) == 1

    def test_mark_read_missing(self, db_session, default_settings):
        with pytest.raises(NotificationNotFoundException):
            NotificationService(db_session).mark_read(999)
