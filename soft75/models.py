from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date
from datetime import datetime

from soft75.database import Base
from soft75.constants import DEFAULT_MILESTONE_DAYS


class ChallengeRecord(Base):
    __tablename__ = "challenge_state"

    id = Column(Integer, primary_key=True, index=True)
    start_date = Column(Date, nullable=False)
    current_day = Column(Integer, default=0)  # Fully completed days since start_date
    streak_count = Column(Integer, default=0)
    last_completed_date = Column(Date, nullable=True)
    reset_count = Column(Integer, default=0)

    # Forgiveness
    forgive_missed_day = Column(Boolean, default=False)
    forgive_missed_task = Column(Boolean, default=False)  # Reserved, not consulted

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class ChecklistRecord(Base):
    __tablename__ = "daily_checklists"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, unique=True, index=True)

    water_done = Column(Boolean, default=False)
    reading_done = Column(Boolean, default=False)
    diet_done = Column(Boolean, default=False)
    workout_done = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.now)


class Settings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)

    # Task toggling: one-way (done stays done) or freely reversible
    one_way_tasks = Column(Boolean, default=True)

    # Daily reminder
    daily_reminder_enabled = Column(Boolean, default=False)
    daily_reminder_time = Column(String, default="09:00")  # HH:MM

    # Milestone alerts
    milestone_reminder_enabled = Column(Boolean, default=True)
    milestone_days = Column(String, default=DEFAULT_MILESTONE_DAYS)  # Comma separated thresholds

    # Developer options (jump to day)
    developer_options_enabled = Column(Boolean, default=False)

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String, nullable=False)  # daily_reminder, milestone
    title = Column(String, nullable=False)
    body = Column(String, nullable=False)
    milestone_day = Column(Integer, nullable=True)
    read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.now)
