"""
Shared fixtures for tests.
"""
import os

os.environ.setdefault("SOFT75_DATABASE_URL", "sqlite://")
os.environ.setdefault("SOFT75_LOG_DIR", "./logs")

import pytest
from datetime import date, datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from soft75.database import Base
from soft75.models import Settings
from soft75.domain import ChallengeState, DailyChecklist
from soft75.services.persistence_service import PersistenceService
from soft75.services.widget_service import WidgetService
from soft75.services.challenge_service import ChallengeService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def default_settings(db_session):
    settings = Settings(
        one_way_tasks=True,
        daily_reminder_enabled=False,
        daily_reminder_time="09:00",
        milestone_reminder_enabled=True,
        milestone_days="7,30,75",
        developer_options_enabled=False
    )
    db_session.add(settings)
    db_session.commit()
    db_session.refresh(settings)
    return settings


@pytest.fixture
def today():
    return date(2026, 3, 10)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def now(today):
    return datetime.combine(today, datetime.min.time()).replace(hour=20, minute=30)


@pytest.fixture
def fresh_state(today):
    return ChallengeState(start_date=today)


@pytest.fixture
def complete_checklist(today):
    return DailyChecklist(
        date=today,
        water_done=True,
        reading_done=True,
        diet_done=True,
        workout_done=True
    )


@pytest.fixture
def widget_service(tmp_path):
    return WidgetService(str(tmp_path / "widgetData.json"))


@pytest.fixture
def persistence(session_factory):
    return PersistenceService(session_factory)


@pytest.fixture
def inline_dispatch():
    """Runs dispatched side effects immediately and records them"""
    calls = []

    def dispatch(func, *args):
        calls.append(func.__name__)
        func(*args)

    dispatch.calls = calls
    return dispatch


@pytest.fixture
def challenge_service(persistence, widget_service, inline_dispatch, default_settings):
    return ChallengeService(persistence, widget_service, dispatch=inline_dispatch, debug=True)


def complete_all_tasks(service, now):
    """Toggle all four tasks; returns the last transition"""
    result = None
    for task in ("water", "reading", "diet", "workout"):
        result = service.toggle_task(task, now)
    return result
