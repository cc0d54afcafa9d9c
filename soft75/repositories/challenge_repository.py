"""
Challenge repository - Data access layer for challenge state and daily checklists.
Maps rows to the in-memory domain objects and back.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from soft75.models import ChallengeRecord, ChecklistRecord
from soft75.domain import ChallengeState, DailyChecklist


class ChallengeStateRepository:
    """Repository for the single ChallengeState row"""

    @staticmethod
    def get(db: Session) -> Optional[ChallengeState]:
        """Get challenge state, or None if not created yet"""
        record = db.query(ChallengeRecord).first()
        if not record:
            return None
        return ChallengeState(
            start_date=record.start_date,
            current_day=record.current_day or 0,
            streak_count=record.streak_count or 0,
            last_completed_date=record.last_completed_date,
            reset_count=record.reset_count or 0,
            forgive_missed_day=bool(record.forgive_missed_day),
            forgive_missed_task=bool(record.forgive_missed_task)
        )

    @staticmethod
    def put(db: Session, state: ChallengeState) -> None:
        """Write state into the single row (without committing)"""
        record = db.query(ChallengeRecord).first()
        if not record:
            record = ChallengeRecord(start_date=state.start_date)
            db.add(record)

        record.start_date = state.start_date
        record.current_day = state.current_day
        record.streak_count = state.streak_count
        record.last_completed_date = state.last_completed_date
        record.reset_count = state.reset_count
        record.forgive_missed_day = state.forgive_missed_day
        record.forgive_missed_task = state.forgive_missed_task

    @staticmethod
    def delete(db: Session) -> None:
        db.query(ChallengeRecord).delete()


class DailyChecklistRepository:
    """Repository for DailyChecklist rows"""

    @staticmethod
    def _to_domain(record: ChecklistRecord) -> DailyChecklist:
        return DailyChecklist(
            date=record.date,
            water_done=bool(record.water_done),
            reading_done=bool(record.reading_done),
            diet_done=bool(record.diet_done),
            workout_done=bool(record.workout_done)
        )

    @staticmethod
    def get_by_date(db: Session, target_date: date) -> Optional[DailyChecklist]:
        """Get checklist for specific date"""
        record = db.query(ChecklistRecord).filter(ChecklistRecord.date == target_date).first()
        if not record:
            return None
        return DailyChecklistRepository._to_domain(record)

    @staticmethod
    def get_all(db: Session) -> List[DailyChecklist]:
        """Get all checklists, oldest first"""
        records = db.query(ChecklistRecord).order_by(ChecklistRecord.date).all()
        return [DailyChecklistRepository._to_domain(r) for r in records]

    @staticmethod
    def get_range(db: Session, start_date: date, end_date: date) -> List[DailyChecklist]:
        """Get checklists between two dates inclusive, oldest first"""
        records = db.query(ChecklistRecord).filter(
            ChecklistRecord.date >= start_date,
            ChecklistRecord.date <= end_date
        ).order_by(ChecklistRecord.date).all()
        return [DailyChecklistRepository._to_domain(r) for r in records]

    @staticmethod
    def put(db: Session, checklist: DailyChecklist) -> None:
        """Insert or update the row for checklist.date (without committing)"""
        record = db.query(ChecklistRecord).filter(ChecklistRecord.date == checklist.date).first()
        if not record:
            record = ChecklistRecord(date=checklist.date)
            db.add(record)

        record.water_done = checklist.water_done
        record.reading_done = checklist.reading_done
        record.diet_done = checklist.diet_done
        record.workout_done = checklist.workout_done

    @staticmethod
    def delete_all(db: Session) -> int:
        return db.query(ChecklistRecord).delete()
