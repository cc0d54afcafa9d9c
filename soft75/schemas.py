from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date
from typing import Dict, List, Optional


class ChallengeStateResponse(BaseModel):
    start_date: date
    current_day: int
    streak_count: int
    last_completed_date: Optional[date] = None
    reset_count: int
    forgive_missed_day: bool
    forgive_missed_task: bool
    phase: str
    projected_end_date: date

    class Config:
        from_attributes = True


class DailyChecklistResponse(BaseModel):
    date: date
    water_done: bool
    reading_done: bool
    diet_done: bool
    workout_done: bool
    is_fully_complete: bool


class WidgetSnapshot(BaseModel):
    """Flat widget payload: currentDay, streakCount, tasks"""
    current_day: int = Field(0, alias="currentDay")
    streak_count: int = Field(0, alias="streakCount")
    tasks: Dict[str, bool] = Field(default_factory=dict)

    class Config:
        populate_by_name = True


class TransitionResponse(BaseModel):
    outcome: str
    changed: bool
    state: ChallengeStateResponse
    checklist: DailyChecklistResponse
    snapshot: Optional[WidgetSnapshot] = None


class JumpRequest(BaseModel):
    day: int = Field(..., ge=0, le=365)


class ForgivenessUpdate(BaseModel):
    forgive_missed_day: Optional[bool] = None
    forgive_missed_task: Optional[bool] = None


# Settings schemas
class SettingsBase(BaseModel):
    one_way_tasks: bool = Field(default=True)

    daily_reminder_enabled: bool = Field(default=False)
    daily_reminder_time: str = Field(default="09:00", pattern=r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")

    milestone_reminder_enabled: bool = Field(default=True)
    milestone_days: str = Field(default="7,30,75", pattern=r"^\d+(,\d+)*$")

    developer_options_enabled: bool = Field(default=False)

    @field_validator("milestone_days")
    @classmethod
    def positive_thresholds(cls, value: str) -> str:
        if any(int(part) <= 0 for part in value.split(",")):
            raise ValueError("milestone days must be positive")
        return value


class SettingsUpdate(SettingsBase):
    pass


class SettingsResponse(SettingsBase):
    id: int
    updated_at: datetime

    class Config:
        from_attributes = True


# History schemas
class TaskRate(BaseModel):
    task: str
    rate: float


class Badge(BaseModel):
    title: str
    unlocked: bool


class DayCompletion(BaseModel):
    date: date
    completed: bool


class HistoryResponse(BaseModel):
    current_day: int
    current_streak: int
    total_completed: int
    best_streak: int
    progress_percent: int
    projected_end_date: date
    completion_by_date: List[DayCompletion]
    streak_trend: List[int]
    task_rates: List[TaskRate]
    badges: List[Badge]


# Notification schemas
class NotificationResponse(BaseModel):
    id: int
    kind: str
    title: str
    body: str
    milestone_day: Optional[int] = None
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True
