from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime
import logging
import os
from pathlib import Path

from soft75.database import engine, get_db, Base, SessionLocal
from soft75 import models  # Import all models to register them with Base
from soft75.schemas import (
    ChallengeStateResponse, DailyChecklistResponse, TransitionResponse, WidgetSnapshot,
    JumpRequest, ForgivenessUpdate,
    SettingsUpdate, SettingsResponse,
    HistoryResponse, NotificationResponse
)
from soft75.domain import ChallengeState, DailyChecklist, ChallengeSnapshot
from soft75.exceptions import (
    DeveloperOptionsDisabledException, DatabaseException,
    NotificationNotFoundException, ValidationException, InvalidTimeFormatException
)
from soft75.repositories.settings_repository import SettingsRepository
from soft75.services.challenge_service import ChallengeService
from soft75.services.challenge_tracker import TrackerResult
from soft75.services.date_service import DateService
from soft75.services.history_service import HistoryService
from soft75.services.notification_service import NotificationService
from soft75.services.persistence_service import PersistenceService
from soft75.services.widget_service import WidgetService
from soft75.services import scheduler_service
from soft75.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV, CORS_ALLOWED_ORIGINS
)

LOG_DIR = os.getenv("SOFT75_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("SOFT75_LOG_FILE", "soft75.log")

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("soft75")

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Soft75 API",
    description="75-day all-or-nothing daily checklist challenge",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.challenge_service = ChallengeService(PersistenceService(), WidgetService())


def get_challenge_service(request: Request) -> ChallengeService:
    return request.app.state.challenge_service


def _state_response(state: ChallengeState) -> ChallengeStateResponse:
    return ChallengeStateResponse(
        start_date=state.start_date,
        current_day=state.current_day,
        streak_count=state.streak_count,
        last_completed_date=state.last_completed_date,
        reset_count=state.reset_count,
        forgive_missed_day=state.forgive_missed_day,
        forgive_missed_task=state.forgive_missed_task,
        phase=state.phase,
        projected_end_date=DateService.projected_end_date(state.start_date)
    )


def _checklist_response(checklist: DailyChecklist) -> DailyChecklistResponse:
    return DailyChecklistResponse(
        date=checklist.date,
        water_done=checklist.water_done,
        reading_done=checklist.reading_done,
        diet_done=checklist.diet_done,
        workout_done=checklist.workout_done,
        is_fully_complete=checklist.is_fully_complete()
    )


def _snapshot_response(snapshot: ChallengeSnapshot) -> WidgetSnapshot:
    return WidgetSnapshot(**snapshot.to_dict())


def _transition_response(result: TrackerResult, state: ChallengeState, checklist: DailyChecklist) -> TransitionResponse:
    return TransitionResponse(
        outcome=result.outcome,
        changed=result.changed,
        state=_state_response(state),
        checklist=_checklist_response(checklist),
        snapshot=_snapshot_response(result.snapshot) if result.snapshot else None
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info(f"Soft75 API started. Logging to: {log_path}")
    db = SessionLocal()
    try:
        settings = SettingsRepository.get(db)
        reminder_enabled = settings.daily_reminder_enabled
        reminder_time = settings.daily_reminder_time
    finally:
        db.close()
    scheduler_service.start_scheduler(app.state.challenge_service, reminder_enabled, reminder_time)


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Soft75 API")
    scheduler_service.stop_scheduler()


# Health check
@app.get("/")
async def root():
    return {"message": "Soft75 API", "status": "active"}


# ===== CHALLENGE ENDPOINTS =====

@app.get("/api/challenge", response_model=ChallengeStateResponse)
def get_challenge(service: ChallengeService = Depends(get_challenge_service)):
    """Get current challenge state"""
    return _state_response(service.get_state(datetime.now()))


@app.get("/api/checklist/today", response_model=DailyChecklistResponse)
def get_today_checklist(service: ChallengeService = Depends(get_challenge_service)):
    """Get today's checklist (created if the day has no record yet)"""
    return _checklist_response(service.get_today(datetime.now()))


@app.post("/api/checklist/today/{task}", response_model=TransitionResponse)
def toggle_task(task: str, service: ChallengeService = Depends(get_challenge_service)):
    """Toggle a task and evaluate today's completion"""
    result, state, checklist = service.toggle_task(task, datetime.now())
    return _transition_response(result, state, checklist)


@app.post("/api/challenge/reset", response_model=TransitionResponse)
def reset_challenge(service: ChallengeService = Depends(get_challenge_service)):
    """Start the challenge over"""
    result, state, checklist = service.reset_challenge(datetime.now())
    return _transition_response(result, state, checklist)


@app.post("/api/challenge/jump", response_model=TransitionResponse)
def jump_to_day(jump: JumpRequest, service: ChallengeService = Depends(get_challenge_service)):
    """Developer only: preview a later challenge day"""
    try:
        result, state, checklist = service.jump_to_day(jump.day, datetime.now())
    except DeveloperOptionsDisabledException as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return _transition_response(result, state, checklist)


@app.put("/api/challenge/forgiveness", response_model=ChallengeStateResponse)
def update_forgiveness(update: ForgivenessUpdate, service: ChallengeService = Depends(get_challenge_service)):
    """Update forgiveness flags"""
    state = service.update_forgiveness(
        datetime.now(),
        forgive_missed_day=update.forgive_missed_day,
        forgive_missed_task=update.forgive_missed_task
    )
    return _state_response(state)


@app.get("/api/widget", response_model=WidgetSnapshot)
def get_widget_snapshot(service: ChallengeService = Depends(get_challenge_service)):
    """Last exported widget snapshot"""
    return _snapshot_response(service.widget_service.read())


@app.get("/api/history", response_model=HistoryResponse)
def get_history(
    days: int = 30,
    db: Session = Depends(get_db),
    service: ChallengeService = Depends(get_challenge_service)
):
    """Get history statistics for the last N days"""
    if not 1 <= days <= 365:
        raise HTTPException(status_code=400, detail="days must be between 1 and 365")
    now = datetime.now()
    state = service.get_state(now)
    return HistoryService(db).get_history(state, now.date(), days)


@app.delete("/api/data", response_model=ChallengeStateResponse)
def clear_all_data(service: ChallengeService = Depends(get_challenge_service)):
    """Remove all stored data and start a fresh challenge"""
    try:
        state = service.clear_all_data(datetime.now())
    except DatabaseException as e:
        logger.error(f"Clearing data failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return _state_response(state)


# ===== SETTINGS ENDPOINTS =====

@app.get("/api/settings", response_model=SettingsResponse)
def get_settings_endpoint(db: Session = Depends(get_db)):
    """Get settings"""
    return SettingsRepository.get(db)


@app.put("/api/settings", response_model=SettingsResponse)
def update_settings_endpoint(settings_update: SettingsUpdate, db: Session = Depends(get_db)):
    """Update settings and reschedule the daily reminder"""
    settings = SettingsRepository.update(db, settings_update)
    try:
        scheduler_service.schedule_daily_reminder(
            settings.daily_reminder_enabled, settings.daily_reminder_time
        )
    except InvalidTimeFormatException as e:
        raise HTTPException(status_code=400, detail=str(e))
    return settings


# ===== NOTIFICATION ENDPOINTS =====

@app.get("/api/notifications", response_model=List[NotificationResponse])
def get_notifications(unread_only: bool = False, limit: int = 50, db: Session = Depends(get_db)):
    """Get delivered notifications (newest first)"""
    return NotificationService(db).list_notifications(unread_only, limit)


@app.post("/api/notifications/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(notification_id: int, db: Session = Depends(get_db)):
    """Mark a notification as read"""
    try:
        return NotificationService(db).mark_read(notification_id)
    except NotificationNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.exception_handler(ValidationException)
async def validation_exception_handler(request: Request, exc: ValidationException):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("soft75.main:app", host="0.0.0.0", port=8000, reload=False)
