"""
Background scheduler for the challenge tracker
Handles:
- Daily check-in reminder at the configured time
- Retrying challenge saves that failed
- Creating today's checklist when a new day begins
- Fire-and-forget dispatch of snapshot side effects
"""

import logging
from datetime import datetime
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from soft75.database import SessionLocal
from soft75.constants import DAILY_REMINDER_JOB_ID
from soft75.services.date_service import DateService
from soft75.services.notification_service import NotificationService

logger = logging.getLogger("soft75.scheduler")

# Create scheduler instance
scheduler = AsyncIOScheduler()


def dispatch(func, *args):
    """
    Run func(*args) without making the caller wait for it.

    Queued as a one-off job while the scheduler runs; otherwise executed
    inline. Failures are logged and never reach the caller.
    """
    if scheduler.running:
        scheduler.add_job(func, args=list(args))
        return

    try:
        func(*args)
    except Exception as e:
        logger.error(f"Dispatched job {getattr(func, '__name__', func)} failed: {e}")


def run_daily_reminder():
    """Job: daily check-in reminder"""
    db = SessionLocal()
    try:
        NotificationService(db).send_daily_reminder()
    except Exception as e:
        logger.error(f"Scheduler Error (Daily Reminder): {e}")
    finally:
        db.close()


def run_retry_pending_save(challenge_service):
    """Job: re-attempt a challenge save that failed earlier"""
    try:
        if challenge_service.persistence.has_pending:
            if challenge_service.persistence.retry_pending():
                logger.info("Pending challenge save written")
    except Exception as e:
        logger.error(f"Scheduler Error (Retry Save): {e}")


def run_day_rollover(challenge_service):
    """Job: make sure today's checklist exists"""
    try:
        checklist = challenge_service.get_today(datetime.now())
        logger.info(f"Checklist ready for {checklist.date}")
    except Exception as e:
        logger.error(f"Scheduler Error (Day Rollover): {e}")


def schedule_daily_reminder(enabled: bool, time_str: str, sched=None):
    """
    (Re)schedule the daily reminder, or remove it when disabled.

    Raises:
        InvalidTimeFormatException: If time_str is not HH:MM
    """
    sched = sched or scheduler

    if not enabled:
        if sched.get_job(DAILY_REMINDER_JOB_ID):
            sched.remove_job(DAILY_REMINDER_JOB_ID)
            logger.info("Daily reminder cancelled")
        return

    hour, minute = DateService.parse_time(time_str)

    # Remove any existing reminder first
    if sched.get_job(DAILY_REMINDER_JOB_ID):
        sched.remove_job(DAILY_REMINDER_JOB_ID)

    sched.add_job(
        run_daily_reminder,
        CronTrigger(hour=hour, minute=minute),
        id=DAILY_REMINDER_JOB_ID,
        replace_existing=True
    )
    logger.info(f"Daily reminder scheduled at {hour:02d}:{minute:02d}")


def start_scheduler(challenge_service, reminder_enabled: bool = False, reminder_time: str = "09:00"):
    """Start the scheduler"""
    if not scheduler.running:
        scheduler.add_job(
            run_retry_pending_save,
            CronTrigger(minute='*'),
            args=[challenge_service],
            id='retry_pending_save',
            replace_existing=True
        )

        scheduler.add_job(
            run_day_rollover,
            CronTrigger(hour=0, minute=0),
            args=[challenge_service],
            id='day_rollover',
            replace_existing=True
        )

        try:
            schedule_daily_reminder(reminder_enabled, reminder_time)
        except Exception as e:
            logger.error(f"Could not schedule daily reminder: {e}")

        scheduler.start()
        logger.info(">>> APScheduler STARTED <<<")
        logger.info(f"Scheduled jobs: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("APScheduler stopped")
