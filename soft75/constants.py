"""
Application constants and environment-driven configuration.
"""
import os

# Challenge
CHALLENGE_LENGTH_DAYS = 75

PHASE_NOT_STARTED = "not_started"
PHASE_IN_PROGRESS = "in_progress"
PHASE_FINISHED = "finished"

# Task identifiers
TASK_WATER = "water"
TASK_READING = "reading"
TASK_DIET = "diet"
TASK_WORKOUT = "workout"

TASK_IDS = (TASK_WATER, TASK_READING, TASK_DIET, TASK_WORKOUT)

# Labels shown by the widget and history screens
TASK_LABELS = {
    TASK_WATER: "💧 Water",
    TASK_READING: "📖 Read",
    TASK_DIET: "🥗 Diet",
    TASK_WORKOUT: "🏃‍♂️ Workout",
}

# Tracker outcomes
OUTCOME_NO_CHANGE = "no_change"
OUTCOME_ADVANCED = "advanced"
OUTCOME_FORGIVEN = "forgiven"
OUTCOME_RESET = "reset"
OUTCOME_JUMPED = "jumped"

# Gap classification between last completion and today
GAP_FIRST = "first"
GAP_SAME_DAY = "same_day"
GAP_CONSECUTIVE = "consecutive"
GAP_MISSED = "missed"

# Notifications
NOTIFICATION_DAILY_REMINDER = "daily_reminder"
NOTIFICATION_MILESTONE = "milestone"

DAILY_REMINDER_JOB_ID = "daily_reminder"
DAILY_REMINDER_TITLE = "75Soft: Daily Check-In"
DAILY_REMINDER_BODY = "Don't forget to complete your 75Soft tasks for today!"
MILESTONE_TITLE = "Congratulations!"
MILESTONE_BODY = "You've reached a {day}-day streak! Keep it up!"

DEFAULT_MILESTONE_DAYS = "7,30,75"

# Badges (title, required current_day)
BADGES = (
    ("7-Day Streak", 7),
    ("30-Day Streak", 30),
    ("75-Day Finish", 75),
)

# Environment
DATABASE_URL = os.getenv("SOFT75_DATABASE_URL", "sqlite:///./soft75.db")
WIDGET_DATA_PATH = os.getenv("SOFT75_WIDGET_PATH", "./widgetData.json")
DEBUG_ENABLED = os.getenv("SOFT75_DEBUG", "false").lower() in ("1", "true", "yes")

DEFAULT_LOG_DIRECTORY_PROD = "/var/log/soft75"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "SOFT75_CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")
    if origin.strip()
]
