# pilates_tracker/config.py
import os
from dotenv import load_dotenv

load_dotenv(override=False)

# ----- Environment -----
STORE_BACKEND = os.getenv("PILATES_STORE", "local").strip().lower()   # local | sheets
LOCAL_STORE_PATH = os.getenv("PILATES_LOCAL_PATH", "pilates_sessions.json")
APP_TZ = os.getenv("PILATES_TZ", "Europe/Istanbul")
LOG_LEVEL = os.getenv("PILATES_LOG_LEVEL", "INFO")

# ----- Scheduling -----
DEFAULT_TIME = "18:00"
DEFAULT_DURATION_MINUTES = 50
DEFAULT_RANGE_DAYS = 30
# Hard cap on days examined by the recurring generator (about one year)
RECURRENCE_SCAN_LIMIT = 366

# ----- Reports -----
UPCOMING_LIMIT = 3
TREND_BUCKETS = 6

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# ----- Local store -----
LOCAL_STORE_KEY = "pilates_tracker_sessions"

# ----- Google Sheets -----
ATHLETES_TAB = "Athletes"
ATHLETES_HEADERS = [
    "athlete_id",
    "name",
    "phone",
    "notes",
    "created_at_utc",
]

SESSIONS_TAB = "Sessions"
SESSIONS_HEADERS = [
    "session_id",
    "athlete_id",
    "date",             # YYYY-MM-DD
    "time",             # HH:mm
    "duration",         # minutes
    "status",           # SessionStatus value
    "original_date",    # YYYY-MM-DD, first date before any move
    "notes",
    "created_at_utc",
    "updated_at_utc",
]
