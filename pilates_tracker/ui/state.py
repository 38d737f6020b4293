# pilates_tracker/ui/state.py
import streamlit as st

from pilates_tracker.config import DEFAULT_DURATION_MINUTES, DEFAULT_RANGE_DAYS, DEFAULT_TIME
from pilates_tracker.utils.dates import add_days, local_today, shift_month

# Centralize keys to avoid typos across files
KEY_DO_RESET = "_do_reset"

KEY_START_DATE = "start_date"
KEY_END_DATE = "end_date"
KEY_TIME = "time"
KEY_DURATION = "duration"
KEY_SELECTED_DAYS = "selected_days"

KEY_ATHLETE_ID = "athlete_id"
KEY_CALENDAR_MONTH = "calendar_month"      # (year, month0)
KEY_REPORT_MONTH = "report_month"          # month picker value or "all"
KEY_SESSION_ID = "session_id"


def _reset_schedule_form() -> None:
    today = local_today()
    st.session_state[KEY_START_DATE] = today
    st.session_state[KEY_END_DATE] = add_days(today, DEFAULT_RANGE_DAYS)
    st.session_state[KEY_TIME] = DEFAULT_TIME
    st.session_state[KEY_DURATION] = DEFAULT_DURATION_MINUTES
    st.session_state[KEY_SELECTED_DAYS] = []


def init_state_if_missing() -> None:
    """Call at the top of the page before rendering widgets."""
    if KEY_SELECTED_DAYS not in st.session_state:
        _reset_schedule_form()
    if KEY_CALENDAR_MONTH not in st.session_state:
        today = local_today()
        st.session_state[KEY_CALENDAR_MONTH] = (today.year, today.month - 1)


def change_calendar_month(delta: int) -> None:
    year, month0 = st.session_state[KEY_CALENDAR_MONTH]
    st.session_state[KEY_CALENDAR_MONTH] = shift_month(year, month0, delta)


def select_session(session_id: str) -> None:
    st.session_state[KEY_SESSION_ID] = session_id


def mark_reset() -> None:
    st.session_state[KEY_DO_RESET] = True


def apply_reset_if_marked() -> None:
    """
    'Reset on next run': call at the very top of the page BEFORE creating
    widgets, since widget-bound keys can't change once the widget exists.
    """
    if st.session_state.get(KEY_DO_RESET):
        _reset_schedule_form()
        st.session_state[KEY_DO_RESET] = False
