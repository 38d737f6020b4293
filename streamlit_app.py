import logging

import pandas as pd
import streamlit as st

from pilates_tracker.config import (
    LOCAL_STORE_PATH,
    MONTH_NAMES,
    STORE_BACKEND,
    WEEKDAY_NAMES,
)
from pilates_tracker.core.schedule import (
    build_drafts,
    generate_recurring_dates,
    is_valid_time,
    schedule_errors,
)
from pilates_tracker.core.stats import (
    ALL_MONTHS,
    available_months,
    compute_monthly_trend,
    compute_statistics,
    parse_month_filter,
    sessions_on,
    status_breakdown,
    summarize,
    upcoming_sessions,
)
from pilates_tracker.log import setup_logging
from pilates_tracker.models.sessions import (
    DAYS_OF_WEEK,
    MARKABLE_STATUSES,
    STATUS_LABELS,
    SessionStatus,
)
from pilates_tracker.repositories.athletes_repo import SheetsAthleteStore
from pilates_tracker.repositories.base import StoreError
from pilates_tracker.repositories.local_store import LocalSessionStore
from pilates_tracker.repositories.sessions_repo import SheetsSessionStore
from pilates_tracker.services.gsheets_client import get_spreadsheet
from pilates_tracker.ui.state import (
    KEY_ATHLETE_ID,
    KEY_CALENDAR_MONTH,
    KEY_DURATION,
    KEY_END_DATE,
    KEY_REPORT_MONTH,
    KEY_SELECTED_DAYS,
    KEY_SESSION_ID,
    KEY_START_DATE,
    KEY_TIME,
    apply_reset_if_marked,
    change_calendar_month,
    init_state_if_missing,
    mark_reset,
    select_session,
)
from pilates_tracker.utils.dates import (
    from_iso_date,
    is_same_day,
    local_today,
    month_grid,
    to_iso_date,
)

setup_logging()
log = logging.getLogger("pilates_tracker.app")

st.set_page_config(page_title="Pilates Tracker", layout="wide")

USE_SHEETS = STORE_BACKEND == "sheets"
DAY_LABELS = {d.value: d.label for d in DAYS_OF_WEEK}


# -----------------------------
# Stores (safe to cache)
# -----------------------------
@st.cache_resource
def get_local_store():
    return LocalSessionStore(LOCAL_STORE_PATH)


@st.cache_resource
def get_sheets_session_store(athlete_id: str):
    return SheetsSessionStore(get_spreadsheet(), athlete_id=athlete_id)


@st.cache_resource
def get_athlete_store():
    return SheetsAthleteStore(get_spreadsheet())


def session_store(athlete_id):
    if USE_SHEETS:
        return get_sheets_session_store(athlete_id)
    return get_local_store()


def refresh_sessions_cache(athlete_id) -> None:
    # Hit the store ONLY here
    try:
        sessions = session_store(athlete_id).list()
    except StoreError as exc:
        st.error(f"Could not load sessions: {exc}")
        sessions = []
    st.session_state["sessions_cache"] = sessions
    st.session_state["sessions_cache_owner"] = athlete_id
    st.session_state["sessions_cache_ready"] = True


def invalidate_sessions_cache() -> None:
    st.session_state["sessions_cache_ready"] = False


def session_label(s) -> str:
    return f"{s.date} {s.time} · {STATUS_LABELS[s.status]}"


# -----------------------------
# Password gate
# -----------------------------
def require_password():
    try:
        expected = st.secrets.get("APP_PASSWORD")
    except FileNotFoundError:
        expected = None
    if not expected or st.session_state.get("authenticated"):
        return

    with st.form("login"):
        pw = st.text_input("Password", type="password")
        ok = st.form_submit_button("Login")

    if not ok:
        st.stop()

    if pw == expected:
        st.session_state["authenticated"] = True
        st.rerun()
    else:
        st.error("Incorrect password")
        st.stop()


require_password()
init_state_if_missing()
apply_reset_if_marked()


# -----------------------------
# Athletes (hosted variant only)
# -----------------------------
athlete_id = None
if USE_SHEETS:
    athletes_store = get_athlete_store()
    try:
        athletes = athletes_store.list()
    except StoreError as exc:
        st.error(f"Connection error: could not load athletes ({exc})")
        st.stop()

    with st.sidebar:
        st.header("Athletes")
        pending = st.session_state.pop("_pending_athlete_id", None)
        if pending:
            st.session_state[KEY_ATHLETE_ID] = pending
        if athletes:
            ids = [a.id for a in athletes]
            if st.session_state.get(KEY_ATHLETE_ID) not in ids:
                st.session_state[KEY_ATHLETE_ID] = ids[0]
            names = {a.id: a.name for a in athletes}
            athlete_id = st.selectbox("Athlete", ids, format_func=names.get, key=KEY_ATHLETE_ID)

        with st.form("new_athlete", clear_on_submit=True):
            new_name = st.text_input("Name")
            new_phone = st.text_input("Phone (optional)")
            if st.form_submit_button("Add athlete"):
                if not new_name.strip():
                    st.error("Name is required.")
                else:
                    try:
                        created = athletes_store.create(new_name, new_phone)
                    except StoreError as exc:
                        st.error(f"Could not add athlete: {exc}")
                    else:
                        st.session_state["_pending_athlete_id"] = created.id
                        invalidate_sessions_cache()
                        st.rerun()

        if athlete_id and st.button("Delete selected athlete"):
            try:
                get_sheets_session_store(athlete_id).delete_for_athlete(athlete_id)
                athletes_store.delete(athlete_id)
            except StoreError as exc:
                st.error(f"Could not delete athlete: {exc}")
            else:
                st.session_state.pop(KEY_ATHLETE_ID, None)
                invalidate_sessions_cache()
                st.rerun()

    if athlete_id is None:
        st.info("Add your first athlete in the sidebar.")
        st.stop()

if (
    not st.session_state.get("sessions_cache_ready")
    or st.session_state.get("sessions_cache_owner") != athlete_id
):
    refresh_sessions_cache(athlete_id)

sessions = st.session_state["sessions_cache"]
today = local_today()

tab_dashboard, tab_calendar, tab_reports, tab_session = st.tabs(
    ["Dashboard", "Calendar", "Reports", "Session"]
)


# -----------------------------
# Dashboard
# -----------------------------
with tab_dashboard:
    summary = summarize(sessions)
    c1, c2, c3 = st.columns(3)
    c1.metric("Attended", summary.attended)
    c2.metric("Attendance rate", f"{summary.rate}%")
    c3.metric("Total sessions", summary.total)

    st.subheader("Upcoming sessions")
    upcoming = upcoming_sessions(sessions, today=today)
    if not upcoming:
        st.info("No upcoming scheduled sessions.")
    for s in upcoming:
        st.button(
            f"{s.date} · {s.time} · {s.duration} min",
            key=f"upcoming_{s.id}",
            on_click=select_session,
            args=(s.id,),
        )


# -----------------------------
# Calendar + add schedule
# -----------------------------
with tab_calendar:
    year, month0 = st.session_state[KEY_CALENDAR_MONTH]

    b1, b2, b3 = st.columns([1, 4, 1])
    with b1:
        st.button("◀", on_click=change_calendar_month, args=(-1,), key="prev_month")
    with b2:
        st.subheader(f"{MONTH_NAMES[month0]} {year}")
    with b3:
        st.button("▶", on_click=change_calendar_month, args=(1,), key="next_month")

    header = st.columns(7)
    for col, name in zip(header, WEEKDAY_NAMES[1:] + WEEKDAY_NAMES[:1]):
        col.markdown(f"**{name[:3]}**")

    cells = month_grid(year, month0)
    for week_start in range(0, len(cells), 7):
        cols = st.columns(7)
        for col, day in zip(cols, cells[week_start:week_start + 7]):
            if day is None:
                continue
            marker = " (today)" if is_same_day(day, today) else ""
            col.markdown(f"{day.day}{marker}")
            for s in sessions_on(sessions, day):
                col.button(
                    f"{s.time} Pilates",
                    key=f"cal_{s.id}",
                    on_click=select_session,
                    args=(s.id,),
                    help=STATUS_LABELS[s.status],
                )

    with st.expander("Create schedule"):
        c1, c2 = st.columns(2)
        with c1:
            start_date = st.date_input("Start date", key=KEY_START_DATE)
        with c2:
            end_date = st.date_input("End date", key=KEY_END_DATE)

        c3, c4 = st.columns(2)
        with c3:
            time = st.text_input("Time (HH:MM)", key=KEY_TIME)
        with c4:
            duration = st.number_input("Duration (min)", min_value=15, step=5, key=KEY_DURATION)

        selected_days = st.multiselect(
            "Repeat on",
            [d.value for d in DAYS_OF_WEEK],
            format_func=DAY_LABELS.get,
            key=KEY_SELECTED_DAYS,
        )

        r1, r2, _ = st.columns([2, 1, 5])
        with r2:
            st.button("Reset", on_click=mark_reset, key="reset_schedule_btn")
        with r1:
            create = st.button("Create schedule", type="primary", key="create_schedule_btn")

        if create:
            start_iso = to_iso_date(start_date) if start_date else None
            end_iso = to_iso_date(end_date) if end_date else None
            errors = schedule_errors(start_iso, end_iso, selected_days, time, int(duration))
            if errors:
                for e in errors:
                    st.error(e)
            else:
                dates = generate_recurring_dates(start_iso, end_iso, selected_days)
                drafts = build_drafts(dates, time.strip(), int(duration), athlete_id=athlete_id)
                try:
                    created = session_store(athlete_id).create_many(drafts)
                except StoreError as exc:
                    st.error(f"Could not create the schedule: {exc}")
                else:
                    log.info("Created %d sessions", len(created))
                    invalidate_sessions_cache()
                    mark_reset()
                    st.rerun()


# -----------------------------
# Reports
# -----------------------------
with tab_reports:
    st.header("Reports & statistics")

    months = available_months(sessions)
    month_values = [ALL_MONTHS] + [m.value for m in months]
    month_labels = {m.value: m.label for m in months}
    month_labels[ALL_MONTHS] = "All time"
    if st.session_state.get(KEY_REPORT_MONTH) not in month_values:
        st.session_state[KEY_REPORT_MONTH] = ALL_MONTHS
    picked = st.selectbox("Month", month_values, format_func=month_labels.get, key=KEY_REPORT_MONTH)

    stats = compute_statistics(sessions, parse_month_filter(picked))
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total", stats.total)
    c2.metric("Attended", stats.attended)
    c3.metric("Missed / cancelled", stats.missed + stats.cancelled)
    c4.metric("Attendance rate", f"{stats.rate}%")

    left, right = st.columns(2)
    with left:
        st.subheader("Overall" if picked == ALL_MONTHS else "Selected month")
        breakdown = status_breakdown(stats)
        if breakdown:
            st.bar_chart(pd.DataFrame(breakdown, columns=["status", "sessions"]).set_index("status"))
        else:
            st.info("No data yet.")

    with right:
        st.subheader("Last 6 months")
        trend = compute_monthly_trend(sessions)
        if trend:
            trend_df = pd.DataFrame(
                {
                    "month": [f"{b.year}-{b.month0 + 1:02d} {b.label[:3]}" for b in trend],
                    "total": [b.total for b in trend],
                    "attended": [b.attended for b in trend],
                }
            ).set_index("month")
            st.bar_chart(trend_df)
        else:
            st.info("No data yet.")


# -----------------------------
# Session detail
# -----------------------------
with tab_session:
    by_id = {s.id: s for s in sessions}
    if not by_id:
        st.info("No sessions yet. Create a schedule from the Calendar tab.")
        st.stop()
    if st.session_state.get(KEY_SESSION_ID) not in by_id:
        st.session_state.pop(KEY_SESSION_ID, None)

    ids = list(by_id)
    sid = st.selectbox("Session", ids, format_func=lambda i: session_label(by_id[i]), key=KEY_SESSION_ID)
    session = by_id[sid]

    st.markdown(f"**{session.date}** at **{session.time}** · {session.duration} min")
    if session.original_date:
        st.caption(f"Moved session (originally {session.original_date})")

    status_options = [SessionStatus.SCHEDULED] + MARKABLE_STATUSES
    if session.status not in status_options:
        status_options.append(session.status)
    status = st.radio(
        "Outcome",
        status_options,
        index=status_options.index(session.status),
        format_func=STATUS_LABELS.get,
        horizontal=True,
        key=f"status_{sid}",
    )

    moving = st.checkbox("Move this session to another date", key=f"move_{sid}")
    if moving:
        m1, m2 = st.columns(2)
        with m1:
            new_date = st.date_input("New date", value=from_iso_date(session.date), key=f"new_date_{sid}")
        with m2:
            new_time = st.text_input("New time (HH:MM)", value=session.time, key=f"new_time_{sid}")

    notes = st.text_area("Notes", value=session.notes or "", key=f"notes_{sid}")

    s1, s2, _ = st.columns([1, 1, 6])
    with s1:
        save = st.button("Save", type="primary", key=f"save_{sid}")
    with s2:
        remove = st.button("Delete", key=f"delete_{sid}")

    if save:
        updated = session.with_status(status).with_notes(notes)
        if moving and not is_valid_time(new_time):
            st.error("Time must be HH:MM (24-hour).")
            st.stop()
        if moving:
            updated = updated.reschedule(to_iso_date(new_date), new_time.strip())
        try:
            session_store(athlete_id).update(updated)
        except StoreError as exc:
            st.error(f"Update failed: {exc}")
        else:
            invalidate_sessions_cache()
            st.rerun()

    if remove:
        try:
            session_store(athlete_id).delete(sid)
        except StoreError as exc:
            st.error(f"Delete failed: {exc}")
        else:
            st.session_state.pop(KEY_SESSION_ID, None)
            invalidate_sessions_cache()
            st.rerun()
