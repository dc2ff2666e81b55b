"""
Weekly class schedule calculator.

Parses the admin-entered schedule text (``"Lunes, Miércoles y Viernes
19:00-20:00"``) and answers questions relative to a given ``now``: the next
session, how long until it starts, and whether today's session has ended so
its roster can be cleared.

A recurring session moves through::

    idle (before start) -> in_session (start <= now < end) -> elapsed (now >= end)

and goes back to idle once an external reset clears its enrollments. No reset
bookkeeping is kept here; clearing an empty roster is harmless.
"""

import re
from datetime import datetime
from typing import Iterable, List, Mapping, Union

from app.classes.schemas.schedule import (
    WEEKDAY_NAMES,
    ClassSchedule,
    ClassSession,
    ScheduleChecks,
    SessionState,
)

TIME_RANGE_PATTERN = re.compile(r"(\d{2}:\d{2})-(\d{2}:\d{2})")
DAY_SEPARATOR_PATTERN = re.compile(r"\s*,\s*(?:y\s+)?|\s+y\s+")
CLOCK_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")

INVALID_SCHEDULE = "Invalid schedule"
NO_UPCOMING_CLASSES = "No upcoming classes"
NO_DAYS_DEFINED = "No days defined"

ScheduleLike = Union[ClassSchedule, str, None]


def parse_schedule(raw: str) -> ClassSchedule:
    """
    Split schedule text into day names and a start/end time.

    Day names are kept as written, even when they are not weekdays; text
    without an ``HH:MM-HH:MM`` range yields the empty schedule.
    """
    if not raw:
        return ClassSchedule.empty()

    match = TIME_RANGE_PATTERN.search(raw)
    if not match:
        return ClassSchedule.empty()

    start, end = match.groups()
    days_text = (raw[: match.start()] + raw[match.end() :]).strip().rstrip(",")
    days = [day.strip() for day in DAY_SEPARATOR_PATTERN.split(days_text)]

    return ClassSchedule(days=[day for day in days if day], start=start, end=end)


def _as_schedule(schedule: ScheduleLike) -> ClassSchedule:
    if isinstance(schedule, ClassSchedule):
        return schedule
    return parse_schedule(schedule or "")


def _minutes(clock_time: str) -> int:
    hours, minutes = clock_time.split(":")
    return int(hours) * 60 + int(minutes)


def _minute_of_day(now: datetime) -> int:
    return now.hour * 60 + now.minute


def _weekday_name(now: datetime) -> str:
    return WEEKDAY_NAMES[now.weekday()]


def _is_scheduled_today(schedule: ClassSchedule, now: datetime) -> bool:
    return _weekday_name(now) in schedule.days


def get_next_occurrence_description(schedule: ScheduleLike, now: datetime) -> str:
    schedule = _as_schedule(schedule)
    if not schedule.is_valid:
        return INVALID_SCHEDULE

    start, end = schedule.start, schedule.end
    current = _minute_of_day(now)

    if _is_scheduled_today(schedule, now) and current < _minutes(end):
        if current < _minutes(start):
            return f"Today {start} - {end}"
        return f"Now (until {end})"

    class_days = {
        WEEKDAY_NAMES.index(day) for day in schedule.days if day in WEEKDAY_NAMES
    }
    today = now.weekday()

    # 7 days ahead is today's weekday again, after today's session ended
    for days_ahead in range(1, 8):
        weekday = (today + days_ahead) % 7
        if weekday not in class_days:
            continue

        day_name = WEEKDAY_NAMES[weekday]
        if days_ahead == 1:
            return f"Tomorrow {start} - {end}"
        if days_ahead <= 6:
            return f"Next {day_name} {start} - {end}"
        return f"{day_name} {start} - {end}"

    return NO_UPCOMING_CLASSES


def get_time_until_next_occurrence(schedule: ScheduleLike, now: datetime) -> str:
    """Countdown to today's session; empty unless it is still to start today"""
    schedule = _as_schedule(schedule)
    if not schedule.is_valid or not _is_scheduled_today(schedule, now):
        return ""

    remaining = _minutes(schedule.start) - _minute_of_day(now)
    if remaining <= 0:
        return ""

    if remaining <= 60:
        return f"in {remaining} minutes"

    hours, minutes = divmod(remaining, 60)
    return f"in {hours}h {minutes}m"


def should_reset_session(schedule: ScheduleLike, now: datetime) -> bool:
    """Today's session is over: strictly after its end time"""
    schedule = _as_schedule(schedule)
    if not schedule.is_valid or not _is_scheduled_today(schedule, now):
        return False

    return _minute_of_day(now) > _minutes(schedule.end)


def get_session_state(schedule: ScheduleLike, now: datetime) -> SessionState:
    schedule = _as_schedule(schedule)
    if not schedule.is_valid or not _is_scheduled_today(schedule, now):
        return SessionState.idle

    current = _minute_of_day(now)
    if current < _minutes(schedule.start):
        return SessionState.idle
    if current < _minutes(schedule.end):
        return SessionState.in_session
    return SessionState.elapsed


def select_sessions_to_reset(
    sessions: Iterable[Union[ClassSession, Mapping]], now: datetime
) -> List[str]:
    """Ids of sessions whose window has elapsed today, in input order"""
    selected = []
    for session in sessions:
        if isinstance(session, Mapping):
            session = ClassSession(**session)
        if should_reset_session(session.schedule, now):
            selected.append(session.id)
    return selected


def validate_schedule(schedule: ScheduleLike) -> ScheduleChecks:
    """Optional strict checks on top of the lenient parser"""
    schedule = _as_schedule(schedule)
    return ScheduleChecks(
        valid_format=schedule.is_valid,
        has_valid_days=bool(schedule.days)
        and all(day in WEEKDAY_NAMES for day in schedule.days),
        has_valid_times=bool(
            CLOCK_TIME_PATTERN.match(schedule.start)
            and CLOCK_TIME_PATTERN.match(schedule.end)
        ),
    )


def sort_days(days: Iterable[str]) -> List[str]:
    """Monday-first order; unknown names come first, in their original order"""
    return sorted(
        days, key=lambda d: WEEKDAY_NAMES.index(d) if d in WEEKDAY_NAMES else -1
    )


def format_days(days: Iterable[str]) -> str:
    ordered = sort_days(days)
    if not ordered:
        return NO_DAYS_DEFINED
    if len(ordered) == 1:
        return ordered[0]
    return f"{', '.join(ordered[:-1])} y {ordered[-1]}"


def format_schedule(schedule: ScheduleLike) -> str:
    """Canonical text for a schedule; empty for the empty schedule"""
    schedule = _as_schedule(schedule)
    if not schedule.days or not schedule.start or not schedule.end:
        return ""
    return f"{format_days(schedule.days)} {schedule.start}-{schedule.end}"
