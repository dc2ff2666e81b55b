"""
Tests for the class schedule calculator

Reference week (March 2025): Sat 1, Sun 2, Mon 3, Tue 4, Wed 5, Thu 6,
Fri 7, Sat 8.
"""
from datetime import datetime

import pytest

from app.classes.schemas.schedule import ClassSchedule, ClassSession, SessionState
from app.classes.services.schedule_calculator import (
    INVALID_SCHEDULE,
    NO_UPCOMING_CLASSES,
    format_days,
    format_schedule,
    get_next_occurrence_description,
    get_session_state,
    get_time_until_next_occurrence,
    parse_schedule,
    select_sessions_to_reset,
    should_reset_session,
    sort_days,
    validate_schedule,
)

SATURDAY = 1
SUNDAY = 2
MONDAY = 3
TUESDAY = 4
WEDNESDAY = 5
FRIDAY = 7


def at(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 3, day, hour, minute)


class TestParseSchedule:
    def test_comma_list_with_conjunction(self):
        parsed = parse_schedule("Lunes, Miércoles y Viernes 19:00-20:00")
        assert parsed.days == ["Lunes", "Miércoles", "Viernes"]
        assert parsed.start == "19:00"
        assert parsed.end == "20:00"

    def test_single_day(self):
        parsed = parse_schedule("Sábado 10:00-11:30")
        assert parsed == ClassSchedule(days=["Sábado"], start="10:00", end="11:30")

    def test_two_days_with_conjunction(self):
        assert parse_schedule("Martes y Jueves 18:30-19:30").days == ["Martes", "Jueves"]

    def test_comma_before_conjunction(self):
        assert parse_schedule("Lunes, Martes, y Jueves 09:00-10:00").days == [
            "Lunes",
            "Martes",
            "Jueves",
        ]

    def test_trailing_comma_before_times(self):
        assert parse_schedule("Lunes, Martes, 09:00-10:00").days == ["Lunes", "Martes"]

    def test_unknown_day_names_are_preserved(self):
        assert parse_schedule("Lunes y Festivos 09:00-10:00").days == ["Lunes", "Festivos"]

    def test_hours_are_not_range_checked(self):
        parsed = parse_schedule("Lunes 25:00-26:99")
        assert (parsed.start, parsed.end) == ("25:00", "26:99")

    @pytest.mark.parametrize(
        "raw", ["Formato inválido", "", "Lunes 9:00-10:00", "Lunes 19:00 a 20:00"]
    )
    def test_unparseable_yields_empty_schedule(self, raw):
        assert parse_schedule(raw) == ClassSchedule.empty()

    def test_empty_schedule_is_invalid(self):
        assert ClassSchedule.empty().is_valid is False

    def test_start_must_precede_end(self):
        assert parse_schedule("Lunes 20:00-19:00").is_valid is False
        assert parse_schedule("Lunes 19:00-19:00").is_valid is False
        assert parse_schedule("Lunes 19:00-20:00").is_valid is True


class TestNextOccurrence:
    schedule = "Lunes, Miércoles y Viernes 19:00-20:00"

    def test_later_today(self):
        assert get_next_occurrence_description(self.schedule, at(MONDAY, 17)) == "Today 19:00 - 20:00"

    def test_ongoing(self):
        assert get_next_occurrence_description(self.schedule, at(MONDAY, 19, 30)) == "Now (until 20:00)"

    def test_tomorrow(self):
        assert get_next_occurrence_description(self.schedule, at(TUESDAY, 12)) == "Tomorrow 19:00 - 20:00"

    def test_today_after_end_moves_to_next_day(self):
        assert (
            get_next_occurrence_description(self.schedule, at(MONDAY, 20))
            == "Next Miércoles 19:00 - 20:00"
        )

    def test_next_week_day(self):
        assert (
            get_next_occurrence_description(self.schedule, at(SATURDAY, 9))
            == "Next Lunes 19:00 - 20:00"
        )

    def test_same_weekday_next_week(self):
        assert (
            get_next_occurrence_description("Sábado 10:00-11:30", at(SATURDAY, 12))
            == "Sábado 10:00 - 11:30"
        )

    def test_accepts_parsed_schedule(self):
        parsed = parse_schedule("Domingo 10:00-11:00")
        assert get_next_occurrence_description(parsed, at(SATURDAY, 23)) == "Tomorrow 10:00 - 11:00"

    def test_invalid_schedule(self):
        assert get_next_occurrence_description("Formato inválido", at(MONDAY, 9)) == INVALID_SCHEDULE
        assert get_next_occurrence_description(ClassSchedule.empty(), at(MONDAY, 9)) == INVALID_SCHEDULE

    def test_no_real_weekday(self):
        assert get_next_occurrence_description("Festivos 10:00-11:00", at(MONDAY, 9)) == NO_UPCOMING_CLASSES


class TestTimeUntilNextOccurrence:
    def test_one_hour_before(self):
        assert get_time_until_next_occurrence("Sábado 10:00-11:30", at(SATURDAY, 9)) == "in 60 minutes"

    def test_minutes(self):
        assert get_time_until_next_occurrence("Sábado 10:00-11:30", at(SATURDAY, 9, 45)) == "in 15 minutes"

    def test_hours_and_minutes(self):
        assert get_time_until_next_occurrence("Sábado 10:00-11:30", at(SATURDAY, 7, 50)) == "in 2h 10m"

    def test_empty_while_ongoing(self):
        assert get_time_until_next_occurrence("Sábado 10:00-11:30", at(SATURDAY, 10, 15)) == ""

    def test_empty_when_not_today(self):
        assert get_time_until_next_occurrence("Sábado 10:00-11:30", at(SUNDAY, 8)) == ""

    def test_empty_for_invalid_schedule(self):
        assert get_time_until_next_occurrence("Formato inválido", at(SATURDAY, 8)) == ""


class TestShouldResetSession:
    schedule = "Sábado 10:00-11:30"

    def test_after_end(self):
        assert should_reset_session(self.schedule, at(SATURDAY, 12)) is True

    def test_before_start(self):
        assert should_reset_session(self.schedule, at(SATURDAY, 9)) is False

    def test_during_session(self):
        assert should_reset_session(self.schedule, at(SATURDAY, 11)) is False

    def test_at_end_minute(self):
        assert should_reset_session(self.schedule, at(SATURDAY, 11, 30)) is False
        assert should_reset_session(self.schedule, at(SATURDAY, 11, 31)) is True

    def test_other_day(self):
        assert should_reset_session(self.schedule, at(SUNDAY, 12)) is False

    def test_late_same_day_still_resets(self):
        assert should_reset_session(self.schedule, at(SATURDAY, 23, 59)) is True

    def test_invalid_schedule(self):
        assert should_reset_session("Formato inválido", at(SATURDAY, 12)) is False
        assert should_reset_session(ClassSchedule.empty(), at(SATURDAY, 12)) is False


class TestSessionState:
    schedule = "Sábado 10:00-11:30"

    @pytest.mark.parametrize(
        "moment,state",
        [
            (at(SATURDAY, 9, 59), SessionState.idle),
            (at(SATURDAY, 10, 0), SessionState.in_session),
            (at(SATURDAY, 11, 29), SessionState.in_session),
            (at(SATURDAY, 11, 30), SessionState.elapsed),
            (at(SATURDAY, 18, 0), SessionState.elapsed),
            (at(SUNDAY, 10, 30), SessionState.idle),
        ],
    )
    def test_states(self, moment, state):
        assert get_session_state(self.schedule, moment) == state

    def test_invalid_schedule_is_idle(self):
        assert get_session_state("", at(SATURDAY, 10, 30)) == SessionState.idle


class TestSelectSessionsToReset:
    def test_mixed_list(self):
        sessions = [
            ClassSession(id="a", schedule="Sábado 10:00-11:30"),
            ClassSession(id="b", schedule="Sábado 12:30-13:30"),
            ClassSession(id="c", schedule="Lunes, Miércoles y Sábado 08:00-09:00"),
            ClassSession(id="d", schedule="Domingo 10:00-11:00"),
            ClassSession(id="e", schedule="Formato inválido"),
        ]
        now = at(SATURDAY, 12)

        selected = select_sessions_to_reset(sessions, now)

        assert set(selected) == {"a", "c"}
        assert set(selected) == {s.id for s in sessions if should_reset_session(s.schedule, now)}

    def test_accepts_mappings_and_keeps_order(self):
        sessions = [
            {"id": "late", "schedule": "Sábado 10:00-11:00"},
            {"id": "early", "schedule": "Sábado 08:00-09:00"},
        ]
        assert select_sessions_to_reset(sessions, at(SATURDAY, 12)) == ["late", "early"]

    def test_empty(self):
        assert select_sessions_to_reset([], at(SATURDAY, 12)) == []


class TestValidationAndFormatting:
    def test_valid_schedule(self):
        checks = validate_schedule("Lunes y Jueves 19:00-20:30")
        assert checks.valid_format and checks.has_valid_days and checks.has_valid_times

    def test_unknown_day(self):
        checks = validate_schedule("Lunes y Festivos 19:00-20:30")
        assert checks.valid_format is True
        assert checks.has_valid_days is False

    def test_out_of_range_time(self):
        checks = validate_schedule("Lunes 23:00-24:30")
        assert checks.has_valid_times is False

    def test_unparseable(self):
        checks = validate_schedule("Formato inválido")
        assert not (checks.valid_format or checks.has_valid_days or checks.has_valid_times)

    def test_sort_days(self):
        assert sort_days(["Viernes", "Lunes", "Domingo", "Miércoles"]) == [
            "Lunes",
            "Miércoles",
            "Viernes",
            "Domingo",
        ]

    @pytest.mark.parametrize(
        "days,expected",
        [
            ([], "No days defined"),
            (["Lunes"], "Lunes"),
            (["Jueves", "Martes"], "Martes y Jueves"),
            (["Viernes", "Lunes", "Miércoles"], "Lunes, Miércoles y Viernes"),
        ],
    )
    def test_format_days(self, days, expected):
        assert format_days(days) == expected

    def test_format_schedule_normalizes(self):
        assert format_schedule("Viernes, Lunes y Miércoles 19:00-20:00") == (
            "Lunes, Miércoles y Viernes 19:00-20:00"
        )

    def test_format_empty_schedule(self):
        assert format_schedule("Formato inválido") == ""
