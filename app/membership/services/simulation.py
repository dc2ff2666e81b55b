"""
Billing day simulator: runs the canonical user scenarios through the status
engine for a chosen day of the month. Used by staff to explain the billing
calendar.
"""
from datetime import date
from typing import Optional

from app.core.exceptions import ValidationError
from app.membership.enums import MembershipStatus, UserRole
from app.membership.schemas.status import SimulationResult, SimulationScenario
from app.membership.services.status_engine import (
    GRACE_PERIOD_LAST_DAY,
    SUSPENSION_FIRST_DAY,
    can_enroll_in_classes,
    get_enrollment_status_message,
    get_new_user_status,
)

SCENARIOS = [
    (MembershipStatus.active, False, "Active user without payment"),
    (MembershipStatus.pending, False, "Pending user without payment"),
    (MembershipStatus.suspended, False, "Suspended user without payment"),
    (MembershipStatus.active, True, "Active user with payment"),
    (MembershipStatus.pending, True, "Pending user with payment"),
    (MembershipStatus.suspended, True, "Suspended user with payment"),
]

# A 31-day month so every simulated day exists
_REFERENCE_YEAR = 2025
_REFERENCE_MONTH = 1


def billing_period(day: int) -> str:
    if day <= GRACE_PERIOD_LAST_DAY:
        return "grace"
    if day < SUSPENSION_FIRST_DAY:
        return "blocked"
    return "suspension"


_PERIOD_ANALYSIS = {
    "grace": (
        "Grace period - users without payment go to PENDING",
        "PENDING can enroll, ACTIVE can enroll",
    ),
    "blocked": (
        "Blocked period - users without payment stay PENDING (no enrollment)",
        "PENDING cannot enroll, ACTIVE can enroll",
    ),
    "suspension": (
        "Suspension period - users without payment go to SUSPENDED",
        "SUSPENDED cannot enroll, ACTIVE can enroll",
    ),
}


def simulate_billing_day(day: int, on: Optional[date] = None) -> SimulationResult:
    """
    Args:
        day: Day of month, 1..31
        on: Month to simulate in; defaults to a 31-day reference month

    Raises:
        ValidationError: If the day does not exist in the month
    """
    year, month = (on.year, on.month) if on else (_REFERENCE_YEAR, _REFERENCE_MONTH)
    try:
        simulated = date(year, month, day)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid day {day} for {year}-{month:02d}",
            details={"day": day, "year": year, "month": month},
        )

    scenarios = []
    for current_status, has_payment, description in SCENARIOS:
        new_status = get_new_user_status(
            current_status, has_payment, UserRole.user, True, simulated
        )
        scenarios.append(
            SimulationScenario(
                description=description,
                current_status=current_status,
                has_payment=has_payment,
                new_status=new_status,
                changed=new_status != current_status,
                can_enroll=can_enroll_in_classes(new_status, True, simulated),
                reason=get_enrollment_status_message(new_status, True, simulated),
            )
        )

    period = billing_period(day)
    analysis, rules = _PERIOD_ANALYSIS[period]
    return SimulationResult(
        day=day,
        period=period,
        day_range_analysis=analysis,
        enrollment_rules=rules,
        scenarios=scenarios,
        changes_expected=sum(1 for s in scenarios if s.changed),
        users_who_can_enroll=sum(1 for s in scenarios if s.can_enroll),
        message=f"Simulation completed for day {day}. {analysis}",
    )
