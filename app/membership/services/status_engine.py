"""
Membership status engine.

Pure decisions over already-fetched facts: a user's billing status from
payments and the calendar, class enrollment permission, and the messages
shown when enrollment is refused. Nothing here reads the clock or performs
I/O; callers pass ``now`` and persist whatever they decide to.

Billing month, day-of-month ranges:

    1-5    grace period     unpaid users are ``pending`` and may still enroll
    6-14   blocked-pending  unpaid users stay ``pending`` but may not enroll
    15-31  suspension       unpaid users become ``suspended``
"""

from datetime import date, datetime
from typing import NamedTuple, Optional, Union

from app.core.exceptions import EnrollmentDeniedError
from app.membership.enums import MembershipStatus, PaymentConcept, UserRole
from app.membership.schemas.eligibility import (
    ClassAvailability,
    ClassTypeEligibility,
    EnrollmentDecision,
    EnrollmentEligibility,
)

GRACE_PERIOD_LAST_DAY = 5
SUSPENSION_FIRST_DAY = 15

StatusLike = Union[MembershipStatus, str, None]
ConceptLike = Union[PaymentConcept, str, None]

MISSING_INSURANCE_MESSAGE = (
    "Your medical insurance is missing or expired. "
    "Pay the medical insurance fee to enroll in classes."
)
GRACE_PERIOD_NOTICE = (
    f"Account pending payment. You can enroll until day {GRACE_PERIOD_LAST_DAY}."
)
BLOCKED_PENDING_MESSAGE = (
    f"Account pending payment. Enrollment is closed from day "
    f"{GRACE_PERIOD_LAST_DAY + 1}. Make a payment to reactivate your account."
)
OVERDUE_PENDING_MESSAGE = (
    "Account pending payment. Make a payment to reactivate your account."
)
SUSPENDED_MESSAGE = "Account suspended. Contact the administrator."
UNKNOWN_STATUS_MESSAGE = "Account status not recognized."

NO_PAYMENT_MESSAGE = "No payments registered for this month."
ENROLLMENT_FEE_MESSAGE = (
    "The enrollment fee does not include class access. "
    "Pay the corresponding monthly fee."
)
INSURANCE_FEE_MESSAGE = (
    "The medical insurance fee does not include class access. "
    "Pay the corresponding monthly fee."
)
UNKNOWN_CONCEPT_MESSAGE = "Payment type not recognized."

CLASS_FULL_MESSAGE = "This class is full."
ALREADY_ENROLLED_MESSAGE = "You are already enrolled in this class."


class MonthYear(NamedTuple):
    month: int
    year: int


def current_month_and_year(now: Union[date, datetime]) -> MonthYear:
    return MonthYear(month=now.month, year=now.year)


def is_grace_period(now: Union[date, datetime]) -> bool:
    return 1 <= now.day <= GRACE_PERIOD_LAST_DAY


def is_medical_insurance_valid(
    last_insurance_payment_date: Optional[date], now: Union[date, datetime]
) -> bool:
    """
    Insurance bought on a date covers until the same calendar date of the
    next year (exclusive).

    Calendar components are compared, not elapsed days: a payment on
    2024-02-29 is valid through 2025-02-28 and expires on 2025-03-01.
    """
    if last_insurance_payment_date is None:
        return False

    paid = last_insurance_payment_date
    years_elapsed = now.year - paid.year

    if years_elapsed == 0:
        return True
    if years_elapsed == 1:
        return (now.month, now.day) < (paid.month, paid.day)
    return False


def get_new_user_status(
    current_status: StatusLike,
    has_current_month_payment: bool,
    role: Union[UserRole, str, None],
    has_medical_insurance: bool,
    now: Union[date, datetime],
) -> MembershipStatus:
    """
    Status a user should have at ``now``.

    Idempotent: the result does not depend on ``current_status``, which is
    accepted so callers can compare and only persist on change.
    """
    if UserRole.from_value(role).is_payment_exempt:
        return MembershipStatus.active

    if has_current_month_payment and has_medical_insurance:
        return MembershipStatus.active

    if now.day >= SUSPENSION_FIRST_DAY:
        return MembershipStatus.suspended

    return MembershipStatus.pending


def can_enroll_in_classes(
    status: StatusLike, has_medical_insurance: bool, now: Union[date, datetime]
) -> bool:
    if not has_medical_insurance:
        return False

    status = MembershipStatus.from_value(status)
    if status == MembershipStatus.active:
        return True
    if status == MembershipStatus.pending:
        return is_grace_period(now)
    return False


def get_enrollment_status_message(
    status: StatusLike, has_medical_insurance: bool, now: Union[date, datetime]
) -> str:
    """Why enrollment is refused; empty exactly when it is allowed"""
    if not has_medical_insurance:
        return MISSING_INSURANCE_MESSAGE

    status = MembershipStatus.from_value(status)
    if status == MembershipStatus.active:
        return ""
    if status == MembershipStatus.pending:
        if is_grace_period(now):
            return ""
        if now.day < SUSPENSION_FIRST_DAY:
            return BLOCKED_PENDING_MESSAGE
        return OVERDUE_PENDING_MESSAGE
    if status == MembershipStatus.suspended:
        return SUSPENDED_MESSAGE
    return UNKNOWN_STATUS_MESSAGE


def get_account_notice(status: StatusLike, now: Union[date, datetime]) -> str:
    """Banner text for the account page, shown even while enrollment is open"""
    status = MembershipStatus.from_value(status)
    if status == MembershipStatus.pending and is_grace_period(now):
        return GRACE_PERIOD_NOTICE
    if status == MembershipStatus.active:
        return ""
    return get_enrollment_status_message(status, True, now)


def can_enroll_in_class_type(
    target_discipline: str, last_qualifying_concept: ConceptLike
) -> bool:
    """
    ``last_qualifying_concept`` is the concept of the user's most recent
    payment excluding enrollment and insurance fees (see
    ``payment_lookup.latest_qualifying_payment``).
    """
    if not last_qualifying_concept:
        return False

    concept = PaymentConcept.from_value(last_qualifying_concept)
    if concept == PaymentConcept.combined_fee:
        return True
    return target_discipline.strip() in concept.disciplines


def get_class_restriction_message(
    target_discipline: str, last_qualifying_concept: ConceptLike
) -> str:
    """Why the class is refused; empty exactly when it is allowed"""
    if not last_qualifying_concept:
        return NO_PAYMENT_MESSAGE

    if can_enroll_in_class_type(target_discipline, last_qualifying_concept):
        return ""

    concept = PaymentConcept.from_value(last_qualifying_concept)
    if concept == PaymentConcept.enrollment_fee:
        return ENROLLMENT_FEE_MESSAGE
    if concept == PaymentConcept.medical_insurance:
        return INSURANCE_FEE_MESSAGE
    if concept.disciplines:
        covered = " + ".join(sorted(concept.disciplines))
        return (
            f"Your current fee only includes {covered}. "
            f"To access {target_discipline.strip()}, you need the combined fee."
        )
    return UNKNOWN_CONCEPT_MESSAGE


def evaluate_enrollment_eligibility(
    status: StatusLike, has_medical_insurance: bool, now: Union[date, datetime]
) -> EnrollmentEligibility:
    return EnrollmentEligibility(
        allowed=can_enroll_in_classes(status, has_medical_insurance, now),
        reason=get_enrollment_status_message(status, has_medical_insurance, now),
    )


def evaluate_class_type_eligibility(
    target_discipline: str, last_qualifying_concept: ConceptLike
) -> ClassTypeEligibility:
    return ClassTypeEligibility(
        allowed=can_enroll_in_class_type(target_discipline, last_qualifying_concept),
        reason=get_class_restriction_message(
            target_discipline, last_qualifying_concept
        ),
    )


def evaluate_class_availability(
    enrolled_count: Optional[int] = None,
    capacity: Optional[int] = None,
    already_enrolled: bool = False,
) -> ClassAvailability:
    """Seat and duplicate check; an unknown capacity never blocks"""
    if capacity is not None and (enrolled_count or 0) >= capacity:
        return ClassAvailability(allowed=False, reason=CLASS_FULL_MESSAGE)
    if already_enrolled:
        return ClassAvailability(allowed=False, reason=ALREADY_ENROLLED_MESSAGE)
    return ClassAvailability(allowed=True)


def evaluate_enrollment(
    status: StatusLike,
    has_medical_insurance: bool,
    target_discipline: str,
    last_qualifying_concept: ConceptLike,
    now: Union[date, datetime],
    enrolled_count: Optional[int] = None,
    capacity: Optional[int] = None,
    already_enrolled: bool = False,
) -> EnrollmentDecision:
    """Status/insurance gate first, then class type, then seats"""
    status_check = evaluate_enrollment_eligibility(status, has_medical_insurance, now)
    if not status_check.allowed:
        return EnrollmentDecision(
            allowed=False, reason=status_check.reason, status_check=status_check
        )

    class_type_check = evaluate_class_type_eligibility(
        target_discipline, last_qualifying_concept
    )
    if not class_type_check.allowed:
        return EnrollmentDecision(
            allowed=False,
            reason=class_type_check.reason,
            status_check=status_check,
            class_type_check=class_type_check,
        )

    availability_check = evaluate_class_availability(
        enrolled_count, capacity, already_enrolled
    )
    return EnrollmentDecision(
        allowed=availability_check.allowed,
        reason=availability_check.reason,
        status_check=status_check,
        class_type_check=class_type_check,
        availability_check=availability_check,
    )


def ensure_can_enroll(
    status: StatusLike,
    has_medical_insurance: bool,
    target_discipline: str,
    last_qualifying_concept: ConceptLike,
    now: Union[date, datetime],
    enrolled_count: Optional[int] = None,
    capacity: Optional[int] = None,
    already_enrolled: bool = False,
) -> EnrollmentDecision:
    """
    Guard for code paths that perform the enrollment themselves. The
    enrollment-check endpoint only reports the decision and never raises.

    Raises:
        EnrollmentDeniedError: With the user-facing reason of the failing
            gate; 403 for status and class type, 409 for a full class or a
            duplicate enrollment
    """
    decision = evaluate_enrollment(
        status,
        has_medical_insurance,
        target_discipline,
        last_qualifying_concept,
        now,
        enrolled_count,
        capacity,
        already_enrolled,
    )
    if decision.allowed:
        return decision

    details = {"discipline": target_discipline}
    if not decision.status_check.allowed:
        raise EnrollmentDeniedError(decision.reason, "status", details)
    if not decision.class_type_check.allowed:
        raise EnrollmentDeniedError(decision.reason, "class_type", details)
    raise EnrollmentDeniedError(
        decision.reason, "availability", details, status_code=409
    )
