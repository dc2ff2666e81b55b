"""
Payment lookups the decision functions expect from their callers, applied to
an in-memory list of payment rows.
"""
from datetime import date
from typing import Iterable, Optional, Tuple

from app.membership.enums import NON_QUALIFYING_CONCEPTS, PaymentConcept
from app.membership.schemas.payments import PaymentRecord


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """Half-open ``[first day, first day of next month)``"""
    start = date(year, month, 1)
    if month == 12:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start, end


def _most_recent(payments: Iterable[PaymentRecord]) -> Optional[PaymentRecord]:
    return max(payments, key=lambda p: p.payment_date, default=None)


def latest_medical_insurance_payment(
    payments: Iterable[PaymentRecord],
) -> Optional[PaymentRecord]:
    return _most_recent(
        p for p in payments if p.concept == PaymentConcept.medical_insurance
    )


def latest_qualifying_payment(
    payments: Iterable[PaymentRecord],
) -> Optional[PaymentRecord]:
    """Most recent payment that is neither enrollment fee nor insurance"""
    return _most_recent(p for p in payments if p.concept not in NON_QUALIFYING_CONCEPTS)


def has_payment_in_month(
    payments: Iterable[PaymentRecord], year: int, month: int
) -> bool:
    start, end = month_bounds(year, month)
    return any(start <= p.payment_date < end for p in payments)
