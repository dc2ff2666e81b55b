"""
Daily membership status job.

Given every user's snapshot and payments, decide which stored statuses must
change. The scheduler persists the changes and closes the sessions of newly
suspended users; running the planner twice on the same data yields the same
plan.
"""
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List

from app.core.logging_utils import get_logger, log_business_event
from app.membership.enums import MembershipStatus
from app.membership.schemas.payments import PaymentRecord
from app.membership.schemas.status import (
    StatusChange,
    StatusJobResult,
    UserBillingSnapshot,
)
from app.membership.services.payment_lookup import (
    has_payment_in_month,
    latest_medical_insurance_payment,
)
from app.membership.services.status_engine import (
    current_month_and_year,
    get_new_user_status,
    is_medical_insurance_valid,
)

logger = get_logger(__name__)


def group_payments_by_user(
    payments: Iterable[PaymentRecord],
) -> Dict[str, List[PaymentRecord]]:
    grouped = defaultdict(list)
    for payment in payments:
        grouped[payment.user_id].append(payment)
    return grouped


def process_user_statuses(
    users: Iterable[UserBillingSnapshot],
    payments: Iterable[PaymentRecord],
    now: datetime,
) -> StatusJobResult:
    logger.info(f"[CRON] Processing membership statuses at {now.isoformat()}")

    payments_by_user = group_payments_by_user(payments)
    month, year = current_month_and_year(now)

    processed = 0
    updates: List[StatusChange] = []

    for user in users:
        processed += 1
        user_payments = payments_by_user.get(user.id, [])

        has_payment = has_payment_in_month(user_payments, year, month)
        insurance = latest_medical_insurance_payment(user_payments)
        has_insurance = is_medical_insurance_valid(
            insurance.payment_date if insurance else None, now
        )

        new_status = get_new_user_status(
            user.status, has_payment, user.role, has_insurance, now
        )
        if new_status == user.status:
            continue

        updates.append(
            StatusChange(
                user_id=user.id,
                old_status=user.status,
                new_status=new_status,
                has_payment=has_payment,
                has_medical_insurance=has_insurance,
            )
        )
        log_business_event(
            "membership_status_changed",
            "user",
            user.id,
            {
                "old_status": user.status.value,
                "new_status": new_status.value,
                "has_payment": has_payment,
                "has_medical_insurance": has_insurance,
            },
        )

    sign_out_user_ids = [
        change.user_id
        for change in updates
        if change.new_status == MembershipStatus.suspended
    ]

    result = StatusJobResult(
        timestamp=now,
        processed=processed,
        updated=len(updates),
        updates=updates,
        sign_out_user_ids=sign_out_user_ids,
        message=f"Processed {processed} users, {len(updates)} to update",
    )

    logger.info(
        f"[CRON] Status processing completed: {result.message}",
        extra={
            "processed": processed,
            "updated": len(updates),
            "suspended": len(sign_out_user_ids),
        },
    )
    return result
