"""Membership Status Router - Status, enrollment eligibility and billing simulation"""
from fastapi import APIRouter, Depends, Request

from app.core.clock import Clock, get_clock
from app.core.config import RATE_LIMIT_EVALUATION
from app.core.limits import limiter
from app.membership.schemas.status import (
    EnrollmentCheckRequest,
    EnrollmentCheckResponse,
    SimulationRequest,
    SimulationResult,
    StatusEvaluationRequest,
    StatusEvaluationResponse,
)
from app.membership.services.payment_lookup import (
    has_payment_in_month,
    latest_medical_insurance_payment,
    latest_qualifying_payment,
)
from app.membership.services.simulation import simulate_billing_day
from app.membership.services.status_engine import (
    current_month_and_year,
    evaluate_enrollment,
    evaluate_enrollment_eligibility,
    get_account_notice,
    get_new_user_status,
    is_medical_insurance_valid,
)

router = APIRouter(prefix="/membership", tags=["Membership"])


def _has_valid_insurance(payments, now) -> bool:
    insurance = latest_medical_insurance_payment(payments)
    return is_medical_insurance_valid(
        insurance.payment_date if insurance else None, now
    )


@router.post("/status", response_model=StatusEvaluationResponse)
@limiter.limit(RATE_LIMIT_EVALUATION)
async def evaluate_status(
    request: Request,
    body: StatusEvaluationRequest,
    clock: Clock = Depends(get_clock),
):
    """
    Recompute a user's membership status from their payments.

    Used after a payment is registered or deleted; the caller persists
    ``new_status`` when ``changed`` is true.
    """
    now = clock.now()
    month, year = current_month_and_year(now)

    has_payment = has_payment_in_month(body.payments, year, month)
    has_insurance = _has_valid_insurance(body.payments, now)
    new_status = get_new_user_status(
        body.current_status, has_payment, body.role, has_insurance, now
    )

    return StatusEvaluationResponse(
        user_id=body.user_id,
        current_status=body.current_status,
        new_status=new_status,
        changed=new_status != body.current_status,
        has_current_month_payment=has_payment,
        has_medical_insurance=has_insurance,
        enrollment=evaluate_enrollment_eligibility(new_status, has_insurance, now),
        notice=get_account_notice(new_status, now),
        evaluated_at=now,
    )


@router.post("/enrollment-check", response_model=EnrollmentCheckResponse)
@limiter.limit(RATE_LIMIT_EVALUATION)
async def check_enrollment(
    request: Request,
    body: EnrollmentCheckRequest,
    clock: Clock = Depends(get_clock),
):
    """
    Whether the user may enroll in a class of the given discipline now.

    Checks status and medical insurance first, then that the most recent
    monthly fee covers the class discipline, then free seats and an
    existing enrollment when the caller sends them.
    """
    now = clock.now()
    last_payment = latest_qualifying_payment(body.payments)
    last_concept = last_payment.concept if last_payment else None

    decision = evaluate_enrollment(
        body.status,
        _has_valid_insurance(body.payments, now),
        body.class_name,
        last_concept,
        now,
        enrolled_count=body.enrolled_count,
        capacity=body.capacity,
        already_enrolled=body.already_enrolled,
    )

    return EnrollmentCheckResponse(
        user_id=body.user_id,
        class_name=body.class_name,
        decision=decision,
        last_qualifying_concept=last_concept.value if last_concept else None,
        evaluated_at=now,
    )


@router.post("/simulate", response_model=SimulationResult)
@limiter.limit(RATE_LIMIT_EVALUATION)
async def simulate_day(request: Request, body: SimulationRequest):
    """Run the canonical billing scenarios for a day of the month"""
    return simulate_billing_day(body.day)
