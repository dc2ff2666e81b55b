"""Class Schedule Router - Evaluate weekly schedule strings"""
from fastapi import APIRouter, Depends, Request

from app.classes.schemas.schedule import ScheduleEvaluation, ScheduleEvaluationRequest
from app.classes.services.schedule_calculator import (
    format_schedule,
    get_next_occurrence_description,
    get_session_state,
    get_time_until_next_occurrence,
    parse_schedule,
    should_reset_session,
    validate_schedule,
)
from app.core.clock import Clock, get_clock
from app.core.config import RATE_LIMIT_EVALUATION
from app.core.limits import limiter

router = APIRouter(prefix="/classes/schedule", tags=["Class Schedule"])


@router.post("/evaluate", response_model=ScheduleEvaluation)
@limiter.limit(RATE_LIMIT_EVALUATION)
async def evaluate_schedule(
    request: Request,
    body: ScheduleEvaluationRequest,
    clock: Clock = Depends(get_clock),
):
    """
    Parse a schedule string and describe it relative to now.

    Malformed text is not an error: it parses to the empty schedule and
    the response reports it through ``checks``.
    """
    now = clock.now()
    parsed = parse_schedule(body.schedule)

    return ScheduleEvaluation(
        schedule=body.schedule,
        parsed=parsed,
        formatted=format_schedule(parsed),
        next_class=get_next_occurrence_description(parsed, now),
        time_until=get_time_until_next_occurrence(parsed, now),
        should_reset=should_reset_session(parsed, now),
        state=get_session_state(parsed, now),
        checks=validate_schedule(parsed),
        evaluated_at=now,
    )
