"""Scheduled membership status processing"""
from fastapi import APIRouter, Depends

from app.core.clock import Clock, get_clock
from app.core.dependencies import verify_cron_secret
from app.membership.schemas.status import StatusJobRequest, StatusJobResult
from app.membership.services.status_job import process_user_statuses

router = APIRouter(
    prefix="/cron", tags=["Cron"], dependencies=[Depends(verify_cron_secret)]
)


@router.post("/process-statuses", response_model=StatusJobResult)
async def process_statuses(
    body: StatusJobRequest,
    clock: Clock = Depends(get_clock),
):
    """
    Daily run: which users' stored statuses must change.

    The scheduler persists ``updates`` and signs out ``sign_out_user_ids``.
    """
    return process_user_statuses(body.users, body.payments, clock.now())
