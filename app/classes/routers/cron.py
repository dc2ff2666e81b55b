"""Scheduled class roster reset"""
from fastapi import APIRouter, Depends

from app.classes.schemas.schedule import ResetJobRequest, ResetJobResult
from app.classes.services.reset_job import plan_class_resets
from app.core.clock import Clock, get_clock
from app.core.dependencies import verify_cron_secret

router = APIRouter(
    prefix="/cron", tags=["Cron"], dependencies=[Depends(verify_cron_secret)]
)


@router.post("/reset-classes", response_model=ResetJobResult)
async def reset_classes(body: ResetJobRequest, clock: Clock = Depends(get_clock)):
    """Classes whose session ended today; the scheduler clears their enrollments"""
    return plan_class_resets(body.classes, clock.now())
