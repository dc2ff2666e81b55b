"""
Class reset job: picks the classes whose session for today has ended so the
scheduler can clear their enrollments.
"""
from datetime import datetime
from typing import Iterable

from app.classes.schemas.schedule import ClassResetDetail, ClassSession, ResetJobResult
from app.classes.services.schedule_calculator import select_sessions_to_reset
from app.core.logging_utils import get_logger, log_business_event

logger = get_logger(__name__)


def plan_class_resets(classes: Iterable[ClassSession], now: datetime) -> ResetJobResult:
    classes = list(classes)

    if not classes:
        return ResetJobResult(
            timestamp=now, total_classes=0, message="No classes to check"
        )

    to_reset = select_sessions_to_reset(classes, now)
    by_id = {session.id: session for session in classes}

    details = []
    for class_id in to_reset:
        session = by_id[class_id]
        details.append(
            ClassResetDetail(
                class_id=class_id,
                class_name=session.name or "Unknown",
                schedule=session.schedule,
                reset_at=now,
            )
        )
        log_business_event(
            "class_reset_due",
            "class",
            class_id,
            {"schedule": session.schedule, "class_name": session.name},
        )

    if to_reset:
        message = f"{len(to_reset)} of {len(classes)} classes to reset"
    else:
        message = "No classes need to be reset"

    logger.info(
        f"[CRON] Class reset check: {message}",
        extra={"checked": len(classes), "to_reset": len(to_reset)},
    )

    return ResetJobResult(
        timestamp=now,
        total_classes=len(classes),
        classes_to_reset=to_reset,
        reset_details=details,
        message=message,
    )
