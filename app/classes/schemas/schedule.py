"""Class schedule schemas"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Monday first, matching datetime.weekday()
WEEKDAY_NAMES = (
    "Lunes",
    "Martes",
    "Miércoles",
    "Jueves",
    "Viernes",
    "Sábado",
    "Domingo",
)


class ClassSchedule(BaseModel):
    """
    Parsed weekly schedule, e.g. "Lunes, Miércoles y Viernes 19:00-20:00".

    The empty instance (no days, no times) stands for "no schedule".
    """

    days: List[str] = Field(default_factory=list)
    start: str = ""
    end: str = ""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def empty(cls) -> "ClassSchedule":
        return cls()

    @property
    def is_valid(self) -> bool:
        return bool(self.days and self.start and self.end and self.start < self.end)


class SessionState(str, Enum):
    idle = "idle"
    in_session = "in_session"
    elapsed = "elapsed"


class ScheduleChecks(BaseModel):
    valid_format: bool
    has_valid_days: bool
    has_valid_times: bool


class ClassSession(BaseModel):
    """A recurring class as stored: id, name and raw schedule text"""

    id: str
    name: Optional[str] = None
    schedule: str = ""


class ScheduleEvaluationRequest(BaseModel):
    schedule: str = Field(..., min_length=1, max_length=200)


class ScheduleEvaluation(BaseModel):
    schedule: str
    parsed: ClassSchedule
    formatted: str
    next_class: str
    time_until: str
    should_reset: bool
    state: SessionState
    checks: ScheduleChecks
    evaluated_at: datetime


class ResetJobRequest(BaseModel):
    classes: List[ClassSession] = Field(default_factory=list)


class ClassResetDetail(BaseModel):
    class_id: str
    class_name: str
    schedule: str
    reset_at: datetime


class ResetJobResult(BaseModel):
    timestamp: datetime
    total_classes: int
    classes_to_reset: List[str] = Field(default_factory=list)
    reset_details: List[ClassResetDetail] = Field(default_factory=list)
    message: str
