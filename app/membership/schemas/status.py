"""Membership status schemas: evaluation, daily job, simulation"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.membership.enums import MembershipStatus, UserRole
from app.membership.schemas.eligibility import EnrollmentDecision, EnrollmentEligibility
from app.membership.schemas.payments import PaymentRecord


class _StatusFields(BaseModel):
    @field_validator("status", "current_status", mode="before", check_fields=False)
    @classmethod
    def parse_status(cls, v):
        return MembershipStatus.from_value(v)

    @field_validator("role", mode="before", check_fields=False)
    @classmethod
    def parse_role(cls, v):
        return UserRole.from_value(v)


# Single-user evaluation
class StatusEvaluationRequest(_StatusFields):
    user_id: Optional[str] = None
    current_status: MembershipStatus
    role: UserRole = UserRole.user
    payments: List[PaymentRecord] = Field(default_factory=list)


class StatusEvaluationResponse(BaseModel):
    user_id: Optional[str] = None
    current_status: MembershipStatus
    new_status: MembershipStatus
    changed: bool
    has_current_month_payment: bool
    has_medical_insurance: bool
    enrollment: EnrollmentEligibility
    notice: str = ""
    evaluated_at: datetime


class EnrollmentCheckRequest(_StatusFields):
    """Can the user enroll in a class of ``class_name`` right now"""

    user_id: Optional[str] = None
    status: MembershipStatus
    class_name: str = Field(..., min_length=1)
    payments: List[PaymentRecord] = Field(default_factory=list)
    enrolled_count: Optional[int] = Field(None, ge=0)
    capacity: Optional[int] = Field(None, ge=0)
    already_enrolled: bool = False


class EnrollmentCheckResponse(BaseModel):
    user_id: Optional[str] = None
    class_name: str
    decision: EnrollmentDecision
    last_qualifying_concept: Optional[str] = None
    evaluated_at: datetime


# Daily status job
class UserBillingSnapshot(_StatusFields):
    id: str
    status: MembershipStatus
    role: UserRole = UserRole.user


class StatusJobRequest(BaseModel):
    users: List[UserBillingSnapshot] = Field(default_factory=list)
    payments: List[PaymentRecord] = Field(default_factory=list)


class StatusChange(BaseModel):
    user_id: str
    old_status: MembershipStatus
    new_status: MembershipStatus
    has_payment: bool
    has_medical_insurance: bool


class StatusJobResult(BaseModel):
    timestamp: datetime
    processed: int
    updated: int
    updates: List[StatusChange] = Field(default_factory=list)
    sign_out_user_ids: List[str] = Field(
        default_factory=list,
        description="Users moved to suspended whose live sessions must be closed",
    )
    message: str


# Billing day simulation
class SimulationRequest(BaseModel):
    day: int = Field(..., ge=1, le=31, description="Day of month to simulate")


class SimulationScenario(BaseModel):
    description: str
    current_status: MembershipStatus
    has_payment: bool
    new_status: MembershipStatus
    changed: bool
    can_enroll: bool
    reason: str = ""


class SimulationResult(BaseModel):
    day: int
    period: str
    day_range_analysis: str
    enrollment_rules: str
    scenarios: List[SimulationScenario]
    changes_expected: int
    users_who_can_enroll: int
    message: str
