"""Derived, per-request eligibility results (never persisted)"""
from typing import Optional

from pydantic import BaseModel, ConfigDict


class EnrollmentEligibility(BaseModel):
    """Status / medical insurance / calendar gate"""

    allowed: bool
    reason: str = ""

    model_config = ConfigDict(frozen=True)


class ClassTypeEligibility(BaseModel):
    """Discipline vs. most recent qualifying payment gate"""

    allowed: bool
    reason: str = ""

    model_config = ConfigDict(frozen=True)


class ClassAvailability(BaseModel):
    """Free seats and no existing enrollment for this user"""

    allowed: bool
    reason: str = ""

    model_config = ConfigDict(frozen=True)


class EnrollmentDecision(BaseModel):
    """All gates combined; ``reason`` is the first failing gate's reason"""

    allowed: bool
    reason: str = ""
    status_check: EnrollmentEligibility
    class_type_check: Optional[ClassTypeEligibility] = None
    availability_check: Optional[ClassAvailability] = None

    model_config = ConfigDict(frozen=True)
