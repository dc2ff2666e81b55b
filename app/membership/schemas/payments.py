"""Payment records as fetched by the calling layer"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.membership.enums import PaymentConcept, PaymentMethod


class PaymentRecord(BaseModel):
    """Immutable payment row; amend by delete + recreate"""

    id: Optional[str] = None
    user_id: str
    amount: Decimal = Field(..., ge=0)
    concept: PaymentConcept
    payment_method: Optional[PaymentMethod] = None
    payment_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("concept", mode="before")
    @classmethod
    def parse_concept(cls, v):
        return PaymentConcept.from_value(v)

    @field_validator("payment_method", mode="before")
    @classmethod
    def parse_payment_method(cls, v):
        if v is None:
            return None
        return PaymentMethod.from_value(v)
