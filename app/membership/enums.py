"""
Closed vocabularies of the membership domain.

Values arrive as free text from the database and API payloads; ``from_value``
maps anything unrecognized onto the ``unknown`` member so that decision
functions degrade to their safe default instead of raising.
"""

from enum import Enum
from typing import FrozenSet, Optional, Union


class _FallbackEnum(str, Enum):
    @classmethod
    def from_value(cls, value: Optional[Union[str, "Enum"]]):
        if isinstance(value, cls):
            return value
        if isinstance(value, Enum):
            value = value.value
        try:
            return cls(value.strip() if isinstance(value, str) else value)
        except ValueError:
            return cls("unknown")


class MembershipStatus(_FallbackEnum):
    active = "active"
    pending = "pending"
    suspended = "suspended"
    unknown = "unknown"


class UserRole(_FallbackEnum):
    admin = "admin"
    staff = "staff"
    user = "user"
    unknown = "unknown"

    @property
    def is_payment_exempt(self) -> bool:
        return self in (UserRole.admin, UserRole.staff)


class Discipline(str, Enum):
    muay_thai = "Muay Thai"
    mma = "MMA"


class PaymentConcept(_FallbackEnum):
    muay_thai_fee = "Cuota mensual Muay Thai"
    mma_fee = "Cuota mensual MMA"
    combined_fee = "Cuota mensual Muay Thai + MMA"
    enrollment_fee = "Matrícula"
    medical_insurance = "Seguro Médico"
    unknown = "unknown"

    @property
    def disciplines(self) -> FrozenSet[str]:
        """Class disciplines this payment grants access to"""
        return _CONCEPT_DISCIPLINES.get(self, frozenset())

    @property
    def is_qualifying(self) -> bool:
        """Monthly/combined class fee (not enrollment nor insurance)"""
        return self not in NON_QUALIFYING_CONCEPTS


class PaymentMethod(_FallbackEnum):
    cash = "Efectivo"
    bizum = "Bizum"
    transfer = "Transferencia"
    unknown = "unknown"


_CONCEPT_DISCIPLINES = {
    PaymentConcept.muay_thai_fee: frozenset({Discipline.muay_thai.value}),
    PaymentConcept.mma_fee: frozenset({Discipline.mma.value}),
    PaymentConcept.combined_fee: frozenset(
        {Discipline.muay_thai.value, Discipline.mma.value}
    ),
}

# Excluded by the "most recent qualifying payment" lookup
NON_QUALIFYING_CONCEPTS = frozenset(
    {PaymentConcept.enrollment_fee, PaymentConcept.medical_insurance}
)
