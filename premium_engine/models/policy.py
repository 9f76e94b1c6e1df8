"""Client, policy and premium payment records."""

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal

from premium_engine.models.enums import PaymentMode, PolicyStatus, PremiumMode


@dataclass(frozen=True)
class Client:
    """Policy holder."""

    client_id: str
    name: str
    email: str | None = None
    mobile: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class Policy:
    """Insurance policy owned by a client.

    ``premium_mode`` is normally a :class:`PremiumMode` but may hold any
    identifier read from storage; unknown identifiers are rejected when the
    mode table resolves them.
    """

    policy_id: str
    client_id: str
    insurer: str | None
    status: PolicyStatus | str
    premium_amount: Decimal | None = None  # Installment due each cycle
    premium_mode: PremiumMode | str | None = None
    next_due_date: date | None = None
    sum_assured: Decimal | None = None
    annual_premium: Decimal | None = None
    policy_number: str = ""
    plan_name: str | None = None
    commencement_date: date | None = None
    maturity_date: date | None = None
    last_paid_date: date | None = None

    def with_due_dates(self, next_due_date: date | None, last_paid_date: date | None) -> "Policy":
        """Return a copy with replaced due-date fields."""
        return replace(self, next_due_date=next_due_date, last_paid_date=last_paid_date)


@dataclass(frozen=True)
class PremiumPayment:
    """Recorded premium payment. References its policy, never owns it."""

    payment_id: str
    policy_id: str
    payment_date: date
    amount_paid: Decimal
    late_fee: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    payment_mode: PaymentMode | str = PaymentMode.CASH
    receipt_number: str | None = None
    remarks: str | None = None
