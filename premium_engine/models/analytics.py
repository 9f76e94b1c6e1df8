"""Derived, ephemeral results produced by the engine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from premium_engine.models.enums import PaymentStatus
from premium_engine.models.policy import Policy


@dataclass(frozen=True)
class DueDatePreview:
    """Live due-date preview for a draft payment."""

    current_due_date: date
    next_due_date: date
    is_full_payment: bool
    total: Decimal
    expected_amount: Decimal


@dataclass(frozen=True)
class PremiumAuditEntry:
    """Audit record emitted when a payment is committed."""

    action: str
    timestamp: datetime
    details: dict[str, Any]
    source: str = "premium-automation"


@dataclass(frozen=True)
class PaymentOutcome:
    """Result of committing a payment against a policy."""

    policy: Policy
    preview: DueDatePreview | None
    total: Decimal
    last_paid_date: date | None
    audit: PremiumAuditEntry

    @property
    def is_full_payment(self) -> bool:
        return self.preview is not None and self.preview.is_full_payment

    @property
    def rolled_over(self) -> bool:
        return self.preview is not None and self.preview.next_due_date != self.preview.current_due_date


@dataclass(frozen=True)
class TrendBucket:
    """One calendar month of payment volume."""

    month: str  # Short label, e.g. "Mar 2024"
    period: str  # "2024-03"
    amount: Decimal


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Summary statistics over a set of policies and payments."""

    total_policies: int = 0
    active_policies: int = 0
    total_sum_assured: Decimal = Decimal("0")
    total_annual_premium: Decimal = Decimal("0")
    total_premiums_paid: Decimal = Decimal("0")
    average_policy_value: Decimal = Decimal("0")
    policy_status_breakdown: dict[str, int] = field(default_factory=dict)
    insurer_breakdown: dict[str, int] = field(default_factory=dict)
    premium_mode_breakdown: dict[str, int] = field(default_factory=dict)
    monthly_premium_trend: list[TrendBucket] = field(default_factory=list)


@dataclass(frozen=True)
class ScheduleEntry:
    """Projected installment of a premium schedule."""

    installment_number: int
    due_date: date
    premium_amount: Decimal
    grace_period_end: date
    status: PaymentStatus


@dataclass
class PremiumAlerts:
    """Active policies grouped by how soon their premium falls due."""

    overdue: list[Policy] = field(default_factory=list)
    due_this_week: list[Policy] = field(default_factory=list)
    due_next_30_days: list[Policy] = field(default_factory=list)
    total_overdue_amount: Decimal = Decimal("0")
    total_upcoming_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class BreakdownEntry:
    """Count of policies sharing one insurer or status."""

    name: str
    value: int


@dataclass(frozen=True)
class RangeReport:
    """Workspace report over payments dated within ``[start, end]``.

    Policy counts and breakdowns cover every policy; only the payment
    figures are limited to the range.
    """

    start: date
    end: date
    total_policies: int = 0
    active_policies: int = 0
    total_premiums_paid: Decimal = Decimal("0")
    insurer_breakdown: list[BreakdownEntry] = field(default_factory=list)
    status_breakdown: list[BreakdownEntry] = field(default_factory=list)
    monthly_premiums: list[TrendBucket] = field(default_factory=list)
