"""Domain models for premium rollover and portfolio analytics."""

from premium_engine.models.analytics import (
    AnalyticsSnapshot,
    BreakdownEntry,
    DueDatePreview,
    PaymentOutcome,
    PremiumAlerts,
    PremiumAuditEntry,
    RangeReport,
    ScheduleEntry,
    TrendBucket,
)
from premium_engine.models.enums import PaymentMode, PaymentStatus, PolicyStatus, PremiumMode
from premium_engine.models.policy import Client, Policy, PremiumPayment

__all__ = [
    "AnalyticsSnapshot",
    "BreakdownEntry",
    "Client",
    "DueDatePreview",
    "PaymentMode",
    "PaymentOutcome",
    "PaymentStatus",
    "Policy",
    "PolicyStatus",
    "PremiumAlerts",
    "PremiumAuditEntry",
    "PremiumMode",
    "PremiumPayment",
    "RangeReport",
    "ScheduleEntry",
    "TrendBucket",
]
