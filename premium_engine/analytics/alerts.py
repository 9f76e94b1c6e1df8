"""Due-date alerts for the dashboard."""

from collections.abc import Iterable
from datetime import date, timedelta

from premium_engine.models import Policy, PolicyStatus, PremiumAlerts
from premium_engine.money import to_decimal


def classify_due_policies(
    policies: Iterable[Policy],
    today: date | None = None,
    due_soon_days: int = 7,
    upcoming_days: int = 30,
) -> PremiumAlerts:
    """Group active policies by how soon their premium falls due.

    Policies without a due date, or not ACTIVE, are left out. The overdue
    total and the due-this-week total sum installment premiums.
    """
    today = today or date.today()
    soon = today + timedelta(days=due_soon_days)
    later = today + timedelta(days=upcoming_days)
    alerts = PremiumAlerts()

    for policy in policies:
        if policy.next_due_date is None or policy.status != PolicyStatus.ACTIVE:
            continue
        due = policy.next_due_date
        if due < today:
            alerts.overdue.append(policy)
            alerts.total_overdue_amount += to_decimal(policy.premium_amount, "premium_amount")
        elif due <= soon:
            alerts.due_this_week.append(policy)
            alerts.total_upcoming_amount += to_decimal(policy.premium_amount, "premium_amount")
        elif due <= later:
            alerts.due_next_30_days.append(policy)

    return alerts
