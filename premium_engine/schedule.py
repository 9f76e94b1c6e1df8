"""Premium schedule projection and payment status."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from premium_engine.config import DEFAULT_PREMIUM_MODES, PremiumModeConfig, ScheduleConfig
from premium_engine.exceptions import ValidationError
from premium_engine.models import PaymentStatus, Policy, PremiumMode, ScheduleEntry
from premium_engine.money import non_negative
from premium_engine.rollover import add_months


def grace_period_end(due_date: date, grace_period_days: int = 30) -> date:
    """Last day on which a premium may still be paid without lapsing."""
    return due_date + timedelta(days=grace_period_days)


def determine_payment_status(
    due_date: date,
    grace_end: date | None = None,
    today: date | None = None,
) -> PaymentStatus:
    """Classify an installment relative to ``today``.

    UPCOMING before the due date, UNPAID while inside the grace period,
    OVERDUE after it (or immediately, when there is no grace period).
    """
    today = today or date.today()
    if today < due_date:
        return PaymentStatus.UPCOMING
    if grace_end is not None and today <= grace_end:
        return PaymentStatus.UNPAID
    return PaymentStatus.OVERDUE


def generate_premium_schedule(
    start_date: date,
    premium_amount: Any,
    premium_mode: PremiumMode | str,
    installments: int,
    grace_period_days: int = 30,
    today: date | None = None,
    mode_config: PremiumModeConfig | None = None,
) -> list[ScheduleEntry]:
    """Project upcoming installments of a policy.

    Each due date is the previous one advanced by one period, which is the
    chain of dates successive full payments produce. A non-recurring mode
    has a single installment.

    Raises
    ------
    ValidationError
        If ``installments`` is below 1 or the amount is negative.
    ConfigurationError
        If the premium mode is unknown.
    """
    if installments < 1:
        raise ValidationError(f"installments must be at least 1, got {installments}")
    spec = (mode_config or DEFAULT_PREMIUM_MODES).resolve(premium_mode)
    amount = non_negative(premium_amount, "premium_amount")
    today = today or date.today()

    if spec.period_months is None:
        installments = 1

    schedule: list[ScheduleEntry] = []
    due = start_date
    for number in range(1, installments + 1):
        grace_end = grace_period_end(due, grace_period_days)
        schedule.append(
            ScheduleEntry(
                installment_number=number,
                due_date=due,
                premium_amount=amount,
                grace_period_end=grace_end,
                status=determine_payment_status(due, grace_end, today),
            )
        )
        if spec.period_months is not None:
            due = add_months(due, spec.period_months)
    return schedule


def policy_schedule(
    policy: Policy,
    installments: int,
    config: ScheduleConfig | None = None,
    today: date | None = None,
    mode_config: PremiumModeConfig | None = None,
) -> list[ScheduleEntry]:
    """Project a policy's installments from its current due date.

    Uses the grace period from ``config``. A policy without a due date or
    premium mode has nothing to project and yields an empty schedule.
    """
    if policy.next_due_date is None or policy.premium_mode in (None, ""):
        return []
    config = config or ScheduleConfig()
    return generate_premium_schedule(
        policy.next_due_date,
        policy.premium_amount,
        policy.premium_mode,
        installments,
        grace_period_days=config.grace_period_days,
        today=today,
        mode_config=mode_config,
    )
