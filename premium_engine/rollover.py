"""Premium due-date rollover.

A payment (plus late fee, minus discount) that meets the policy's installment
premium advances the next due date by exactly one billing period. Partial
payments leave the due date where it is, and non-recurring (SINGLE) policies
never roll.
"""

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from premium_engine.config import DEFAULT_PREMIUM_MODES, PremiumModeConfig
from premium_engine.exceptions import ConfigurationError, ReferentialIntegrityError
from premium_engine.models import (
    DueDatePreview,
    PaymentOutcome,
    Policy,
    PremiumAuditEntry,
    PremiumPayment,
)
from premium_engine.money import non_negative, to_decimal

logger = logging.getLogger(__name__)


def add_months(start: date, months: int) -> date:
    """Add calendar months, keeping the day when the target month has it.

    When it does not (e.g. 31 Jan + 1 month), the result is the last day of
    the target month.
    """
    if months == 0:
        return start
    year = start.year + (start.month - 1 + months) // 12
    month = (start.month - 1 + months) % 12 + 1
    last_day = monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


class PaymentRolloverCalculator:
    """Decide whether a payment discharges the current cycle and roll the due date.

    Stateless apart from the injected mode table; every method is a pure
    function of its arguments.

    Parameters
    ----------
    mode_config : PremiumModeConfig
        Premium-mode table (default: :data:`DEFAULT_PREMIUM_MODES`).
    """

    def __init__(self, mode_config: PremiumModeConfig | None = None) -> None:
        self.mode_config = mode_config or DEFAULT_PREMIUM_MODES

    @staticmethod
    def compute_total(amount_paid: Any, late_fee: Any = 0, discount: Any = 0) -> Decimal:
        """Return ``amount_paid + late_fee - discount``.

        Each input must be non-negative. The result itself is not clamped:
        a discount larger than the payment yields a negative total.

        Raises
        ------
        ValidationError
            If any input is negative or not numeric.
        """
        paid = non_negative(amount_paid, "amount_paid")
        fee = non_negative(late_fee, "late_fee")
        off = non_negative(discount, "discount")
        return paid + fee - off

    def evaluate(self, policy: Policy, total: Any) -> DueDatePreview | None:
        """Preview the due date that ``total`` would produce.

        Parameters
        ----------
        policy : Policy
            Policy being paid. Not modified.
        total : Any
            Net settled amount, usually from :meth:`compute_total`.

        Returns
        -------
        DueDatePreview | None
            ``None`` when the policy has no due date or no premium mode.

        Raises
        ------
        ConfigurationError
            If the premium mode has no entry in the mode table.
        """
        if policy.next_due_date is None or policy.premium_mode in (None, ""):
            return None
        return self._preview(policy, to_decimal(total, "total"))

    def preview_payment(
        self,
        policy: Policy,
        amount_paid: Any,
        late_fee: Any = 0,
        discount: Any = 0,
    ) -> DueDatePreview | None:
        """Compute the total of a draft payment and evaluate it."""
        return self.evaluate(policy, self.compute_total(amount_paid, late_fee, discount))

    def apply_payment(
        self,
        policy: Policy,
        payment: PremiumPayment,
        *,
        now: datetime | None = None,
    ) -> PaymentOutcome:
        """Commit ``payment`` against ``policy`` using the rollover rule.

        Returns a new policy; the inputs are left untouched. Writing the
        result back is the caller's job.

        Raises
        ------
        ConfigurationError
            If the policy has no premium mode or an unknown one.
        ValidationError
            If the payment carries negative amounts.
        """
        if payment.policy_id != policy.policy_id:
            raise ReferentialIntegrityError(
                f"Payment {payment.payment_id} belongs to policy {payment.policy_id}, not {policy.policy_id}"
            )
        if policy.premium_mode in (None, ""):
            logger.error(
                "Cannot commit payment %s: policy %s has no premium mode",
                payment.payment_id,
                policy.policy_id,
                extra={"policy_id": policy.policy_id, "payment_id": payment.payment_id},
            )
            raise ConfigurationError(f"Policy {policy.policy_id} has no premium mode")

        total = self.compute_total(payment.amount_paid, payment.late_fee, payment.discount)
        preview = None
        next_due = policy.next_due_date
        last_paid = policy.last_paid_date
        if policy.next_due_date is not None:
            preview = self._preview(policy, total)
            next_due = preview.next_due_date
            if preview.is_full_payment:
                last_paid = payment.payment_date
        else:
            # Without a due date there is no cycle to settle; only resolve the mode.
            self.mode_config.resolve(policy.premium_mode)

        updated = policy.with_due_dates(next_due, last_paid)
        is_full = preview is not None and preview.is_full_payment
        audit = PremiumAuditEntry(
            action="PREMIUM_PAYMENT",
            timestamp=now or datetime.now(timezone.utc),
            details={
                "payment_id": payment.payment_id,
                "policy_id": policy.policy_id,
                "amount": total,
                "is_full_payment": is_full,
                "before": {"next_due_date": policy.next_due_date},
                "after": {"next_due_date": next_due},
            },
        )
        logger.info(
            "Recorded %s payment %s on policy %s: total=%s next_due_date=%s",
            "full" if is_full else "partial",
            payment.payment_id,
            policy.policy_id,
            total,
            next_due,
            extra={"policy_id": policy.policy_id, "payment_id": payment.payment_id, "next_due_date": next_due},
        )
        return PaymentOutcome(
            policy=updated,
            preview=preview,
            total=total,
            last_paid_date=last_paid,
            audit=audit,
        )

    def _preview(self, policy: Policy, total: Decimal) -> DueDatePreview:
        spec = self.mode_config.resolve(policy.premium_mode)
        current = policy.next_due_date
        expected = to_decimal(policy.premium_amount, "premium_amount")
        is_full = total >= expected

        next_due = current
        if is_full and spec.period_months is not None:
            next_due = add_months(current, spec.period_months)

        logger.debug(
            "Evaluated policy %s: total=%s expected=%s full=%s next_due_date=%s",
            policy.policy_id,
            total,
            expected,
            is_full,
            next_due,
            extra={"policy_id": policy.policy_id, "premium_mode": spec.mode},
        )
        return DueDatePreview(
            current_due_date=current,
            next_due_date=next_due,
            is_full_payment=is_full,
            total=total,
            expected_amount=expected,
        )
