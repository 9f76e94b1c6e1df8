"""Portfolio analytics over policies and their payment history."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Context, Decimal, localcontext
from enum import Enum
from typing import Any

from premium_engine.analytics.trend import MonthlyTrendBucketizer, as_date
from premium_engine.config import DEFAULT_PREMIUM_MODES, PremiumModeConfig
from premium_engine.models import (
    AnalyticsSnapshot,
    BreakdownEntry,
    Policy,
    PolicyStatus,
    PremiumMode,
    PremiumPayment,
    RangeReport,
)
from premium_engine.money import CENTS, ZERO, non_negative, to_decimal
from premium_engine.rollover import add_months

logger = logging.getLogger(__name__)

DEFAULT_BREAKDOWN_MODE = PremiumMode.YEARLY.value
UNKNOWN_INSURER = "Unknown"
UNKNOWN_STATUS = "UNKNOWN"
DEFAULT_RANGE_MONTHS = 11

# Fixed context so results do not depend on the caller's decimal settings
_MONEY_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP)


def _key(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _count(breakdown: dict[str, int], key: str) -> None:
    breakdown[key] = breakdown.get(key, 0) + 1


def _entries(breakdown: dict[str, int]) -> list[BreakdownEntry]:
    # Stable sort: ties keep first-seen order
    ranked = sorted(breakdown.items(), key=lambda item: item[1], reverse=True)
    return [BreakdownEntry(name=name, value=value) for name, value in ranked]


class PortfolioAnalyticsAggregator:
    """Reduce policies and payments into an :class:`AnalyticsSnapshot`.

    Parameters
    ----------
    mode_config : PremiumModeConfig | None
        Premium-mode table used to annualize installment premiums.
    bucketizer : MonthlyTrendBucketizer | None
        Trend bucketizer (default: a new instance).
    """

    def __init__(
        self,
        mode_config: PremiumModeConfig | None = None,
        bucketizer: MonthlyTrendBucketizer | None = None,
    ) -> None:
        self.mode_config = mode_config or DEFAULT_PREMIUM_MODES
        self.bucketizer = bucketizer or MonthlyTrendBucketizer()

    def annual_premium(self, policy: Policy) -> Decimal:
        """Annualized premium of one policy.

        A non-zero ``annual_premium`` wins; otherwise the installment is
        multiplied by the mode's installments per year, with an absent mode
        counted as YEARLY. Zero is treated the same as absent.

        Raises
        ------
        ConfigurationError
            If the premium mode is not in the mode table.
        """
        if policy.annual_premium:
            return to_decimal(policy.annual_premium, "annual_premium")
        if not policy.premium_amount:
            return ZERO
        mode = policy.premium_mode if policy.premium_mode not in (None, "") else DEFAULT_BREAKDOWN_MODE
        spec = self.mode_config.resolve(mode)
        return to_decimal(policy.premium_amount, "premium_amount") * spec.installments_per_year

    def aggregate(
        self,
        policies: Iterable[Policy],
        payments: Iterable[PremiumPayment],
        reference_date: date | None = None,
    ) -> AnalyticsSnapshot:
        """Compute summary statistics.

        Breakdown keys appear in order of first occurrence. Empty input
        yields an all-zero snapshot with twelve empty trend buckets.
        """
        policies = list(policies)
        payments = list(payments)

        active = 0
        total_sum_assured = ZERO
        total_annual_premium = ZERO
        status_breakdown: dict[str, int] = {}
        insurer_breakdown: dict[str, int] = {}
        mode_breakdown: dict[str, int] = {}

        with localcontext(_MONEY_CONTEXT):
            for policy in policies:
                if _key(policy.status) == PolicyStatus.ACTIVE.value:
                    active += 1
                total_sum_assured += to_decimal(policy.sum_assured, "sum_assured")
                total_annual_premium += self.annual_premium(policy)

                _count(status_breakdown, _key(policy.status))
                _count(insurer_breakdown, policy.insurer or UNKNOWN_INSURER)
                mode = policy.premium_mode if policy.premium_mode not in (None, "") else DEFAULT_BREAKDOWN_MODE
                _count(mode_breakdown, _key(mode))

            total_paid = sum(
                (non_negative(payment.amount_paid, "amount_paid") for payment in payments),
                ZERO,
            )

            if policies:
                average = (total_sum_assured / len(policies)).quantize(CENTS)
            else:
                average = ZERO

        trend = self.bucketizer.bucket(payments, reference_date)

        logger.debug(
            "Aggregated %d policies and %d payments: sum_assured=%s paid=%s",
            len(policies),
            len(payments),
            total_sum_assured,
            total_paid,
        )
        return AnalyticsSnapshot(
            total_policies=len(policies),
            active_policies=active,
            total_sum_assured=total_sum_assured,
            total_annual_premium=total_annual_premium,
            total_premiums_paid=total_paid,
            average_policy_value=average,
            policy_status_breakdown=status_breakdown,
            insurer_breakdown=insurer_breakdown,
            premium_mode_breakdown=mode_breakdown,
            monthly_premium_trend=trend,
        )

    def range_report(
        self,
        policies: Iterable[Policy],
        payments: Iterable[PremiumPayment],
        start: date | None = None,
        end: date | None = None,
    ) -> RangeReport:
        """Workspace report for payments dated within a range.

        Parameters
        ----------
        policies : Iterable[Policy]
            Every policy of the workspace; counts are not range-limited.
        payments : Iterable[PremiumPayment]
            Payments to consider. Only those dated ``start``..``end``
            (inclusive) count.
        start : date | None
            First day of the range (default: ``end`` moved back 11 months).
        end : date | None
            Last day of the range (default: today).

        Returns
        -------
        RangeReport
            Counts, the in-range paid total, insurer and status breakdowns
            sorted by count descending, and one trend bucket per month of
            the range.

        Raises
        ------
        ValidationError
            If ``start`` is after ``end`` or a payment amount is negative.
        """
        end = as_date(end or date.today())
        start = as_date(start) if start is not None else add_months(end, -DEFAULT_RANGE_MONTHS)
        policies = list(policies)
        in_range = [payment for payment in payments if start <= as_date(payment.payment_date) <= end]

        trend = self.bucketizer.bucket_range(in_range, start, end)

        active = 0
        insurer_breakdown: dict[str, int] = {}
        status_breakdown: dict[str, int] = {}
        for policy in policies:
            status = _key(policy.status) if policy.status not in (None, "") else UNKNOWN_STATUS
            if status == PolicyStatus.ACTIVE.value:
                active += 1
            _count(insurer_breakdown, policy.insurer or UNKNOWN_INSURER)
            _count(status_breakdown, status)

        with localcontext(_MONEY_CONTEXT):
            total_paid = sum(
                (non_negative(payment.amount_paid, "amount_paid") for payment in in_range),
                ZERO,
            )

        logger.debug(
            "Range report %s..%s: %d policies, %d payments, paid=%s",
            start,
            end,
            len(policies),
            len(in_range),
            total_paid,
        )
        return RangeReport(
            start=start,
            end=end,
            total_policies=len(policies),
            active_policies=active,
            total_premiums_paid=total_paid,
            insurer_breakdown=_entries(insurer_breakdown),
            status_breakdown=_entries(status_breakdown),
            monthly_premiums=trend,
        )
