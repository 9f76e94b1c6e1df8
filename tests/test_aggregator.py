"""Tests for portfolio analytics aggregation."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from premium_engine.analytics import MonthlyTrendBucketizer, PortfolioAnalyticsAggregator
from premium_engine.exceptions import ConfigurationError, ValidationError
from premium_engine.models import (
    AnalyticsSnapshot,
    BreakdownEntry,
    Policy,
    PolicyStatus,
    PremiumMode,
    PremiumPayment,
    RangeReport,
)


def _policy(
    policy_id: str,
    *,
    insurer: str | None = "LIC",
    status: PolicyStatus | str = PolicyStatus.ACTIVE,
    premium_amount: str | None = "1000",
    premium_mode: PremiumMode | str | None = PremiumMode.MONTHLY,
    sum_assured: str | None = "100000",
    annual_premium: str | None = None,
) -> Policy:
    return Policy(
        policy_id=policy_id,
        client_id="client-001",
        insurer=insurer,
        status=status,
        premium_amount=Decimal(premium_amount) if premium_amount is not None else None,
        premium_mode=premium_mode,
        sum_assured=Decimal(sum_assured) if sum_assured is not None else None,
        annual_premium=Decimal(annual_premium) if annual_premium is not None else None,
    )


def _payment(idx: int, payment_date: date, amount: str, late_fee: str = "0", discount: str = "0") -> PremiumPayment:
    return PremiumPayment(
        payment_id=f"pay-{idx:03d}",
        policy_id="p1",
        payment_date=payment_date,
        amount_paid=Decimal(amount),
        late_fee=Decimal(late_fee),
        discount=Decimal(discount),
    )


@pytest.fixture
def portfolio() -> list[Policy]:
    return [
        _policy("p1", insurer="LIC", premium_mode=PremiumMode.MONTHLY, premium_amount="1000", sum_assured="100000"),
        _policy(
            "p2",
            insurer="HDFC Life",
            premium_mode=PremiumMode.QUARTERLY,
            premium_amount="3000",
            sum_assured="200000",
            status=PolicyStatus.LAPSED,
        ),
        _policy("p3", insurer="LIC", premium_mode=None, premium_amount="5000", sum_assured=None),
        _policy(
            "p4",
            insurer="SBI Life",
            premium_mode=PremiumMode.HALF_YEARLY,
            premium_amount="2000",
            sum_assured="300000",
            annual_premium="4500",
            status=PolicyStatus.MATURED,
        ),
    ]


class TestAnnualPremium:
    """Tests for per-policy annualization."""

    @pytest.mark.parametrize(
        "mode,expected",
        [
            (PremiumMode.MONTHLY, "12000"),
            (PremiumMode.QUARTERLY, "4000"),
            (PremiumMode.HALF_YEARLY, "2000"),
            (PremiumMode.YEARLY, "1000"),
            (PremiumMode.SINGLE, "1000"),
            (None, "1000"),
        ],
    )
    def test_installment_times_frequency(self, mode: PremiumMode | None, expected: str) -> None:
        policy = _policy("p", premium_mode=mode, premium_amount="1000")
        assert PortfolioAnalyticsAggregator().annual_premium(policy) == Decimal(expected)

    def test_explicit_annual_premium_wins(self) -> None:
        policy = _policy("p", premium_amount="1000", annual_premium="9999")
        assert PortfolioAnalyticsAggregator().annual_premium(policy) == Decimal("9999")

    def test_no_premium_contributes_zero(self) -> None:
        policy = _policy("p", premium_amount=None)
        assert PortfolioAnalyticsAggregator().annual_premium(policy) == Decimal("0")

    def test_zero_annual_premium_falls_back_to_installment(self) -> None:
        policy = _policy("p", premium_mode=PremiumMode.MONTHLY, premium_amount="1000", annual_premium="0")
        assert PortfolioAnalyticsAggregator().annual_premium(policy) == Decimal("12000")

    def test_zero_annual_premium_in_snapshot_total(self, reference_date: date) -> None:
        policy = _policy("p", premium_mode=PremiumMode.MONTHLY, premium_amount="1000", annual_premium="0")
        snapshot = PortfolioAnalyticsAggregator().aggregate([policy], [], reference_date)
        assert snapshot.total_annual_premium == Decimal("12000")

    def test_zero_installment_contributes_zero(self) -> None:
        policy = _policy("p", premium_mode="WEEKLY", premium_amount="0")
        assert PortfolioAnalyticsAggregator().annual_premium(policy) == Decimal("0")

    def test_unknown_mode_raises(self) -> None:
        policy = _policy("p", premium_mode="WEEKLY")
        with pytest.raises(ConfigurationError):
            PortfolioAnalyticsAggregator().annual_premium(policy)


class TestAggregate:
    """Tests for PortfolioAnalyticsAggregator.aggregate."""

    def test_counts(self, portfolio: list[Policy], reference_date: date) -> None:
        snapshot = PortfolioAnalyticsAggregator().aggregate(portfolio, [], reference_date)

        assert snapshot.total_policies == 4
        assert snapshot.active_policies == 2

    def test_totals(self, portfolio: list[Policy], reference_date: date) -> None:
        snapshot = PortfolioAnalyticsAggregator().aggregate(portfolio, [], reference_date)

        assert snapshot.total_sum_assured == Decimal("600000")
        # 12000 + 12000 + 5000 (absent mode -> yearly) + 4500 (explicit)
        assert snapshot.total_annual_premium == Decimal("33500")
        assert snapshot.average_policy_value == Decimal("150000.00")

    def test_average_is_rounded_to_paise(self, reference_date: date) -> None:
        policies = [
            _policy("p1", sum_assured="100000"),
            _policy("p2", sum_assured="100000"),
            _policy("p3", sum_assured="1"),
        ]
        snapshot = PortfolioAnalyticsAggregator().aggregate(policies, [], reference_date)
        # 200001 / 3 = 66667
        assert snapshot.average_policy_value == Decimal("66667.00")

    def test_total_premiums_paid_is_gross(self, portfolio: list[Policy], reference_date: date) -> None:
        payments = [
            _payment(1, date(2024, 6, 1), "1000", late_fee="50"),
            _payment(2, date(2024, 5, 1), "1000", discount="100"),
            _payment(3, date(2020, 1, 1), "250.25"),
        ]
        snapshot = PortfolioAnalyticsAggregator().aggregate(portfolio, payments, reference_date)

        assert snapshot.total_premiums_paid == Decimal("2250.25")

    def test_status_breakdown_in_first_seen_order(self, portfolio: list[Policy], reference_date: date) -> None:
        snapshot = PortfolioAnalyticsAggregator().aggregate(portfolio, [], reference_date)

        assert snapshot.policy_status_breakdown == {"ACTIVE": 2, "LAPSED": 1, "MATURED": 1}
        assert list(snapshot.policy_status_breakdown) == ["ACTIVE", "LAPSED", "MATURED"]

    def test_insurer_breakdown(self, portfolio: list[Policy], reference_date: date) -> None:
        snapshot = PortfolioAnalyticsAggregator().aggregate(portfolio, [], reference_date)

        assert snapshot.insurer_breakdown == {"LIC": 2, "HDFC Life": 1, "SBI Life": 1}
        assert list(snapshot.insurer_breakdown) == ["LIC", "HDFC Life", "SBI Life"]

    def test_mode_breakdown_defaults_absent_mode_to_yearly(self, portfolio: list[Policy], reference_date: date) -> None:
        snapshot = PortfolioAnalyticsAggregator().aggregate(portfolio, [], reference_date)

        assert snapshot.premium_mode_breakdown == {
            "MONTHLY": 1,
            "QUARTERLY": 1,
            "YEARLY": 1,
            "HALF_YEARLY": 1,
        }

    def test_missing_insurer_counted_as_unknown(self, reference_date: date) -> None:
        snapshot = PortfolioAnalyticsAggregator().aggregate([_policy("p", insurer=None)], [], reference_date)
        assert snapshot.insurer_breakdown == {"Unknown": 1}

    def test_string_statuses(self, reference_date: date) -> None:
        policies = [_policy("a", status="ACTIVE"), _policy("b", status="SURRENDERED")]
        snapshot = PortfolioAnalyticsAggregator().aggregate(policies, [], reference_date)

        assert snapshot.active_policies == 1
        assert snapshot.policy_status_breakdown == {"ACTIVE": 1, "SURRENDERED": 1}

    def test_breakdowns_sum_to_total(self, portfolio: list[Policy], reference_date: date) -> None:
        snapshot = PortfolioAnalyticsAggregator().aggregate(portfolio * 3, [], reference_date)

        assert sum(snapshot.policy_status_breakdown.values()) == snapshot.total_policies
        assert sum(snapshot.insurer_breakdown.values()) == snapshot.total_policies
        assert sum(snapshot.premium_mode_breakdown.values()) == snapshot.total_policies

    def test_trend_is_included(self, portfolio: list[Policy], reference_date: date) -> None:
        payments = [_payment(1, date(2024, 6, 1), "1000")]
        snapshot = PortfolioAnalyticsAggregator().aggregate(portfolio, payments, reference_date)

        assert len(snapshot.monthly_premium_trend) == 12
        assert snapshot.monthly_premium_trend[-1].amount == Decimal("1000")

    def test_custom_bucketizer(self, reference_date: date) -> None:
        class _Recording(MonthlyTrendBucketizer):
            calls: list = []

            def bucket(self, payments, reference_date=None):
                self.calls.append(reference_date)
                return super().bucket(payments, reference_date)

        bucketizer = _Recording()
        PortfolioAnalyticsAggregator(bucketizer=bucketizer).aggregate([], [], reference_date)
        assert bucketizer.calls == [reference_date]

    def test_empty_input(self, reference_date: date) -> None:
        snapshot = PortfolioAnalyticsAggregator().aggregate([], [], reference_date)

        assert isinstance(snapshot, AnalyticsSnapshot)
        assert snapshot.total_policies == 0
        assert snapshot.active_policies == 0
        assert snapshot.total_sum_assured == Decimal("0")
        assert snapshot.total_annual_premium == Decimal("0")
        assert snapshot.total_premiums_paid == Decimal("0")
        assert snapshot.average_policy_value == Decimal("0")
        assert snapshot.policy_status_breakdown == {}
        assert snapshot.insurer_breakdown == {}
        assert snapshot.premium_mode_breakdown == {}
        assert len(snapshot.monthly_premium_trend) == 12

    def test_idempotent(self, portfolio: list[Policy], reference_date: date) -> None:
        payments = [_payment(i, date(2024, i % 6 + 1, 5), "100") for i in range(10)]
        aggregator = PortfolioAnalyticsAggregator()

        first = aggregator.aggregate(portfolio, payments, reference_date)
        second = aggregator.aggregate(portfolio, payments, reference_date)

        assert first == second
        assert list(first.insurer_breakdown) == list(second.insurer_breakdown)

    def test_accepts_iterators(self, portfolio: list[Policy], reference_date: date) -> None:
        payments = [_payment(1, date(2024, 6, 1), "1000")]
        snapshot = PortfolioAnalyticsAggregator().aggregate(iter(portfolio), iter(payments), reference_date)

        assert snapshot.total_policies == 4
        assert snapshot.total_premiums_paid == Decimal("1000")
        assert snapshot.monthly_premium_trend[-1].amount == Decimal("1000")

    def test_does_not_mutate_inputs(self, portfolio: list[Policy], reference_date: date) -> None:
        before = [replace(policy) for policy in portfolio]
        PortfolioAnalyticsAggregator().aggregate(portfolio, [], reference_date)
        assert portfolio == before

    def test_rejects_negative_payment(self, portfolio: list[Policy], reference_date: date) -> None:
        with pytest.raises(ValidationError):
            PortfolioAnalyticsAggregator().aggregate(portfolio, [_payment(1, date(2020, 1, 1), "-1")], reference_date)

    def test_float_sum_assured_is_exact(self, reference_date: date) -> None:
        policies = [replace(_policy(f"p{i}"), sum_assured=0.1) for i in range(3)]
        snapshot = PortfolioAnalyticsAggregator().aggregate(policies, [], reference_date)
        assert snapshot.total_sum_assured == Decimal("0.3")


class TestRangeReport:
    """Tests for PortfolioAnalyticsAggregator.range_report."""

    def test_defaults_to_trailing_eleven_months(self, portfolio: list[Policy], reference_date: date) -> None:
        report = PortfolioAnalyticsAggregator().range_report(portfolio, [], end=reference_date)

        assert isinstance(report, RangeReport)
        assert report.start == date(2023, 7, 15)
        assert report.end == reference_date
        assert [bucket.period for bucket in report.monthly_premiums][0] == "2023-07"
        assert len(report.monthly_premiums) == 12

    def test_inclusive_ends(self, portfolio: list[Policy]) -> None:
        start, end = date(2024, 1, 10), date(2024, 3, 20)
        payments = [
            _payment(1, date(2024, 1, 9), "1"),  # day before start, same month
            _payment(2, date(2024, 1, 10), "100"),
            _payment(3, date(2024, 3, 20), "200"),
            _payment(4, date(2024, 3, 21), "4"),  # day after end, same month
        ]
        report = PortfolioAnalyticsAggregator().range_report(portfolio, payments, start, end)

        assert report.total_premiums_paid == Decimal("300")
        assert [(b.period, b.amount) for b in report.monthly_premiums] == [
            ("2024-01", Decimal("100")),
            ("2024-02", Decimal("0")),
            ("2024-03", Decimal("200")),
        ]

    def test_month_series_spans_whole_range(self, portfolio: list[Policy]) -> None:
        report = PortfolioAnalyticsAggregator().range_report(portfolio, [], date(2022, 11, 30), date(2024, 6, 1))

        assert len(report.monthly_premiums) == 20
        assert report.monthly_premiums[0].month == "Nov 2022"
        assert report.monthly_premiums[-1].month == "Jun 2024"
        assert all(bucket.amount == Decimal("0") for bucket in report.monthly_premiums)

    def test_counts_cover_all_policies(self, portfolio: list[Policy]) -> None:
        report = PortfolioAnalyticsAggregator().range_report(portfolio, [], date(2024, 1, 1), date(2024, 1, 31))

        assert report.total_policies == 4
        assert report.active_policies == 2

    def test_breakdowns_sorted_by_count_descending(self, portfolio: list[Policy], reference_date: date) -> None:
        policies = [_policy("x1", insurer="Tata AIA", status=PolicyStatus.LAPSED)] + portfolio
        report = PortfolioAnalyticsAggregator().range_report(policies, [], end=reference_date)

        assert report.insurer_breakdown == [
            BreakdownEntry("LIC", 2),
            BreakdownEntry("Tata AIA", 1),
            BreakdownEntry("HDFC Life", 1),
            BreakdownEntry("SBI Life", 1),
        ]
        assert report.status_breakdown == [
            BreakdownEntry("LAPSED", 2),
            BreakdownEntry("ACTIVE", 2),
            BreakdownEntry("MATURED", 1),
        ]

    def test_absent_insurer_and_status(self, reference_date: date) -> None:
        policy = replace(_policy("p", insurer=None), status=None)
        report = PortfolioAnalyticsAggregator().range_report([policy], [], end=reference_date)

        assert report.insurer_breakdown == [BreakdownEntry("Unknown", 1)]
        assert report.status_breakdown == [BreakdownEntry("UNKNOWN", 1)]
        assert report.active_policies == 0

    def test_start_after_end_raises(self, portfolio: list[Policy]) -> None:
        with pytest.raises(ValidationError):
            PortfolioAnalyticsAggregator().range_report(portfolio, [], date(2024, 6, 1), date(2024, 5, 31))

    def test_empty_input(self, reference_date: date) -> None:
        report = PortfolioAnalyticsAggregator().range_report([], [], end=reference_date)

        assert report.total_policies == 0
        assert report.total_premiums_paid == Decimal("0")
        assert report.insurer_breakdown == []
        assert report.status_breakdown == []
