"""Monthly payment trend over a trailing window or a date range."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal

from premium_engine.exceptions import ValidationError
from premium_engine.models import PremiumPayment, TrendBucket
from premium_engine.money import ZERO, non_negative

# English abbreviations regardless of the process locale
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def _month_index(value: date) -> int:
    return value.year * 12 + (value.month - 1)


class MonthlyTrendBucketizer:
    """Bucket payment amounts into calendar months.

    :meth:`bucket` covers the twelve months ending at a reference date;
    :meth:`bucket_range` covers every month touched by a date range.
    """

    WINDOW_MONTHS = 12

    @staticmethod
    def label(year: int, month: int) -> str:
        """Short label such as ``"Mar 2024"``."""
        return f"{MONTH_ABBR[month - 1]} {year}"

    def month_keys(self, reference_date: date) -> list[tuple[int, int]]:
        """Return ``(year, month)`` pairs for the window, oldest first."""
        last = _month_index(reference_date)
        return self._keys(last - (self.WINDOW_MONTHS - 1), last)

    def month_keys_between(self, start: date, end: date) -> list[tuple[int, int]]:
        """Return ``(year, month)`` pairs from ``start``'s month to ``end``'s, inclusive."""
        if start > end:
            raise ValidationError(f"Range start {start} is after range end {end}")
        return self._keys(_month_index(start), _month_index(end))

    def bucket(
        self,
        payments: Iterable[PremiumPayment],
        reference_date: date | None = None,
    ) -> list[TrendBucket]:
        """Sum ``amount_paid`` per calendar month.

        Parameters
        ----------
        payments : Iterable[PremiumPayment]
            Payments to bucket. Those outside the window are ignored.
        reference_date : date | None
            Last month of the window (default: today).

        Returns
        -------
        list[TrendBucket]
            Exactly twelve buckets in ascending chronological order; months
            without payments report zero.
        """
        reference_date = reference_date or date.today()
        return self._fill(self.month_keys(reference_date), payments)

    def bucket_range(
        self,
        payments: Iterable[PremiumPayment],
        start: date,
        end: date,
    ) -> list[TrendBucket]:
        """Sum ``amount_paid`` per month for payments dated ``start``..``end``.

        Both ends are inclusive. Every month of the span gets a bucket, even
        when no payment falls in it.
        """
        start, end = as_date(start), as_date(end)
        keys = self.month_keys_between(start, end)
        in_range = (payment for payment in payments if start <= as_date(payment.payment_date) <= end)
        return self._fill(keys, in_range)

    def _keys(self, first: int, last: int) -> list[tuple[int, int]]:
        return [(index // 12, index % 12 + 1) for index in range(first, last + 1)]

    def _fill(
        self,
        keys: list[tuple[int, int]],
        payments: Iterable[PremiumPayment],
    ) -> list[TrendBucket]:
        totals: dict[tuple[int, int], Decimal] = {key: ZERO for key in keys}

        for payment in payments:
            key = (payment.payment_date.year, payment.payment_date.month)
            if key in totals:
                totals[key] += non_negative(payment.amount_paid, "amount_paid")

        return [
            TrendBucket(
                month=self.label(year, month),
                period=f"{year:04d}-{month:02d}",
                amount=totals[(year, month)],
            )
            for year, month in keys
        ]
