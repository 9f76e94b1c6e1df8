"""Portfolio analytics: summary snapshot, monthly trend and due-date alerts."""

from premium_engine.analytics.aggregator import PortfolioAnalyticsAggregator
from premium_engine.analytics.alerts import classify_due_policies
from premium_engine.analytics.trend import MonthlyTrendBucketizer

__all__ = [
    "MonthlyTrendBucketizer",
    "PortfolioAnalyticsAggregator",
    "classify_due_policies",
]
