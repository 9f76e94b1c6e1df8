"""Premium due-date rollover and portfolio analytics for insurance agencies."""

from premium_engine.analytics import (
    MonthlyTrendBucketizer,
    PortfolioAnalyticsAggregator,
    classify_due_policies,
)
from premium_engine.config import DEFAULT_PREMIUM_MODES, PremiumModeConfig, PremiumModeSpec
from premium_engine.rollover import PaymentRolloverCalculator, add_months

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_PREMIUM_MODES",
    "MonthlyTrendBucketizer",
    "PaymentRolloverCalculator",
    "PortfolioAnalyticsAggregator",
    "PremiumModeConfig",
    "PremiumModeSpec",
    "add_months",
    "classify_due_policies",
]
