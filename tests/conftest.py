"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from premium_engine.models import Policy, PolicyStatus, PremiumMode


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def reference_date() -> date:
    """Fixed "today" for trend and alert tests."""
    return date(2024, 6, 15)


@pytest.fixture
def sample_client_id() -> str:
    """Sample client ID."""
    return "client-test-001"


@pytest.fixture
def quarterly_policy(sample_client_id: str) -> Policy:
    """Quarterly policy with a 6000 installment due 2024-03-15."""
    return Policy(
        policy_id="pol-test-001",
        client_id=sample_client_id,
        insurer="LIC",
        status=PolicyStatus.ACTIVE,
        premium_amount=Decimal("6000"),
        premium_mode=PremiumMode.QUARTERLY,
        next_due_date=date(2024, 3, 15),
        sum_assured=Decimal("500000"),
    )
