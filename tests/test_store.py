"""Tests for PortfolioStore."""

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from premium_engine.analytics import PortfolioAnalyticsAggregator
from premium_engine.exceptions import (
    ConfigurationError,
    EntityNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from premium_engine.models import Client, Policy, PremiumPayment
from premium_engine.store import PortfolioStore


def _client(client_id: str = "client-test-001") -> Client:
    return Client(client_id=client_id, name="Asha Rao", email="asha@example.com")


def _payment(policy_id: str, amount: str, payment_id: str = "pay-001", late_fee: str = "0") -> PremiumPayment:
    return PremiumPayment(
        payment_id=payment_id,
        policy_id=policy_id,
        payment_date=date(2024, 3, 12),
        amount_paid=Decimal(amount),
        late_fee=Decimal(late_fee),
    )


@pytest.fixture
def store(quarterly_policy: Policy) -> PortfolioStore:
    store = PortfolioStore()
    store.add_client(_client())
    store.add_policy(quarterly_policy)
    return store


class TestAddEntities:
    """Tests for adding clients and policies."""

    def test_add_policy_requires_client(self, quarterly_policy: Policy) -> None:
        store = PortfolioStore()
        with pytest.raises(ReferentialIntegrityError, match="client-test-001"):
            store.add_policy(quarterly_policy)

    def test_get_policies_for_client(self, store: PortfolioStore, quarterly_policy: Policy) -> None:
        assert store.get_policies_for_client("client-test-001") == [quarterly_policy]

    def test_readding_policy_replaces_without_duplicating(self, store: PortfolioStore, quarterly_policy: Policy) -> None:
        updated = replace(quarterly_policy, insurer="Max Life")
        store.add_policy(updated)

        assert store.get_policies_for_client("client-test-001") == [updated]

    def test_readding_client_keeps_policies(self, store: PortfolioStore) -> None:
        store.add_client(_client())
        assert len(store.get_policies_for_client("client-test-001")) == 1

    def test_lookups_raise_for_unknown_ids(self, store: PortfolioStore) -> None:
        with pytest.raises(EntityNotFoundError):
            store.get_client("nope")
        with pytest.raises(EntityNotFoundError):
            store.get_policy("nope")
        with pytest.raises(EntityNotFoundError):
            store.get_policies_for_client("nope")
        with pytest.raises(EntityNotFoundError):
            store.get_payments_for_policy("nope")


class TestRecordPayment:
    """Tests for committing payments through the store."""

    def test_full_payment_rolls_stored_policy(self, store: PortfolioStore) -> None:
        outcome = store.record_payment(_payment("pol-test-001", "6000"))

        assert outcome.is_full_payment
        assert store.get_policy("pol-test-001").next_due_date == date(2024, 6, 15)
        assert store.get_policy("pol-test-001").last_paid_date == date(2024, 3, 12)
        assert store.get_payments_for_policy("pol-test-001") == [_payment("pol-test-001", "6000")]
        assert len(store.audit_log) == 1

    def test_partial_payment_keeps_due_date(self, store: PortfolioStore) -> None:
        store.record_payment(_payment("pol-test-001", "5000", late_fee="200"))

        assert store.get_policy("pol-test-001").next_due_date == date(2024, 3, 15)
        assert len(store.payments) == 1

    def test_partial_then_full(self, store: PortfolioStore) -> None:
        store.record_payment(_payment("pol-test-001", "3000", payment_id="pay-001"))
        store.record_payment(_payment("pol-test-001", "6000", payment_id="pay-002"))

        assert store.get_policy("pol-test-001").next_due_date == date(2024, 6, 15)
        assert [p.payment_id for p in store.get_payments_for_client("client-test-001")] == ["pay-001", "pay-002"]

    def test_unknown_policy_rejected(self, store: PortfolioStore) -> None:
        with pytest.raises(ReferentialIntegrityError):
            store.record_payment(_payment("pol-missing", "6000"))

    def test_failed_commit_leaves_store_unchanged(self, store: PortfolioStore, quarterly_policy: Policy) -> None:
        store.add_policy(replace(quarterly_policy, policy_id="pol-bad", premium_mode="WEEKLY"))

        with pytest.raises(ConfigurationError):
            store.record_payment(_payment("pol-bad", "6000"))
        with pytest.raises(ValidationError):
            store.record_payment(_payment("pol-test-001", "-1"))

        assert store.payments == []
        assert store.audit_log == []
        assert store.get_payments_for_policy("pol-bad") == []
        assert store.get_policy("pol-test-001").next_due_date == date(2024, 3, 15)

    def test_audit_timestamp(self, store: PortfolioStore) -> None:
        now = datetime(2024, 3, 12, 9, 30, tzinfo=timezone.utc)
        store.record_payment(_payment("pol-test-001", "6000"), now=now)
        assert store.audit_log[0].timestamp == now


class TestSnapshots:
    """Tests for store-level analytics."""

    def test_snapshot_for_client(self, store: PortfolioStore, reference_date: date) -> None:
        store.record_payment(_payment("pol-test-001", "6000"))
        snapshot = store.snapshot_for_client("client-test-001", PortfolioAnalyticsAggregator(), reference_date)

        assert snapshot.total_policies == 1
        assert snapshot.total_premiums_paid == Decimal("6000")
        assert snapshot.total_annual_premium == Decimal("24000")

    def test_workspace_snapshot_spans_clients(
        self, store: PortfolioStore, quarterly_policy: Policy, reference_date: date
    ) -> None:
        store.add_client(_client("client-002"))
        store.add_policy(replace(quarterly_policy, policy_id="pol-002", client_id="client-002", insurer="Tata AIA"))

        snapshot = store.snapshot(PortfolioAnalyticsAggregator(), reference_date)

        assert snapshot.total_policies == 2
        assert snapshot.insurer_breakdown == {"LIC": 1, "Tata AIA": 1}

    def test_stats(self, store: PortfolioStore) -> None:
        store.record_payment(_payment("pol-test-001", "6000"))
        assert store.stats() == {"clients": 1, "policies": 1, "payments": 1, "audit_entries": 1}
