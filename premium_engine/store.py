"""In-memory portfolio working set with referential integrity."""

from dataclasses import dataclass, field
from datetime import date, datetime

from premium_engine.analytics.aggregator import PortfolioAnalyticsAggregator
from premium_engine.exceptions import EntityNotFoundError, ReferentialIntegrityError
from premium_engine.models import (
    AnalyticsSnapshot,
    Client,
    PaymentOutcome,
    Policy,
    PremiumAuditEntry,
    PremiumPayment,
)
from premium_engine.rollover import PaymentRolloverCalculator


@dataclass
class PortfolioStore:
    """Clients, policies and payments for one workspace.

    Payments are recorded through the rollover calculator, so a stored
    policy's due date always reflects the payments committed against it.
    """

    calculator: PaymentRolloverCalculator = field(default_factory=PaymentRolloverCalculator)

    clients: dict[str, Client] = field(default_factory=dict)
    policies: dict[str, Policy] = field(default_factory=dict)
    payments: list[PremiumPayment] = field(default_factory=list)
    audit_log: list[PremiumAuditEntry] = field(default_factory=list)

    # Relationship indexes
    _client_policies: dict[str, list[str]] = field(default_factory=dict)
    _policy_payments: dict[str, list[int]] = field(default_factory=dict)

    def add_client(self, client: Client) -> None:
        """Add a client to the store."""
        self.clients[client.client_id] = client
        self._client_policies.setdefault(client.client_id, [])

    def add_policy(self, policy: Policy) -> None:
        """Add a policy to the store."""
        if policy.client_id not in self.clients:
            raise ReferentialIntegrityError(f"Client {policy.client_id} not found")

        if policy.policy_id not in self.policies:
            self._client_policies[policy.client_id].append(policy.policy_id)
            self._policy_payments[policy.policy_id] = []
        self.policies[policy.policy_id] = policy

    def record_payment(self, payment: PremiumPayment, *, now: datetime | None = None) -> PaymentOutcome:
        """Commit a payment and roll the policy's due date.

        The payment is appended and the policy replaced together; if the
        rollover raises, the store is left unchanged.
        """
        if payment.policy_id not in self.policies:
            raise ReferentialIntegrityError(f"Policy {payment.policy_id} not found")

        outcome = self.calculator.apply_payment(self.policies[payment.policy_id], payment, now=now)

        idx = len(self.payments)
        self.payments.append(payment)
        self._policy_payments[payment.policy_id].append(idx)
        self.policies[payment.policy_id] = outcome.policy
        self.audit_log.append(outcome.audit)
        return outcome

    def get_client(self, client_id: str) -> Client:
        """Get a client by ID."""
        if client_id not in self.clients:
            raise EntityNotFoundError(f"Client {client_id} not found")
        return self.clients[client_id]

    def get_policy(self, policy_id: str) -> Policy:
        """Get a policy by ID."""
        if policy_id not in self.policies:
            raise EntityNotFoundError(f"Policy {policy_id} not found")
        return self.policies[policy_id]

    def get_policies_for_client(self, client_id: str) -> list[Policy]:
        """Get all policies owned by a client."""
        if client_id not in self.clients:
            raise EntityNotFoundError(f"Client {client_id} not found")
        return [self.policies[pid] for pid in self._client_policies[client_id]]

    def get_payments_for_policy(self, policy_id: str) -> list[PremiumPayment]:
        """Get all payments recorded against a policy, in recording order."""
        if policy_id not in self.policies:
            raise EntityNotFoundError(f"Policy {policy_id} not found")
        return [self.payments[idx] for idx in self._policy_payments[policy_id]]

    def get_payments_for_client(self, client_id: str) -> list[PremiumPayment]:
        """Get all payments across a client's policies."""
        payments: list[PremiumPayment] = []
        for policy in self.get_policies_for_client(client_id):
            payments.extend(self.get_payments_for_policy(policy.policy_id))
        return payments

    def snapshot_for_client(
        self,
        client_id: str,
        aggregator: PortfolioAnalyticsAggregator,
        reference_date: date | None = None,
    ) -> AnalyticsSnapshot:
        """Analytics over one client's policies and payments."""
        return aggregator.aggregate(
            self.get_policies_for_client(client_id),
            self.get_payments_for_client(client_id),
            reference_date,
        )

    def snapshot(
        self,
        aggregator: PortfolioAnalyticsAggregator,
        reference_date: date | None = None,
    ) -> AnalyticsSnapshot:
        """Analytics over the whole workspace."""
        return aggregator.aggregate(self.policies.values(), self.payments, reference_date)

    def stats(self) -> dict[str, int]:
        """Get entity counts."""
        return {
            "clients": len(self.clients),
            "policies": len(self.policies),
            "payments": len(self.payments),
            "audit_entries": len(self.audit_log),
        }
