"""Client portfolio scenario: policies with a replayed payment history."""

from __future__ import annotations

import logging
import random
from datetime import date

from premium_engine.config import ScenarioConfig
from premium_engine.generators import ClientGenerator, PaymentGenerator, PolicyGenerator
from premium_engine.models import PolicyStatus
from premium_engine.rollover import PaymentRolloverCalculator
from premium_engine.store import PortfolioStore

logger = logging.getLogger(__name__)


class ClientPortfolioScenario:
    """Generate a workspace of clients, policies and premium payments.

    This scenario creates:
    - Clients with one or more policies across insurers and premium modes
    - For every ACTIVE policy, a payment history replayed cycle by cycle
      through :meth:`PortfolioStore.record_payment`, so each stored due date
      is the one the rollover rule produced
    - Occasional partial payments, which leave the due date in place
    """

    def __init__(
        self,
        num_clients: int = 25,
        max_policies_per_client: int = 4,
        months_of_history: int = 18,
        partial_payment_rate: float = 0.1,
        seed: int | None = None,
        reference_date: date | None = None,
        *,
        config: ScenarioConfig | None = None,
        calculator: PaymentRolloverCalculator | None = None,
    ) -> None:
        """Initialize the scenario.

        Parameters
        ----------
        num_clients : int
            Number of clients to generate.
        max_policies_per_client : int
            Each client gets between 1 and this many policies.
        months_of_history : int
            How far back the first due date of each policy lies.
        partial_payment_rate : float
            Share of payments that settle only part of the installment.
        seed : int | None
            Random seed for reproducibility.
        reference_date : date | None
            "Today" for the portfolio (default: today).
        config : ScenarioConfig | None
            Optional scenario configuration. If provided, overrides the
            sizing parameters.
        calculator : PaymentRolloverCalculator | None
            Calculator used by the store to commit payments.
        """
        if config is not None:
            num_clients = config.num_clients
            max_policies_per_client = config.max_policies_per_client
            months_of_history = config.months_of_history
            partial_payment_rate = config.partial_payment_rate
        if max_policies_per_client < 1:
            raise ValueError("max_policies_per_client must be at least 1")

        self.config = config
        self.num_clients = num_clients
        self.max_policies_per_client = max_policies_per_client
        self.months_of_history = months_of_history
        self.partial_payment_rate = partial_payment_rate
        self.seed = seed
        self.reference_date = reference_date or date.today()

        self._rng = random.Random(seed)
        self.store = PortfolioStore(calculator=calculator or PaymentRolloverCalculator())
        self._client_gen = ClientGenerator(seed=seed)
        self._policy_gen = PolicyGenerator(seed=None if seed is None else seed + 1)
        self._payment_gen = PaymentGenerator(seed=None if seed is None else seed + 2)

    def generate(self) -> PortfolioStore:
        """Generate all data for the scenario.

        Returns
        -------
        PortfolioStore
            Store containing all generated data.
        """
        logger.info(
            "Starting client portfolio scenario: %d clients, %d months of history",
            self.num_clients,
            self.months_of_history,
        )

        for client in self._client_gen.generate_batch(self.num_clients, self.reference_date):
            self.store.add_client(client)
            for _ in range(self._rng.randint(1, self.max_policies_per_client)):
                policy = self._policy_gen.generate(
                    client.client_id,
                    reference_date=self.reference_date,
                    months_of_history=self.months_of_history,
                )
                self.store.add_policy(policy)
                if policy.status == PolicyStatus.ACTIVE:
                    self._replay_payments(policy.policy_id)

        logger.info("Generated portfolio: %s", self.store.stats())
        return self.store

    def _replay_payments(self, policy_id: str) -> None:
        """Pay a policy cycle by cycle until its due date passes the reference date."""
        # A partial payment does not roll, so allow a second attempt per cycle
        max_payments = 2 * 12 * (self.months_of_history + 1)
        for _ in range(max_payments):
            policy = self.store.get_policy(policy_id)
            if policy.next_due_date is None or policy.next_due_date > self.reference_date:
                return
            partial = self._rng.random() < self.partial_payment_rate
            payment = self._payment_gen.generate(policy, partial=partial, latest_date=self.reference_date)
            outcome = self.store.record_payment(payment)
            if outcome.is_full_payment and not outcome.rolled_over:
                # Non-recurring policy, fully paid
                return
