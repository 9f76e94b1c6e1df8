"""Client, policy and premium payment generators."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterator

from premium_engine.config import DEFAULT_PREMIUM_MODES
from premium_engine.generators.base import BaseGenerator
from premium_engine.models import (
    Client,
    PaymentMode,
    Policy,
    PolicyStatus,
    PremiumMode,
    PremiumPayment,
)
from premium_engine.rollover import add_months


class ClientGenerator(BaseGenerator):
    """Generate synthetic policy holders."""

    def generate(self, reference_date: date | None = None) -> Client:
        """Generate a single client.

        Parameters
        ----------
        reference_date : date | None
            "Today" for the generated portfolio; ``created_at`` falls up to
            five years before it.

        Returns
        -------
        Client
            Generated client.
        """
        reference_date = reference_date or date.today()
        days_ago = self.rng.randint(0, 5 * 365)
        return Client(
            client_id=self.fake.uuid4(),
            name=self.fake.name(),
            email=self.fake.email(),
            mobile=self.fake.phone_number(),
            created_at=datetime.combine(reference_date, time()) - timedelta(days=days_ago),
        )

    def generate_batch(self, count: int, reference_date: date | None = None) -> Iterator[Client]:
        """Generate multiple clients."""
        for _ in range(count):
            yield self.generate(reference_date)


class PolicyGenerator(BaseGenerator):
    """Generate synthetic life and health policies."""

    INSURERS = [
        "LIC",
        "HDFC Life",
        "ICICI Prudential",
        "SBI Life",
        "Max Life",
        "Tata AIA",
        "Star Health",
    ]

    PREMIUM_MODES = list(PremiumMode)
    PREMIUM_MODE_WEIGHTS = [0.30, 0.20, 0.15, 0.30, 0.05]

    STATUSES = list(PolicyStatus)
    STATUS_WEIGHTS = [0.75, 0.10, 0.10, 0.05]

    def generate(
        self,
        client_id: str,
        reference_date: date | None = None,
        months_of_history: int = 12,
    ) -> Policy:
        """Generate a policy whose first unpaid due date lies in the past.

        Parameters
        ----------
        client_id : str
            Owning client.
        reference_date : date | None
            "Today" for the generated portfolio.
        months_of_history : int
            How far back the policy's first due date is placed.

        Returns
        -------
        Policy
            Generated policy.
        """
        reference_date = reference_date or date.today()
        mode = self.rng.choices(self.PREMIUM_MODES, weights=self.PREMIUM_MODE_WEIGHTS, k=1)[0]
        status = self.rng.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0]

        sum_assured = Decimal(self.rng.randint(5, 200) * 50_000)
        annual = (sum_assured * Decimal(self.rng.randint(15, 60)) / Decimal(1000)).quantize(Decimal("1"))
        if mode == PremiumMode.SINGLE:
            installment = annual * 10
        else:
            per_year = DEFAULT_PREMIUM_MODES.resolve(mode).installments_per_year
            installment = (annual / per_year).quantize(Decimal("1"))

        first_due = add_months(reference_date, -months_of_history)
        first_due = first_due.replace(day=self.rng.randint(1, 28))
        term_years = self.rng.choice([10, 15, 20, 25])

        return Policy(
            policy_id=self.fake.uuid4(),
            client_id=client_id,
            policy_number=self.fake.bothify("########"),
            insurer=self.rng.choice(self.INSURERS),
            plan_name=self.rng.choice(["Term Plan", "Endowment", "Money Back", "ULIP", "Health Shield"]),
            status=status,
            premium_amount=installment,
            premium_mode=mode,
            next_due_date=first_due,
            sum_assured=sum_assured,
            commencement_date=first_due,
            maturity_date=add_months(first_due, 12 * term_years),
        )


class PaymentGenerator(BaseGenerator):
    """Generate premium payments against a policy's current due date."""

    PAYMENT_MODES = list(PaymentMode)

    def generate(
        self,
        policy: Policy,
        partial: bool = False,
        latest_date: date | None = None,
    ) -> PremiumPayment:
        """Generate a payment for the policy's current cycle.

        Parameters
        ----------
        policy : Policy
            Policy being paid; must have a due date.
        partial : bool
            Pay only part of the installment.
        latest_date : date | None
            Payment dates are capped at this date.

        Returns
        -------
        PremiumPayment
            Generated payment.
        """
        due = policy.next_due_date or date.today()
        premium = policy.premium_amount or Decimal("0")
        payment_date = due + timedelta(days=self.rng.randint(-10, 20))
        if latest_date is not None and payment_date > latest_date:
            payment_date = latest_date

        late_fee = Decimal("0")
        if payment_date > due:
            late_fee = (premium * Decimal("0.01")).quantize(Decimal("1"))

        if partial:
            amount = (premium * Decimal(self.rng.randint(30, 80)) / 100).quantize(Decimal("1"))
            late_fee = Decimal("0")
        else:
            amount = premium

        return PremiumPayment(
            payment_id=self.fake.uuid4(),
            policy_id=policy.policy_id,
            payment_date=payment_date,
            amount_paid=amount,
            late_fee=late_fee,
            payment_mode=self.rng.choice(self.PAYMENT_MODES),
            receipt_number=self.fake.bothify("RCPT-######"),
        )
