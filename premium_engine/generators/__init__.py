"""Synthetic client, policy and payment generators."""

from premium_engine.generators.portfolio import ClientGenerator, PaymentGenerator, PolicyGenerator

__all__ = ["ClientGenerator", "PaymentGenerator", "PolicyGenerator"]
