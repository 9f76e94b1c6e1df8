"""Scenarios for generating sample insurance portfolios."""

from premium_engine.scenarios.client_portfolio import ClientPortfolioScenario

__all__ = ["ClientPortfolioScenario"]
