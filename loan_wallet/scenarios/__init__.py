"""Scenarios for generating wallet portfolios."""

from loan_wallet.scenarios.portfolio import PortfolioResult, WalletPortfolioScenario

__all__ = ["PortfolioResult", "WalletPortfolioScenario"]
