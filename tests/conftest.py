"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from loan_wallet.config import WalletConfig
from loan_wallet.models import ComponentKind, FinancialComponent, IndexType
from loan_wallet.policies import PriceRecalculation
from loan_wallet.rates import InMemoryRateLookup
from loan_wallet.wallet import Wallet


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def first_due_date() -> date:
    """First due date of sample contracts."""
    return date(2025, 1, 1)


@pytest.fixture
def interest_and_principal() -> list[FinancialComponent]:
    """Interest 30 / Principal 100 components."""
    return [
        FinancialComponent(ComponentKind.INTEREST, Decimal("30")),
        FinancialComponent(ComponentKind.PRINCIPAL, Decimal("100")),
    ]


@pytest.fixture
def rate_lookup() -> InMemoryRateLookup:
    """IPCA factors for the first quarter of 2025."""
    return InMemoryRateLookup(
        {
            (IndexType.IPCA, date(2025, 1, 1)): Decimal("1.00"),
            (IndexType.IPCA, date(2025, 2, 1)): Decimal("1.05"),
            (IndexType.IPCA, date(2025, 3, 1)): Decimal("1.10"),
        }
    )


@pytest.fixture
def wallet() -> Wallet:
    """Uncontracted wallet with default configuration."""
    return Wallet(wallet_id="wallet-test-001")


@pytest.fixture
def price_wallet() -> Wallet:
    """Uncontracted wallet that re-plans on a Price curve at 1% a month."""
    config = WalletConfig(
        recalculation_policy=PriceRecalculation(),
        interest_rate=Decimal("0.01"),
    )
    return Wallet(config, wallet_id="wallet-test-002")
