"""Synthetic market-index series."""

from __future__ import annotations

import random
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from loan_wallet.dates import add_months
from loan_wallet.generators.base import BaseGenerator
from loan_wallet.models.enums import IndexType
from loan_wallet.rates import InMemoryRateLookup

FACTOR_QUANTUM = Decimal("0.00000001")


class IndexSeriesGenerator(BaseGenerator):
    """Generate compounding monthly correction factors per index."""

    # Monthly variation ranges by index
    MONTHLY_RATES = {
        IndexType.IPCA: (0.001, 0.006),  # 0.1-0.6%
        IndexType.IGPM: (-0.005, 0.012),  # deflation months happen
        IndexType.CDI: (0.008, 0.011),
        IndexType.SELIC: (0.008, 0.011),
    }

    def generate(
        self, index: IndexType, start: date, months: int
    ) -> dict[tuple[IndexType, date], Decimal]:
        """Generate ``months`` factors, the first one equal to 1.

        Parameters
        ----------
        index : IndexType
            Index to simulate.
        start : date
            Reference date of the first factor.
        months : int
            Number of monthly factors.

        Returns
        -------
        dict[tuple[IndexType, date], Decimal]
            Factor table keyed by (index, reference date).
        """
        low, high = self.MONTHLY_RATES[index]
        factor = Decimal("1")
        series: dict[tuple[IndexType, date], Decimal] = {}
        for i in range(months):
            series[(index, add_months(start, i))] = factor
            monthly = Decimal(str(round(random.uniform(low, high), 6)))
            factor = (factor * (1 + monthly)).quantize(FACTOR_QUANTUM, rounding=ROUND_HALF_UP)
        return series

    def lookup(
        self, start: date, months: int, indexes: tuple[IndexType, ...] = tuple(IndexType)
    ) -> InMemoryRateLookup:
        """Build a rate lookup covering ``indexes`` from ``start``."""
        factors: dict[tuple[IndexType, date], Decimal] = {}
        for index in indexes:
            factors.update(self.generate(index, start, months))
        return InMemoryRateLookup(factors)
