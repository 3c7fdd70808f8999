"""Market-index rate lookup capability.

The real index service lives outside this package; wallets only depend on the
``RateLookup`` protocol. ``InMemoryRateLookup`` is a table-backed implementation
used by the synthetic generators and tests.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from datetime import date
from decimal import Decimal
from typing import Mapping, Protocol, runtime_checkable

from loan_wallet.exceptions import RateLookupError
from loan_wallet.models.enums import IndexType

logger = logging.getLogger(__name__)


@runtime_checkable
class RateLookup(Protocol):
    """Resolve an index/date pair to a correction factor."""

    def fetch_correction_factor(self, index: IndexType, reference_date: date) -> Decimal:
        """Return the correction factor, or raise ``RateLookupError``."""
        ...


class InMemoryRateLookup:
    """Rate lookup backed by a ``{(index, date): factor}`` table.

    A reference date without an exact entry resolves to the latest factor
    published on or before it for the same index.
    """

    def __init__(self, factors: Mapping[tuple[IndexType, date], Decimal] | None = None) -> None:
        self._series: dict[IndexType, dict[date, Decimal]] = {}
        for (index, day), factor in (factors or {}).items():
            self.publish(index, day, factor)

    def publish(self, index: IndexType, day: date, factor: Decimal) -> None:
        """Add or replace the factor of ``index`` on ``day``."""
        if factor <= 0:
            raise ValueError(f"Correction factor must be positive, got {factor}")
        self._series.setdefault(index, {})[day] = Decimal(factor)

    def fetch_correction_factor(self, index: IndexType, reference_date: date) -> Decimal:
        series = self._series.get(index)
        if not series:
            raise RateLookupError(f"No factors published for index {index.value}")

        exact = series.get(reference_date)
        if exact is not None:
            return exact

        days = sorted(series)
        pos = bisect_right(days, reference_date)
        if pos == 0:
            raise RateLookupError(
                f"No {index.value} factor on or before {reference_date.isoformat()}"
            )
        day = days[pos - 1]
        logger.debug(
            "Resolved %s on %s to factor published %s", index.value, reference_date, day
        )
        return series[day]

    def __len__(self) -> int:
        return sum(len(s) for s in self._series.values())
