"""Installment variants.

An installment is one scheduled payment obligation. The two variants share the
component bookkeeping and differ only in how ``current_value`` is computed:

- ``FixedValueInstallment``: the sum of outstanding component balances.
- ``IndexLinkedInstallment``: the same sum corrected by a market-index factor
  resolved through an injected ``RateLookup``.

Installments never reference their wallet or their siblings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Union

from loan_wallet.currency import BRL, Currency
from loan_wallet.models.component import FinancialComponent
from loan_wallet.models.enums import ComponentKind, IndexType, InstallmentStatus

if TYPE_CHECKING:
    from loan_wallet.rates import RateLookup


@dataclass
class _InstallmentBase:
    """Shared state and behaviour of every installment variant."""

    number: int
    due_date: date
    components: list[FinancialComponent] = field(default_factory=list)
    status: InstallmentStatus = InstallmentStatus.OPEN

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError(f"Installment number must be positive, got {self.number}")

    @property
    def is_open(self) -> bool:
        return self.status == InstallmentStatus.OPEN

    def outstanding(self) -> Decimal:
        """Sum of outstanding component balances."""
        return sum((c.outstanding_balance for c in self.components), Decimal("0"))

    def component(self, kind: ComponentKind) -> FinancialComponent | None:
        """Return the first component of ``kind``, if any."""
        for comp in self.components:
            if comp.kind == kind:
                return comp
        return None

    def principal_balance(self) -> Decimal:
        principal = self.component(ComponentKind.PRINCIPAL)
        return principal.outstanding_balance if principal else Decimal("0")

    def mark_paid_if_settled(self) -> bool:
        """Transition OPEN -> PAID once nothing is outstanding.

        Returns
        -------
        bool
            True when this call changed the status.
        """
        if self.status == InstallmentStatus.PAID:
            return False
        if self.outstanding() == 0:
            self.status = InstallmentStatus.PAID
            return True
        return False


@dataclass
class FixedValueInstallment(_InstallmentBase):
    """Installment whose value was fixed at contracting time."""

    amount: Decimal = Decimal("0")

    def current_value(self, as_of: date | None = None) -> Decimal:
        return self.outstanding()


@dataclass
class IndexLinkedInstallment(_InstallmentBase):
    """Installment corrected by a market index (IPCA, CDI, ...)."""

    base_amount: Decimal = Decimal("0")
    index: IndexType = IndexType.IPCA
    rate_lookup: RateLookup | None = field(default=None, repr=False, compare=False)
    currency: Currency = field(default=BRL, repr=False)

    def correction_factor(self, as_of: date) -> Decimal:
        """Resolve the index correction factor for ``as_of``.

        Raises
        ------
        RateLookupError
            If the lookup has no factor for the index and date.
        """
        if self.rate_lookup is None:
            raise ValueError(f"Installment {self.number} has no rate lookup")
        return self.rate_lookup.fetch_correction_factor(self.index, as_of)

    def current_value(self, as_of: date | None = None) -> Decimal:
        outstanding = self.outstanding()
        if outstanding == 0:
            return self.currency.quantize(outstanding)
        reference = as_of if as_of is not None else self.due_date
        return self.currency.quantize(outstanding * self.correction_factor(reference))


Installment = Union[FixedValueInstallment, IndexLinkedInstallment]
