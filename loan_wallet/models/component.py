"""Financial component: a typed sub-balance of an installment."""

from dataclasses import dataclass
from decimal import Decimal

from loan_wallet.models.enums import ComponentKind


@dataclass
class FinancialComponent:
    """Mutable value slice of an installment.

    The constructor accepts any balance so that inconsistent components can be
    reported by validation; ``0 <= outstanding_balance <= original_amount`` is
    enforced by ``COMPONENT_RULES``, not here.
    """

    kind: ComponentKind
    original_amount: Decimal
    outstanding_balance: Decimal | None = None

    def __post_init__(self) -> None:
        if self.outstanding_balance is None:
            self.outstanding_balance = self.original_amount

    @property
    def is_settled(self) -> bool:
        return self.outstanding_balance == 0

    def apply(self, amount: Decimal) -> Decimal:
        """Reduce the outstanding balance by ``amount``.

        Parameters
        ----------
        amount : Decimal
            Amount to apply, between zero and the outstanding balance.

        Returns
        -------
        Decimal
            The new outstanding balance.
        """
        if amount < 0:
            raise ValueError(f"Cannot apply a negative amount: {amount}")
        if amount > self.outstanding_balance:
            raise ValueError(
                f"Cannot apply {amount} to {self.kind.value} with balance {self.outstanding_balance}"
            )
        self.outstanding_balance -= amount
        return self.outstanding_balance
