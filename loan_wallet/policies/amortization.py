"""Payment allocation policies.

A policy walks the components of an installment in a fixed priority order and
applies as much of the payment as each balance absorbs. Policies differ only in
that order, so adding one means adding a preset, never touching the wallet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import MutableSequence

from loan_wallet.exceptions import ConfigurationError
from loan_wallet.models.component import FinancialComponent
from loan_wallet.models.enums import ComponentKind
from loan_wallet.models.statement import AmortizationStatement, ComponentAllocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AmortizationPolicy:
    """Allocate payments to components by priority.

    Parameters
    ----------
    name : str
        Policy name recorded on every statement.
    priority : tuple[ComponentKind, ...]
        Visiting order. Kinds missing from it are visited last, in their
        original order.
    """

    name: str
    priority: tuple[ComponentKind, ...]

    def ordered(self, components: MutableSequence[FinancialComponent]) -> list[FinancialComponent]:
        rank = {kind: pos for pos, kind in enumerate(self.priority)}
        return sorted(components, key=lambda c: rank.get(c.kind, len(self.priority)))

    def apply(
        self,
        components: MutableSequence[FinancialComponent],
        amount_paid: Decimal,
    ) -> AmortizationStatement | None:
        """Apply ``amount_paid`` to ``components`` in priority order.

        Parameters
        ----------
        components : MutableSequence[FinancialComponent]
            Components whose balances are reduced in place.
        amount_paid : Decimal
            Payment amount.

        Returns
        -------
        AmortizationStatement | None
            The statement, or None for a non-positive payment (nothing changes).
        """
        if amount_paid <= 0:
            logger.debug("Ignoring non-positive payment of %s", amount_paid)
            return None

        remaining = amount_paid
        allocations: list[ComponentAllocation] = []

        for component in self.ordered(components):
            if remaining == 0:
                break
            balance = component.outstanding_balance
            if balance <= 0:
                continue
            applied = min(remaining, balance)
            component.apply(applied)
            remaining -= applied
            allocations.append(
                ComponentAllocation(
                    kind=component.kind,
                    balance_before=balance,
                    amount_applied=applied,
                    balance_after=component.outstanding_balance,
                )
            )

        total_applied = amount_paid - remaining
        return AmortizationStatement(
            amount_paid=amount_paid,
            policy_name=self.name,
            allocations=tuple(allocations),
            total_applied=total_applied,
            unused_amount=remaining,
        )


PENALTY_FIRST = AmortizationPolicy(
    name="penalty_first",
    priority=(
        ComponentKind.PENALTY,
        ComponentKind.INTEREST,
        ComponentKind.FEE,
        ComponentKind.PRINCIPAL,
    ),
)

PRINCIPAL_FIRST = AmortizationPolicy(
    name="principal_first",
    priority=tuple(reversed(PENALTY_FIRST.priority)),
)

_PRESETS = {policy.name: policy for policy in (PENALTY_FIRST, PRINCIPAL_FIRST)}


def amortization_policy_for(name: str) -> AmortizationPolicy:
    """Resolve a preset policy by name."""
    try:
        return _PRESETS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown amortization policy '{name}'. Available: {sorted(_PRESETS)}"
        ) from None
