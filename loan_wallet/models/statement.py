"""Amortization statement: the immutable audit record of one payment."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from loan_wallet.models.enums import ComponentKind


@dataclass(frozen=True)
class ComponentAllocation:
    """How much of a payment one component received.

    A prepayment allocation covers the principal of every installment after the
    paid one; its balances are the combined principal of those installments.
    """

    kind: ComponentKind
    balance_before: Decimal
    amount_applied: Decimal
    balance_after: Decimal
    prepayment: bool = False


@dataclass(frozen=True)
class AmortizationStatement:
    """Snapshot of one amortization event.

    Holds no reference to the wallet or installment it came from, so it can be
    shared, serialized and published freely.
    """

    amount_paid: Decimal
    policy_name: str
    allocations: tuple[ComponentAllocation, ...]
    total_applied: Decimal
    unused_amount: Decimal
    transaction_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.total_applied + self.unused_amount != self.amount_paid:
            raise ValueError(
                f"total_applied ({self.total_applied}) + unused_amount ({self.unused_amount}) "
                f"!= amount_paid ({self.amount_paid})"
            )
        allocated = sum((a.amount_applied for a in self.allocations), Decimal("0"))
        if allocated != self.total_applied:
            raise ValueError(
                f"Allocations sum to {allocated}, statement says {self.total_applied}"
            )
        if self.unused_amount < 0:
            raise ValueError(f"unused_amount must be >= 0, got {self.unused_amount}")

    def applied_to(self, kind: ComponentKind) -> Decimal:
        """Total applied to components of ``kind`` (zero when untouched)."""
        return sum(
            (a.amount_applied for a in self.allocations if a.kind == kind),
            Decimal("0"),
        )

    @property
    def reduced_principal(self) -> bool:
        return self.applied_to(ComponentKind.PRINCIPAL) > 0

    @property
    def prepaid(self) -> Decimal:
        """Amount that prepaid the principal of later installments."""
        return sum(
            (a.amount_applied for a in self.allocations if a.prepayment),
            Decimal("0"),
        )

    def with_prepayment(
        self, principal_before: Decimal, amount: Decimal
    ) -> AmortizationStatement:
        """Copy of this statement with ``amount`` moved from unused to a prepayment.

        Parameters
        ----------
        principal_before : Decimal
            Combined principal of the prepaid installments.
        amount : Decimal
            Prepaid amount, at most ``unused_amount`` and ``principal_before``.
        """
        if amount > self.unused_amount or amount > principal_before:
            raise ValueError(
                f"Cannot prepay {amount}: unused {self.unused_amount}, principal {principal_before}"
            )
        allocation = ComponentAllocation(
            kind=ComponentKind.PRINCIPAL,
            balance_before=principal_before,
            amount_applied=amount,
            balance_after=principal_before - amount,
            prepayment=True,
        )
        return replace(
            self,
            allocations=self.allocations + (allocation,),
            total_applied=self.total_applied + amount,
            unused_amount=self.unused_amount - amount,
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the audit record with Decimals as strings."""
        return {
            "transaction_id": self.transaction_id,
            "timestamp": self.timestamp.isoformat(),
            "amount_paid": str(self.amount_paid),
            "policy_name": self.policy_name,
            "allocations": [
                {
                    "kind": a.kind.value,
                    "balance_before": str(a.balance_before),
                    "amount_applied": str(a.amount_applied),
                    "balance_after": str(a.balance_after),
                    "prepayment": a.prepayment,
                }
                for a in self.allocations
            ],
            "total_applied": str(self.total_applied),
            "unused_amount": str(self.unused_amount),
        }
