"""Schedule recalculation after an early principal paydown.

Both curves produce fixed-value installments with a Principal component and,
for positive rates, an Interest component. The Principal components always sum
to the remaining principal exactly; the last installment absorbs rounding.

Interest, fee and penalty balances of the installments being replaced are not
carried over: interest on the new schedule is derived from the new principal only.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Sequence

from loan_wallet.currency import BRL, Currency
from loan_wallet.models.component import FinancialComponent
from loan_wallet.models.enums import ComponentKind, ScheduleCurve
from loan_wallet.models.installment import FixedValueInstallment

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class ScheduleRecalculationPolicy(ABC):
    """Build a replacement sequence of future installments."""

    curve: ScheduleCurve

    def __init__(self, currency: Currency = BRL) -> None:
        self.currency = currency

    @abstractmethod
    def principal_shares(
        self, remaining_principal: Decimal, term: int, rate: Decimal
    ) -> list[Decimal]:
        """Principal amortized by each installment, before rounding fix-up."""

    def recompute(
        self,
        remaining_principal: Decimal,
        remaining_term_count: int,
        rate: Decimal,
        *,
        first_number: int,
        due_dates: Sequence[date],
    ) -> list[FixedValueInstallment]:
        """Recompute the remaining schedule.

        Parameters
        ----------
        remaining_principal : Decimal
            Principal the new schedule must amortize.
        remaining_term_count : int
            Number of installments to produce.
        rate : Decimal
            Periodic (monthly) interest rate, e.g. ``Decimal("0.015")``.
        first_number : int
            Number given to the first produced installment.
        due_dates : Sequence[date]
            One due date per produced installment, ascending.

        Returns
        -------
        list[FixedValueInstallment]
            Installments numbered consecutively from ``first_number``.
        """
        if remaining_principal < 0:
            raise ValueError(f"remaining_principal must be >= 0, got {remaining_principal}")
        if rate < 0:
            raise ValueError(f"rate must be >= 0, got {rate}")
        if len(due_dates) != remaining_term_count:
            raise ValueError(
                f"Expected {remaining_term_count} due dates, got {len(due_dates)}"
            )
        if remaining_term_count == 0:
            if remaining_principal != 0:
                raise ValueError("Cannot amortize a positive principal over zero installments")
            return []

        principal = self.currency.quantize(remaining_principal)
        shares = [
            self.currency.quantize(share)
            for share in self.principal_shares(principal, remaining_term_count, rate)
        ]
        shares[-1] += principal - sum(shares, ZERO)

        installments = []
        balance = principal
        for offset, (share, due) in enumerate(zip(shares, due_dates)):
            interest = self.currency.quantize(balance * rate)
            components = [FinancialComponent(ComponentKind.PRINCIPAL, share)]
            if interest > 0:
                components.append(FinancialComponent(ComponentKind.INTEREST, interest))
            installments.append(
                FixedValueInstallment(
                    number=first_number + offset,
                    due_date=due,
                    components=components,
                    amount=share + interest,
                )
            )
            balance -= share

        logger.debug(
            "Recomputed %d %s installments for principal %s at rate %s",
            remaining_term_count,
            self.curve.value,
            principal,
            rate,
        )
        return installments


class PriceRecalculation(ScheduleRecalculationPolicy):
    """Price (French) curve: equal total installment value."""

    curve = ScheduleCurve.PRICE

    def principal_shares(
        self, remaining_principal: Decimal, term: int, rate: Decimal
    ) -> list[Decimal]:
        if rate == 0:
            return [remaining_principal / term] * term

        factor = (1 + rate) ** term
        pmt = remaining_principal * rate * factor / (factor - 1)

        shares = []
        balance = remaining_principal
        for _ in range(term):
            share = pmt - balance * rate
            shares.append(share)
            balance -= share
        return shares


class SacRecalculation(ScheduleRecalculationPolicy):
    """SAC curve: equal principal amortization, decreasing interest."""

    curve = ScheduleCurve.SAC

    def principal_shares(
        self, remaining_principal: Decimal, term: int, rate: Decimal
    ) -> list[Decimal]:
        return [remaining_principal / term] * term


def recalculation_policy_for(
    curve: ScheduleCurve | str, currency: Currency = BRL
) -> ScheduleRecalculationPolicy:
    """Map a schedule curve to its recalculation policy."""
    curve = ScheduleCurve(curve.upper() if isinstance(curve, str) else curve)
    if curve == ScheduleCurve.PRICE:
        return PriceRecalculation(currency)
    return SacRecalculation(currency)
