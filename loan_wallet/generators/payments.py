"""Synthetic payment behavior for wallets."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from loan_wallet.generators.base import BaseGenerator
from loan_wallet.wallet import Wallet


@dataclass
class PaymentEvent:
    """One payment a borrower makes against a wallet."""

    payment_id: str
    installment_number: int
    amount: Decimal
    paid_on: date
    early: bool = False


class PaymentPlanGenerator(BaseGenerator):
    """Simulate borrower payments against the current state of a wallet.

    Each call looks at the wallet as it is now, so schedules replaced by an
    early amortization are picked up on the next payment.
    """

    def __init__(
        self,
        seed: int | None = None,
        partial_rate: float = 0.10,
        early_rate: float = 0.05,
        locale: str = "pt_BR",
    ) -> None:
        super().__init__(seed, locale)
        self.partial_rate = partial_rate
        self.early_rate = early_rate

    def next_payment(self, wallet: Wallet) -> PaymentEvent | None:
        """Payment for the first open installment, or None when settled.

        Parameters
        ----------
        wallet : Wallet
            Wallet to pay.

        Returns
        -------
        PaymentEvent | None
            A full, partial (30-70%) or early (overpaying) payment.
        """
        open_installments = wallet.open_installments()
        if not open_installments:
            return None

        target = open_installments[0]
        currency = wallet.config.currency
        outstanding = target.outstanding()
        paid_on = target.due_date - timedelta(days=random.randint(0, 5))
        roll = random.random()

        if roll < self.early_rate and len(open_installments) > 1:
            later_principal = sum(
                (inst.principal_balance() for inst in open_installments[1:]), Decimal("0")
            )
            extra = currency.quantize(later_principal * Decimal(str(random.uniform(0.1, 0.5))))
            return PaymentEvent(
                payment_id=self.fake.uuid4(),
                installment_number=target.number,
                amount=outstanding + extra,
                paid_on=paid_on,
                early=True,
            )

        if roll < self.early_rate + self.partial_rate and outstanding > currency.minor_unit:
            share = Decimal(str(round(random.uniform(0.3, 0.7), 2)))
            return PaymentEvent(
                payment_id=self.fake.uuid4(),
                installment_number=target.number,
                amount=max(currency.minor_unit, currency.quantize(outstanding * share)),
                paid_on=paid_on,
            )

        return PaymentEvent(
            payment_id=self.fake.uuid4(),
            installment_number=target.number,
            amount=outstanding,
            paid_on=paid_on,
        )
