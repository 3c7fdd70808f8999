"""Wallet portfolio scenario: contract wallets and replay borrower payments."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_wallet.config import LoanWalletConfig
from loan_wallet.dates import add_months
from loan_wallet.generators.base import BaseGenerator
from loan_wallet.generators.payments import PaymentPlanGenerator
from loan_wallet.generators.rates import IndexSeriesGenerator
from loan_wallet.models.base import Event
from loan_wallet.models.enums import IndexType
from loan_wallet.sinks.serialization import statement_event
from loan_wallet.validation.engine import Failure, Success
from loan_wallet.wallet import Wallet

logger = logging.getLogger(__name__)


@dataclass
class PortfolioResult:
    """Everything a scenario run produced."""

    wallets: list[Wallet] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)
    recalculations: int = 0

    @property
    def settled_wallets(self) -> int:
        return sum(1 for w in self.wallets if not w.open_installments())


class WalletPortfolioScenario(BaseGenerator):
    """Generate a portfolio of wallets with realistic payment behavior.

    This scenario creates:
    - Fixed-value contracts and index-linked contracts (IPCA, CDI, ...)
    - Payment streams with full, partial and early payments
    - One audit event per amortization statement
    """

    TERMS = [6, 12, 18, 24, 36]

    def __init__(
        self,
        num_wallets: int = 100,
        index_linked_rate: float = 0.30,
        partial_rate: float = 0.10,
        early_rate: float = 0.05,
        start_date: date | None = None,
        seed: int | None = None,
        *,
        config: LoanWalletConfig | None = None,
    ) -> None:
        """Initialize wallet portfolio scenario.

        Parameters
        ----------
        num_wallets : int
            Number of wallets to contract.
        index_linked_rate : float
            Share of wallets contracted as index-linked operations.
        partial_rate : float
            Probability that a payment covers only part of an installment.
        early_rate : float
            Probability that a payment overpays and amortizes early.
        start_date : date | None
            First due date of every contract (default: first of next month).
        seed : int | None
            Random seed for reproducibility.
        config : LoanWalletConfig | None
            Wallet policies and rates. Defaults to ``LoanWalletConfig()``.
        """
        super().__init__(seed)
        self.num_wallets = num_wallets
        self.index_linked_rate = index_linked_rate
        self.config = config or LoanWalletConfig(seed=seed)
        if start_date is None:
            start_date = add_months(date.today().replace(day=1), 1)
        self.start_date = start_date

        self._payments = PaymentPlanGenerator(
            seed=seed, partial_rate=partial_rate, early_rate=early_rate
        )
        self._rates = IndexSeriesGenerator(seed=seed).lookup(
            start_date, max(self.TERMS) + 1
        )

    def _contract(self) -> Wallet:
        wallet = Wallet(self.config.wallet_config(), wallet_id=self.fake.uuid4())
        term = random.choice(self.TERMS)

        if random.random() < self.index_linked_rate:
            base = Decimal(random.randint(2, 50) * 100)
            index = random.choice([IndexType.IPCA, IndexType.IGPM, IndexType.CDI])
            wallet.contract_index_linked_operation(
                base, term, index, self.start_date, self._rates
            )
        else:
            total = Decimal(random.randint(10, 500) * 100)
            wallet.contract_fixed_operation(total, term, self.start_date)
        return wallet

    def _replay(self, wallet: Wallet, result: PortfolioResult) -> None:
        can_amortize_early = wallet.config.recalculation_policy is not None
        # Every payment either settles an installment, shrinks it, or is
        # rejected; the bound stops pathological partial-payment streaks.
        for _ in range(len(wallet.installments) * 10):
            payment = self._payments.next_payment(wallet)
            if payment is None:
                return

            if payment.early and can_amortize_early:
                outcome = wallet.amortize_early(payment.installment_number, payment.amount)
                if isinstance(outcome, Success) and outcome.value.prepaid > 0:
                    result.recalculations += 1
            else:
                outcome = wallet.receive_payment(payment.installment_number, payment.amount)

            if isinstance(outcome, Failure):
                result.failures.append(outcome)
                return
            if isinstance(outcome, Success):
                result.events.append(
                    statement_event(outcome.value, wallet.wallet_id, payment.installment_number)
                )

    def generate(self) -> PortfolioResult:
        """Contract every wallet and replay its payments.

        Returns
        -------
        PortfolioResult
            Wallets, audit events and validation failures.
        """
        logger.info(
            "Starting wallet portfolio scenario: %d wallets, %.0f%% index-linked",
            self.num_wallets,
            self.index_linked_rate * 100,
        )

        result = PortfolioResult()
        for _ in range(self.num_wallets):
            wallet = self._contract()
            self._replay(wallet, result)
            result.wallets.append(wallet)

        logger.info(
            "Portfolio complete: %d wallets (%d settled), %d statements, %d recalculations, %d failures",
            len(result.wallets),
            result.settled_wallets,
            len(result.events),
            result.recalculations,
            len(result.failures),
        )
        return result
