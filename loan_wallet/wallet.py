"""Wallet aggregate root.

A wallet is one financial contract. It owns its installments (and, through
them, every financial component) and is the only entry point that contracts an
operation, receives a payment or amortizes early. Callers never mutate
installments directly.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loan_wallet.config import WalletConfig
from loan_wallet.dates import monthly_schedule
from loan_wallet.exceptions import (
    InstallmentNotFoundError,
    InvalidWalletStateError,
    WalletAlreadyContractedError,
)
from loan_wallet.logging import get_logger
from loan_wallet.models.component import FinancialComponent
from loan_wallet.models.enums import ComponentKind, IndexType, InstallmentStatus
from loan_wallet.models.installment import (
    FixedValueInstallment,
    IndexLinkedInstallment,
    Installment,
)
from loan_wallet.models.statement import AmortizationStatement
from loan_wallet.rates import RateLookup
from loan_wallet.validation.engine import Failure, Result, Success


@dataclass(frozen=True)
class _Snapshot:
    """Restorable copy of everything a payment can change."""

    installments: tuple[Installment, ...]
    balances: tuple[tuple[FinancialComponent, Decimal], ...]
    statuses: tuple[tuple[Installment, InstallmentStatus], ...]
    statement_count: int


class Wallet:
    """Aggregate root for one loan contract.

    Parameters
    ----------
    config : WalletConfig | None
        Policies and rules for this wallet. Defaults to ``WalletConfig()``.
    wallet_id : str | None
        Identifier; a uuid4 hex string is generated when omitted.

    Notes
    -----
    Payment operations hold the wallet's own lock, so concurrent payments to one
    wallet serialize. Wallets share no state and need no cross-wallet locking.
    """

    def __init__(self, config: WalletConfig | None = None, wallet_id: str | None = None) -> None:
        self.wallet_id = wallet_id or uuid.uuid4().hex
        self.config = config or WalletConfig()
        self._validator = self.config.validator()
        self._installments: list[Installment] = []
        self._statements: list[AmortizationStatement] = []
        self._lock = threading.RLock()
        self._log = get_logger(__name__, wallet_id=self.wallet_id)

    def __repr__(self) -> str:
        return f"Wallet({self.wallet_id!r}, installments={len(self._installments)})"

    # --- Read-only views ---

    @property
    def installments(self) -> tuple[Installment, ...]:
        return tuple(self._installments)

    @property
    def statements(self) -> tuple[AmortizationStatement, ...]:
        return tuple(self._statements)

    @property
    def is_contracted(self) -> bool:
        return bool(self._installments)

    def installment(self, number: int) -> Installment:
        """Return the installment numbered ``number``."""
        for inst in self._installments:
            if inst.number == number:
                return inst
        raise InstallmentNotFoundError(
            f"Wallet {self.wallet_id} has no installment {number}"
        )

    def open_installments(self) -> list[Installment]:
        return [inst for inst in self._installments if inst.is_open]

    def outstanding_principal(self) -> Decimal:
        return sum((inst.principal_balance() for inst in self._installments), Decimal("0"))

    def outstanding_value(self, as_of: date) -> Decimal:
        """Current value of every open installment, index corrections included."""
        return sum(
            (inst.current_value(as_of) for inst in self.open_installments()),
            Decimal("0"),
        )

    # --- Contracting ---

    def _ensure_not_contracted(self) -> None:
        if self._installments:
            raise WalletAlreadyContractedError(
                f"Wallet {self.wallet_id} already has {len(self._installments)} installments"
            )

    @staticmethod
    def _check_terms(value: Decimal, installment_count: int) -> None:
        if installment_count < 1:
            raise ValueError(f"installment_count must be positive, got {installment_count}")
        if value < 0:
            raise ValueError(f"Contract value must not be negative, got {value}")

    def contract_fixed_operation(
        self,
        total_value: Decimal,
        installment_count: int,
        first_due_date: date,
    ) -> tuple[Installment, ...]:
        """Schedule ``total_value`` as monthly fixed-value installments.

        With a recalculation policy and a positive ``interest_rate``, the value
        is the financed principal: the installments follow the policy's curve
        and carry Interest at that rate, the same way a recalculated tail does.

        Otherwise the value is split into equal Principal-only shares, each
        rounded half-up to the currency minor unit; the last installment absorbs
        the rounding residual so the shares sum to ``total_value``.

        Raises
        ------
        WalletAlreadyContractedError
            If the wallet already has installments.
        """
        with self._lock:
            self._ensure_not_contracted()
            self._check_terms(total_value, installment_count)

            currency = self.config.currency
            total = currency.quantize(total_value)
            due_dates = monthly_schedule(first_due_date, installment_count)
            policy = self.config.recalculation_policy

            installments: list[Installment] = []
            if policy is not None and self.config.interest_rate > 0:
                installments.extend(
                    policy.recompute(
                        total,
                        installment_count,
                        self.config.interest_rate,
                        first_number=1,
                        due_dates=due_dates,
                    )
                )
            else:
                share = currency.quantize(total / installment_count)
                last_share = total - share * (installment_count - 1)
                for i, due in enumerate(due_dates):
                    amount = last_share if i == installment_count - 1 else share
                    installments.append(
                        FixedValueInstallment(
                            number=i + 1,
                            due_date=due,
                            components=[FinancialComponent(ComponentKind.PRINCIPAL, amount)],
                            amount=amount,
                        )
                    )

            self._installments = installments
            self._log.info(
                "Contracted fixed operation: %s in %d installments from %s",
                total,
                installment_count,
                first_due_date.isoformat(),
            )
            return self.installments

    def contract_index_linked_operation(
        self,
        base_value: Decimal,
        installment_count: int,
        index: IndexType,
        first_due_date: date,
        rate_lookup: RateLookup,
    ) -> tuple[Installment, ...]:
        """Create ``installment_count`` installments corrected by ``index``.

        Every installment shares ``base_value`` and ``index``; each has its own
        monthly due date.

        Raises
        ------
        WalletAlreadyContractedError
            If the wallet already has installments.
        """
        with self._lock:
            self._ensure_not_contracted()
            self._check_terms(base_value, installment_count)

            currency = self.config.currency
            base = currency.quantize(base_value)
            self._installments = [
                IndexLinkedInstallment(
                    number=i + 1,
                    due_date=due,
                    components=[FinancialComponent(ComponentKind.PRINCIPAL, base)],
                    base_amount=base,
                    index=index,
                    rate_lookup=rate_lookup,
                    currency=currency,
                )
                for i, due in enumerate(monthly_schedule(first_due_date, installment_count))
            ]
            self._log.info(
                "Contracted %s-linked operation: %d installments of %s from %s",
                index.value,
                installment_count,
                base,
                first_due_date.isoformat(),
            )
            return self.installments

    # --- Payments ---

    def _open_installment(self, number: int) -> Installment:
        for inst in self._installments:
            if inst.number == number and inst.is_open:
                return inst
        raise InstallmentNotFoundError(
            f"Wallet {self.wallet_id} has no open installment {number}"
        )

    def receive_payment(
        self, installment_number: int, amount: Decimal
    ) -> Result[AmortizationStatement] | None:
        """Apply a payment to one open installment.

        Returns
        -------
        Result[AmortizationStatement] | None
            ``Success`` with the statement, ``Failure`` with every validation
            error (nothing was changed), or None for a non-positive amount.

        Raises
        ------
        InstallmentNotFoundError
            If no open installment has ``installment_number``.
        """
        with self._lock:
            result = self._settle(installment_number, amount)
            if isinstance(result, Success):
                self._record(installment_number, result.value)
            return result

    def _settle(
        self, installment_number: int, amount: Decimal
    ) -> Result[AmortizationStatement] | None:
        installment = self._open_installment(installment_number)

        validation = self._validator.validate(installment)
        if isinstance(validation, Failure):
            self._log.warning(
                "Payment to installment %d rejected: %s",
                installment_number,
                "; ".join(f"{e.field}: {e.message}" for e in validation.errors),
                extra={"installment_number": installment_number},
            )
            return validation

        statement = self.config.amortization_policy.apply(installment.components, amount)
        if statement is None:
            return None

        if installment.mark_paid_if_settled():
            self._log.info(
                "Installment %d settled",
                installment_number,
                extra={"installment_number": installment_number},
            )
        return Success(statement)

    def _record(self, installment_number: int, statement: AmortizationStatement) -> None:
        self._statements.append(statement)
        self._log.info(
            "Applied %s to installment %d (prepaid %s, unused %s)",
            statement.total_applied,
            installment_number,
            statement.prepaid,
            statement.unused_amount,
            extra={
                "transaction_id": statement.transaction_id,
                "installment_number": installment_number,
            },
        )

    def amortize_early(
        self, installment_number: int, amount: Decimal
    ) -> Result[AmortizationStatement] | None:
        """Pay an installment and re-plan the schedule after it.

        When the payment reduced the target's principal, whatever it left
        unused prepays the principal of the open installments due after the
        target, up to their combined principal. The prepayment is recorded in
        the returned statement as a Principal allocation flagged
        ``prepayment``; only money that could not be applied anywhere stays in
        ``unused_amount``. The recalculation policy then rebuilds that tail from
        the principal left, and the new tail replaces the old one in a single
        assignment. Paid installments are never touched.

        If recomputing or splicing fails, the wallet is restored to its state
        before the payment and the error propagates.

        Raises
        ------
        InvalidWalletStateError
            If no recalculation policy is configured.
        InstallmentNotFoundError
            If no open installment has ``installment_number``.
        """
        if self.config.recalculation_policy is None:
            raise InvalidWalletStateError(
                f"Wallet {self.wallet_id} has no schedule recalculation policy"
            )

        with self._lock:
            snapshot = self._snapshot()
            result = self._settle(installment_number, amount)
            if not isinstance(result, Success):
                return result

            statement = result.value
            if statement.reduced_principal:
                try:
                    statement = self._prepay_tail(installment_number, statement)
                except Exception:
                    self._restore(snapshot)
                    self._log.error(
                        "Recalculation after installment %d failed; state restored",
                        installment_number,
                        exc_info=True,
                        extra={"installment_number": installment_number},
                    )
                    raise

            self._record(installment_number, statement)
            return Success(statement)

    def _prepay_tail(
        self, installment_number: int, statement: AmortizationStatement
    ) -> AmortizationStatement:
        position = next(
            pos for pos, inst in enumerate(self._installments) if inst.number == installment_number
        )
        target = self._installments[position]
        head = self._installments[: position + 1]
        later = self._installments[position + 1 :]
        tail = [inst for inst in later if inst.due_date > target.due_date and inst.is_open]

        tail_principal = sum((inst.principal_balance() for inst in tail), Decimal("0"))
        prepaid = min(self.config.currency.truncate(statement.unused_amount), tail_principal)
        if prepaid <= 0:
            return statement

        # Interest-free tails stay interest-free after the paydown
        bears_interest = any(inst.component(ComponentKind.INTEREST) is not None for inst in tail)
        rate = self.config.interest_rate if bears_interest else Decimal("0")

        recomputed = self.config.recalculation_policy.recompute(
            tail_principal - prepaid,
            len(tail),
            rate,
            first_number=tail[0].number,
            due_dates=[inst.due_date for inst in tail],
        )
        new_tail = [self._keep_variant(new, old) for new, old in zip(recomputed, tail)]
        for inst in new_tail:
            inst.mark_paid_if_settled()

        replaced = {id(inst) for inst in tail}
        kept = [inst for inst in later if id(inst) not in replaced]
        installments = sorted(head + kept + new_tail, key=lambda inst: (inst.due_date, inst.number))
        numbers = [inst.number for inst in installments]
        if len(set(numbers)) != len(numbers):
            raise InvalidWalletStateError(
                f"Recalculated schedule for wallet {self.wallet_id} repeats installment numbers"
            )
        self._installments = installments

        self._log.info(
            "Recalculated %d installments: principal %s -> %s",
            len(new_tail),
            tail_principal,
            tail_principal - prepaid,
            extra={"transaction_id": statement.transaction_id},
        )
        return statement.with_prepayment(tail_principal, prepaid)

    @staticmethod
    def _keep_variant(new: FixedValueInstallment, old: Installment) -> Installment:
        """Give a recomputed installment the index linkage of the one it replaces."""
        if not isinstance(old, IndexLinkedInstallment):
            return new
        return IndexLinkedInstallment(
            number=new.number,
            due_date=new.due_date,
            components=new.components,
            base_amount=new.amount,
            index=old.index,
            rate_lookup=old.rate_lookup,
            currency=old.currency,
        )

    def _snapshot(self) -> _Snapshot:
        return _Snapshot(
            installments=tuple(self._installments),
            balances=tuple(
                (comp, comp.outstanding_balance)
                for inst in self._installments
                for comp in inst.components
            ),
            statuses=tuple((inst, inst.status) for inst in self._installments),
            statement_count=len(self._statements),
        )

    def _restore(self, snapshot: _Snapshot) -> None:
        for comp, balance in snapshot.balances:
            comp.outstanding_balance = balance
        for inst, status in snapshot.statuses:
            inst.status = status
        self._installments = list(snapshot.installments)
        del self._statements[snapshot.statement_count :]
