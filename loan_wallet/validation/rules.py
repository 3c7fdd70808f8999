"""Reference rule sets and the installment-level validator."""

from __future__ import annotations

from decimal import Decimal

from loan_wallet.models.component import FinancialComponent
from loan_wallet.models.installment import Installment
from loan_wallet.validation.engine import (
    Failure,
    Result,
    Success,
    ValidationEngine,
    ValidationError,
    ValidationRule,
)

ZERO = Decimal("0")

COMPONENT_RULES: tuple[ValidationRule[FinancialComponent], ...] = (
    ValidationRule(
        condition=lambda c: c.original_amount >= ZERO,
        error=ValidationError("Original amount must not be negative", "original_amount"),
    ),
    ValidationRule(
        condition=lambda c: c.outstanding_balance >= ZERO,
        error=ValidationError("Outstanding balance must not be negative", "outstanding_balance"),
    ),
    ValidationRule(
        condition=lambda c: c.outstanding_balance <= c.original_amount,
        error=ValidationError(
            "Outstanding balance must not exceed the original amount", "outstanding_balance"
        ),
    ),
)


class InstallmentValidator:
    """Validate every component of an installment and flatten the errors.

    Parameters
    ----------
    component_engine : ValidationEngine[FinancialComponent] | None
        Engine applied to each component. Defaults to ``COMPONENT_RULES``.
    """

    def __init__(
        self, component_engine: ValidationEngine[FinancialComponent] | None = None
    ) -> None:
        self.component_engine = component_engine or ValidationEngine(COMPONENT_RULES)

    def validate(self, installment: Installment) -> Result[Installment]:
        errors: list[ValidationError] = []
        for component in installment.components:
            errors.extend(self.component_engine.errors(component))
        if errors:
            return Failure(tuple(errors))
        return Success(installment)
