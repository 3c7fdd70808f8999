"""Tests for the validation engine and rule sets."""

from datetime import date
from decimal import Decimal

import pytest

from loan_wallet.models import ComponentKind, FinancialComponent, FixedValueInstallment
from loan_wallet.validation import (
    COMPONENT_RULES,
    Failure,
    InstallmentValidator,
    Success,
    ValidationEngine,
    ValidationError,
    ValidationRule,
)

BALANCE_NOT_NEGATIVE = ValidationRule(
    condition=lambda c: c.outstanding_balance >= 0,
    error=ValidationError("Outstanding balance must not be negative", "outstanding_balance"),
)
BALANCE_WITHIN_ORIGINAL = ValidationRule(
    condition=lambda c: c.outstanding_balance <= c.original_amount,
    error=ValidationError("Outstanding balance exceeds original amount", "outstanding_balance"),
)


class TestResult:
    """Tests for Success and Failure."""

    def test_success_requires_value(self) -> None:
        with pytest.raises(ValueError):
            Success(None)

    def test_failure_requires_errors(self) -> None:
        with pytest.raises(ValueError):
            Failure(())

    def test_failure_freezes_errors(self) -> None:
        failure = Failure([ValidationError("bad", "field")])

        assert isinstance(failure.errors, tuple)
        assert failure.is_failure is True
        assert failure.is_success is False

    def test_success_flags(self) -> None:
        success = Success(1)

        assert success.is_success is True
        assert success.is_failure is False


class TestValidationEngine:
    """Tests for ValidationEngine."""

    def test_failing_and_passing_rule(self) -> None:
        """Balance 150 over original 100: one error, not two, and no mutation."""
        engine = ValidationEngine([BALANCE_WITHIN_ORIGINAL, BALANCE_NOT_NEGATIVE])
        comp = FinancialComponent(ComponentKind.PRINCIPAL, Decimal("100"), Decimal("150"))

        result = engine.validate(comp)

        assert isinstance(result, Failure)
        assert result.errors == (BALANCE_WITHIN_ORIGINAL.error,)
        assert comp.outstanding_balance == Decimal("150")
        assert comp.original_amount == Decimal("100")

    def test_collects_every_failure_in_rule_order(self) -> None:
        engine = ValidationEngine(COMPONENT_RULES)
        comp = FinancialComponent(ComponentKind.FEE, Decimal("-10"), Decimal("-20"))

        result = engine.validate(comp)

        assert isinstance(result, Failure)
        assert [e.field for e in result.errors] == ["original_amount", "outstanding_balance"]
        assert result.errors == (COMPONENT_RULES[0].error, COMPONENT_RULES[1].error)

    def test_success_returns_subject_unchanged(self) -> None:
        engine = ValidationEngine(COMPONENT_RULES)
        comp = FinancialComponent(ComponentKind.PRINCIPAL, Decimal("100"), Decimal("40"))

        result = engine.validate(comp)

        assert isinstance(result, Success)
        assert result.value is comp

    def test_validation_is_idempotent(self) -> None:
        engine = ValidationEngine(COMPONENT_RULES)
        comp = FinancialComponent(ComponentKind.INTEREST, Decimal("30"))

        first = engine.validate(comp)
        second = engine.validate(comp)

        assert first == second
        assert isinstance(second, Success)
        assert comp.outstanding_balance == Decimal("30")

    def test_every_rule_is_evaluated(self) -> None:
        calls: list[str] = []

        def rule(name: str, passes: bool) -> ValidationRule[int]:
            def condition(_: int) -> bool:
                calls.append(name)
                return passes

            return ValidationRule(condition, ValidationError(f"{name} failed", name))

        engine = ValidationEngine([rule("a", False), rule("b", False), rule("c", True)])

        result = engine.validate(1)

        assert calls == ["a", "b", "c"]
        assert [e.field for e in result.errors] == ["a", "b"]

    def test_no_rules_always_succeeds(self) -> None:
        assert ValidationEngine([]).validate("anything") == Success("anything")


class TestComponentRules:
    """Tests for the reference component rule set."""

    @pytest.mark.parametrize(
        ("original", "balance", "fields"),
        [
            ("100", "100", []),
            ("100", "0", []),
            ("0", "0", []),
            ("100", "150", ["outstanding_balance"]),
            ("100", "-1", ["outstanding_balance"]),
            ("-5", "-5", ["original_amount", "outstanding_balance"]),
        ],
    )
    def test_bounds(self, original: str, balance: str, fields: list[str]) -> None:
        comp = FinancialComponent(ComponentKind.PRINCIPAL, Decimal(original), Decimal(balance))

        errors = ValidationEngine(COMPONENT_RULES).errors(comp)

        assert [e.field for e in errors] == fields


class TestInstallmentValidator:
    """Tests for InstallmentValidator."""

    def test_flattens_errors_of_every_component(self) -> None:
        inst = FixedValueInstallment(
            number=1,
            due_date=date(2025, 1, 1),
            components=[
                FinancialComponent(ComponentKind.INTEREST, Decimal("30"), Decimal("-1")),
                FinancialComponent(ComponentKind.FEE, Decimal("5")),
                FinancialComponent(ComponentKind.PRINCIPAL, Decimal("100"), Decimal("101")),
            ],
        )

        result = InstallmentValidator().validate(inst)

        assert isinstance(result, Failure)
        assert result.errors == (COMPONENT_RULES[1].error, COMPONENT_RULES[2].error)

    def test_valid_installment(self) -> None:
        inst = FixedValueInstallment(
            number=1,
            due_date=date(2025, 1, 1),
            components=[FinancialComponent(ComponentKind.PRINCIPAL, Decimal("100"))],
        )

        result = InstallmentValidator().validate(inst)

        assert result == Success(inst)

    def test_custom_engine(self) -> None:
        engine = ValidationEngine([BALANCE_NOT_NEGATIVE])
        inst = FixedValueInstallment(
            number=1,
            due_date=date(2025, 1, 1),
            components=[FinancialComponent(ComponentKind.PRINCIPAL, Decimal("100"), Decimal("150"))],
        )

        assert isinstance(InstallmentValidator(engine).validate(inst), Success)
