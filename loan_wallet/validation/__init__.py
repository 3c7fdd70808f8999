"""Rule-based validation."""

from loan_wallet.validation.engine import (
    Failure,
    Result,
    Success,
    ValidationEngine,
    ValidationError,
    ValidationRule,
)
from loan_wallet.validation.rules import COMPONENT_RULES, InstallmentValidator

__all__ = [
    "COMPONENT_RULES",
    "Failure",
    "InstallmentValidator",
    "Result",
    "Success",
    "ValidationEngine",
    "ValidationError",
    "ValidationRule",
]
