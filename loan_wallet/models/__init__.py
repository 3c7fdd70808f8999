"""Wallet domain models."""

from loan_wallet.models.base import Event
from loan_wallet.models.component import FinancialComponent
from loan_wallet.models.enums import (
    ComponentKind,
    IndexType,
    InstallmentStatus,
    ScheduleCurve,
)
from loan_wallet.models.installment import (
    FixedValueInstallment,
    IndexLinkedInstallment,
    Installment,
)
from loan_wallet.models.statement import AmortizationStatement, ComponentAllocation

__all__ = [
    "AmortizationStatement",
    "ComponentAllocation",
    "ComponentKind",
    "Event",
    "FinancialComponent",
    "FixedValueInstallment",
    "IndexLinkedInstallment",
    "IndexType",
    "Installment",
    "InstallmentStatus",
    "ScheduleCurve",
]
