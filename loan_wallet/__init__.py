"""loan-wallet: loan-servicing contracts with pluggable amortization."""

from loan_wallet.config import LoanWalletConfig, WalletConfig
from loan_wallet.currency import BRL, Currency
from loan_wallet.exceptions import (
    ConfigurationError,
    InstallmentNotFoundError,
    InvalidWalletStateError,
    LoanWalletError,
    RateLookupError,
    SinkError,
    WalletAlreadyContractedError,
)
from loan_wallet.models import (
    AmortizationStatement,
    ComponentAllocation,
    ComponentKind,
    FinancialComponent,
    FixedValueInstallment,
    IndexLinkedInstallment,
    IndexType,
    Installment,
    InstallmentStatus,
    ScheduleCurve,
)
from loan_wallet.policies import (
    PENALTY_FIRST,
    PRINCIPAL_FIRST,
    AmortizationPolicy,
    PriceRecalculation,
    SacRecalculation,
    ScheduleRecalculationPolicy,
)
from loan_wallet.rates import InMemoryRateLookup, RateLookup
from loan_wallet.validation import (
    COMPONENT_RULES,
    Failure,
    InstallmentValidator,
    Success,
    ValidationEngine,
    ValidationError,
    ValidationRule,
)
from loan_wallet.wallet import Wallet

__version__ = "0.1.0"

__all__ = [
    "AmortizationPolicy",
    "AmortizationStatement",
    "BRL",
    "COMPONENT_RULES",
    "ComponentAllocation",
    "ComponentKind",
    "ConfigurationError",
    "Currency",
    "Failure",
    "FinancialComponent",
    "FixedValueInstallment",
    "InMemoryRateLookup",
    "IndexLinkedInstallment",
    "IndexType",
    "Installment",
    "InstallmentNotFoundError",
    "InstallmentStatus",
    "InstallmentValidator",
    "InvalidWalletStateError",
    "LoanWalletConfig",
    "LoanWalletError",
    "PENALTY_FIRST",
    "PRINCIPAL_FIRST",
    "PriceRecalculation",
    "RateLookup",
    "RateLookupError",
    "SacRecalculation",
    "ScheduleCurve",
    "ScheduleRecalculationPolicy",
    "SinkError",
    "Success",
    "ValidationEngine",
    "ValidationError",
    "ValidationRule",
    "Wallet",
    "WalletAlreadyContractedError",
    "WalletConfig",
]
