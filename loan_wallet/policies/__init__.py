"""Payment allocation and schedule recalculation policies."""

from loan_wallet.policies.amortization import (
    PENALTY_FIRST,
    PRINCIPAL_FIRST,
    AmortizationPolicy,
    amortization_policy_for,
)
from loan_wallet.policies.recalculation import (
    PriceRecalculation,
    SacRecalculation,
    ScheduleRecalculationPolicy,
    recalculation_policy_for,
)

__all__ = [
    "AmortizationPolicy",
    "PENALTY_FIRST",
    "PRINCIPAL_FIRST",
    "PriceRecalculation",
    "SacRecalculation",
    "ScheduleRecalculationPolicy",
    "amortization_policy_for",
    "recalculation_policy_for",
]
