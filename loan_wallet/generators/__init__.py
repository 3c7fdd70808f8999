"""Synthetic data generators."""

from loan_wallet.generators.base import BaseGenerator
from loan_wallet.generators.payments import PaymentEvent, PaymentPlanGenerator
from loan_wallet.generators.rates import IndexSeriesGenerator

__all__ = [
    "BaseGenerator",
    "IndexSeriesGenerator",
    "PaymentEvent",
    "PaymentPlanGenerator",
]
