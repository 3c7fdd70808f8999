"""Custom exception hierarchy for loan-wallet.

Business-rule failures are not exceptions: they travel as ``ValidationError``
values inside a ``Failure``. Everything here signals a precondition violation
by the caller.
"""


class LoanWalletError(Exception):
    """Base exception for all loan-wallet errors."""


class InstallmentNotFoundError(LoanWalletError):
    """Raised when an installment number is unknown or already settled."""


class InvalidWalletStateError(LoanWalletError):
    """Raised when a wallet is in an invalid state for the operation."""


class WalletAlreadyContractedError(InvalidWalletStateError):
    """Raised when a contracting operation runs on a wallet with installments."""


class RateLookupError(LoanWalletError):
    """Raised when an index/date pair has no correction factor."""


class ConfigurationError(LoanWalletError):
    """Raised when configuration is invalid or missing."""


class SinkError(LoanWalletError):
    """Raised when an audit sink operation fails."""
