"""Tests for custom exception hierarchy."""

from loan_wallet.exceptions import (
    ConfigurationError,
    InstallmentNotFoundError,
    InvalidWalletStateError,
    LoanWalletError,
    RateLookupError,
    SinkError,
    WalletAlreadyContractedError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_loan_wallet_error_is_exception(self) -> None:
        assert isinstance(LoanWalletError("test"), Exception)

    def test_installment_not_found_is_loan_wallet_error(self) -> None:
        assert isinstance(InstallmentNotFoundError("test"), LoanWalletError)

    def test_already_contracted_is_invalid_state(self) -> None:
        err = WalletAlreadyContractedError("test")
        assert isinstance(err, InvalidWalletStateError)
        assert isinstance(err, LoanWalletError)

    def test_rate_lookup_error_is_loan_wallet_error(self) -> None:
        assert isinstance(RateLookupError("test"), LoanWalletError)

    def test_configuration_error_is_loan_wallet_error(self) -> None:
        assert isinstance(ConfigurationError("test"), LoanWalletError)

    def test_sink_error_is_loan_wallet_error(self) -> None:
        assert isinstance(SinkError("test"), LoanWalletError)

    def test_exception_message(self) -> None:
        err = InstallmentNotFoundError("Wallet w-001 has no open installment 3")
        assert str(err) == "Wallet w-001 has no open installment 3"
