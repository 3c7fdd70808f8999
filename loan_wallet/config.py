"""Configuration management for loan-wallet.

``WalletConfig`` is the explicit, per-wallet configuration object: every policy
and rule set a wallet uses is passed in through it at construction time.
``LoanWalletConfig`` is the process-level configuration read from the
environment by scripts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from loan_wallet.currency import BRL, Currency
from loan_wallet.exceptions import ConfigurationError
from loan_wallet.models.component import FinancialComponent
from loan_wallet.models.enums import ScheduleCurve
from loan_wallet.policies.amortization import (
    PENALTY_FIRST,
    AmortizationPolicy,
    amortization_policy_for,
)
from loan_wallet.policies.recalculation import (
    ScheduleRecalculationPolicy,
    recalculation_policy_for,
)
from loan_wallet.validation.engine import ValidationEngine, ValidationRule
from loan_wallet.validation.rules import COMPONENT_RULES, InstallmentValidator


@dataclass(frozen=True)
class WalletConfig:
    """Policies and rules a wallet is built with."""

    currency: Currency = BRL
    amortization_policy: AmortizationPolicy = PENALTY_FIRST
    recalculation_policy: ScheduleRecalculationPolicy | None = None
    interest_rate: Decimal = Decimal("0")  # Monthly rate (e.g., 0.015 for 1.5%)
    component_rules: tuple[ValidationRule[FinancialComponent], ...] = COMPONENT_RULES

    def __post_init__(self) -> None:
        if self.interest_rate < 0:
            raise ConfigurationError(f"interest_rate must be >= 0, got {self.interest_rate}")

    def validator(self) -> InstallmentValidator:
        """Build the installment validator for this rule set."""
        return InstallmentValidator(ValidationEngine(self.component_rules))


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Audit file output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class AuditConfig:
    """Where amortization statements are published."""

    sink: str = "console"  # console, json or kafka
    topic: str = "dev.wallet.amortizations"


@dataclass
class LoanWalletConfig:
    """Main configuration for loan-wallet."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    currency: Currency = BRL
    amortization_policy: str = PENALTY_FIRST.name
    schedule_curve: ScheduleCurve | None = ScheduleCurve.PRICE
    interest_rate: Decimal = Decimal("0")
    seed: int | None = None
    log_level: str = "INFO"

    def wallet_config(self) -> WalletConfig:
        """Build the per-wallet configuration object."""
        recalculation = (
            recalculation_policy_for(self.schedule_curve, self.currency)
            if self.schedule_curve is not None
            else None
        )
        return WalletConfig(
            currency=self.currency,
            amortization_policy=amortization_policy_for(self.amortization_policy),
            recalculation_policy=recalculation,
            interest_rate=self.interest_rate,
        )

    @classmethod
    def from_env(cls) -> "LoanWalletConfig":
        """Create config from environment variables."""
        import os

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        audit = AuditConfig(
            sink=os.getenv("AUDIT_SINK", "console").lower(),
            topic=os.getenv("AUDIT_TOPIC", "dev.wallet.amortizations"),
        )

        try:
            currency = Currency(
                os.getenv("CURRENCY", "BRL"),
                decimals=int(os.getenv("CURRENCY_DECIMALS", "2")),
            )
            interest_rate = Decimal(os.getenv("INTEREST_RATE", "0"))
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except (ValueError, InvalidOperation) as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        curve_name = os.getenv("SCHEDULE_CURVE", "PRICE").upper()
        if curve_name == "NONE":
            schedule_curve = None
        else:
            try:
                schedule_curve = ScheduleCurve(curve_name)
            except ValueError:
                raise ConfigurationError(f"Unknown schedule curve '{curve_name}'") from None

        policy_name = os.getenv("AMORTIZATION_POLICY", PENALTY_FIRST.name).lower()
        amortization_policy_for(policy_name)

        return cls(
            kafka=kafka,
            output=output,
            audit=audit,
            currency=currency,
            amortization_policy=policy_name,
            schedule_curve=schedule_curve,
            interest_rate=interest_rate,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
