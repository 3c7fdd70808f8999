"""Audit sinks for amortization statements."""

from __future__ import annotations

from typing import Any, Protocol

from loan_wallet.config import LoanWalletConfig
from loan_wallet.exceptions import ConfigurationError
from loan_wallet.sinks.console import ConsoleSink
from loan_wallet.sinks.json_file import JsonFileSink


class AuditSink(Protocol):
    """What the audit publisher needs from a sink."""

    def send(self, topic: str, record: Any) -> None: ...

    def write_batch(self, topic: str, records: list[Any]) -> None: ...

    def close(self) -> None: ...


def create_sink(config: LoanWalletConfig) -> AuditSink:
    """Build the sink named by ``config.audit.sink``."""
    name = config.audit.sink
    if name == "console":
        return ConsoleSink(pretty=config.output.pretty_json)
    if name == "json":
        return JsonFileSink(config.output.json_output_dir, pretty=config.output.pretty_json)
    if name == "kafka":
        # confluent-kafka is only imported when a Kafka sink is requested
        from loan_wallet.sinks.kafka import KafkaSink

        return KafkaSink(config.kafka)
    raise ConfigurationError(f"Unknown audit sink '{name}'. Available: console, json, kafka")


__all__ = ["AuditSink", "ConsoleSink", "JsonFileSink", "create_sink"]
