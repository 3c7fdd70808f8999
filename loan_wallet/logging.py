"""Structured logging configuration for loan-wallet.

Wallet code logs through ``get_logger(__name__, wallet_id=...)``; the returned
adapter stamps every record with the wallet it concerns. ``JsonFormatter``
gathers those stamps, plus per-call ``transaction_id`` and
``installment_number`` extras, under a single ``context`` object.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping

# Record attributes that identify the wallet operation a log line belongs to
WALLET_CONTEXT_KEYS = ("wallet_id", "transaction_id", "installment_number")

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

QUIET_LOGGERS = ("confluent_kafka", "faker")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Configure logging for loan-wallet.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown names fall
        back to INFO.
    format_type : str
        Format type: "standard" or "json".
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("loan_wallet").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with wallet context grouped together.

    Parameters
    ----------
    context_keys : tuple[str, ...]
        Record attributes copied into ``context`` when present.
    """

    def __init__(self, context_keys: tuple[str, ...] = WALLET_CONTEXT_KEYS) -> None:
        super().__init__()
        self.context_keys = context_keys

    def context(self, record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: getattr(record, key)
            for key in self.context_keys
            if getattr(record, key, None) is not None
        }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = self.context(record)
        if context:
            log_data["context"] = context

        if record.levelno >= logging.WARNING:
            log_data["location"] = f"{record.module}:{record.lineno}"

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class WalletLogAdapter(logging.LoggerAdapter):
    """Logger adapter that adds fixed wallet context to every record.

    Per-call ``extra`` values are merged over the fixed context.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str, **context: Any) -> logging.Logger | WalletLogAdapter:
    """Get a logger, bound to ``context`` when any is given.

    Parameters
    ----------
    name : str
        Logger name (usually __name__).
    **context
        Fixed record attributes, e.g. ``wallet_id``.

    Returns
    -------
    logging.Logger | WalletLogAdapter
        The named logger, or an adapter over it carrying ``context``.
    """
    logger = logging.getLogger(name)
    if context:
        return WalletLogAdapter(logger, context)
    return logger
