"""Shared serialization utilities for audit sinks."""

import uuid
from dataclasses import fields, is_dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from loan_wallet.models.base import Event
from loan_wallet.models.statement import AmortizationStatement

EVENT_SOURCE = "loan-wallet"
AMORTIZATION_APPLIED = "amortization.applied"


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if isinstance(obj, AmortizationStatement):
        return obj.to_dict()
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return {k: serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert a dataclass field by field, without ``asdict`` deep copies.

    Nested statements and dataclasses are converted recursively.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, AmortizationStatement):
        return value.to_dict()
    elif is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    elif isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def statement_event(
    statement: AmortizationStatement,
    wallet_id: str,
    installment_number: int | None = None,
) -> Event:
    """Wrap a statement in the standard event envelope.

    Parameters
    ----------
    statement : AmortizationStatement
        The audit record.
    wallet_id : str
        Wallet the payment was applied to; becomes the event subject.
    installment_number : int | None
        Target installment, recorded in the metadata when known.
    """
    metadata: dict[str, Any] = {"policy_name": statement.policy_name}
    if installment_number is not None:
        metadata["installment_number"] = installment_number

    return Event(
        event_id=uuid.uuid4().hex,
        event_type=AMORTIZATION_APPLIED,
        event_time=datetime.now(timezone.utc),
        source=EVENT_SOURCE,
        subject=wallet_id,
        data=statement.to_dict(),
        metadata=metadata,
    )
