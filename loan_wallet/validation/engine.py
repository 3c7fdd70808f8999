"""Generic rule-based validation with error aggregation.

Rules never raise and are never short-circuited: ``ValidationEngine.validate``
evaluates every rule and reports every failure, in rule order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class ValidationError:
    """A business-rule failure. Plain data, never raised."""

    message: str
    field: str


@dataclass(frozen=True)
class ValidationRule(Generic[T]):
    """A predicate over ``T`` paired with the error it reports."""

    condition: Callable[[T], bool]
    error: ValidationError

    def check(self, subject: T) -> ValidationError | None:
        return None if self.condition(subject) else self.error


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    def __post_init__(self) -> None:
        if self.value is None:
            raise ValueError("Success requires a value")

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying every triggered validation error."""

    errors: tuple[ValidationError, ...]

    def __post_init__(self) -> None:
        if not self.errors:
            raise ValueError("Failure requires at least one error")
        object.__setattr__(self, "errors", tuple(self.errors))

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True


Result = Union[Success[T], Failure]


class ValidationEngine(Generic[T]):
    """Apply a fixed set of rules to subjects of one type.

    Parameters
    ----------
    rules : Iterable[ValidationRule[T]]
        Rules evaluated, in order, on every call.
    """

    def __init__(self, rules: Iterable[ValidationRule[T]]) -> None:
        self.rules: tuple[ValidationRule[T], ...] = tuple(rules)

    def errors(self, subject: T) -> list[ValidationError]:
        """Every error triggered by ``subject``, in rule order."""
        return [err for err in (rule.check(subject) for rule in self.rules) if err is not None]

    def validate(self, subject: T) -> Result[T]:
        errors = self.errors(subject)
        if errors:
            return Failure(tuple(errors))
        return Success(subject)
