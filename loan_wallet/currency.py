"""Currency precision handling."""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal


class Currency:
    """Currency definition with its minor unit.

    Attributes:
        code: ISO currency code (e.g., 'BRL', 'USD', 'JPY')
        decimals: Number of decimal places of the minor unit
    """

    def __init__(self, code: str = "BRL", decimals: int = 2):
        if decimals < 0:
            raise ValueError(f"decimals must be >= 0, got {decimals}")
        self.code = code.upper()
        self.decimals = decimals

    @property
    def minor_unit(self) -> Decimal:
        """Smallest representable amount, e.g. 0.01 for 2 dp, 1 for 0 dp."""
        return Decimal("1").scaleb(-self.decimals)

    def quantize(self, amount: Decimal | int | str, rounding: str = ROUND_HALF_UP) -> Decimal:
        """Round to the minor unit, half-up unless ``rounding`` says otherwise."""
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))
        return amount.quantize(self.minor_unit, rounding=rounding)

    def truncate(self, amount: Decimal | int | str) -> Decimal:
        """Round toward zero to the minor unit."""
        return self.quantize(amount, rounding=ROUND_DOWN)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Currency):
            return False
        return self.code == other.code and self.decimals == other.decimals

    def __hash__(self) -> int:
        return hash((self.code, self.decimals))

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency('{self.code}', decimals={self.decimals})"


BRL = Currency("BRL", decimals=2)
USD = Currency("USD", decimals=2)
JPY = Currency("JPY", decimals=0)
