from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional

from exceptions import AmountOverflowError, FixedDecimalError

SCALE = 10_000
PRECISION = 4

MIN_RAW = -(2 ** 63)
MAX_RAW = 2 ** 63 - 1

_QUANTUM = Decimal("0.0001")


@dataclass(frozen=True, order=True)
class FixedDecimal:
    """
    Fixed-point amount stored as an integer number of 1/10,000 units.
    Values are rounded once, when parsed, using round half away from zero.
    The raw value is bounded to the signed 64-bit range.
    """

    raw: int = 0

    def __post_init__(self):
        if not MIN_RAW <= self.raw <= MAX_RAW:
            raise AmountOverflowError(f"Fixed-point value {self.raw} out of 64-bit range")

    @classmethod
    def parse(cls, text: str) -> "FixedDecimal":
        """
        Parse a decimal string with any number of fractional digits.

        "1.23455" -> 1.2346, "-1.23455" -> -1.2346 (ties round away from zero).
        """
        stripped = text.strip() if text is not None else ""
        if not stripped:
            raise FixedDecimalError("Empty amount")
        # Decimal() also accepts "_" grouping and non-ASCII digits.
        if "_" in stripped or not stripped.isascii():
            raise FixedDecimalError(f"Invalid amount {text!r}")

        try:
            value = Decimal(stripped)
        except InvalidOperation:
            raise FixedDecimalError(f"Invalid amount {text!r}") from None

        if not value.is_finite():
            raise FixedDecimalError(f"Amount must be finite, got {text!r}")

        # Wide enough for every in-range raw value; anything larger overflows.
        with localcontext() as ctx:
            ctx.prec = 40
            try:
                raw = int(value.quantize(_QUANTUM, rounding=ROUND_HALF_UP) * SCALE)
            except InvalidOperation:
                raise FixedDecimalError(f"Amount {text!r} exceeds fixed-point capacity") from None

        if not MIN_RAW <= raw <= MAX_RAW:
            raise FixedDecimalError(f"Amount {text!r} exceeds fixed-point capacity")
        return cls(raw)

    def add(self, other: "FixedDecimal") -> "FixedDecimal":
        return FixedDecimal(self.raw + other.raw)

    def subtract(self, other: "FixedDecimal") -> "FixedDecimal":
        return FixedDecimal(self.raw - other.raw)

    def checked_add(self, other: "FixedDecimal") -> Optional["FixedDecimal"]:
        """Like add, but returns None instead of raising on overflow."""
        raw = self.raw + other.raw
        if not MIN_RAW <= raw <= MAX_RAW:
            return None
        return FixedDecimal(raw)

    def checked_subtract(self, other: "FixedDecimal") -> Optional["FixedDecimal"]:
        """Like subtract, but returns None instead of raising on overflow."""
        raw = self.raw - other.raw
        if not MIN_RAW <= raw <= MAX_RAW:
            return None
        return FixedDecimal(raw)

    def __add__(self, other: "FixedDecimal") -> "FixedDecimal":
        if not isinstance(other, FixedDecimal):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "FixedDecimal") -> "FixedDecimal":
        if not isinstance(other, FixedDecimal):
            return NotImplemented
        return self.subtract(other)

    def is_negative(self) -> bool:
        return self.raw < 0

    def format(self) -> str:
        """Format with up to 4 decimal places, removing trailing zeros."""
        sign = "-" if self.raw < 0 else ""
        whole, fraction = divmod(abs(self.raw), SCALE)
        if fraction == 0:
            return f"{sign}{whole}"
        digits = f"{fraction:0{PRECISION}d}".rstrip("0")
        return f"{sign}{whole}.{digits}"

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"FixedDecimal('{self.format()}')"


ZERO = FixedDecimal(0)
