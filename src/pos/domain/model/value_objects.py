"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_HALF_UP,
    Context,
    Decimal,
    InvalidOperation,
    getcontext,
    localcontext,
)

from pos.domain.exceptions import ValidationError

_CENTS = Decimal("0.01")

DEFAULT_CURRENCY = "SEK"


def _to_decimal(value: str | float | int | Decimal) -> Decimal:
    # Floats go through str() so 10.005 stays 10.005 rather than its binary
    # approximation 10.00499999...
    if isinstance(value, bool):
        raise ValidationError(f"Invalid numeric value: {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid numeric value: {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"Numeric value must be finite, got {value!r}")
    return result


def _exact_context(*values: Decimal) -> Context:
    # The default 28-digit context would round large sums or make quantize()
    # fail; this one has room for every digit of the operands and the result.
    width = sum(
        abs(v.adjusted()) + len(v.as_tuple().digits) + abs(v.as_tuple().exponent)
        for v in values
    )
    ctx = getcontext().copy()
    ctx.prec = max(ctx.prec, width + 3)
    ctx.Emax = MAX_EMAX
    ctx.Emin = MIN_EMIN
    return ctx


@dataclass(frozen=True)
class Money:
    """Monetary amount, always held with exactly two fractional digits.

    Every instance is normalized with round-half-up on construction, so
    the result of any arithmetic is normalized independently. Negative
    amounts are legal: a change amount is negative when the customer
    underpays, and a large discount can push a total below zero.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        with localcontext(_exact_context(self.amount)):
            normalized = self.amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
        object.__setattr__(self, "amount", normalized)

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        with localcontext(_exact_context(self.amount, other.amount)):
            return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        with localcontext(_exact_context(self.amount, other.amount)):
            return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor: int | float | Decimal) -> Money:
        """Scale by a quantity or a rate (VAT, discount)."""
        rate = _to_decimal(factor)
        with localcontext(_exact_context(self.amount, rate)):
            return Money(self.amount * rate, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    @property
    def is_positive(self) -> bool:
        """Strictly greater than zero."""
        return self.amount > 0

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    def format_receipt(self) -> str:
        """Render as printed on receipts: ``47:04`` (colon, no currency)."""
        return f"{self.amount:.2f}".replace(".", ":")

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        return Money(_to_decimal(amount))

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0"))


def to_rate(value: str | float | int | Decimal) -> Decimal:
    """Coerce a VAT or discount rate (a fraction such as 0.25) to Decimal."""
    rate = _to_decimal(value)
    if rate < 0:
        raise ValidationError(f"Rate cannot be negative, got {value!r}")
    return rate


@dataclass(frozen=True)
class Customer:
    """The customer a discount is granted to."""

    customer_id: str
    name: str | None = None
