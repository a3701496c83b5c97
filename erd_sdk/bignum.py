"""
erd_sdk.bignum
==============

Arbitrary-precision decimal numbers tagged with a *scale*.

Every monetary amount in the SDK is a :class:`ScaledDecimal`. At any given time
an instance operates at one of two scales, relative to its ``decimals``
configuration (18 by default):

- ``Scale.RAW``: the value is already denominated in the smallest indivisible
  unit and normally has no decimal places.
- ``Scale.DISPLAY``: the value is in human units and is implicitly multiplied
  by ``10**decimals`` compared to RAW.

With ``decimals=18`` the following are equal::

    ScaledDecimal("1000000000000000000")          # RAW
    ScaledDecimal("1", scale=Scale.DISPLAY)       # DISPLAY

Binary operations first convert the right-hand operand to the receiver's scale
(when it is a ScaledDecimal; plain numbers are taken as already being at the
receiver's scale), and the result always carries the receiver's scale and
decimals. Instances are immutable.

Literals, addition, subtraction, multiplication and rescaling are exact.
Only division rounds, half-up at 100 significant digits. No operation depends
on the caller's thread-local decimal context.
"""

from __future__ import annotations

import decimal
import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Callable, Union

from .errors import InvalidNumberFormat

__all__ = ["Scale", "ScaledDecimal", "NumberLike", "DEFAULT_DECIMALS", "PRECISION"]

DEFAULT_DECIMALS = 18
PRECISION = 100

_CTX = decimal.Context(
    prec=PRECISION,
    rounding=ROUND_HALF_UP,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
    traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
)


def _exact(*values: Decimal) -> decimal.Context:
    """Context wide enough that sums, differences and products of `values` are not rounded."""
    top = max(v.adjusted() for v in values)
    bottom = min(v.as_tuple().exponent for v in values)
    digits = sum(len(v.as_tuple().digits) for v in values)
    return decimal.Context(
        prec=max(PRECISION, top - bottom + 2, digits + 1),
        rounding=ROUND_HALF_UP,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
        traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
    )


def _sum(a: Decimal, b: Decimal) -> Decimal:
    return _exact(a, b).add(a, b)


def _shift(d: Decimal, power: int) -> Decimal:
    return d.scaleb(power, context=_exact(d))


class Scale(str, Enum):
    RAW = "raw"
    DISPLAY = "display"


NumberLike = Union["ScaledDecimal", Decimal, int, float, str]


def _parse_str(s: str) -> Decimal:
    text = s.strip().replace("_", "")
    neg = text.startswith("-")
    body = text[1:] if neg or text.startswith("+") else text
    prefix = body[:2].lower()
    if prefix in ("0x", "0b", "0o"):
        base = {"0x": 16, "0b": 2, "0o": 8}[prefix]
        try:
            n = int(body[2:], base)
        except ValueError:
            raise InvalidNumberFormat(s, f"not a base-{base} integer") from None
        return Decimal(-n if neg else n)
    try:
        return Decimal(text, context=_CTX)
    except decimal.InvalidOperation:
        raise InvalidNumberFormat(s) from None


def _to_decimal(value: Any) -> Decimal:
    """Coerce a plain input (no scale metadata) to a finite Decimal."""
    if isinstance(value, ScaledDecimal):
        return value._value
    if isinstance(value, bool) or value is None:
        raise InvalidNumberFormat(value, "not a number")
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, int):
        d = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidNumberFormat(value, "not finite")
        d = Decimal(repr(value))
    elif isinstance(value, str):
        d = _parse_str(value)
    else:
        raise InvalidNumberFormat(value, f"unsupported type {type(value).__name__}")
    if not d.is_finite():
        raise InvalidNumberFormat(value, "not finite")
    return d


def _plain(d: Decimal) -> str:
    """Base-10 rendering without exponent and without trailing fractional zeros."""
    if d.is_zero():
        return "0"
    n = d.normalize(_exact(d))
    return format(n, "f")


class ScaledDecimal:
    """Immutable arbitrary-precision decimal with a RAW/DISPLAY scale tag."""

    __slots__ = ("_value", "_scale", "_decimals")

    def __init__(
        self,
        value: NumberLike = 0,
        scale: Scale = Scale.RAW,
        decimals: int = DEFAULT_DECIMALS,
    ) -> None:
        if isinstance(value, ScaledDecimal):
            # Copy: the source's scale and decimals win.
            self._value = value._value
            self._scale = value._scale
            self._decimals = value._decimals
            return
        if int(decimals) < 0:
            raise ValueError("decimals must be non-negative")
        self._value = _to_decimal(value)
        self._scale = Scale(scale)
        self._decimals = int(decimals)

    # ---------------------------------------------------------------- props

    @property
    def value(self) -> Decimal:
        return self._value

    @property
    def scale(self) -> Scale:
        return self._scale

    @property
    def decimals(self) -> int:
        return self._decimals

    def _new(self, value: Decimal, scale: Scale | None = None) -> "ScaledDecimal":
        out = object.__new__(ScaledDecimal)
        out._value = value
        out._scale = self._scale if scale is None else scale
        out._decimals = self._decimals
        return out

    def _operand(self, other: Any) -> Decimal:
        if isinstance(other, ScaledDecimal):
            return other.to_scale(self._scale)._value
        return _to_decimal(other)

    # ----------------------------------------------------------- arithmetic

    def add(self, other: NumberLike) -> "ScaledDecimal":
        return self._new(_sum(self._value, self._operand(other)))

    def sub(self, other: NumberLike) -> "ScaledDecimal":
        return self._new(_sum(self._value, self._operand(other).copy_negate()))

    def mul(self, other: NumberLike) -> "ScaledDecimal":
        rhs = self._operand(other)
        return self._new(_exact(self._value, rhs).multiply(self._value, rhs))

    def div(self, other: NumberLike) -> "ScaledDecimal":
        """Divide, rounding half-up at 100 significant digits. Division by zero raises ZeroDivisionError."""
        return self._new(_CTX.divide(self._value, self._operand(other)))

    def scale_down(self, power: int) -> "ScaledDecimal":
        """Multiply by ``10**power`` (the scale tag is unchanged)."""
        return self._new(_shift(self._value, int(power)))

    def scale_up(self, power: int) -> "ScaledDecimal":
        """Divide by ``10**power`` (the scale tag is unchanged)."""
        return self._new(_shift(self._value, -int(power)))

    def round(self) -> "ScaledDecimal":
        """Round half-up to the nearest whole number."""
        return self._new(self._value.to_integral_value(rounding=ROUND_HALF_UP, context=_CTX))

    # ---------------------------------------------------------- comparisons

    def _cmp(self, other: Any) -> int:
        return int(_CTX.compare(self._value, self._operand(other)))

    def gt(self, other: NumberLike) -> bool:
        return self._cmp(other) > 0

    def gte(self, other: NumberLike) -> bool:
        return self._cmp(other) >= 0

    def lt(self, other: NumberLike) -> bool:
        return self._cmp(other) < 0

    def lte(self, other: NumberLike) -> bool:
        return self._cmp(other) <= 0

    def eq(self, other: NumberLike) -> bool:
        return self._cmp(other) == 0

    # ------------------------------------------------------------- scaling

    def to_raw_scale(self) -> "ScaledDecimal":
        if self._scale is Scale.RAW:
            return self
        return self._new(_shift(self._value, self._decimals), Scale.RAW)

    def to_display_scale(self) -> "ScaledDecimal":
        if self._scale is Scale.DISPLAY:
            return self
        return self._new(_shift(self._value, -self._decimals), Scale.DISPLAY)

    def to_scale(self, scale: Scale) -> "ScaledDecimal":
        scale = Scale(scale)
        if scale is Scale.RAW:
            return self.to_raw_scale()
        return self.to_display_scale()

    # ------------------------------------------------------------ rendering

    def is_integral(self) -> bool:
        return self._value == self._value.to_integral_value(context=_CTX)

    def to_string(self, base: int = 10) -> str:
        """
        Render the magnitude in base 10, 16 or 2.

        Bases 16 and 2 have no ``0x``/``0b`` marker and require an integral
        value; a negative value gets a leading ``-``.
        """
        if base == 10:
            return _plain(self._value)
        if base not in (2, 16):
            raise ValueError(f"unsupported base: {base}")
        if not self.is_integral():
            raise InvalidNumberFormat(self._value, f"cannot render a fractional value in base {base}")
        n = int(self._value)
        sign = "-" if n < 0 else ""
        return sign + format(abs(n), "x" if base == 16 else "b")

    def to_fixed(self, places: int) -> str:
        """Base-10 string with exactly `places` decimal places (half-up)."""
        if places < 0:
            raise ValueError("places must be non-negative")
        step = Decimal(1).scaleb(-places)
        q = self._value.quantize(step, rounding=ROUND_HALF_UP, context=_exact(self._value, step))
        return format(q, "f")

    def to_number(self) -> float:
        return float(self._value)

    # ---------------------------------------------------------- dunder glue

    def __str__(self) -> str:
        return self.to_string(10)

    def __repr__(self) -> str:
        return f"ScaledDecimal({self.to_string(10)!r}, scale={self._scale.name}, decimals={self._decimals})"

    def __int__(self) -> int:
        return int(self._value)

    def __float__(self) -> float:
        return float(self._value)

    def __bool__(self) -> bool:
        return not self._value.is_zero()

    def __hash__(self) -> int:
        return hash(self.to_raw_scale()._value)

    def _binary(fn: Callable[["ScaledDecimal", Any], Any]):  # type: ignore[misc]
        def op(self: "ScaledDecimal", other: Any) -> Any:
            try:
                return fn(self, other)
            except InvalidNumberFormat:
                return NotImplemented

        op.__name__ = fn.__name__
        return op

    __add__ = _binary(add)
    __radd__ = _binary(add)
    __sub__ = _binary(sub)
    __mul__ = _binary(mul)
    __rmul__ = _binary(mul)
    __truediv__ = _binary(div)
    __gt__ = _binary(gt)
    __ge__ = _binary(gte)
    __lt__ = _binary(lt)
    __le__ = _binary(lte)
    __eq__ = _binary(eq)

    def __rsub__(self, other: Any) -> "ScaledDecimal":
        return self._new(_sum(_to_decimal(other), self._value.copy_negate()))

    def __rtruediv__(self, other: Any) -> "ScaledDecimal":
        return self._new(_CTX.divide(_to_decimal(other), self._value))

    del _binary
