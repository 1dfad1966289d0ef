"""Balancer fixed point (Bfp) arithmetic.

18-decimal fixed-point math reproducing Balancer V2's `FixedPoint.sol` and
`LogExpMath.sol` bit for bit, including the rounding direction of every
operation and the checked uint256 semantics (overflow and underflow revert).

References:
https://github.com/balancer-labs/balancer-v2-monorepo/blob/master/pkg/solidity-utils/contracts/math/FixedPoint.sol
https://github.com/balancer-labs/balancer-v2-monorepo/blob/master/pkg/solidity-utils/contracts/math/LogExpMath.sol
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal
from typing import ClassVar

from balancer_sdk.safe_int import (
    UINT256_MAX,
    DivisionByZero,
    Underflow,
    Uint256Overflow,
    check_uint256,
)

__all__ = [
    "Bfp",
    "LogExpMathError",
    "XOutOfBounds",
    "YOutOfBounds",
    "ProductOutOfBounds",
    "InvalidExponent",
    "pow_raw",
    "exp",
    "ONE_18",
    "ONE_20",
    "ONE_36",
    "AMP_PRECISION",
]

ONE_18 = 10**18
ONE_20 = 10**20
ONE_36 = 10**36

MAX_NATURAL_EXPONENT = 130 * ONE_18
MIN_NATURAL_EXPONENT = -41 * ONE_18

# ln is computed with 36 decimals of precision inside (0.9, 1.1)
LN_36_LOWER_BOUND = ONE_18 - 10**17
LN_36_UPPER_BOUND = ONE_18 + 10**17

MILD_EXPONENT_BOUND = (1 << 254) // ONE_20

# Stable pool amplification parameters are stored multiplied by this factor
AMP_PRECISION = 1000

# (x, e^x) pairs used for digit extraction, largest first.
# The first two are stored with 18 decimals, the rest with 20.
_TERMS_18 = (
    (128 * ONE_18, 38877084059945950922200000000000000000000000000000000000),
    (64 * ONE_18, 6235149080811616882910000000),
)
_TERMS_20 = (
    (32 * ONE_20, 7896296018268069516100000000000000),
    (16 * ONE_20, 888611052050787263676000000),
    (8 * ONE_20, 298095798704172827474000),
    (4 * ONE_20, 5459815003314423907810),
    (2 * ONE_20, 738905609893065022723),
    (1 * ONE_20, 271828182845904523536),
    (ONE_20 // 2, 164872127070012814685),
    (ONE_20 // 4, 128402541668774148407),
    (ONE_20 // 8, 113314845306682631683),
    (ONE_20 // 16, 106449445891785942956),
)


class LogExpMathError(ArithmeticError):
    """Base error for LogExpMath domain violations."""

    pass


class XOutOfBounds(LogExpMathError):
    """BAL#006: base does not fit in a signed 256-bit integer."""

    pass


class YOutOfBounds(LogExpMathError):
    """BAL#007: exponent exceeds MILD_EXPONENT_BOUND."""

    pass


class ProductOutOfBounds(LogExpMathError):
    """BAL#008: y * ln(x) is outside the range accepted by exp."""

    pass


class InvalidExponent(LogExpMathError):
    """BAL#009: natural exponent outside [-41, 130]."""

    pass


def _div_trunc(a: int, b: int) -> int:
    """Signed division truncating toward zero, as Solidity's int256 `/` does.

    Python's // floors toward negative infinity, which differs for operands
    of opposite sign.
    """
    if b == 0:
        raise DivisionByZero("Division by zero in LogExpMath")
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def _ln(a: int) -> int:
    """Natural logarithm of a positive 18-decimal value."""
    if a < ONE_18:
        # ln(a) = -ln(1/a); all arithmetic below stays positive
        return -_ln((ONE_18 * ONE_18) // a)

    total = 0
    for x_n, a_n in _TERMS_18:
        if a >= a_n * ONE_18:
            a //= a_n
            total += x_n

    total *= 100
    a *= 100

    for x_n, a_n in _TERMS_20:
        if a >= a_n:
            a = (a * ONE_20) // a_n
            total += x_n

    # ln(a) = 2 * arctanh(z), z = (a - 1) / (a + 1); six odd terms
    z = ((a - ONE_20) * ONE_20) // (a + ONE_20)
    z_squared = (z * z) // ONE_20
    num = z
    series = num
    for i in range(3, 12, 2):
        num = (num * z_squared) // ONE_20
        series += num // i

    return (total + series * 2) // 100


def _ln_36(x: int) -> int:
    """Natural logarithm with 36 decimals, for x close to one."""
    x *= ONE_18

    z = _div_trunc((x - ONE_36) * ONE_36, x + ONE_36)
    z_squared = _div_trunc(z * z, ONE_36)
    num = z
    series = num
    for i in range(3, 16, 2):
        num = _div_trunc(num * z_squared, ONE_36)
        series += _div_trunc(num, i)

    return series * 2


def exp(x: int) -> int:
    """Compute e^x for an 18-decimal exponent.

    Raises:
        InvalidExponent: If x is outside [MIN_NATURAL_EXPONENT, MAX_NATURAL_EXPONENT]
    """
    if not (MIN_NATURAL_EXPONENT <= x <= MAX_NATURAL_EXPONENT):
        raise InvalidExponent(f"Exponent {x} outside valid range")

    if x < 0:
        return (ONE_18 * ONE_18) // exp(-x)

    first_an = 1
    for x_n, a_n in _TERMS_18:
        if x >= x_n:
            x -= x_n
            first_an = a_n
            break

    x *= 100

    # Only 2^5 .. 2^-2 are extracted; the Taylor series handles the rest
    product = ONE_20
    for x_n, a_n in _TERMS_20[:8]:
        if x >= x_n:
            x -= x_n
            product = (product * a_n) // ONE_20

    series = ONE_20 + x
    term = x
    for i in range(2, 13):
        term = ((term * x) // ONE_20) // i
        series += term

    return (((product * series) // ONE_20) * first_an) // 100


def pow_raw(x: int, y: int) -> int:
    """Compute x^y for non-negative 18-decimal operands (LogExpMath.pow).

    Raises:
        XOutOfBounds: If x does not fit in int256
        YOutOfBounds: If y exceeds MILD_EXPONENT_BOUND
        ProductOutOfBounds: If y * ln(x) is outside the exp domain
    """
    if y == 0:
        return ONE_18
    if x == 0:
        return 0

    if x >= (1 << 255):
        raise XOutOfBounds(f"Base {x} too large")
    if y >= MILD_EXPONENT_BOUND:
        raise YOutOfBounds(f"Exponent {y} exceeds bound")

    if LN_36_LOWER_BOUND < x < LN_36_UPPER_BOUND:
        ln_36_x = _ln_36(x)
        # (ln_36_x / ONE_18) * y + ((ln_36_x % ONE_18) * y) / ONE_18, signed
        quotient = _div_trunc(ln_36_x, ONE_18)
        remainder = ln_36_x - quotient * ONE_18
        logx_times_y = quotient * y + _div_trunc(remainder * y, ONE_18)
    else:
        logx_times_y = _ln(x) * y
    logx_times_y = _div_trunc(logx_times_y, ONE_18)

    if not (MIN_NATURAL_EXPONENT <= logx_times_y <= MAX_NATURAL_EXPONENT):
        raise ProductOutOfBounds(f"Product {logx_times_y} outside valid range")

    return exp(logx_times_y)


class Bfp:
    """18-decimal fixed-point number stored as an unsigned int.

    Example: 1.5 is stored as 1_500_000_000_000_000_000.
    Every operation returns a new Bfp; instances are never mutated.
    """

    ONE: ClassVar[int] = ONE_18
    TWO: ClassVar[int] = 2 * ONE_18
    FOUR: ClassVar[int] = 4 * ONE_18
    MAX_POW_RELATIVE_ERROR: ClassVar[int] = 10000  # 10^-14

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: int) -> None:
        self.value = value

    @classmethod
    def from_wei(cls, wei: int) -> Bfp:
        """Create from a raw value already scaled to 18 decimals."""
        return cls(wei)

    @classmethod
    def from_decimal(cls, d: Decimal | str) -> Bfp:
        """Create from a decimal, truncating beyond 18 decimals."""
        d = Decimal(d)
        if d < 0:
            raise ValueError(f"Bfp.from_decimal requires non-negative input, got {d}")
        scaled = (d * cls.ONE).quantize(Decimal("1"), rounding=ROUND_DOWN)
        return cls(check_uint256(int(scaled)))

    @classmethod
    def from_int(cls, i: int) -> Bfp:
        """Create from a whole number (scaled by 10^18)."""
        return cls(check_uint256(i * cls.ONE))

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        return Decimal(self.value) / Decimal(self.ONE)

    # --- FixedPoint.sol ---

    def add(self, other: Bfp) -> Bfp:
        """Checked addition.

        Raises:
            Uint256Overflow: If the sum exceeds uint256
        """
        return Bfp(check_uint256(self.value + other.value))

    def sub(self, other: Bfp) -> Bfp:
        """Checked subtraction.

        Raises:
            Underflow: If other > self
        """
        result = self.value - other.value
        if result < 0:
            raise Underflow(f"Bfp underflow: {self.value} - {other.value}")
        return Bfp(result)

    def mul_down(self, other: Bfp) -> Bfp:
        """(a * b) / ONE rounded down."""
        product = self.value * other.value
        if product > UINT256_MAX:
            raise Uint256Overflow(f"Bfp mul overflow: {self.value} * {other.value}")
        return Bfp(product // self.ONE)

    def mul_up(self, other: Bfp) -> Bfp:
        """(a * b) / ONE rounded up."""
        product = self.value * other.value
        if product > UINT256_MAX:
            raise Uint256Overflow(f"Bfp mul overflow: {self.value} * {other.value}")
        if product == 0:
            return Bfp(0)
        return Bfp((product - 1) // self.ONE + 1)

    def div_down(self, other: Bfp) -> Bfp:
        """(a * ONE) / b rounded down."""
        if other.value == 0:
            raise DivisionByZero("Bfp division by zero")
        inflated = self.value * self.ONE
        if inflated > UINT256_MAX:
            raise Uint256Overflow(f"Bfp div overflow: {self.value} * ONE")
        return Bfp(inflated // other.value)

    def div_up(self, other: Bfp) -> Bfp:
        """(a * ONE) / b rounded up."""
        if other.value == 0:
            raise DivisionByZero("Bfp division by zero")
        inflated = self.value * self.ONE
        if inflated > UINT256_MAX:
            raise Uint256Overflow(f"Bfp div overflow: {self.value} * ONE")
        if inflated == 0:
            return Bfp(0)
        return Bfp((inflated - 1) // other.value + 1)

    def complement(self) -> Bfp:
        """Return 1 - self, clamped to 0 when self > 1."""
        return Bfp(self.ONE - self.value if self.value < self.ONE else 0)

    def _max_pow_error(self, raw: int) -> int:
        return Bfp(raw).mul_up(Bfp(self.MAX_POW_RELATIVE_ERROR)).value + 1

    def pow_down(self, exponent: Bfp) -> Bfp:
        """self^exponent rounded down (legacy FixedPoint, no shortcuts)."""
        raw = pow_raw(self.value, exponent.value)
        max_error = self._max_pow_error(raw)
        if raw < max_error:
            return Bfp(0)
        return Bfp(raw - max_error)

    def pow_up(self, exponent: Bfp) -> Bfp:
        """self^exponent rounded up (legacy FixedPoint, no shortcuts)."""
        raw = pow_raw(self.value, exponent.value)
        return Bfp(check_uint256(raw + self._max_pow_error(raw)))

    def pow_down_v3(self, exponent: Bfp) -> Bfp:
        """pow_down with the exact shortcuts for exponents 1, 2 and 4.

        Newer pool versions skip the ln/exp round trip for these exponents,
        which changes the result in the last units.
        """
        if exponent.value == self.ONE:
            return self
        if exponent.value == self.TWO:
            return self.mul_down(self)
        if exponent.value == self.FOUR:
            square = self.mul_down(self)
            return square.mul_down(square)
        return self.pow_down(exponent)

    def pow_up_v3(self, exponent: Bfp) -> Bfp:
        """pow_up with the exact shortcuts for exponents 1, 2 and 4."""
        if exponent.value == self.ONE:
            return self
        if exponent.value == self.TWO:
            return self.mul_up(self)
        if exponent.value == self.FOUR:
            square = self.mul_up(self)
            return square.mul_up(square)
        return self.pow_up(exponent)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"Bfp({self.value})"

    def __str__(self) -> str:
        return str(self.to_decimal())


ZERO = Bfp(0)
ONE = Bfp(ONE_18)
