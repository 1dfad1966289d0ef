"""Tests for the 18-decimal fixed-point type.

Rounding direction per operation matters: quotes computed with the wrong
direction drift from contract results by a unit.
"""

from decimal import Decimal

import pytest

from balancer_sdk.math.fixed_point import (
    ONE_18,
    Bfp,
    InvalidExponent,
    LogExpMathError,
    exp,
    pow_raw,
)
from balancer_sdk.safe_int import DivisionByZero, Uint256Overflow, Underflow


class TestConstruction:
    def test_from_decimal_truncates(self) -> None:
        """Digits beyond 18 decimals are dropped."""
        assert Bfp.from_decimal("1.0000000000000000019").value == ONE_18 + 1

    def test_from_decimal_rejects_negative(self) -> None:
        with pytest.raises(ValueError):
            Bfp.from_decimal("-1")

    def test_from_int(self) -> None:
        assert Bfp.from_int(3).value == 3 * ONE_18

    def test_to_decimal(self) -> None:
        assert Bfp(15 * 10**17).to_decimal() == Decimal("1.5")


class TestRounding:
    """Down variants truncate, Up variants round away from zero."""

    def test_mul_exact(self) -> None:
        a = Bfp(15 * 10**17)
        assert a.mul_down(a).value == 225 * 10**16
        assert a.mul_up(a).value == 225 * 10**16

    def test_mul_down_truncates(self) -> None:
        assert Bfp(1).mul_down(Bfp(1)).value == 0

    def test_mul_up_rounds_up(self) -> None:
        assert Bfp(1).mul_up(Bfp(1)).value == 1

    def test_mul_up_of_zero(self) -> None:
        assert Bfp(0).mul_up(Bfp(ONE_18)).value == 0

    def test_div_down_truncates(self) -> None:
        assert Bfp(1).div_down(Bfp(3 * ONE_18)).value == 0

    def test_div_up_rounds_up(self) -> None:
        assert Bfp(1).div_up(Bfp(3 * ONE_18)).value == 1

    def test_div_up_of_zero(self) -> None:
        assert Bfp(0).div_up(Bfp(ONE_18)).value == 0

    def test_div_thirds(self) -> None:
        one, three = Bfp(ONE_18), Bfp(3 * ONE_18)
        assert one.div_down(three).value == 333333333333333333
        assert one.div_up(three).value == 333333333333333334


class TestErrors:
    def test_sub_underflow(self) -> None:
        with pytest.raises(Underflow):
            Bfp(1).sub(Bfp(2))

    def test_add_overflow(self) -> None:
        with pytest.raises(Uint256Overflow):
            Bfp(2**256 - 1).add(Bfp(1))

    def test_mul_overflow(self) -> None:
        with pytest.raises(Uint256Overflow):
            Bfp(2**200).mul_down(Bfp(2**60))

    def test_div_overflow(self) -> None:
        """a * ONE must fit in 256 bits."""
        with pytest.raises(Uint256Overflow):
            Bfp(2**250).div_down(Bfp(ONE_18))

    @pytest.mark.parametrize("method", ["div_down", "div_up"])
    def test_division_by_zero(self, method: str) -> None:
        with pytest.raises(DivisionByZero):
            getattr(Bfp(ONE_18), method)(Bfp(0))

    def test_division_by_zero_is_arithmetic_error(self) -> None:
        with pytest.raises(ArithmeticError):
            Bfp(ONE_18).div_down(Bfp(0))


class TestComplement:
    def test_fraction(self) -> None:
        assert Bfp(3 * 10**17).complement().value == 7 * 10**17

    def test_clamped_above_one(self) -> None:
        """1 - x never goes negative."""
        assert Bfp(15 * 10**17).complement().value == 0


class TestPow:
    """Tests for LogExpMath-backed powers."""

    def test_pow_bounds_the_exact_result(self) -> None:
        """pow_down <= x^y <= pow_up."""
        base, exponent = Bfp(2 * ONE_18), Bfp(ONE_18 // 2)
        exact = int(Decimal(2).sqrt() * ONE_18)
        assert base.pow_down(exponent).value <= exact <= base.pow_up(exponent).value

    def test_pow_error_is_tiny(self) -> None:
        base, exponent = Bfp(2 * ONE_18), Bfp(ONE_18 // 2)
        spread = base.pow_up(exponent).value - base.pow_down(exponent).value
        assert spread < 10**6

    def test_zero_exponent(self) -> None:
        assert pow_raw(5 * ONE_18, 0) == ONE_18

    def test_zero_base(self) -> None:
        assert pow_raw(0, ONE_18) == 0

    def test_v3_shortcuts_are_exact(self) -> None:
        """Exponents 1, 2 and 4 skip ln/exp in newer pool versions."""
        x = Bfp(15 * 10**17)
        assert x.pow_down_v3(Bfp(ONE_18)) == x
        assert x.pow_down_v3(Bfp(2 * ONE_18)).value == 225 * 10**16
        assert x.pow_up_v3(Bfp(4 * ONE_18)).value == 50625 * 10**14

    def test_v3_falls_back_for_other_exponents(self) -> None:
        x, y = Bfp(15 * 10**17), Bfp(3 * ONE_18)
        assert x.pow_down_v3(y) == x.pow_down(y)

    def test_legacy_pow_differs_from_shortcut(self) -> None:
        x, y = Bfp(15 * 10**17), Bfp(2 * ONE_18)
        assert x.pow_up(y).value > x.pow_up_v3(y).value

    def test_exp_of_zero(self) -> None:
        assert exp(0) == ONE_18

    def test_exp_out_of_range(self) -> None:
        with pytest.raises(InvalidExponent):
            exp(131 * ONE_18)

    def test_log_exp_errors_are_arithmetic(self) -> None:
        assert issubclass(LogExpMathError, ArithmeticError)
