"""Balancer scaling helpers.

Pool math runs on 18-decimal upscaled balances. A scaling factor is itself
an 18-decimal fixed-point number: 10^(18 - decimals) times the token rate.
Upscaling rounds down; downscaling rounds in the pool's favour.
"""

from __future__ import annotations

from collections.abc import Sequence

from balancer_sdk.errors import InvalidScalingFactorError
from balancer_sdk.math.fixed_point import Bfp
from balancer_sdk.models.pool import PoolToken


def _check(scaling_factor: int) -> Bfp:
    if scaling_factor <= 0:
        raise InvalidScalingFactorError(f"Scaling factor must be positive, got {scaling_factor}")
    return Bfp(scaling_factor)


def scale_up(amount: int, scaling_factor: int) -> Bfp:
    """Scale a native-decimals amount to 18 decimals (mulDown).

    Raises:
        InvalidScalingFactorError: If scaling_factor <= 0
    """
    return Bfp(amount).mul_down(_check(scaling_factor))


def scale_down_down(bfp: Bfp, scaling_factor: int) -> int:
    """Scale an 18-decimal amount back to native decimals, rounding down.

    Raises:
        InvalidScalingFactorError: If scaling_factor <= 0
    """
    return bfp.div_down(_check(scaling_factor)).value


def scale_down_up(bfp: Bfp, scaling_factor: int) -> int:
    """Scale an 18-decimal amount back to native decimals, rounding up.

    Raises:
        InvalidScalingFactorError: If scaling_factor <= 0
    """
    return bfp.div_up(_check(scaling_factor)).value


def upscaled_balances(tokens: Sequence[PoolToken]) -> list[Bfp]:
    """Pool balances in 18-decimal, rate-adjusted units."""
    return [scale_up(t.balance, t.scaling_factor) for t in tokens]


def upscale_amounts(amounts: Sequence[int], tokens: Sequence[PoolToken]) -> list[Bfp]:
    return [scale_up(a, t.scaling_factor) for a, t in zip(amounts, tokens, strict=True)]
