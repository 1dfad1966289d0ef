"""Slippage bounds for join/exit limits.

Slippage is an 18-decimal fixed-point fraction in [0, 1). Minimums round
down and maximums round up, so a bound never admits more than the caller
tolerated.
"""

from __future__ import annotations

from balancer_sdk.errors import InvalidSlippageError
from balancer_sdk.math.fixed_point import ONE_18

# 1 basis point in 18-decimal fixed point
BPS = 10**14


def _validate(amount: int, slippage: int) -> None:
    if not 0 <= slippage < ONE_18:
        raise InvalidSlippageError(f"Slippage must be in [0, 1e18), got {slippage}")
    if amount < 0:
        raise InvalidSlippageError(f"Amount must be non-negative, got {amount}")


def subtract_slippage(amount: int, slippage: int) -> int:
    """Minimum acceptable amount: amount * (1 - slippage), rounded down."""
    _validate(amount, slippage)
    return (amount * (ONE_18 - slippage)) // ONE_18


def add_slippage(amount: int, slippage: int) -> int:
    """Maximum acceptable amount: amount * (1 + slippage), rounded up."""
    _validate(amount, slippage)
    product = amount * (ONE_18 + slippage)
    return -(-product // ONE_18)


def bps_to_slippage(bps: int | str) -> int:
    """Convert basis points ("50" = 0.5%) to an 18-decimal fraction."""
    return int(bps) * BPS
