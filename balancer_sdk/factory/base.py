"""Shared pieces of the pool factory encoders."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from balancer_sdk.config import BalancerNetworkConfig
from balancer_sdk.constants import MAX_SWAP_FEE_PERCENTAGE, MIN_SWAP_FEE_PERCENTAGE
from balancer_sdk.errors import (
    InputLengthMismatchError,
    InvalidInputError,
    MaxSwapFeeError,
    MinSwapFeeError,
)
from balancer_sdk.math.fixed_point import Bfp

SwapFee = Decimal | str | float | int


@dataclass(frozen=True)
class InitJoinPoolParameters:
    """First join into a freshly created pool.

    Attributes:
        joiner: Sender and recipient of the join
        pool_id: Id of the created pool
        pool_address: Address of the created pool
        tokens_in: Tokens to seed, any order
        amounts_in: Seed amounts, parallel to tokens_in
    """

    joiner: str
    pool_id: str
    pool_address: str
    tokens_in: Sequence[str]
    amounts_in: Sequence[int]


def parse_swap_fee(swap_fee: SwapFee) -> int:
    """Swap fee fraction ("0.01" is 1%) as 18-decimal fixed point.

    Raises:
        InvalidInputError: If the fee is not a finite number
        MinSwapFeeError: If the fee is negative
    """
    try:
        fee = Decimal(str(swap_fee))
    except InvalidOperation as err:
        raise InvalidInputError(f"Swap fee is not a number: '{swap_fee}'") from err
    if not fee.is_finite():
        raise InvalidInputError(f"Swap fee must be finite, got {swap_fee}")
    if fee < 0:
        raise MinSwapFeeError(f"Swap fee must be greater than zero, got {swap_fee}")
    return Bfp.from_decimal(fee).value


def check_lengths(tokens: Sequence[Any], **parallel: Sequence[Any]) -> None:
    """Every parallel list must match the token list's length.

    Raises:
        InputLengthMismatchError: Naming the first list that differs
    """
    for name, values in parallel.items():
        if len(values) != len(tokens):
            raise InputLengthMismatchError(
                f"{name} has {len(values)} entries, expected {len(tokens)}"
            )


def check_swap_fee(swap_fee: int) -> None:
    """Raises MinSwapFeeError for zero or too small fees, MaxSwapFeeError above 10%."""
    if swap_fee == 0:
        raise MinSwapFeeError("Swap fee must be greater than zero")
    if swap_fee < MIN_SWAP_FEE_PERCENTAGE:
        raise MinSwapFeeError(
            f"Swap fee {swap_fee} below minimum {MIN_SWAP_FEE_PERCENTAGE}"
        )
    if swap_fee > MAX_SWAP_FEE_PERCENTAGE:
        raise MaxSwapFeeError(
            f"Swap fee {swap_fee} above maximum {MAX_SWAP_FEE_PERCENTAGE}"
        )


class PoolFactory:
    """Base for factory encoders bound to one network."""

    def __init__(self, network_config: BalancerNetworkConfig) -> None:
        self.network_config = network_config
        self.wrapped_native_asset = network_config.wrapped_native_asset
