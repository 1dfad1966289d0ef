"""Helpers shared by the per-family calculators."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal

from balancer_sdk.errors import InvalidInputError, LengthMismatchError, TokenNotFoundError
from balancer_sdk.math.fixed_point import ONE_18, Bfp
from balancer_sdk.models.pool import PoolSnapshot, PoolToken
from balancer_sdk.models.types import normalize_address
from balancer_sdk.pools.scaling import scale_down_down, scale_down_up


def check_length(amounts: Sequence[int], tokens: Sequence[PoolToken], what: str) -> None:
    if len(amounts) != len(tokens):
        raise LengthMismatchError(
            f"{what} has {len(amounts)} entries, pool has {len(tokens)} tokens"
        )
    for amount in amounts:
        if amount < 0:
            raise InvalidInputError(f"{what} must be non-negative, got {amount}")


def check_token_index(token_index: int, tokens: Sequence[PoolToken]) -> None:
    if not 0 <= token_index < len(tokens):
        raise TokenNotFoundError(
            f"Token index {token_index} out of range for {len(tokens)} tokens"
        )


def position(tokens: Sequence[PoolToken], token: str) -> int:
    """Index of token within tokens."""
    target = normalize_address(token)
    for i, pool_token in enumerate(tokens):
        if normalize_address(pool_token.address) == target:
            return i
    raise TokenNotFoundError(f"Token {token} not found")


def normalize_prices(token_prices: Mapping[str, Decimal | str | float]) -> dict[str, Decimal]:
    """Lowercase keys and Decimal values."""
    return {normalize_address(k): Decimal(str(v)) for k, v in token_prices.items()}


def rate(token: PoolToken) -> Decimal:
    return Decimal(token.price_rate) / Decimal(ONE_18)


def scale_down_all_down(values: Sequence[Bfp], tokens: Sequence[PoolToken]) -> list[int]:
    return [scale_down_down(v, t.scaling_factor) for v, t in zip(values, tokens, strict=True)]


def scale_down_all_up(values: Sequence[Bfp], tokens: Sequence[PoolToken]) -> list[int]:
    return [scale_down_up(v, t.scaling_factor) for v, t in zip(values, tokens, strict=True)]


def single(index: int, value: int, size: int) -> list[int]:
    """Vector of zeros with value at index."""
    amounts = [0] * size
    amounts[index] = value
    return amounts


def is_pool_token(pool: PoolSnapshot, token: str) -> bool:
    return normalize_address(token) == normalize_address(pool.address)
