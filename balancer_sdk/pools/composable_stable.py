"""Composable stable pool calculators.

The pool registers its own BPT as a Vault token. Math is stable math over
the remaining tokens; only the encoding differs: Vault arrays carry a BPT
slot while userData arrays and token indexes skip it.
"""

from __future__ import annotations

from collections.abc import Sequence

from balancer_sdk.config import DEFAULT_NETWORK_CONFIG, BalancerNetworkConfig
from balancer_sdk.encoding.user_data import ComposableStablePoolEncoder
from balancer_sdk.errors import InvalidPoolStateError, UnsupportedOperationError
from balancer_sdk.models.pool import PoolSnapshot
from balancer_sdk.models.transaction import ExitPoolAttributes, JoinPoolAttributes
from balancer_sdk.pools import builders, stable

liquidity = stable.liquidity
spot_price = stable.spot_price


def _check_bpt(pool: PoolSnapshot) -> None:
    if pool.bpt_index < 0:
        raise InvalidPoolStateError(f"Composable stable pool {pool.id} does not list its BPT")


def _check_proportional(pool: PoolSnapshot, token_index: int | None, operation: str) -> None:
    if token_index is None and pool.pool_type_version == 1:
        raise UnsupportedOperationError(
            f"Proportional {operation} is not supported by ComposableStable v1 pools"
        )


def bpt_out_given_exact_tokens_in(pool: PoolSnapshot, amounts_in: Sequence[int]) -> int:
    _check_bpt(pool)
    return stable.bpt_out_given_exact_tokens_in(pool, amounts_in)


def tokens_in_given_exact_bpt_out(
    pool: PoolSnapshot, bpt_out: int, token_index: int | None = None
) -> list[int]:
    """Token amounts needed to mint exactly bpt_out.

    Raises:
        UnsupportedOperationError: For a proportional join into a v1 pool
    """
    _check_bpt(pool)
    _check_proportional(pool, token_index, "join")
    return stable.tokens_in_given_exact_bpt_out(pool, bpt_out, token_index)


def tokens_out_given_exact_bpt_in(
    pool: PoolSnapshot, bpt_in: int, token_index: int | None = None
) -> list[int]:
    """Token amounts released by burning exactly bpt_in.

    Raises:
        UnsupportedOperationError: For a proportional exit from a v1 pool,
            which the v1 contract does not implement
    """
    _check_bpt(pool)
    _check_proportional(pool, token_index, "exit")
    return stable.tokens_out_given_exact_bpt_in(pool, bpt_in, token_index)


def bpt_in_given_exact_tokens_out(pool: PoolSnapshot, amounts_out: Sequence[int]) -> int:
    _check_bpt(pool)
    return stable.bpt_in_given_exact_tokens_out(pool, amounts_out)


FAMILY = builders.VaultPoolFamily(
    encoder=ComposableStablePoolEncoder,
    bpt_out_given_exact_tokens_in=bpt_out_given_exact_tokens_in,
    tokens_out_given_exact_bpt_in=tokens_out_given_exact_bpt_in,
    bpt_in_given_exact_tokens_out=bpt_in_given_exact_tokens_out,
    registers_bpt=True,
)


def build_join(
    joiner: str,
    pool: PoolSnapshot,
    tokens_in: Sequence[str],
    amounts_in: Sequence[int],
    slippage: int,
    *,
    network: BalancerNetworkConfig = DEFAULT_NETWORK_CONFIG,
) -> JoinPoolAttributes:
    return builders.build_join(
        FAMILY, joiner, pool, tokens_in, amounts_in, slippage, network=network
    )


def build_exit_exact_bpt_in(
    exiter: str,
    pool: PoolSnapshot,
    bpt_in: int,
    slippage: int,
    single_token_out: str | None = None,
    *,
    network: BalancerNetworkConfig = DEFAULT_NETWORK_CONFIG,
) -> ExitPoolAttributes:
    return builders.build_exit_exact_bpt_in(
        FAMILY, exiter, pool, bpt_in, slippage, single_token_out, network=network
    )


def build_exit_exact_tokens_out(
    exiter: str,
    pool: PoolSnapshot,
    tokens_out: Sequence[str],
    amounts_out: Sequence[int],
    slippage: int,
    *,
    network: BalancerNetworkConfig = DEFAULT_NETWORK_CONFIG,
) -> ExitPoolAttributes:
    return builders.build_exit_exact_tokens_out(
        FAMILY, exiter, pool, tokens_out, amounts_out, slippage, network=network
    )
