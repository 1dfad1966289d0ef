"""Weighted pool calculators (Weighted, Investment, LiquidityBootstrapping)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal, localcontext

import structlog

from balancer_sdk.config import DEFAULT_NETWORK_CONFIG, BalancerNetworkConfig
from balancer_sdk.encoding.user_data import WeightedPoolEncoder
from balancer_sdk.errors import InvalidPoolStateError
from balancer_sdk.math.fixed_point import ONE_18, Bfp
from balancer_sdk.models.pool import PoolSnapshot
from balancer_sdk.models.transaction import ExitPoolAttributes, JoinPoolAttributes
from balancer_sdk.pools import builders
from balancer_sdk.pools.base_math import (
    compute_proportional_amounts_in,
    compute_proportional_amounts_out,
)
from balancer_sdk.pools.common import (
    check_length,
    check_token_index,
    normalize_prices,
    scale_down_all_down,
    scale_down_all_up,
    single,
)
from balancer_sdk.pools.scaling import (
    scale_down_down,
    scale_down_up,
    upscale_amounts,
    upscaled_balances,
)
from balancer_sdk.pools.weighted_math import (
    PowVersion,
    calc_bpt_in_given_exact_tokens_out,
    calc_bpt_out_given_exact_tokens_in,
    calc_token_in_given_exact_bpt_out,
    calc_token_out_given_exact_bpt_in,
)

logger = structlog.get_logger()


def _weights(pool: PoolSnapshot) -> list[Bfp]:
    weights = []
    for token in pool.tokens:
        if token.weight is None:
            raise InvalidPoolStateError(
                f"Weighted pool {pool.id} token {token.address} has no weight"
            )
        weights.append(Bfp(token.weight))
    return weights


def _version(pool: PoolSnapshot) -> PowVersion:
    # Factory v3 onwards short-circuits pow for exponents 1, 2 and 4
    return "v3Plus" if pool.pool_type_version >= 3 else "v0"


def _supply(pool: PoolSnapshot) -> Bfp:
    if pool.total_shares <= 0:
        raise InvalidPoolStateError(f"Pool {pool.id} has no BPT supply")
    return Bfp(pool.total_shares)


def liquidity(pool: PoolSnapshot, token_prices: Mapping[str, Decimal]) -> Decimal:
    """Pool value: value of priced tokens scaled up by their total weight."""
    prices = normalize_prices(token_prices)
    sum_value = Decimal(0)
    sum_weight = Decimal(0)
    for token in pool.tokens:
        price = prices.get(token.address.lower())
        if price is None or token.weight is None:
            continue
        sum_value += token.human_balance() * price
        sum_weight += Decimal(token.weight) / Decimal(ONE_18)
    if sum_weight == 0:
        return Decimal(0)
    return sum_value / sum_weight


def spot_price(pool: PoolSnapshot, token_in: str, token_out: str) -> Decimal:
    """Amount of token_in paid per unit of token_out, swap fee included."""
    token_a = pool.get_token(token_in)
    token_b = pool.get_token(token_out)
    _weights(pool)
    with localcontext() as ctx:
        ctx.prec = 50
        balance_in = token_a.human_balance() / (Decimal(token_a.weight) / ONE_18)
        balance_out = token_b.human_balance() / (Decimal(token_b.weight) / ONE_18)
        if balance_out == 0:
            raise InvalidPoolStateError(f"Pool {pool.id} has no {token_out} balance")
        fee_complement = 1 - Decimal(pool.swap_fee) / ONE_18
        return balance_in / balance_out / fee_complement


def bpt_out_given_exact_tokens_in(pool: PoolSnapshot, amounts_in: Sequence[int]) -> int:
    check_length(amounts_in, pool.tokens, "amounts_in")
    bpt_out = calc_bpt_out_given_exact_tokens_in(
        upscaled_balances(pool.tokens),
        _weights(pool),
        upscale_amounts(amounts_in, pool.tokens),
        _supply(pool),
        Bfp(pool.swap_fee),
        version=_version(pool),
    )
    logger.debug("weighted_join_quoted", pool_id=pool.id, bpt_out=bpt_out.value)
    return bpt_out.value


def tokens_in_given_exact_bpt_out(
    pool: PoolSnapshot, bpt_out: int, token_index: int | None = None
) -> list[int]:
    """Token amounts to mint exactly bpt_out, into one token or all proportionally."""
    balances = upscaled_balances(pool.tokens)
    supply = _supply(pool)
    if token_index is None:
        amounts = compute_proportional_amounts_in(balances, supply, Bfp(bpt_out))
        return scale_down_all_up(amounts, pool.tokens)

    check_token_index(token_index, pool.tokens)
    amount = calc_token_in_given_exact_bpt_out(
        balances[token_index],
        _weights(pool)[token_index],
        Bfp(bpt_out),
        supply,
        Bfp(pool.swap_fee),
        version=_version(pool),
    )
    token = pool.tokens[token_index]
    return single(token_index, scale_down_up(amount, token.scaling_factor), len(pool.tokens))


def tokens_out_given_exact_bpt_in(
    pool: PoolSnapshot, bpt_in: int, token_index: int | None = None
) -> list[int]:
    """Token amounts released by burning exactly bpt_in."""
    balances = upscaled_balances(pool.tokens)
    supply = _supply(pool)
    if token_index is None:
        amounts = compute_proportional_amounts_out(balances, supply, Bfp(bpt_in))
        return scale_down_all_down(amounts, pool.tokens)

    check_token_index(token_index, pool.tokens)
    amount = calc_token_out_given_exact_bpt_in(
        balances[token_index],
        _weights(pool)[token_index],
        Bfp(bpt_in),
        supply,
        Bfp(pool.swap_fee),
        version=_version(pool),
    )
    token = pool.tokens[token_index]
    return single(token_index, scale_down_down(amount, token.scaling_factor), len(pool.tokens))


def bpt_in_given_exact_tokens_out(pool: PoolSnapshot, amounts_out: Sequence[int]) -> int:
    check_length(amounts_out, pool.tokens, "amounts_out")
    bpt_in = calc_bpt_in_given_exact_tokens_out(
        upscaled_balances(pool.tokens),
        _weights(pool),
        upscale_amounts(amounts_out, pool.tokens),
        _supply(pool),
        Bfp(pool.swap_fee),
        version=_version(pool),
    )
    logger.debug("weighted_exit_quoted", pool_id=pool.id, bpt_in=bpt_in.value)
    return bpt_in.value


FAMILY = builders.VaultPoolFamily(
    encoder=WeightedPoolEncoder,
    bpt_out_given_exact_tokens_in=bpt_out_given_exact_tokens_in,
    tokens_out_given_exact_bpt_in=tokens_out_given_exact_bpt_in,
    bpt_in_given_exact_tokens_out=bpt_in_given_exact_tokens_out,
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
