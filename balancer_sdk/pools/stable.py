"""Stable pool calculators (Stable, MetaStable).

Every calculator works on the pool's tokens excluding its own BPT, so the
composable-stable family reuses them unchanged. MetaStable rate providers
enter through each token's scaling factor.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import ROUND_DOWN, Decimal, localcontext

import structlog

from balancer_sdk.config import DEFAULT_NETWORK_CONFIG, BalancerNetworkConfig
from balancer_sdk.encoding.user_data import StablePoolEncoder
from balancer_sdk.errors import InvalidPoolStateError, UnsupportedOperationError
from balancer_sdk.math.fixed_point import AMP_PRECISION, ONE_18, Bfp
from balancer_sdk.models.pool import PoolSnapshot, PoolToken
from balancer_sdk.models.transaction import ExitPoolAttributes, JoinPoolAttributes
from balancer_sdk.pools import builders
from balancer_sdk.pools.base_math import (
    compute_proportional_amounts_in,
    compute_proportional_amounts_out,
)
from balancer_sdk.pools.common import (
    check_length,
    check_token_index,
    is_pool_token,
    normalize_prices,
    position,
    rate,
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
from balancer_sdk.pools.stable_math import (
    calc_bpt_in_given_exact_tokens_out,
    calc_bpt_out_given_exact_tokens_in,
    calc_token_in_given_exact_bpt_out,
    calc_token_out_given_exact_bpt_in,
    calculate_invariant,
)

logger = structlog.get_logger()


def scaled_amp(pool: PoolSnapshot) -> int:
    """Amplification parameter times AMP_PRECISION."""
    if pool.amplification_parameter is None:
        raise InvalidPoolStateError(f"Stable pool {pool.id} has no amplification parameter")
    amp = Decimal(pool.amplification_parameter) * AMP_PRECISION
    amp_int = int(amp.to_integral_value(rounding=ROUND_DOWN))
    if amp_int <= 0:
        raise InvalidPoolStateError(f"Stable pool {pool.id} has invalid amplification {amp}")
    return amp_int


def _supply(pool: PoolSnapshot) -> Bfp:
    if pool.total_shares <= 0:
        raise InvalidPoolStateError(f"Pool {pool.id} has no BPT supply")
    return Bfp(pool.total_shares)


def _state(pool: PoolSnapshot) -> tuple[tuple[PoolToken, ...], list[Bfp], int, Bfp]:
    tokens = pool.without_bpt()
    balances = upscaled_balances(tokens)
    amp = scaled_amp(pool)
    return tokens, balances, amp, calculate_invariant(amp, balances)


def liquidity(pool: PoolSnapshot, token_prices: Mapping[str, Decimal]) -> Decimal:
    """Pool value. Unpriced tokens are valued at the average price of the
    priced ones, per rate-adjusted unit. The pool's own BPT is excluded."""
    prices = normalize_prices(token_prices)
    tokens = pool.without_bpt()

    sum_value = Decimal(0)
    sum_balance = Decimal(0)
    unpriced_balance = Decimal(0)
    for token in tokens:
        adjusted = token.human_balance() * rate(token)
        price = prices.get(token.address.lower())
        if price is None:
            unpriced_balance += adjusted
            continue
        sum_value += adjusted * price
        sum_balance += adjusted

    if sum_balance > 0:
        sum_value += unpriced_balance * (sum_value / sum_balance)
    return sum_value


def spot_price(pool: PoolSnapshot, token_in: str, token_out: str) -> Decimal:
    """Amount of token_in paid per unit of token_out, swap fee included.

    Ratio of the invariant's partial derivatives at current balances:
        (Ann + K / x_out) / (Ann + K / x_in),  K = D^(n+1) / (n^n * prod(x))
    """
    if is_pool_token(pool, token_in) or is_pool_token(pool, token_out):
        raise UnsupportedOperationError("Spot price against the pool's own BPT is not supported")

    tokens, balances, amp, invariant = _state(pool)
    index_in = position(tokens, token_in)
    index_out = position(tokens, token_out)
    n = len(balances)

    with localcontext() as ctx:
        ctx.prec = 60
        x = [Decimal(b.value) for b in balances]
        d = Decimal(invariant.value)
        ann = Decimal(amp) * n / AMP_PRECISION
        product = Decimal(1)
        for value in x:
            product *= value
        k = d ** (n + 1) / (Decimal(n) ** n * product)
        scaled_price = (ann + k / x[index_out]) / (ann + k / x[index_in])
        price = scaled_price * rate(tokens[index_out]) / rate(tokens[index_in])
        fee_complement = 1 - Decimal(pool.swap_fee) / ONE_18
        return price / fee_complement


def bpt_out_given_exact_tokens_in(pool: PoolSnapshot, amounts_in: Sequence[int]) -> int:
    tokens, balances, amp, invariant = _state(pool)
    check_length(amounts_in, tokens, "amounts_in")
    bpt_out = calc_bpt_out_given_exact_tokens_in(
        amp,
        balances,
        upscale_amounts(amounts_in, tokens),
        _supply(pool),
        invariant,
        Bfp(pool.swap_fee),
    )
    logger.debug("stable_join_quoted", pool_id=pool.id, bpt_out=bpt_out.value)
    return bpt_out.value


def tokens_in_given_exact_bpt_out(
    pool: PoolSnapshot, bpt_out: int, token_index: int | None = None
) -> list[int]:
    """Token amounts to mint exactly bpt_out, into one token or all proportionally.

    token_index counts tokens excluding the pool's BPT.
    """
    tokens = pool.without_bpt()
    balances = upscaled_balances(tokens)
    supply = _supply(pool)
    if token_index is None:
        amounts = compute_proportional_amounts_in(balances, supply, Bfp(bpt_out))
        return scale_down_all_up(amounts, tokens)

    check_token_index(token_index, tokens)
    amp = scaled_amp(pool)
    amount = calc_token_in_given_exact_bpt_out(
        amp,
        balances,
        token_index,
        Bfp(bpt_out),
        supply,
        calculate_invariant(amp, balances),
        Bfp(pool.swap_fee),
    )
    token = tokens[token_index]
    return single(token_index, scale_down_up(amount, token.scaling_factor), len(tokens))


def tokens_out_given_exact_bpt_in(
    pool: PoolSnapshot, bpt_in: int, token_index: int | None = None
) -> list[int]:
    """Token amounts released by burning exactly bpt_in.

    token_index counts tokens excluding the pool's BPT.
    """
    tokens = pool.without_bpt()
    balances = upscaled_balances(tokens)
    supply = _supply(pool)
    if token_index is None:
        amounts = compute_proportional_amounts_out(balances, supply, Bfp(bpt_in))
        return scale_down_all_down(amounts, tokens)

    check_token_index(token_index, tokens)
    amp = scaled_amp(pool)
    amount = calc_token_out_given_exact_bpt_in(
        amp,
        balances,
        token_index,
        Bfp(bpt_in),
        supply,
        calculate_invariant(amp, balances),
        Bfp(pool.swap_fee),
    )
    token = tokens[token_index]
    return single(token_index, scale_down_down(amount, token.scaling_factor), len(tokens))


def bpt_in_given_exact_tokens_out(pool: PoolSnapshot, amounts_out: Sequence[int]) -> int:
    tokens, balances, amp, invariant = _state(pool)
    check_length(amounts_out, tokens, "amounts_out")
    bpt_in = calc_bpt_in_given_exact_tokens_out(
        amp,
        balances,
        upscale_amounts(amounts_out, tokens),
        _supply(pool),
        invariant,
        Bfp(pool.swap_fee),
    )
    logger.debug("stable_exit_quoted", pool_id=pool.id, bpt_in=bpt_in.value)
    return bpt_in.value


FAMILY = builders.VaultPoolFamily(
    encoder=StablePoolEncoder,
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
