"""Linear pool calculators (Linear, AaveLinear, ERC4626Linear, ...).

Linear pools cannot be joined or exited through the Vault's joinPool /
exitPool. Entering means swapping the main (or wrapped) token for BPT with
Vault.swap, and leaving is the reverse swap, so each operation moves exactly
one token. Amount vectors are [main, wrapped] in pool order, BPT excluded.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, localcontext

import structlog

from balancer_sdk.assets import is_eth
from balancer_sdk.config import DEFAULT_NETWORK_CONFIG, BalancerNetworkConfig
from balancer_sdk.constants import ZERO_ADDRESS
from balancer_sdk.encoding.vault import SwapKind, encode_swap
from balancer_sdk.errors import InvalidPoolStateError, UnsupportedOperationError
from balancer_sdk.math.fixed_point import Bfp
from balancer_sdk.math.slippage import add_slippage, subtract_slippage
from balancer_sdk.models.pool import PoolSnapshot, PoolToken
from balancer_sdk.models.transaction import ExitPoolAttributes, JoinPoolAttributes
from balancer_sdk.pools import linear_math
from balancer_sdk.pools.builders import align_amounts
from balancer_sdk.pools.common import (
    check_length,
    check_token_index,
    normalize_prices,
    position,
    rate,
    single,
)
from balancer_sdk.pools.linear_math import LinearParams
from balancer_sdk.pools.scaling import scale_down_down, scale_down_up, scale_up

logger = structlog.get_logger()


@dataclass(frozen=True)
class _LinearState:
    tokens: tuple[PoolToken, ...]
    main: int
    wrapped: int
    main_balance: Bfp
    wrapped_balance: Bfp
    supply: Bfp
    params: LinearParams

    def invariant(self) -> Bfp:
        nominal_main = linear_math.to_nominal(self.main_balance, self.params)
        return linear_math.calc_invariant(nominal_main, self.wrapped_balance)


def _state(pool: PoolSnapshot) -> _LinearState:
    if None in (pool.main_index, pool.wrapped_index, pool.lower_target, pool.upper_target):
        raise InvalidPoolStateError(
            f"Linear pool {pool.id} needs main_index, wrapped_index and targets"
        )
    bpt_index = pool.bpt_index
    if bpt_index < 0:
        raise InvalidPoolStateError(f"Linear pool {pool.id} does not list its BPT")
    if len(pool.tokens) != 3 or bpt_index in (pool.main_index, pool.wrapped_index):
        raise InvalidPoolStateError(f"Linear pool {pool.id} must hold main, wrapped and BPT")

    tokens = pool.without_bpt()
    main_token = pool.tokens[pool.main_index]
    wrapped_token = pool.tokens[pool.wrapped_index]
    return _LinearState(
        tokens=tokens,
        main=tokens.index(main_token),
        wrapped=tokens.index(wrapped_token),
        main_balance=scale_up(main_token.balance, main_token.scaling_factor),
        wrapped_balance=scale_up(wrapped_token.balance, wrapped_token.scaling_factor),
        supply=Bfp(pool.total_shares),
        params=LinearParams(
            fee=Bfp(pool.swap_fee),
            lower_target=Bfp(pool.lower_target),
            upper_target=Bfp(pool.upper_target),
        ),
    )


def _single_amount(amounts: Sequence[int]) -> tuple[int, int]:
    """(index, amount) of the one non-zero entry."""
    non_zero = [(i, a) for i, a in enumerate(amounts) if a != 0]
    if len(non_zero) != 1:
        raise UnsupportedOperationError("Linear pools move exactly one token per operation")
    return non_zero[0]


def liquidity(pool: PoolSnapshot, token_prices: Mapping[str, Decimal]) -> Decimal:
    """Pool value. The wrapped token is valued through the main token's price
    when it has no price of its own."""
    state = _state(pool)
    prices = normalize_prices(token_prices)
    main_token = state.tokens[state.main]
    wrapped_token = state.tokens[state.wrapped]

    main_price = prices.get(main_token.address.lower())
    wrapped_price = prices.get(wrapped_token.address.lower())
    if main_price is None and wrapped_price is not None:
        main_price = wrapped_price / rate(wrapped_token)
    if main_price is None:
        return Decimal(0)
    if wrapped_price is None:
        wrapped_price = rate(wrapped_token) * main_price

    return (
        main_token.human_balance() * main_price + wrapped_token.human_balance() * wrapped_price
    )


def spot_price(pool: PoolSnapshot, token_in: str, token_out: str) -> Decimal:
    """Amount of token_in paid per unit of token_out, in nominal main-token value.

    Main is worth one, wrapped is worth its rate and BPT is worth
    invariant / supply.
    """
    state = _state(pool)
    with localcontext() as ctx:
        ctx.prec = 50

        def value(token: str) -> Decimal:
            index = pool.token_index(token)
            if index == pool.bpt_index:
                if state.supply.value == 0:
                    raise InvalidPoolStateError(f"Linear pool {pool.id} has no BPT supply")
                return Decimal(state.invariant().value) / Decimal(state.supply.value)
            if index == pool.main_index:
                return Decimal(1)
            return rate(pool.tokens[index])

        return value(token_out) / value(token_in)


def bpt_out_given_exact_tokens_in(pool: PoolSnapshot, amounts_in: Sequence[int]) -> int:
    state = _state(pool)
    check_length(amounts_in, state.tokens, "amounts_in")
    index, amount = _single_amount(amounts_in)
    amount_up = scale_up(amount, state.tokens[index].scaling_factor)
    calc = (
        linear_math.calc_bpt_out_per_main_in
        if index == state.main
        else linear_math.calc_bpt_out_per_wrapped_in
    )
    bpt_out = calc(
        amount_up, state.main_balance, state.wrapped_balance, state.supply, state.params
    )
    logger.debug("linear_join_quoted", pool_id=pool.id, bpt_out=bpt_out.value)
    return bpt_out.value


def tokens_in_given_exact_bpt_out(
    pool: PoolSnapshot, bpt_out: int, token_index: int | None = None
) -> list[int]:
    state = _state(pool)
    if token_index is None:
        raise UnsupportedOperationError("Linear pools have no proportional join")
    check_token_index(token_index, state.tokens)
    calc = (
        linear_math.calc_main_in_per_bpt_out
        if token_index == state.main
        else linear_math.calc_wrapped_in_per_bpt_out
    )
    amount = calc(
        Bfp(bpt_out), state.main_balance, state.wrapped_balance, state.supply, state.params
    )
    token = state.tokens[token_index]
    return single(token_index, scale_down_up(amount, token.scaling_factor), len(state.tokens))


def tokens_out_given_exact_bpt_in(
    pool: PoolSnapshot, bpt_in: int, token_index: int | None = None
) -> list[int]:
    state = _state(pool)
    if token_index is None:
        raise UnsupportedOperationError("Linear pools have no proportional exit")
    check_token_index(token_index, state.tokens)
    if state.supply.value == 0:
        raise InvalidPoolStateError(f"Linear pool {pool.id} has no BPT supply")
    calc = (
        linear_math.calc_main_out_per_bpt_in
        if token_index == state.main
        else linear_math.calc_wrapped_out_per_bpt_in
    )
    amount = calc(
        Bfp(bpt_in), state.main_balance, state.wrapped_balance, state.supply, state.params
    )
    token = state.tokens[token_index]
    return single(token_index, scale_down_down(amount, token.scaling_factor), len(state.tokens))


def bpt_in_given_exact_tokens_out(pool: PoolSnapshot, amounts_out: Sequence[int]) -> int:
    state = _state(pool)
    check_length(amounts_out, state.tokens, "amounts_out")
    if state.supply.value == 0:
        raise InvalidPoolStateError(f"Linear pool {pool.id} has no BPT supply")
    index, amount = _single_amount(amounts_out)
    amount_up = scale_up(amount, state.tokens[index].scaling_factor)
    calc = (
        linear_math.calc_bpt_in_per_main_out
        if index == state.main
        else linear_math.calc_bpt_in_per_wrapped_out
    )
    bpt_in = calc(
        amount_up, state.main_balance, state.wrapped_balance, state.supply, state.params
    )
    logger.debug("linear_exit_quoted", pool_id=pool.id, bpt_in=bpt_in.value)
    return bpt_in.value


def _swap_asset(token: PoolToken, uses_eth: bool) -> str:
    """Vault asset for a swap leg: native ETH travels as the zero address."""
    return ZERO_ADDRESS if uses_eth else token.address


def build_join(
    joiner: str,
    pool: PoolSnapshot,
    tokens_in: Sequence[str],
    amounts_in: Sequence[int],
    slippage: int,
    *,
    network: BalancerNetworkConfig = DEFAULT_NETWORK_CONFIG,
) -> JoinPoolAttributes:
    """Swap exactly one token in for BPT (GIVEN_IN, limit = minimum BPT out)."""
    state = _state(pool)
    amounts, uses_eth = align_amounts(pool, tokens_in, amounts_in, network.wrapped_native_asset)
    index, amount = _single_amount(amounts)
    expected_bpt_out = bpt_out_given_exact_tokens_in(pool, amounts)
    min_bpt_out = subtract_slippage(expected_bpt_out, slippage)
    asset_in = _swap_asset(state.tokens[index], uses_eth)

    transaction = encode_swap(
        pool_id=pool.id,
        kind=SwapKind.GIVEN_IN,
        asset_in=asset_in,
        asset_out=pool.address,
        amount=amount,
        sender=joiner,
        recipient=joiner,
        limit=min_bpt_out,
        vault=network.vault,
        value=amount if uses_eth else 0,
    )
    return JoinPoolAttributes(
        transaction=transaction,
        pool_id=pool.id,
        tokens_in=[t.address.lower() for t in state.tokens],
        amounts_in=amounts,
        max_amounts_in=amounts,
        expected_bpt_out=expected_bpt_out,
        min_bpt_out=min_bpt_out,
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
    """Swap exactly bpt_in for one token (GIVEN_IN, limit = minimum amount out).

    Defaults to the main token when single_token_out is not given.
    """
    state = _state(pool)
    uses_eth = single_token_out is not None and is_eth(single_token_out)
    if single_token_out is None:
        index = state.main
    else:
        token = network.wrapped_native_asset if uses_eth else single_token_out
        index = position(state.tokens, token)
    expected = tokens_out_given_exact_bpt_in(pool, bpt_in, index)
    min_amounts_out = [subtract_slippage(amount, slippage) for amount in expected]

    transaction = encode_swap(
        pool_id=pool.id,
        kind=SwapKind.GIVEN_IN,
        asset_in=pool.address,
        asset_out=_swap_asset(state.tokens[index], uses_eth),
        amount=bpt_in,
        sender=exiter,
        recipient=exiter,
        limit=min_amounts_out[index],
        vault=network.vault,
    )
    return ExitPoolAttributes(
        transaction=transaction,
        pool_id=pool.id,
        tokens_out=[t.address.lower() for t in state.tokens],
        expected_amounts_out=expected,
        min_amounts_out=min_amounts_out,
        expected_bpt_in=bpt_in,
        max_bpt_in=bpt_in,
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
    """Swap BPT for an exact amount of one token (GIVEN_OUT, limit = maximum BPT in)."""
    state = _state(pool)
    amounts, uses_eth = align_amounts(pool, tokens_out, amounts_out, network.wrapped_native_asset)
    index, amount = _single_amount(amounts)
    expected_bpt_in = bpt_in_given_exact_tokens_out(pool, amounts)
    max_bpt_in = add_slippage(expected_bpt_in, slippage)

    transaction = encode_swap(
        pool_id=pool.id,
        kind=SwapKind.GIVEN_OUT,
        asset_in=pool.address,
        asset_out=_swap_asset(state.tokens[index], uses_eth),
        amount=amount,
        sender=exiter,
        recipient=exiter,
        limit=max_bpt_in,
        vault=network.vault,
    )
    return ExitPoolAttributes(
        transaction=transaction,
        pool_id=pool.id,
        tokens_out=[t.address.lower() for t in state.tokens],
        expected_amounts_out=amounts,
        min_amounts_out=amounts,
        expected_bpt_in=expected_bpt_in,
        max_bpt_in=max_bpt_in,
    )
