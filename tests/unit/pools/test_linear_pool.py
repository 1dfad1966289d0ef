"""Tests for linear pools (bb-a-USDC shaped fixture).

Fixture state: 2M USDC main, 1M static aUSDC at rate 1.1, 3.1M BPT supply,
targets [1M, 5M]. Main sits between its targets, so nominal equals real and
the invariant equals the supply.
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from balancer_sdk.constants import MAX_UINT256
from balancer_sdk.errors import (
    InvalidPoolStateError,
    LengthMismatchError,
    UnsupportedOperationError,
)
from balancer_sdk.math.slippage import add_slippage, subtract_slippage
from balancer_sdk.models import PoolSnapshot, PoolToken
from balancer_sdk.pools import linear
from tests.helpers import (
    ETH,
    STATIC_AUSDC,
    USDC,
    USER,
    WETH,
    decode_call,
    make_linear_pool,
)
from tests.helpers.constants import LINEAR_POOL_ADDRESS, LINEAR_POOL_ID, SWAP_SELECTOR
from tests.helpers.factories import SWAP_TYPES

ONE = 10**18
USDC_UNIT = 10**6


def make_weth_linear_pool() -> PoolSnapshot:
    """Linear pool with WETH as main token; WETH still sorts between BPT and wrapped."""
    pool = make_linear_pool()
    weth = PoolToken(address=WETH, balance=2_000_000 * ONE, decimals=18, symbol="WETH")
    return replace(pool, tokens=(pool.tokens[0], weth, pool.tokens[2]))


class TestJoinAmounts:
    def test_main_in(self, linear_pool: PoolSnapshot) -> None:
        bpt_out = linear.bpt_out_given_exact_tokens_in(linear_pool, [1_000 * USDC_UNIT, 0])
        assert bpt_out == 1_000 * ONE

    def test_wrapped_in_counts_at_rate(self, linear_pool: PoolSnapshot) -> None:
        bpt_out = linear.bpt_out_given_exact_tokens_in(linear_pool, [0, 1_000 * USDC_UNIT])
        assert bpt_out == 1_100 * ONE

    def test_main_above_upper_target_pays_fee(self) -> None:
        """Adding main past the upper target loses fee * excess in nominal value."""
        pool = make_linear_pool(main=5_000_000, total_shares=6_100_000 * ONE)
        bpt_out = linear.bpt_out_given_exact_tokens_in(pool, [1_000 * USDC_UNIT, 0])
        assert bpt_out == 1_000 * ONE - 10**17

    def test_tokens_in_for_bpt(self, linear_pool: PoolSnapshot) -> None:
        assert linear.tokens_in_given_exact_bpt_out(linear_pool, 1_000 * ONE, 0) == [
            1_000 * USDC_UNIT,
            0,
        ]

    def test_proportional_join_unsupported(self, linear_pool: PoolSnapshot) -> None:
        with pytest.raises(UnsupportedOperationError):
            linear.tokens_in_given_exact_bpt_out(linear_pool, ONE)

    def test_two_tokens_unsupported(self, linear_pool: PoolSnapshot) -> None:
        with pytest.raises(UnsupportedOperationError):
            linear.bpt_out_given_exact_tokens_in(linear_pool, [USDC_UNIT, USDC_UNIT])

    def test_nothing_in_unsupported(self, linear_pool: PoolSnapshot) -> None:
        with pytest.raises(UnsupportedOperationError):
            linear.bpt_out_given_exact_tokens_in(linear_pool, [0, 0])

    def test_amounts_exclude_bpt(self, linear_pool: PoolSnapshot) -> None:
        with pytest.raises(LengthMismatchError):
            linear.bpt_out_given_exact_tokens_in(linear_pool, [0, USDC_UNIT, 0])


class TestExitAmounts:
    def test_main_out_for_bpt(self, linear_pool: PoolSnapshot) -> None:
        assert linear.tokens_out_given_exact_bpt_in(linear_pool, 1_000 * ONE, 0) == [
            1_000 * USDC_UNIT,
            0,
        ]

    def test_wrapped_out_for_bpt(self, linear_pool: PoolSnapshot) -> None:
        amounts = linear.tokens_out_given_exact_bpt_in(linear_pool, 1_100 * ONE, 1)
        assert amounts[0] == 0
        assert 999 * USDC_UNIT < amounts[1] <= 1_000 * USDC_UNIT

    def test_bpt_in_for_main_out(self, linear_pool: PoolSnapshot) -> None:
        assert (
            linear.bpt_in_given_exact_tokens_out(linear_pool, [1_000 * USDC_UNIT, 0])
            == 1_000 * ONE
        )

    def test_proportional_exit_unsupported(self, linear_pool: PoolSnapshot) -> None:
        with pytest.raises(UnsupportedOperationError):
            linear.tokens_out_given_exact_bpt_in(linear_pool, ONE)

    def test_no_supply(self) -> None:
        pool = make_linear_pool(total_shares=0)
        with pytest.raises(InvalidPoolStateError):
            linear.bpt_in_given_exact_tokens_out(pool, [USDC_UNIT, 0])


class TestPoolState:
    @pytest.mark.parametrize(
        "field", ["main_index", "wrapped_index", "lower_target", "upper_target"]
    )
    def test_missing_linear_fields(self, linear_pool: PoolSnapshot, field: str) -> None:
        pool = replace(linear_pool, **{field: None})
        with pytest.raises(InvalidPoolStateError):
            linear.bpt_out_given_exact_tokens_in(pool, [USDC_UNIT, 0])

    def test_bpt_must_be_listed(self, linear_pool: PoolSnapshot) -> None:
        pool = replace(linear_pool, address=USER)
        with pytest.raises(InvalidPoolStateError):
            linear.liquidity(pool, {USDC: Decimal(1)})


class TestPricing:
    def test_liquidity_values_wrapped_through_main(self, linear_pool: PoolSnapshot) -> None:
        assert linear.liquidity(linear_pool, {USDC: Decimal(1)}) == Decimal("3100000")

    def test_liquidity_from_wrapped_price(self, linear_pool: PoolSnapshot) -> None:
        assert linear.liquidity(linear_pool, {STATIC_AUSDC: Decimal("1.1")}) == Decimal("3100000")

    def test_liquidity_unpriced(self, linear_pool: PoolSnapshot) -> None:
        assert linear.liquidity(linear_pool, {}) == 0

    def test_spot_price_main_for_wrapped(self, linear_pool: PoolSnapshot) -> None:
        assert linear.spot_price(linear_pool, USDC, STATIC_AUSDC) == Decimal("1.1")

    def test_spot_price_bpt(self, linear_pool: PoolSnapshot) -> None:
        """Invariant equals supply, so BPT trades at par with main."""
        assert linear.spot_price(linear_pool, USDC, LINEAR_POOL_ADDRESS) == 1


class TestBuilders:
    def test_join_is_given_in_swap(self, linear_pool: PoolSnapshot) -> None:
        attrs = linear.build_join(USER, linear_pool, [USDC], [1_000 * USDC_UNIT], 10**16)
        selector, (single_swap, funds, limit, deadline) = decode_call(
            attrs.transaction.data, SWAP_TYPES
        )
        pool_id, kind, asset_in, asset_out, amount, user_data = single_swap

        assert selector == SWAP_SELECTOR
        assert pool_id == bytes.fromhex(LINEAR_POOL_ID[2:])
        assert kind == 0
        assert (asset_in.lower(), asset_out.lower()) == (USDC, LINEAR_POOL_ADDRESS)
        assert amount == 1_000 * USDC_UNIT
        assert user_data == b""
        assert (funds[0].lower(), funds[1], funds[2].lower(), funds[3]) == (
            USER,
            False,
            USER,
            False,
        )
        assert limit == attrs.min_bpt_out == subtract_slippage(1_000 * ONE, 10**16)
        assert deadline == MAX_UINT256

    def test_exit_exact_bpt_in_defaults_to_main(self, linear_pool: PoolSnapshot) -> None:
        attrs = linear.build_exit_exact_bpt_in(USER, linear_pool, 1_000 * ONE, 10**16)
        swap = attrs.transaction.attributes["singleSwap"]

        assert swap["kind"] == 0
        assert (swap["assetIn"], swap["assetOut"]) == (LINEAR_POOL_ADDRESS, USDC)
        assert swap["amount"] == 1_000 * ONE
        assert attrs.expected_amounts_out == [1_000 * USDC_UNIT, 0]
        assert attrs.transaction.attributes["limit"] == subtract_slippage(
            1_000 * USDC_UNIT, 10**16
        )

    def test_exit_to_wrapped(self, linear_pool: PoolSnapshot) -> None:
        attrs = linear.build_exit_exact_bpt_in(USER, linear_pool, ONE, 0, STATIC_AUSDC)
        assert attrs.transaction.attributes["singleSwap"]["assetOut"] == STATIC_AUSDC

    def test_exit_exact_tokens_out_is_given_out_swap(self, linear_pool: PoolSnapshot) -> None:
        attrs = linear.build_exit_exact_tokens_out(
            USER, linear_pool, [USDC], [1_000 * USDC_UNIT], 10**16
        )
        selector, (single_swap, _, limit, _) = decode_call(attrs.transaction.data, SWAP_TYPES)

        assert selector == SWAP_SELECTOR
        assert single_swap[1] == 1
        assert single_swap[4] == 1_000 * USDC_UNIT
        assert attrs.expected_bpt_in == 1_000 * ONE
        assert limit == attrs.max_bpt_in == add_slippage(1_000 * ONE, 10**16)

    def test_join_two_tokens_unsupported(self, linear_pool: PoolSnapshot) -> None:
        with pytest.raises(UnsupportedOperationError):
            linear.build_join(
                USER, linear_pool, [USDC, STATIC_AUSDC], [USDC_UNIT, USDC_UNIT], 10**16
            )

    def test_join_with_eth(self) -> None:
        """Native ETH is the zero address in the swap and is sent as value."""
        attrs = linear.build_join(USER, make_weth_linear_pool(), [ETH], [ONE], 10**16)
        swap = attrs.transaction.attributes["singleSwap"]

        assert swap["assetIn"] == ETH
        assert attrs.transaction.value == ONE
        assert attrs.amounts_in == [ONE, 0]
        _, (single_swap, _, _, _) = decode_call(attrs.transaction.data, SWAP_TYPES)
        assert single_swap[2].lower() == ETH

    def test_join_with_weth_sends_no_value(self) -> None:
        attrs = linear.build_join(USER, make_weth_linear_pool(), [WETH], [ONE], 10**16)
        assert attrs.transaction.attributes["singleSwap"]["assetIn"] == WETH
        assert attrs.transaction.value == 0

    def test_exit_to_eth(self) -> None:
        attrs = linear.build_exit_exact_bpt_in(USER, make_weth_linear_pool(), ONE, 0, ETH)
        assert attrs.transaction.attributes["singleSwap"]["assetOut"] == ETH
        assert attrs.transaction.value == 0

    def test_exact_eth_out(self) -> None:
        attrs = linear.build_exit_exact_tokens_out(
            USER, make_weth_linear_pool(), [ETH], [ONE], 10**16
        )
        assert attrs.transaction.attributes["singleSwap"]["assetOut"] == ETH
        assert attrs.expected_amounts_out == [ONE, 0]
