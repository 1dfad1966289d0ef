"""Tests for weighted pool calculators and builders."""

from dataclasses import replace
from decimal import Decimal, localcontext

import pytest

from balancer_sdk.constants import BALANCER_VAULT
from balancer_sdk.errors import (
    DuplicateTokenError,
    InvalidInputError,
    InvalidPoolStateError,
    InvariantRatioError,
    LengthMismatchError,
    TokenNotFoundError,
)
from balancer_sdk.math.slippage import add_slippage, subtract_slippage
from balancer_sdk.models import PoolSnapshot, PoolToken
from balancer_sdk.pools import weighted
from tests.helpers import BAL, DAI, ETH, USER, WETH, decode_call, decode_user_data
from tests.helpers.constants import EXIT_POOL_SELECTOR, JOIN_POOL_SELECTOR, WEIGHTED_POOL_ID
from tests.helpers.factories import JOIN_EXIT_TYPES, lower, make_weighted_pool

ONE = 10**18
SUPPLY = 100_000 * ONE
BAL_BALANCE = 1_000_000 * ONE
WETH_BALANCE = 1_000 * ONE


def reference(expression) -> Decimal:
    """Evaluate a Decimal expression at high precision."""
    with localcontext() as ctx:
        ctx.prec = 50
        return expression()


def assert_close(actual: int, expected: Decimal, rel: Decimal = Decimal("1e-9")) -> None:
    assert abs(Decimal(actual) - expected) <= abs(expected) * rel


class TestLiquidity:
    def test_all_tokens_priced(self, weighted_pool: PoolSnapshot) -> None:
        """1M BAL at $5 plus 1000 WETH at $1250."""
        value = weighted.liquidity(weighted_pool, {BAL: Decimal(5), WETH: Decimal(1250)})
        assert value == Decimal(6_250_000)

    def test_missing_price_extrapolated_by_weight(self, weighted_pool: PoolSnapshot) -> None:
        """80% of the pool worth $5M means the pool is worth $6.25M."""
        assert weighted.liquidity(weighted_pool, {BAL: Decimal(5)}) == Decimal(6_250_000)

    def test_price_keys_case_insensitive(self, weighted_pool: PoolSnapshot) -> None:
        value = weighted.liquidity(weighted_pool, {BAL.upper().replace("0X", "0x"): "5"})
        assert value == Decimal(6_250_000)

    def test_no_prices(self, weighted_pool: PoolSnapshot) -> None:
        assert weighted.liquidity(weighted_pool, {}) == 0


class TestSpotPrice:
    def test_without_fee(self) -> None:
        """(1M / 0.8) / (1000 / 0.2) = 250 BAL per WETH."""
        pool = make_weighted_pool(swap_fee=0)
        assert weighted.spot_price(pool, BAL, WETH) == Decimal(250)

    def test_with_fee(self, weighted_pool: PoolSnapshot) -> None:
        price = weighted.spot_price(weighted_pool, BAL, WETH)
        assert abs(price - Decimal(250) / Decimal("0.99")) < Decimal("1e-20")

    def test_inverse(self) -> None:
        pool = make_weighted_pool(swap_fee=0)
        assert weighted.spot_price(pool, WETH, BAL) == Decimal(1) / Decimal(250)

    def test_unknown_token(self, weighted_pool: PoolSnapshot) -> None:
        with pytest.raises(TokenNotFoundError):
            weighted.spot_price(weighted_pool, BAL, DAI)


class TestJoinAmounts:
    def test_zero_fee_matches_invariant_formula(self) -> None:
        """Without fees, BPT out is supply * (prod(ratio_i ^ w_i) - 1)."""
        pool = make_weighted_pool(swap_fee=0)
        bpt_out = weighted.bpt_out_given_exact_tokens_in(pool, [10_000 * ONE, 0])
        expected = reference(lambda: SUPPLY * (Decimal("1.01") ** Decimal("0.8") - 1))
        assert_close(bpt_out, expected)

    def test_fee_reduces_single_sided_join(self) -> None:
        amounts = [10_000 * ONE, 0]
        with_fee = weighted.bpt_out_given_exact_tokens_in(make_weighted_pool(), amounts)
        without_fee = weighted.bpt_out_given_exact_tokens_in(
            make_weighted_pool(swap_fee=0), amounts
        )
        assert with_fee < without_fee

    def test_proportional_join_pays_no_fee(self) -> None:
        """Amounts matching the pool's ratios are not taxed."""
        amounts = [10_000 * ONE, 10 * ONE]
        with_fee = weighted.bpt_out_given_exact_tokens_in(make_weighted_pool(), amounts)
        without_fee = weighted.bpt_out_given_exact_tokens_in(
            make_weighted_pool(swap_fee=0), amounts
        )
        assert_close(with_fee, Decimal(without_fee), rel=Decimal("1e-12"))
        assert_close(with_fee, Decimal(1_000 * ONE), rel=Decimal("1e-9"))

    def test_zero_amounts(self, weighted_pool: PoolSnapshot) -> None:
        assert weighted.bpt_out_given_exact_tokens_in(weighted_pool, [0, 0]) == 0

    def test_length_mismatch(self, weighted_pool: PoolSnapshot) -> None:
        with pytest.raises(LengthMismatchError):
            weighted.bpt_out_given_exact_tokens_in(weighted_pool, [1])

    def test_proportional_tokens_in(self, weighted_pool: PoolSnapshot) -> None:
        """1% of the supply needs 1% of each balance."""
        amounts = weighted.tokens_in_given_exact_bpt_out(weighted_pool, 1_000 * ONE)
        assert amounts == [10_000 * ONE, 10 * ONE]

    def test_single_token_in_zero_fee(self) -> None:
        """B * ((1 + bpt / supply) ^ (1 / w) - 1)."""
        pool = make_weighted_pool(swap_fee=0)
        amounts = weighted.tokens_in_given_exact_bpt_out(pool, 1_000 * ONE, 1)
        expected = reference(lambda: WETH_BALANCE * (Decimal("1.01") ** 5 - 1))
        assert amounts[0] == 0
        assert_close(amounts[1], expected)

    def test_single_token_in_ratio_limit(self, weighted_pool: PoolSnapshot) -> None:
        """Minting more than twice the supply would triple the invariant."""
        with pytest.raises(InvariantRatioError):
            weighted.tokens_in_given_exact_bpt_out(weighted_pool, 3 * SUPPLY, 0)

    def test_bad_token_index(self, weighted_pool: PoolSnapshot) -> None:
        with pytest.raises(TokenNotFoundError):
            weighted.tokens_in_given_exact_bpt_out(weighted_pool, ONE, 2)


class TestExitAmounts:
    def test_proportional_tokens_out(self, weighted_pool: PoolSnapshot) -> None:
        amounts = weighted.tokens_out_given_exact_bpt_in(weighted_pool, 1_000 * ONE)
        assert amounts == [10_000 * ONE, 10 * ONE]

    def test_single_token_out_zero_fee(self) -> None:
        """B * (1 - (1 - bpt / supply) ^ (1 / w))."""
        pool = make_weighted_pool(swap_fee=0)
        amounts = weighted.tokens_out_given_exact_bpt_in(pool, 1_000 * ONE, 0)
        expected = reference(lambda: BAL_BALANCE * (1 - Decimal("0.99") ** Decimal("1.25")))
        assert amounts[1] == 0
        assert_close(amounts[0], expected)

    def test_single_token_out_fee_reduces_amount(self) -> None:
        with_fee = weighted.tokens_out_given_exact_bpt_in(make_weighted_pool(), ONE, 0)
        without_fee = weighted.tokens_out_given_exact_bpt_in(
            make_weighted_pool(swap_fee=0), ONE, 0
        )
        assert with_fee[0] < without_fee[0]

    def test_single_token_out_ratio_limit(self, weighted_pool: PoolSnapshot) -> None:
        """Burning 40% of the supply shrinks the invariant below 0.7x."""
        with pytest.raises(InvariantRatioError):
            weighted.tokens_out_given_exact_bpt_in(weighted_pool, SUPPLY * 4 // 10, 0)

    def test_bpt_in_zero_fee_matches_invariant_formula(self) -> None:
        """Without fees, BPT in is supply * (1 - prod(ratio_i ^ w_i))."""
        pool = make_weighted_pool(swap_fee=0)
        bpt_in = weighted.bpt_in_given_exact_tokens_out(pool, [0, 10 * ONE])
        expected = reference(lambda: SUPPLY * (1 - Decimal("0.99") ** Decimal("0.2")))
        assert_close(bpt_in, expected)

    def test_bpt_in_fee_increases_burn(self) -> None:
        amounts = [0, 10 * ONE]
        with_fee = weighted.bpt_in_given_exact_tokens_out(make_weighted_pool(), amounts)
        without_fee = weighted.bpt_in_given_exact_tokens_out(
            make_weighted_pool(swap_fee=0), amounts
        )
        assert with_fee > without_fee

    def test_no_supply(self) -> None:
        pool = make_weighted_pool(total_shares=0)
        with pytest.raises(InvalidPoolStateError):
            weighted.tokens_out_given_exact_bpt_in(pool, ONE)


class TestPoolState:
    def test_missing_weight(self, weighted_pool: PoolSnapshot) -> None:
        tokens = (weighted_pool.tokens[0], replace(weighted_pool.tokens[1], weight=None))
        pool = replace(weighted_pool, tokens=tokens)
        with pytest.raises(InvalidPoolStateError):
            weighted.bpt_out_given_exact_tokens_in(pool, [ONE, 0])

    def test_zero_balance(self, weighted_pool: PoolSnapshot) -> None:
        tokens = (weighted_pool.tokens[0], PoolToken(address=WETH, balance=0, weight=2 * 10**17))
        pool = replace(weighted_pool, tokens=tokens)
        with pytest.raises(InvalidPoolStateError):
            weighted.bpt_out_given_exact_tokens_in(pool, [ONE, 0])

    def test_version_three_uses_exact_square(self) -> None:
        """For a 50/50 pool 1/w = 2, which v3+ pools compute without ln/exp."""
        weights = (5 * 10**17, 5 * 10**17)
        legacy = make_weighted_pool(swap_fee=0, version=1, weights=weights)
        modern = make_weighted_pool(swap_fee=0, version=3, weights=weights)
        legacy_in = weighted.tokens_in_given_exact_bpt_out(legacy, 1_000 * ONE, 1)[1]
        modern_in = weighted.tokens_in_given_exact_bpt_out(modern, 1_000 * ONE, 1)[1]
        # (1.01^2 - 1) * 1000 WETH, rounded up
        assert modern_in == 201 * 10**17
        assert legacy_in > modern_in


class TestBuildJoin:
    def test_single_token_join(self, weighted_pool: PoolSnapshot) -> None:
        attrs = weighted.build_join(USER, weighted_pool, [WETH], [ONE], 10**16)

        assert attrs.amounts_in == [0, ONE]
        assert attrs.expected_bpt_out == weighted.bpt_out_given_exact_tokens_in(
            weighted_pool, [0, ONE]
        )
        assert attrs.min_bpt_out == subtract_slippage(attrs.expected_bpt_out, 10**16)
        assert attrs.transaction.to == BALANCER_VAULT
        assert attrs.transaction.function_name == "joinPool"
        assert attrs.transaction.value == 0

    def test_join_calldata(self, weighted_pool: PoolSnapshot) -> None:
        attrs = weighted.build_join(USER, weighted_pool, [WETH], [ONE], 10**16)
        selector, (pool_id, sender, recipient, request) = decode_call(
            attrs.transaction.data, JOIN_EXIT_TYPES
        )
        assets, max_amounts_in, user_data, from_internal = request

        assert selector == JOIN_POOL_SELECTOR
        assert "0x" + pool_id.hex() == WEIGHTED_POOL_ID
        assert sender.lower() == USER
        assert recipient.lower() == USER
        assert lower(assets) == [BAL, WETH]
        assert list(max_amounts_in) == [0, ONE]
        assert from_internal is False
        kind, amounts, min_bpt = decode_user_data(user_data, ["uint256", "uint256[]", "uint256"])
        assert kind == 1
        assert list(amounts) == [0, ONE]
        assert min_bpt == attrs.min_bpt_out

    def test_join_with_eth(self, weighted_pool: PoolSnapshot) -> None:
        """Native ETH is sent as value and appears as the zero address."""
        attrs = weighted.build_join(USER, weighted_pool, [ETH], [ONE], 10**16)
        request = attrs.transaction.attributes["joinPoolRequest"]
        assert request["assets"] == [BAL, ETH]
        assert attrs.transaction.value == ONE
        assert attrs.amounts_in == [0, ONE]

    def test_token_not_in_pool(self, weighted_pool: PoolSnapshot) -> None:
        with pytest.raises(TokenNotFoundError):
            weighted.build_join(USER, weighted_pool, [DAI], [ONE], 0)

    def test_tokens_amounts_mismatch(self, weighted_pool: PoolSnapshot) -> None:
        with pytest.raises(LengthMismatchError):
            weighted.build_join(USER, weighted_pool, [WETH, BAL], [ONE], 0)

    def test_caller_order_does_not_matter(self, weighted_pool: PoolSnapshot) -> None:
        """Limits and userData amounts pair with the same token."""
        attrs = weighted.build_join(USER, weighted_pool, [WETH, BAL], [ONE, 100 * ONE], 10**16)
        _, (_, _, _, request) = decode_call(attrs.transaction.data, JOIN_EXIT_TYPES)
        assets, max_amounts_in, user_data, _ = request
        _, amounts, _ = decode_user_data(user_data, ["uint256", "uint256[]", "uint256"])

        assert lower(assets) == [BAL, WETH]
        assert list(max_amounts_in) == [100 * ONE, ONE]
        assert list(amounts) == [100 * ONE, ONE]

    def test_token_listed_twice(self, weighted_pool: PoolSnapshot) -> None:
        with pytest.raises(DuplicateTokenError):
            weighted.build_join(USER, weighted_pool, [BAL, BAL], [ONE, ONE], 0)

    def test_eth_and_weth_together(self, weighted_pool: PoolSnapshot) -> None:
        with pytest.raises(DuplicateTokenError):
            weighted.build_join(USER, weighted_pool, [ETH, WETH], [ONE, ONE], 0)

    def test_negative_amount(self, weighted_pool: PoolSnapshot) -> None:
        with pytest.raises(InvalidInputError):
            weighted.build_join(USER, weighted_pool, [BAL], [-1], 0)


class TestBuildExit:
    def test_single_token_exit(self, weighted_pool: PoolSnapshot) -> None:
        attrs = weighted.build_exit_exact_bpt_in(USER, weighted_pool, ONE, 10**16, WETH)
        expected = weighted.tokens_out_given_exact_bpt_in(weighted_pool, ONE, 1)

        assert attrs.expected_amounts_out == expected
        assert attrs.min_amounts_out == [0, subtract_slippage(expected[1], 10**16)]
        assert attrs.max_bpt_in == ONE

        selector, (_, _, _, request) = decode_call(attrs.transaction.data, JOIN_EXIT_TYPES)
        assert selector == EXIT_POOL_SELECTOR
        kind, bpt_in, index = decode_user_data(request[2], ["uint256", "uint256", "uint256"])
        assert (kind, bpt_in, index) == (0, ONE, 1)
        assert list(request[1]) == attrs.min_amounts_out

    def test_proportional_exit(self, weighted_pool: PoolSnapshot) -> None:
        attrs = weighted.build_exit_exact_bpt_in(USER, weighted_pool, 1_000 * ONE, 10**17)
        assert attrs.expected_amounts_out == [10_000 * ONE, 10 * ONE]
        assert attrs.min_amounts_out == [9_000 * ONE, 9 * ONE]
        user_data = attrs.transaction.attributes["exitPoolRequest"]["userData"]
        assert decode_user_data(user_data, ["uint256", "uint256"]) == (1, 1_000 * ONE)

    def test_exact_tokens_out(self, weighted_pool: PoolSnapshot) -> None:
        attrs = weighted.build_exit_exact_tokens_out(USER, weighted_pool, [BAL], [ONE], 10**16)
        expected_bpt_in = weighted.bpt_in_given_exact_tokens_out(weighted_pool, [ONE, 0])

        assert attrs.expected_bpt_in == expected_bpt_in
        assert attrs.max_bpt_in == add_slippage(expected_bpt_in, 10**16)
        assert attrs.min_amounts_out == [ONE, 0]
        user_data = attrs.transaction.attributes["exitPoolRequest"]["userData"]
        kind, amounts, max_bpt = decode_user_data(user_data, ["uint256", "uint256[]", "uint256"])
        assert (kind, list(amounts), max_bpt) == (2, [ONE, 0], attrs.max_bpt_in)
