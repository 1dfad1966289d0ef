"""Tests for Vault asset ordering."""

import pytest

from balancer_sdk.assets import AssetHelpers, is_eth, sort_tokens
from balancer_sdk.config import Network, get_network_config
from balancer_sdk.errors import DuplicateTokenError, LengthMismatchError
from tests.helpers import BAL, DAI, ETH, USDC, USDT, WETH


class TestSortTokens:
    """Tests for AssetHelpers.sort_tokens."""

    def test_sorts_ascending(self) -> None:
        (tokens,) = sort_tokens([USDT, DAI, USDC])
        assert tokens == [DAI, USDC, USDT]

    def test_result_is_permutation(self) -> None:
        original = [WETH, USDT, BAL, DAI, USDC]
        (tokens,) = sort_tokens(original)
        assert sorted(tokens) == sorted(original)
        assert all(a < b for a, b in zip(tokens, tokens[1:], strict=False))

    def test_parallel_arrays_follow_tokens(self) -> None:
        """Every parallel list gets the same permutation."""
        tokens, amounts, flags = sort_tokens([USDT, DAI, USDC], [3, 1, 2], [True, False, None])
        assert tokens == [DAI, USDC, USDT]
        assert amounts == [1, 2, 3]
        assert flags == [False, None, True]

    def test_case_insensitive(self) -> None:
        """Checksummed and lowercase spellings sort the same; spelling is preserved."""
        checksummed_usdc = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
        tokens, amounts = sort_tokens([USDT, checksummed_usdc, DAI], [3, 2, 1])
        assert tokens == [DAI, checksummed_usdc, USDT]
        assert amounts == [1, 2, 3]

    def test_eth_sorts_as_wrapped_native_asset(self) -> None:
        """Native ETH keeps the zero address but takes WETH's slot."""
        tokens, amounts = sort_tokens([ETH, BAL, USDC], [1, 2, 3])
        # USDC (0xa0...) < BAL (0xba...) < WETH (0xc0...)
        assert tokens == [USDC, BAL, ETH]
        assert amounts == [3, 2, 1]

    def test_eth_uses_network_wrapped_asset(self) -> None:
        """On Gnosis the native asset sorts as WXDAI (0xe9...), after USDC."""
        helpers = AssetHelpers(get_network_config(Network.GNOSIS).wrapped_native_asset)
        (tokens,) = helpers.sort_tokens([ETH, USDC])
        assert tokens == [USDC, ETH]

    def test_length_mismatch(self) -> None:
        with pytest.raises(LengthMismatchError):
            sort_tokens([DAI, USDC, USDT], [1, 2])

    def test_length_mismatch_is_checked_before_sorting(self) -> None:
        """Inputs are untouched when validation fails."""
        tokens = [USDT, DAI]
        amounts = [1]
        with pytest.raises(LengthMismatchError):
            sort_tokens(tokens, amounts)
        assert tokens == [USDT, DAI]

    def test_duplicate_token(self) -> None:
        with pytest.raises(DuplicateTokenError):
            sort_tokens([DAI, USDC, DAI])

    def test_duplicate_ignores_case(self) -> None:
        with pytest.raises(DuplicateTokenError):
            sort_tokens([USDC, "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"])

    def test_eth_duplicates_wrapped_native_asset(self) -> None:
        with pytest.raises(DuplicateTokenError):
            sort_tokens([ETH, USDC, WETH], [1, 2, 3])

    def test_empty(self) -> None:
        assert sort_tokens([], []) == ([], [])

    def test_inputs_not_mutated(self) -> None:
        tokens = [USDT, DAI]
        amounts = [2, 1]
        sort_tokens(tokens, amounts)
        assert tokens == [USDT, DAI]
        assert amounts == [2, 1]


class TestTranslate:
    def test_is_eth(self) -> None:
        assert is_eth(ETH)
        assert not is_eth(WETH)

    def test_translate_to_erc20(self) -> None:
        helpers = AssetHelpers(WETH)
        assert helpers.translate_to_erc20(ETH) == WETH
        assert helpers.translate_to_erc20(USDC.upper().replace("0X", "0x")) == USDC
