"""Tests for pool userData encoders."""

import pytest

from balancer_sdk.encoding.user_data import (
    ComposableStablePoolEncoder,
    StablePoolEncoder,
    WeightedPoolEncoder,
)
from tests.helpers import decode_user_data

ONE = 10**18


class TestLayouts:
    def test_hex_prefix(self) -> None:
        assert WeightedPoolEncoder.join_init([1, 2]).startswith("0x")

    def test_join_init(self) -> None:
        data = StablePoolEncoder.join_init([ONE, 2 * ONE])
        assert decode_user_data(data, ["uint256", "uint256[]"]) == (0, (ONE, 2 * ONE))

    def test_join_exact_tokens_in(self) -> None:
        data = WeightedPoolEncoder.join_exact_tokens_in_for_bpt_out([ONE, 0], 5)
        assert decode_user_data(data, ["uint256", "uint256[]", "uint256"]) == (1, (ONE, 0), 5)

    def test_join_token_in_for_exact_bpt_out(self) -> None:
        data = StablePoolEncoder.join_token_in_for_exact_bpt_out(ONE, 2)
        assert decode_user_data(data, ["uint256"] * 3) == (2, ONE, 2)

    def test_exit_one_token(self) -> None:
        data = WeightedPoolEncoder.exit_exact_bpt_in_for_one_token_out(ONE, 1)
        assert decode_user_data(data, ["uint256"] * 3) == (0, ONE, 1)

    def test_exit_exact_tokens_out(self) -> None:
        data = StablePoolEncoder.exit_bpt_in_for_exact_tokens_out([0, 7], ONE)
        assert decode_user_data(data, ["uint256", "uint256[]", "uint256"]) == (2, (0, 7), ONE)

    def test_single_word_layout(self) -> None:
        """(kind, amount) packs into exactly two 32-byte words."""
        data = WeightedPoolEncoder.exit_exact_bpt_in_for_tokens_out(ONE)
        assert len(data) == 2 + 2 * 64
        assert data[2:66] == "00" * 31 + "01"


class TestKindNumbering:
    @pytest.mark.parametrize(
        ("encoder", "kind"),
        [
            (WeightedPoolEncoder, 1),
            (StablePoolEncoder, 1),
            (ComposableStablePoolEncoder, 2),
        ],
    )
    def test_proportional_exit(self, encoder: type, kind: int) -> None:
        data = encoder.exit_exact_bpt_in_for_tokens_out(ONE)
        assert decode_user_data(data, ["uint256", "uint256"]) == (kind, ONE)

    @pytest.mark.parametrize(
        ("encoder", "kind"),
        [
            (WeightedPoolEncoder, 2),
            (StablePoolEncoder, 2),
            (ComposableStablePoolEncoder, 1),
        ],
    )
    def test_exact_tokens_out_exit(self, encoder: type, kind: int) -> None:
        data = encoder.exit_bpt_in_for_exact_tokens_out([ONE], ONE)
        assert decode_user_data(data, ["uint256", "uint256[]", "uint256"])[0] == kind

    def test_all_tokens_in(self) -> None:
        for encoder in (WeightedPoolEncoder, ComposableStablePoolEncoder):
            data = encoder.join_all_tokens_in_for_exact_bpt_out(ONE)
            assert decode_user_data(data, ["uint256", "uint256"]) == (3, ONE)

    def test_stable_has_no_all_tokens_in_join(self) -> None:
        assert not hasattr(StablePoolEncoder, "join_all_tokens_in_for_exact_bpt_out")
