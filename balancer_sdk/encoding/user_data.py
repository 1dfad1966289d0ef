"""Pool userData encoders.

Each pool family interprets the `userData` of a join or exit as
(kind, ...params). Kind numbering differs between families, so every
family has its own encoder. All encoders return 0x-prefixed hex.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

from eth_abi import encode  # type: ignore[attr-defined]


def _hex(types: list[str], values: list[object]) -> str:
    values = [int(v) if isinstance(v, IntEnum) else v for v in values]
    return "0x" + encode(types, values).hex()


class WeightedPoolJoinKind(IntEnum):
    INIT = 0
    EXACT_TOKENS_IN_FOR_BPT_OUT = 1
    TOKEN_IN_FOR_EXACT_BPT_OUT = 2
    ALL_TOKENS_IN_FOR_EXACT_BPT_OUT = 3


class WeightedPoolExitKind(IntEnum):
    EXACT_BPT_IN_FOR_ONE_TOKEN_OUT = 0
    EXACT_BPT_IN_FOR_TOKENS_OUT = 1
    BPT_IN_FOR_EXACT_TOKENS_OUT = 2


class StablePoolJoinKind(IntEnum):
    INIT = 0
    EXACT_TOKENS_IN_FOR_BPT_OUT = 1
    TOKEN_IN_FOR_EXACT_BPT_OUT = 2


class StablePoolExitKind(IntEnum):
    EXACT_BPT_IN_FOR_ONE_TOKEN_OUT = 0
    EXACT_BPT_IN_FOR_TOKENS_OUT = 1
    BPT_IN_FOR_EXACT_TOKENS_OUT = 2


class ComposableStablePoolJoinKind(IntEnum):
    INIT = 0
    EXACT_TOKENS_IN_FOR_BPT_OUT = 1
    TOKEN_IN_FOR_EXACT_BPT_OUT = 2
    ALL_TOKENS_IN_FOR_EXACT_BPT_OUT = 3


class ComposableStablePoolExitKind(IntEnum):
    EXACT_BPT_IN_FOR_ONE_TOKEN_OUT = 0
    BPT_IN_FOR_EXACT_TOKENS_OUT = 1
    EXACT_BPT_IN_FOR_ALL_TOKENS_OUT = 2


class PoolEncoder:
    """Layouts shared by every family; subclasses supply the kind enums."""

    join_kind: type[IntEnum]
    exit_kind: type[IntEnum]
    exit_all_tokens_kind: str = "EXACT_BPT_IN_FOR_TOKENS_OUT"

    @classmethod
    def join_init(cls, amounts_in: Sequence[int]) -> str:
        """Initial join: (INIT, amountsIn)."""
        return _hex(["uint256", "uint256[]"], [cls.join_kind["INIT"], list(amounts_in)])

    @classmethod
    def join_exact_tokens_in_for_bpt_out(
        cls, amounts_in: Sequence[int], minimum_bpt: int
    ) -> str:
        return _hex(
            ["uint256", "uint256[]", "uint256"],
            [cls.join_kind["EXACT_TOKENS_IN_FOR_BPT_OUT"], list(amounts_in), minimum_bpt],
        )

    @classmethod
    def join_token_in_for_exact_bpt_out(cls, bpt_amount_out: int, enter_token_index: int) -> str:
        return _hex(
            ["uint256", "uint256", "uint256"],
            [cls.join_kind["TOKEN_IN_FOR_EXACT_BPT_OUT"], bpt_amount_out, enter_token_index],
        )

    @classmethod
    def exit_exact_bpt_in_for_one_token_out(cls, bpt_amount_in: int, exit_token_index: int) -> str:
        return _hex(
            ["uint256", "uint256", "uint256"],
            [cls.exit_kind["EXACT_BPT_IN_FOR_ONE_TOKEN_OUT"], bpt_amount_in, exit_token_index],
        )

    @classmethod
    def exit_exact_bpt_in_for_tokens_out(cls, bpt_amount_in: int) -> str:
        """Proportional exit."""
        kind = cls.exit_kind[cls.exit_all_tokens_kind]
        return _hex(["uint256", "uint256"], [kind, bpt_amount_in])

    @classmethod
    def exit_bpt_in_for_exact_tokens_out(
        cls, amounts_out: Sequence[int], max_bpt_amount_in: int
    ) -> str:
        return _hex(
            ["uint256", "uint256[]", "uint256"],
            [cls.exit_kind["BPT_IN_FOR_EXACT_TOKENS_OUT"], list(amounts_out), max_bpt_amount_in],
        )


class WeightedPoolEncoder(PoolEncoder):
    join_kind = WeightedPoolJoinKind
    exit_kind = WeightedPoolExitKind

    @classmethod
    def join_all_tokens_in_for_exact_bpt_out(cls, bpt_amount_out: int) -> str:
        return _hex(
            ["uint256", "uint256"],
            [WeightedPoolJoinKind.ALL_TOKENS_IN_FOR_EXACT_BPT_OUT, bpt_amount_out],
        )


class StablePoolEncoder(PoolEncoder):
    """Stable and MetaStable pools."""

    join_kind = StablePoolJoinKind
    exit_kind = StablePoolExitKind


class ComposableStablePoolEncoder(PoolEncoder):
    """Composable stable pools. Amount arrays and indexes exclude the pool's BPT,
    except for join_init which covers every registered token."""

    join_kind = ComposableStablePoolJoinKind
    exit_kind = ComposableStablePoolExitKind
    exit_all_tokens_kind = "EXACT_BPT_IN_FOR_ALL_TOKENS_OUT"

    @classmethod
    def join_all_tokens_in_for_exact_bpt_out(cls, bpt_amount_out: int) -> str:
        return _hex(
            ["uint256", "uint256"],
            [ComposableStablePoolJoinKind.ALL_TOKENS_IN_FOR_EXACT_BPT_OUT, bpt_amount_out],
        )
