"""Pool-type dispatcher.

Maps a pool type tag to the calculators and transaction builders of its
family, so callers never branch on pool type themselves.

Usage:
    concerns = get_pool_type_concerns(pool.pool_type)
    bpt_out = concerns.bpt_out_given_exact_tokens_in(pool, amounts_in)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from types import ModuleType
from typing import Protocol

from balancer_sdk.errors import UnsupportedPoolTypeError
from balancer_sdk.models.pool import PoolSnapshot, PoolType
from balancer_sdk.models.transaction import ExitPoolAttributes, JoinPoolAttributes
from balancer_sdk.pools import composable_stable, linear, stable, weighted


class LiquidityCalculator(Protocol):
    def __call__(self, pool: PoolSnapshot, token_prices: Mapping[str, Decimal]) -> Decimal: ...


class SpotPriceCalculator(Protocol):
    def __call__(self, pool: PoolSnapshot, token_in: str, token_out: str) -> Decimal: ...


class BptForTokens(Protocol):
    def __call__(self, pool: PoolSnapshot, amounts: Sequence[int]) -> int: ...


class TokensForBpt(Protocol):
    def __call__(
        self, pool: PoolSnapshot, bpt_amount: int, token_index: int | None = None
    ) -> list[int]: ...


class JoinBuilder(Protocol):
    def __call__(
        self,
        joiner: str,
        pool: PoolSnapshot,
        tokens_in: Sequence[str],
        amounts_in: Sequence[int],
        slippage: int,
        **kwargs: object,
    ) -> JoinPoolAttributes: ...


class ExitExactBptInBuilder(Protocol):
    def __call__(
        self,
        exiter: str,
        pool: PoolSnapshot,
        bpt_in: int,
        slippage: int,
        single_token_out: str | None = None,
        **kwargs: object,
    ) -> ExitPoolAttributes: ...


class ExitExactTokensOutBuilder(Protocol):
    def __call__(
        self,
        exiter: str,
        pool: PoolSnapshot,
        tokens_out: Sequence[str],
        amounts_out: Sequence[int],
        slippage: int,
        **kwargs: object,
    ) -> ExitPoolAttributes: ...


@dataclass(frozen=True)
class PoolTypeConcerns:
    """Calculators and builders of one pool family."""

    family: str
    liquidity: LiquidityCalculator
    spot_price: SpotPriceCalculator
    bpt_out_given_exact_tokens_in: BptForTokens
    tokens_in_given_exact_bpt_out: TokensForBpt
    tokens_out_given_exact_bpt_in: TokensForBpt
    bpt_in_given_exact_tokens_out: BptForTokens
    build_join: JoinBuilder
    build_exit_exact_bpt_in: ExitExactBptInBuilder
    build_exit_exact_tokens_out: ExitExactTokensOutBuilder

    @classmethod
    def from_module(cls, family: str, module: ModuleType) -> PoolTypeConcerns:
        return cls(
            family=family,
            liquidity=module.liquidity,
            spot_price=module.spot_price,
            bpt_out_given_exact_tokens_in=module.bpt_out_given_exact_tokens_in,
            tokens_in_given_exact_bpt_out=module.tokens_in_given_exact_bpt_out,
            tokens_out_given_exact_bpt_in=module.tokens_out_given_exact_bpt_in,
            bpt_in_given_exact_tokens_out=module.bpt_in_given_exact_tokens_out,
            build_join=module.build_join,
            build_exit_exact_bpt_in=module.build_exit_exact_bpt_in,
            build_exit_exact_tokens_out=module.build_exit_exact_tokens_out,
        )

    @classmethod
    def for_pool(cls, pool: PoolSnapshot) -> PoolTypeConcerns:
        return get_pool_type_concerns(pool.pool_type)


WEIGHTED = PoolTypeConcerns.from_module("weighted", weighted)
STABLE = PoolTypeConcerns.from_module("stable", stable)
COMPOSABLE_STABLE = PoolTypeConcerns.from_module("composable_stable", composable_stable)
LINEAR = PoolTypeConcerns.from_module("linear", linear)

_CONCERNS: dict[str, PoolTypeConcerns] = {
    PoolType.WEIGHTED.value: WEIGHTED,
    PoolType.INVESTMENT.value: WEIGHTED,
    PoolType.LIQUIDITY_BOOTSTRAPPING.value: WEIGHTED,
    PoolType.STABLE.value: STABLE,
    PoolType.META_STABLE.value: STABLE,
    PoolType.COMPOSABLE_STABLE.value: COMPOSABLE_STABLE,
    PoolType.LINEAR.value: LINEAR,
    PoolType.AAVE_LINEAR.value: LINEAR,
    PoolType.ERC4626_LINEAR.value: LINEAR,
    PoolType.EULER_LINEAR.value: LINEAR,
    PoolType.GEARBOX_LINEAR.value: LINEAR,
    PoolType.YEARN_LINEAR.value: LINEAR,
}

# Known to the subgraph but without calculators here
UNSUPPORTED_POOL_TYPES = frozenset(
    {
        PoolType.ELEMENT.value,
        PoolType.GYRO2.value,
        PoolType.GYRO3.value,
        PoolType.GYROE.value,
        PoolType.FX.value,
        PoolType.STABLE_PHANTOM.value,
        PoolType.MANAGED.value,
    }
)


def supported_pool_types() -> list[str]:
    return sorted(_CONCERNS)


def get_pool_type_concerns(pool_type: str | PoolType) -> PoolTypeConcerns:
    """Calculators for a pool type tag.

    Raises:
        UnsupportedPoolTypeError: If the tag is unknown or has no calculators
    """
    tag = pool_type.value if isinstance(pool_type, PoolType) else pool_type
    concerns = _CONCERNS.get(tag)
    if concerns is None:
        if tag in UNSUPPORTED_POOL_TYPES:
            raise UnsupportedPoolTypeError(f"Pool type {tag} is not supported")
        raise UnsupportedPoolTypeError(f"Unknown pool type: {tag}")
    return concerns


def concerns_for(pool: PoolSnapshot) -> PoolTypeConcerns:
    return PoolTypeConcerns.for_pool(pool)
