"""Join/exit transaction builders for pools entered through Vault.joinPool.

A family plugs in its calculators and userData encoder; the builder aligns
caller amounts with pool order, applies slippage, sorts assets and encodes
the Vault call.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from balancer_sdk.assets import AssetHelpers, is_eth
from balancer_sdk.config import DEFAULT_NETWORK_CONFIG, BalancerNetworkConfig
from balancer_sdk.constants import ZERO_ADDRESS
from balancer_sdk.encoding.user_data import PoolEncoder
from balancer_sdk.encoding.vault import encode_exit_pool, encode_join_pool
from balancer_sdk.errors import DuplicateTokenError, LengthMismatchError
from balancer_sdk.math.slippage import add_slippage, subtract_slippage
from balancer_sdk.models.pool import PoolSnapshot
from balancer_sdk.models.transaction import ExitPoolAttributes, JoinPoolAttributes
from balancer_sdk.models.types import normalize_address
from balancer_sdk.pools.common import position

logger = structlog.get_logger()


@dataclass(frozen=True)
class VaultPoolFamily:
    """Calculators and encoder of one Vault-joined pool family.

    Attributes:
        encoder: userData encoder class
        bpt_out_given_exact_tokens_in: Quote for exact-tokens-in joins
        tokens_out_given_exact_bpt_in: Quote for exact-BPT-in exits
        bpt_in_given_exact_tokens_out: Quote for exact-tokens-out exits
        registers_bpt: Pool registers its own BPT with the Vault, so Vault
            arrays carry a BPT slot that userData arrays do not
    """

    encoder: type[PoolEncoder]
    bpt_out_given_exact_tokens_in: Callable[[PoolSnapshot, Sequence[int]], int]
    tokens_out_given_exact_bpt_in: Callable[..., list[int]]
    bpt_in_given_exact_tokens_out: Callable[[PoolSnapshot, Sequence[int]], int]
    registers_bpt: bool = False


def align_amounts(
    pool: PoolSnapshot,
    tokens: Sequence[str],
    amounts: Sequence[int],
    wrapped_native_asset: str,
) -> tuple[list[int], bool]:
    """Map caller (token, amount) pairs onto the pool's non-BPT token order.

    Tokens not mentioned get zero. Native ETH counts as the wrapped asset.

    Returns:
        (amounts in pool order, whether native ETH was used)
    """
    if len(tokens) != len(amounts):
        raise LengthMismatchError(f"{len(tokens)} tokens but {len(amounts)} amounts")

    pool_tokens = pool.without_bpt()
    aligned = [0] * len(pool_tokens)
    uses_eth = False
    seen: set[int] = set()
    for token, amount in zip(tokens, amounts, strict=True):
        if is_eth(token):
            uses_eth = True
            token = wrapped_native_asset
        index = position(pool_tokens, token)
        if index in seen:
            raise DuplicateTokenError(f"Token {token} listed twice")
        seen.add(index)
        aligned[index] = int(amount)
    return aligned, uses_eth


def _vault_assets(
    pool: PoolSnapshot,
    family: VaultPoolFamily,
    limits: Sequence[int],
    uses_eth: bool,
    network: BalancerNetworkConfig,
) -> tuple[list[str], list[int]]:
    """Assets and limits in Vault order, BPT slot included where registered."""
    tokens = list(pool.tokens_list)
    full_limits = list(limits)
    if family.registers_bpt:
        full_limits.insert(pool.bpt_index, 0)
    else:
        tokens = [normalize_address(t.address) for t in pool.without_bpt()]
    if uses_eth:
        weth = normalize_address(network.wrapped_native_asset)
        tokens = [ZERO_ADDRESS if t == weth else t for t in tokens]

    assets, sorted_limits = AssetHelpers(network.wrapped_native_asset).sort_tokens(
        tokens, full_limits
    )
    return assets, sorted_limits


def _eth_value(pool: PoolSnapshot, amounts: Sequence[int], network: BalancerNetworkConfig) -> int:
    weth = normalize_address(network.wrapped_native_asset)
    for token, amount in zip(pool.without_bpt(), amounts, strict=True):
        if normalize_address(token.address) == weth:
            return amount
    return 0


def build_join(
    family: VaultPoolFamily,
    joiner: str,
    pool: PoolSnapshot,
    tokens_in: Sequence[str],
    amounts_in: Sequence[int],
    slippage: int,
    *,
    network: BalancerNetworkConfig = DEFAULT_NETWORK_CONFIG,
) -> JoinPoolAttributes:
    """Exact-tokens-in join with a slippage-protected minimum BPT out."""
    amounts, uses_eth = align_amounts(pool, tokens_in, amounts_in, network.wrapped_native_asset)
    expected_bpt_out = family.bpt_out_given_exact_tokens_in(pool, amounts)
    min_bpt_out = subtract_slippage(expected_bpt_out, slippage)

    user_data = family.encoder.join_exact_tokens_in_for_bpt_out(amounts, min_bpt_out)
    assets, max_amounts_in = _vault_assets(pool, family, amounts, uses_eth, network)
    transaction = encode_join_pool(
        pool_id=pool.id,
        sender=joiner,
        recipient=joiner,
        assets=assets,
        max_amounts_in=max_amounts_in,
        user_data=user_data,
        vault=network.vault,
        value=_eth_value(pool, amounts, network) if uses_eth else 0,
    )
    logger.debug(
        "join_built",
        pool_id=pool.id,
        pool_type=pool.pool_type,
        expected_bpt_out=expected_bpt_out,
        min_bpt_out=min_bpt_out,
    )
    return JoinPoolAttributes(
        transaction=transaction,
        pool_id=pool.id,
        tokens_in=assets,
        amounts_in=amounts,
        max_amounts_in=max_amounts_in,
        expected_bpt_out=expected_bpt_out,
        min_bpt_out=min_bpt_out,
    )


def build_exit_exact_bpt_in(
    family: VaultPoolFamily,
    exiter: str,
    pool: PoolSnapshot,
    bpt_in: int,
    slippage: int,
    single_token_out: str | None = None,
    *,
    network: BalancerNetworkConfig = DEFAULT_NETWORK_CONFIG,
) -> ExitPoolAttributes:
    """Exit burning exactly bpt_in, proportionally or to a single token."""
    uses_eth = single_token_out is not None and is_eth(single_token_out)
    if single_token_out is None:
        expected = family.tokens_out_given_exact_bpt_in(pool, bpt_in, None)
        user_data = family.encoder.exit_exact_bpt_in_for_tokens_out(bpt_in)
    else:
        token = network.wrapped_native_asset if uses_eth else single_token_out
        index = position(pool.without_bpt(), token)
        expected = family.tokens_out_given_exact_bpt_in(pool, bpt_in, index)
        user_data = family.encoder.exit_exact_bpt_in_for_one_token_out(bpt_in, index)

    min_amounts_out = [subtract_slippage(amount, slippage) for amount in expected]
    assets, vault_min_amounts_out = _vault_assets(pool, family, min_amounts_out, uses_eth, network)
    transaction = encode_exit_pool(
        pool_id=pool.id,
        sender=exiter,
        recipient=exiter,
        assets=assets,
        min_amounts_out=vault_min_amounts_out,
        user_data=user_data,
        vault=network.vault,
    )
    logger.debug(
        "exit_exact_bpt_in_built",
        pool_id=pool.id,
        pool_type=pool.pool_type,
        bpt_in=bpt_in,
        single_token_out=single_token_out,
        expected_amounts_out=expected,
    )
    return ExitPoolAttributes(
        transaction=transaction,
        pool_id=pool.id,
        tokens_out=assets,
        expected_amounts_out=expected,
        min_amounts_out=min_amounts_out,
        expected_bpt_in=bpt_in,
        max_bpt_in=bpt_in,
    )


def build_exit_exact_tokens_out(
    family: VaultPoolFamily,
    exiter: str,
    pool: PoolSnapshot,
    tokens_out: Sequence[str],
    amounts_out: Sequence[int],
    slippage: int,
    *,
    network: BalancerNetworkConfig = DEFAULT_NETWORK_CONFIG,
) -> ExitPoolAttributes:
    """Exit withdrawing exact amounts with a slippage-protected maximum BPT in."""
    amounts, uses_eth = align_amounts(pool, tokens_out, amounts_out, network.wrapped_native_asset)
    expected_bpt_in = family.bpt_in_given_exact_tokens_out(pool, amounts)
    max_bpt_in = add_slippage(expected_bpt_in, slippage)

    user_data = family.encoder.exit_bpt_in_for_exact_tokens_out(amounts, max_bpt_in)
    assets, min_amounts_out = _vault_assets(pool, family, amounts, uses_eth, network)
    transaction = encode_exit_pool(
        pool_id=pool.id,
        sender=exiter,
        recipient=exiter,
        assets=assets,
        min_amounts_out=min_amounts_out,
        user_data=user_data,
        vault=network.vault,
    )
    logger.debug(
        "exit_exact_tokens_out_built",
        pool_id=pool.id,
        pool_type=pool.pool_type,
        expected_bpt_in=expected_bpt_in,
        max_bpt_in=max_bpt_in,
    )
    return ExitPoolAttributes(
        transaction=transaction,
        pool_id=pool.id,
        tokens_out=assets,
        expected_amounts_out=amounts,
        min_amounts_out=amounts,
        expected_bpt_in=expected_bpt_in,
        max_bpt_in=max_bpt_in,
    )
