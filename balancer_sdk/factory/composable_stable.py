"""ComposableStablePoolFactory encoder: pool creation and the first join."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from balancer_sdk.assets import AssetHelpers, is_eth
from balancer_sdk.constants import INIT_JOIN_MAX_BPT_IN, MAX_AMP, MIN_AMP
from balancer_sdk.encoding.abi import COMPOSABLE_STABLE_FACTORY_ABI, encode_function_call
from balancer_sdk.encoding.user_data import ComposableStablePoolEncoder
from balancer_sdk.encoding.vault import encode_join_pool
from balancer_sdk.errors import AmplificationParameterError
from balancer_sdk.factory.base import (
    InitJoinPoolParameters,
    PoolFactory,
    SwapFee,
    check_lengths,
    check_swap_fee,
    parse_swap_fee,
)
from balancer_sdk.models.transaction import TransactionRequest
from balancer_sdk.models.types import address_to_bytes, normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class ComposableStableCreatePoolParameters:
    """Inputs of ComposableStablePoolFactory.create.

    Attributes:
        factory_address: Factory contract to call
        name: Pool (BPT) name
        symbol: Pool (BPT) symbol
        token_addresses: Pool tokens, any order
        amplification_parameter: Unscaled A, within [1, 5000]
        rate_providers: Rate provider per token (zero address for none)
        token_rate_cache_durations: Rate cache duration per token, seconds
        exempt_from_yield_protocol_fee_flags: Yield fee exemption per token
        swap_fee: Fee fraction, e.g. "0.01" for 1%
        owner: Pool owner
    """

    factory_address: str
    name: str
    symbol: str
    token_addresses: Sequence[str]
    amplification_parameter: int
    rate_providers: Sequence[str]
    token_rate_cache_durations: Sequence[int]
    exempt_from_yield_protocol_fee_flags: Sequence[bool]
    swap_fee: SwapFee
    owner: str


class ComposableStableFactory(PoolFactory):
    """Builds create and init-join transactions for composable stable pools."""

    def check_create_inputs(self, params: ComposableStableCreatePoolParameters) -> int:
        """Validate create inputs, returning the scaled swap fee.

        Raises:
            InputLengthMismatchError: If a per-token list differs in length
            MinSwapFeeError: If the swap fee is zero or below the minimum
            MaxSwapFeeError: If the swap fee is above the maximum
            AmplificationParameterError: If A is outside [1, 5000]
        """
        check_lengths(
            params.token_addresses,
            rate_providers=params.rate_providers,
            token_rate_cache_durations=params.token_rate_cache_durations,
            exempt_from_yield_protocol_fee_flags=params.exempt_from_yield_protocol_fee_flags,
        )
        swap_fee = parse_swap_fee(params.swap_fee)
        check_swap_fee(swap_fee)
        if not MIN_AMP <= int(params.amplification_parameter) <= MAX_AMP:
            raise AmplificationParameterError(
                f"Amplification {params.amplification_parameter} outside [{MIN_AMP}, {MAX_AMP}]"
            )
        return swap_fee

    def create(self, params: ComposableStableCreatePoolParameters) -> TransactionRequest:
        swap_fee = self.check_create_inputs(params)

        (
            sorted_tokens,
            sorted_rate_providers,
            sorted_cache_durations,
            sorted_exempt_flags,
        ) = AssetHelpers(self.wrapped_native_asset).sort_tokens(
            params.token_addresses,
            params.rate_providers,
            params.token_rate_cache_durations,
            params.exempt_from_yield_protocol_fee_flags,
        )

        args = [
            params.name,
            params.symbol,
            [address_to_bytes(t) for t in sorted_tokens],
            int(params.amplification_parameter),
            [address_to_bytes(r) for r in sorted_rate_providers],
            [int(d) for d in sorted_cache_durations],
            [bool(f) for f in sorted_exempt_flags],
            swap_fee,
            address_to_bytes(params.owner),
        ]
        data = encode_function_call(COMPOSABLE_STABLE_FACTORY_ABI, "create", args)
        attributes = {
            "name": params.name,
            "symbol": params.symbol,
            "tokens": [normalize_address(t) for t in sorted_tokens],
            "amplificationParameter": int(params.amplification_parameter),
            "rateProviders": [normalize_address(r) for r in sorted_rate_providers],
            "tokenRateCacheDurations": [int(d) for d in sorted_cache_durations],
            "exemptFromYieldProtocolFeeFlags": [bool(f) for f in sorted_exempt_flags],
            "swapFeePercentage": swap_fee,
            "owner": normalize_address(params.owner),
        }
        logger.debug(
            "composable_stable_create_built",
            factory=params.factory_address,
            tokens=attributes["tokens"],
            swap_fee=swap_fee,
        )
        return TransactionRequest(
            to=normalize_address(params.factory_address),
            data=data,
            function_name="create",
            attributes=attributes,
        )

    def build_init_join(self, params: InitJoinPoolParameters) -> TransactionRequest:
        """INIT join seeding every token; the pool's own BPT gets amount 0.

        The BPT max-in must cover the pre-minted supply minus the BPT minted
        by the join (BAL#506), so it is the largest value that leaves room
        for the pre-mint.
        """
        check_lengths(params.tokens_in, amounts_in=params.amounts_in)
        tokens_with_bpt = [*params.tokens_in, params.pool_address]
        amounts_with_bpt = [*(int(a) for a in params.amounts_in), 0]
        max_amounts_with_bpt = [*(int(a) for a in params.amounts_in), INIT_JOIN_MAX_BPT_IN]

        sorted_tokens, sorted_amounts, sorted_max_amounts = AssetHelpers(
            self.wrapped_native_asset
        ).sort_tokens(tokens_with_bpt, amounts_with_bpt, max_amounts_with_bpt)

        user_data = ComposableStablePoolEncoder.join_init(sorted_amounts)
        return encode_join_pool(
            pool_id=params.pool_id,
            sender=params.joiner,
            recipient=params.joiner,
            assets=sorted_tokens,
            max_amounts_in=sorted_max_amounts,
            user_data=user_data,
            vault=self.network_config.vault,
            value=sum(int(a) for t, a in zip(params.tokens_in, params.amounts_in) if is_eth(t)),
        )
