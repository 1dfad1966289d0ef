"""WeightedPoolFactory encoder: pool creation and the first join."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from balancer_sdk.assets import AssetHelpers, is_eth
from balancer_sdk.constants import MAX_TOKENS, MIN_WEIGHT
from balancer_sdk.encoding.abi import WEIGHTED_FACTORY_ABI, encode_function_call
from balancer_sdk.encoding.user_data import WeightedPoolEncoder
from balancer_sdk.encoding.vault import encode_join_pool
from balancer_sdk.errors import InvalidWeightsError
from balancer_sdk.factory.base import (
    InitJoinPoolParameters,
    PoolFactory,
    SwapFee,
    check_lengths,
    check_swap_fee,
    parse_swap_fee,
)
from balancer_sdk.math.fixed_point import ONE_18
from balancer_sdk.models.transaction import TransactionRequest
from balancer_sdk.models.types import address_to_bytes, normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class WeightedCreatePoolParameters:
    """Inputs of WeightedPoolFactory.create.

    normalized_weights are 18-decimal fixed point and must add up to 1e18.
    """

    factory_address: str
    name: str
    symbol: str
    token_addresses: Sequence[str]
    normalized_weights: Sequence[int]
    rate_providers: Sequence[str]
    swap_fee: SwapFee
    owner: str


class WeightedFactory(PoolFactory):
    """Builds create and init-join transactions for weighted pools."""

    def check_create_inputs(self, params: WeightedCreatePoolParameters) -> int:
        check_lengths(
            params.token_addresses,
            normalized_weights=params.normalized_weights,
            rate_providers=params.rate_providers,
        )
        swap_fee = parse_swap_fee(params.swap_fee)
        check_swap_fee(swap_fee)
        if not 2 <= len(params.token_addresses) <= MAX_TOKENS:
            raise InvalidWeightsError(
                f"Weighted pools hold 2 to {MAX_TOKENS} tokens, got {len(params.token_addresses)}"
            )
        weights = [int(w) for w in params.normalized_weights]
        if any(w < MIN_WEIGHT for w in weights):
            raise InvalidWeightsError(f"Every weight must be at least {MIN_WEIGHT}")
        if sum(weights) != ONE_18:
            raise InvalidWeightsError(f"Weights add up to {sum(weights)}, expected {ONE_18}")
        return swap_fee

    def create(self, params: WeightedCreatePoolParameters) -> TransactionRequest:
        swap_fee = self.check_create_inputs(params)
        sorted_tokens, sorted_weights, sorted_rate_providers = AssetHelpers(
            self.wrapped_native_asset
        ).sort_tokens(params.token_addresses, params.normalized_weights, params.rate_providers)

        args = [
            params.name,
            params.symbol,
            [address_to_bytes(t) for t in sorted_tokens],
            [int(w) for w in sorted_weights],
            [address_to_bytes(r) for r in sorted_rate_providers],
            swap_fee,
            address_to_bytes(params.owner),
        ]
        data = encode_function_call(WEIGHTED_FACTORY_ABI, "create", args)
        attributes = {
            "name": params.name,
            "symbol": params.symbol,
            "tokens": [normalize_address(t) for t in sorted_tokens],
            "normalizedWeights": [int(w) for w in sorted_weights],
            "rateProviders": [normalize_address(r) for r in sorted_rate_providers],
            "swapFeePercentage": swap_fee,
            "owner": normalize_address(params.owner),
        }
        logger.debug("weighted_create_built", factory=params.factory_address, swap_fee=swap_fee)
        return TransactionRequest(
            to=normalize_address(params.factory_address),
            data=data,
            function_name="create",
            attributes=attributes,
        )

    def build_init_join(self, params: InitJoinPoolParameters) -> TransactionRequest:
        """INIT join; weighted pools do not register their BPT with the Vault."""
        check_lengths(params.tokens_in, amounts_in=params.amounts_in)
        sorted_tokens, sorted_amounts = AssetHelpers(self.wrapped_native_asset).sort_tokens(
            params.tokens_in, [int(a) for a in params.amounts_in]
        )
        return encode_join_pool(
            pool_id=params.pool_id,
            sender=params.joiner,
            recipient=params.joiner,
            assets=sorted_tokens,
            max_amounts_in=sorted_amounts,
            user_data=WeightedPoolEncoder.join_init(sorted_amounts),
            vault=self.network_config.vault,
            value=sum(int(a) for t, a in zip(params.tokens_in, params.amounts_in) if is_eth(t)),
        )
