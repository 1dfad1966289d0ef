"""ABI encoding for pool userData, Vault calls and factory calls."""

from balancer_sdk.encoding.abi import (
    COMPOSABLE_STABLE_FACTORY_ABI,
    VAULT_ABI,
    WEIGHTED_FACTORY_ABI,
    encode_function_call,
    find_function,
)
from balancer_sdk.encoding.user_data import (
    ComposableStablePoolEncoder,
    StablePoolEncoder,
    WeightedPoolEncoder,
)
from balancer_sdk.encoding.vault import SwapKind, encode_exit_pool, encode_join_pool, encode_swap

__all__ = [
    "COMPOSABLE_STABLE_FACTORY_ABI",
    "VAULT_ABI",
    "WEIGHTED_FACTORY_ABI",
    "ComposableStablePoolEncoder",
    "StablePoolEncoder",
    "SwapKind",
    "WeightedPoolEncoder",
    "encode_exit_pool",
    "encode_function_call",
    "encode_join_pool",
    "encode_swap",
    "find_function",
]
