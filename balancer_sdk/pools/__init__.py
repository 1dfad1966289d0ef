"""Per-family pool calculators and the pool-type dispatcher."""

from balancer_sdk.pools.registry import (
    PoolTypeConcerns,
    concerns_for,
    get_pool_type_concerns,
    supported_pool_types,
)

__all__ = [
    "PoolTypeConcerns",
    "concerns_for",
    "get_pool_type_concerns",
    "supported_pool_types",
]
