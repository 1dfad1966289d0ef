"""Subgraph data access: pool snapshots and pool shares."""

from balancer_sdk.data.pool_shares import (
    DEFAULT_POOL_PAGE_SIZE,
    DEFAULT_USER_PAGE_SIZE,
    PoolShareAttribute,
    PoolSharesRepository,
)
from balancer_sdk.data.pools import PoolsRepository, parse_subgraph_pool
from balancer_sdk.data.subgraph import SubgraphClient

__all__ = [
    "DEFAULT_POOL_PAGE_SIZE",
    "DEFAULT_USER_PAGE_SIZE",
    "PoolShareAttribute",
    "PoolSharesRepository",
    "PoolsRepository",
    "SubgraphClient",
    "parse_subgraph_pool",
]
