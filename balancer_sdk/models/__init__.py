"""Data models: pool snapshots, transaction requests and wire types."""

from balancer_sdk.models.pool import PoolSnapshot, PoolToken, PoolType
from balancer_sdk.models.transaction import (
    ExitPoolAttributes,
    JoinPoolAttributes,
    TransactionRequest,
)

__all__ = [
    "ExitPoolAttributes",
    "JoinPoolAttributes",
    "PoolSnapshot",
    "PoolToken",
    "PoolType",
    "TransactionRequest",
]
