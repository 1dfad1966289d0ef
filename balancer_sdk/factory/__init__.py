"""Pool factory encoders."""

from balancer_sdk.factory.base import InitJoinPoolParameters, PoolFactory
from balancer_sdk.factory.composable_stable import (
    ComposableStableCreatePoolParameters,
    ComposableStableFactory,
)
from balancer_sdk.factory.weighted import WeightedCreatePoolParameters, WeightedFactory

__all__ = [
    "ComposableStableCreatePoolParameters",
    "ComposableStableFactory",
    "InitJoinPoolParameters",
    "PoolFactory",
    "WeightedCreatePoolParameters",
    "WeightedFactory",
]
