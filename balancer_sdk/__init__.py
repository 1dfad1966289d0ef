"""Balancer V2 client library: pool math, quoting and transaction encoding."""

__version__ = "0.1.0"

from balancer_sdk.assets import AssetHelpers, sort_tokens
from balancer_sdk.config import BalancerNetworkConfig, Network, get_network_config
from balancer_sdk.errors import (
    AmplificationParameterError,
    BalancerError,
    DivisionByZero,
    DuplicateTokenError,
    InputLengthMismatchError,
    InternalEncodingError,
    InvalidInputError,
    InvalidPoolStateError,
    InvalidSlippageError,
    InvalidWeightsError,
    InvariantRatioError,
    LengthMismatchError,
    MaxSwapFeeError,
    MinSwapFeeError,
    SafeIntError,
    StableGetBalanceDidNotConverge,
    StableInvariantDidNotConverge,
    SubgraphError,
    TokenNotFoundError,
    Uint256Overflow,
    Underflow,
    UnsupportedOperationError,
    UnsupportedPoolTypeError,
)
from balancer_sdk.factory import (
    ComposableStableCreatePoolParameters,
    ComposableStableFactory,
    InitJoinPoolParameters,
    WeightedCreatePoolParameters,
    WeightedFactory,
)
from balancer_sdk.math import Bfp, add_slippage, bps_to_slippage, subtract_slippage
from balancer_sdk.math.fixed_point import (
    InvalidExponent,
    LogExpMathError,
    ProductOutOfBounds,
    XOutOfBounds,
    YOutOfBounds,
)
from balancer_sdk.models import (
    ExitPoolAttributes,
    JoinPoolAttributes,
    PoolSnapshot,
    PoolToken,
    PoolType,
    TransactionRequest,
)
from balancer_sdk.pools import PoolTypeConcerns, concerns_for, get_pool_type_concerns

__all__ = [
    "AmplificationParameterError",
    "AssetHelpers",
    "BalancerError",
    "BalancerNetworkConfig",
    "Bfp",
    "ComposableStableCreatePoolParameters",
    "ComposableStableFactory",
    "DivisionByZero",
    "DuplicateTokenError",
    "ExitPoolAttributes",
    "InitJoinPoolParameters",
    "InputLengthMismatchError",
    "InternalEncodingError",
    "InvalidExponent",
    "InvalidInputError",
    "InvalidPoolStateError",
    "InvalidSlippageError",
    "InvalidWeightsError",
    "InvariantRatioError",
    "JoinPoolAttributes",
    "LengthMismatchError",
    "LogExpMathError",
    "MaxSwapFeeError",
    "MinSwapFeeError",
    "Network",
    "PoolSnapshot",
    "PoolToken",
    "PoolType",
    "PoolTypeConcerns",
    "ProductOutOfBounds",
    "SafeIntError",
    "StableGetBalanceDidNotConverge",
    "StableInvariantDidNotConverge",
    "SubgraphError",
    "TokenNotFoundError",
    "TransactionRequest",
    "Uint256Overflow",
    "Underflow",
    "UnsupportedOperationError",
    "UnsupportedPoolTypeError",
    "WeightedCreatePoolParameters",
    "WeightedFactory",
    "XOutOfBounds",
    "YOutOfBounds",
    "__version__",
    "add_slippage",
    "bps_to_slippage",
    "concerns_for",
    "get_network_config",
    "get_pool_type_concerns",
    "sort_tokens",
    "subtract_slippage",
]
