"""Balancer SDK error classes.

Every failure is a distinct, catchable class. Where a failure corresponds to
an on-chain revert, the Balancer error code is noted in the docstring.
Arithmetic failures are `ArithmeticError` subclasses (see `safe_int`);
caller-input failures are also `ValueError` subclasses.
"""

from balancer_sdk.safe_int import DivisionByZero, SafeIntError, Uint256Overflow, Underflow

__all__ = [
    "AmplificationParameterError",
    "BalancerError",
    "DivisionByZero",
    "DuplicateTokenError",
    "InputLengthMismatchError",
    "InternalEncodingError",
    "InvalidInputError",
    "InvalidPoolStateError",
    "InvalidScalingFactorError",
    "InvalidSlippageError",
    "InvalidWeightsError",
    "InvariantRatioError",
    "LengthMismatchError",
    "MaxSwapFeeError",
    "MinSwapFeeError",
    "SafeIntError",
    "StableGetBalanceDidNotConverge",
    "StableInvariantDidNotConverge",
    "SubgraphError",
    "TokenNotFoundError",
    "Uint256Overflow",
    "Underflow",
    "UnsupportedOperationError",
    "UnsupportedPoolTypeError",
]


class BalancerError(Exception):
    """Base error for SDK operations."""

    pass


class LengthMismatchError(BalancerError, ValueError):
    """Parallel arrays do not have the same length."""

    pass


class InputLengthMismatchError(LengthMismatchError):
    """BAL#103: factory inputs have mismatched lengths."""

    pass


class InvalidInputError(BalancerError, ValueError):
    """Caller input is malformed, such as a negative amount or an unparsable number."""

    pass


class DuplicateTokenError(InvalidInputError):
    """BAL#101: a token appears twice where a strictly sorted list is required."""

    pass


class MinSwapFeeError(BalancerError, ValueError):
    """BAL#203: swap fee is zero or below the minimum."""

    pass


class MaxSwapFeeError(BalancerError, ValueError):
    """BAL#202: swap fee is above the maximum."""

    pass


class AmplificationParameterError(BalancerError, ValueError):
    """BAL#300 / BAL#301: amplification outside [MIN_AMP, MAX_AMP]."""

    pass


class InvalidWeightsError(BalancerError, ValueError):
    """BAL#308: normalized weights are below the minimum or do not add to one."""

    pass


class InvalidSlippageError(BalancerError, ValueError):
    """Slippage must be a fraction in [0, 1)."""

    pass


class InvalidScalingFactorError(BalancerError, ValueError):
    """Scaling factor must be positive."""

    pass


class TokenNotFoundError(BalancerError, ValueError):
    """Token is not part of the pool."""

    pass


class InvalidPoolStateError(BalancerError):
    """Pool snapshot is malformed or lacks a parameter its pool type needs."""

    pass


class UnsupportedPoolTypeError(BalancerError):
    """No calculators are registered for this pool type."""

    pass


class UnsupportedOperationError(BalancerError):
    """The pool type (or version) does not support this join/exit kind."""

    pass


class InvariantRatioError(BalancerError):
    """BAL#307 / BAL#306: join or exit changes the invariant beyond its limit."""

    pass


class StableInvariantDidNotConverge(BalancerError, ArithmeticError):
    """BAL#321: Newton-Raphson iteration for the stable invariant did not converge."""

    pass


class StableGetBalanceDidNotConverge(BalancerError, ArithmeticError):
    """BAL#322: Newton-Raphson iteration for a stable balance did not converge."""

    pass


class InternalEncodingError(BalancerError):
    """ABI fragment not found: the packaged ABI does not match the call."""

    pass


class SubgraphError(BalancerError):
    """The subgraph returned GraphQL errors or an unexpected payload."""

    pass
