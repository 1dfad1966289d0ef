"""Mathematical primitives for pool calculations.

- Bfp: 18-decimal fixed-point arithmetic (Balancer FixedPoint / LogExpMath)
- slippage helpers for minimum / maximum bounds
"""

from balancer_sdk.math.fixed_point import AMP_PRECISION, ONE_18, Bfp
from balancer_sdk.math.slippage import add_slippage, bps_to_slippage, subtract_slippage

__all__ = [
    "AMP_PRECISION",
    "ONE_18",
    "Bfp",
    "add_slippage",
    "bps_to_slippage",
    "subtract_slippage",
]
