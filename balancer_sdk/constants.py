"""Protocol constants for Balancer V2.

Centralizes well-known addresses and the limits enforced by the contracts.
"""

from balancer_sdk.models.types import is_valid_address
from balancer_sdk.safe_int import UINT256_MAX

# Vault address (same on every network via CREATE2)
BALANCER_VAULT = "0xba12222222228d8ba445958a75a0704d566bf2c8"

# Native ETH is passed to the Vault as the zero address
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

MAX_UINT256 = UINT256_MAX

# ComposableStablePool mints 2^111 BPT to the Vault on creation
# (_PREMINTED_TOKEN_BALANCE in ComposableStablePoolStorage.sol).
PREMINTED_TOKEN_BALANCE = 2**111

# Max BPT "in" for the init join. The Vault requires it to be at least
# PREMINT - bptAmountOut (BAL#506); the premint is reserved out of the range.
INIT_JOIN_MAX_BPT_IN = MAX_UINT256 - PREMINTED_TOKEN_BALANCE

# Swap fee bounds from BasePool.sol (0.0001% and 10%)
MIN_SWAP_FEE_PERCENTAGE = 10**12
MAX_SWAP_FEE_PERCENTAGE = 10**17

# Amplification bounds from StableMath.sol (unscaled)
MIN_AMP = 1
MAX_AMP = 5000

# Weighted pool limits from WeightedMath.sol / WeightedPool.sol
MIN_WEIGHT = 10**16
MAX_INVARIANT_RATIO = 3 * 10**18
MIN_INVARIANT_RATIO = 7 * 10**17

# Pools hold at most 8 tokens (BasePool._MAX_TOKENS); composable adds its BPT
MAX_TOKENS = 8


def _validate_address(name: str, address: str) -> str:
    """Validate a constant address at import time."""
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


_validate_address("BALANCER_VAULT", BALANCER_VAULT)
_validate_address("ZERO_ADDRESS", ZERO_ADDRESS)
