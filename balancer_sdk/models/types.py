"""Shared type definitions.

Annotated pydantic types used by the subgraph and API models, plus address
helpers used throughout the library.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from balancer_sdk.errors import InvalidInputError

UINT256_MAX = 2**256 - 1


def validate_uint256(value: Any) -> str:
    """Validate that a value is a uint256, returning it as a decimal string.

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")
    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return str(int_value)


# Ethereum address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]

# Balancer pool id (bytes32)
PoolId = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{64}$")]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase with a 0x prefix.

    Raises:
        ValueError: If validate=True and address is not a valid Ethereum address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x") or len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def address_to_bytes(address: str) -> bytes:
    """20-byte form of an address, for ABI encoding."""
    addr = normalize_address(address)
    if not is_valid_address(addr):
        raise InvalidInputError(f"Invalid address: {address}")
    return bytes.fromhex(addr[2:])


def pool_id_to_bytes(pool_id: str) -> bytes:
    """32-byte form of a pool id, for ABI encoding."""
    raw = pool_id[2:] if pool_id.startswith("0x") else pool_id
    try:
        value = bytes.fromhex(raw)
    except ValueError as err:
        raise InvalidInputError(f"Pool id is not hex: '{pool_id}'") from err
    if len(value) != 32:
        raise InvalidInputError(f"Pool id must be 32 bytes, got '{pool_id}'")
    return value
