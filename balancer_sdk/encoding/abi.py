"""Minimal ABI fragments and a generic call encoder.

Only the functions this library encodes are listed. Fragments follow the
JSON ABI format so they can be checked against published artifacts.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from eth_abi import encode  # type: ignore[attr-defined]
from eth_utils import function_abi_to_4byte_selector
from eth_utils.abi import collapse_if_tuple

from balancer_sdk.errors import InternalEncodingError

_JOIN_EXIT_REQUEST = {
    "name": "request",
    "type": "tuple",
    "components": [
        {"name": "assets", "type": "address[]"},
        {"name": "limits", "type": "uint256[]"},
        {"name": "userData", "type": "bytes"},
        {"name": "internalBalance", "type": "bool"},
    ],
}

VAULT_ABI: list[dict[str, Any]] = [
    {
        "name": "joinPool",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {"name": "poolId", "type": "bytes32"},
            {"name": "sender", "type": "address"},
            {"name": "recipient", "type": "address"},
            _JOIN_EXIT_REQUEST,
        ],
        "outputs": [],
    },
    {
        "name": "exitPool",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "poolId", "type": "bytes32"},
            {"name": "sender", "type": "address"},
            {"name": "recipient", "type": "address"},
            _JOIN_EXIT_REQUEST,
        ],
        "outputs": [],
    },
    {
        "name": "swap",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {
                "name": "singleSwap",
                "type": "tuple",
                "components": [
                    {"name": "poolId", "type": "bytes32"},
                    {"name": "kind", "type": "uint8"},
                    {"name": "assetIn", "type": "address"},
                    {"name": "assetOut", "type": "address"},
                    {"name": "amount", "type": "uint256"},
                    {"name": "userData", "type": "bytes"},
                ],
            },
            {
                "name": "funds",
                "type": "tuple",
                "components": [
                    {"name": "sender", "type": "address"},
                    {"name": "fromInternalBalance", "type": "bool"},
                    {"name": "recipient", "type": "address"},
                    {"name": "toInternalBalance", "type": "bool"},
                ],
            },
            {"name": "limit", "type": "uint256"},
            {"name": "deadline", "type": "uint256"},
        ],
        "outputs": [{"name": "amountCalculated", "type": "uint256"}],
    },
]

COMPOSABLE_STABLE_FACTORY_ABI: list[dict[str, Any]] = [
    {
        "name": "create",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "name", "type": "string"},
            {"name": "symbol", "type": "string"},
            {"name": "tokens", "type": "address[]"},
            {"name": "amplificationParameter", "type": "uint256"},
            {"name": "rateProviders", "type": "address[]"},
            {"name": "tokenRateCacheDurations", "type": "uint256[]"},
            {"name": "exemptFromYieldProtocolFeeFlags", "type": "bool[]"},
            {"name": "swapFeePercentage", "type": "uint256"},
            {"name": "owner", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "address"}],
    },
]

WEIGHTED_FACTORY_ABI: list[dict[str, Any]] = [
    {
        "name": "create",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "name", "type": "string"},
            {"name": "symbol", "type": "string"},
            {"name": "tokens", "type": "address[]"},
            {"name": "normalizedWeights", "type": "uint256[]"},
            {"name": "rateProviders", "type": "address[]"},
            {"name": "swapFeePercentage", "type": "uint256"},
            {"name": "owner", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "address"}],
    },
]


def find_function(abi: Sequence[dict[str, Any]], name: str) -> dict[str, Any]:
    """Look up a function fragment by name.

    Raises:
        InternalEncodingError: If the ABI has no such function
    """
    for fragment in abi:
        if fragment.get("type") == "function" and fragment.get("name") == name:
            return fragment
    raise InternalEncodingError(f"Function '{name}' not found in ABI")


def encode_function_call(abi: Sequence[dict[str, Any]], name: str, args: Sequence[Any]) -> str:
    """Encode selector + arguments for a call, returned as 0x hex.

    Addresses and bytes32 values must already be bytes; tuples are Python tuples.
    """
    fragment = find_function(abi, name)
    types = [collapse_if_tuple(param) for param in fragment["inputs"]]
    if len(types) != len(args):
        raise InternalEncodingError(
            f"Function '{name}' takes {len(types)} arguments, got {len(args)}"
        )
    selector = function_abi_to_4byte_selector(fragment)
    return "0x" + (selector + encode(types, list(args))).hex()
