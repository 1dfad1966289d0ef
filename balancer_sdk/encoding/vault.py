"""Vault call encoding: joinPool, exitPool and single swaps."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

from balancer_sdk.constants import BALANCER_VAULT, MAX_UINT256
from balancer_sdk.encoding.abi import VAULT_ABI, encode_function_call
from balancer_sdk.models.transaction import TransactionRequest
from balancer_sdk.models.types import address_to_bytes, normalize_address, pool_id_to_bytes


class SwapKind(IntEnum):
    GIVEN_IN = 0
    GIVEN_OUT = 1


def _user_data_bytes(user_data: str) -> bytes:
    return bytes.fromhex(user_data[2:] if user_data.startswith("0x") else user_data)


def _join_or_exit(
    function_name: str,
    request_name: str,
    limits_name: str,
    *,
    pool_id: str,
    sender: str,
    recipient: str,
    assets: Sequence[str],
    limits: Sequence[int],
    user_data: str,
    internal_balance: bool,
    vault: str,
    value: int,
) -> TransactionRequest:
    data = encode_function_call(
        VAULT_ABI,
        function_name,
        [
            pool_id_to_bytes(pool_id),
            address_to_bytes(sender),
            address_to_bytes(recipient),
            (
                [address_to_bytes(asset) for asset in assets],
                list(limits),
                _user_data_bytes(user_data),
                internal_balance,
            ),
        ],
    )
    internal_name = "fromInternalBalance" if function_name == "joinPool" else "toInternalBalance"
    attributes = {
        "poolId": pool_id,
        "sender": normalize_address(sender),
        "recipient": normalize_address(recipient),
        request_name: {
            "assets": [normalize_address(asset) for asset in assets],
            limits_name: list(limits),
            "userData": user_data,
            internal_name: internal_balance,
        },
    }
    return TransactionRequest(
        to=normalize_address(vault),
        data=data,
        function_name=function_name,
        attributes=attributes,
        value=value,
    )


def encode_join_pool(
    *,
    pool_id: str,
    sender: str,
    recipient: str,
    assets: Sequence[str],
    max_amounts_in: Sequence[int],
    user_data: str,
    from_internal_balance: bool = False,
    vault: str = BALANCER_VAULT,
    value: int = 0,
) -> TransactionRequest:
    """Vault.joinPool(poolId, sender, recipient, JoinPoolRequest)."""
    return _join_or_exit(
        "joinPool",
        "joinPoolRequest",
        "maxAmountsIn",
        pool_id=pool_id,
        sender=sender,
        recipient=recipient,
        assets=assets,
        limits=max_amounts_in,
        user_data=user_data,
        internal_balance=from_internal_balance,
        vault=vault,
        value=value,
    )


def encode_exit_pool(
    *,
    pool_id: str,
    sender: str,
    recipient: str,
    assets: Sequence[str],
    min_amounts_out: Sequence[int],
    user_data: str,
    to_internal_balance: bool = False,
    vault: str = BALANCER_VAULT,
) -> TransactionRequest:
    """Vault.exitPool(poolId, sender, recipient, ExitPoolRequest)."""
    return _join_or_exit(
        "exitPool",
        "exitPoolRequest",
        "minAmountsOut",
        pool_id=pool_id,
        sender=sender,
        recipient=recipient,
        assets=assets,
        limits=min_amounts_out,
        user_data=user_data,
        internal_balance=to_internal_balance,
        vault=vault,
        value=0,
    )


def encode_swap(
    *,
    pool_id: str,
    kind: SwapKind,
    asset_in: str,
    asset_out: str,
    amount: int,
    sender: str,
    recipient: str,
    limit: int,
    deadline: int = MAX_UINT256,
    vault: str = BALANCER_VAULT,
    value: int = 0,
) -> TransactionRequest:
    """Vault.swap(SingleSwap, FundManagement, limit, deadline).

    For GIVEN_IN swaps `limit` is the minimum amount out; for GIVEN_OUT it is
    the maximum amount in.
    """
    data = encode_function_call(
        VAULT_ABI,
        "swap",
        [
            (
                pool_id_to_bytes(pool_id),
                int(kind),
                address_to_bytes(asset_in),
                address_to_bytes(asset_out),
                amount,
                b"",
            ),
            (address_to_bytes(sender), False, address_to_bytes(recipient), False),
            limit,
            deadline,
        ],
    )
    attributes = {
        "singleSwap": {
            "poolId": pool_id,
            "kind": int(kind),
            "assetIn": normalize_address(asset_in),
            "assetOut": normalize_address(asset_out),
            "amount": amount,
            "userData": "0x",
        },
        "funds": {
            "sender": normalize_address(sender),
            "fromInternalBalance": False,
            "recipient": normalize_address(recipient),
            "toInternalBalance": False,
        },
        "limit": limit,
        "deadline": deadline,
    }
    return TransactionRequest(
        to=normalize_address(vault),
        data=data,
        function_name="swap",
        attributes=attributes,
        value=value,
    )
