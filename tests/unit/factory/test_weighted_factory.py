"""Tests for the weighted pool factory encoder."""

from dataclasses import replace

import pytest
from eth_abi import decode  # type: ignore[attr-defined]

from balancer_sdk.config import DEFAULT_NETWORK_CONFIG
from balancer_sdk.constants import ZERO_ADDRESS
from balancer_sdk.errors import InputLengthMismatchError, InvalidWeightsError, MaxSwapFeeError
from balancer_sdk.factory import (
    InitJoinPoolParameters,
    WeightedCreatePoolParameters,
    WeightedFactory,
)
from tests.helpers import BAL, DAI, ETH, USDC, USER, WETH, decode_user_data
from tests.helpers.constants import (
    OWNER,
    WEIGHTED_FACTORY,
    WEIGHTED_POOL_ADDRESS,
    WEIGHTED_POOL_ID,
)
from tests.helpers.factories import lower

CREATE_TYPES = ["string", "string", "address[]", "uint256[]", "address[]", "uint256", "address"]


@pytest.fixture
def factory() -> WeightedFactory:
    return WeightedFactory(DEFAULT_NETWORK_CONFIG)


@pytest.fixture
def params() -> WeightedCreatePoolParameters:
    return WeightedCreatePoolParameters(
        factory_address=WEIGHTED_FACTORY,
        name="80BAL-20WETH",
        symbol="B-80BAL-20WETH",
        token_addresses=[WETH, BAL],
        normalized_weights=[2 * 10**17, 8 * 10**17],
        rate_providers=[ZERO_ADDRESS, ZERO_ADDRESS],
        swap_fee="0.01",
        owner=OWNER,
    )


class TestCreate:
    def test_weights_follow_tokens(
        self, factory: WeightedFactory, params: WeightedCreatePoolParameters
    ) -> None:
        tx = factory.create(params)
        args = decode(CREATE_TYPES, bytes.fromhex(tx.data[10:]))

        assert lower(args[2]) == [BAL, WETH]
        assert list(args[3]) == [8 * 10**17, 2 * 10**17]
        assert args[5] == 10**16
        assert args[6].lower() == OWNER
        assert tx.to == WEIGHTED_FACTORY
        assert tx.attributes["normalizedWeights"] == [8 * 10**17, 2 * 10**17]

    def test_eight_tokens(
        self, factory: WeightedFactory, params: WeightedCreatePoolParameters
    ) -> None:
        tokens = [f"0x{i:040x}" for i in range(1, 9)]
        weights = [125 * 10**15] * 8
        tx = factory.create(
            replace(
                params,
                token_addresses=tokens,
                normalized_weights=weights,
                rate_providers=[ZERO_ADDRESS] * 8,
            )
        )
        assert tx.attributes["tokens"] == tokens


class TestCreateValidation:
    def test_weights_must_sum_to_one(
        self, factory: WeightedFactory, params: WeightedCreatePoolParameters
    ) -> None:
        with pytest.raises(InvalidWeightsError):
            factory.create(replace(params, normalized_weights=[2 * 10**17, 7 * 10**17]))

    def test_minimum_weight(
        self, factory: WeightedFactory, params: WeightedCreatePoolParameters
    ) -> None:
        with pytest.raises(InvalidWeightsError):
            factory.create(replace(params, normalized_weights=[10**16 - 1, 99 * 10**16 + 1]))

    def test_single_token(
        self, factory: WeightedFactory, params: WeightedCreatePoolParameters
    ) -> None:
        with pytest.raises(InvalidWeightsError):
            factory.create(
                replace(
                    params,
                    token_addresses=[BAL],
                    normalized_weights=[10**18],
                    rate_providers=[ZERO_ADDRESS],
                )
            )

    def test_too_many_tokens(
        self, factory: WeightedFactory, params: WeightedCreatePoolParameters
    ) -> None:
        tokens = [f"0x{i:040x}" for i in range(1, 10)]
        with pytest.raises(InvalidWeightsError):
            factory.create(
                replace(
                    params,
                    token_addresses=tokens,
                    normalized_weights=[10**17] * 9,
                    rate_providers=[ZERO_ADDRESS] * 9,
                )
            )

    def test_length_mismatch(
        self, factory: WeightedFactory, params: WeightedCreatePoolParameters
    ) -> None:
        with pytest.raises(InputLengthMismatchError, match="normalized_weights"):
            factory.create(replace(params, normalized_weights=[10**18]))

    def test_fee_too_large(
        self, factory: WeightedFactory, params: WeightedCreatePoolParameters
    ) -> None:
        with pytest.raises(MaxSwapFeeError):
            factory.create(replace(params, swap_fee="0.5"))


class TestBuildInitJoin:
    def test_no_bpt_slot(self, factory: WeightedFactory) -> None:
        tx = factory.build_init_join(
            InitJoinPoolParameters(
                joiner=USER,
                pool_id=WEIGHTED_POOL_ID,
                pool_address=WEIGHTED_POOL_ADDRESS,
                tokens_in=[USDC, DAI],
                amounts_in=[10**6, 10**18],
            )
        )
        request = tx.attributes["joinPoolRequest"]
        assert request["assets"] == [DAI, USDC]
        assert request["maxAmountsIn"] == [10**18, 10**6]
        assert decode_user_data(request["userData"], ["uint256", "uint256[]"]) == (
            0,
            (10**18, 10**6),
        )

    def test_native_eth_value(self, factory: WeightedFactory) -> None:
        tx = factory.build_init_join(
            InitJoinPoolParameters(
                joiner=USER,
                pool_id=WEIGHTED_POOL_ID,
                pool_address=WEIGHTED_POOL_ADDRESS,
                tokens_in=[ETH, BAL],
                amounts_in=[10**18, 4 * 10**18],
            )
        )
        assert tx.attributes["joinPoolRequest"]["assets"] == [BAL, ETH]
        assert tx.value == 10**18
