"""Pytest configuration and fixtures."""

import pytest

from balancer_sdk.models import PoolSnapshot
from tests.helpers.factories import (
    make_composable_pool,
    make_linear_pool,
    make_stable_pool,
    make_weighted_pool,
)


@pytest.fixture
def weighted_pool() -> PoolSnapshot:
    """80/20 BAL/WETH pool with a 1% fee."""
    return make_weighted_pool()


@pytest.fixture
def stable_pool() -> PoolSnapshot:
    """Balanced DAI/USDC/USDT pool, A = 200."""
    return make_stable_pool()


@pytest.fixture
def composable_pool() -> PoolSnapshot:
    """Balanced DAI/USDC/USDT composable stable pool (v3)."""
    return make_composable_pool()


@pytest.fixture
def linear_pool() -> PoolSnapshot:
    """bb-a-USDC with the main balance between its targets."""
    return make_linear_pool()
