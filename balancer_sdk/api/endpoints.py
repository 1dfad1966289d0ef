"""API endpoints for quoting and encoding.

Nothing here signs or submits; responses are transaction requests for the
caller to sign.
"""

import structlog
from fastapi import APIRouter, Depends, Request

from balancer_sdk.api.models import (
    ComposableStableCreateRequest,
    ExitExactBptInRequest,
    ExitExactTokensOutRequest,
    ExitResponse,
    JoinRequest,
    JoinResponse,
    LiquidityRequest,
    LiquidityResponse,
    SpotPriceRequest,
    SpotPriceResponse,
    TransactionModel,
)
from balancer_sdk.config import BalancerNetworkConfig
from balancer_sdk.factory import ComposableStableCreatePoolParameters, ComposableStableFactory
from balancer_sdk.pools.registry import get_pool_type_concerns

logger = structlog.get_logger()

router = APIRouter()


def get_network(request: Request) -> BalancerNetworkConfig:
    """Dependency provider for the network configuration.

    Override in tests with app.dependency_overrides[get_network].
    """
    return request.app.state.network_config


@router.post("/pools/liquidity")
async def liquidity(body: LiquidityRequest) -> LiquidityResponse:
    pool = body.pool.to_snapshot()
    concerns = get_pool_type_concerns(pool.pool_type)
    value = concerns.liquidity(pool, body.token_prices)
    logger.info("liquidity_computed", pool_id=pool.id, liquidity=str(value))
    return LiquidityResponse(liquidity=str(value))


@router.post("/pools/spot-price")
async def spot_price(body: SpotPriceRequest) -> SpotPriceResponse:
    pool = body.pool.to_snapshot()
    concerns = get_pool_type_concerns(pool.pool_type)
    price = concerns.spot_price(pool, body.token_in, body.token_out)
    return SpotPriceResponse(spot_price=str(price))


@router.post("/pools/join")
async def join(
    body: JoinRequest, network: BalancerNetworkConfig = Depends(get_network)
) -> JoinResponse:
    pool = body.pool.to_snapshot()
    concerns = get_pool_type_concerns(pool.pool_type)
    attrs = concerns.build_join(
        body.joiner,
        pool,
        body.tokens_in,
        [int(a) for a in body.amounts_in],
        int(body.slippage),
        network=network,
    )
    logger.info("join_encoded", pool_id=pool.id, expected_bpt_out=attrs.expected_bpt_out)
    return JoinResponse.from_attributes(attrs)


@router.post("/pools/exit/exact-bpt-in")
async def exit_exact_bpt_in(
    body: ExitExactBptInRequest, network: BalancerNetworkConfig = Depends(get_network)
) -> ExitResponse:
    pool = body.pool.to_snapshot()
    concerns = get_pool_type_concerns(pool.pool_type)
    attrs = concerns.build_exit_exact_bpt_in(
        body.exiter,
        pool,
        int(body.bpt_in),
        int(body.slippage),
        body.single_token_out,
        network=network,
    )
    logger.info("exit_encoded", pool_id=pool.id, kind="exact_bpt_in")
    return ExitResponse.from_attributes(attrs)


@router.post("/pools/exit/exact-tokens-out")
async def exit_exact_tokens_out(
    body: ExitExactTokensOutRequest, network: BalancerNetworkConfig = Depends(get_network)
) -> ExitResponse:
    pool = body.pool.to_snapshot()
    concerns = get_pool_type_concerns(pool.pool_type)
    attrs = concerns.build_exit_exact_tokens_out(
        body.exiter,
        pool,
        body.tokens_out,
        [int(a) for a in body.amounts_out],
        int(body.slippage),
        network=network,
    )
    logger.info("exit_encoded", pool_id=pool.id, kind="exact_tokens_out")
    return ExitResponse.from_attributes(attrs)


@router.post("/factory/composable-stable/create")
async def create_composable_stable(
    body: ComposableStableCreateRequest, network: BalancerNetworkConfig = Depends(get_network)
) -> TransactionModel:
    factory = ComposableStableFactory(network)
    request = factory.create(
        ComposableStableCreatePoolParameters(
            factory_address=body.factory_address,
            name=body.name,
            symbol=body.symbol,
            token_addresses=body.token_addresses,
            amplification_parameter=body.amplification_parameter,
            rate_providers=body.rate_providers,
            token_rate_cache_durations=body.token_rate_cache_durations,
            exempt_from_yield_protocol_fee_flags=body.exempt_from_yield_protocol_fee_flags,
            swap_fee=body.swap_fee,
            owner=body.owner,
        )
    )
    return TransactionModel.from_request(request)
