"""Network configuration.

A `BalancerNetworkConfig` is resolved once at startup and passed explicitly
to every component that needs it; nothing in the library reads a global
"current network".
"""

from dataclasses import dataclass, replace
from enum import IntEnum

from balancer_sdk.constants import BALANCER_VAULT
from balancer_sdk.models.types import normalize_address


class Network(IntEnum):
    """Chain ids of the networks Balancer V2 is deployed on."""

    MAINNET = 1
    GOERLI = 5
    GNOSIS = 100
    POLYGON = 137
    ARBITRUM = 42161


@dataclass(frozen=True)
class BalancerNetworkConfig:
    """Addresses and endpoints for one network.

    Attributes:
        network: Chain the config targets
        vault: Balancer Vault address
        wrapped_native_asset: WETH-equivalent used when sorting native ETH
        subgraph_url: Balancer V2 subgraph endpoint
    """

    network: Network
    vault: str
    wrapped_native_asset: str
    subgraph_url: str

    @property
    def chain_id(self) -> int:
        return int(self.network)


NETWORKS: dict[Network, BalancerNetworkConfig] = {
    Network.MAINNET: BalancerNetworkConfig(
        network=Network.MAINNET,
        vault=BALANCER_VAULT,
        wrapped_native_asset="0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
        subgraph_url="https://api.thegraph.com/subgraphs/name/balancer-labs/balancer-v2",
    ),
    Network.GOERLI: BalancerNetworkConfig(
        network=Network.GOERLI,
        vault=BALANCER_VAULT,
        wrapped_native_asset="0xdfcea9088c8a88a76ff74892c1457c17dfeef9c1",
        subgraph_url="https://api.thegraph.com/subgraphs/name/balancer-labs/balancer-goerli-v2",
    ),
    Network.GNOSIS: BalancerNetworkConfig(
        network=Network.GNOSIS,
        vault=BALANCER_VAULT,
        wrapped_native_asset="0xe91d153e0b41518a2ce8dd3d7944fa863463a97d",
        subgraph_url=(
            "https://api.thegraph.com/subgraphs/name/balancer-labs/balancer-gnosis-chain-v2"
        ),
    ),
    Network.POLYGON: BalancerNetworkConfig(
        network=Network.POLYGON,
        vault=BALANCER_VAULT,
        wrapped_native_asset="0x0d500b1d8e8ef31e21c99d1db9a6444d3adf1270",
        subgraph_url="https://api.thegraph.com/subgraphs/name/balancer-labs/balancer-polygon-v2",
    ),
    Network.ARBITRUM: BalancerNetworkConfig(
        network=Network.ARBITRUM,
        vault=BALANCER_VAULT,
        wrapped_native_asset="0x82af49447d8a07e3bd95bd0d56f35241523fbab1",
        subgraph_url="https://api.thegraph.com/subgraphs/name/balancer-labs/balancer-arbitrum-v2",
    ),
}


def get_network_config(
    network: Network | int | str,
    subgraph_url: str | None = None,
) -> BalancerNetworkConfig:
    """Resolve the configuration for a network.

    Args:
        network: Network enum, chain id, or name (e.g. "mainnet", "POLYGON")
        subgraph_url: Optional override for the subgraph endpoint

    Raises:
        ValueError: If the network is unknown
    """
    if isinstance(network, str) and not network.isdigit():
        try:
            resolved = Network[network.upper()]
        except KeyError as err:
            raise ValueError(f"Unknown network: {network}") from err
    else:
        try:
            resolved = Network(int(network))
        except ValueError as err:
            raise ValueError(f"Unknown chain id: {network}") from err

    config = NETWORKS[resolved]
    if subgraph_url:
        config = replace(config, subgraph_url=subgraph_url)
    return replace(
        config,
        vault=normalize_address(config.vault),
        wrapped_native_asset=normalize_address(config.wrapped_native_asset),
    )


DEFAULT_NETWORK_CONFIG = NETWORKS[Network.MAINNET]
