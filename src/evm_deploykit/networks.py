"""Network resolution for evm-deploykit."""

from typing import Any, Dict, List

from .config import Config
from .constants import NETWORK_CONFIG
from .exceptions import MissingApiKeyError, NoRpcConfiguredError, UnknownNetworkError
from .types import NetworkInfo


def supported_networks() -> List[str]:
    return list(NETWORK_CONFIG.keys())


def network_config(network: str) -> Dict[str, Any]:
    """
    Look up the static configuration for a network.

    Raises:
        UnknownNetworkError: If the network is not in NETWORK_CONFIG
    """
    if network not in NETWORK_CONFIG:
        raise UnknownNetworkError(
            f"Unknown network '{network}'. "
            f"Supported networks: {', '.join(supported_networks())}"
        )
    return NETWORK_CONFIG[network]


def resolve_network(config: Config, network: str) -> NetworkInfo:
    """
    Resolve endpoints for a network.

    Args:
        config: Process configuration
        network: Network name (e.g. "bsc-testnet")

    Returns:
        NetworkInfo with the configured RPC URL

    Raises:
        UnknownNetworkError: If network not supported
        NoRpcConfiguredError: If no RPC URL is configured for network
    """
    static = network_config(network)
    rpc_url = config.rpc_urls.get(network)
    if not rpc_url:
        raise NoRpcConfiguredError(
            f"No RPC URL configured for network: {network} "
            f"(set ${static['rpc_env']})"
        )
    return NetworkInfo(
        name=network,
        family=static["family"],
        chain_id=static["chain_id"],
        chain_name=static["chain_name"],
        rpc_url=rpc_url,
        api_url=static["api_url"],
        block_explorer_url=static["block_explorer_url"],
    )


def api_key_for(config: Config, network: str) -> str:
    """
    Get the explorer API key for a network's family.

    Raises:
        UnknownNetworkError: If network not supported
        MissingApiKeyError: If no key is configured for the family
    """
    static = network_config(network)
    key = config.api_keys.get(static["family"])
    if not key:
        raise MissingApiKeyError(
            f"No explorer API key configured for network: {network} "
            f"(set ${static['api_key_env']})"
        )
    return key
