"""Process configuration for evm-deploykit."""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .constants import DEFAULT_NETWORK, NETWORK_CONFIG

RECOGNIZED_ENV_VARS = (
    "BSC_MAINNET_RPC_URL",
    "BSC_TESTNET_RPC_URL",
    "BSCSCAN_API_KEY",
    "ETH_MAINNET_RPC_URL",
    "ETH_SEPOLIA_RPC_URL",
    "ETHERSCAN_API_KEY",
    "PRIVATE_KEY",
    "NETWORK",
)


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration built once at process start.

    Components receive a Config explicitly; nothing below the CLI reads
    the process environment.
    """

    rpc_urls: Mapping[str, str] = field(default_factory=dict)
    api_keys: Mapping[str, str] = field(default_factory=dict)  # family -> key
    private_key: Optional[str] = None
    default_network: str = DEFAULT_NETWORK

    def __post_init__(self):
        object.__setattr__(self, "rpc_urls", MappingProxyType(dict(self.rpc_urls)))
        object.__setattr__(self, "api_keys", MappingProxyType(dict(self.api_keys)))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Config with RPC URLs per network and API keys per network family.
            Empty values are treated as unset.
        """
        if environ is None:
            environ = os.environ

        rpc_urls = {}
        api_keys = {}
        for network, network_config in NETWORK_CONFIG.items():
            url = environ.get(network_config["rpc_env"]) or network_config["default_rpc_url"]
            if url:
                rpc_urls[network] = url
            key = environ.get(network_config["api_key_env"])
            if key:
                api_keys[network_config["family"]] = key

        return cls(
            rpc_urls=rpc_urls,
            api_keys=api_keys,
            private_key=environ.get("PRIVATE_KEY") or None,
            default_network=environ.get("NETWORK") or DEFAULT_NETWORK,
        )
