"""
Network configuration for the EthExplorer SDK.

Known networks live in the bundled ``networks.json``. The RPC endpoint of a
network can be overridden with a ``<NETWORK>_RPC_URL`` environment variable,
e.g. ``HARDHAT_RPC_URL`` or ``GANACHE_CLI_RPC_URL``.
"""
import json
import logging
import os
import importlib.resources
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_NETWORK = "ganache"
FALLBACK_NETWORK_ENV = "ETHEXPLORER_NETWORK"


class NetworkConfig:
    """Access to the bundled network table."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load the network table, caching it after the first read.

        Returns:
            Mapping of network name to its configuration
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        text = importlib.resources.files("ethexplorer_sdk").joinpath("networks.json").read_text(encoding="utf-8")
        cls._networks_cache = json.loads(text)
        logger.debug(f"Loaded {len(cls._networks_cache)} network configurations")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the configuration of a network.

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            raise ValueError(
                f"Unknown network '{network}'. Available networks: {', '.join(sorted(networks))}"
            )
        return networks[network]

    @staticmethod
    def _env_var_name(network: str) -> str:
        return network.upper().replace("-", "_") + "_RPC_URL"

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL of a network.

        Precedence: ``override``, then ``<NETWORK>_RPC_URL``, then the table.
        """
        if override:
            return override
        env_url = os.environ.get(cls._env_var_name(network))
        if env_url:
            return env_url
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def get_network_id(cls, network: str) -> int:
        config = cls.get_network(network)
        return int(config.get("networkId", config["chainId"]))

    @staticmethod
    def get_fallback_network() -> str:
        """Name of the network used when no provider is supplied."""
        return os.environ.get(FALLBACK_NETWORK_ENV, DEFAULT_FALLBACK_NETWORK)
