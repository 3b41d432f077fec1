"""
Network configuration and protocol constants.
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Protocol policy values enforced by the full node
MIN_FREEZE_DURATION = 3
MAX_FEE_LIMIT = 1_000_000_000
MIN_USER_FEE_PERCENTAGE = 0
MAX_USER_FEE_PERCENTAGE = 100

DEFAULT_RESOURCE = "BANDWIDTH"
RESOURCE_TYPES = ("BANDWIDTH", "ENERGY")

DEFAULT_NETWORK = "mainnet"


class NetworkConfig:
    """
    Access to the bundled network table (``networks.json``).

    The table is read once and cached on the class.
    """

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load all known networks.

        Returns:
            Mapping of network name to its configuration
        """
        if cls._networks_cache is None:
            resource = importlib.resources.files("trontx_sdk").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
            logger.debug("Loaded %d network definitions", len(cls._networks_cache))
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the configuration for a single network.

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_full_node_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the full node URL for a network.

        Precedence: explicit override, then the ``<NETWORK>_FULL_NODE_URL``
        environment variable, then the bundled table.
        """
        if override:
            return override

        env_var = f"{network.upper().replace('-', '_')}_FULL_NODE_URL"
        env_url = os.environ.get(env_var)
        if env_url:
            logger.debug("Using full node URL from %s", env_var)
            return env_url

        return cls.get_network(network)["fullNode"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])
