"""
Tests for the NetworkConfig module.
"""
import os
from unittest.mock import patch

import pytest

from trontx_sdk.config import NetworkConfig

# Sample network configuration
MOCK_NETWORKS = {
    "test-network": {
        "chainId": 123,
        "fullNode": "https://test.example.com"
    }
}


class TestNetworkConfig:
    """Test NetworkConfig class."""

    def test_bundled_networks(self):
        networks = NetworkConfig.load_networks()

        assert {"mainnet", "shasta", "nile"} <= set(networks)
        assert networks["mainnet"]["fullNode"] == "https://api.trongrid.io"

    def test_load_networks_cached(self):
        """Networks are cached after first load."""
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch("importlib.resources.files") as mock_files:
            result = NetworkConfig.load_networks()
            mock_files.assert_not_called()

        assert result == MOCK_NETWORKS

    def test_get_network(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        result = NetworkConfig.get_network("test-network")

        assert result == MOCK_NETWORKS["test-network"]

    def test_get_network_not_found(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with pytest.raises(ValueError) as exc_info:
            NetworkConfig.get_network("non-existent-network")

        # Error message lists the available networks
        assert "test-network" in str(exc_info.value)

    def test_get_full_node_url_default(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        assert NetworkConfig.get_full_node_url("test-network") == "https://test.example.com"

    def test_get_full_node_url_override(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        result = NetworkConfig.get_full_node_url("test-network", override="https://override.example.com")

        assert result == "https://override.example.com"

    def test_get_full_node_url_env_var(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch.dict(os.environ, {"TEST_NETWORK_FULL_NODE_URL": "https://env.example.com"}):
            result = NetworkConfig.get_full_node_url("test-network")

        assert result == "https://env.example.com"

    def test_get_chain_id(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        assert NetworkConfig.get_chain_id("test-network") == 123

    def test_mainnet_chain_id(self):
        assert NetworkConfig.get_chain_id("mainnet") == 0x2b6653dc
