"""
TronClient - Main entry point for the trontx SDK.
"""
import logging
import urllib.parse
from concurrent.futures import Executor
from typing import Dict, Optional

from . import address as addr
from . import utils
from .builder import TransactionBuilder
from .config import DEFAULT_NETWORK, NetworkConfig
from .transport import HttpNodeTransport, NodeTransport


class TronClient:
    """
    Client for building unsigned transactions through a TRON full node.

    This client handles:
    1. Resolving and validating the full node endpoint
    2. Keeping a default owner address for builder operations
    3. Exposing the transaction builder and address/string helpers

    Signing and broadcasting are not part of this client.
    """

    def __init__(
        self,
        full_node_url: Optional[str] = None,
        network: str = DEFAULT_NETWORK,
        default_address: Optional[str] = None,
        api_key: Optional[str] = None,
        retry_count: int = 0,
        timeout: int = 30,
        executor: Optional[Executor] = None,
        transport: Optional[NodeTransport] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the TronClient

        Args:
            full_node_url: Full node HTTP endpoint (overrides the network table)
            network: Network name from the bundled table ("mainnet", "shasta", "nile")
            default_address: Address used when an operation's owner is omitted
            api_key: Optional TronGrid API key sent as TRON-PRO-API-KEY
            retry_count: Number of retries for connections that never reached the node
            timeout: Timeout for HTTP requests in seconds
            executor: Optional executor for node requests
            transport: Custom transport (skips URL resolution and HTTP setup)
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
            ValueError: If the network is unknown or the default address is invalid
        """
        self.logger = logger or logging.getLogger(__name__)

        if transport is None:
            full_node_url = NetworkConfig.get_full_node_url(network, override=full_node_url)
            self._validate_url(full_node_url)
            headers = {"TRON-PRO-API-KEY": api_key} if api_key else None
            transport = HttpNodeTransport(
                full_node_url,
                retry_count=retry_count,
                timeout=timeout,
                headers=headers,
                logger=self.logger
            )

        self.network = network
        self.full_node_url = full_node_url
        self.transport = transport
        self.transaction_builder = TransactionBuilder(transport, executor=executor, logger=self.logger)

        self._default_address: Optional[Dict[str, str]] = None
        if default_address is not None:
            self.set_default_address(default_address)

    @staticmethod
    def _validate_url(url: str) -> None:
        parsed = urllib.parse.urlparse(url)
        # Check if it's a localhost or 127.0.0.1 address (with or without port)
        host = parsed.hostname or ''
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise ValueError(f"full_node_url must use https:// for security (got: {parsed.scheme}://)")

    @property
    def chain_id(self) -> int:
        """Chain id of the configured network, from the bundled network table."""
        return NetworkConfig.get_chain_id(self.network)

    @property
    def default_address(self) -> Optional[Dict[str, str]]:
        """
        Get the default address in both representations

        Returns:
            ``{"hex": ..., "base58": ...}`` or None if no default is set
        """
        return dict(self._default_address) if self._default_address else None

    def set_default_address(self, address: str) -> None:
        """
        Set the address used when an operation's owner argument is omitted

        Raises:
            ValueError: If the address is invalid
        """
        if not addr.is_address(address):
            raise ValueError(f"Invalid default address provided: {address}")

        hex_address = addr.to_hex(address)
        self._default_address = {
            "hex": hex_address,
            "base58": addr.from_hex(hex_address)
        }
        self.transaction_builder.default_address = hex_address
        self.logger.debug("Default address set to %s", self._default_address["base58"])

    # Address and string helpers
    is_address = staticmethod(addr.is_address)
    to_hex = staticmethod(addr.to_hex)
    from_hex = staticmethod(addr.from_hex)
    from_utf8 = staticmethod(utils.from_utf8)
    to_utf8 = staticmethod(utils.to_utf8)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "TronClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
