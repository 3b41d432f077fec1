"""
Pytest fixtures for the trontx SDK tests.
"""
import time
from unittest.mock import MagicMock

import base58
import pytest

from trontx_sdk.builder import TransactionBuilder
from trontx_sdk.config import NetworkConfig
from trontx_sdk.exceptions import ValidationError
from trontx_sdk.transport import NodeTransport


def make_hex_address(fill: int) -> str:
    """Deterministic canonical hex address built from a repeated byte."""
    return "41" + bytes([fill]).hex() * 20


def make_base58_address(fill: int) -> str:
    return base58.b58encode_check(bytes.fromhex(make_hex_address(fill))).decode("ascii")


# Constants for testing
OWNER_HEX = make_hex_address(0x11)
OWNER_BASE58 = make_base58_address(0x11)
RECIPIENT_HEX = make_hex_address(0x22)
RECIPIENT_BASE58 = make_base58_address(0x22)
CONTRACT_HEX = make_hex_address(0x33)
CONTRACT_BASE58 = make_base58_address(0x33)
SR_HEX = make_hex_address(0x44)
SR_BASE58 = make_base58_address(0x44)

TEST_FULL_NODE_URL = "https://node.example.com"

# One hour from now is comfortably in the future for sale windows
FUTURE_MS = int(time.time() * 1000) + 3_600_000

UNSIGNED_TX = {
    "visible": False,
    "txID": "9f62a65d0616c749643c4e2620b7877efd0f04dd5b2b4cd14004570d39858d7e",
    "raw_data": {
        "contract": [{"parameter": {"value": {}}, "type": "TransferContract"}],
        "ref_block_bytes": "0a2f",
        "ref_block_hash": "d1b9a1a0ab1d9d67",
        "expiration": 1581507273000,
        "timestamp": 1581507213000
    },
    "raw_data_hex": "0a020a2f2208d1b9a1a0ab1d9d67"
}

TRIGGER_RESPONSE = {
    "result": {"result": True},
    "transaction": UNSIGNED_TX
}


@pytest.fixture(autouse=True)
def _reset_network_cache():
    """Keep the class-level network cache from leaking between tests."""
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def mock_transport():
    """A transport that records requests and returns an unsigned transaction."""
    transport = MagicMock(spec=NodeTransport)
    transport.request.return_value = dict(UNSIGNED_TX)
    return transport


@pytest.fixture
def builder(mock_transport):
    """Builder with a default owner and an inline (executor-less) transport."""
    return TransactionBuilder(mock_transport, default_address=OWNER_HEX)


@pytest.fixture
def sent_request(mock_transport):
    """Return the (path, payload, method) of the only request that was sent."""
    def _sent():
        mock_transport.request.assert_called_once()
        return mock_transport.request.call_args[0]
    return _sent


def assert_rejected(future, message, transport):
    """The operation failed validation and nothing was sent."""
    error = future.exception()
    assert isinstance(error, ValidationError)
    assert str(error) == message
    transport.request.assert_not_called()
