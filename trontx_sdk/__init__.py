"""
trontx SDK - build unsigned TRON transactions through a full node.
"""
from .builder import TransactionBuilder
from .client import TronClient
from .config import NetworkConfig
from .exceptions import (
    AbiEncodingError,
    FailureKind,
    NodeError,
    NodeTransportError,
    RemoteError,
    TronTxError,
    ValidationError,
)
from .models import (
    ContractParameter,
    SmartContractOptions,
    TokenOptions,
    TokenUpdateOptions,
)
from .transport import HttpNodeTransport, NodeTransport
from .version import __version__

__all__ = [
    "TronClient",
    "TransactionBuilder",
    "NetworkConfig",
    "NodeTransport",
    "HttpNodeTransport",
    "ContractParameter",
    "SmartContractOptions",
    "TokenOptions",
    "TokenUpdateOptions",
    "TronTxError",
    "ValidationError",
    "AbiEncodingError",
    "NodeError",
    "NodeTransportError",
    "RemoteError",
    "FailureKind",
    "__version__",
]
