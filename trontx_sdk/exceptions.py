"""
Exceptions for the trontx SDK.

Every failure produced while building a transaction is an instance of
``TronTxError``. Builder operations never raise these directly: they are
delivered through the returned Future or the ``callback`` argument.
"""
from enum import Enum
from typing import Any, Dict, Optional


class FailureKind(str, Enum):
    """Where a node request went wrong."""
    TRANSPORT = "TRANSPORT"
    REMOTE_PROTOCOL = "REMOTE_PROTOCOL"
    REMOTE_APPLICATION = "REMOTE_APPLICATION"


class TronTxError(Exception):
    """Base exception for all trontx SDK errors."""
    pass


class ValidationError(TronTxError):
    """Raised when a caller-supplied argument fails validation."""
    pass


class AbiEncodingError(TronTxError):
    """Raised when contract parameters cannot be ABI-encoded."""
    pass


class NodeError(TronTxError):
    """Base exception for failures reported by or while talking to the full node."""

    kind = FailureKind.TRANSPORT

    def __init__(self, message: str, kind: Optional[FailureKind] = None):
        if kind is not None:
            self.kind = kind
        super().__init__(message)


class NodeTransportError(NodeError):
    """Raised when the HTTP round-trip to the full node fails."""
    pass


class RemoteError(NodeError):
    """Raised when the full node answers but reports a failure."""

    def __init__(
        self,
        message: str,
        kind: FailureKind = FailureKind.REMOTE_PROTOCOL,
        response: Optional[Dict[str, Any]] = None
    ):
        self.response = response
        super().__init__(message, kind)
