"""
Transport layer for the full node HTTP API.

This module provides the abstraction the transaction builder uses to submit
requests, an HTTP implementation built on ``requests``, and the single place
where node responses are checked for embedded failures.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError as PydanticValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import FailureKind, NodeTransportError, RemoteError
from .models import NodeResponse
from .utils import to_utf8

# Configure logger
logger = logging.getLogger(__name__)


class NodeTransport(ABC):
    """
    Abstract base class for full node transports.

    Implementations return the decoded JSON object of a response, or raise
    ``NodeTransportError`` when the round-trip fails.
    """

    @abstractmethod
    def request(
        self,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        method: str = "post"
    ) -> Dict[str, Any]:
        """
        Submit a request to the full node.

        Args:
            path: Endpoint path, e.g. ``wallet/createtransaction``
            payload: JSON body (POST) or query parameters (GET)
            method: HTTP method, ``post`` or ``get``

        Returns:
            Decoded JSON response

        Raises:
            NodeTransportError: If the request cannot be completed
        """
        pass

    def close(self) -> None:
        """Close any open connections or resources."""
        pass


class HttpNodeTransport(NodeTransport):
    """
    ``requests``-based transport for a full node's HTTP API.
    """

    def __init__(
        self,
        full_node_url: str,
        retry_count: int = 0,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
        headers: Optional[Dict[str, str]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the transport

        Args:
            full_node_url: Base URL of the full node (e.g. "https://api.trongrid.io")
            retry_count: Number of retries for GET requests and for connections that
                never reached the node. POSTs that reached the node are sent once.
            timeout: Timeout for HTTP requests in seconds
            session: Optional pre-configured session
            headers: Extra headers sent with every request (e.g. an API key)
            logger: Optional logger instance
        """
        self.full_node_url = full_node_url.rstrip('/')  # Remove trailing slash if present
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

        self.session = session or requests.Session()
        if headers:
            self.session.headers.update(headers)

        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            # POSTs that reached the node are never resent
            allowed_methods=["GET"],
            raise_on_status=False,
            # Retry for connection errors and read timeouts
            connect=retry_count,
            read=retry_count,
            other=retry_count
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

    def request(
        self,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        method: str = "post"
    ) -> Dict[str, Any]:
        url = f"{self.full_node_url}/{path.lstrip('/')}"
        method = method.lower()
        self.logger.debug("Node request: %s %s", method.upper(), url)

        try:
            if method == "get":
                response = self.session.get(url, params=payload, timeout=self.timeout)
            elif method == "post":
                response = self.session.post(url, json=payload or {}, timeout=self.timeout)
            else:
                raise NodeTransportError(f"Unsupported HTTP method: {method}")

            response.raise_for_status()

            content_type = response.headers.get('Content-Type', '')
            if 'application/json' not in content_type:
                self.logger.warning(f"Unexpected Content-Type: {content_type} (expected application/json)")

            result = response.json()
        except requests.exceptions.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON response from node: {e}")
            raise NodeTransportError(f"Invalid JSON response from node: {str(e)}") from e
        except requests.RequestException as e:
            self.logger.error(f"Node request to {path} failed: {e}")
            raise NodeTransportError(f"Node request failed: {str(e)}") from e

        if not isinstance(result, dict):
            raise NodeTransportError(
                f"Unexpected response from node: expected an object, got {type(result).__name__}"
            )

        self.logger.debug("Node response from %s: %s", path, result)
        return result

    def close(self) -> None:
        self.session.close()


def decode_response(
    response: Dict[str, Any],
    inspect_result: bool = False,
    require_success: bool = False
) -> Dict[str, Any]:
    """
    Check a node response for an embedded failure.

    Args:
        response: Decoded JSON returned by the node
        inspect_result: Treat a ``result.message`` as a failure reason
        require_success: Require ``result.result`` to be truthy

    Returns:
        The response itself, unchanged, if it signals success

    Raises:
        RemoteError: If the response carries a failure
    """
    try:
        envelope = NodeResponse.model_validate(response)
    except PydanticValidationError as e:
        raise RemoteError(
            f"Malformed response from node: {e}",
            kind=FailureKind.REMOTE_PROTOCOL,
            response=response
        ) from e

    if envelope.error:
        raise RemoteError(str(envelope.error), kind=FailureKind.REMOTE_PROTOCOL, response=response)

    result = envelope.result if not isinstance(envelope.result, bool) else None

    if inspect_result and result is not None and result.message:
        raise RemoteError(
            _decode_message(result.message),
            kind=FailureKind.REMOTE_APPLICATION,
            response=response
        )

    if require_success and (result is None or not result.result):
        raise RemoteError(str(response), kind=FailureKind.REMOTE_APPLICATION, response=response)

    return response


def _decode_message(message: Any) -> str:
    """Node failure messages are hex-encoded UTF-8; fall back to the raw text."""
    try:
        return to_utf8(message)
    except (ValueError, TypeError):
        return str(message)
