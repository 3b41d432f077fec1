"""
Tests for the HTTP node transport and response decoding.
"""
import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

from trontx_sdk.builder import TransactionBuilder
from trontx_sdk.exceptions import FailureKind, NodeTransportError, RemoteError
from trontx_sdk.transport import HttpNodeTransport, decode_response
from trontx_sdk.utils import from_utf8
from conftest import OWNER_HEX, RECIPIENT_HEX, TEST_FULL_NODE_URL, UNSIGNED_TX


@pytest.fixture
def transport():
    return HttpNodeTransport(TEST_FULL_NODE_URL, retry_count=0, timeout=5)


def test_post_sends_json(requests_mock, transport):
    route = requests_mock.post(
        f"{TEST_FULL_NODE_URL}/wallet/createtransaction",
        json=UNSIGNED_TX,
        headers={"Content-Type": "application/json"}
    )

    result = transport.request("wallet/createtransaction", {"amount": 1})

    assert result == UNSIGNED_TX
    assert route.called_once
    assert route.last_request.json() == {"amount": 1}


def test_get_sends_query_params(requests_mock, transport):
    route = requests_mock.get(
        f"{TEST_FULL_NODE_URL}/wallet/getnowblock",
        json={"blockID": "00"},
        headers={"Content-Type": "application/json"}
    )

    assert transport.request("/wallet/getnowblock", {"visible": "true"}, "get") == {"blockID": "00"}
    assert route.last_request.qs == {"visible": ["true"]}


def test_trailing_slash_is_stripped():
    transport = HttpNodeTransport(TEST_FULL_NODE_URL + "/", retry_count=0)
    assert transport.full_node_url == TEST_FULL_NODE_URL


def test_custom_headers(requests_mock):
    transport = HttpNodeTransport(TEST_FULL_NODE_URL, retry_count=0, headers={"TRON-PRO-API-KEY": "k"})
    route = requests_mock.post(f"{TEST_FULL_NODE_URL}/wallet/x", json={})
    transport.request("wallet/x", {})
    assert route.last_request.headers["TRON-PRO-API-KEY"] == "k"


def test_http_error_raises_transport_error(requests_mock, transport):
    requests_mock.post(f"{TEST_FULL_NODE_URL}/wallet/createtransaction", status_code=400, text="bad")

    with pytest.raises(NodeTransportError, match="Node request failed") as exc_info:
        transport.request("wallet/createtransaction", {})

    assert exc_info.value.kind is FailureKind.TRANSPORT


def test_connection_error_raises_transport_error(requests_mock, transport):
    requests_mock.post(
        f"{TEST_FULL_NODE_URL}/wallet/createtransaction",
        exc=requests.ConnectionError("down")
    )

    with pytest.raises(NodeTransportError, match="down"):
        transport.request("wallet/createtransaction", {})


def test_invalid_json_raises_transport_error(requests_mock, transport):
    requests_mock.post(f"{TEST_FULL_NODE_URL}/wallet/x", text="<html>", headers={"Content-Type": "text/html"})

    with pytest.raises(NodeTransportError, match="Invalid JSON"):
        transport.request("wallet/x", {})


def test_non_object_json_raises_transport_error(requests_mock, transport):
    requests_mock.post(f"{TEST_FULL_NODE_URL}/wallet/x", json=[1, 2])

    with pytest.raises(NodeTransportError, match="expected an object"):
        transport.request("wallet/x", {})


def test_unexpected_content_type_logged(requests_mock, transport, caplog):
    requests_mock.post(f"{TEST_FULL_NODE_URL}/wallet/x", text="{}", headers={"Content-Type": "text/plain"})

    caplog.set_level(logging.WARNING)
    assert transport.request("wallet/x", {}) == {}
    assert any("Unexpected Content-Type" in msg for msg in caplog.messages)


def test_unsupported_method(transport):
    with pytest.raises(NodeTransportError, match="Unsupported HTTP method"):
        transport.request("wallet/x", {}, "delete")


@pytest.fixture
def unavailable_node():
    """A real local HTTP server that answers every request with 503."""
    hits = []

    class Handler(BaseHTTPRequestHandler):
        def _unavailable(self):
            hits.append(self.path)
            length = int(self.headers.get("Content-Length") or 0)
            self.rfile.read(length)
            self.send_response(503)
            self.send_header("Content-Length", "0")
            self.end_headers()

        do_GET = _unavailable
        do_POST = _unavailable

        def log_message(self, format, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}", hits
    finally:
        server.shutdown()
        server.server_close()


def test_builder_call_sends_exactly_one_request(unavailable_node):
    url, hits = unavailable_node
    builder = TransactionBuilder(HttpNodeTransport(url))

    error = builder.send_trx(RECIPIENT_HEX, 5, OWNER_HEX).exception()

    assert isinstance(error, NodeTransportError)
    assert hits == ["/wallet/createtransaction"]


def test_post_not_resent_even_with_retries_enabled(unavailable_node):
    url, hits = unavailable_node
    transport = HttpNodeTransport(url, retry_count=3)

    with pytest.raises(NodeTransportError):
        transport.request("wallet/createtransaction", {"amount": 1})

    assert len(hits) == 1


def test_get_retried_when_enabled(unavailable_node):
    url, hits = unavailable_node
    transport = HttpNodeTransport(url, retry_count=1)

    with pytest.raises(NodeTransportError):
        transport.request("wallet/getnowblock", method="get")

    assert hits == ["/wallet/getnowblock", "/wallet/getnowblock"]


class TestDecodeResponse:
    """decode_response turns embedded failures into RemoteError."""

    def test_success_passes_through(self):
        assert decode_response(UNSIGNED_TX) is UNSIGNED_TX

    def test_error_field(self):
        with pytest.raises(RemoteError, match="class java.lang.NullPointerException") as exc_info:
            decode_response({"Error": "class java.lang.NullPointerException : null"})

        assert exc_info.value.kind is FailureKind.REMOTE_PROTOCOL

    def test_result_message_ignored_unless_inspected(self):
        response = {"result": {"code": "CONTRACT_VALIDATE_ERROR", "message": from_utf8("nope")}}
        assert decode_response(response) is response

    def test_result_message_decoded(self):
        response = {"result": {"code": "CONTRACT_VALIDATE_ERROR", "message": from_utf8("No enough balance")}}

        with pytest.raises(RemoteError) as exc_info:
            decode_response(response, inspect_result=True)

        assert str(exc_info.value) == "No enough balance"
        assert exc_info.value.kind is FailureKind.REMOTE_APPLICATION
        assert exc_info.value.response is response

    def test_undecodable_message_kept_raw(self):
        with pytest.raises(RemoteError, match="not hex at all"):
            decode_response({"result": {"message": "not hex at all"}}, inspect_result=True)

    def test_falsy_result_flag(self):
        response = {"result": {"result": False}, "transaction": {}}

        with pytest.raises(RemoteError) as exc_info:
            decode_response(response, require_success=True)

        assert exc_info.value.response is response
        assert exc_info.value.kind is FailureKind.REMOTE_APPLICATION

    def test_missing_result_envelope_fails_when_required(self):
        with pytest.raises(RemoteError):
            decode_response({"transaction": {}}, require_success=True)

    def test_truthy_result_flag(self):
        response = {"result": {"result": True}, "transaction": UNSIGNED_TX}
        assert decode_response(response, inspect_result=True, require_success=True) is response

    def test_boolean_result_is_not_an_envelope(self):
        response = {"result": True, "txid": "ab"}
        assert decode_response(response, inspect_result=True) is response
