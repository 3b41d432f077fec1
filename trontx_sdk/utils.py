"""
Utility functions for the trontx SDK.
"""
import re
import urllib.parse
from typing import Any

from web3 import Web3

_HEX_RE = re.compile(r"^(0x)?[0-9a-fA-F]+$")
_TLD_RE = re.compile(r"^([a-z]{2,}|xn--[a-z0-9-]+)$", re.IGNORECASE)


def from_utf8(text: str) -> str:
    """
    Encode a UTF-8 string as the raw hex form expected by the full node.

    Args:
        text: Human-readable string

    Returns:
        Hex string without ``0x`` prefix
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected a string, got {type(text).__name__}")
    return Web3.to_hex(text=text)[2:]


def to_utf8(hex_string: str) -> str:
    """
    Decode a raw hex string returned by the full node back into text.
    """
    if not isinstance(hex_string, str):
        raise TypeError(f"Expected a hex string, got {type(hex_string).__name__}")
    return Web3.to_text(hexstr=hex_string)


def is_integer(value: Any) -> bool:
    """True for ints and integral floats; booleans are not integers here."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return False


def is_hex(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_RE.match(value))


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def is_valid_url(url: Any) -> bool:
    """
    Check that a value is an absolute http(s) URL with a top-level domain.

    Args:
        url: Value to check

    Returns:
        True if the URL is usable as a token or witness URL
    """
    if not isinstance(url, str) or not url or any(ch.isspace() for ch in url):
        return False

    try:
        parsed = urllib.parse.urlparse(url)
        host = parsed.hostname
    except ValueError:
        return False

    if parsed.scheme not in ("http", "https") or not host:
        return False

    labels = host.split(".")
    if len(labels) < 2 or not all(labels):
        return False
    return bool(_TLD_RE.match(labels[-1]))
