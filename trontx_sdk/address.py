"""
Address helpers.

An address has two interchangeable forms:

* canonical hex: 21 bytes, ``41``-prefixed, 42 lowercase hex characters
* base58: base58check encoding of the same 21 bytes (starts with ``T``)

Only canonical hex is ever sent to the full node.
"""
import logging
from typing import Any

# Import base58 for address encoding
try:
    import base58
except ImportError:
    raise ImportError(
        "base58 package is required for address handling. "
        "Install with: pip install base58"
    )

from .utils import is_hex

logger = logging.getLogger(__name__)

ADDRESS_PREFIX = "41"
ADDRESS_PREFIX_BYTE = 0x41
ADDRESS_SIZE = 21
HEX_ADDRESS_LENGTH = 42
BASE58_ADDRESS_LENGTH = 34

# ABI encoders expect 20-byte addresses with an Ethereum-style prefix
ABI_ADDRESS_PREFIX = "0x"


def _decode_base58(address: str) -> bytes:
    """Decode a base58check address, raising ValueError on a bad checksum."""
    raw = base58.b58decode_check(address)
    if len(raw) != ADDRESS_SIZE or raw[0] != ADDRESS_PREFIX_BYTE:
        raise ValueError(f"Not a valid base58 address: {address}")
    return raw


def is_address(value: Any) -> bool:
    """
    Check whether a value is a valid address in either representation.

    Args:
        value: Candidate address (hex or base58)

    Returns:
        True if the value is a well-formed address
    """
    if not isinstance(value, str):
        return False

    if len(value) == HEX_ADDRESS_LENGTH and is_hex(value):
        return value[:2] == ADDRESS_PREFIX

    if len(value) == BASE58_ADDRESS_LENGTH:
        try:
            _decode_base58(value)
        except ValueError:
            return False
        return True

    return False


def to_hex(address: str) -> str:
    """
    Convert an address to its canonical hex form.

    Raises:
        ValueError: If the address is not valid
    """
    if not is_address(address):
        raise ValueError(f"Invalid address: {address!r}")

    if len(address) == HEX_ADDRESS_LENGTH:
        return address.lower()

    return _decode_base58(address).hex()


def from_hex(address: str) -> str:
    """
    Convert a hex address (``41``-prefixed or ``0x``-prefixed 20 bytes) to base58.

    Raises:
        ValueError: If the value is not a hex address
    """
    value = address
    if value.startswith("0x"):
        value = ADDRESS_PREFIX + value[2:]

    if len(value) != HEX_ADDRESS_LENGTH or not is_hex(value) or value[:2] != ADDRESS_PREFIX:
        raise ValueError(f"Invalid hex address: {address!r}")

    return base58.b58encode_check(bytes.fromhex(value)).decode("ascii")


def to_abi_address(address: str) -> str:
    """
    Convert an address to the ``0x``-prefixed 20-byte form used in ABI encoding.
    """
    return ABI_ADDRESS_PREFIX + to_hex(address)[len(ADDRESS_PREFIX):]
