"""
ABI parameter encoding for contract deployment and invocation.
"""
import logging
import re
from typing import Any, Iterable, List, Tuple

from eth_abi import encode

from .address import to_abi_address
from .exceptions import AbiEncodingError, ValidationError
from .models import ContractParameter

logger = logging.getLogger(__name__)

# Elementary type followed by array dimensions: uint256, bytes32[2], address[][]
_TYPE_RE = re.compile(r"^(?P<base>[a-z]+[0-9x]*)(?P<dims>(\[\d*\])*)$")
_INTEGER_RE = re.compile(r"^u?int\d*$")
_BYTES_RE = re.compile(r"^bytes\d*$")


def _parse_integer(text: str) -> int:
    """Decimal or ``0x`` hex, optionally negative."""
    text = text.strip()
    negative = text.startswith("-")
    digits = text[1:] if negative else text
    number = int(digits[2:], 16) if digits[:2].lower() == "0x" else int(digits, 10)
    return -number if negative else number


def _convert_scalar(base: str, value: Any) -> Any:
    if base == "address":
        return to_abi_address(value)
    if isinstance(value, str):
        if _INTEGER_RE.match(base):
            return _parse_integer(value)
        if _BYTES_RE.match(base) and value[:2].lower() == "0x":
            return bytes.fromhex(value[2:])
    return value


def _convert_value(base: str, value: Any, depth: int) -> Any:
    """Convert every element of a (possibly nested) array value to encoder form."""
    if depth == 0:
        return _convert_scalar(base, value)
    if not isinstance(value, (list, tuple)):
        raise AbiEncodingError(f"Expected an array of {base} values, got {type(value).__name__}")
    return [_convert_value(base, item, depth - 1) for item in value]


def prepare_parameters(parameters: Iterable[Any]) -> Tuple[List[str], List[Any]]:
    """
    Split contract parameters into parallel type and value lists.

    Values are converted to what the ABI encoder expects: TRON addresses
    become ``0x``-prefixed 20-byte addresses, numeric strings become ints
    for ``int``/``uint`` types and ``0x`` hex strings become bytes for
    ``bytes``/``bytesN`` types. Array types are converted element-wise.

    Raises:
        ValidationError: If a parameter has no usable type
        AbiEncodingError: If a value cannot be converted
    """
    types: List[str] = []
    values: List[Any] = []

    for raw in parameters:
        parameter = ContractParameter.coerce(raw)
        param_type, value = parameter.type, parameter.value

        if not isinstance(param_type, str) or not param_type:
            raise ValidationError(f"Invalid parameter type provided: {param_type}")

        match = _TYPE_RE.match(param_type)
        if match:
            depth = match.group("dims").count("[")
            try:
                value = _convert_value(match.group("base"), value, depth)
            except ValueError as e:
                raise AbiEncodingError(str(e)) from e

        types.append(param_type)
        values.append(value)

    return types, values


def encode_parameters(parameters: Iterable[Any]) -> str:
    """
    ABI-encode contract parameters.

    Args:
        parameters: ``ContractParameter`` instances or ``{"type", "value"}`` mappings

    Returns:
        Hex string without ``0x`` prefix, or ``""`` when there are no parameters

    Raises:
        ValidationError: If a parameter type is missing or not a string
        AbiEncodingError: If the encoder rejects the types or values
    """
    parameters = list(parameters)
    if not parameters:
        return ""

    types, values = prepare_parameters(parameters)

    try:
        encoded = encode(types, values)
    except Exception as e:
        # Surface the encoder's own message to the caller
        logger.debug("ABI encoding failed for types %s: %s", types, e)
        raise AbiEncodingError(str(e)) from e

    return encoded.hex()
