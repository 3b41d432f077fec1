"""
Data models for the trontx SDK.
"""
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from .config import MAX_FEE_LIMIT
from .exceptions import ValidationError

# Loosely typed on purpose: values are checked by the builder, which owns
# the error messages.
UnsignedTransaction = Dict[str, Any]


class _OptionsMixin:
    """Construct an options dataclass from itself or from a plain mapping."""

    @classmethod
    def coerce(cls, options: Any):
        if isinstance(options, cls):
            return options
        if options is None:
            return cls()
        if not isinstance(options, Mapping):
            raise ValidationError("Invalid options provided")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known, key=str)
        if unknown:
            raise ValidationError(f"Unknown options provided: {', '.join(map(str, unknown))}")
        return cls(**options)


@dataclass(frozen=True)
class ContractParameter:
    """A typed argument for a contract constructor or method."""
    type: Any
    value: Any = None

    @classmethod
    def coerce(cls, parameter: Any) -> "ContractParameter":
        if isinstance(parameter, cls):
            return parameter
        if isinstance(parameter, Mapping):
            return cls(type=parameter.get("type"), value=parameter.get("value"))
        return cls(type=None, value=parameter)


@dataclass(frozen=True)
class SmartContractOptions(_OptionsMixin):
    """Options for deploying a smart contract."""
    abi: Any = None
    bytecode: Any = None
    fee_limit: Any = MAX_FEE_LIMIT
    call_value: Any = 0
    user_fee_percentage: Any = 0
    parameters: Any = field(default_factory=list)


@dataclass(frozen=True)
class TokenOptions(_OptionsMixin):
    """
    Options for issuing a token.

    Attributes:
        trx_ratio: How much TRX ``token_ratio`` tokens cost
        token_ratio: How many tokens ``trx_ratio`` TRX buys
        sale_start: Sale start in milliseconds; defaults to the current time
        free_bandwidth: Bandwidth the issuer donates to token holders
        free_bandwidth_limit: Share of ``free_bandwidth`` each holder may use
    """
    name: Any = None
    abbreviation: Any = None
    description: Any = None
    url: Any = None
    total_supply: Any = 0
    trx_ratio: Any = 1
    token_ratio: Any = 1
    sale_start: Any = None
    sale_end: Any = None
    free_bandwidth: Any = 0
    free_bandwidth_limit: Any = 0
    frozen_amount: Any = 0
    frozen_duration: Any = 0


@dataclass(frozen=True)
class TokenUpdateOptions(_OptionsMixin):
    """Options for updating an issued token."""
    description: Any = None
    url: Any = None
    free_bandwidth: Any = 0
    free_bandwidth_limit: Any = 0


ContractParameters = Sequence[Union[ContractParameter, Mapping[str, Any]]]


@dataclass(frozen=True)
class NodeRequest:
    """A fully validated request, ready to hand to the node transport."""
    path: str
    payload: Dict[str, Any]
    method: str = "post"
    inspect_result: bool = False
    require_success: bool = False


class ResultEnvelope(BaseModel):
    """The ``result`` object some node endpoints embed in their response."""
    model_config = ConfigDict(extra="allow")

    result: Optional[Any] = None
    code: Optional[Any] = None
    message: Optional[Any] = None


class NodeResponse(BaseModel):
    """Envelope fields of a full node response that signal failure."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    error: Optional[Any] = Field(None, alias="Error")
    result: Optional[Union[ResultEnvelope, bool]] = None
    tx_id: Optional[str] = Field(None, alias="txID")
    raw_data: Optional[Dict[str, Any]] = None
    visible: Optional[bool] = None


__all__ = [
    "UnsignedTransaction",
    "ContractParameter",
    "ContractParameters",
    "SmartContractOptions",
    "TokenOptions",
    "TokenUpdateOptions",
    "NodeRequest",
    "ResultEnvelope",
    "NodeResponse",
]
