"""
TransactionBuilder - builds unsigned transactions through a full node.

Each public operation validates its arguments, normalizes addresses and
strings, ABI-encodes contract parameters where needed and submits exactly one
request to the node. The unsigned transaction returned by the node is passed
back untouched.

Operations return a ``concurrent.futures.Future``; pass ``callback=`` to get
``callback(error, transaction)`` instead.
"""
import json
import logging
import re
import time
from collections.abc import Mapping
from concurrent.futures import Executor
from typing import Any, Dict, Optional

from . import address as addr
from .abi import encode_parameters
from .config import (
    DEFAULT_RESOURCE,
    MAX_FEE_LIMIT,
    MAX_USER_FEE_PERCENTAGE,
    MIN_FREEZE_DURATION,
    MIN_USER_FEE_PERCENTAGE,
    RESOURCE_TYPES,
)
from .deferred import deferrable
from .exceptions import ValidationError
from .models import (
    ContractParameters,
    NodeRequest,
    SmartContractOptions,
    TokenOptions,
    TokenUpdateOptions,
    UnsignedTransaction,
)
from .transport import NodeTransport, decode_response
from .utils import from_utf8, is_hex, is_integer, is_non_empty_string, is_valid_url

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _is_positive_integer(value: Any) -> bool:
    return is_integer(value) and value > 0


def _is_non_negative_integer(value: Any) -> bool:
    return is_integer(value) and value >= 0


class TransactionBuilder:
    """
    Builds unsigned transactions for every supported contract type.

    Args:
        transport: Transport used to reach the full node
        default_address: Address used when an owner/issuer argument is omitted
        executor: Optional executor that runs the node request; without one
            the request runs inline and the returned Future is already done
        logger: Optional logger instance
    """

    def __init__(
        self,
        transport: NodeTransport,
        default_address: Optional[str] = None,
        executor: Optional[Executor] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.transport = transport
        self.default_address = default_address
        self.executor = executor
        self.logger = logger or logging.getLogger(__name__)

    def _owner(self, address: Optional[str]) -> Optional[str]:
        return self.default_address if address is None else address

    def _execute(self, request: NodeRequest) -> UnsignedTransaction:
        self.logger.debug("Submitting %s request to %s", request.method.upper(), request.path)
        response = self.transport.request(request.path, request.payload, request.method)
        return decode_response(
            response,
            inspect_result=request.inspect_result,
            require_success=request.require_success
        )

    # ------------------------------------------------------------------
    # Value transfers
    # ------------------------------------------------------------------

    @deferrable
    def send_trx(self, to: str, amount: int, from_address: Optional[str] = None) -> NodeRequest:
        """
        Build a TRX transfer.

        Args:
            to: Recipient address
            amount: Amount in SUN
            from_address: Sender address (defaults to the default address)
        """
        from_address = self._owner(from_address)

        if not addr.is_address(to):
            raise ValidationError("Invalid recipient address provided")

        if not _is_positive_integer(amount):
            raise ValidationError("Invalid amount provided")

        if not addr.is_address(from_address):
            raise ValidationError("Invalid origin address provided")

        to = addr.to_hex(to)
        from_address = addr.to_hex(from_address)

        if to == from_address:
            raise ValidationError("Cannot transfer TRX to the same account")

        return NodeRequest("wallet/createtransaction", {
            "to_address": to,
            "owner_address": from_address,
            "amount": int(amount)
        })

    @deferrable
    def send_token(
        self,
        to: str,
        amount: int,
        token_id: str,
        from_address: Optional[str] = None
    ) -> NodeRequest:
        """
        Build a token (TRC-10 asset) transfer.

        Args:
            to: Recipient address
            amount: Amount of the token's smallest unit
            token_id: Token name or ID
            from_address: Sender address (defaults to the default address)
        """
        from_address = self._owner(from_address)

        if not addr.is_address(to):
            raise ValidationError("Invalid recipient address provided")

        if not _is_positive_integer(amount):
            raise ValidationError("Invalid amount provided")

        if not is_non_empty_string(token_id):
            raise ValidationError("Invalid token ID provided")

        if not addr.is_address(from_address):
            raise ValidationError("Invalid origin address provided")

        to = addr.to_hex(to)
        from_address = addr.to_hex(from_address)

        if to == from_address:
            raise ValidationError("Cannot transfer tokens to the same account")

        return NodeRequest("wallet/transferasset", {
            "to_address": to,
            "owner_address": from_address,
            "asset_name": from_utf8(token_id),
            "amount": int(amount)
        })

    @deferrable
    def purchase_token(
        self,
        issuer_address: str,
        token_id: str,
        amount: int,
        buyer: Optional[str] = None
    ) -> NodeRequest:
        """Build a participation in a token sale."""
        buyer = self._owner(buyer)

        if not addr.is_address(issuer_address):
            raise ValidationError("Invalid issuer address provided")

        if not is_non_empty_string(token_id):
            raise ValidationError("Invalid token ID provided")

        if not _is_positive_integer(amount):
            raise ValidationError("Invalid amount provided")

        if not addr.is_address(buyer):
            raise ValidationError("Invalid buyer address provided")

        issuer_address = addr.to_hex(issuer_address)
        buyer = addr.to_hex(buyer)

        if issuer_address == buyer:
            raise ValidationError("Cannot purchase tokens from the same account")

        return NodeRequest("wallet/participateassetissue", {
            "to_address": issuer_address,
            "owner_address": buyer,
            "asset_name": from_utf8(token_id),
            "amount": int(amount)
        })

    # ------------------------------------------------------------------
    # Staking and governance
    # ------------------------------------------------------------------

    @deferrable
    def freeze_balance(
        self,
        amount: int,
        duration: int = MIN_FREEZE_DURATION,
        resource: str = DEFAULT_RESOURCE,
        address: Optional[str] = None
    ) -> NodeRequest:
        """
        Build a stake freeze in exchange for bandwidth or energy.

        Args:
            amount: Amount in SUN to freeze
            duration: Freeze duration in days (minimum 3)
            resource: "BANDWIDTH" or "ENERGY"
            address: Owner address (defaults to the default address)
        """
        address = self._owner(address)

        if not addr.is_address(address):
            raise ValidationError("Invalid address provided")

        if not _is_positive_integer(amount):
            raise ValidationError("Invalid amount provided")

        if not is_integer(duration) or duration < MIN_FREEZE_DURATION:
            raise ValidationError(f"Invalid duration provided, minimum of {MIN_FREEZE_DURATION} days")

        if resource not in RESOURCE_TYPES:
            raise ValidationError('Invalid resource provided: Expected "BANDWIDTH" or "ENERGY"')

        return NodeRequest("wallet/freezebalance", {
            "owner_address": addr.to_hex(address),
            "frozen_balance": int(amount),
            "frozen_duration": int(duration),
            "resource": resource
        })

    @deferrable
    def unfreeze_balance(self, resource: str = DEFAULT_RESOURCE, address: Optional[str] = None) -> NodeRequest:
        """Build an unfreeze of previously frozen stake."""
        address = self._owner(address)

        if not addr.is_address(address):
            raise ValidationError("Invalid address provided")

        if resource not in RESOURCE_TYPES:
            raise ValidationError('Invalid resource provided: Expected "BANDWIDTH" or "ENERGY"')

        return NodeRequest("wallet/unfreezebalance", {
            "owner_address": addr.to_hex(address),
            "resource": resource
        })

    @deferrable
    def withdraw_block_rewards(self, address: Optional[str] = None) -> NodeRequest:
        address = self._owner(address)

        if not addr.is_address(address):
            raise ValidationError("Invalid address provided")

        return NodeRequest("wallet/withdrawbalance", {
            "owner_address": addr.to_hex(address)
        })

    @deferrable
    def apply_for_sr(self, url: str, address: Optional[str] = None) -> NodeRequest:
        """
        Build an application to become a Super Representative.

        Args:
            url: Candidate website
            address: Candidate address (defaults to the default address)
        """
        address = self._owner(address)

        if not addr.is_address(address):
            raise ValidationError("Invalid address provided")

        if not is_valid_url(url):
            raise ValidationError("Invalid url provided")

        return NodeRequest("wallet/createwitness", {
            "owner_address": addr.to_hex(address),
            "url": from_utf8(url)
        })

    @deferrable
    def vote(self, votes: Dict[str, int], voter_address: Optional[str] = None) -> NodeRequest:
        """
        Build a vote for one or more Super Representatives.

        Every entry is validated before anything is sent; a single bad entry
        rejects the whole vote.

        Args:
            votes: Mapping of candidate address to vote count
            voter_address: Voter address (defaults to the default address)
        """
        voter_address = self._owner(voter_address)

        if not isinstance(votes, Mapping) or not votes:
            raise ValidationError("Invalid votes object provided")

        if not addr.is_address(voter_address):
            raise ValidationError("Invalid voter address provided")

        vote_list = []
        for sr_address, vote_count in votes.items():
            if not addr.is_address(sr_address):
                raise ValidationError(f"Invalid SR address provided: {sr_address}")

            if not _is_positive_integer(vote_count):
                raise ValidationError(f"Invalid vote count provided for SR: {sr_address}")

            vote_list.append({
                "vote_address": addr.to_hex(sr_address),
                "vote_count": int(vote_count)
            })

        return NodeRequest("wallet/votewitnessaccount", {
            "owner_address": addr.to_hex(voter_address),
            "votes": vote_list
        })

    # ------------------------------------------------------------------
    # Smart contracts
    # ------------------------------------------------------------------

    @deferrable
    def create_smart_contract(self, options: Any = None, issuer_address: Optional[str] = None) -> NodeRequest:
        """
        Build a smart contract deployment.

        Args:
            options: ``SmartContractOptions`` or a mapping with the same keys
            issuer_address: Deployer address (defaults to the default address)
        """
        issuer_address = self._owner(issuer_address)
        options = SmartContractOptions.coerce(options)

        abi = options.abi
        if abi and isinstance(abi, str):
            try:
                abi = json.loads(abi)
            except ValueError:
                raise ValidationError("Invalid options.abi provided")

        if not isinstance(abi, list):
            raise ValidationError("Invalid options.abi provided")

        payable = any(
            isinstance(entry, Mapping)
            and entry.get("type") == "constructor"
            and bool(entry.get("payable") or entry.get("stateMutability") == "payable")
            for entry in abi
        )

        if not is_hex(options.bytecode):
            raise ValidationError("Invalid options.bytecode provided")

        fee_limit = options.fee_limit
        if not is_integer(fee_limit) or fee_limit <= 0 or fee_limit > MAX_FEE_LIMIT:
            raise ValidationError("Invalid options.fee_limit provided")

        call_value = options.call_value
        if not _is_non_negative_integer(call_value):
            raise ValidationError("Invalid options.call_value provided")

        if payable and call_value == 0:
            raise ValidationError("When contract is payable, options.call_value must be a positive integer")

        if not payable and call_value > 0:
            raise ValidationError("When contract is not payable, options.call_value must be 0")

        user_fee_percentage = options.user_fee_percentage
        if (not is_integer(user_fee_percentage)
                or user_fee_percentage < MIN_USER_FEE_PERCENTAGE
                or user_fee_percentage > MAX_USER_FEE_PERCENTAGE):
            raise ValidationError("Invalid options.user_fee_percentage provided")

        if not isinstance(options.parameters, (list, tuple)):
            raise ValidationError("Invalid parameters provided")

        if not addr.is_address(issuer_address):
            raise ValidationError("Invalid issuer address provided")

        parameter = encode_parameters(options.parameters)

        return NodeRequest("wallet/deploycontract", {
            "owner_address": addr.to_hex(issuer_address),
            "fee_limit": int(fee_limit),
            "call_value": int(call_value),
            "consume_user_resource_percent": int(user_fee_percentage),
            "abi": json.dumps(abi, separators=(",", ":")),
            "bytecode": options.bytecode,
            "parameter": parameter
        })

    @deferrable
    def trigger_smart_contract(
        self,
        contract_address: str,
        function_selector: str,
        fee_limit: int = MAX_FEE_LIMIT,
        call_value: int = 0,
        parameters: ContractParameters = (),
        issuer_address: Optional[str] = None
    ) -> NodeRequest:
        """
        Build a call to a smart contract method.

        Args:
            contract_address: Address of the deployed contract
            function_selector: Method signature, e.g. "transfer(address,uint256)"
            fee_limit: Maximum fee in SUN, at most 1_000_000_000
            call_value: SUN sent along with the call
            parameters: Typed method arguments
            issuer_address: Caller address (defaults to the default address)
        """
        issuer_address = self._owner(issuer_address)

        if not addr.is_address(contract_address):
            raise ValidationError("Invalid contract address provided")

        if not is_non_empty_string(function_selector):
            raise ValidationError("Invalid function selector provided")

        if not _is_non_negative_integer(call_value):
            raise ValidationError("Invalid call value provided")

        if not is_integer(fee_limit) or fee_limit <= 0 or fee_limit > MAX_FEE_LIMIT:
            raise ValidationError("Invalid fee limit provided")

        if not isinstance(parameters, (list, tuple)):
            raise ValidationError("Invalid parameters provided")

        if not addr.is_address(issuer_address):
            raise ValidationError("Invalid issuer address provided")

        function_selector = re.sub(r"\s+", "", function_selector)
        parameter = encode_parameters(parameters)

        return NodeRequest(
            "wallet/triggersmartcontract",
            {
                "contract_address": addr.to_hex(contract_address),
                "owner_address": addr.to_hex(issuer_address),
                "function_selector": function_selector,
                "fee_limit": int(fee_limit),
                "call_value": int(call_value),
                "parameter": parameter
            },
            inspect_result=True,
            require_success=True
        )

    # ------------------------------------------------------------------
    # Token issuance
    # ------------------------------------------------------------------

    @deferrable
    def create_token(self, options: Any = None, issuer_address: Optional[str] = None) -> NodeRequest:
        """
        Build a token issuance.

        Args:
            options: ``TokenOptions`` or a mapping with the same keys
            issuer_address: Issuer address (defaults to the default address)
        """
        issuer_address = self._owner(issuer_address)
        options = TokenOptions.coerce(options)
        now = _now_ms()

        sale_start = now if options.sale_start is None else options.sale_start
        sale_end = options.sale_end
        free_bandwidth = options.free_bandwidth
        free_bandwidth_limit = options.free_bandwidth_limit
        frozen_amount = options.frozen_amount
        frozen_duration = options.frozen_duration

        if not is_non_empty_string(options.name):
            raise ValidationError("Invalid token name provided")

        if not is_non_empty_string(options.abbreviation):
            raise ValidationError("Invalid token abbreviation provided")

        if not _is_positive_integer(options.total_supply):
            raise ValidationError("Invalid supply amount provided")

        if not _is_positive_integer(options.trx_ratio):
            raise ValidationError("TRX ratio must be a positive integer")

        if not _is_positive_integer(options.token_ratio):
            raise ValidationError("Token ratio must be a positive integer")

        if not is_integer(sale_start) or sale_start < now:
            raise ValidationError("Invalid sale start timestamp provided")

        if not is_integer(sale_end) or sale_end <= sale_start:
            raise ValidationError("Invalid sale end timestamp provided")

        if not is_non_empty_string(options.description):
            raise ValidationError("Invalid token description provided")

        if not is_valid_url(options.url):
            raise ValidationError("Invalid token url provided")

        if not _is_non_negative_integer(free_bandwidth):
            raise ValidationError("Invalid free bandwidth amount provided")

        if not _is_non_negative_integer(free_bandwidth_limit) or (free_bandwidth and not free_bandwidth_limit):
            raise ValidationError("Invalid free bandwidth limit provided")

        if not _is_non_negative_integer(frozen_amount) or (not frozen_duration and frozen_amount):
            raise ValidationError("Invalid frozen supply provided")

        if not _is_non_negative_integer(frozen_duration) or (frozen_duration and not frozen_amount):
            raise ValidationError("Invalid frozen duration provided")

        if not addr.is_address(issuer_address):
            raise ValidationError("Invalid issuer address provided")

        return NodeRequest(
            "wallet/createassetissue",
            {
                "owner_address": addr.to_hex(issuer_address),
                "name": from_utf8(options.name),
                "abbr": from_utf8(options.abbreviation),
                "description": from_utf8(options.description),
                "url": from_utf8(options.url),
                "total_supply": int(options.total_supply),
                "trx_num": int(options.trx_ratio),
                "num": int(options.token_ratio),
                "start_time": int(sale_start),
                "end_time": int(sale_end),
                "free_asset_net_limit": int(free_bandwidth),
                "public_free_asset_net_limit": int(free_bandwidth_limit),
                "frozen_supply": {
                    "frozen_amount": int(frozen_amount),
                    "frozen_days": int(frozen_duration)
                }
            },
            inspect_result=True
        )

    @deferrable
    def update_token(self, options: Any = None, issuer_address: Optional[str] = None) -> NodeRequest:
        """
        Build an update of an issued token's description, URL and bandwidth limits.
        """
        issuer_address = self._owner(issuer_address)
        options = TokenUpdateOptions.coerce(options)

        free_bandwidth = options.free_bandwidth
        free_bandwidth_limit = options.free_bandwidth_limit

        if not is_non_empty_string(options.description):
            raise ValidationError("Invalid token description provided")

        if not is_valid_url(options.url):
            raise ValidationError("Invalid token url provided")

        if not _is_non_negative_integer(free_bandwidth):
            raise ValidationError("Invalid free bandwidth amount provided")

        if not _is_non_negative_integer(free_bandwidth_limit) or (free_bandwidth and not free_bandwidth_limit):
            raise ValidationError("Invalid free bandwidth limit provided")

        if not addr.is_address(issuer_address):
            raise ValidationError("Invalid issuer address provided")

        return NodeRequest(
            "wallet/updateasset",
            {
                "owner_address": addr.to_hex(issuer_address),
                "description": from_utf8(options.description),
                "url": from_utf8(options.url),
                "new_limit": int(free_bandwidth),
                "new_public_limit": int(free_bandwidth_limit)
            },
            inspect_result=True
        )

    # Asset aliases kept for callers used to the node's naming
    send_asset = send_token
    purchase_asset = purchase_token
    create_asset = create_token
    update_asset = update_token
