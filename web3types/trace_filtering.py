"""Types for the transaction-trace filtering API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum

from .block import BlockNumber, _dump, _expect_object, _list_of, _optional, _required
from .byte_data import Bytes
from .uint import H160, H256, U256, DecodeError

_USIZE_LIMIT = 1 << 64


def _usize(value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"expected an unsigned integer, got {value!r}")
    if not 0 <= value < _USIZE_LIMIT:
        raise DecodeError(f"{value} does not fit in 64 unsigned bits")
    return value


def _string(value):
    if not isinstance(value, str):
        raise DecodeError(f"expected a string, got {type(value).__name__}")
    return value


def _enum(kind):
    def parse(value):
        try:
            return kind(value)
        except ValueError:
            raise DecodeError(f"unknown variant {value!r} for {kind.__name__}") from None

    return parse


def _count(value, name):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return value


@dataclass(frozen=True)
class TraceFilter:
    """A trace filter; built with TraceFilterBuilder."""

    from_block: BlockNumber | None = None
    to_block: BlockNumber | None = None
    from_address: tuple[H160, ...] | None = None
    to_address: tuple[H160, ...] | None = None
    after: int | None = None
    count: int | None = None

    def to_json(self):
        out = {}
        if self.from_block is not None:
            out["fromBlock"] = self.from_block.to_json()
        if self.to_block is not None:
            out["toBlock"] = self.to_block.to_json()
        if self.from_address is not None:
            out["fromAddress"] = [address.to_json() for address in self.from_address]
        if self.to_address is not None:
            out["toAddress"] = [address.to_json() for address in self.to_address]
        if self.after is not None:
            out["after"] = self.after
        if self.count is not None:
            out["count"] = self.count
        return out


class TraceFilterBuilder:
    """Builds a TraceFilter; every method returns a new builder."""

    __slots__ = ("_filter",)

    def __init__(self, base=None):
        self._filter = base if base is not None else TraceFilter()

    def _with(self, **changes):
        return TraceFilterBuilder(replace(self._filter, **changes))

    def from_block(self, block):
        return self._with(from_block=block)

    def to_block(self, block):
        return self._with(to_block=block)

    def to_address(self, addresses):
        return self._with(to_address=tuple(addresses))

    def from_address(self, addresses):
        return self._with(from_address=tuple(addresses))

    def after(self, after):
        """Skip this many traces."""
        return self._with(after=_count(after, "after"))

    def count(self, count):
        """Return at most this many traces."""
        return self._with(count=_count(count, "count"))

    def build(self):
        return self._filter


class ActionType(str, Enum):
    """The kind of an external action."""

    CALL = "call"
    CREATE = "create"
    SUICIDE = "suicide"
    REWARD = "reward"


class CallType(str, Enum):
    """The kind of a call."""

    NONE = "none"
    CALL = "call"
    CALL_CODE = "callcode"
    DELEGATE_CALL = "delegatecall"
    STATIC_CALL = "staticcall"


class RewardType(str, Enum):
    """The kind of a reward."""

    BLOCK = "block"
    UNCLE = "uncle"
    EMPTY_STEP = "emptyStep"
    EXTERNAL = "external"


@dataclass
class CallResult:
    """Gas used and output of a call."""

    gas_used: U256 = U256(0)
    output: Bytes = Bytes()


@dataclass
class CreateResult:
    """Gas used, code and assigned address of a contract creation."""

    gas_used: U256 = U256(0)
    code: Bytes = Bytes()
    address: H160 = H160()


@dataclass
class Call:
    """A call action."""

    from_address: H160 = H160()
    to: H160 = H160()
    value: U256 = U256(0)
    gas: U256 = U256(0)
    input: Bytes = Bytes()
    call_type: CallType = CallType.NONE


@dataclass
class Create:
    """A contract creation action."""

    from_address: H160 = H160()
    value: U256 = U256(0)
    gas: U256 = U256(0)
    init: Bytes = Bytes()


@dataclass
class Suicide:
    """A self-destruct action."""

    address: H160 = H160()
    refund_address: H160 = H160()
    balance: U256 = U256(0)


@dataclass
class Reward:
    """A reward action."""

    author: H160
    value: U256
    reward_type: RewardType


def _parse_call(data):
    return Call(
        from_address=_required(data, "from", H160.from_hex),
        to=_required(data, "to", H160.from_hex),
        value=_required(data, "value", U256.from_hex),
        gas=_required(data, "gas", U256.from_hex),
        input=_required(data, "input", Bytes.from_json),
        call_type=_required(data, "callType", _enum(CallType)),
    )


def _parse_create(data):
    return Create(
        from_address=_required(data, "from", H160.from_hex),
        value=_required(data, "value", U256.from_hex),
        gas=_required(data, "gas", U256.from_hex),
        init=_required(data, "init", Bytes.from_json),
    )


def _parse_suicide(data):
    return Suicide(
        address=_required(data, "address", H160.from_hex),
        refund_address=_required(data, "refundAddress", H160.from_hex),
        balance=_required(data, "balance", U256.from_hex),
    )


def _parse_reward(data):
    return Reward(
        author=_required(data, "author", H160.from_hex),
        value=_required(data, "value", U256.from_hex),
        reward_type=_required(data, "rewardType", _enum(RewardType)),
    )


def _first_match(data, parsers, what):
    if not isinstance(data, Mapping):
        raise DecodeError(f"data did not match any variant of untagged enum {what}")
    for parse in parsers:
        try:
            return parse(data)
        except DecodeError:
            continue
    raise DecodeError(f"data did not match any variant of untagged enum {what}")


def parse_action(data):
    """Decode an action, trying call, create, suicide and reward in that order."""
    return _first_match(data, (_parse_call, _parse_create, _parse_suicide, _parse_reward), "Action")


def action_to_json(action):
    """Encode a Call, Create, Suicide or Reward action."""
    if isinstance(action, Call):
        return {
            "from": action.from_address.to_json(),
            "to": action.to.to_json(),
            "value": action.value.to_json(),
            "gas": action.gas.to_json(),
            "input": action.input.to_json(),
            "callType": action.call_type.value,
        }
    if isinstance(action, Create):
        return {
            "from": action.from_address.to_json(),
            "value": action.value.to_json(),
            "gas": action.gas.to_json(),
            "init": action.init.to_json(),
        }
    if isinstance(action, Suicide):
        return {
            "address": action.address.to_json(),
            "refundAddress": action.refund_address.to_json(),
            "balance": action.balance.to_json(),
        }
    if isinstance(action, Reward):
        return {
            "author": action.author.to_json(),
            "value": action.value.to_json(),
            "rewardType": action.reward_type.value,
        }
    raise TypeError(f"not an action: {action!r}")


def _parse_call_result(data):
    return CallResult(
        gas_used=_required(data, "gasUsed", U256.from_hex),
        output=_required(data, "output", Bytes.from_json),
    )


def _parse_create_result(data):
    return CreateResult(
        gas_used=_required(data, "gasUsed", U256.from_hex),
        code=_required(data, "code", Bytes.from_json),
        address=_required(data, "address", H160.from_hex),
    )


def parse_result(data):
    """Decode a call result, a create result, or None from null."""
    if data is None:
        return None
    return _first_match(data, (_parse_call_result, _parse_create_result), "Res")


def result_to_json(result):
    """Encode a CallResult, CreateResult or None."""
    if result is None:
        return None
    if isinstance(result, CallResult):
        return {"gasUsed": result.gas_used.to_json(), "output": result.output.to_json()}
    if isinstance(result, CreateResult):
        return {
            "gasUsed": result.gas_used.to_json(),
            "code": result.code.to_json(),
            "address": result.address.to_json(),
        }
    raise TypeError(f"not a trace result: {result!r}")


@dataclass
class Trace:
    """A trace as returned by the trace filtering API."""

    action: Call | Create | Suicide | Reward
    result: CallResult | CreateResult | None
    trace_address: list[int]
    subtraces: int
    transaction_position: int | None
    transaction_hash: H256 | None
    block_number: int
    block_hash: H256
    action_type: ActionType
    error: str | None = None

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "trace")
        return cls(
            action=_required(data, "action", parse_action),
            result=_optional(data, "result", parse_result),
            trace_address=_required(data, "traceAddress", _list_of(_usize)),
            subtraces=_required(data, "subtraces", _usize),
            transaction_position=_optional(data, "transactionPosition", _usize),
            transaction_hash=_optional(data, "transactionHash", H256.from_hex),
            block_number=_required(data, "blockNumber", _usize),
            block_hash=_required(data, "blockHash", H256.from_hex),
            action_type=_required(data, "type", _enum(ActionType)),
            error=_optional(data, "error", _string),
        )

    def to_json(self):
        return {
            "action": action_to_json(self.action),
            "result": result_to_json(self.result),
            "traceAddress": list(self.trace_address),
            "subtraces": self.subtraces,
            "transactionPosition": self.transaction_position,
            "transactionHash": _dump(self.transaction_hash),
            "blockNumber": self.block_number,
            "blockHash": self.block_hash.to_json(),
            "type": self.action_type.value,
            "error": self.error,
        }