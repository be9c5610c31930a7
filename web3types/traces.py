"""Types for the ad-hoc trace API: traces, VM traces and state differences."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .block import _dump, _expect_object, _list_of, _optional, _required
from .byte_data import Bytes
from .trace_filtering import (
    ActionType,
    _enum,
    _string,
    _usize,
    action_to_json,
    parse_action,
    parse_result,
    result_to_json,
)
from .uint import H160, H256, U256, DecodeError


class TraceType(str, Enum):
    """The kind of trace to make."""

    TRACE = "trace"
    VM_TRACE = "vmTrace"
    STATE_DIFF = "stateDiff"


class DiffKind(str, Enum):
    """How a value changed: unchanged, created, removed or altered."""

    SAME = "="
    BORN = "+"
    DIED = "-"
    CHANGED = "*"


@dataclass(frozen=True)
class Diff:
    """A change of one value; ``before`` and ``after`` are set as the kind requires."""

    kind: DiffKind
    before: Any = None
    after: Any = None

    @classmethod
    def same(cls):
        return cls(DiffKind.SAME)

    @classmethod
    def born(cls, value):
        return cls(DiffKind.BORN, after=value)

    @classmethod
    def died(cls, value):
        return cls(DiffKind.DIED, before=value)

    @classmethod
    def changed(cls, before, after):
        return cls(DiffKind.CHANGED, before=before, after=after)

    @classmethod
    def from_json(cls, data, parse):
        """Decode ``"="``, ``{"+": v}``, ``{"-": v}`` or ``{"*": {"from": a, "to": b}}``."""
        if data == DiffKind.SAME.value:
            return cls.same()
        if not isinstance(data, Mapping) or len(data) != 1:
            raise DecodeError(f"invalid diff {data!r}")
        ((tag, value),) = data.items()
        if tag == DiffKind.BORN.value:
            return cls.born(parse(value))
        if tag == DiffKind.DIED.value:
            return cls.died(parse(value))
        if tag == DiffKind.CHANGED.value:
            _expect_object(value, "changed value")
            return cls.changed(_required(value, "from", parse), _required(value, "to", parse))
        raise DecodeError(f"unknown variant `{tag}`, expected one of `=`, `+`, `-`, `*`")

    def to_json(self, dump):
        if self.kind is DiffKind.SAME:
            return DiffKind.SAME.value
        if self.kind is DiffKind.BORN:
            return {DiffKind.BORN.value: dump(self.after)}
        if self.kind is DiffKind.DIED:
            return {DiffKind.DIED.value: dump(self.before)}
        return {DiffKind.CHANGED.value: {"from": dump(self.before), "to": dump(self.after)}}


def _to_json(value):
    return value.to_json()


def _mapping(parse_key, parse_value, what):
    def parse(data):
        _expect_object(data, what)
        return {parse_key(key): parse_value(value) for key, value in data.items()}

    return parse


def _sorted_items(mapping):
    return sorted(mapping.items(), key=lambda item: item[0].to_json())


def _diff_of(parse):
    return lambda data: Diff.from_json(data, parse)


@dataclass
class AccountDiff:
    """Changes to one account's balance, nonce, code and storage."""

    balance: Diff
    nonce: Diff
    code: Diff
    storage: dict[H256, Diff] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "account diff")
        return cls(
            balance=_required(data, "balance", _diff_of(U256.from_hex)),
            nonce=_required(data, "nonce", _diff_of(U256.from_hex)),
            code=_required(data, "code", _diff_of(Bytes.from_json)),
            storage=_required(
                data, "storage", _mapping(H256.from_hex, _diff_of(H256.from_hex), "storage diff")
            ),
        )

    def to_json(self):
        return {
            "balance": self.balance.to_json(_to_json),
            "nonce": self.nonce.to_json(_to_json),
            "code": self.code.to_json(_to_json),
            "storage": {
                key.to_json(): diff.to_json(_to_json) for key, diff in _sorted_items(self.storage)
            },
        }


@dataclass
class StateDiff:
    """Changes to every touched account, by address."""

    accounts: dict[H160, AccountDiff] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data):
        return cls(_mapping(H160.from_hex, AccountDiff.from_json, "state diff")(data))

    def to_json(self):
        return {
            address.to_json(): diff.to_json() for address, diff in _sorted_items(self.accounts)
        }


@dataclass
class TransactionTrace:
    """One trace entry of an ad-hoc trace."""

    trace_address: list[int]
    subtraces: int
    action: Any
    action_type: ActionType
    result: Any = None
    error: str | None = None

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "transaction trace")
        return cls(
            trace_address=_required(data, "traceAddress", _list_of(_usize)),
            subtraces=_required(data, "subtraces", _usize),
            action=_required(data, "action", parse_action),
            action_type=_required(data, "type", _enum(ActionType)),
            result=_optional(data, "result", parse_result),
            error=_optional(data, "error", _string),
        )

    def to_json(self):
        return {
            "traceAddress": list(self.trace_address),
            "subtraces": self.subtraces,
            "action": action_to_json(self.action),
            "type": self.action_type.value,
            "result": result_to_json(self.result),
            "error": self.error,
        }


@dataclass
class MemoryDiff:
    """A changed chunk of memory and where it starts."""

    off: int = 0
    data: Bytes = Bytes()

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "memory diff")
        return cls(
            off=_required(data, "off", _usize),
            data=_required(data, "data", Bytes.from_json),
        )

    def to_json(self):
        return {"off": self.off, "data": self.data.to_json()}


@dataclass
class StorageDiff:
    """A changed storage slot and its new value."""

    key: U256 = U256(0)
    val: U256 = U256(0)

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "storage diff")
        return cls(
            key=_required(data, "key", U256.from_hex),
            val=_required(data, "val", U256.from_hex),
        )

    def to_json(self):
        return {"key": self.key.to_json(), "val": self.val.to_json()}


@dataclass
class VMExecutedOperation:
    """Effects of one executed VM operation."""

    used: int = 0
    push: list[U256] = field(default_factory=list)
    mem: MemoryDiff | None = None
    store: StorageDiff | None = None

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "executed operation")
        return cls(
            used=_required(data, "used", _usize),
            push=_required(data, "push", _list_of(U256.from_hex)),
            mem=_optional(data, "mem", MemoryDiff.from_json),
            store=_optional(data, "store", StorageDiff.from_json),
        )

    def to_json(self):
        return {
            "used": self.used,
            "push": [value.to_json() for value in self.push],
            "mem": _dump(self.mem),
            "store": _dump(self.store),
        }


@dataclass
class VMOperation:
    """One VM operation: program counter, cost, effects and any nested trace."""

    pc: int = 0
    cost: int = 0
    ex: VMExecutedOperation | None = None
    sub: VMTrace | None = None

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "vm operation")
        return cls(
            pc=_required(data, "pc", _usize),
            cost=_required(data, "cost", _usize),
            ex=_optional(data, "ex", VMExecutedOperation.from_json),
            sub=_optional(data, "sub", VMTrace.from_json),
        )

    def to_json(self):
        return {"pc": self.pc, "cost": self.cost, "ex": _dump(self.ex), "sub": _dump(self.sub)}


@dataclass
class VMTrace:
    """The full VM trace of a call or contract creation."""

    code: Bytes = Bytes()
    ops: list[VMOperation] = field(default_factory=list)

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "vm trace")
        return cls(
            code=_required(data, "code", Bytes.from_json),
            ops=_required(data, "ops", _list_of(VMOperation.from_json)),
        )

    def to_json(self):
        return {"code": self.code.to_json(), "ops": [op.to_json() for op in self.ops]}


@dataclass
class BlockTrace:
    """The result of an ad-hoc trace of one transaction."""

    output: Bytes
    trace: list[TransactionTrace] | None = None
    vm_trace: VMTrace | None = None
    state_diff: StateDiff | None = None
    transaction_hash: H256 | None = None

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "block trace")
        return cls(
            output=_required(data, "output", Bytes.from_json),
            trace=_optional(data, "trace", _list_of(TransactionTrace.from_json)),
            vm_trace=_optional(data, "vmTrace", VMTrace.from_json),
            state_diff=_optional(data, "stateDiff", StateDiff.from_json),
            transaction_hash=_optional(data, "transactionHash", H256.from_hex),
        )

    def to_json(self):
        return {
            "output": self.output.to_json(),
            "trace": None if self.trace is None else [item.to_json() for item in self.trace],
            "vmTrace": _dump(self.vm_trace),
            "stateDiff": _dump(self.state_diff),
            "transactionHash": _dump(self.transaction_hash),
        }