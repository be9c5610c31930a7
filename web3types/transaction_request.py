"""Requests for calling contracts and for sending transactions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

from .block import _dump, _expect_object, _list_of, _optional, _required
from .byte_data import Bytes
from .transaction import AccessListItem
from .uint import H160, U64, U256, DecodeError

_U64_LIMIT = 1 << 64
_CONDITION_KINDS = ("block", "time")


def _access_list(value):
    return _list_of(AccessListItem.from_json)(value)


def _dump_access_list(access_list):
    return [item.to_json() for item in access_list]


def _put_if_set(out, key, value, dump=None):
    """Add ``key`` to ``out`` only when ``value`` is set."""
    if value is not None:
        out[key] = dump(value) if dump is not None else value.to_json()


def _u64(value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"expected an unsigned 64-bit integer, got {value!r}")
    if not 0 <= value < _U64_LIMIT:
        raise DecodeError(f"{value} does not fit in 64 unsigned bits")
    return value


@dataclass
class CallRequest:
    """A contract call request for eth_call or eth_estimateGas; unset fields are left out."""

    from_address: H160 | None = None
    to: H160 | None = None
    gas: U256 | None = None
    gas_price: U256 | None = None
    value: U256 | None = None
    data: Bytes | None = None
    transaction_type: U64 | None = None
    access_list: list[AccessListItem] | None = None
    max_fee_per_gas: U256 | None = None
    max_priority_fee_per_gas: U256 | None = None

    @classmethod
    def builder(cls):
        return CallRequestBuilder()

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "call request")
        return cls(
            from_address=_optional(data, "from", H160.from_hex),
            to=_optional(data, "to", H160.from_hex),
            gas=_optional(data, "gas", U256.from_hex),
            gas_price=_optional(data, "gasPrice", U256.from_hex),
            value=_optional(data, "value", U256.from_hex),
            data=_optional(data, "data", Bytes.from_json),
            transaction_type=_optional(data, "type", U64.from_hex),
            access_list=_optional(data, "accessList", _access_list),
            max_fee_per_gas=_optional(data, "maxFeePerGas", U256.from_hex),
            max_priority_fee_per_gas=_optional(data, "maxPriorityFeePerGas", U256.from_hex),
        )

    def to_json(self):
        out = {}
        _put_if_set(out, "from", self.from_address)
        _put_if_set(out, "to", self.to)
        _put_if_set(out, "gas", self.gas)
        _put_if_set(out, "gasPrice", self.gas_price)
        _put_if_set(out, "value", self.value)
        _put_if_set(out, "data", self.data)
        _put_if_set(out, "type", self.transaction_type)
        _put_if_set(out, "accessList", self.access_list, _dump_access_list)
        _put_if_set(out, "maxFeePerGas", self.max_fee_per_gas)
        _put_if_set(out, "maxPriorityFeePerGas", self.max_priority_fee_per_gas)
        return out


class CallRequestBuilder:
    """Builds a CallRequest; every method returns a new builder."""

    __slots__ = ("_request",)

    def __init__(self, base=None):
        self._request = base if base is not None else CallRequest()

    def _with(self, **changes):
        return CallRequestBuilder(replace(self._request, **changes))

    def from_address(self, address):
        """Set the sender address."""
        return self._with(from_address=address)

    def to(self, address):
        """Set the recipient address."""
        return self._with(to=address)

    def gas(self, gas):
        return self._with(gas=U256(gas))

    def gas_price(self, gas_price):
        return self._with(gas_price=U256(gas_price))

    def value(self, value):
        return self._with(value=U256(value))

    def data(self, data):
        return self._with(data=data)

    def transaction_type(self, transaction_type):
        return self._with(transaction_type=U64(transaction_type))

    def access_list(self, access_list):
        return self._with(access_list=list(access_list))

    def build(self):
        return replace(self._request)


@dataclass(frozen=True)
class TransactionCondition:
    """Minimum block number ("block") or unix time ("time") for inclusion."""

    kind: str
    value: int

    def __post_init__(self):
        if self.kind not in _CONDITION_KINDS:
            raise ValueError(f"unknown transaction condition {self.kind!r}")
        try:
            _u64(self.value)
        except DecodeError as error:
            raise ValueError(str(error)) from None

    @classmethod
    def block(cls, number):
        """Valid from this block number on."""
        return cls("block", number)

    @classmethod
    def time(cls, timestamp):
        """Valid from this unix time on."""
        return cls("time", timestamp)

    @classmethod
    def from_json(cls, data):
        """Decode ``{"block": n}`` or ``{"time": t}``."""
        if not isinstance(data, Mapping):
            raise DecodeError(
                f"expected a JSON object for transaction condition, got {type(data).__name__}"
            )
        if len(data) != 1:
            raise DecodeError("expected a transaction condition object with exactly one key")
        ((kind, value),) = data.items()
        if kind not in _CONDITION_KINDS:
            raise DecodeError(f"unknown variant `{kind}`, expected `block` or `time`")
        return cls(kind, _u64(value))

    def to_json(self):
        return {self.kind: self.value}


@dataclass
class TransactionRequest:
    """Parameters for sending a transaction; unset optional fields are left out."""

    from_address: H160 = H160()
    to: H160 | None = None
    gas: U256 | None = None
    gas_price: U256 | None = None
    value: U256 | None = None
    data: Bytes | None = None
    nonce: U256 | None = None
    condition: TransactionCondition | None = None
    transaction_type: U64 | None = None
    access_list: list[AccessListItem] | None = None
    max_fee_per_gas: U256 | None = None
    max_priority_fee_per_gas: U256 | None = None

    @classmethod
    def builder(cls):
        return TransactionRequestBuilder()

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "transaction request")
        return cls(
            from_address=_required(data, "from", H160.from_hex),
            to=_optional(data, "to", H160.from_hex),
            gas=_optional(data, "gas", U256.from_hex),
            gas_price=_optional(data, "gasPrice", U256.from_hex),
            value=_optional(data, "value", U256.from_hex),
            data=_optional(data, "data", Bytes.from_json),
            nonce=_optional(data, "nonce", U256.from_hex),
            condition=_optional(data, "condition", TransactionCondition.from_json),
            transaction_type=_optional(data, "type", U64.from_hex),
            access_list=_optional(data, "accessList", _access_list),
            max_fee_per_gas=_optional(data, "maxFeePerGas", U256.from_hex),
            max_priority_fee_per_gas=_optional(data, "maxPriorityFeePerGas", U256.from_hex),
        )

    def to_json(self):
        out = {"from": self.from_address.to_json()}
        _put_if_set(out, "to", self.to)
        _put_if_set(out, "gas", self.gas)
        _put_if_set(out, "gasPrice", self.gas_price)
        _put_if_set(out, "value", self.value)
        _put_if_set(out, "data", self.data)
        _put_if_set(out, "nonce", self.nonce)
        _put_if_set(out, "condition", self.condition)
        _put_if_set(out, "type", self.transaction_type)
        _put_if_set(out, "accessList", self.access_list, _dump_access_list)
        _put_if_set(out, "maxFeePerGas", self.max_fee_per_gas)
        _put_if_set(out, "maxPriorityFeePerGas", self.max_priority_fee_per_gas)
        return out


class TransactionRequestBuilder:
    """Builds a TransactionRequest; every method returns a new builder."""

    __slots__ = ("_request",)

    def __init__(self, base=None):
        self._request = base if base is not None else TransactionRequest()

    def _with(self, **changes):
        return TransactionRequestBuilder(replace(self._request, **changes))

    def from_address(self, address):
        """Set the sender address."""
        return self._with(from_address=address)

    def to(self, address):
        """Set the recipient address."""
        return self._with(to=address)

    def gas(self, gas):
        return self._with(gas=U256(gas))

    def value(self, value):
        return self._with(value=U256(value))

    def data(self, data):
        return self._with(data=data)

    def nonce(self, nonce):
        return self._with(nonce=U256(nonce))

    def condition(self, condition):
        return self._with(condition=condition)

    def transaction_type(self, transaction_type):
        return self._with(transaction_type=U64(transaction_type))

    def access_list(self, access_list):
        return self._with(access_list=list(access_list))

    def build(self):
        return replace(self._request)


__all__ = [
    "CallRequest",
    "CallRequestBuilder",
    "TransactionCondition",
    "TransactionRequest",
    "TransactionRequestBuilder",
    "_dump",
]