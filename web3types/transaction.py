"""Transactions, receipts and access lists."""

from __future__ import annotations

from dataclasses import dataclass, field

from .block import _defaulted, _dump, _expect_object, _list_of, _optional, _required
from .byte_data import Bytes
from .log import Log
from .uint import H160, H256, H2048, U64, U256


def _put_if_set(out, key, value):
    """Add ``key`` to ``out`` only when ``value`` is set."""
    if value is not None:
        out[key] = value.to_json()


@dataclass
class AccessListItem:
    """An address and the storage keys a transaction plans to touch there."""

    address: H160 = H160()
    storage_keys: list[H256] = field(default_factory=list)

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "access list item")
        return cls(
            address=_required(data, "address", H160.from_hex),
            storage_keys=_required(data, "storageKeys", _list_of(H256.from_hex)),
        )

    def to_json(self):
        return {
            "address": self.address.to_json(),
            "storageKeys": [key.to_json() for key in self.storage_keys],
        }


def _access_list(value):
    return _list_of(AccessListItem.from_json)(value)


def _dump_access_list(access_list):
    return None if access_list is None else [item.to_json() for item in access_list]


@dataclass
class Transaction:
    """A transaction, pending or in the chain."""

    hash: H256 = H256()
    nonce: U256 = U256(0)
    block_hash: H256 | None = None
    block_number: U64 | None = None
    transaction_index: U64 | None = None
    from_address: H160 | None = None
    to: H160 | None = None
    value: U256 = U256(0)
    gas_price: U256 | None = None
    gas: U256 = U256(0)
    input: Bytes = Bytes()
    v: U64 | None = None
    r: U256 | None = None
    s: U256 | None = None
    raw: Bytes | None = None
    transaction_type: U64 | None = None
    access_list: list[AccessListItem] | None = None
    max_fee_per_gas: U256 | None = None
    max_priority_fee_per_gas: U256 | None = None

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "transaction")
        return cls(
            hash=_required(data, "hash", H256.from_hex),
            nonce=_required(data, "nonce", U256.from_hex),
            block_hash=_optional(data, "blockHash", H256.from_hex),
            block_number=_optional(data, "blockNumber", U64.from_hex),
            transaction_index=_optional(data, "transactionIndex", U64.from_hex),
            from_address=_optional(data, "from", H160.from_hex),
            to=_optional(data, "to", H160.from_hex),
            value=_required(data, "value", U256.from_hex),
            gas_price=_optional(data, "gasPrice", U256.from_hex),
            gas=_required(data, "gas", U256.from_hex),
            input=_required(data, "input", Bytes.from_json),
            v=_optional(data, "v", U64.from_hex),
            r=_optional(data, "r", U256.from_hex),
            s=_optional(data, "s", U256.from_hex),
            raw=_optional(data, "raw", Bytes.from_json),
            transaction_type=_optional(data, "type", U64.from_hex),
            access_list=_optional(data, "accessList", _access_list),
            max_fee_per_gas=_optional(data, "maxFeePerGas", U256.from_hex),
            max_priority_fee_per_gas=_optional(data, "maxPriorityFeePerGas", U256.from_hex),
        )

    def to_json(self):
        out = {
            "hash": self.hash.to_json(),
            "nonce": self.nonce.to_json(),
            "blockHash": _dump(self.block_hash),
            "blockNumber": _dump(self.block_number),
            "transactionIndex": _dump(self.transaction_index),
        }
        _put_if_set(out, "from", self.from_address)
        out.update(
            {
                "to": _dump(self.to),
                "value": self.value.to_json(),
                "gasPrice": _dump(self.gas_price),
                "gas": self.gas.to_json(),
                "input": self.input.to_json(),
            }
        )
        _put_if_set(out, "v", self.v)
        _put_if_set(out, "r", self.r)
        _put_if_set(out, "s", self.s)
        _put_if_set(out, "raw", self.raw)
        _put_if_set(out, "type", self.transaction_type)
        if self.access_list is not None:
            out["accessList"] = _dump_access_list(self.access_list)
        _put_if_set(out, "maxFeePerGas", self.max_fee_per_gas)
        _put_if_set(out, "maxPriorityFeePerGas", self.max_priority_fee_per_gas)
        return out


@dataclass
class Receipt:
    """The receipt of an executed transaction."""

    transaction_hash: H256 = H256()
    transaction_index: U64 = U64(0)
    block_hash: H256 | None = None
    block_number: U64 | None = None
    from_address: H160 = H160()
    to: H160 | None = None
    cumulative_gas_used: U256 = U256(0)
    gas_used: U256 | None = None
    contract_address: H160 | None = None
    logs: list[Log] = field(default_factory=list)
    status: U64 | None = None
    root: H256 | None = None
    logs_bloom: H2048 = H2048()
    transaction_type: U64 | None = None
    effective_gas_price: U256 | None = None

    @classmethod
    def from_json(cls, data):
        """Decode a receipt; a missing ``from`` becomes the zero address."""
        _expect_object(data, "receipt")
        return cls(
            transaction_hash=_required(data, "transactionHash", H256.from_hex),
            transaction_index=_required(data, "transactionIndex", U64.from_hex),
            block_hash=_optional(data, "blockHash", H256.from_hex),
            block_number=_optional(data, "blockNumber", U64.from_hex),
            from_address=_defaulted(data, "from", H160.from_hex, H160),
            to=_optional(data, "to", H160.from_hex),
            cumulative_gas_used=_required(data, "cumulativeGasUsed", U256.from_hex),
            gas_used=_optional(data, "gasUsed", U256.from_hex),
            contract_address=_optional(data, "contractAddress", H160.from_hex),
            logs=_required(data, "logs", _list_of(Log.from_json)),
            status=_optional(data, "status", U64.from_hex),
            root=_optional(data, "root", H256.from_hex),
            logs_bloom=_required(data, "logsBloom", H2048.from_hex),
            transaction_type=_optional(data, "type", U64.from_hex),
            effective_gas_price=_optional(data, "effectiveGasPrice", U256.from_hex),
        )

    def to_json(self):
        out = {
            "transactionHash": self.transaction_hash.to_json(),
            "transactionIndex": self.transaction_index.to_json(),
            "blockHash": _dump(self.block_hash),
            "blockNumber": _dump(self.block_number),
            "from": self.from_address.to_json(),
            "to": _dump(self.to),
            "cumulativeGasUsed": self.cumulative_gas_used.to_json(),
            "gasUsed": _dump(self.gas_used),
            "contractAddress": _dump(self.contract_address),
            "logs": [log.to_json() for log in self.logs],
            "status": _dump(self.status),
            "root": _dump(self.root),
            "logsBloom": self.logs_bloom.to_json(),
        }
        _put_if_set(out, "type", self.transaction_type)
        out["effectiveGasPrice"] = _dump(self.effective_gas_price)
        return out


@dataclass
class RawTransaction:
    """A signed transaction that has not been sent yet, with its details."""

    raw: Bytes = Bytes()
    tx: Transaction = field(default_factory=Transaction)

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "raw transaction")
        return cls(
            raw=_required(data, "raw", Bytes.from_json),
            tx=_required(data, "tx", Transaction.from_json),
        )

    def to_json(self):
        return {"raw": self.raw.to_json(), "tx": self.tx.to_json()}