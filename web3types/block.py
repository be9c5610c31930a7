"""Blocks, block headers and ways of naming a block."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .byte_data import Bytes
from .uint import H64, H160, H256, H2048, U64, U256, DecodeError

_TAGS = ("latest", "earliest", "pending")


def _expect_object(data, what):
    if not isinstance(data, Mapping):
        raise DecodeError(f"expected a JSON object for {what}, got {type(data).__name__}")


def _required(data, key, parse):
    try:
        value = data[key]
    except KeyError:
        raise DecodeError(f"missing field `{key}`") from None
    return parse(value)


def _optional(data, key, parse, default=None):
    value = data.get(key)
    return default if value is None else parse(value)


def _defaulted(data, key, parse, default_factory):
    if key not in data:
        return default_factory()
    return parse(data[key])


def _list_of(parse):
    def parse_list(value):
        if not isinstance(value, list):
            raise DecodeError(f"expected a JSON array, got {type(value).__name__}")
        return [parse(item) for item in value]

    return parse_list


def _dump(value):
    return None if value is None else value.to_json()


@dataclass(frozen=True)
class BlockNumber:
    """A block named by tag ("latest", "earliest", "pending") or by number."""

    value: str | U64 = "latest"

    def __post_init__(self):
        if isinstance(self.value, str):
            if self.value not in _TAGS:
                raise ValueError(f"unknown block tag {self.value!r}")
        else:
            object.__setattr__(self, "value", U64(self.value))

    @classmethod
    def latest(cls):
        return cls("latest")

    @classmethod
    def earliest(cls):
        return cls("earliest")

    @classmethod
    def pending(cls):
        return cls("pending")

    @classmethod
    def at(cls, number):
        """A block by number on the canonical chain."""
        return cls(U64(number))

    def to_json(self):
        if isinstance(self.value, str):
            return self.value
        return f"0x{int(self.value):x}"


@dataclass(frozen=True)
class BlockId:
    """A block identified by hash or by number."""

    value: H256 | BlockNumber

    def __post_init__(self):
        if not isinstance(self.value, (H256, BlockNumber)):
            raise TypeError(f"a block id needs an H256 or a BlockNumber, got {self.value!r}")

    @classmethod
    def from_hash(cls, block_hash):
        return cls(block_hash)

    @classmethod
    def from_number(cls, number):
        if isinstance(number, BlockNumber):
            return cls(number)
        return cls(BlockNumber.at(number))

    def to_json(self):
        if isinstance(self.value, H256):
            return {"blockHash": self.value.to_json()}
        return self.value.to_json()


def to_block_id(value):
    """Turn a hash, a block number, an integer or a BlockId into a BlockId."""
    if isinstance(value, BlockId):
        return value
    if isinstance(value, H256):
        return BlockId.from_hash(value)
    if isinstance(value, BlockNumber) or (isinstance(value, int) and not isinstance(value, bool)):
        return BlockId.from_number(value)
    raise TypeError(f"cannot make a block id from {value!r}")


@dataclass
class BlockHeader:
    """A block header as returned by RPC calls."""

    hash: H256 | None
    parent_hash: H256
    uncles_hash: H256
    author: H160
    state_root: H256
    transactions_root: H256
    receipts_root: H256
    number: U64 | None
    gas_used: U256
    gas_limit: U256
    base_fee_per_gas: U256 | None
    extra_data: Bytes
    logs_bloom: H2048
    timestamp: U256
    difficulty: U256
    mix_hash: H256 | None
    nonce: H64 | None

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "block header")
        return cls(
            hash=_optional(data, "hash", H256.from_hex),
            parent_hash=_required(data, "parentHash", H256.from_hex),
            uncles_hash=_required(data, "sha3Uncles", H256.from_hex),
            author=_optional(data, "miner", H160.from_hex, default=H160()),
            state_root=_required(data, "stateRoot", H256.from_hex),
            transactions_root=_required(data, "transactionsRoot", H256.from_hex),
            receipts_root=_required(data, "receiptsRoot", H256.from_hex),
            number=_optional(data, "number", U64.from_hex),
            gas_used=_required(data, "gasUsed", U256.from_hex),
            gas_limit=_required(data, "gasLimit", U256.from_hex),
            base_fee_per_gas=_optional(data, "baseFeePerGas", U256.from_hex),
            extra_data=_required(data, "extraData", Bytes.from_json),
            logs_bloom=_required(data, "logsBloom", H2048.from_hex),
            timestamp=_required(data, "timestamp", U256.from_hex),
            difficulty=_required(data, "difficulty", U256.from_hex),
            mix_hash=_optional(data, "mixHash", H256.from_hex),
            nonce=_optional(data, "nonce", H64.from_hex),
        )

    def to_json(self):
        out = {
            "hash": _dump(self.hash),
            "parentHash": self.parent_hash.to_json(),
            "sha3Uncles": self.uncles_hash.to_json(),
            "miner": self.author.to_json(),
            "stateRoot": self.state_root.to_json(),
            "transactionsRoot": self.transactions_root.to_json(),
            "receiptsRoot": self.receipts_root.to_json(),
            "number": _dump(self.number),
            "gasUsed": self.gas_used.to_json(),
            "gasLimit": self.gas_limit.to_json(),
        }
        if self.base_fee_per_gas is not None:
            out["baseFeePerGas"] = self.base_fee_per_gas.to_json()
        out.update(
            {
                "extraData": self.extra_data.to_json(),
                "logsBloom": self.logs_bloom.to_json(),
                "timestamp": self.timestamp.to_json(),
                "difficulty": self.difficulty.to_json(),
                "mixHash": _dump(self.mix_hash),
                "nonce": _dump(self.nonce),
            }
        )
        return out


@dataclass
class Block:
    """A block as returned by RPC calls; transactions may be hashes or full objects."""

    hash: H256 | None = None
    parent_hash: H256 = H256()
    uncles_hash: H256 = H256()
    author: H160 = H160()
    state_root: H256 = H256()
    transactions_root: H256 = H256()
    receipts_root: H256 = H256()
    number: U64 | None = None
    gas_used: U256 = U256(0)
    gas_limit: U256 = U256(0)
    base_fee_per_gas: U256 | None = None
    extra_data: Bytes = Bytes()
    logs_bloom: H2048 | None = None
    timestamp: U256 = U256(0)
    difficulty: U256 = U256(0)
    total_difficulty: U256 | None = None
    seal_fields: list[Bytes] = field(default_factory=list)
    uncles: list[H256] = field(default_factory=list)
    transactions: list[Any] = field(default_factory=list)
    size: U256 | None = None
    mix_hash: H256 | None = None
    nonce: H64 | None = None

    @classmethod
    def from_json(cls, data, parse_transaction=None):
        """Decode a block; each transaction goes through ``parse_transaction`` if given."""
        _expect_object(data, "block")
        parse_tx = parse_transaction if parse_transaction is not None else (lambda tx: tx)
        return cls(
            hash=_optional(data, "hash", H256.from_hex),
            parent_hash=_required(data, "parentHash", H256.from_hex),
            uncles_hash=_required(data, "sha3Uncles", H256.from_hex),
            author=_optional(data, "miner", H160.from_hex, default=H160()),
            state_root=_required(data, "stateRoot", H256.from_hex),
            transactions_root=_required(data, "transactionsRoot", H256.from_hex),
            receipts_root=_required(data, "receiptsRoot", H256.from_hex),
            number=_optional(data, "number", U64.from_hex),
            gas_used=_required(data, "gasUsed", U256.from_hex),
            gas_limit=_required(data, "gasLimit", U256.from_hex),
            base_fee_per_gas=_optional(data, "baseFeePerGas", U256.from_hex),
            extra_data=_required(data, "extraData", Bytes.from_json),
            logs_bloom=_optional(data, "logsBloom", H2048.from_hex),
            timestamp=_required(data, "timestamp", U256.from_hex),
            difficulty=_required(data, "difficulty", U256.from_hex),
            total_difficulty=_optional(data, "totalDifficulty", U256.from_hex),
            seal_fields=_defaulted(data, "sealFields", _list_of(Bytes.from_json), list),
            uncles=_required(data, "uncles", _list_of(H256.from_hex)),
            transactions=_required(data, "transactions", _list_of(parse_tx)),
            size=_optional(data, "size", U256.from_hex),
            mix_hash=_optional(data, "mixHash", H256.from_hex),
            nonce=_optional(data, "nonce", H64.from_hex),
        )

    def to_json(self, dump_transaction=None):
        """Encode the block; each transaction goes through ``dump_transaction`` if given."""
        dump_tx = dump_transaction if dump_transaction is not None else (lambda tx: tx)
        out = {
            "hash": _dump(self.hash),
            "parentHash": self.parent_hash.to_json(),
            "sha3Uncles": self.uncles_hash.to_json(),
            "miner": self.author.to_json(),
            "stateRoot": self.state_root.to_json(),
            "transactionsRoot": self.transactions_root.to_json(),
            "receiptsRoot": self.receipts_root.to_json(),
            "number": _dump(self.number),
            "gasUsed": self.gas_used.to_json(),
            "gasLimit": self.gas_limit.to_json(),
        }
        if self.base_fee_per_gas is not None:
            out["baseFeePerGas"] = self.base_fee_per_gas.to_json()
        out.update(
            {
                "extraData": self.extra_data.to_json(),
                "logsBloom": _dump(self.logs_bloom),
                "timestamp": self.timestamp.to_json(),
                "difficulty": self.difficulty.to_json(),
                "totalDifficulty": _dump(self.total_difficulty),
                "sealFields": [seal.to_json() for seal in self.seal_fields],
                "uncles": [uncle.to_json() for uncle in self.uncles],
                "transactions": [dump_tx(tx) for tx in self.transactions],
                "size": _dump(self.size),
                "mixHash": _dump(self.mix_hash),
                "nonce": _dump(self.nonce),
            }
        )
        return out