"""Event logs and the filters used to query them."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .block import BlockNumber, _dump, _expect_object, _list_of, _optional, _required
from .byte_data import Bytes
from .uint import H160, H256, U64, U256, DecodeError

_TOPIC_KINDS = ("any", "one_of", "this")


def _string(value):
    if not isinstance(value, str):
        raise DecodeError(f"expected a string, got {type(value).__name__}")
    return value


def _boolean(value):
    if not isinstance(value, bool):
        raise DecodeError(f"expected a boolean, got {type(value).__name__}")
    return value


@dataclass
class Log:
    """A log produced by a transaction."""

    address: H160
    topics: list[H256]
    data: Bytes
    block_hash: H256 | None = None
    block_number: U64 | None = None
    transaction_hash: H256 | None = None
    transaction_index: U64 | None = None
    log_index: U256 | None = None
    transaction_log_index: U256 | None = None
    log_type: str | None = None
    removed: bool | None = None

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "log")
        return cls(
            address=_required(data, "address", H160.from_hex),
            topics=_required(data, "topics", _list_of(H256.from_hex)),
            data=_required(data, "data", Bytes.from_json),
            block_hash=_optional(data, "blockHash", H256.from_hex),
            block_number=_optional(data, "blockNumber", U64.from_hex),
            transaction_hash=_optional(data, "transactionHash", H256.from_hex),
            transaction_index=_optional(data, "transactionIndex", U64.from_hex),
            log_index=_optional(data, "logIndex", U256.from_hex),
            transaction_log_index=_optional(data, "transactionLogIndex", U256.from_hex),
            log_type=_optional(data, "logType", _string),
            removed=_optional(data, "removed", _boolean),
        )

    def to_json(self):
        return {
            "address": self.address.to_json(),
            "topics": [topic.to_json() for topic in self.topics],
            "data": self.data.to_json(),
            "blockHash": _dump(self.block_hash),
            "blockNumber": _dump(self.block_number),
            "transactionHash": _dump(self.transaction_hash),
            "transactionIndex": _dump(self.transaction_index),
            "logIndex": _dump(self.log_index),
            "transactionLogIndex": _dump(self.transaction_log_index),
            "logType": self.log_type,
            "removed": self.removed,
        }

    def is_removed(self):
        """True if the log has been removed from the chain."""
        if self.removed is not None:
            return self.removed
        return self.log_type == "removed"


@dataclass(frozen=True)
class Topic:
    """One position of a topic filter: any value, one of several, or exactly one."""

    kind: str = "any"
    values: tuple[H256, ...] = ()

    def __post_init__(self):
        if self.kind not in _TOPIC_KINDS:
            raise ValueError(f"unknown topic kind {self.kind!r}")
        object.__setattr__(self, "values", tuple(self.values))

    @classmethod
    def any(cls):
        return cls("any")

    @classmethod
    def one_of(cls, values):
        return cls("one_of", tuple(values))

    @classmethod
    def this(cls, value):
        return cls("this", (value,))


def _topic_to_option(topic):
    return None if topic.kind == "any" else list(topic.values)


@dataclass(frozen=True)
class TopicFilter:
    """Filters for the four topic positions of a log."""

    topic0: Topic = field(default_factory=Topic.any)
    topic1: Topic = field(default_factory=Topic.any)
    topic2: Topic = field(default_factory=Topic.any)
    topic3: Topic = field(default_factory=Topic.any)


def _value_or_array(values):
    if not values:
        return None
    if len(values) == 1:
        return values[0].to_json()
    return [value.to_json() for value in values]


@dataclass(frozen=True)
class Filter:
    """A log filter; built with FilterBuilder."""

    from_block: BlockNumber | None = None
    to_block: BlockNumber | None = None
    block_hash: H256 | None = None
    address: tuple[H160, ...] | None = None
    topics: tuple[tuple[H256, ...] | None, ...] | None = None
    limit: int | None = None

    def to_json(self):
        out = {}
        if self.from_block is not None:
            out["fromBlock"] = self.from_block.to_json()
        if self.to_block is not None:
            out["toBlock"] = self.to_block.to_json()
        if self.block_hash is not None:
            out["blockHash"] = self.block_hash.to_json()
        if self.address is not None:
            out["address"] = _value_or_array(self.address)
        if self.topics is not None:
            out["topics"] = [
                None if topic is None else _value_or_array(topic) for topic in self.topics
            ]
        if self.limit is not None:
            out["limit"] = self.limit
        return out


class FilterBuilder:
    """Builds a Filter; every method returns a new builder."""

    __slots__ = ("_filter",)

    def __init__(self, base=None):
        self._filter = base if base is not None else Filter()

    def _with(self, **changes):
        return FilterBuilder(replace(self._filter, **changes))

    def from_block(self, block):
        """Set the first block; clears a block hash set earlier."""
        return self._with(block_hash=None, from_block=block)

    def to_block(self, block):
        """Set the last block; clears a block hash set earlier."""
        return self._with(block_hash=None, to_block=block)

    def block_hash(self, block_hash):
        """Set the block hash; clears the block range set earlier."""
        return self._with(from_block=None, to_block=None, block_hash=block_hash)

    def address(self, addresses):
        return self._with(address=tuple(addresses))

    def topics(self, topic1, topic2, topic3, topic4):
        """Set the topics; trailing unset positions are dropped."""
        slots = [topic1, topic2, topic3, topic4]
        while slots and slots[-1] is None:
            slots.pop()
        return self._with(
            topics=tuple(None if topic is None else tuple(topic) for topic in slots)
        )

    def topic_filter(self, topic_filter):
        """Set the topics from a TopicFilter."""
        return self.topics(
            _topic_to_option(topic_filter.topic0),
            _topic_to_option(topic_filter.topic1),
            _topic_to_option(topic_filter.topic2),
            _topic_to_option(topic_filter.topic3),
        )

    def limit(self, limit):
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise ValueError(f"limit must be a non-negative integer, got {limit!r}")
        return self._with(limit=limit)

    def build(self):
        return self._filter