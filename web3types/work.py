"""A miner's work package."""

from __future__ import annotations

from dataclasses import dataclass

from .uint import H256, U256, DecodeError

_U64_LIMIT = 1 << 64


def _u64(value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"expected an unsigned 64-bit integer, got {value!r}")
    if not 0 <= value < _U64_LIMIT:
        raise DecodeError(f"{value} does not fit in 64 unsigned bits")
    return value


def _hashes_and_rest(data, length):
    if not isinstance(data, list):
        raise DecodeError(f"expected a JSON array, got {type(data).__name__}")
    if len(data) != length:
        raise DecodeError(f"invalid length {len(data)}, expected a tuple of size {length}")
    pow_hash, seed_hash, target = (H256.from_hex(item) for item in data[:3])
    return pow_hash, seed_hash, target, data[3:]


@dataclass(frozen=True)
class Work:
    """Proof-of-work hash, seed hash, target and, sometimes, the block number."""

    pow_hash: H256
    seed_hash: H256
    target: H256
    number: int | None = None

    @classmethod
    def from_json(cls, data):
        """Decode ``[pow, seed, target, number]`` or ``[pow, seed, target]``."""
        try:
            pow_hash, seed_hash, target, rest = _hashes_and_rest(data, 4)
            return cls(pow_hash, seed_hash, target, _u64(rest[0]))
        except DecodeError:
            pass
        try:
            pow_hash, seed_hash, target, _ = _hashes_and_rest(data, 3)
        except DecodeError as error:
            raise DecodeError(f"Cannot deserialize Work: {error}") from error
        return cls(pow_hash, seed_hash, target, None)

    def to_json(self):
        """Encode as an array; the block number, if any, is written as a hex quantity."""
        out = [self.pow_hash.to_json(), self.seed_hash.to_json(), self.target.to_json()]
        if self.number is not None:
            out.append(U256(self.number).to_json())
        return out