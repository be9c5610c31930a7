"""Data for recovering the signer address of signed data."""

from __future__ import annotations

from dataclasses import dataclass

from .byte_data import Bytes
from .uint import H256

_SIGNATURE_LENGTH = 65
_MESSAGE_KINDS = ("data", "hash")


class ParseSignatureError(ValueError):
    """A raw signature does not have the expected length."""

    def __init__(self, message="error parsing raw signature: wrong number of bytes, expected 65"):
        super().__init__(message)


@dataclass(frozen=True)
class RecoveryMessage:
    """Either message bytes ("data"), hashed before recovery, or a precomputed hash ("hash")."""

    kind: str
    value: bytes | H256

    def __post_init__(self):
        if self.kind not in _MESSAGE_KINDS:
            raise ValueError(f"unknown recovery message kind {self.kind!r}")
        if self.kind == "hash" and not isinstance(self.value, H256):
            raise TypeError(f"a message hash must be an H256, got {self.value!r}")
        if self.kind == "data":
            object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def of(cls, value):
        """Wrap a hash, a string, or bytes as a recovery message."""
        if isinstance(value, RecoveryMessage):
            return value
        if isinstance(value, H256):
            return cls("hash", value)
        if isinstance(value, str):
            return cls("data", value.encode("utf-8"))
        if isinstance(value, (bytes, bytearray, memoryview, Bytes, list, tuple)):
            return cls("data", bytes(value))
        raise TypeError(f"cannot build a recovery message from {type(value).__name__}")


@dataclass(frozen=True)
class Recovery:
    """Message and signature parts; ``v`` is in Electrum notation, maybe with replay protection."""

    message: RecoveryMessage
    v: int
    r: H256
    s: H256

    @classmethod
    def create(cls, message, v, r, s):
        """Build recovery data from its parts."""
        if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v < (1 << 64):
            raise ValueError(f"v must be an unsigned 64-bit integer, got {v!r}")
        return cls(RecoveryMessage.of(message), v, r, s)

    @classmethod
    def from_raw_signature(cls, message, raw_signature):
        """Split a 65-byte signature into r (32 bytes), s (32 bytes) and v (1 byte)."""
        raw = bytes(raw_signature)
        if len(raw) != _SIGNATURE_LENGTH:
            raise ParseSignatureError()
        return cls.create(message, raw[64], H256(raw[:32]), H256(raw[32:64]))

    @classmethod
    def from_signed(cls, signed):
        """Recovery data for signed data or a signed transaction, by its message hash."""
        return cls.create(signed.message_hash, signed.v, signed.r, signed.s)

    def recovery_id(self):
        """The standard recovery id, or None if ``v`` is invalid."""
        if self.v == 27:
            return 0
        if self.v == 28:
            return 1
        if self.v >= 35:
            return (self.v - 1) % 2
        return None

    def as_signature(self):
        """The 64-byte compact signature and the recovery id, or None if ``v`` is invalid."""
        recovery_id = self.recovery_id()
        if recovery_id is None:
            return None
        return bytes(self.r) + bytes(self.s), recovery_id