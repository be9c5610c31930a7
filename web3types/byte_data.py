"""Raw byte payloads: hex strings on the wire, or arrays of byte values."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .uint import DecodeError

_HEX = re.compile(r"(?:[0-9a-fA-F]{2})*")


@dataclass(frozen=True)
class Bytes:
    """Raw bytes serialised as a 0x-prefixed hex string."""

    data: bytes = b""

    def __post_init__(self):
        if isinstance(self.data, (int, str)):
            raise TypeError("Bytes needs a bytes-like value or an iterable of byte values")
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def from_json(cls, value):
        """Decode a 0x-prefixed hex string."""
        if not isinstance(value, str):
            raise DecodeError(
                f"expected a 0x-prefixed hex-encoded vector of bytes, got {type(value).__name__}"
            )
        if not value.startswith("0x"):
            raise DecodeError(f"invalid value {value!r}, expected 0x prefix")
        digits = value[2:]
        if not _HEX.fullmatch(digits):
            raise DecodeError(f"Invalid hex: {digits!r}")
        return cls(bytes.fromhex(digits))

    def to_json(self):
        return "0x" + self.data.hex()

    def __bytes__(self):
        return self.data

    def __len__(self):
        return len(self.data)


@dataclass(frozen=True)
class BytesArray:
    """Raw bytes serialised as a JSON array of byte values."""

    data: bytes = b""

    def __post_init__(self):
        if isinstance(self.data, (int, str)):
            raise TypeError("BytesArray needs a bytes-like value or an iterable of byte values")
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def from_json(cls, value):
        """Decode a JSON array of integers in the range 0..255."""
        if not isinstance(value, list):
            raise DecodeError(f"expected an array of bytes, got {type(value).__name__}")
        for item in value:
            if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= 255:
                raise DecodeError(f"invalid byte value {item!r}")
        return cls(bytes(value))

    def to_json(self):
        return list(self.data)

    def __bytes__(self):
        return self.data

    def __len__(self):
        return len(self.data)