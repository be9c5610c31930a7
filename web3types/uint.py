"""Fixed-size hashes and bounded unsigned integers with 0x-prefixed hex forms."""

from __future__ import annotations

import operator
import re
import secrets
from functools import total_ordering
from typing import ClassVar

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


class DecodeError(ValueError):
    """Raised when a JSON value does not have the expected form."""


def _hex_digits(text, what):
    """Return the hex digits after the mandatory 0x prefix."""
    if not isinstance(text, str):
        raise DecodeError(
            f"expected a 0x-prefixed hex string for {what}, got {type(text).__name__}"
        )
    if not text.startswith("0x"):
        raise DecodeError(f"invalid {what} {text!r}: missing 0x prefix")
    digits = text[2:]
    if not _HEX_DIGITS.fullmatch(digits):
        raise DecodeError(f"invalid {what} {text!r}: not hexadecimal")
    return digits


@total_ordering
class _FixedHash:
    """An immutable byte string of a fixed length."""

    __slots__ = ("_raw",)
    SIZE: ClassVar[int] = 0

    def __init__(self, raw=None):
        raw = bytes(self.SIZE) if raw is None else bytes(raw)
        if len(raw) != self.SIZE:
            raise ValueError(
                f"{type(self).__name__} needs {self.SIZE} bytes, got {len(raw)}"
            )
        self._raw = raw

    @property
    def raw(self):
        """The underlying bytes."""
        return self._raw

    @classmethod
    def from_low_u64_be(cls, value):
        """Build a hash whose last eight bytes are ``value`` in big-endian order."""
        value = operator.index(value)
        return cls(bytes(cls.SIZE - 8) + value.to_bytes(8, "big"))

    @classmethod
    def from_uint(cls, value):
        """Build a hash holding the big-endian form of an unsigned integer."""
        return cls(operator.index(value).to_bytes(cls.SIZE, "big"))

    @classmethod
    def from_hex(cls, text):
        """Parse a 0x-prefixed hex string of exactly the right length."""
        digits = _hex_digits(text, cls.__name__)
        if len(digits) != 2 * cls.SIZE:
            raise DecodeError(
                f"invalid {cls.__name__} {text!r}: expected {2 * cls.SIZE} hex digits"
            )
        return cls(bytes.fromhex(digits))

    @classmethod
    def random(cls):
        """Return a hash filled with random bytes."""
        return cls(secrets.token_bytes(cls.SIZE))

    def to_json(self):
        return "0x" + self._raw.hex()

    def __bytes__(self):
        return self._raw

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._raw == other._raw

    def __lt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._raw < other._raw

    def __hash__(self):
        return hash((type(self).__name__, self._raw))

    def __repr__(self):
        return f"{type(self).__name__}('{self.to_json()}')"

    def __str__(self):
        text = self._raw.hex()
        return f"0x{text[:4]}…{text[-4:]}"

    def __format__(self, spec):
        if spec == "x":
            return self._raw.hex()
        if spec == "#x":
            return self.to_json()
        return format(str(self), spec)


class H64(_FixedHash):
    """An 8-byte hash."""

    __slots__ = ()
    SIZE = 8


class H128(_FixedHash):
    """A 16-byte hash."""

    __slots__ = ()
    SIZE = 16

    @classmethod
    def from_uint(cls, value):
        """Build the hash from the 128-bit big-endian form of ``value``."""
        return super().from_uint(value)


class H160(_FixedHash):
    """A 20-byte hash, the size of an address."""

    __slots__ = ()
    SIZE = 20

    @classmethod
    def random(cls):
        """Return an address-sized hash filled with random bytes."""
        return super().random()


class H256(_FixedHash):
    """A 32-byte hash."""

    __slots__ = ()
    SIZE = 32

    @classmethod
    def from_low_u64_be(cls, value):
        """Build a 32-byte hash whose last eight bytes are ``value``."""
        return super().from_low_u64_be(value)

    @classmethod
    def from_hex(cls, text):
        """Parse a 0x-prefixed string of exactly 64 hex digits."""
        return super().from_hex(text)

    def to_json(self):
        """The 0x-prefixed hex form of all 32 bytes."""
        return super().to_json()


class H512(_FixedHash):
    """A 64-byte hash."""

    __slots__ = ()
    SIZE = 64


class H520(_FixedHash):
    """A 65-byte hash."""

    __slots__ = ()
    SIZE = 65


class H2048(_FixedHash):
    """A 256-byte logs bloom."""

    __slots__ = ()
    SIZE = 256


class _Uint(int):
    """An unsigned integer limited to a fixed number of bits."""

    BITS: ClassVar[int] = 0

    def __new__(cls, value=0):
        number = int.__new__(cls, operator.index(value))
        if not 0 <= number < (1 << cls.BITS):
            raise OverflowError(f"{int(number)} does not fit in {cls.__name__}")
        return number

    @classmethod
    def from_hex(cls, text):
        """Parse a 0x-prefixed hex quantity; decimal strings are rejected."""
        digits = _hex_digits(text, cls.__name__)
        if not digits:
            raise DecodeError(f"invalid {cls.__name__} {text!r}: no digits")
        number = int(digits, 16)
        if number >= (1 << cls.BITS):
            raise DecodeError(f"invalid {cls.__name__} {text!r}: too large")
        return cls(number)

    @classmethod
    def from_bytes_be(cls, data):
        """Build the integer from at most BITS/8 big-endian bytes."""
        data = bytes(data)
        if len(data) > cls.BITS // 8:
            raise DecodeError(f"{len(data)} bytes do not fit in {cls.__name__}")
        return cls(int.from_bytes(data, "big"))

    def to_json(self):
        return f"0x{int(self):x}"

    def low_u64(self):
        """The lowest 64 bits of the value."""
        return int(self) & 0xFFFF_FFFF_FFFF_FFFF

    def __repr__(self):
        return f"{type(self).__name__}({int(self)})"

    def __str__(self):
        return int.__repr__(self)


class U64(_Uint):
    """A 64-bit unsigned integer."""

    BITS = 64


class U128(_Uint):
    """A 128-bit unsigned integer."""

    BITS = 128


class U256(_Uint):
    """A 256-bit unsigned integer."""

    BITS = 256

    @classmethod
    def from_hex(cls, text):
        """Parse a 0x-prefixed hex quantity of at most 256 bits."""
        return super().from_hex(text)

    @classmethod
    def from_bytes_be(cls, data):
        """Build the integer from at most 32 big-endian bytes."""
        return super().from_bytes_be(data)

    def to_json(self):
        """The minimal 0x-prefixed hex form of the value."""
        return super().to_json()

    def low_u64(self):
        """The lowest 64 bits of the value."""
        return super().low_u64()


Address = H160
Index = U64