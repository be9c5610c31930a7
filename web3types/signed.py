"""Signed data, offline-signed transactions and parameters for signing."""

from __future__ import annotations

from dataclasses import dataclass

from .block import _expect_object, _required
from .byte_data import Bytes, BytesArray
from .transaction import AccessListItem
from .transaction_request import CallRequest
from .uint import H160, H256, U64, U256, DecodeError

TRANSACTION_DEFAULT_GAS = U256(100_000)


def _u8(value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"expected an unsigned 8-bit integer, got {value!r}")
    if not 0 <= value <= 255:
        raise DecodeError(f"{value} does not fit in 8 unsigned bits")
    return value


def _message(value):
    return BytesArray.from_json(value).data


@dataclass
class SignedData:
    """A signed message with its hash and signature parts."""

    message: bytes
    message_hash: H256
    v: int
    r: H256
    s: H256
    signature: Bytes

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "signed data")
        return cls(
            message=_required(data, "message", _message),
            message_hash=_required(data, "messageHash", H256.from_hex),
            v=_required(data, "v", _u8),
            r=_required(data, "r", H256.from_hex),
            s=_required(data, "s", H256.from_hex),
            signature=_required(data, "signature", Bytes.from_json),
        )

    def to_json(self):
        return {
            "message": list(self.message),
            "messageHash": self.message_hash.to_json(),
            "v": self.v,
            "r": self.r.to_json(),
            "s": self.s.to_json(),
            "signature": self.signature.to_json(),
        }


@dataclass
class TransactionParameters:
    """Transaction data for signing; unset optional fields are filled in by the signer."""

    nonce: U256 | None = None
    to: H160 | None = None
    gas: U256 = TRANSACTION_DEFAULT_GAS
    gas_price: U256 | None = None
    value: U256 = U256(0)
    data: Bytes = Bytes()
    chain_id: int | None = None
    transaction_type: U64 | None = None
    access_list: list[AccessListItem] | None = None
    max_fee_per_gas: U256 | None = None
    max_priority_fee_per_gas: U256 | None = None

    @classmethod
    def from_call_request(cls, call):
        """Take the fields of a call request; missing gas, value and data get defaults."""
        return cls(
            nonce=None,
            to=call.to,
            gas=call.gas if call.gas is not None else TRANSACTION_DEFAULT_GAS,
            gas_price=call.gas_price,
            value=call.value if call.value is not None else U256(0),
            data=call.data if call.data is not None else Bytes(),
            chain_id=None,
            transaction_type=call.transaction_type,
            access_list=call.access_list,
            max_fee_per_gas=call.max_fee_per_gas,
            max_priority_fee_per_gas=call.max_priority_fee_per_gas,
        )

    def to_call_request(self):
        """A call request with these parameters and no sender."""
        return CallRequest(
            from_address=None,
            to=self.to,
            gas=self.gas,
            gas_price=self.gas_price,
            value=self.value,
            data=self.data,
            transaction_type=self.transaction_type,
            access_list=self.access_list,
            max_fee_per_gas=self.max_fee_per_gas,
            max_priority_fee_per_gas=self.max_priority_fee_per_gas,
        )


@dataclass
class SignedTransaction:
    """An offline-signed transaction ready to be sent raw."""

    message_hash: H256
    v: int
    r: H256
    s: H256
    raw_transaction: Bytes
    transaction_hash: H256