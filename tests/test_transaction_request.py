import json

import pytest

from web3types.byte_data import Bytes
from web3types.transaction import AccessListItem
from web3types.transaction_request import (
    CallRequest,
    CallRequestBuilder,
    TransactionCondition,
    TransactionRequest,
    TransactionRequestBuilder,
)
from web3types.uint import H160, H256, U64, U256, DecodeError

CALL_JSON = """{
  "to": "0x0000000000000000000000000000000000000005",
  "gas": "0x5208",
  "value": "0x4c4b40",
  "data": "0x010203"
}"""

TX_JSON = """{
  "from": "0x0000000000000000000000000000000000000005",
  "gas": "0x5208",
  "value": "0x4c4b40",
  "data": "0x010203",
  "condition": {
    "block": 5
  }
}"""


def _call_request():
    return CallRequest(
        from_address=None,
        to=H160.from_low_u64_be(5),
        gas=U256(21_000),
        gas_price=None,
        value=U256(5_000_000),
        data=Bytes(bytes.fromhex("010203")),
    )


def _tx_request():
    return TransactionRequest(
        from_address=H160.from_low_u64_be(5),
        to=None,
        gas=U256(21_000),
        gas_price=None,
        value=U256(5_000_000),
        data=Bytes(bytes.fromhex("010203")),
        nonce=None,
        condition=TransactionCondition.block(5),
    )


def test_should_serialize_call_request():
    assert json.dumps(_call_request().to_json(), indent=2) == CALL_JSON


def test_should_deserialize_call_request():
    request = CallRequest.from_json(json.loads(CALL_JSON))
    assert request.from_address is None
    assert request.to == H160.from_low_u64_be(5)
    assert request.gas == 21_000
    assert request.gas_price is None
    assert request.value == 5_000_000
    assert request.data == Bytes(bytes.fromhex("010203"))


def test_should_serialize_transaction_request():
    assert json.dumps(_tx_request().to_json(), indent=2) == TX_JSON


def test_should_deserialize_transaction_request():
    request = TransactionRequest.from_json(json.loads(TX_JSON))
    assert request.from_address == H160.from_low_u64_be(5)
    assert request.to is None
    assert request.gas == 21_000
    assert request.gas_price is None
    assert request.value == 5_000_000
    assert request.data == Bytes(bytes.fromhex("010203"))
    assert request.nonce is None
    assert request.condition == TransactionCondition.block(5)


def test_should_build_default_call_request():
    assert CallRequestBuilder().build() == CallRequest()
    assert CallRequest.builder().build() == CallRequest()


def test_should_build_call_request():
    built = (
        CallRequestBuilder()
        .to(H160.from_low_u64_be(5))
        .gas(21_000)
        .value(5_000_000)
        .data(Bytes(bytes.fromhex("010203")))
        .build()
    )
    assert built == _call_request()


def test_should_build_default_transaction_request():
    assert TransactionRequestBuilder().build() == TransactionRequest()
    assert TransactionRequest.builder().build() == TransactionRequest()


def test_should_build_transaction_request():
    builder = (
        TransactionRequestBuilder()
        .from_address(H160.from_low_u64_be(5))
        .gas(21_000)
        .value(5_000_000)
        .data(Bytes(bytes.fromhex("010203")))
        .condition(TransactionCondition.block(5))
    )
    assert builder.build() == _tx_request()


def test_builder_does_not_change_earlier_builder():
    base = CallRequestBuilder()
    base.gas(1)
    assert base.build().gas is None


def test_empty_call_request_serialises_to_empty_object():
    assert CallRequest().to_json() == {}


def test_call_request_access_list_round_trip():
    item = AccessListItem(H160.from_low_u64_be(1), [H256.from_low_u64_be(2)])
    request = CallRequest.builder().transaction_type(1).access_list([item]).build()
    out = request.to_json()
    assert out["type"] == "0x1"
    assert out["accessList"] == [
        {
            "address": "0x0000000000000000000000000000000000000001",
            "storageKeys": ["0x" + "00" * 31 + "02"],
        }
    ]
    assert CallRequest.from_json(out) == request
    assert request.transaction_type == U64(1)


def test_time_condition_json():
    condition = TransactionCondition.time(1_600_000_000)
    assert condition.to_json() == {"time": 1_600_000_000}
    assert TransactionCondition.from_json({"time": 1_600_000_000}) == condition


@pytest.mark.parametrize(
    "value",
    [{"block": 1, "time": 2}, {"height": 5}, {}, {"block": -1}, {"block": "5"}, 5],
)
def test_invalid_condition_is_rejected(value):
    with pytest.raises(DecodeError):
        TransactionCondition.from_json(value)


def test_transaction_request_needs_from():
    with pytest.raises(DecodeError):
        TransactionRequest.from_json({"gas": "0x1"})


def test_transaction_request_round_trip_with_nonce_and_to():
    request = (
        TransactionRequest.builder()
        .from_address(H160.from_low_u64_be(1))
        .to(H160.from_low_u64_be(2))
        .nonce(7)
        .build()
    )
    out = request.to_json()
    assert out == {
        "from": "0x0000000000000000000000000000000000000001",
        "to": "0x0000000000000000000000000000000000000002",
        "nonce": "0x7",
    }
    assert TransactionRequest.from_json(out) == request