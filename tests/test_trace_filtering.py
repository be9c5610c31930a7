import copy

import pytest

from web3types.block import BlockNumber
from web3types.byte_data import Bytes
from web3types.trace_filtering import (
    ActionType,
    Call,
    CallResult,
    CallType,
    Create,
    CreateResult,
    Reward,
    RewardType,
    Suicide,
    Trace,
    TraceFilterBuilder,
    action_to_json,
    parse_action,
    parse_result,
    result_to_json,
)
from web3types.uint import H160, H256, U256, DecodeError

INPUT = (
    "0xb9f256cd000000000000000000000000fb6916095ca1df60bb79ce92ce3ea74c37c5d359"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000080"
    "00000000000000000000000000000000000000000000000000000000000001a0"
    "00000000000000000000000000000000000000000000000000000000000000e8"
    "5468697320697320746865206f6666696369616c20457468657265756d20466f"
    "756e646174696f6e20546970204a61722e20466f722065766572792061626f76"
    "652061206365727461696e2076616c756520646f6e6174696f6e207765276c6c"
    "2063726561746520616e642073656e6420746f20796f752061206272616e6420"
    "6e657720556e69636f726e20546f6b656e2028f09fa684292e20436865636b20"
    "74686520756e69636f726e2070726963652062656c6f77202831206574686572"
    "203d20313030302066696e6e6579292e205468616e6b7320666f722074686520"
    "737570706f727421000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
)

FROM = "0xd1220a0cf47c7b9be7a2e6ba89f429762e7b9adb"
TO = "0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359"
BLOCK_HASH = "0x6474a53a9ebf72d306a1406ec12ded12e210b6c3141b4373bfb3a3cea987dfb8"
TX_HASH = "0x342c284238149db221f9d87db87f90ffad7ac0aac57c0c480142f4c21b63f652"


def _trace(action, kind):
    return {
        "action": action,
        "blockHash": BLOCK_HASH,
        "blockNumber": 988775,
        "result": {
            "gasUsed": "0x4b419",
            "output": "0x0000000000000000000000000000000000000000000000000000000000000000",
        },
        "subtraces": 1,
        "traceAddress": [],
        "transactionHash": TX_HASH,
        "transactionPosition": 1,
        "type": kind,
    }


EXAMPLE_TRACE_CALL = _trace(
    {"callType": "call", "from": FROM, "gas": "0x63ab9", "input": INPUT, "to": TO, "value": "0x0"},
    "call",
)
EXAMPLE_TRACE_CREATE = _trace({"from": FROM, "gas": "0x63ab9", "init": INPUT, "value": "0x0"}, "create")
EXAMPLE_TRACE_SUICIDE = _trace({"address": FROM, "refundAddress": TO, "balance": "0x0"}, "suicide")
EXAMPLE_TRACE_REWARD = _trace({"author": FROM, "value": "0x0", "rewardType": "block"}, "reward")


def test_deserialize_call_trace():
    trace = Trace.from_json(EXAMPLE_TRACE_CALL)
    assert trace.action == Call(
        from_address=H160.from_hex(FROM),
        to=H160.from_hex(TO),
        value=U256(0),
        gas=U256(0x63AB9),
        input=Bytes.from_json(INPUT),
        call_type=CallType.CALL,
    )
    assert trace.action_type is ActionType.CALL
    assert trace.block_number == 988775
    assert trace.block_hash == H256.from_hex(BLOCK_HASH)
    assert trace.transaction_hash == H256.from_hex(TX_HASH)
    assert trace.transaction_position == 1
    assert trace.subtraces == 1
    assert trace.trace_address == []
    assert trace.result == CallResult(gas_used=U256(0x4B419), output=Bytes(bytes(32)))
    assert trace.error is None


def test_deserialize_create_trace():
    trace = Trace.from_json(EXAMPLE_TRACE_CREATE)
    assert trace.action == Create(
        from_address=H160.from_hex(FROM), value=U256(0), gas=U256(0x63AB9), init=Bytes.from_json(INPUT)
    )
    assert trace.action_type is ActionType.CREATE


def test_deserialize_suicide_trace():
    trace = Trace.from_json(EXAMPLE_TRACE_SUICIDE)
    assert trace.action == Suicide(
        address=H160.from_hex(FROM), refund_address=H160.from_hex(TO), balance=U256(0)
    )
    assert trace.action_type is ActionType.SUICIDE


def test_deserialize_reward_trace():
    trace = Trace.from_json(EXAMPLE_TRACE_REWARD)
    assert trace.action == Reward(author=H160.from_hex(FROM), value=U256(0), reward_type=RewardType.BLOCK)
    assert trace.action_type is ActionType.REWARD


@pytest.mark.parametrize(
    "example", [EXAMPLE_TRACE_CALL, EXAMPLE_TRACE_CREATE, EXAMPLE_TRACE_SUICIDE, EXAMPLE_TRACE_REWARD]
)
def test_trace_round_trip(example):
    trace = Trace.from_json(example)
    assert Trace.from_json(trace.to_json()) == trace
    assert trace.to_json()["action"] == example["action"]


def test_unknown_action_is_rejected():
    data = copy.deepcopy(EXAMPLE_TRACE_CALL)
    data["action"] = {"something": "else"}
    with pytest.raises(DecodeError):
        Trace.from_json(data)


def test_unknown_type_is_rejected():
    data = copy.deepcopy(EXAMPLE_TRACE_CALL)
    data["type"] = "teleport"
    with pytest.raises(DecodeError):
        Trace.from_json(data)


def test_missing_optional_fields_are_none():
    data = copy.deepcopy(EXAMPLE_TRACE_REWARD)
    del data["result"]
    del data["transactionHash"]
    del data["transactionPosition"]
    trace = Trace.from_json(data)
    assert trace.result is None
    assert trace.transaction_hash is None
    assert trace.transaction_position is None


def test_create_result_is_parsed():
    data = {"gasUsed": "0x10", "code": "0x6060", "address": TO}
    result = parse_result(data)
    assert result == CreateResult(gas_used=U256(16), code=Bytes(b"\x60\x60"), address=H160.from_hex(TO))
    assert result_to_json(result) == data


def test_null_result():
    assert parse_result(None) is None
    assert result_to_json(None) is None


def test_action_json_round_trip():
    action = {"author": FROM, "value": "0x5", "rewardType": "emptyStep"}
    parsed = parse_action(action)
    assert parsed.reward_type is RewardType.EMPTY_STEP
    assert action_to_json(parsed) == action


def test_trace_filter_builder():
    first = H160.from_low_u64_be(1)
    second = H160.from_low_u64_be(2)
    built = (
        TraceFilterBuilder()
        .from_block(BlockNumber.at(1))
        .to_block(BlockNumber.latest())
        .from_address([first])
        .to_address([first, second])
        .after(3)
        .count(10)
        .build()
    )
    assert built.to_json() == {
        "fromBlock": "0x1",
        "toBlock": "latest",
        "fromAddress": [first.to_json()],
        "toAddress": [first.to_json(), second.to_json()],
        "after": 3,
        "count": 10,
    }


def test_empty_trace_filter():
    assert TraceFilterBuilder().build().to_json() == {}


def test_builder_does_not_mutate():
    base = TraceFilterBuilder()
    base.count(4)
    assert base.build().count is None


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        TraceFilterBuilder().count(-1)