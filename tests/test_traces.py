import json

import pytest

from web3types.byte_data import Bytes
from web3types.trace_filtering import ActionType, Call, CallResult, CallType
from web3types.traces import (
    AccountDiff,
    BlockTrace,
    Diff,
    DiffKind,
    MemoryDiff,
    StateDiff,
    StorageDiff,
    TraceType,
    TransactionTrace,
    VMExecutedOperation,
    VMOperation,
    VMTrace,
)
from web3types.uint import H160, H256, U256, DecodeError

EXAMPLE_TRACE = """{
  "output": "0x",
  "stateDiff": {
    "0x01f0eb5c4b0a9d8285b67195f5f10ce22971a102": {
      "balance": {"*": {"from": "0x7361af5818297800", "to": "0x734a36bb22448000"}},
      "code": "=",
      "nonce": {"*": {"from": "0x1d6", "to": "0x1d7"}},
      "storage": {}
    },
    "0xc227a75b32ed37d3f9d6341b9904d003dad3b1b3": {
      "balance": {"*": {"from": "0x109397d7f6f000", "to": "0x25e48fb49df000"}},
      "code": "=",
      "nonce": "=",
      "storage": {}
    }
  },
  "trace": [
    {
      "action": {
        "callType": "call",
        "from": "0x01f0eb5c4b0a9d8285b67195f5f10ce22971a102",
        "gas": "0xa5f8",
        "input": "0x1a695230000000000000000000000000c227a75b32ed37d3f9d6341b9904d003dad3b1b3",
        "to": "0x0b95993a39a363d99280ac950f5e4536ab5c5566",
        "value": "0x1550f7dca70000"
      },
      "result": {"gasUsed": "0x1ddf", "output": "0x"},
      "subtraces": 1,
      "traceAddress": [],
      "type": "call"
    },
    {
      "action": {
        "callType": "call",
        "from": "0x0b95993a39a363d99280ac950f5e4536ab5c5566",
        "gas": "0x8fc",
        "input": "0x",
        "to": "0xc227a75b32ed37d3f9d6341b9904d003dad3b1b3",
        "value": "0x1550f7dca70000"
      },
      "result": {"gasUsed": "0x0", "output": "0x"},
      "subtraces": 0,
      "traceAddress": [0],
      "type": "call"
    }
  ],
  "vmTrace": {
    "code": "0x6060604052",
    "ops": [
      {"cost": 3, "ex": {"mem": null, "push": ["0x60"], "store": null, "used": 42485}, "pc": 0, "sub": null},
      {"cost": 12, "ex": {"mem": {"data": "0x0000000000000000000000000000000000000000000000000000000000000060", "off": 64}, "push": [], "store": null, "used": 42470}, "pc": 4, "sub": null},
      {"cost": 3, "ex": {"mem": null, "push": ["0x100000000000000000000000000000000000000000000000000000000", "0x1a695230000000000000000000000000c227a75b32ed37d3f9d6341b9904d003"], "store": null, "used": 42440}, "pc": 44, "sub": null},
      {"cost": 9700, "ex": {"mem": null, "push": ["0x1"], "store": null, "used": 34884}, "pc": 294, "sub": {"code": "0x", "ops": []}},
      {"cost": 0, "ex": {"mem": null, "push": [], "store": null, "used": 34841}, "pc": 139, "sub": null}
    ]
  }
}"""

EXAMPLE_TRACES = """[{
  "output": "0x",
  "stateDiff": {
    "0x5df9b87991262f6ba471f09758cde1c0fc1de734": {
      "balance": {"+": "0x7a69"},
      "code": {"+": "0x"},
      "nonce": {"+": "0x0"},
      "storage": {}
    },
    "0xa1e4380a3b1f749673e270229993ee55f35663b4": {
      "balance": {"*": {"from": "0x6c6b935b8bbd400000", "to": "0x6c5d01021be7168597"}},
      "code": "=",
      "nonce": {"*": {"from": "0x0", "to": "0x1"}},
      "storage": {}
    },
    "0xe6a7a1d47ff21b6321162aea7c6cb457d5476bca": {
      "balance": {"*": {"from": "0xf3426785a8ab466000", "to": "0xf350f9df18816f6000"}},
      "code": "=",
      "nonce": "=",
      "storage": {}
    }
  },
  "trace": [
    {
      "action": {
        "callType": "call",
        "from": "0xa1e4380a3b1f749673e270229993ee55f35663b4",
        "gas": "0x0",
        "input": "0x",
        "to": "0x5df9b87991262f6ba471f09758cde1c0fc1de734",
        "value": "0x7a69"
      },
      "result": {"gasUsed": "0x0", "output": "0x"},
      "subtraces": 0,
      "traceAddress": [],
      "type": "call"
    }
  ],
  "transactionHash": "0x5c504ed432cb51138bcf09aa5e8a410dd4a1e204ef84bfed1be16dfba1b22060",
  "vmTrace": {"code": "0x", "ops": []}
}]"""


def test_serialize_trace_type():
    names = ["trace", "vmTrace", "stateDiff"]
    trace_types = [TraceType(name) for name in names]
    assert trace_types == [TraceType.TRACE, TraceType.VM_TRACE, TraceType.STATE_DIFF]
    text = json.dumps([t.value for t in trace_types], separators=(",", ":"))
    assert text == '["trace","vmTrace","stateDiff"]'


def test_deserialize_blocktrace():
    trace = BlockTrace.from_json(json.loads(EXAMPLE_TRACE))
    assert trace.output == Bytes()
    assert trace.transaction_hash is None
    assert len(trace.trace) == 2
    first, second = trace.trace
    assert first.subtraces == 1
    assert first.action_type is ActionType.CALL
    assert isinstance(first.action, Call)
    assert first.action.call_type is CallType.CALL
    assert first.action.value == U256(0x1550F7DCA70000)
    assert first.result == CallResult(gas_used=U256(0x1DDF), output=Bytes())
    assert second.trace_address == [0]

    sender = H160.from_hex("0x01f0eb5c4b0a9d8285b67195f5f10ce22971a102")
    account = trace.state_diff.accounts[sender]
    assert account.balance == Diff.changed(U256(0x7361AF5818297800), U256(0x734A36BB22448000))
    assert account.code.kind is DiffKind.SAME
    assert account.nonce == Diff.changed(U256(0x1D6), U256(0x1D7))
    assert account.storage == {}


def test_deserialize_blocktrace_vm_ops():
    trace = BlockTrace.from_json(json.loads(EXAMPLE_TRACE))
    ops = trace.vm_trace.ops
    assert trace.vm_trace.code == Bytes(bytes.fromhex("6060604052"))
    assert [op.pc for op in ops] == [0, 4, 44, 294, 139]
    assert ops[0].ex.push == [U256(0x60)]
    assert ops[1].ex.mem.off == 64
    assert len(ops[1].ex.mem.data) == 32
    assert ops[2].ex.push[0] == U256(1 << 224)
    assert ops[3].cost == 9700
    assert ops[3].sub == VMTrace(code=Bytes(), ops=[])
    assert ops[4].sub is None


def test_deserialize_blocktraces():
    traces = [BlockTrace.from_json(item) for item in json.loads(EXAMPLE_TRACES)]
    assert len(traces) == 1
    trace = traces[0]
    assert trace.transaction_hash == H256.from_hex(
        "0x5c504ed432cb51138bcf09aa5e8a410dd4a1e204ef84bfed1be16dfba1b22060"
    )
    created = trace.state_diff.accounts[H160.from_hex("0x5df9b87991262f6ba471f09758cde1c0fc1de734")]
    assert created.balance == Diff.born(U256(0x7A69))
    assert created.code == Diff.born(Bytes())
    assert created.nonce == Diff.born(U256(0))
    assert trace.vm_trace.ops == []
    assert len(trace.state_diff.accounts) == 3


@pytest.mark.parametrize("text", [EXAMPLE_TRACE, EXAMPLE_TRACES])
def test_blocktrace_round_trip(text):
    data = json.loads(text)
    items = data if isinstance(data, list) else [data]
    for item in items:
        trace = BlockTrace.from_json(item)
        assert BlockTrace.from_json(trace.to_json()) == trace


def test_state_diff_to_json_sorted_addresses():
    low = H160.from_hex("0x0000000000000000000000000000000000000001")
    high = H160.from_hex("0x00000000000000000000000000000000000000ff")
    account = AccountDiff(Diff.same(), Diff.same(), Diff.same(), {})
    encoded = StateDiff({high: account, low: account}).to_json()
    assert list(encoded) == [low.to_json(), high.to_json()]
    assert encoded[low.to_json()] == {"balance": "=", "nonce": "=", "code": "=", "storage": {}}


def test_diff_json_forms():
    dump = lambda value: value.to_json()
    assert Diff.same().to_json(dump) == "="
    assert Diff.born(U256(5)).to_json(dump) == {"+": "0x5"}
    assert Diff.died(U256(5)).to_json(dump) == {"-": "0x5"}
    assert Diff.changed(U256(1), U256(2)).to_json(dump) == {"*": {"from": "0x1", "to": "0x2"}}
    assert Diff.from_json({"-": "0x10"}, U256.from_hex) == Diff.died(U256(16))


@pytest.mark.parametrize("bad", ["!", {"?": "0x1"}, {"+": "0x1", "-": "0x2"}, 5, {"*": {"from": "0x1"}}])
def test_diff_rejects_bad_input(bad):
    with pytest.raises(DecodeError):
        Diff.from_json(bad, U256.from_hex)


def test_account_diff_storage():
    key = "0x" + "00" * 31 + "01"
    value = "0x" + "00" * 31 + "02"
    data = {"balance": "=", "nonce": "=", "code": "=", "storage": {key: {"+": value}}}
    account = AccountDiff.from_json(data)
    assert account.storage == {H256.from_hex(key): Diff.born(H256.from_hex(value))}
    assert account.to_json() == data


def test_account_diff_requires_storage():
    with pytest.raises(DecodeError):
        AccountDiff.from_json({"balance": "=", "nonce": "=", "code": "="})


def test_storage_and_memory_diff_round_trip():
    store = StorageDiff(key=U256(1), val=U256(255))
    assert store.to_json() == {"key": "0x1", "val": "0xff"}
    assert StorageDiff.from_json(store.to_json()) == store
    mem = MemoryDiff(off=64, data=Bytes(b"\x01\x02"))
    assert mem.to_json() == {"off": 64, "data": "0x0102"}
    assert MemoryDiff.from_json(mem.to_json()) == mem


def test_vm_operation_round_trip():
    op = VMOperation(
        pc=7,
        cost=3,
        ex=VMExecutedOperation(used=10, push=[U256(1)], mem=None, store=StorageDiff(U256(2), U256(3))),
        sub=VMTrace(code=Bytes(b"\x60"), ops=[]),
    )
    encoded = op.to_json()
    assert encoded["sub"] == {"code": "0x60", "ops": []}
    assert encoded["ex"]["store"] == {"key": "0x2", "val": "0x3"}
    assert VMOperation.from_json(encoded) == op


def test_vm_operation_rejects_negative_pc():
    with pytest.raises(DecodeError):
        VMOperation.from_json({"pc": -1, "cost": 0, "ex": None, "sub": None})


def test_transaction_trace_rejects_unknown_type():
    data = json.loads(EXAMPLE_TRACE)["trace"][0]
    data["type"] = "jump"
    with pytest.raises(DecodeError):
        TransactionTrace.from_json(data)


def test_block_trace_requires_output():
    with pytest.raises(DecodeError):
        BlockTrace.from_json({"trace": None})