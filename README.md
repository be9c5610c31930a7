# web3types

Plain Python models for the data that Ethereum JSON-RPC nodes send and
receive. Each model has a `from_json` class method that reads the decoded JSON
a node returns (dicts, lists, strings, numbers) and a `to_json` method that
gives back JSON-ready Python values in the shape a node expects. Use Python's
`json` module for the text itself. Malformed input raises
`web3types.uint.DecodeError`, which is a subclass of `ValueError`.

The package has no dependencies beyond the standard library.

## Modules

- `web3types.uint` has the fixed-size hashes `H64`, `H128`, `H160`, `H256`,
  `H512`, `H520` and `H2048`, and the bounded integers `U64`, `U128` and
  `U256`, which subclass `int`. `from_hex` needs a `0x` prefix. For hashes it
  also checks the exact length. Integers reject decimal strings and the empty
  `"0x"`. `to_json` writes hashes at full width and integers in minimal hex.
  There are also `H256.from_low_u64_be`, `H128.from_uint`, `H160.random`,
  `U256.from_bytes_be` and `U256.low_u64`. The module defines the aliases
  `Address = H160` and `Index = U64`.
- `web3types.byte_data` has two byte types. `Bytes` is written as `0x`-hex.
  `BytesArray` is written as a JSON array of byte values.
- `web3types.block` has the following:
  - `Block` and `BlockHeader`. A `null` or missing `miner` becomes the zero
    address.
  - `BlockNumber`, with the constructors `latest`, `earliest`, `pending` and
    `at(n)`.
  - `BlockId`, with the constructors `from_hash` and `from_number`.
  - `to_block_id`, which turns a hash, a `BlockNumber` or an integer into a
    `BlockId`.

  `Block.from_json` takes an optional `parse_transaction` callable. It is
  applied to each entry of `transactions`.
- `web3types.log` has `Log`, with `is_removed()`. For log filters it has
  `Filter`, `FilterBuilder`, `Topic` and `TopicFilter`.
- `web3types.transaction_id` has `TransactionId`. It names a transaction by
  hash, or by block and index.
- `web3types.transaction` has `Transaction`, `Receipt`, `RawTransaction` and
  `AccessListItem`.
- `web3types.transaction_request` has two request types, each with a builder:
  - `CallRequest` and `CallRequestBuilder`
  - `TransactionRequest` and `TransactionRequestBuilder`

  It also has `TransactionCondition`, with the constructors `block` and
  `time`.
- `web3types.signed` has `SignedData`, `SignedTransaction` and
  `TransactionParameters`. Gas in `TransactionParameters` defaults to
  100 000. It converts with `from_call_request` and `to_call_request`.
- `web3types.recovery` has `Recovery`, `RecoveryMessage` and
  `ParseSignatureError`.
- `web3types.work` has `Work`, a miner's work package. It is encoded as a
  JSON array of three or four items.
- `web3types.parity_peers` has the peer information models:
  - `ParityPeerType` and `ParityPeerInfo`
  - `PeerNetworkInfo` and `PeerProtocolsInfo`
  - `EthProtocolInfo` and `PipProtocolInfo`
- `web3types.parity_pending_transaction` has the pending-transaction filters:
  - `ParityPendingTransactionFilter` and its builder
  - `FilterCondition`, for "lt", "eq" and "gt"
  - `ToFilter`, for an address or for contract creation
- `web3types.trace_filtering` has the trace filtering API:
  - `TraceFilter` and `TraceFilterBuilder`
  - `Trace`
  - the actions `Call`, `Create`, `Suicide` and `Reward`
  - the results `CallResult` and `CreateResult`
  - the enums `ActionType`, `CallType` and `RewardType`
  - `parse_action`, `action_to_json`, `parse_result` and `result_to_json`
- `web3types.traces` has the ad-hoc trace API:
  - `BlockTrace`, `TransactionTrace` and `TraceType`
  - `StateDiff`, `AccountDiff`, `Diff` and `DiffKind`
  - `VMTrace`, `VMOperation` and `VMExecutedOperation`
  - `MemoryDiff` and `StorageDiff`

Builders are immutable: every setter returns a new builder, and `build()`
returns the finished object.

## Examples

Block selectors:

```python
from web3types.block import BlockId, BlockNumber
from web3types.uint import H256

assert BlockNumber.at(0x1B4).to_json() == "0x1b4"
assert BlockNumber.latest().to_json() == "latest"
assert BlockId.from_hash(H256.from_low_u64_be(1)).to_json() == {
    "blockHash": "0x" + "00" * 31 + "01",
}
```

Building a log filter:

```python
from web3types.block import BlockNumber
from web3types.log import FilterBuilder
from web3types.uint import H160, H256

flt = (
    FilterBuilder()
    .from_block(BlockNumber.at(0x1B4))
    .to_block(BlockNumber.latest())
    .address([H160.from_low_u64_be(1)])
    .topics([H256.from_low_u64_be(3)], None, None, None)
    .build()
)
payload = flt.to_json()
```

Building a call request:

```python
from web3types.transaction_request import CallRequest
from web3types.uint import H160, U256

request = (
    CallRequest.builder()
    .to(H160.from_low_u64_be(5))
    .gas(U256(21_000))
    .build()
)
assert request.to_json() == {
    "to": "0x0000000000000000000000000000000000000005",
    "gas": "0x5208",
}
```

Getting the compact signature and recovery id from a raw 65-byte signature:

```python
from web3types.recovery import Recovery

raw_signature = bytes(32) + bytes(32) + bytes([28])
recovery = Recovery.from_raw_signature("Some data", raw_signature)
signature, recovery_id = recovery.as_signature()
assert len(signature) == 64 and recovery_id == 1
```

`from_raw_signature` raises `ParseSignatureError` if the signature is not 65
bytes long. `as_signature` returns `None` if `v` is not a valid Electrum value.

## What it does not do

- The package only models data. It does not connect to a node, send requests
  or sign anything.
- Recovering an address from a signature needs an elliptic-curve library.
  `Recovery` only prepares the inputs for one.
- There is no model for the result of a node's syncing-status query.

## Running the tests

```
pip install -e ".[test]"
pytest
```