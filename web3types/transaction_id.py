"""Ways of naming a transaction."""

from __future__ import annotations

from dataclasses import dataclass

from .block import BlockId, to_block_id
from .uint import H256, U64


@dataclass(frozen=True)
class TransactionId:
    """A transaction named by its hash, or by its block and index in that block."""

    hash: H256 | None = None
    block: BlockId | None = None
    index: U64 | None = None

    def __post_init__(self):
        if self.hash is not None:
            if not isinstance(self.hash, H256):
                raise TypeError(f"a transaction hash must be an H256, got {self.hash!r}")
            if self.block is not None or self.index is not None:
                raise ValueError("a transaction id takes a hash or a block and index, not both")
            return
        if self.block is None or self.index is None:
            raise ValueError("a transaction id needs a hash or both a block and an index")
        if not isinstance(self.block, BlockId):
            raise TypeError(f"block must be a BlockId, got {self.block!r}")
        object.__setattr__(self, "index", U64(self.index))

    @classmethod
    def from_hash(cls, tx_hash):
        return cls(hash=tx_hash)

    @classmethod
    def from_block(cls, block, index):
        """Name a transaction by block (hash, number or BlockId) and index."""
        return cls(block=to_block_id(block), index=U64(index))