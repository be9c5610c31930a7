"""Filters for pending transactions on Parity/OpenEthereum nodes."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .uint import H160, U64, U256

_KINDS = ("lt", "eq", "gt")


@dataclass(frozen=True)
class FilterCondition:
    """A comparison with a value: lower than ("lt"), equal ("eq") or greater than ("gt")."""

    kind: str
    value: Any

    def __post_init__(self):
        if self.kind not in _KINDS:
            raise ValueError(f"unknown filter condition {self.kind!r}")

    @classmethod
    def lower_than(cls, value):
        return cls("lt", value)

    @classmethod
    def equal(cls, value):
        return cls("eq", value)

    @classmethod
    def greater_than(cls, value):
        return cls("gt", value)

    def to_json(self):
        return {self.kind: self.value.to_json()}


def _condition(value, kind):
    """Turn a bare value or a condition into a condition on ``kind`` values."""
    if isinstance(value, FilterCondition):
        return FilterCondition(value.kind, kind(value.value))
    return FilterCondition.equal(kind(value))


@dataclass(frozen=True)
class ToFilter:
    """Match a recipient address, or contract creation when ``recipient`` is None."""

    recipient: H160 | None = None

    @classmethod
    def address(cls, address):
        """Match transactions sent to ``address``."""
        return cls(recipient=address)

    @classmethod
    def action(cls):
        """Match contract creation."""
        return cls(recipient=None)

    def to_json(self):
        if self.recipient is None:
            return {"action": "contract_creation"}
        return {"eq": self.recipient.to_json()}


@dataclass(frozen=True)
class ParityPendingTransactionFilter:
    """Filter for pending transactions; unset fields are left out."""

    from_address: FilterCondition | None = None
    to: ToFilter | None = None
    gas: FilterCondition | None = None
    gas_price: FilterCondition | None = None
    value: FilterCondition | None = None
    nonce: FilterCondition | None = None

    @classmethod
    def builder(cls):
        return ParityPendingTransactionFilterBuilder()

    def to_json(self):
        fields = (
            ("from", self.from_address),
            ("to", self.to),
            ("gas", self.gas),
            ("gas_price", self.gas_price),
            ("value", self.value),
            ("nonce", self.nonce),
        )
        return {key: item.to_json() for key, item in fields if item is not None}


class ParityPendingTransactionFilterBuilder:
    """Builds a pending transaction filter; every method returns a new builder."""

    __slots__ = ("_filter",)

    def __init__(self, base=None):
        self._filter = base if base is not None else ParityPendingTransactionFilter()

    def _with(self, **changes):
        return ParityPendingTransactionFilterBuilder(replace(self._filter, **changes))

    def from_address(self, address):
        return self._with(from_address=FilterCondition.equal(address))

    def to(self, to_or_action):
        return self._with(to=to_or_action)

    def gas(self, gas):
        return self._with(gas=_condition(gas, U64))

    def gas_price(self, gas_price):
        return self._with(gas_price=_condition(gas_price, U64))

    def value(self, value):
        return self._with(value=_condition(value, U256))

    def nonce(self, nonce):
        return self._with(nonce=_condition(nonce, U256))

    def build(self):
        return self._filter