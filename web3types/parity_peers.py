"""Peer information reported by a Parity node."""

from __future__ import annotations

from dataclasses import dataclass

from .block import _dump, _expect_object, _list_of, _optional, _required
from .uint import U256, DecodeError

_USIZE_BITS = 64
_U32_BITS = 32


def _uint(bits):
    def parse(value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"expected an unsigned integer, got {value!r}")
        if not 0 <= value < (1 << bits):
            raise DecodeError(f"{value} does not fit in {bits} unsigned bits")
        return value

    return parse


def _string(value):
    if not isinstance(value, str):
        raise DecodeError(f"expected a string, got {type(value).__name__}")
    return value


@dataclass
class PeerNetworkInfo:
    """Remote and local address of a peer connection."""

    remote_address: str
    local_address: str

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "peer network info")
        return cls(
            remote_address=_required(data, "remoteAddress", _string),
            local_address=_required(data, "localAddress", _string),
        )

    def to_json(self):
        return {"remoteAddress": self.remote_address, "localAddress": self.local_address}


@dataclass
class EthProtocolInfo:
    """Eth protocol version, difficulty and chain head of a peer."""

    version: int
    difficulty: U256 | None
    head: str

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "eth protocol info")
        return cls(
            version=_required(data, "version", _uint(_U32_BITS)),
            difficulty=_optional(data, "difficulty", U256.from_hex),
            head=_required(data, "head", _string),
        )

    def to_json(self):
        return {"version": self.version, "difficulty": _dump(self.difficulty), "head": self.head}


@dataclass
class PipProtocolInfo:
    """Pip protocol version, difficulty and chain head of a peer."""

    version: int
    difficulty: U256
    head: str

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "pip protocol info")
        return cls(
            version=_required(data, "version", _uint(_U32_BITS)),
            difficulty=_required(data, "difficulty", U256.from_hex),
            head=_required(data, "head", _string),
        )

    def to_json(self):
        return {"version": self.version, "difficulty": self.difficulty.to_json(), "head": self.head}


@dataclass
class PeerProtocolsInfo:
    """Protocol details of a peer."""

    eth: EthProtocolInfo | None
    pip: PipProtocolInfo | None

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "peer protocols info")
        return cls(
            eth=_optional(data, "eth", EthProtocolInfo.from_json),
            pip=_optional(data, "pip", PipProtocolInfo.from_json),
        )

    def to_json(self):
        return {"eth": _dump(self.eth), "pip": _dump(self.pip)}


@dataclass
class ParityPeerInfo:
    """Details of one peer."""

    id: str | None
    name: str
    caps: list[str]
    network: PeerNetworkInfo
    protocols: PeerProtocolsInfo

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "peer info")
        return cls(
            id=_optional(data, "id", _string),
            name=_required(data, "name", _string),
            caps=_required(data, "caps", _list_of(_string)),
            network=_required(data, "network", PeerNetworkInfo.from_json),
            protocols=_required(data, "protocols", PeerProtocolsInfo.from_json),
        )

    def to_json(self):
        return {
            "id": self.id,
            "name": self.name,
            "caps": list(self.caps),
            "network": self.network.to_json(),
            "protocols": self.protocols.to_json(),
        }


@dataclass
class ParityPeerType:
    """Active, connected and maximum peer counts with the list of peers."""

    active: int
    connected: int
    max: int
    peers: list[ParityPeerInfo]

    @classmethod
    def from_json(cls, data):
        _expect_object(data, "peers")
        return cls(
            active=_required(data, "active", _uint(_USIZE_BITS)),
            connected=_required(data, "connected", _uint(_USIZE_BITS)),
            max=_required(data, "max", _uint(_U32_BITS)),
            peers=_required(data, "peers", _list_of(ParityPeerInfo.from_json)),
        )

    def to_json(self):
        return {
            "active": self.active,
            "connected": self.connected,
            "max": self.max,
            "peers": [peer.to_json() for peer in self.peers],
        }