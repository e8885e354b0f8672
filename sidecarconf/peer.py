"""Peer sidecar configuration: ``CHAIN_ID=URL`` entries and their validation."""

from __future__ import annotations

import re
from dataclasses import dataclass

_U64_MAX = 2**64 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


class PeerConfigError(ValueError):
    """Invalid peer configuration."""


class MissingSeparatorError(PeerConfigError):
    """The peer value has no ``=`` between chain id and address."""

    def __init__(self) -> None:
        super().__init__("peer must use CHAIN_ID=URL")


class EmptyChainIdError(PeerConfigError):
    """The chain id part of a peer value is empty."""

    def __init__(self) -> None:
        super().__init__("peer chain id is empty")


class InvalidChainIdError(PeerConfigError):
    """The chain id part of a peer value is not an unsigned 64-bit integer."""

    def __init__(self, value: str) -> None:
        super().__init__(f"invalid peer chain id: {value}")
        self.value = value


class EmptyAddressError(PeerConfigError):
    """The address part of a peer value is empty."""

    def __init__(self) -> None:
        super().__init__("peer address is empty")


class DuplicateChainIdError(PeerConfigError):
    """Two peers were configured for the same chain id."""

    def __init__(self, chain_id: int) -> None:
        super().__init__(f"duplicate peer chain id: {chain_id}")
        self.chain_id = chain_id


@dataclass(frozen=True)
class PeerEntry:
    """A configured peer sidecar, keyed by its destination chain id."""

    chain_id: int
    addr: str


def parse_peer_entry(value: str) -> PeerEntry:
    """Parse a ``CHAIN_ID=URL`` string into a :class:`PeerEntry`."""
    raw_chain_id, separator, raw_addr = value.partition("=")
    if not separator:
        raise MissingSeparatorError()

    chain_text = raw_chain_id.strip()
    if not chain_text:
        raise EmptyChainIdError()
    if not _UNSIGNED.fullmatch(chain_text) or int(chain_text) > _U64_MAX:
        raise InvalidChainIdError(chain_text)

    addr = raw_addr.strip()
    if not addr:
        raise EmptyAddressError()

    return PeerEntry(chain_id=int(chain_text), addr=addr)


@dataclass(frozen=True)
class PeerArgs:
    """Peer sidecar addresses used for mailbox message delivery."""

    peers: tuple[PeerEntry, ...] = ()

    def entries(self) -> tuple[PeerEntry, ...]:
        """Return the configured peers after checking chain ids are unique."""
        seen: set[int] = set()
        for peer in self.peers:
            if peer.chain_id in seen:
                raise DuplicateChainIdError(peer.chain_id)
            seen.add(peer.chain_id)
        return self.peers