"""
RPSL BGP Data Models

This module contains the value types that flow through policy resolution:
route entities, route objects, peering descriptors and diagnostics.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, NamedTuple, Optional, Tuple

from rpsl_bgp.rpsl.attrs import AddressPrefixRange


# Peer address recorded when an export clause names a whole AS
WILDCARD_PEER_ADDRESS = "0.0.0.0"


@dataclass(frozen=True)
class RouteEntity:
    """
    A resolved route: an address prefix plus the maintainer that declared it.

    Explicitly listed set members carry no maintainer. Two entities are equal
    only if both prefix and maintainer are equal, so "no maintainer" never
    matches a named one.
    """
    prefix: AddressPrefixRange
    maintainer: Optional[str] = None

    @classmethod
    def from_string(cls, prefix: str, maintainer: Optional[str] = None) -> 'RouteEntity':
        """Build an entity from a textual prefix (raises AttributeParseError)"""
        return cls(AddressPrefixRange.parse(prefix), maintainer.upper() if maintainer else None)

    def sort_key(self):
        return (self.prefix.sort_key(), self.maintainer or "")

    def to_dict(self) -> dict:
        """Convert RouteEntity to dictionary for serialization"""
        return {
            'prefix': str(self.prefix),
            'maintainer': self.maintainer,
        }

    def __str__(self) -> str:
        return f"{self.prefix} via {self.maintainer if self.maintainer is not None else 'null'}"


@dataclass(frozen=True)
class RouteObject:
    """
    Index view of an RPSL route/route6 object.

    Only the attributes the resolver follows are kept: the prefix, the origin
    AS, the maintainers (mnt-by) and the sets it claims membership of.
    """
    prefix: AddressPrefixRange
    origin: Optional[int] = None
    maintainers: Tuple[str, ...] = ()
    member_of: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def maintainer(self) -> Optional[str]:
        """Primary maintainer (first mnt-by), if any"""
        return self.maintainers[0] if self.maintainers else None

    def as_entity(self, maintainer: Optional[str] = None) -> RouteEntity:
        return RouteEntity(self.prefix, maintainer)


class PeerKey(NamedTuple):
    """Key of an AutNum's peer route map: (peer AS, peer address)"""
    peer_as: int
    peer_address: str

    def __str__(self) -> str:
        return f"AS{self.peer_as} {self.peer_address}"


class PeeringDescriptor(NamedTuple):
    """A peering resolved from one export clause"""
    peer: PeerKey
    local_router: str

    @property
    def is_wildcard(self) -> bool:
        return self.peer.peer_address == WILDCARD_PEER_ADDRESS


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found while interpreting policy"""
    severity: str
    message: str
    attribute: Optional[str] = None

    def __str__(self) -> str:
        if self.attribute:
            return f"{self.message}: {self.attribute}"
        return self.message


__all__ = [
    'WILDCARD_PEER_ADDRESS', 'RouteEntity', 'RouteObject',
    'PeerKey', 'PeeringDescriptor', 'Diagnostic',
]
