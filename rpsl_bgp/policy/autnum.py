"""
BGPAutNum - aut-num objects and the route tables their export policy dictates
"""

import logging
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Set, Tuple

from rpsl_bgp.models import WILDCARD_PEER_ADDRESS, Diagnostic, PeerKey, RouteEntity
from rpsl_bgp.policy.export import parse_export, resolve_filter
from rpsl_bgp.policy.route_table import RouteTable, peer_as_of, table_for_as, table_for_peer
from rpsl_bgp.rpsl.attrs import parse_as_number
from rpsl_bgp.rpsl.objects import ObjectType, RpslObject
from rpsl_bgp.utils.error_handling import AttributeParseError, ObjectParseError


class BGPAutNum:
    """
    An aut-num object with its resolved export route map.

    The peer route map, (peer AS, peer address) -> routes, is built once at
    construction from every export attribute in object order and is read-only
    afterwards. Clauses naming the same peer accumulate into one collection.
    The local routers of those clauses are kept per peer in declaration order.
    """

    def __init__(self, obj: RpslObject, document,
                 wildcard_address: str = WILDCARD_PEER_ADDRESS,
                 export_attributes: Sequence[str] = ("export",)):
        """
        Args:
            obj: aut-num RPSL object
            document: policy document index used to resolve route filters
            wildcard_address: peer address recorded for AS-wide peerings
            export_attributes: attribute names interpreted as export policy

        Raises:
            ObjectParseError: not an aut-num, invalid AS key or no as-name
        """
        self.logger = logging.getLogger(__name__)

        if obj.type != ObjectType.AUT_NUM:
            raise ObjectParseError(f"Requires aut-num object, got {obj.type}", str(obj))
        self.rpsl_object = obj

        try:
            self.aut_num = parse_as_number(obj.key)
        except AttributeParseError as e:
            raise ObjectParseError(f"Invalid aut-num key: {e.message}", str(obj)) from e

        self.name = obj.get_value("as-name")
        if not self.name:
            raise ObjectParseError(f"Missing mandatory as-name in AS{self.aut_num}", str(obj))

        self.wildcard_address = wildcard_address
        self.export_attributes = tuple(export_attributes)
        self.diagnostics: List[Diagnostic] = []
        self._peer_route_map, self._peer_local_routers = self._generate_route_maps(document)

    def _generate_route_maps(self, document):
        """Interpret every export attribute and accumulate routes and local routers per peer"""
        route_map: Dict[PeerKey, Set[RouteEntity]] = {}
        local_routers: Dict[PeerKey, Dict[str, None]] = {}

        for attr in self.rpsl_object.attributes:
            if attr.name not in self.export_attributes:
                continue

            parsed = parse_export(attr, self.wildcard_address)
            self.diagnostics.extend(parsed.diagnostics)

            for clause in parsed.clauses:
                routes = resolve_filter(clause.filter_terms, document, attr, self.diagnostics)
                for peering in clause.peerings:
                    route_map.setdefault(peering.peer, set()).update(routes)
                    local_routers.setdefault(peering.peer, {})[peering.local_router] = None

        self.logger.debug(
            f"{self}: {len(route_map)} peers, {len(self.diagnostics)} diagnostics"
        )
        return (
            MappingProxyType({peer: frozenset(routes) for peer, routes in route_map.items()}),
            MappingProxyType({peer: tuple(routers) for peer, routers in local_routers.items()}),
        )

    @property
    def peer_route_map(self) -> Mapping[PeerKey, FrozenSet[RouteEntity]]:
        return self._peer_route_map

    @property
    def peer_local_routers(self) -> Mapping[PeerKey, Tuple[str, ...]]:
        """Local routers (the "at" addresses) per peer in declaration order"""
        return self._peer_local_routers

    def peers(self) -> List[PeerKey]:
        """Peers in the order they were first declared"""
        return list(self._peer_route_map)

    def peer_as_numbers(self) -> List[int]:
        """Distinct peer AS numbers in declaration order"""
        return list(dict.fromkeys(peer.peer_as for peer in self._peer_route_map))

    def get_table_for_peer(self, peer_as: int, peer_address: str) -> RouteTable:
        return table_for_peer(self, peer_as, peer_address)

    def get_table_for_as(self, peer_as: int) -> RouteTable:
        return table_for_as(self, peer_as)

    def get_as_of_peer(self, peer_address: str) -> Optional[int]:
        return peer_as_of(self, peer_address)

    def to_dict(self) -> dict:
        """Convert the export tables to a dictionary for serialization"""
        return {
            'aut_num': self.aut_num,
            'name': self.name,
            'peers': [
                {
                    'peer_as': peer.peer_as,
                    'peer_address': peer.peer_address,
                    'local_routers': list(self._peer_local_routers.get(peer, ())),
                    'routes': [str(entity) for entity in
                               sorted(routes, key=lambda e: e.sort_key())],
                }
                for peer, routes in self._peer_route_map.items()
            ],
            'diagnostics': [str(d) for d in self.diagnostics],
        }

    def __str__(self) -> str:
        return f"{self.name} (AS{self.aut_num})"

    def __repr__(self) -> str:
        return f"BGPAutNum({self})"
