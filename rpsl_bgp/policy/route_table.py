"""
Route Table View - Read-only projections of an aut-num's peer route map
"""

from typing import FrozenSet, Iterator, List, Optional, Tuple

from rpsl_bgp.models import RouteEntity


class RouteTable:
    """
    Routes an aut-num exports to one peer, or to every peer of an AS.

    peer_address is None for AS-wide tables, which union the routes of every
    recorded address of that AS (the wildcard address included). local_routers
    lists the "at" addresses of the covered peerings in declaration order.
    """

    def __init__(self, aut_num, peer_as: int, peer_address: Optional[str] = None):
        self.aut_num = aut_num
        self.peer_as = peer_as
        self.peer_address = peer_address
        self.routes: FrozenSet[RouteEntity] = self._project(aut_num.peer_route_map)
        self.local_routers: Tuple[str, ...] = self._project_local_routers(aut_num.peer_local_routers)

    def _project(self, peer_route_map) -> FrozenSet[RouteEntity]:
        if self.peer_address is not None:
            return frozenset(peer_route_map.get((self.peer_as, self.peer_address), ()))

        routes = set()
        for peer, peer_routes in peer_route_map.items():
            if peer.peer_as == self.peer_as:
                routes.update(peer_routes)
        return frozenset(routes)

    def _project_local_routers(self, peer_local_routers) -> Tuple[str, ...]:
        if self.peer_address is not None:
            return tuple(peer_local_routers.get((self.peer_as, self.peer_address), ()))

        routers = {}
        for peer, peer_routers in peer_local_routers.items():
            if peer.peer_as == self.peer_as:
                routers.update(dict.fromkeys(peer_routers))
        return tuple(routers)

    def prefixes(self) -> List[str]:
        """Distinct prefixes of the table in address order"""
        unique = {entity.prefix for entity in self.routes}
        return [str(prefix) for prefix in sorted(unique, key=lambda p: p.sort_key())]

    def sorted_routes(self) -> List[RouteEntity]:
        return sorted(self.routes, key=lambda entity: entity.sort_key())

    def __iter__(self) -> Iterator[RouteEntity]:
        return iter(self.sorted_routes())

    def __len__(self) -> int:
        return len(self.routes)

    def __contains__(self, entity) -> bool:
        return entity in self.routes

    def __eq__(self, other) -> bool:
        if isinstance(other, RouteTable):
            return self.routes == other.routes
        if isinstance(other, (set, frozenset)):
            return self.routes == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.routes)

    def __repr__(self) -> str:
        peer = f"AS{self.peer_as}" + (f" {self.peer_address}" if self.peer_address else "")
        return f"RouteTable({self.aut_num} -> {peer}, {len(self.routes)} routes)"


def table_for_peer(aut_num, peer_as: int, peer_address: str) -> RouteTable:
    """Routes exported to exactly (peer_as, peer_address); empty if unknown"""
    return RouteTable(aut_num, peer_as, peer_address)


def table_for_as(aut_num, peer_as: int) -> RouteTable:
    """Routes exported to every peer address recorded for peer_as"""
    return RouteTable(aut_num, peer_as)


def peer_as_of(aut_num, peer_address: str) -> Optional[int]:
    """AS of the first recorded peer with this address, or None"""
    for peer in aut_num.peer_route_map:
        if peer.peer_address == peer_address:
            return peer.peer_as
    return None
