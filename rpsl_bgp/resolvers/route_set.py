"""
Route-Set Resolver - Expands route-sets and as-sets into route entities

Every top-level resolution carries its own `visited` set of names. Each
reachable set is entered once, which terminates cycles, and the result is
the closure of its members over the set references.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from rpsl_bgp.models import RouteEntity
from rpsl_bgp.rpsl.attrs import (
    AddressPrefixRange, is_as_number, parse_as_number, split_range_operator
)
from rpsl_bgp.rpsl.objects import ObjectType, RpslObject
from rpsl_bgp.utils.error_handling import ObjectParseError


logger = logging.getLogger(__name__)

# mbrs-by-ref value admitting back-references from any maintainer
MBRS_BY_REF_ANY = "ANY"


@dataclass(frozen=True)
class RouteSet:
    """
    Parsed route-set or as-set object.

    mbrs_by_ref is None when the attribute is absent (no back-references
    admitted), otherwise the set of admitted maintainers, possibly "ANY".
    """
    name: str
    members: Tuple[str, ...] = ()
    mbrs_by_ref: Optional[FrozenSet[str]] = None
    set_type: str = ObjectType.ROUTE_SET

    @property
    def key(self) -> str:
        """Case-insensitive lookup key"""
        return self.name.upper()

    @property
    def accepts_any_reference(self) -> bool:
        return self.mbrs_by_ref is not None and MBRS_BY_REF_ANY in self.mbrs_by_ref

    @classmethod
    def from_rpsl_object(cls, obj: RpslObject) -> 'RouteSet':
        if obj.type not in ObjectType.SET_TYPES:
            raise ObjectParseError(f"Requires route-set or as-set object, got {obj.type}", str(obj))

        members = tuple(obj.get_list_values("members") + obj.get_list_values("mp-members"))

        mbrs_by_ref = None
        if obj.contains_attribute("mbrs-by-ref"):
            mbrs_by_ref = frozenset(m.upper() for m in obj.get_list_values("mbrs-by-ref"))

        return cls(name=obj.key, members=members, mbrs_by_ref=mbrs_by_ref, set_type=obj.type)

    def admits(self, route) -> bool:
        """Whether a route declaring member-of this set is admitted"""
        if self.mbrs_by_ref is None:
            return False
        if self.accepts_any_reference:
            return True
        return any(m in self.mbrs_by_ref for m in route.maintainers)

    def reference_maintainer(self, route) -> Optional[str]:
        """Maintainer recorded for an admitted back-referencing route"""
        if self.accepts_any_reference:
            return route.maintainer
        for maintainer in route.maintainers:
            if maintainer in self.mbrs_by_ref:
                return maintainer
        return None

    def resolve(self, document) -> Set[RouteEntity]:
        """Resolve this set against a document with a fresh visited set"""
        return resolve_set(self.name, document, set())

    def __str__(self) -> str:
        return self.name


def _with_operator(routes, operator: str) -> Set[RouteEntity]:
    """Copy of routes with a set-level range operator applied"""
    if not operator:
        return set(routes)
    return {RouteEntity(entity.prefix.with_operator(operator), entity.maintainer)
            for entity in routes}


class SetResolution:
    """
    Closures of the sets reachable from one top-level resolution.

    Each reachable set is entered once. Its direct routes (prefixes, AS
    expansions and admitted back-references) and its references to other
    sets are recorded, then the closures are grown until nothing changes.
    A reference with a range operator applies it to the complete closure of
    the referenced set, so neither member order nor the point where a cycle
    is entered changes the result.
    """

    def __init__(self, document, visited: Set[str]):
        """
        Args:
            document: policy document index providing set and route lookups
            visited: names already entered; they contribute nothing and
                every name entered here is added in place
        """
        self.document = document
        self.visited = visited
        self.direct: Dict[str, Set[RouteEntity]] = {}
        self.references: Dict[str, List[Tuple[str, str]]] = {}

    def expand(self, members) -> Tuple[Set[RouteEntity], List[Tuple[str, str]]]:
        """Split member tokens into direct routes and (set name, operator) references"""
        routes = set()
        references = []

        for token in members:
            prefix = AddressPrefixRange.try_parse(token)
            if prefix is not None:
                routes.add(RouteEntity(prefix))
                continue

            name, operator = split_range_operator(token)
            if is_as_number(name):
                originated = {RouteEntity(route.prefix)
                              for route in self.document.routes_originated_by(parse_as_number(name))}
                routes.update(_with_operator(originated, operator))
            else:
                references.append((name.upper(), operator))

        return routes, references

    def enter(self, set_name: str) -> None:
        """Record every set reachable from set_name that was not entered yet"""
        pending = [set_name.upper()]

        while pending:
            key = pending.pop()
            if key in self.visited:
                continue
            self.visited.add(key)

            route_set = self.document.get_set(key)
            if route_set is None:
                logger.debug(f"Set {key} not found in document, contributes no routes")
                continue

            routes, references = self.expand(route_set.members)

            if route_set.mbrs_by_ref is not None:
                for route in self.document.routes_member_of(key):
                    if route_set.admits(route):
                        routes.add(route.as_entity(route_set.reference_maintainer(route)))

            self.direct[key] = routes
            self.references[key] = references
            pending.extend(name for name, _ in references)

    def closures(self) -> Dict[str, Set[RouteEntity]]:
        """Closure of every entered set"""
        closures = {key: set(routes) for key, routes in self.direct.items()}

        changed = True
        while changed:
            changed = False
            for key, references in self.references.items():
                closure = closures[key]
                size = len(closure)
                for name, operator in references:
                    if name in closures:
                        closure.update(_with_operator(closures[name], operator))
                if len(closure) != size:
                    changed = True

        return closures

    def resolve(self, set_name: str) -> Set[RouteEntity]:
        key = set_name.upper()
        self.enter(key)
        return self.closures().get(key, set())

    def resolve_members(self, members) -> Set[RouteEntity]:
        routes, references = self.expand(members)
        for name, _ in references:
            self.enter(name)

        closures = self.closures()
        for name, operator in references:
            routes.update(_with_operator(closures.get(name, ()), operator))
        return routes


def resolve_set(set_name: str, document, visited: Set[str]) -> Set[RouteEntity]:
    """
    Resolve a named set into its deduplicated route entities.

    Args:
        set_name: route-set or as-set name (case-insensitive)
        document: policy document index providing set and route lookups
        visited: names already entered during this top-level resolution;
            updated in place

    Returns:
        Set of RouteEntity; empty for unknown or already visited names
    """
    if set_name.upper() in visited:
        return set()
    return SetResolution(document, visited).resolve(set_name)


def resolve_members(members, document, visited: Set[str]) -> Set[RouteEntity]:
    """
    Resolve explicit member tokens.

    Prefixes become entities without maintainer and AS numbers expand to the
    prefixes they originate. Any other token names a nested set, optionally
    carrying a range operator applied to the nested prefixes; unknown names
    contribute nothing.
    """
    return SetResolution(document, visited).resolve_members(members)
