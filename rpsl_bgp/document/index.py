"""
Policy Document Index - Lookup tables over one batch of RPSL objects

Built once from a finished parse; resolution only reads it. Set names are
case-insensitive (RPSL), so sets and member-of references are keyed by
their upper-cased names.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, TextIO, Union

from rpsl_bgp.models import WILDCARD_PEER_ADDRESS, RouteEntity, RouteObject
from rpsl_bgp.policy.autnum import BGPAutNum
from rpsl_bgp.resolvers.route_set import RouteSet, resolve_set
from rpsl_bgp.rpsl.attrs import AddressPrefixRange, parse_as_number
from rpsl_bgp.rpsl.objects import ObjectType, RpslObject
from rpsl_bgp.rpsl.parser import RpslObjectReader
from rpsl_bgp.utils.error_handling import (
    AttributeParseError, ObjectParseError, RpslBgpError
)
from rpsl_bgp.utils.logging import get_logger


_timed = get_logger(__name__)


def route_object_from_rpsl(obj: RpslObject) -> RouteObject:
    """Build the index view of a route/route6 object (raises ObjectParseError)"""
    if obj.type not in ObjectType.ROUTE_TYPES:
        raise ObjectParseError(f"Requires route or route6 object, got {obj.type}", str(obj))

    try:
        prefix = AddressPrefixRange.parse(obj.get_value(obj.type))
        origin = parse_as_number(obj.get_value("origin"))
    except AttributeParseError as e:
        raise ObjectParseError(f"Invalid {obj.type} object {obj.key}: {e.message}", str(obj)) from e

    return RouteObject(
        prefix=prefix,
        origin=origin,
        maintainers=tuple(m.upper() for m in obj.get_list_values("mnt-by")),
        member_of=frozenset(name.upper() for name in obj.get_list_values("member-of")),
    )


class RpslDocument:
    """
    Index of route-sets, as-sets, routes and aut-nums for one input batch.

    Objects that fail to build are recorded in `errors` and skipped, unless
    `strict` is set, in which case the first failure propagates.
    """

    def __init__(self, objects: Iterable[RpslObject], strict: bool = False,
                 wildcard_address: str = WILDCARD_PEER_ADDRESS,
                 export_attributes: Sequence[str] = ("export",)):
        self.logger = logging.getLogger(__name__)
        self.strict = strict
        self.objects = tuple(objects)
        self.errors: List[RpslBgpError] = []

        self._sets: Dict[str, RouteSet] = {}
        self._routes: List[RouteObject] = []
        self._routes_by_prefix: Dict[str, List[RouteObject]] = {}
        self._routes_by_member_of: Dict[str, List[RouteObject]] = {}
        self._routes_by_origin: Dict[int, List[RouteObject]] = {}
        self._aut_nums: Dict[int, BGPAutNum] = {}

        aut_num_objects = self._index_objects()

        # aut-nums resolve their filters against the complete index
        for obj in aut_num_objects:
            try:
                aut_num = BGPAutNum(obj, self, wildcard_address, export_attributes)
            except ObjectParseError as e:
                self._record_error(e)
                continue
            if aut_num.aut_num in self._aut_nums:
                self.logger.warning(f"Duplicate aut-num AS{aut_num.aut_num}, keeping first")
                continue
            self._aut_nums[aut_num.aut_num] = aut_num

        self.logger.info(
            "Indexed document: "
            + ", ".join(f"{count} {name}" for name, count in self.statistics().items())
        )

    @classmethod
    @_timed.time_operation("RPSL document parsing")
    def parse(cls, source: Union[str, TextIO, Iterable[str]], strict: bool = False,
              excerpt_lines: int = 3, **kwargs) -> 'RpslDocument':
        """
        Read RPSL text and index it.

        Unparseable objects are skipped (or, in strict mode, raised) and
        reported in the document's `errors`.
        """
        reader = RpslObjectReader(excerpt_lines=excerpt_lines)
        objects = reader.read_all(source)
        if strict and reader.skipped:
            raise reader.skipped[0]

        document = cls(objects, strict=strict, **kwargs)
        document.errors[:0] = reader.skipped
        return document

    @classmethod
    def from_config(cls, source, config) -> 'RpslDocument':
        """Parse source using the input and resolution sections of a config"""
        return cls.parse(
            source,
            strict=config.input.strict,
            excerpt_lines=config.input.excerpt_lines,
            wildcard_address=config.resolution.wildcard_peer_address,
            export_attributes=config.resolution.export_attributes,
        )

    def _record_error(self, error: ObjectParseError) -> None:
        if self.strict:
            raise error
        self.errors.append(error)
        self.logger.warning(f"Skipping object: {error.message}")

    def _index_objects(self) -> List[RpslObject]:
        aut_num_objects = []

        for obj in self.objects:
            try:
                if obj.type in ObjectType.SET_TYPES:
                    self._add_set(RouteSet.from_rpsl_object(obj))
                elif obj.type in ObjectType.ROUTE_TYPES:
                    self._add_route(route_object_from_rpsl(obj))
                elif obj.type == ObjectType.AUT_NUM:
                    aut_num_objects.append(obj)
            except ObjectParseError as e:
                self._record_error(e)

        return aut_num_objects

    def _add_set(self, route_set: RouteSet) -> None:
        if route_set.key in self._sets:
            self.logger.warning(f"Duplicate {route_set.set_type} {route_set.name}, keeping first")
            return
        self._sets[route_set.key] = route_set

    def _add_route(self, route: RouteObject) -> None:
        self._routes.append(route)
        self._routes_by_prefix.setdefault(str(route.prefix), []).append(route)
        if route.origin is not None:
            self._routes_by_origin.setdefault(route.origin, []).append(route)
        for set_name in route.member_of:
            self._routes_by_member_of.setdefault(set_name, []).append(route)

    # Lookups used by resolution

    def get_set(self, name: str) -> Optional[RouteSet]:
        return self._sets.get(name.upper())

    def routes_member_of(self, set_name: str) -> List[RouteObject]:
        return list(self._routes_by_member_of.get(set_name.upper(), ()))

    def routes_originated_by(self, as_number: int) -> List[RouteObject]:
        return list(self._routes_by_origin.get(as_number, ()))

    def all_routes(self) -> List[RouteObject]:
        return list(self._routes)

    # Public queries

    @property
    def route_sets(self) -> Mapping[str, RouteSet]:
        return MappingProxyType({k: s for k, s in self._sets.items()
                                 if s.set_type == ObjectType.ROUTE_SET})

    @property
    def as_sets(self) -> Mapping[str, RouteSet]:
        return MappingProxyType({k: s for k, s in self._sets.items()
                                 if s.set_type == ObjectType.AS_SET})

    @property
    def aut_nums(self) -> Mapping[int, BGPAutNum]:
        return MappingProxyType(self._aut_nums)

    def get_route_set(self, name: str) -> Optional[RouteSet]:
        """route-set or as-set by case-insensitive name"""
        return self.get_set(name)

    def get_routes(self, prefix: str) -> List[RouteObject]:
        """Route objects registered for a prefix"""
        parsed = AddressPrefixRange.try_parse(prefix)
        key = str(parsed) if parsed else prefix
        return list(self._routes_by_prefix.get(key, ()))

    def get_aut_num(self, as_number: int) -> Optional[BGPAutNum]:
        return self._aut_nums.get(as_number)

    def resolve(self, set_name: str) -> Set[RouteEntity]:
        """Resolve a set by name; unknown names resolve to the empty set"""
        return resolve_set(set_name, self, set())

    def statistics(self) -> Dict[str, int]:
        return {
            'route-sets': len(self.route_sets),
            'as-sets': len(self.as_sets),
            'routes': len(self._routes),
            'aut-nums': len(self._aut_nums),
            'errors': len(self.errors),
        }

    def __repr__(self) -> str:
        return f"RpslDocument({self.statistics()})"
