"""
Export Policy Interpreter

Reads the peering specifications of an aut-num export attribute:

    export: to AS2 1.1.1.1 2.2.2.2 at 3.3.3.3 announce AS-FOO

becomes two peering descriptors ((AS2, 1.1.1.1), 3.3.3.3) and
((AS2, 2.2.2.2), 3.3.3.3) sharing the route filter "AS-FOO".

Malformed peerings are skipped with a diagnostic; the scan then continues
with the next "to" token of the same attribute.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from rpsl_bgp.models import (
    WILDCARD_PEER_ADDRESS, Diagnostic, PeerKey, PeeringDescriptor, RouteEntity
)
from rpsl_bgp.resolvers.route_set import resolve_members
from rpsl_bgp.rpsl.attrs import parse_as_number
from rpsl_bgp.rpsl.objects import RpslAttribute
from rpsl_bgp.utils.error_handling import AttributeParseError, ErrorSeverity


logger = logging.getLogger(__name__)

FILTER_ANY = "ANY"
FILTER_UNION_OPERATORS = frozenset(["OR"])
FILTER_UNSUPPORTED_OPERATORS = frozenset(["AND", "NOT", "EXCEPT", "REFINE"])


@dataclass
class PeeringClause:
    """One "to ... at ..." peering and the filter announced to it"""
    peerings: List[PeeringDescriptor]
    filter_terms: Optional[List[str]] = None


@dataclass
class ExportParseResult:
    """Peering clauses of one attribute plus the diagnostics raised reading it"""
    clauses: List[PeeringClause] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def peerings(self) -> List[PeeringDescriptor]:
        return [peering for clause in self.clauses for peering in clause.peerings]


def _diagnostic(result: ExportParseResult, message: str, attr: RpslAttribute) -> None:
    diagnostic = Diagnostic(ErrorSeverity.WARNING, message, str(attr))
    result.diagnostics.append(diagnostic)
    logger.warning(str(diagnostic))


def parse_export(attr: RpslAttribute,
                 wildcard_address: str = WILDCARD_PEER_ADDRESS) -> ExportParseResult:
    """
    Extract the peering clauses of an export attribute.

    Args:
        attr: export attribute
        wildcard_address: peer address used when a clause names only the AS

    Returns:
        ExportParseResult with the valid clauses and any diagnostics
    """
    result = ExportParseResult()
    tokens = attr.token_list()

    for i, (keyword, values) in enumerate(tokens):
        if keyword != "to":
            continue

        # A valid peering is followed by "at" with exactly one local router
        if (i + 1 >= len(tokens)
                or tokens[i + 1][0] != "at"
                or len(tokens[i + 1][1]) != 1):
            _diagnostic(result, "Malformed peering specification", attr)
            continue

        if not values:
            _diagnostic(result, "Missing peering specification", attr)
            continue

        try:
            peer_as = parse_as_number(values[0])
        except AttributeParseError as e:
            _diagnostic(result, e.message, attr)
            continue

        local_router = tokens[i + 1][1][0]

        if len(values) < 2:
            peerings = [PeeringDescriptor(PeerKey(peer_as, wildcard_address), local_router)]
        else:
            peerings = [PeeringDescriptor(PeerKey(peer_as, address), local_router)
                        for address in values[1:]]

        filter_terms = _find_filter(tokens, i)
        if filter_terms is None:
            _diagnostic(result, f"No announce filter for peering with AS{peer_as}", attr)

        result.clauses.append(PeeringClause(peerings, filter_terms))

    return result


def _find_filter(tokens: List[Tuple[str, List[str]]], start: int) -> Optional[List[str]]:
    """Values of the first "announce" token after position start"""
    for keyword, values in tokens[start + 1:]:
        if keyword == "announce":
            return values
    return None


def resolve_filter(filter_terms: Optional[List[str]], document,
                   attr: Optional[RpslAttribute] = None,
                   diagnostics: Optional[List[Diagnostic]] = None) -> Set[RouteEntity]:
    """
    Resolve a route filter expression into route entities.

    Terms are unioned: prefixes stand for themselves, AS numbers for the
    prefixes they originate, set names are resolved recursively and ANY
    matches every route object. Filters using operators other than OR are
    not supported and announce nothing.
    """
    if not filter_terms:
        return set()

    terms = []
    for raw_term in filter_terms:
        term = raw_term.strip("(){},;")
        if not term:
            continue
        upper = term.upper()
        if upper in FILTER_UNSUPPORTED_OPERATORS:
            diagnostic = Diagnostic(ErrorSeverity.WARNING,
                                    f"Unsupported filter operator {upper}",
                                    str(attr) if attr else None)
            logger.warning(str(diagnostic))
            if diagnostics is not None:
                diagnostics.append(diagnostic)
            return set()
        if upper in FILTER_UNION_OPERATORS:
            continue
        terms.append(term)

    routes = set()
    if any(term.upper() == FILTER_ANY for term in terms):
        routes.update(RouteEntity(route.prefix) for route in document.all_routes())
        terms = [term for term in terms if term.upper() != FILTER_ANY]

    routes.update(resolve_members(terms, document, set()))
    return routes
