"""
Export policy

Interprets aut-num export attributes into per-peer route tables.
"""

from .autnum import BGPAutNum
from .export import ExportParseResult, PeeringClause, parse_export, resolve_filter
from .route_table import RouteTable, peer_as_of, table_for_as, table_for_peer

__all__ = [
    'BGPAutNum',
    'ExportParseResult',
    'PeeringClause',
    'parse_export',
    'resolve_filter',
    'RouteTable',
    'peer_as_of',
    'table_for_as',
    'table_for_peer'
]
