"""
Set resolution

Expands route-sets and as-sets into deduplicated route entities.
"""

from .route_set import MBRS_BY_REF_ANY, RouteSet, resolve_members, resolve_set

__all__ = ['MBRS_BY_REF_ANY', 'RouteSet', 'resolve_members', 'resolve_set']
