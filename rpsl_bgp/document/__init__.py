"""Policy Document Index"""

from rpsl_bgp.document.index import RpslDocument, route_object_from_rpsl

__all__ = ['RpslDocument', 'route_object_from_rpsl']
