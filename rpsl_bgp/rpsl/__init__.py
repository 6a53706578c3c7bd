"""
RPSL Reader

Parses RPSL text into immutable attribute/value objects and provides the
attribute value parsers used by policy resolution.
"""

from .attrs import AddressPrefixRange, parse_as_number, is_as_number
from .objects import ObjectType, RpslAttribute, RpslObject
from .parser import RpslObjectReader, parse_object, read_objects

__all__ = [
    'AddressPrefixRange',
    'parse_as_number',
    'is_as_number',
    'ObjectType',
    'RpslAttribute',
    'RpslObject',
    'RpslObjectReader',
    'parse_object',
    'read_objects'
]
