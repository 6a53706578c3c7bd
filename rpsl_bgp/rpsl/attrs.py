"""
RPSL attribute value parsers

Parsers for the attribute values the policy engine depends on:
AS numbers, address prefix ranges, set names and list-valued attributes.
"""

import re
import ipaddress
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from rpsl_bgp.utils.error_handling import AttributeParseError


MAX_AS_NUMBER = 4294967295

_AS_PLAIN_PATTERN = re.compile(r'^AS(\d+)$', re.IGNORECASE)
_AS_DOT_PATTERN = re.compile(r'^AS(\d+)\.(\d+)$', re.IGNORECASE)
_RANGE_OPERATOR_PATTERN = re.compile(r'^\^(?:-|\+|(\d+)(?:-(\d+))?)$')
_LIST_SPLIT_PATTERN = re.compile(r'[,\s]+')


def parse_as_number(value: str) -> int:
    """
    Parse an RPSL AS number token ("AS65000" or asdot "AS1.10")

    Raises:
        AttributeParseError: token is not a valid 32-bit AS number
    """
    token = (value or "").strip()

    match = _AS_PLAIN_PATTERN.match(token)
    if match:
        as_num = int(match.group(1))
    else:
        match = _AS_DOT_PATTERN.match(token)
        if not match:
            raise AttributeParseError(f"Invalid AS number: '{token}'", token)
        high, low = int(match.group(1)), int(match.group(2))
        if high > 65535 or low > 65535:
            raise AttributeParseError(f"Invalid asdot AS number: '{token}'", token)
        as_num = (high << 16) | low

    if as_num > MAX_AS_NUMBER:
        raise AttributeParseError(f"AS number out of range: '{token}'", token)

    return as_num


def is_as_number(value: str) -> bool:
    """Check whether a token is an AS number without raising"""
    try:
        parse_as_number(value)
    except AttributeParseError:
        return False
    return True


def split_list_value(value: str) -> List[str]:
    """Split a comma/whitespace separated attribute value into tokens"""
    return [token for token in _LIST_SPLIT_PATTERN.split(value or "") if token]


def split_range_operator(token: str) -> Tuple[str, str]:
    """Split "RS-FOO^+" into ("RS-FOO", "^+"); operator is '' when absent"""
    base, sep, operator = token.partition("^")
    return base, (sep + operator) if sep else ""


@dataclass(frozen=True)
class AddressPrefixRange:
    """
    An IPv4/IPv6 prefix with an optional RPSL range operator

    Examples: "10.0.0.0/8", "10.0.0.0/8^+", "2001:db8::/32^48-64"
    """

    network: Union[ipaddress.IPv4Network, ipaddress.IPv6Network]
    operator: str = ""

    @classmethod
    def parse(cls, value: str) -> 'AddressPrefixRange':
        token = (value or "").strip()
        prefix, operator = split_range_operator(token)

        if "/" not in prefix:
            raise AttributeParseError(f"Prefix length missing: '{token}'", token)

        try:
            network = ipaddress.ip_network(prefix, strict=True)
        except ValueError as e:
            raise AttributeParseError(f"Invalid address prefix '{token}': {e}", token) from e

        if operator:
            cls._validate_operator(operator, network, token)

        return cls(network=network, operator=operator)

    @staticmethod
    def _validate_operator(operator: str, network, token: str) -> None:
        match = _RANGE_OPERATOR_PATTERN.match(operator)
        if not match:
            raise AttributeParseError(f"Invalid range operator in '{token}'", token)

        if match.group(1) is None:
            return

        low = int(match.group(1))
        high = int(match.group(2)) if match.group(2) else low
        if not (network.prefixlen <= low <= high <= network.max_prefixlen):
            raise AttributeParseError(f"Range operator out of bounds in '{token}'", token)

    @classmethod
    def try_parse(cls, value: str) -> Optional['AddressPrefixRange']:
        """Parse a prefix, returning None instead of raising"""
        try:
            return cls.parse(value)
        except AttributeParseError:
            return None

    def with_operator(self, operator: str) -> 'AddressPrefixRange':
        """Apply a set-level range operator if this prefix carries none of its own"""
        if self.operator or not operator:
            return self
        return AddressPrefixRange(network=self.network, operator=operator)

    @property
    def version(self) -> int:
        return self.network.version

    def sort_key(self):
        return (self.network.version, int(self.network.network_address),
                self.network.prefixlen, self.operator)

    def __str__(self) -> str:
        return f"{self.network.with_prefixlen}{self.operator}"
