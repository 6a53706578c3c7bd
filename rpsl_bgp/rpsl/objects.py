"""
RPSL object model

An RpslObject is an ordered, immutable list of attributes. The first
attribute names the object class; the key is derived per class.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from rpsl_bgp.rpsl.attrs import split_list_value
from rpsl_bgp.utils.error_handling import ObjectParseError


class ObjectType:
    """Object classes the policy engine understands"""
    AUT_NUM = "aut-num"
    ROUTE = "route"
    ROUTE6 = "route6"
    ROUTE_SET = "route-set"
    AS_SET = "as-set"

    ROUTE_TYPES = (ROUTE, ROUTE6)
    SET_TYPES = (ROUTE_SET, AS_SET)


# Key attributes per class; unknown classes are keyed by their first attribute
KEY_ATTRIBUTES = {
    ObjectType.ROUTE: ("route", "origin"),
    ObjectType.ROUTE6: ("route6", "origin"),
}


# Keywords of the peering/filter grammar used by export and import attributes
POLICY_KEYWORDS = frozenset([
    "to", "at", "announce", "action", "protocol", "into",
    "from", "accept", "afi", "except", "refine",
])

_POLICY_TOKEN_PATTERN = re.compile(r'[^\s{},;]+')


@dataclass(frozen=True)
class RpslAttribute:
    """A single "name: value" attribute"""
    name: str
    value: str

    @property
    def clean_value(self) -> str:
        """Value with comments removed and whitespace collapsed"""
        value = self.value.split("#", 1)[0]
        return " ".join(value.split())

    def list_values(self) -> List[str]:
        """Split a list-valued attribute into its tokens"""
        return split_list_value(self.clean_value)

    def token_list(self) -> List[Tuple[str, List[str]]]:
        """
        Tokenize a policy attribute into (keyword, values) pairs.

        "to AS2 1.1.1.1 at 3.3.3.3 announce AS-FOO" becomes
        [("to", ["AS2", "1.1.1.1"]), ("at", ["3.3.3.3"]), ("announce", ["AS-FOO"])].
        Tokens before the first keyword are dropped.
        """
        tokens = []
        for word in _POLICY_TOKEN_PATTERN.findall(self.clean_value):
            keyword = word.lower()
            if keyword in POLICY_KEYWORDS:
                tokens.append((keyword, []))
            elif tokens:
                tokens[-1][1].append(word)
        return tokens

    def __str__(self) -> str:
        return f"{self.name}: {self.clean_value}"


class RpslObject:
    """
    Immutable RPSL object.

    Raises ObjectParseError when the attribute list is empty or the key
    attributes of the object class are missing or empty.
    """

    def __init__(self, attributes: List[RpslAttribute]):
        if not attributes:
            raise ObjectParseError("Empty RPSL object")

        self._attributes = tuple(attributes)
        self.type = self._attributes[0].name
        self.key = self._build_key()

    def _build_key(self) -> str:
        key_names = KEY_ATTRIBUTES.get(self.type, (self.type,))
        parts = []
        for name in key_names:
            values = self.find_attributes(name)
            if len(values) != 1:
                raise ObjectParseError(
                    f"Expected exactly one '{name}' attribute in {self.type} object, "
                    f"found {len(values)}",
                    str(self)
                )
            value = values[0].clean_value
            if not value:
                raise ObjectParseError(f"Key attribute '{name}' has no value", str(self))
            parts.append(value)
        return "".join(parts)

    @property
    def attributes(self) -> Tuple[RpslAttribute, ...]:
        return self._attributes

    def find_attributes(self, name: str) -> List[RpslAttribute]:
        return [attr for attr in self._attributes if attr.name == name]

    def get_value(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Clean value of the first attribute with this name"""
        for attr in self._attributes:
            if attr.name == name:
                return attr.clean_value
        return default

    def get_list_values(self, name: str) -> List[str]:
        """All tokens of every attribute with this name, in order"""
        values = []
        for attr in self.find_attributes(name):
            values.extend(attr.list_values())
        return values

    def contains_attribute(self, name: str) -> bool:
        return any(attr.name == name for attr in self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if not isinstance(other, RpslObject):
            return NotImplemented
        return self._attributes == other._attributes

    def __hash__(self) -> int:
        return hash(self._attributes)

    def __repr__(self) -> str:
        return f"RpslObject([{self.type}] {self.key})"

    def __str__(self) -> str:
        return "\n".join(f"{attr.name}: {attr.value}" for attr in self._attributes)
