"""
Emitter registry

Emitters form a closed set of variants selected by name. Each variant pairs
a render function with the arguments it understands; an Emitter value binds
a variant to the arguments it was configured with.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from rpsl_bgp.emitters.juniper import render_juniper
from rpsl_bgp.emitters.structured import render_json, render_yaml


logger = logging.getLogger(__name__)


class EmitterKind(Enum):
    NULL = "null"
    JSON = "json"
    YAML = "yaml"
    JUNIPER = "juniper"


@dataclass(frozen=True)
class EmitterVariant:
    """Render function of one emitter kind and the arguments it accepts"""
    render: Callable[..., str]
    valid_arguments: Dict[str, str] = field(default_factory=dict)
    description: str = ""


def render_null(document, arguments: Dict[str, str]) -> str:
    return ""


EMITTERS: Dict[EmitterKind, EmitterVariant] = {
    EmitterKind.NULL: EmitterVariant(
        render_null,
        description="Emits nothing",
    ),
    EmitterKind.JSON: EmitterVariant(
        render_json,
        {"indent": "Indentation width, 0 for compact output (default 2)"},
        "Resolved export tables as JSON",
    ),
    EmitterKind.YAML: EmitterVariant(
        render_yaml,
        {"indent": "Indentation width (default 2)"},
        "Resolved export tables as YAML",
    ),
    EmitterKind.JUNIPER: EmitterVariant(
        render_juniper,
        {
            "format": "hierarchical or set (default hierarchical)",
            "prefix": "Prefix-list name prefix (default AS)",
        },
        "Juniper policy-options prefix-lists per peer",
    ),
}

DEFAULT_EMITTER = EmitterKind.JSON.value
FALLBACK_EMITTER = EmitterKind.NULL


@dataclass
class Emitter:
    """An emitter variant configured with its arguments"""
    kind: EmitterKind
    arguments: Dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def valid_arguments(self) -> Dict[str, str]:
        return dict(EMITTERS[self.kind].valid_arguments)

    def emit(self, document) -> str:
        """Render a policy document in this emitter's format"""
        return EMITTERS[self.kind].render(document, self.arguments)


def list_emitters() -> List[str]:
    return [kind.value for kind in EmitterKind]


def get_emitter(name: Optional[str] = None, arguments: Optional[Dict[str, str]] = None) -> Emitter:
    """
    Select an emitter by name and bind its arguments.

    Unknown names fall back to the null emitter; arguments the variant does
    not declare are ignored. Both are logged as warnings.
    """
    name = (name or DEFAULT_EMITTER).lower()
    try:
        kind = EmitterKind(name)
    except ValueError:
        logger.warning(
            f"Unknown emitter {name!r}, falling back to {FALLBACK_EMITTER.value} "
            f"(available: {', '.join(list_emitters())})"
        )
        kind = FALLBACK_EMITTER

    valid = EMITTERS[kind].valid_arguments
    accepted = {}
    for key, value in (arguments or {}).items():
        if key in valid:
            accepted[key] = value
        else:
            logger.warning(f"Ignoring unknown argument {key!r} for emitter {kind.value}")

    return Emitter(kind, accepted)
