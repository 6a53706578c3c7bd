"""
Structured emitters - JSON and YAML dumps of the resolved export tables
"""

import json
from typing import Dict

import yaml

from rpsl_bgp.utils.error_handling import ValidationError


def document_to_dict(document) -> Dict[int, dict]:
    """
    Resolved export tables of every aut-num, keyed by AS number.

    {asn: {name, peers: [{peer_as, peer_address, local_routers, routes}], diagnostics}}
    """
    tables = {}
    for asn in sorted(document.aut_nums):
        data = document.aut_nums[asn].to_dict()
        del data['aut_num']
        tables[asn] = data
    return tables


def _int_argument(arguments: Dict[str, str], name: str, default: int) -> int:
    value = arguments.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Emitter argument {name} must be an integer, got {value!r}", "-m")


def render_json(document, arguments: Dict[str, str]) -> str:
    indent = _int_argument(arguments, "indent", 2)
    return json.dumps(document_to_dict(document), indent=indent if indent > 0 else None)


def render_yaml(document, arguments: Dict[str, str]) -> str:
    return yaml.safe_dump(
        document_to_dict(document),
        default_flow_style=False,
        sort_keys=False,
        indent=_int_argument(arguments, "indent", 2),
    )
