"""
Juniper emitter - Renders export tables as policy-options prefix-lists

One prefix-list per (aut-num, peer) is generated, either as a hierarchical
policy-options block or as flat "set" commands. Range operators have no
prefix-list equivalent and are dropped; the list carries the base prefixes.
Each list is preceded by a comment naming the aut-num and its local routers.
"""

from typing import Dict, List

from rpsl_bgp.models import WILDCARD_PEER_ADDRESS, PeerKey
from rpsl_bgp.utils.error_handling import ValidationError


FORMAT_HIERARCHICAL = "hierarchical"
FORMAT_SET = "set"
FORMATS = [FORMAT_HIERARCHICAL, FORMAT_SET]
DEFAULT_LIST_PREFIX = "AS"


def prefix_list_name(local_as: int, peer: PeerKey, list_prefix: str = DEFAULT_LIST_PREFIX) -> str:
    """AS<local>-TO-AS<peer>, suffixed with the peer address unless it is the wildcard"""
    name = f"{list_prefix}{local_as}-TO-AS{peer.peer_as}"
    if peer.peer_address != WILDCARD_PEER_ADDRESS:
        name = f"{name}-{peer.peer_address}"
    return name


def _prefix_lists(document, list_prefix: str) -> List[dict]:
    lists = []
    for asn in sorted(document.aut_nums):
        aut_num = document.aut_nums[asn]
        for peer, routes in aut_num.peer_route_map.items():
            unique = {entity.prefix.network for entity in routes}
            lists.append({
                "aut_num": aut_num,
                "name": prefix_list_name(asn, peer, list_prefix),
                "local_routers": aut_num.peer_local_routers.get(peer, ()),
                "prefixes": [str(network) for network in
                             sorted(unique, key=lambda n: (n.version, n.network_address, n.prefixlen))],
            })
    return lists


def _comment(prefix_list: dict) -> str:
    """Aut-num of the list and the local routers it is exported from"""
    if prefix_list["local_routers"]:
        return f"{prefix_list['aut_num']} at {', '.join(prefix_list['local_routers'])}"
    return str(prefix_list["aut_num"])


def _hierarchical_format(prefix_lists: List[dict]) -> str:
    lines = ["policy-options {"]

    for prefix_list in prefix_lists:
        lines.extend([
            f"    /* {_comment(prefix_list)} */",
            f"    prefix-list {prefix_list['name']} {{",
            *[f"        {prefix};" for prefix in prefix_list["prefixes"]],
            "    }",
        ])

    lines.append("}")
    return "\n".join(lines) + "\n"


def _set_format(prefix_lists: List[dict]) -> str:
    lines = []

    for prefix_list in prefix_lists:
        lines.append(f"# {_comment(prefix_list)}")
        if not prefix_list["prefixes"]:
            # an empty list still has to exist for policies referring to it
            lines.append(f"set policy-options prefix-list {prefix_list['name']}")
        lines.extend(f"set policy-options prefix-list {prefix_list['name']} {prefix}"
                     for prefix in prefix_list["prefixes"])

    return "\n".join(lines) + "\n" if lines else ""


def render_juniper(document, arguments: Dict[str, str]) -> str:
    output_format = arguments.get("format", FORMAT_HIERARCHICAL).lower()
    if output_format not in FORMATS:
        raise ValidationError(
            f"Unknown juniper format {output_format!r}",
            "-m",
            f"Use one of: {', '.join(FORMATS)}",
        )

    prefix_lists = _prefix_lists(document, arguments.get("prefix", DEFAULT_LIST_PREFIX))

    if output_format == FORMAT_SET:
        return _set_format(prefix_lists)
    return _hierarchical_format(prefix_lists)
