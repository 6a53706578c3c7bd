"""
RPSL BGP - routing policy resolution for RPSL aut-num export policies.

Turns a batch of RPSL policy objects into concrete BGP export route tables:
- RPSL object reading with per-object failure isolation
- Recursive route-set / as-set resolution with mbrs-by-ref back-references
- aut-num export policy interpretation into per-peer route tables
- Pluggable emitters (JSON, YAML, Juniper prefix-lists)
"""

__version__ = "0.4.0"
__author__ = "RPSL BGP Project"
