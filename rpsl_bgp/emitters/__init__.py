"""Output emitters rendering resolved policy documents"""

from rpsl_bgp.emitters.registry import (
    DEFAULT_EMITTER, EMITTERS, Emitter, EmitterKind, EmitterVariant,
    get_emitter, list_emitters
)
from rpsl_bgp.emitters.structured import document_to_dict
from rpsl_bgp.emitters.juniper import prefix_list_name

__all__ = [
    'DEFAULT_EMITTER', 'EMITTERS', 'Emitter', 'EmitterKind', 'EmitterVariant',
    'get_emitter', 'list_emitters', 'document_to_dict', 'prefix_list_name',
]
