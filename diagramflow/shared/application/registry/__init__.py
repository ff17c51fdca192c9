"""
Shared registry module.

Generic keyed registry used for the component kind dispatch table and the
connector rule registry.
"""
from .keyed_registry import KeyedRegistry, EntryMetadata

__all__ = [
    'KeyedRegistry',
    'EntryMetadata',
]
