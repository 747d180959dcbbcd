"""Mapper - Keyed stores, word forms, and bidirectional relations.

Exports:
- KeyedStore: Ordered id -> entity container
- Entity: Base class with declared properties
- Property, BelongsTo, HasMany: Attribute and relation declarations
- singular, plural, type_key: Word-form helpers used to name relation methods
"""

from nexmap.mapper.framework import BelongsTo, Entity, HasMany, Property
from nexmap.mapper.inflection import plural, singular, type_key
from nexmap.mapper.repository import KeyedStore

__all__ = [
    "BelongsTo",
    "Entity",
    "HasMany",
    "KeyedStore",
    "Property",
    "plural",
    "singular",
    "type_key",
]
