"""Field registry package with shared types, the field model and the registry."""

from .field import Field
from .registry import Registry
from .types import FieldContext, FieldType, InvalidArgument, StorageType

__all__ = [
    "Field",
    "FieldContext",
    "FieldType",
    "InvalidArgument",
    "Registry",
    "StorageType",
]
