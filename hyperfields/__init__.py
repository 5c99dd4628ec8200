"""HyperFields - declarative option pages and fields for admin panels."""

from __future__ import annotations

__version__ = "2.0.7"

from hyperfields.field_registry import Field, FieldType, InvalidArgument, Registry
from hyperfields.options import OptionsPage, OptionsSection

__all__ = [
    "Field",
    "FieldType",
    "InvalidArgument",
    "OptionsPage",
    "OptionsSection",
    "Registry",
    "__version__",
]
