"""Options page sections."""

from typing import Dict

from ..field_registry.field import Field


class OptionsSection:
    """An ordered group of fields shown under one tab of an options page."""

    def __init__(self, section_id: str, title: str, description: str = ""):
        self.id = section_id
        self.title = title
        self.description = description
        self.fields: Dict[str, Field] = {}

    def __repr__(self) -> str:
        return f"OptionsSection(id={self.id!r}, fields={list(self.fields)!r})"

    def add_field(self, field: Field) -> "OptionsSection":
        self.fields[field.name] = field
        return self

    def get_id(self) -> str:
        return self.id

    def get_title(self) -> str:
        return self.title

    def get_description(self) -> str:
        return self.description

    def get_fields(self) -> Dict[str, Field]:
        return dict(self.fields)
