"""Shared enums and errors for fields."""

from enum import Enum
from typing import Dict


class InvalidArgument(ValueError):
    """Raised when a field is declared with an unknown type or a malformed name."""


class FieldType(Enum):
    """Field kinds that can be declared and rendered."""

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    URL = "url"
    NUMBER = "number"
    PASSWORD = "password"
    HIDDEN = "hidden"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    MULTISELECT = "multiselect"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    COLOR = "color"
    IMAGE = "image"
    FILE = "file"
    WYSIWYG = "wysiwyg"
    CODE = "code"
    HTML = "html"
    CUSTOM = "custom"
    HEADING = "heading"
    SEPARATOR = "separator"

    @classmethod
    def values(cls):
        return [member.value for member in cls]

    @property
    def template(self) -> str:
        """Template (under ``fields/``) used to render this kind."""
        return _TEMPLATES.get(self, "input.html")

    @property
    def input_type(self) -> str:
        """``type`` attribute for kinds rendered as a plain ``<input>``."""
        return _INPUT_TYPES.get(self, "text")


class FieldContext(Enum):
    """Entity kind a field attaches to outside an options page."""

    POST = "post"
    TERM = "term"
    USER = "user"
    OPTION = "option"


class StorageType(Enum):
    """Where a field value is persisted."""

    META = "meta"
    OPTION = "option"


_TEMPLATES: Dict[FieldType, str] = {
    FieldType.TEXTAREA: "textarea.html",
    FieldType.WYSIWYG: "textarea.html",
    FieldType.CODE: "textarea.html",
    FieldType.CHECKBOX: "checkbox.html",
    FieldType.RADIO: "radio.html",
    FieldType.SELECT: "select.html",
    FieldType.MULTISELECT: "select.html",
    FieldType.HTML: "html.html",
    FieldType.CUSTOM: "html.html",
    FieldType.HEADING: "heading.html",
    FieldType.SEPARATOR: "separator.html",
}

_INPUT_TYPES: Dict[FieldType, str] = {
    FieldType.EMAIL: "email",
    FieldType.URL: "url",
    FieldType.NUMBER: "number",
    FieldType.PASSWORD: "password",
    FieldType.HIDDEN: "hidden",
    FieldType.DATE: "date",
    FieldType.DATETIME: "datetime-local",
    FieldType.TIME: "time",
    FieldType.COLOR: "color",
    FieldType.IMAGE: "url",
    FieldType.FILE: "url",
}
