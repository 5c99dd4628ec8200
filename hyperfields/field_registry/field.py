"""Typed field descriptors."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from markupsafe import Markup

from ..template_loader import get_template_loader
from ..utils.sanitize import (
    is_blank,
    kses_post,
    sanitize_checkbox,
    sanitize_email,
    sanitize_hex_color,
    sanitize_number,
    sanitize_text_field,
    sanitize_text_list,
    sanitize_textarea_field,
    sanitize_url,
)
from .types import FieldContext, FieldType, InvalidArgument, StorageType

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

_SANITIZERS: Dict[FieldType, Callable[[Any], Any]] = {
    FieldType.TEXT: sanitize_text_field,
    FieldType.PASSWORD: sanitize_text_field,
    FieldType.HIDDEN: sanitize_text_field,
    FieldType.DATE: sanitize_text_field,
    FieldType.DATETIME: sanitize_text_field,
    FieldType.TIME: sanitize_text_field,
    FieldType.RADIO: sanitize_text_field,
    FieldType.SELECT: sanitize_text_field,
    FieldType.TEXTAREA: sanitize_textarea_field,
    FieldType.EMAIL: sanitize_email,
    FieldType.URL: sanitize_url,
    FieldType.IMAGE: sanitize_url,
    FieldType.FILE: sanitize_url,
    FieldType.NUMBER: sanitize_number,
    FieldType.COLOR: sanitize_hex_color,
    FieldType.CHECKBOX: sanitize_checkbox,
}

_UNSET = object()


def _coerce_options(options: Union[Mapping[Any, Any], List[Any], None]) -> Dict[str, Any]:
    if not options:
        return {}
    if isinstance(options, Mapping):
        return {str(value): label for value, label in options.items()}
    coerced: Dict[str, Any] = {}
    for entry in options:
        if isinstance(entry, (list, tuple)) and len(entry) == 2:
            coerced[str(entry[0])] = entry[1]
        else:
            coerced[str(entry)] = entry
    return coerced


class Field:
    """A named, typed value descriptor.

    Fields are built with :meth:`make` and configured through fluent setters
    that return the same instance. The type and name are fixed once the field
    exists; everything else can change until the field is rendered.
    """

    def __init__(self, field_type: FieldType, name: str, label: str = ""):
        self._type = field_type
        self._name = name
        self._label = label
        self._default: Any = None
        self._placeholder: Optional[str] = None
        self._help: Optional[str] = None
        self._html: Optional[str] = None
        self._required = False
        self._context = FieldContext.POST.value
        self._storage_type = StorageType.META.value
        self._options: Dict[str, Any] = {}
        self._multiple = False
        self._validation: Dict[str, Any] = {}
        self._conditional_logic: Dict[str, Any] = {}
        # Optional attributes in the order they were first assigned.
        self._assigned: List[str] = []

    @classmethod
    def make(cls, field_type: Union[str, FieldType], name: str, label: str = "") -> "Field":
        """Create a field, rejecting unknown types and malformed names.

        Raises:
            InvalidArgument: ``field_type`` is not a :class:`FieldType` value or
                ``name`` does not start with a letter followed by letters,
                digits or underscores.
        """
        try:
            kind = field_type if isinstance(field_type, FieldType) else FieldType(field_type)
        except ValueError:
            raise InvalidArgument(f"Invalid field type: {field_type}") from None

        if not isinstance(name, str) or not _NAME_PATTERN.match(name):
            raise InvalidArgument(f"Invalid field name: {name}")

        return cls(kind, name, label)

    def __repr__(self) -> str:
        return f"Field(type={self._type.value!r}, name={self._name!r})"

    def _assign(self, attribute: str, value: Any) -> "Field":
        setattr(self, f"_{attribute}", value)
        if attribute not in self._assigned:
            self._assigned.append(attribute)
        return self

    # Identity

    @property
    def type(self) -> str:
        return self._type.value

    @property
    def field_type(self) -> FieldType:
        return self._type

    @property
    def name(self) -> str:
        return self._name

    @property
    def label(self) -> str:
        return self._label

    # Fluent setters

    def set_label(self, label: str) -> "Field":
        self._label = label
        return self

    def set_default(self, default: Any) -> "Field":
        return self._assign("default", default)

    def set_placeholder(self, placeholder: str) -> "Field":
        return self._assign("placeholder", placeholder)

    def set_required(self, required: bool = True) -> "Field":
        return self._assign("required", bool(required))

    def set_help(self, help_text: str) -> "Field":
        return self._assign("help", help_text)

    def set_html(self, html: str) -> "Field":
        return self._assign("html", html)

    def set_html_content(self, html: str) -> "Field":
        """Alias of :meth:`set_html`."""
        return self.set_html(html)

    def set_context(self, context: Union[str, FieldContext]) -> "Field":
        if isinstance(context, FieldContext):
            context = context.value
        return self._assign("context", context)

    def set_storage_type(self, storage_type: Union[str, StorageType]) -> "Field":
        if isinstance(storage_type, StorageType):
            storage_type = storage_type.value
        return self._assign("storage_type", storage_type)

    def set_options(self, options: Union[Mapping[Any, Any], List[Any]]) -> "Field":
        return self._assign("options", _coerce_options(options))

    def set_multiple(self, multiple: bool = True) -> "Field":
        return self._assign("multiple", bool(multiple))

    def set_validation(self, rules: Mapping[str, Any]) -> "Field":
        return self._assign("validation", dict(rules))

    def set_conditional_logic(self, logic: Mapping[str, Any]) -> "Field":
        return self._assign("conditional_logic", dict(logic))

    # Accessors

    @property
    def default(self) -> Any:
        return self._default

    @property
    def placeholder(self) -> Optional[str]:
        return self._placeholder

    @property
    def required(self) -> bool:
        return self._required

    def is_required(self) -> bool:
        return self._required

    @property
    def help(self) -> Optional[str]:
        return self._help

    @property
    def html(self) -> Optional[str]:
        return self._html

    @property
    def context(self) -> str:
        return self._context

    @property
    def storage_type(self) -> str:
        return self._storage_type

    @property
    def options(self) -> Dict[str, Any]:
        return dict(self._options)

    @property
    def multiple(self) -> bool:
        return self._multiple

    def is_multiple(self) -> bool:
        return self._multiple

    @property
    def validation(self) -> Dict[str, Any]:
        return dict(self._validation)

    @property
    def conditional_logic(self) -> Dict[str, Any]:
        return dict(self._conditional_logic)

    # Behaviour

    def sanitize_value(self, raw: Any) -> Any:
        """Clean a submitted value according to the field type."""
        if self._type is FieldType.CHECKBOX:
            return sanitize_checkbox(raw)
        if self._type is FieldType.MULTISELECT or (self._multiple and isinstance(raw, (list, tuple))):
            return sanitize_text_list(raw)
        sanitizer = _SANITIZERS.get(self._type, kses_post)
        return sanitizer(raw)

    def validate_value(self, value: Any) -> bool:
        """Required fields reject blank values; everything else passes."""
        if self._required and is_blank(value):
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the field to ``type``/``name``/``label`` plus assigned attributes."""
        data: Dict[str, Any] = {"type": self.type, "name": self._name, "label": self._label}
        for attribute in self._assigned:
            data[attribute] = getattr(self, attribute)
        return data

    def get_args(self, option_name: Optional[str] = None, value: Any = _UNSET) -> Dict[str, Any]:
        """Arguments handed to the widget template and to settings registration.

        ``value`` falls back to the field default when omitted or ``None``.
        """
        name_attr = f"{option_name}[{self._name}]" if option_name else self._name
        if self._type is FieldType.MULTISELECT or self._multiple:
            name_attr = f"{name_attr}[]"

        resolved = self._default if value is _UNSET or value is None else value

        args = {
            "placeholder": self._placeholder or "",
            "help": self._help or "",
            "html": self._html or "",
            "required": self._required,
            "options": dict(self._options),
            "multiple": self._multiple or self._type is FieldType.MULTISELECT,
            "validation": dict(self._validation),
            "conditional_logic": dict(self._conditional_logic),
        }
        args.update(self.to_dict())
        args.update(
            {
                "id": f"{option_name}_{self._name}" if option_name else self._name,
                "name_attr": name_attr,
                "value": resolved,
                "option_name": option_name,
                "input_type": self._type.input_type,
            }
        )
        return args

    def render(self, args: Optional[Mapping[str, Any]] = None) -> Markup:
        """Render the widget markup for this field."""
        return get_template_loader().render_field(self, dict(args) if args is not None else self.get_args())
