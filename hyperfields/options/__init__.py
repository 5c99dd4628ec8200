"""Options pages, their sections and request input handling."""

from .page import MAIN_TAB, TOP_LEVEL, OptionsPage
from .request import RequestInput, bind_request, current_request, normalize_input, parse_form_items
from .section import OptionsSection

__all__ = [
    "MAIN_TAB",
    "OptionsPage",
    "OptionsSection",
    "RequestInput",
    "TOP_LEVEL",
    "bind_request",
    "current_request",
    "normalize_input",
    "parse_form_items",
]
