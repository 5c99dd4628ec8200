"""Sanitization filters for submitted field values.

This module provides the value filters used by fields:
- Plain text and multi-line text cleanup
- Email and URL filtering
- Safe HTML pass-through
- Checkbox, number and color normalisation

Every filter is a pure function and repeated application is stable.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Tags removed together with their content.
_STRIP_WITH_CONTENT = ("script", "style")

# Tags never allowed through the safe HTML filter.
_DISALLOWED_TAGS = ("script", "style", "iframe", "object", "embed", "form", "link", "meta", "base")

_URL_ATTRIBUTES = {"href", "src", "action", "formaction", "xlink:href", "poster", "background"}

ALLOWED_URL_SCHEMES = ("http", "https", "ftp", "ftps", "mailto", "news", "irc", "gopher", "nntp", "feed", "telnet", "tel", "sms")

_EMAIL_DISALLOWED = re.compile(r"[^A-Za-z0-9.!#$%&'*+\-=?^_`{|}~@\[\]]")
_URL_DISALLOWED = re.compile(r"[^A-Za-z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\u0080-\uffff]")
_HEX_COLOR = re.compile(r"^#(?:[A-Fa-f0-9]{3}){1,2}$")
_FALSY_STRINGS = {"", "0", "false", "off", "no"}


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return str(value).replace("\x00", "")


def _strip_markup(text: str) -> str:
    if "<" not in text and "&" not in text:
        return text
    soup = BeautifulSoup(text, "html.parser")
    for tag in soup(list(_STRIP_WITH_CONTENT)):
        tag.decompose()
    return soup.get_text()


def _collapse_whitespace(text: str, keep_newlines: bool) -> str:
    if not keep_newlines:
        return re.sub(r"\s+", " ", text).strip()
    lines = [re.sub(r"[ \t\f\v]+", " ", line).strip() for line in text.replace("\r\n", "\n").split("\n")]
    return "\n".join(lines).strip()


def _sanitize_text(value: Any, keep_newlines: bool) -> str:
    text = _to_text(value)
    # Decoded entities can reveal new tags; repeat until nothing changes.
    while True:
        cleaned = _collapse_whitespace(_strip_markup(text), keep_newlines)
        if cleaned == text:
            return text
        text = cleaned


def sanitize_text_field(value: Any) -> str:
    """Strip scripts, styles and tags, collapse whitespace and trim."""
    return _sanitize_text(value, keep_newlines=False)


def sanitize_textarea_field(value: Any) -> str:
    """Like :func:`sanitize_text_field` but keeps line breaks."""
    return _sanitize_text(value, keep_newlines=True)


def sanitize_email(value: Any) -> str:
    """Drop every character that cannot appear in an email address."""
    return _EMAIL_DISALLOWED.sub("", _to_text(value).strip())


def is_safe_url(url: str, allowed_schemes: Iterable[str] = ALLOWED_URL_SCHEMES) -> bool:
    """Check that ``url`` is relative or uses one of ``allowed_schemes``."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if not parsed.scheme:
        # A colon ahead of the first slash means a scheme urlparse could not read.
        head = url.split("/", 1)[0]
        return ":" not in head
    return parsed.scheme.lower() in set(allowed_schemes)


def sanitize_url(value: Any, allowed_schemes: Iterable[str] = ALLOWED_URL_SCHEMES) -> str:
    """Remove characters not valid in a URL and reject unsafe schemes."""
    url = _URL_DISALLOWED.sub("", _to_text(value).strip())
    if not url:
        return ""
    if not is_safe_url(url, allowed_schemes):
        logger.debug("Rejected URL with disallowed scheme: %r", url[:64])
        return ""
    return url


def kses_post(value: Any) -> Any:
    """Pass markup through with scripts, event handlers and unsafe URLs removed."""
    if not isinstance(value, str):
        return value
    value = value.replace("\x00", "")
    if "<" not in value:
        return value

    soup = BeautifulSoup(value, "html.parser")
    for tag in soup(list(_DISALLOWED_TAGS)):
        tag.decompose()

    for tag in soup.find_all(True):
        for attribute in list(tag.attrs):
            lowered = attribute.lower()
            if lowered.startswith("on"):
                del tag.attrs[attribute]
                continue
            if lowered in _URL_ATTRIBUTES:
                target = tag.attrs[attribute]
                if isinstance(target, list):
                    target = " ".join(target)
                if not is_safe_url(str(target).strip()):
                    del tag.attrs[attribute]
    return str(soup)


def sanitize_checkbox(value: Any) -> str:
    """Normalise a checkbox submission to ``"1"`` or ``"0"``."""
    if isinstance(value, str):
        return "0" if value.strip().lower() in _FALSY_STRINGS else "1"
    return "1" if value else "0"


def sanitize_number(value: Any) -> Any:
    """Return an int or float for numeric input, ``""`` otherwise."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return value if not (isinstance(value, float) and not math.isfinite(value)) else ""

    text = _to_text(value).strip()
    if not text:
        return ""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return ""
    return number if math.isfinite(number) else ""


def sanitize_hex_color(value: Any) -> str:
    """Return ``#rgb``/``#rrggbb`` colors unchanged and ``""`` for anything else."""
    text = _to_text(value).strip()
    return text if _HEX_COLOR.match(text) else ""


def sanitize_text_list(values: Any) -> list:
    """Text-sanitize each entry of a list submission, dropping empty entries."""
    if values is None:
        return []
    if not isinstance(values, (list, tuple, set)):
        values = [values]
    cleaned = []
    for item in values:
        text = sanitize_text_field(item)
        if text:
            cleaned.append(text)
    return cleaned


def is_blank(value: Optional[Any]) -> bool:
    """True for None, whitespace-only strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False
