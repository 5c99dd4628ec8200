"""Request-scoped input for option pages.

Option pages read the submitted form and the query string of the request
being handled. The admin server binds a :class:`RequestInput` for the
duration of a request with :func:`bind_request`; library code reads it back
with :func:`current_request`. A context variable keeps concurrent requests
apart.
"""

from __future__ import annotations

import json
import logging
import re
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

ACTIVE_TAB_KEY = "hyperpress_active_tab"
COMPACT_INPUT_KEY = "hyperpress_compact_input"
TAB_QUERY_KEY = "tab"

_KEY_PART = re.compile(r"\[([^\]]*)\]")


@dataclass
class RequestInput:
    """Submitted form values (``post``) and query parameters (``query``)."""

    post: Dict[str, Any] = field(default_factory=dict)
    query: Dict[str, Any] = field(default_factory=dict)


_current: ContextVar[Optional[RequestInput]] = ContextVar("hyperfields_request", default=None)


def current_request() -> RequestInput:
    """The bound request, or an empty one outside a request."""
    bound = _current.get()
    return bound if bound is not None else RequestInput()


@contextmanager
def bind_request(request: RequestInput) -> Iterator[RequestInput]:
    token = _current.set(request)
    try:
        yield request
    finally:
        _current.reset(token)


def _split_name(name: str) -> List[str]:
    head, bracket, _ = name.partition("[")
    if not bracket:
        return [name]
    return [head] + _KEY_PART.findall(name[len(head) :])


def parse_form_items(items: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """Build nested maps from bracketed form names.

    ``opt[field]=v`` becomes ``{"opt": {"field": "v"}}`` and repeated
    ``opt[field][]`` entries collect into a list.
    """
    parsed: Dict[str, Any] = {}
    for name, value in items:
        parts = _split_name(name)
        target = parsed
        for index, part in enumerate(parts):
            last = index == len(parts) - 1
            next_is_list = not last and parts[index + 1] == "" and index + 1 == len(parts) - 1
            if last:
                target[part] = value
            elif next_is_list:
                existing = target.get(part)
                if not isinstance(existing, list):
                    existing = []
                    target[part] = existing
                existing.append(value)
                break
            else:
                existing = target.get(part)
                if not isinstance(existing, dict):
                    existing = {}
                    target[part] = existing
                target = existing
    return parsed


def normalize_input(
    raw: Optional[Mapping[str, Any]],
    request: RequestInput,
    option_name: str,
    compact_enabled: bool,
) -> Dict[str, Any]:
    """Produce the canonical input map that sanitization reads from.

    In compact mode a JSON blob posted under ``hyperpress_compact_input``
    carries every value; its ``option_name`` sub-map replaces ``raw``. A blob
    that cannot be decoded is logged and ``raw`` is used instead.
    """
    plain = dict(raw) if isinstance(raw, Mapping) else {}
    if not compact_enabled:
        return plain

    blob = request.post.get(COMPACT_INPUT_KEY)
    if blob in (None, ""):
        return plain

    if isinstance(blob, (bytes, bytearray)):
        blob = blob.decode("utf-8", errors="replace")
    if isinstance(blob, str):
        try:
            decoded = json.loads(blob)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring undecodable compact input for '%s': %s", option_name, exc)
            return plain
    else:
        decoded = blob

    if not isinstance(decoded, Mapping):
        logger.warning("Compact input for '%s' is not an object", option_name)
        return plain

    scoped = decoded.get(option_name)
    if not isinstance(scoped, Mapping):
        logger.debug("Compact input has no '%s' entry", option_name)
        return {}
    return dict(scoped)
