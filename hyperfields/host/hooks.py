"""Named lifecycle hooks."""

import logging
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)


class HookDispatcher:
    """Runs registered handlers for a hook name in priority order.

    Lower priorities run first; handlers sharing a priority run in the order
    they were added.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Tuple[int, int, Callable[..., Any]]]] = {}
        self._counter = 0

    def on(self, name: str, handler: Callable[..., Any], priority: int = 10) -> None:
        self._counter += 1
        self._handlers.setdefault(name, []).append((priority, self._counter, handler))

    def has(self, name: str) -> bool:
        return bool(self._handlers.get(name))

    def do(self, name: str, *args: Any) -> None:
        handlers = sorted(self._handlers.get(name, []), key=lambda entry: (entry[0], entry[1]))
        logger.debug("Running hook '%s' (%d handlers)", name, len(handlers))
        for _, _, handler in handlers:
            handler(*args)
