"""Admin menu entries."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# Screen prefixes for the stock admin parents; anything else uses its file name.
_PARENT_SCREEN_PREFIX = {
    "options-general.php": "settings",
    "index.php": "dashboard",
    "upload.php": "media",
    "edit-comments.php": "comments",
    "themes.php": "appearance",
    "plugins.php": "plugins",
    "users.php": "users",
    "tools.php": "tools",
    "edit.php": "posts",
}


def screen_id_for(slug: str, parent_slug: Optional[str] = None) -> str:
    """Screen identifier of the admin page ``slug``.

    ``toplevel_page_<slug>`` without a parent, ``settings_page_<slug>`` under
    ``options-general.php`` and ``<parent-base>_page_<slug>`` otherwise.
    """
    if parent_slug is None:
        return f"toplevel_page_{slug}"
    parent = parent_slug.split("?", 1)[0]
    prefix = _PARENT_SCREEN_PREFIX.get(parent)
    if prefix is None:
        prefix = parent.rsplit("/", 1)[-1]
        if prefix.endswith(".php"):
            prefix = prefix[: -len(".php")]
    return f"{prefix}_page_{slug}"


@dataclass
class MenuEntry:
    """One page reachable from the admin menu."""

    slug: str
    page_title: str
    menu_title: str
    capability: str
    callback: Callable[..., str]
    parent_slug: Optional[str] = None
    icon_url: str = ""
    position: Optional[int] = None

    @property
    def is_top_level(self) -> bool:
        return self.parent_slug is None

    @property
    def screen_id(self) -> str:
        return screen_id_for(self.slug, self.parent_slug)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("callback")
        data["top_level"] = self.is_top_level
        data["screen_id"] = self.screen_id
        return data


class AdminMenu:
    """Registry of top-level and submenu admin pages keyed by slug."""

    def __init__(self):
        self._entries: Dict[str, MenuEntry] = {}

    def add_top_level(
        self,
        page_title: str,
        menu_title: str,
        capability: str,
        slug: str,
        callback: Callable[..., str],
        icon_url: str = "",
        position: Optional[int] = None,
    ) -> str:
        self._entries[slug] = MenuEntry(slug, page_title, menu_title, capability, callback, None, icon_url, position)
        logger.debug("Added top-level menu page '%s'", slug)
        return slug

    def add_submenu(
        self,
        parent_slug: str,
        page_title: str,
        menu_title: str,
        capability: str,
        slug: str,
        callback: Callable[..., str],
        position: Optional[int] = None,
    ) -> str:
        self._entries[slug] = MenuEntry(slug, page_title, menu_title, capability, callback, parent_slug, "", position)
        logger.debug("Added submenu page '%s' under '%s'", slug, parent_slug)
        return slug

    def get(self, slug: str) -> Optional[MenuEntry]:
        return self._entries.get(slug)

    def entries(self) -> List[MenuEntry]:
        """Entries ordered by position (unpositioned last), then by insertion."""
        indexed = list(enumerate(self._entries.values()))
        indexed.sort(key=lambda item: (item[1].position is None, item[1].position or 0, item[0]))
        return [entry for _, entry in indexed]
