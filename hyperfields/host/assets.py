"""Script and stylesheet queue for admin screens."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import urlencode

from markupsafe import Markup, escape


@dataclass
class Asset:
    handle: str
    src: str
    deps: List[str] = field(default_factory=list)
    version: Optional[str] = None
    in_footer: bool = False
    localized: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def url(self) -> str:
        if not self.version:
            return self.src
        separator = "&" if "?" in self.src else "?"
        return f"{self.src}{separator}{urlencode({'ver': self.version})}"


class AssetManager:
    """Collects enqueued assets for the current screen and renders their tags.

    Enqueuing a handle twice keeps the first registration.
    """

    def __init__(self):
        self._scripts: Dict[str, Asset] = {}
        self._styles: Dict[str, Asset] = {}

    def enqueue_script(
        self,
        handle: str,
        src: str,
        deps: Sequence[str] = (),
        version: Optional[str] = None,
        in_footer: bool = False,
    ) -> None:
        self._scripts.setdefault(handle, Asset(handle, src, list(deps), version, in_footer))

    def enqueue_style(self, handle: str, src: str, deps: Sequence[str] = (), version: Optional[str] = None) -> None:
        self._styles.setdefault(handle, Asset(handle, src, list(deps), version))

    def localize(self, handle: str, object_name: str, data: Mapping[str, Any]) -> None:
        """Expose ``data`` to the script ``handle`` as ``window.<object_name>``.

        Raises:
            KeyError: ``handle`` has not been enqueued.
        """
        self._scripts[handle].localized[object_name] = dict(data)

    def scripts(self) -> List[Asset]:
        return list(self._scripts.values())

    def styles(self) -> List[Asset]:
        return list(self._styles.values())

    def reset(self) -> None:
        self._scripts.clear()
        self._styles.clear()

    def _script_tags(self, asset: Asset) -> List[str]:
        tags = []
        for object_name, data in asset.localized.items():
            payload = json.dumps(data).replace("</", "<\\/")
            tags.append(f"<script>window.{object_name} = {payload};</script>")
        tags.append(f'<script id="{escape(asset.handle)}-js" src="{escape(asset.url)}"></script>')
        return tags

    def render_tags(self) -> Dict[str, Markup]:
        """Markup for the document head and for the end of the body."""
        head: List[str] = [
            f'<link rel="stylesheet" id="{escape(style.handle)}-css" href="{escape(style.url)}">' for style in self._styles.values()
        ]
        footer: List[str] = []
        for script in self._scripts.values():
            (footer if script.in_footer else head).extend(self._script_tags(script))
        return {"head": Markup("\n".join(head)), "footer": Markup("\n".join(footer))}
