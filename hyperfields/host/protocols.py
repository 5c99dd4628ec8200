"""Interfaces the options layer expects from its host.

The in-process implementations in this package satisfy them; an embedding
application can provide its own.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class OptionStoreProtocol(Protocol):
    """Aggregate option persistence keyed by option name."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


@runtime_checkable
class HookDispatcherProtocol(Protocol):
    def on(self, name: str, handler: Callable[..., Any], priority: int = 10) -> None: ...

    def do(self, name: str, *args: Any) -> None: ...

    def has(self, name: str) -> bool: ...


@runtime_checkable
class AdminMenuProtocol(Protocol):
    def add_top_level(
        self,
        page_title: str,
        menu_title: str,
        capability: str,
        slug: str,
        callback: Callable[..., str],
        icon_url: str = "",
        position: Optional[int] = None,
    ) -> str: ...

    def add_submenu(
        self,
        parent_slug: str,
        page_title: str,
        menu_title: str,
        capability: str,
        slug: str,
        callback: Callable[..., str],
        position: Optional[int] = None,
    ) -> str: ...

    def get(self, slug: str) -> Any: ...

    def entries(self) -> List[Any]: ...


@runtime_checkable
class SettingsRegistryProtocol(Protocol):
    def register(self, group: str, option_name: str, args: Optional[Mapping[str, Any]] = None) -> None: ...

    def add_section(self, section_id: str, title: str, callback: Optional[Callable[..., Any]], page: str) -> None: ...

    def add_field(
        self,
        field_id: str,
        title: str,
        callback: Callable[..., Any],
        page: str,
        section_id: str,
        args: Optional[Dict[str, Any]] = None,
    ) -> None: ...

    def get_setting(self, option_name: str) -> Any: ...

    def save(self, option_name: str, raw_input: Optional[Mapping[str, Any]]) -> Dict[str, Any]: ...


@runtime_checkable
class AssetManagerProtocol(Protocol):
    def enqueue_script(
        self,
        handle: str,
        src: str,
        deps: Sequence[str] = (),
        version: Optional[str] = None,
        in_footer: bool = False,
    ) -> None: ...

    def enqueue_style(self, handle: str, src: str, deps: Sequence[str] = (), version: Optional[str] = None) -> None: ...

    def localize(self, handle: str, object_name: str, data: Mapping[str, Any]) -> None: ...

    def reset(self) -> None: ...

    def render_tags(self) -> Dict[str, Any]: ...


@runtime_checkable
class NonceProtocol(Protocol):
    def create(self, action: str) -> str: ...

    def verify(self, token: Optional[str], action: str) -> bool: ...


__all__: List[str] = [
    "AdminMenuProtocol",
    "AssetManagerProtocol",
    "HookDispatcherProtocol",
    "NonceProtocol",
    "OptionStoreProtocol",
    "SettingsRegistryProtocol",
]
