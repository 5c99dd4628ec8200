"""In-process host services that options pages plug into."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..config import HyperFieldsConfig, load_config
from .assets import Asset, AssetManager
from .hooks import HookDispatcher
from .menu import AdminMenu, MenuEntry
from .nonce import NonceManager
from .protocols import (
    AdminMenuProtocol,
    AssetManagerProtocol,
    HookDispatcherProtocol,
    NonceProtocol,
    OptionStoreProtocol,
    SettingsRegistryProtocol,
)
from .settings import SettingsRegistry
from .store import JSONOptionStore, MemoryOptionStore

logger = logging.getLogger(__name__)


def _grant_all(capability: str) -> bool:
    return True


@dataclass
class HostServices:
    """Bundle of the store, hooks, menu, settings, assets and nonce services."""

    config: HyperFieldsConfig
    store: OptionStoreProtocol
    hooks: HookDispatcherProtocol = field(default_factory=HookDispatcher)
    menu: AdminMenuProtocol = field(default_factory=AdminMenu)
    settings: Optional[SettingsRegistryProtocol] = None
    assets: AssetManagerProtocol = field(default_factory=AssetManager)
    nonce: Optional[NonceProtocol] = None
    admin_url: str = "/admin/"
    options_endpoint: str = "/admin/options.php"
    capability_checker: Callable[[str], bool] = _grant_all
    _booted: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        if self.settings is None:
            self.settings = SettingsRegistry(self.store)
        if self.nonce is None:
            self.nonce = NonceManager(self.config.secret_key)

    @classmethod
    def from_config(cls, config: Optional[HyperFieldsConfig] = None) -> "HostServices":
        """Host persisting option records as JSON files under ``config.state_dir``."""
        config = config or load_config()
        return cls(config=config, store=JSONOptionStore(config.state_dir))

    @classmethod
    def in_memory(cls, config: Optional[HyperFieldsConfig] = None) -> "HostServices":
        return cls(config=config or HyperFieldsConfig(), store=MemoryOptionStore())

    def current_user_can(self, capability: str) -> bool:
        return bool(self.capability_checker(capability))

    def boot(self) -> None:
        """Fire ``admin_menu`` and ``admin_init`` once."""
        if self._booted:
            return
        self._booted = True
        self.hooks.do("admin_menu")
        self.hooks.do("admin_init")
        logger.debug("Host booted with %d menu pages", len(self.menu.entries()))


_default_host: Optional[HostServices] = None


def get_default_host() -> HostServices:
    """Return the process-wide host, building it from the environment on first use."""
    global _default_host
    if _default_host is None:
        _default_host = HostServices.from_config()
    return _default_host


def set_default_host(host: Optional[HostServices]) -> None:
    """Override the process-wide host; ``None`` resets it."""
    global _default_host
    _default_host = host


__all__ = [
    "AdminMenu",
    "AdminMenuProtocol",
    "Asset",
    "AssetManager",
    "AssetManagerProtocol",
    "HookDispatcher",
    "HookDispatcherProtocol",
    "HostServices",
    "JSONOptionStore",
    "MemoryOptionStore",
    "MenuEntry",
    "NonceManager",
    "NonceProtocol",
    "OptionStoreProtocol",
    "SettingsRegistry",
    "SettingsRegistryProtocol",
    "get_default_host",
    "set_default_host",
]
