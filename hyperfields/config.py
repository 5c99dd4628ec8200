"""Environment-driven configuration for HyperFields."""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

_PLUGIN_URL_ENV = "HYPERFIELDS_PLUGIN_URL"
_VERSION_ENV = "HYPERFIELDS_VERSION"
_COMPACT_INPUT_ENV = "HYPERFIELDS_COMPACT_INPUT"
_STATE_DIR_ENV = "HYPERFIELDS_STATE_DIR"
_SECRET_KEY_ENV = "HYPERFIELDS_SECRET_KEY"
_LOG_LEVEL_ENV = "HYPERFIELDS_LOG_LEVEL"
_TEMPLATE_DIR_ENV = "HYPERFIELDS_TEMPLATE_DIR"

_TRUTHY = {"1", "true", "yes", "on"}

# Generated once so nonces stay valid for the lifetime of the process.
_PROCESS_SECRET = secrets.token_hex(32)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _default_state_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home())
    return Path(base).expanduser() / ".hyperfields" / "options"


@dataclass
class HyperFieldsConfig:
    """Resolved runtime configuration."""

    plugin_url: str = "/"
    version: str = "0.0.0"
    compact_input: bool = False
    state_dir: Path = field(default_factory=_default_state_dir)
    secret_key: str = _PROCESS_SECRET
    log_level: str = "INFO"
    template_dir: Optional[Path] = None

    def asset_url(self, relative: str) -> str:
        """Join ``relative`` onto the plugin URL."""
        base = self.plugin_url if self.plugin_url.endswith("/") else f"{self.plugin_url}/"
        return f"{base}{relative.lstrip('/')}"


def load_config() -> HyperFieldsConfig:
    """Build a configuration from ``HYPERFIELDS_*`` environment variables."""
    from hyperfields import __version__

    state_dir = os.environ.get(_STATE_DIR_ENV)
    template_dir = os.environ.get(_TEMPLATE_DIR_ENV)

    return HyperFieldsConfig(
        plugin_url=os.environ.get(_PLUGIN_URL_ENV, "/"),
        version=os.environ.get(_VERSION_ENV) or __version__,
        compact_input=_env_flag(_COMPACT_INPUT_ENV),
        state_dir=Path(state_dir).expanduser() if state_dir else _default_state_dir(),
        secret_key=os.environ.get(_SECRET_KEY_ENV) or _PROCESS_SECRET,
        log_level=str(os.environ.get(_LOG_LEVEL_ENV, "INFO")).upper(),
        template_dir=Path(template_dir).expanduser() if template_dir else None,
    )


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic handler for the ``hyperfields`` logger tree."""
    target = (level or os.environ.get(_LOG_LEVEL_ENV, "INFO")).upper()
    logging.basicConfig(
        level=logging._nameToLevel.get(target, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("hyperfields").setLevel(logging._nameToLevel.get(target, logging.INFO))
