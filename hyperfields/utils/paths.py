"""Path utilities for HyperFields."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def get_package_root() -> Path:
    """Return the directory of the installed ``hyperfields`` package."""
    import hyperfields

    return Path(hyperfields.__file__).parent


def get_template_directory(override: Optional[Union[str, Path]] = None) -> Path:
    """Get the template directory.

    Args:
        override: Optional directory that replaces the packaged templates.
            Relative paths are resolved against the working directory; a
            missing directory falls back to the packaged templates.

    Returns:
        Path to the templates directory
    """
    if override:
        candidate = Path(override).expanduser()
        if not candidate.is_absolute():
            candidate = Path.cwd() / candidate
        if candidate.exists():
            return candidate
        logger.warning("Configured template directory '%s' not found; falling back to package templates", candidate)

    return get_package_root() / "templates"


def get_static_directory() -> Path:
    """Get the static files directory.

    Returns:
        Path to the static directory shipped inside the package
    """
    return get_package_root() / "static"
