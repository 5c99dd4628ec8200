"""Jinja2 rendering for field widgets and option pages."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from .utils.paths import get_template_directory

if TYPE_CHECKING:
    from .config import HyperFieldsConfig
    from .field_registry.field import Field
    from .host.assets import AssetManager

logger = logging.getLogger(__name__)

FIELD_ASSET_HANDLE = "hyperfields-fields"


class TemplateLoader:
    """Resolves and renders the packaged (or overridden) templates."""

    def __init__(self, template_dir: Optional[Union[str, Path]] = None):
        self.directory = get_template_directory(template_dir)
        self.templates = Jinja2Templates(directory=str(self.directory))

    @property
    def env(self):
        return self.templates.env

    def render_field(self, field: "Field", args: Mapping[str, Any]) -> Markup:
        """Render one field widget from its argument map."""
        template = self.env.get_template(f"fields/{field.field_type.template}")
        return Markup(template.render(field=args))

    def render(self, name: str, context: Dict[str, Any]) -> str:
        return self.env.get_template(name).render(**context)

    def enqueue_assets(self, assets: "AssetManager", config: "HyperFieldsConfig") -> None:
        """Enqueue the stylesheet and script shared by every field widget."""
        assets.enqueue_style(FIELD_ASSET_HANDLE, config.asset_url("assets/css/hyperfields.css"), [], config.version)
        assets.enqueue_script(
            FIELD_ASSET_HANDLE,
            config.asset_url("assets/js/hyperfields.js"),
            [],
            config.version,
            True,
        )


_loader: Optional[TemplateLoader] = None


def get_template_loader() -> TemplateLoader:
    """Return the shared loader, honouring ``HYPERFIELDS_TEMPLATE_DIR``."""
    global _loader
    if _loader is None:
        _loader = TemplateLoader(os.environ.get("HYPERFIELDS_TEMPLATE_DIR"))
        logger.debug("Template loader using %s", _loader.directory)
    return _loader


def set_template_loader(loader: Optional[TemplateLoader]) -> None:
    """Replace the shared loader; ``None`` resets to the default on next use."""
    global _loader
    _loader = loader
