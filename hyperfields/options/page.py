"""Tabbed admin options pages backed by one aggregate option record."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional
from urllib.parse import urlencode

from ..field_registry.field import Field
from ..field_registry.registry import Registry
from ..field_registry.types import FieldType
from ..host.menu import screen_id_for
from ..template_loader import get_template_loader
from ..utils.sanitize import sanitize_text_field
from .request import ACTIVE_TAB_KEY, TAB_QUERY_KEY, RequestInput, current_request, normalize_input
from .section import OptionsSection

if TYPE_CHECKING:
    from ..config import HyperFieldsConfig
    from ..host import HostServices

logger = logging.getLogger(__name__)
logger.setLevel(logging._nameToLevel.get(str(os.environ.get("HYPERFIELDS_LOG_LEVEL", "INFO")).upper(), logging.INFO))

TOP_LEVEL = "menu"
MAIN_TAB = "main"
DEFAULT_PARENT_SLUG = "options-general.php"
DEFAULT_CAPABILITY = "manage_options"
DEFAULT_OPTION_NAME = "hyperpress_options"
ASSET_HANDLE = "hyperpress-admin-options"
LOCALIZE_OBJECT = "hyperpressOptions"

# Widgets that display content but never carry a value.
_DISPLAY_ONLY = {FieldType.HEADING, FieldType.SEPARATOR, FieldType.HTML}


class OptionsPage:
    """An admin settings page made of tabbed sections.

    Every field value of the page is stored as one record under
    :attr:`option_name`. Sections become tabs; fields attached with
    :meth:`add_field` (or registered in the :class:`Registry` under the
    page's ``menu_slug``) form the ``main`` tab.
    """

    def __init__(
        self,
        page_title: str,
        menu_slug: str,
        host: Optional["HostServices"] = None,
        registry: Optional[Registry] = None,
        config: Optional["HyperFieldsConfig"] = None,
    ):
        self.page_title = page_title
        self.menu_title = page_title
        self.menu_slug = menu_slug
        self.capability = DEFAULT_CAPABILITY
        self.parent_slug = DEFAULT_PARENT_SLUG
        self.icon_url = ""
        self.position: Optional[int] = None
        self.option_name = DEFAULT_OPTION_NAME
        self.footer_content = ""
        self.sections: Dict[str, OptionsSection] = {}
        self.fields: Dict[str, Field] = {}
        self.default_values: Dict[str, Any] = {}
        self.option_values: Dict[str, Any] = {}
        self._host = host
        self._registry = registry
        self._config = config
        self._registered = False

    @classmethod
    def make(
        cls,
        page_title: str,
        menu_slug: str,
        *,
        host: Optional["HostServices"] = None,
        registry: Optional[Registry] = None,
        config: Optional["HyperFieldsConfig"] = None,
    ) -> "OptionsPage":
        return cls(page_title, menu_slug, host=host, registry=registry, config=config)

    def __repr__(self) -> str:
        return f"OptionsPage(slug={self.menu_slug!r}, option_name={self.option_name!r})"

    # Collaborators

    @property
    def host(self) -> "HostServices":
        if self._host is None:
            from ..host import get_default_host

            return get_default_host()
        return self._host

    @property
    def registry(self) -> Registry:
        return self._registry if self._registry is not None else Registry.get_instance()

    @property
    def config(self) -> "HyperFieldsConfig":
        return self._config if self._config is not None else self.host.config

    # Building

    def add_section(self, section_id: str, title: str, description: str = "") -> OptionsSection:
        section = OptionsSection(section_id, title, description)
        self.sections[section_id] = section
        return section

    def add_section_object(self, section: OptionsSection) -> "OptionsPage":
        self.sections[section.get_id()] = section
        for name, field in section.get_fields().items():
            self.default_values[name] = field.default
        return self

    def add_field(self, field: Field) -> "OptionsPage":
        self.fields[field.name] = field
        self.default_values[field.name] = field.default
        return self

    def set_menu_title(self, menu_title: str) -> "OptionsPage":
        self.menu_title = menu_title
        return self

    def set_capability(self, capability: str) -> "OptionsPage":
        self.capability = capability
        return self

    def set_parent_slug(self, parent_slug: str) -> "OptionsPage":
        self.parent_slug = parent_slug
        return self

    def set_icon_url(self, icon_url: str) -> "OptionsPage":
        self.icon_url = icon_url
        return self

    def set_position(self, position: Optional[int]) -> "OptionsPage":
        self.position = position
        return self

    def set_option_name(self, option_name: str) -> "OptionsPage":
        self.option_name = option_name
        return self

    def set_footer_content(self, footer_content: str) -> "OptionsPage":
        self.footer_content = footer_content
        return self

    def get_option_name(self) -> str:
        return self.option_name

    # Field lookup

    def get_page_fields(self) -> Dict[str, Field]:
        """Fields of the ``main`` tab: registry fields for the slug, then direct fields."""
        fields = {field.name: field for field in self.registry.get_fields(self.menu_slug)}
        fields.update(self.fields)
        return fields

    def get_tab_fields(self, tab: str) -> Dict[str, Field]:
        if tab in self.sections:
            return self.sections[tab].get_fields()
        if tab == MAIN_TAB:
            return self.get_page_fields()
        return {}

    def _defaults(self) -> Dict[str, Any]:
        defaults = {field.name: field.default for field in self.registry.get_fields(self.menu_slug)}
        for section in self.sections.values():
            for name, field in section.get_fields().items():
                defaults.setdefault(name, field.default)
        defaults.update(self.default_values)
        return defaults

    # Host wiring

    def register(self) -> "OptionsPage":
        """Bind the page to the host's ``admin_menu``, ``admin_init`` and ``admin_enqueue_scripts`` hooks."""
        if self._registered:
            return self
        hooks = self.host.hooks
        hooks.on("admin_menu", self.add_menu_page)
        hooks.on("admin_init", self.register_settings)
        hooks.on("admin_enqueue_scripts", self.enqueue_assets)
        self._registered = True
        logger.debug("Registered options page '%s'", self.menu_slug)
        return self

    def add_menu_page(self) -> None:
        menu = self.host.menu
        if self.parent_slug == TOP_LEVEL:
            menu.add_top_level(
                self.page_title,
                self.menu_title,
                self.capability,
                self.menu_slug,
                self.render_page,
                self.icon_url,
                self.position,
            )
        else:
            menu.add_submenu(
                self.parent_slug,
                self.page_title,
                self.menu_title,
                self.capability,
                self.menu_slug,
                self.render_page,
                self.position,
            )

    def register_settings(self) -> None:
        """Declare the option record, its sections and their fields to the settings registry.

        Sections are added without a header callback because :meth:`render_page`
        prints section titles itself.
        """
        settings = self.host.settings
        settings.register(self.option_name, self.option_name, {"sanitize_callback": self.sanitize_options})

        groups: List[tuple] = [(section_id, section.get_fields()) for section_id, section in self.sections.items()]
        page_fields = self.get_page_fields()
        if page_fields and MAIN_TAB not in self.sections:
            groups.append((MAIN_TAB, page_fields))

        for section_id, fields in groups:
            settings.add_section(section_id, "", None, self.option_name)
            for field in fields.values():
                settings.add_field(
                    field.name,
                    "",
                    field.render,
                    self.option_name,
                    section_id,
                    field.get_args(self.option_name),
                )
        logger.debug("Registered settings for '%s' (%d sections)", self.option_name, len(groups))

    # Request handling

    def load_options(self) -> Dict[str, Any]:
        """Populate :attr:`option_values` from the stored record over the defaults."""
        stored = self.host.store.get(self.option_name, {})
        if not isinstance(stored, Mapping):
            logger.warning("Stored value for '%s' is not a mapping; using defaults", self.option_name)
            stored = {}
        values = self._defaults()
        values.update(stored)
        self.option_values = values
        return values

    def get_active_tab(self, request: Optional[RequestInput] = None) -> str:
        request = request or current_request()
        for source, key in ((request.post, ACTIVE_TAB_KEY), (request.query, TAB_QUERY_KEY)):
            raw = source.get(key)
            if isinstance(raw, str):
                tab = sanitize_text_field(raw)
                if tab:
                    return tab
        if self.sections:
            return next(iter(self.sections))
        return MAIN_TAB

    def sanitize_options(self, input: Optional[Mapping[str, Any]], request: Optional[RequestInput] = None) -> Dict[str, Any]:
        """Sanitize the submitted values of the active tab.

        Only the active tab's fields appear in the result; an unchecked
        checkbox is absent from the form and comes back as ``"0"``.
        """
        request = request or current_request()
        values = normalize_input(input, request, self.option_name, self.config.compact_input)
        tab = self.get_active_tab(request)

        sanitized: Dict[str, Any] = {}
        for name, field in self.get_tab_fields(tab).items():
            if field.field_type in _DISPLAY_ONLY:
                continue
            if name in values:
                sanitized[name] = field.sanitize_value(values[name])
            elif field.field_type is FieldType.CHECKBOX:
                sanitized[name] = "0"
        logger.debug("Sanitized %d values for tab '%s' of '%s'", len(sanitized), tab, self.option_name)
        return sanitized

    # Output

    def _tab_url(self, tab: str) -> str:
        return f"{self.host.admin_url}{self.menu_slug}?{urlencode({TAB_QUERY_KEY: tab})}"

    def _tabs(self, active_tab: str) -> List[Dict[str, Any]]:
        tabs = [
            {"id": section_id, "title": section.get_title(), "url": self._tab_url(section_id), "active": section_id == active_tab}
            for section_id, section in self.sections.items()
        ]
        if tabs and MAIN_TAB not in self.sections and self.get_page_fields():
            tabs.append({"id": MAIN_TAB, "title": "General", "url": self._tab_url(MAIN_TAB), "active": active_tab == MAIN_TAB})
        return tabs

    def render_page(self, request: Optional[RequestInput] = None) -> str:
        request = request or current_request()
        self.load_options()
        active_tab = self.get_active_tab(request)

        rendered_fields = []
        for name, field in self.get_tab_fields(active_tab).items():
            args = field.get_args(self.option_name, self.option_values.get(name))
            rendered_fields.append(field.render(args))

        section = self.sections.get(active_tab)
        context = {
            "menu_slug": self.menu_slug,
            "page_title": self.page_title,
            "settings_updated": request.query.get("settings-updated") == "true",
            "tabs": self._tabs(active_tab),
            "form_action": self.host.options_endpoint,
            "compact_input": self.config.compact_input,
            "option_name": self.option_name,
            "nonce": self.host.nonce.create(self.option_name),
            "active_tab": active_tab,
            "referer": f"{self.host.admin_url}{self.menu_slug}",
            "section": {"title": section.get_title(), "description": section.get_description()} if section else None,
            "fields": rendered_fields,
            "submit_label": "Save Changes",
            "footer_content": self.footer_content,
        }
        return get_template_loader().render("options_page.html", context)

    def get_screen_id(self) -> str:
        parent = None if self.parent_slug == TOP_LEVEL else self.parent_slug
        return screen_id_for(self.menu_slug, parent)

    def enqueue_assets(self, current_screen_id: str) -> None:
        """Enqueue the page script and style, only on this page's own screen."""
        if current_screen_id != self.get_screen_id():
            return

        config = self.config
        assets = self.host.assets
        get_template_loader().enqueue_assets(assets, config)
        assets.enqueue_script(
            ASSET_HANDLE,
            config.asset_url("assets/js/admin-options.js"),
            [],
            config.version,
            True,
        )
        assets.enqueue_style(
            ASSET_HANDLE,
            config.asset_url("assets/css/admin-options.css"),
            [],
            config.version,
        )
        assets.localize(
            ASSET_HANDLE,
            LOCALIZE_OBJECT,
            {
                "page_slug": self.menu_slug,
                "option_name": self.option_name,
                "nonce": self.host.nonce.create(self.option_name),
                "ajax_url": self.host.options_endpoint,
                "compact_input": config.compact_input,
            },
        )
        logger.debug("Enqueued assets for screen '%s'", current_screen_id)
