"""Registered settings and the save path for option records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from .store import MemoryOptionStore

logger = logging.getLogger(__name__)


@dataclass
class Setting:
    group: str
    option_name: str
    sanitize_callback: Optional[Callable[..., Dict[str, Any]]] = None
    default: Any = None


@dataclass
class SettingsSection:
    id: str
    title: str
    callback: Optional[Callable[..., Any]]
    page: str


@dataclass
class SettingsField:
    id: str
    title: str
    callback: Callable[..., Any]
    page: str
    section_id: str
    args: Dict[str, Any] = field(default_factory=dict)


class SettingsRegistry:
    """Tracks registered option records, their sections and fields.

    :meth:`save` runs a record's sanitize callback and merges the result over
    the stored record, so values the callback did not return are kept.
    """

    def __init__(self, store=None):
        self.store = store if store is not None else MemoryOptionStore()
        self._settings: Dict[str, Setting] = {}
        self._sections: Dict[str, Dict[str, SettingsSection]] = {}
        self._fields: Dict[str, List[SettingsField]] = {}

    def register(self, group: str, option_name: str, args: Optional[Mapping[str, Any]] = None) -> None:
        args = dict(args or {})
        self._settings[option_name] = Setting(
            group=group,
            option_name=option_name,
            sanitize_callback=args.get("sanitize_callback"),
            default=args.get("default"),
        )
        logger.debug("Registered setting '%s' in group '%s'", option_name, group)

    def add_section(self, section_id: str, title: str, callback: Optional[Callable[..., Any]], page: str) -> None:
        self._sections.setdefault(page, {})[section_id] = SettingsSection(section_id, title, callback, page)

    def add_field(
        self,
        field_id: str,
        title: str,
        callback: Callable[..., Any],
        page: str,
        section_id: str,
        args: Optional[Dict[str, Any]] = None,
    ) -> None:
        fields = self._fields.setdefault(page, [])
        fields[:] = [entry for entry in fields if not (entry.id == field_id and entry.section_id == section_id)]
        fields.append(SettingsField(field_id, title, callback, page, section_id, dict(args or {})))

    def get_setting(self, option_name: str) -> Optional[Setting]:
        return self._settings.get(option_name)

    def sections_for(self, page: str) -> List[SettingsSection]:
        return list(self._sections.get(page, {}).values())

    def fields_for(self, page: str, section_id: Optional[str] = None) -> List[SettingsField]:
        fields = self._fields.get(page, [])
        if section_id is None:
            return list(fields)
        return [entry for entry in fields if entry.section_id == section_id]

    def save(self, option_name: str, raw_input: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Sanitize ``raw_input`` and merge it into the stored record.

        Raises:
            KeyError: ``option_name`` was never registered.
        """
        setting = self._settings.get(option_name)
        if setting is None:
            raise KeyError(option_name)

        payload = dict(raw_input or {})
        if setting.sanitize_callback is not None:
            payload = setting.sanitize_callback(payload)

        stored = self.store.get(option_name, {})
        if not isinstance(stored, Mapping):
            stored = {}
        merged = dict(stored)
        merged.update(payload)
        self.store.set(option_name, merged)
        logger.info("Saved %d values for '%s'", len(payload), option_name)
        return merged
