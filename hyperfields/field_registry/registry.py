"""Field registry keyed by container."""

import logging
import os
from typing import Dict, List, Optional

from .field import Field

logger = logging.getLogger(__name__)
logger.setLevel(logging._nameToLevel.get(str(os.environ.get("HYPERFIELDS_LOG_LEVEL", "INFO")).upper(), logging.INFO))


class Registry:
    """Collects fields declared from arbitrary call sites, grouped by container.

    Pass an instance explicitly where possible (``OptionsPage.make(...,
    registry=registry)``). :meth:`get_instance` returns a lazily created
    process-wide default for call sites that have no registry at hand.
    """

    _instance: Optional["Registry"] = None

    def __init__(self):
        self._containers: Dict[str, Dict[str, Field]] = {}

    @classmethod
    def get_instance(cls) -> "Registry":
        """Return the process-wide default registry."""
        if cls._instance is None:
            cls._instance = cls()
            logger.debug("Created default field registry")
        return cls._instance

    def register_field(self, container_id: str, field: Field) -> None:
        """Add ``field`` under ``container_id``; a field with the same name is replaced."""
        container = self._containers.setdefault(container_id, {})
        if field.name in container:
            logger.debug("Replacing field '%s' in container '%s'", field.name, container_id)
        container[field.name] = field

    def get_fields(self, container_id: str) -> List[Field]:
        """Fields of ``container_id`` in registration order (empty if unknown)."""
        return list(self._containers.get(container_id, {}).values())

    def get_field(self, container_id: str, name: str) -> Optional[Field]:
        return self._containers.get(container_id, {}).get(name)

    def get_all_fields(self) -> Dict[str, Dict[str, Field]]:
        return {container_id: dict(fields) for container_id, fields in self._containers.items()}

    def container_exists(self, container_id: str) -> bool:
        return container_id in self._containers

    def remove_container(self, container_id: str) -> None:
        self._containers.pop(container_id, None)

    def clear(self) -> None:
        """Drop every container."""
        self._containers.clear()
