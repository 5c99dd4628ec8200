"""Option record persistence."""

from __future__ import annotations

import copy
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_MISSING = object()


class MemoryOptionStore:
    """Keeps option records in a dict for the lifetime of the process."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._values:
            return default
        return copy.deepcopy(self._values[key])

    def set(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JSONOptionStore:
    """Persist each option record as ``<base_dir>/<key>.json``."""

    def __init__(self, base_dir: Path | str):
        self.base_dir = Path(base_dir).expanduser()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _option_path(self, key: str) -> Path:
        safe_name = key.replace("/", "_").replace("\\", "_")
        return self.base_dir / f"{safe_name}.json"

    def _read_json(self, key: str) -> Any:
        path = self._option_path(key)
        if not path.exists():
            return _MISSING
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Failed to parse option '{key}': {exc}") from exc

    def _write_json(self, key: str, payload: Any) -> None:
        path = self._option_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            delete=False,
            dir=str(path.parent),
            prefix=path.name,
            suffix=".tmp",
        ) as tmp_handle:
            json.dump(payload, tmp_handle, indent=2, sort_keys=True)
            tmp_handle.write("\n")
            tmp_path = Path(tmp_handle.name)

        try:
            tmp_path.replace(path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink(missing_ok=True)

    def get(self, key: str, default: Any = None) -> Any:
        value = self._read_json(key)
        return default if value is _MISSING else value

    def set(self, key: str, value: Any) -> None:
        self._write_json(key, value)
        logger.debug("Stored option '%s' in %s", key, self.base_dir)

    def delete(self, key: str) -> None:
        path = self._option_path(key)
        if path.exists():
            path.unlink()
