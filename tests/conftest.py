"""Global pytest configuration and fixtures."""

import pytest

from hyperfields.field_registry import Registry
from hyperfields.host import set_default_host


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Keep option records written by a default host inside the test's temp dir."""
    monkeypatch.setenv("HYPERFIELDS_STATE_DIR", str(tmp_path / "options"))
    monkeypatch.delenv("HYPERFIELDS_COMPACT_INPUT", raising=False)
    monkeypatch.delenv("HYPERFIELDS_TEMPLATE_DIR", raising=False)
    yield
    set_default_host(None)
    Registry.get_instance().clear()
