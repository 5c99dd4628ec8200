"""Shared fixtures for HyperFields tests."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from hyperfields.config import HyperFieldsConfig
from hyperfields.field_registry import Registry
from hyperfields.host import HostServices, set_default_host
from hyperfields.options import OptionsPage
from hyperfields.template_loader import set_template_loader

TEST_PLUGIN_URL = "http://example.com/plugin/"
TEST_VERSION = "2.0.7"


class HostTestCase(unittest.TestCase):
    """Provides an in-memory host, a private registry and a temp directory."""

    def setUp(self):
        super().setUp()
        self._tmpdir = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self._tmpdir.name)
        self.config = HyperFieldsConfig(
            plugin_url=TEST_PLUGIN_URL,
            version=TEST_VERSION,
            state_dir=self.tmp_path / "options",
            secret_key="test-secret",
        )
        self.host = HostServices.in_memory(self.config)
        self.registry = Registry()
        set_default_host(self.host)
        set_template_loader(None)

    def tearDown(self):
        set_default_host(None)
        set_template_loader(None)
        Registry.get_instance().clear()
        self._tmpdir.cleanup()
        super().tearDown()

    def make_page(self, title: str = "Test Page", slug: str = "test-page") -> OptionsPage:
        return OptionsPage.make(title, slug, host=self.host, registry=self.registry)
