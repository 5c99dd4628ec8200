import json
import unittest
from dataclasses import replace
from unittest.mock import MagicMock, patch

from hyperfields.field_registry import Field
from hyperfields.options import OptionsPage, OptionsSection, RequestInput, bind_request

from tests.unittest_support import TEST_PLUGIN_URL, TEST_VERSION, HostTestCase


class OptionsPageConfigurationTests(HostTestCase):
    def setUp(self):
        super().setUp()
        self.page = self.make_page()

    def test_defaults(self):
        self.assertEqual(self.page.page_title, "Test Page")
        self.assertEqual(self.page.menu_title, "Test Page")
        self.assertEqual(self.page.menu_slug, "test-page")
        self.assertEqual(self.page.capability, "manage_options")
        self.assertEqual(self.page.parent_slug, "options-general.php")
        self.assertEqual(self.page.icon_url, "")
        self.assertIsNone(self.page.position)
        self.assertEqual(self.page.get_option_name(), "hyperpress_options")
        self.assertEqual(self.page.footer_content, "")

    def test_make_without_collaborators_uses_defaults(self):
        page = OptionsPage.make("Static Page", "static-page")
        self.assertEqual(page.page_title, "Static Page")
        self.assertIs(page.host, self.host)

    def test_fluent_setters(self):
        result = (
            self.page.set_menu_title("Custom Title")
            .set_capability("edit_posts")
            .set_parent_slug("custom-parent")
            .set_icon_url("dashicons-admin-tools")
            .set_position(25)
            .set_option_name("custom_options")
            .set_footer_content("<p>Footer content</p>")
        )
        self.assertIs(result, self.page)
        self.assertEqual(self.page.menu_title, "Custom Title")
        self.assertEqual(self.page.capability, "edit_posts")
        self.assertEqual(self.page.parent_slug, "custom-parent")
        self.assertEqual(self.page.icon_url, "dashicons-admin-tools")
        self.assertEqual(self.page.position, 25)
        self.assertEqual(self.page.get_option_name(), "custom_options")
        self.assertEqual(self.page.footer_content, "<p>Footer content</p>")

    def test_add_section_returns_stored_section(self):
        section = self.page.add_section("test_section", "Test Section", "Test description")
        self.assertIsInstance(section, OptionsSection)
        self.assertEqual(section.get_id(), "test_section")
        self.assertIs(self.page.sections["test_section"], section)

    def test_add_section_object_folds_defaults(self):
        section = OptionsSection("custom_section", "Custom Section")
        section.add_field(Field.make("text", "test_field", "Test Field").set_default("default_value"))

        self.assertIs(self.page.add_section_object(section), self.page)
        self.assertIn("custom_section", self.page.sections)
        self.assertEqual(self.page.default_values["test_field"], "default_value")

    def test_add_field_records_default(self):
        field = Field.make("text", "test_field", "Test Field").set_default("x")
        self.assertIs(self.page.add_field(field), self.page)
        self.assertIn("test_field", self.page.fields)
        self.assertEqual(self.page.default_values["test_field"], "x")

    def test_screen_ids(self):
        self.assertEqual(self.page.get_screen_id(), "settings_page_test-page")
        self.page.set_parent_slug("menu")
        self.assertEqual(self.page.get_screen_id(), "toplevel_page_test-page")
        self.page.set_parent_slug("tools.php")
        self.assertEqual(self.page.get_screen_id(), "tools_page_test-page")
        self.page.set_parent_slug("my-plugin")
        self.assertEqual(self.page.get_screen_id(), "my-plugin_page_test-page")


class OptionsPageHostWiringTests(HostTestCase):
    def setUp(self):
        super().setUp()
        self.page = self.make_page()

    def test_register_binds_three_hooks_once(self):
        self.host.hooks = MagicMock()
        self.page.register()
        self.page.register()

        names = [call.args[0] for call in self.host.hooks.on.call_args_list]
        self.assertEqual(names, ["admin_menu", "admin_init", "admin_enqueue_scripts"])
        self.host.hooks.on.assert_any_call("admin_menu", self.page.add_menu_page)
        self.host.hooks.on.assert_any_call("admin_init", self.page.register_settings)
        self.host.hooks.on.assert_any_call("admin_enqueue_scripts", self.page.enqueue_assets)

    def test_add_menu_page_as_submenu(self):
        self.host.menu = MagicMock()
        self.page.set_parent_slug("options-general.php")
        self.page.add_menu_page()

        self.host.menu.add_submenu.assert_called_once_with(
            "options-general.php",
            "Test Page",
            "Test Page",
            "manage_options",
            "test-page",
            self.page.render_page,
            None,
        )
        self.host.menu.add_top_level.assert_not_called()

    def test_add_menu_page_as_top_level(self):
        self.host.menu = MagicMock()
        self.page.set_parent_slug("menu")
        self.page.add_menu_page()

        self.host.menu.add_top_level.assert_called_once_with(
            "Test Page",
            "Test Page",
            "manage_options",
            "test-page",
            self.page.render_page,
            "",
            None,
        )
        self.host.menu.add_submenu.assert_not_called()

    def test_register_settings(self):
        self.host.settings = MagicMock()
        section = self.page.add_section("test_section", "Test Section")
        field = Field.make("text", "test_field", "Test Field")
        section.add_field(field)

        self.page.register_settings()

        self.host.settings.register.assert_called_once_with(
            "hyperpress_options",
            "hyperpress_options",
            {"sanitize_callback": self.page.sanitize_options},
        )
        self.host.settings.add_section.assert_called_once_with("test_section", "", None, "hyperpress_options")
        self.host.settings.add_field.assert_called_once_with(
            "test_field",
            "",
            field.render,
            "hyperpress_options",
            "test_section",
            field.get_args("hyperpress_options"),
        )

    def test_register_settings_adds_main_group_for_page_fields(self):
        self.page.add_field(Field.make("text", "site_name"))
        self.page.register_settings()

        sections = self.host.settings.sections_for("hyperpress_options")
        self.assertEqual([section.id for section in sections], ["main"])
        fields = self.host.settings.fields_for("hyperpress_options", "main")
        self.assertEqual([field.id for field in fields], ["site_name"])
        self.assertEqual(fields[0].args["name_attr"], "hyperpress_options[site_name]")

    def test_boot_runs_menu_and_settings_hooks(self):
        self.page.add_section("general", "General").add_field(Field.make("text", "title"))
        self.page.register()
        self.host.boot()

        entry = self.host.menu.get("test-page")
        self.assertIsNotNone(entry)
        self.assertEqual(entry.parent_slug, "options-general.php")
        self.assertIsNotNone(self.host.settings.get_setting("hyperpress_options"))


class OptionsPageLoadTests(HostTestCase):
    def test_stored_values_override_defaults(self):
        page = self.make_page()
        page.add_section("section1", "Section 1")
        page.add_field(Field.make("text", "field1", "Field 1").set_default("default1"))
        page.add_field(Field.make("text", "field2", "Field 2").set_default("default2"))
        self.host.store.set("hyperpress_options", {"field1": "value1"})

        page.load_options()

        self.assertEqual(page.option_values["field1"], "value1")
        self.assertEqual(page.option_values["field2"], "default2")

    def test_missing_record_falls_back_to_defaults(self):
        page = self.make_page()
        page.add_section("general", "General").add_field(Field.make("text", "title").set_default("Untitled"))
        self.assertEqual(page.load_options(), {"title": "Untitled"})

    def test_non_mapping_record_is_ignored(self):
        page = self.make_page()
        page.add_field(Field.make("text", "title").set_default("Untitled"))
        self.host.store.set("hyperpress_options", "corrupted")
        self.assertEqual(page.load_options(), {"title": "Untitled"})


class ActiveTabTests(HostTestCase):
    def setUp(self):
        super().setUp()
        self.page = self.make_page()

    def _two_sections(self):
        self.page.add_section("a", "Section A")
        self.page.add_section("b", "Section B")

    def test_posted_tab_wins(self):
        self._two_sections()
        request = RequestInput(post={"hyperpress_active_tab": "b"}, query={"tab": "a"})
        self.assertEqual(self.page.get_active_tab(request), "b")

    def test_query_tab_without_post(self):
        self._two_sections()
        self.assertEqual(self.page.get_active_tab(RequestInput(query={"tab": "a"})), "a")

    def test_first_section_without_input(self):
        self._two_sections()
        self.assertEqual(self.page.get_active_tab(RequestInput()), "a")

    def test_main_without_sections(self):
        self.assertEqual(self.page.get_active_tab(RequestInput()), "main")

    def test_bound_request_is_used(self):
        self._two_sections()
        with bind_request(RequestInput(query={"tab": "b"})):
            self.assertEqual(self.page.get_active_tab(), "b")
        self.assertEqual(self.page.get_active_tab(), "a")


class SanitizeOptionsTests(HostTestCase):
    def setUp(self):
        super().setUp()
        self.page = self.make_page()
        section = self.page.add_section("test_section", "Test Section")
        section.add_field(Field.make("text", "text_field", "Text Field"))
        section.add_field(Field.make("checkbox", "checkbox_field", "Checkbox Field"))
        other = self.page.add_section("other_section", "Other Section")
        other.add_field(Field.make("text", "other_field", "Other Field"))

    def test_sanitizes_active_tab_and_defaults_checkbox(self):
        request = RequestInput(post={"hyperpress_active_tab": "test_section"})
        result = self.page.sanitize_options({"text_field": "<b>sanitized</b> text"}, request)

        self.assertEqual(result, {"text_field": "sanitized text", "checkbox_field": "0"})

    def test_fields_outside_active_tab_are_left_out(self):
        request = RequestInput(post={"hyperpress_active_tab": "other_section"})
        result = self.page.sanitize_options({"text_field": "x", "other_field": "y"}, request)
        self.assertEqual(result, {"other_field": "y"})

    def test_checked_checkbox(self):
        request = RequestInput(post={"hyperpress_active_tab": "test_section"})
        result = self.page.sanitize_options({"checkbox_field": "1"}, request)
        self.assertEqual(result["checkbox_field"], "1")

    def test_compact_input_replaces_plain_input(self):
        self.host.config = replace(self.config, compact_input=True)
        request = RequestInput(
            post={
                "hyperpress_compact_input": json.dumps({"hyperpress_options": {"text_field": "compact_value"}}),
                "hyperpress_active_tab": "test_section",
            }
        )
        result = self.page.sanitize_options({"text_field": "plain_value"}, request)
        self.assertEqual(result["text_field"], "compact_value")

    def test_compact_blob_ignored_when_mode_disabled(self):
        request = RequestInput(
            post={
                "hyperpress_compact_input": json.dumps({"hyperpress_options": {"text_field": "compact_value"}}),
                "hyperpress_active_tab": "test_section",
            }
        )
        result = self.page.sanitize_options({"text_field": "plain_value"}, request)
        self.assertEqual(result["text_field"], "plain_value")

    def test_undecodable_compact_blob_falls_back(self):
        self.host.config = replace(self.config, compact_input=True)
        request = RequestInput(post={"hyperpress_compact_input": "{not json", "hyperpress_active_tab": "test_section"})
        with self.assertLogs("hyperfields.options.request", level="WARNING"):
            result = self.page.sanitize_options({"text_field": "plain_value"}, request)
        self.assertEqual(result["text_field"], "plain_value")

    def test_page_level_fields_form_main_tab(self):
        page = self.make_page("Plain", "plain")
        page.add_field(Field.make("text", "site_name"))
        page.add_field(Field.make("separator", "divider"))
        self.registry.register_field("plain", Field.make("checkbox", "from_registry"))

        result = page.sanitize_options({"site_name": " My <i>Site</i> "}, RequestInput())
        self.assertEqual(result, {"from_registry": "0", "site_name": "My Site"})


class RenderPageTests(HostTestCase):
    def setUp(self):
        super().setUp()
        self.page = self.make_page()

    def test_render_contains_structure(self):
        self.page.add_section("test_section", "Test Section", "Test Description")
        output = self.page.render_page(RequestInput())

        self.assertIn("wrap", output)
        self.assertIn("Test Page", output)
        self.assertIn("nav-tab-wrapper", output)
        self.assertIn("Test Section", output)
        self.assertIn("Test Description", output)
        self.assertIn('action="/admin/options.php"', output)
        self.assertIn('name="option_page" value="hyperpress_options"', output)
        self.assertIn(f'name="_wpnonce" value="{self.host.nonce.create("hyperpress_options")}"', output)
        self.assertIn('name="hyperpress_active_tab" value="test_section"', output)

    def test_render_with_footer(self):
        self.page.set_footer_content("<p>Custom footer</p>")
        self.page.add_section("main_section", "Main Section")
        output = self.page.render_page(RequestInput())

        self.assertIn("<p>Custom footer</p>", output)
        self.assertIn("hyperpress-options-footer", output)

    def test_only_active_section_fields_are_rendered(self):
        self.page.add_section("a", "Section A").add_field(Field.make("text", "alpha"))
        self.page.add_section("b", "Section B").add_field(Field.make("text", "beta"))
        self.host.store.set("hyperpress_options", {"beta": "stored beta"})

        output = self.page.render_page(RequestInput(query={"tab": "b"}))

        self.assertIn('name="hyperpress_options[beta]"', output)
        self.assertIn('value="stored beta"', output)
        self.assertNotIn("hyperpress_options[alpha]", output)
        self.assertIn('class="nav-tab nav-tab-active">Section B', output)

    def test_general_tab_listed_for_page_fields(self):
        self.page.add_section("a", "Section A")
        self.page.add_field(Field.make("text", "site_name"))
        output = self.page.render_page(RequestInput(query={"tab": "main"}))

        self.assertIn('class="nav-tab nav-tab-active">General', output)
        self.assertIn('name="hyperpress_options[site_name]"', output)

    def test_updated_notice(self):
        output = self.page.render_page(RequestInput(query={"settings-updated": "true"}))
        self.assertIn("Settings saved.", output)


class EnqueueAssetsTests(HostTestCase):
    def setUp(self):
        super().setUp()
        self.page = self.make_page()

    def test_script_dependencies_are_all_enqueued(self):
        self.page.enqueue_assets("settings_page_test-page")

        handles = {asset.handle for asset in self.host.assets.scripts()}
        self.assertIn("hyperpress-admin-options", handles)
        for asset in self.host.assets.scripts():
            with self.subTest(handle=asset.handle):
                self.assertTrue(set(asset.deps) <= handles)

    def test_enqueues_on_matching_screen(self):
        self.host.assets = MagicMock()
        loader = MagicMock()
        with patch("hyperfields.options.page.get_template_loader", return_value=loader):
            self.page.enqueue_assets("settings_page_test-page")

        loader.enqueue_assets.assert_called_once_with(self.host.assets, self.config)
        self.host.assets.enqueue_script.assert_called_once_with(
            "hyperpress-admin-options",
            f"{TEST_PLUGIN_URL}assets/js/admin-options.js",
            [],
            TEST_VERSION,
            True,
        )
        self.host.assets.enqueue_style.assert_called_once_with(
            "hyperpress-admin-options",
            f"{TEST_PLUGIN_URL}assets/css/admin-options.css",
            [],
            TEST_VERSION,
        )
        handle, object_name, data = self.host.assets.localize.call_args.args
        self.assertEqual((handle, object_name), ("hyperpress-admin-options", "hyperpressOptions"))
        self.assertEqual(data["page_slug"], "test-page")
        self.assertEqual(data["nonce"], self.host.nonce.create("hyperpress_options"))
        self.assertIn("ajax_url", data)

    def test_wrong_screen_is_a_no_op(self):
        self.host.assets = MagicMock()
        loader = MagicMock()
        with patch("hyperfields.options.page.get_template_loader", return_value=loader):
            self.page.enqueue_assets("wrong_page")

        loader.enqueue_assets.assert_not_called()
        self.host.assets.enqueue_script.assert_not_called()
        self.host.assets.localize.assert_not_called()

    def test_real_asset_manager_collects_field_assets(self):
        self.page.enqueue_assets("settings_page_test-page")
        handles = [script.handle for script in self.host.assets.scripts()]
        self.assertEqual(handles, ["hyperfields-fields", "hyperpress-admin-options"])
        tags = self.host.assets.render_tags()
        self.assertIn("window.hyperpressOptions", tags["footer"])
        self.assertIn(f"{TEST_PLUGIN_URL}assets/css/admin-options.css?ver={TEST_VERSION}", tags["head"])


if __name__ == "__main__":
    unittest.main()
