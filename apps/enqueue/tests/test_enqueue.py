from __future__ import annotations

from django.test import SimpleTestCase

from apps.enqueue.descriptors import AssetScope
from apps.enqueue.manager import AssetManager, loading_attribute_filter

from ._helpers import BASE_URL, PluginDirMixin, RecordingRegistry


class ShouldEnqueueTests(PluginDirMixin, SimpleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.manager = AssetManager(self.plugin_file, {"url": BASE_URL})

    def _script(self, **options):
        self.manager.script("app", "js/app.js", **options)
        return self.manager.scripts.get("app")

    def test_scope_both_loads_everywhere(self) -> None:
        asset = self._script()
        self.assertTrue(self.manager.should_enqueue(asset, "admin", "edit.php"))
        self.assertTrue(self.manager.should_enqueue(asset, "public"))

    def test_admin_scope_never_loads_on_public_pages(self) -> None:
        for options in ({}, {"screens": ["post.php"]}, {"condition": lambda: True}, {"condition": lambda: False}):
            asset = self._script(scope="admin", **options)
            self.assertFalse(self.manager.should_enqueue(asset, AssetScope.PUBLIC), options)

    def test_public_scope_never_loads_in_admin(self) -> None:
        asset = self._script(scope="public")
        self.assertFalse(self.manager.should_enqueue(asset, "admin", "post.php"))
        self.assertTrue(self.manager.should_enqueue(asset, "frontend"))

    def test_screen_filter(self) -> None:
        asset = self._script(scope="admin", screens=["post.php"])
        self.assertFalse(self.manager.should_enqueue(asset, "admin", "edit.php"))
        self.assertTrue(self.manager.should_enqueue(asset, "admin", "post.php"))

    def test_screens_are_ignored_on_public_pages(self) -> None:
        asset = self._script(screens=["post.php"])
        self.assertTrue(self.manager.should_enqueue(asset, "public"))

    def test_false_condition_blocks_otherwise_eligible_asset(self) -> None:
        asset = self._script(scope="admin", screens=["post.php"], condition=lambda: False)
        self.assertFalse(self.manager.should_enqueue(asset, "admin", "post.php"))

    def test_true_condition_overrides_screen_filter(self) -> None:
        asset = self._script(scope="admin", screens=["post.php"], condition=lambda: True)
        self.assertTrue(self.manager.should_enqueue(asset, "admin", "edit.php"))

    def test_condition_is_evaluated_on_every_pass(self) -> None:
        calls = []

        def condition() -> bool:
            calls.append(1)
            return len(calls) % 2 == 1

        asset = self._script(condition=condition)
        self.assertTrue(self.manager.should_enqueue(asset, "public"))
        self.assertFalse(self.manager.should_enqueue(asset, "public"))
        self.assertEqual(len(calls), 2)


class EnqueuePassTests(PluginDirMixin, SimpleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.registry = RecordingRegistry()
        self.manager = AssetManager(self.plugin_file, {"url": BASE_URL, "version": "1.0.0"}, registry=self.registry)

    def test_scripts_before_styles_in_insertion_order(self) -> None:
        self.manager.style("site", "css/site.css")
        self.manager.script("b", "js/b.js")
        self.manager.script("a", "js/a.js")
        self.manager.enqueue_public()
        self.assertEqual([(call[0], call[1]) for call in self.registry.calls], [
            ("script", "b"),
            ("script", "a"),
            ("style", "site"),
        ])

    def test_registration_arguments(self) -> None:
        self.manager.script("app", "js/app.js", deps=["jquery"], in_footer=False)
        self.manager.style("site", "css/site.css", media="screen")
        self.manager.enqueue_admin("index")
        self.assertEqual(self.registry.calls, [
            ("script", "app", BASE_URL + "assets/js/app.js", ["jquery"], "1.0.0", False),
            ("style", "site", BASE_URL + "assets/css/site.css", [], "1.0.0", "screen"),
        ])

    def test_admin_pass_filters_screens(self) -> None:
        self.manager.script("editor", "js/editor.js", scope="admin", screens=["post.php"])
        self.manager.script("everywhere", "js/all.js")
        self.manager.enqueue_admin("edit.php")
        self.assertEqual(self.registry.handles("script"), ["everywhere"])

    def test_explicit_registry_argument_wins(self) -> None:
        other = RecordingRegistry()
        self.manager.script("app", "js/app.js")
        self.manager.enqueue_public(other)
        self.assertEqual(other.handles("script"), ["app"])
        self.assertEqual(self.registry.calls, [])

    def test_localization_follows_script(self) -> None:
        self.manager.script("app", "js/app.js", localize={"name": "appData", "data": {"ajax": "/x/"}})
        self.manager.enqueue_public()
        self.assertEqual(self.registry.calls[1], ("localize", "app", "appData", {"ajax": "/x/"}))

    def test_async_defer_installs_filter(self) -> None:
        self.manager.script("plain", "js/plain.js")
        self.manager.script("lazy", "js/lazy.js", **{"async": True, "defer": True})
        self.manager.enqueue_public()
        self.assertEqual(len(self.registry.tag_filters), 1)

        tag_filter = self.registry.tag_filters[0]
        self.assertEqual(
            tag_filter('<script src="/lazy.js" id="lazy-js"></script>', "lazy"),
            '<script async defer src="/lazy.js" id="lazy-js"></script>',
        )
        untouched = '<script src="/plain.js" id="plain-js"></script>'
        self.assertEqual(tag_filter(untouched, "plain"), untouched)

    def test_add_inline_delegates_to_registry(self) -> None:
        self.manager.add_inline("app", "window.x = 1;", position="before")
        self.manager.add_inline("site", "body{}", kind="style")
        self.manager.add_inline("never-registered", "y();")
        self.assertEqual(self.registry.calls, [
            ("inline_script", "app", "window.x = 1;", "before"),
            ("inline_style", "site", "body{}"),
            ("inline_script", "never-registered", "y();", "after"),
        ])


class LoadingAttributeFilterTests(SimpleTestCase):
    def test_defer_only(self) -> None:
        tag_filter = loading_attribute_filter("a", async_=False, defer=True)
        self.assertEqual(tag_filter('<script src="/a.js"></script>', "a"), '<script defer src="/a.js"></script>')

    def test_async_only(self) -> None:
        tag_filter = loading_attribute_filter("a", async_=True, defer=False)
        self.assertEqual(tag_filter('<script src="/a.js"></script>', "a"), '<script async src="/a.js"></script>')
