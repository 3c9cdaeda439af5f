from __future__ import annotations

from django.template import Context, Template
from django.test import RequestFactory, SimpleTestCase

from apps.enqueue.host import AssetQueue, RequestRegistry, bind_queue, current_queue, reset_queue, versioned_url
from apps.enqueue.manager import loading_attribute_filter


class AssetQueueRenderTests(SimpleTestCase):
    def setUp(self) -> None:
        self.queue = AssetQueue()

    def test_styles_markup(self) -> None:
        self.queue.enqueue_style("site", "/static/site.css", [], "1.0", "screen")
        self.queue.add_inline_style("site", "body{color:red}")
        html = str(self.queue.render_styles())
        self.assertIn('<link rel="stylesheet" id="site-css" href="/static/site.css?ver=1.0" media="screen">', html)
        self.assertIn('<style id="site-inline-css">body{color:red}</style>', html)

    def test_scripts_split_between_head_and_footer(self) -> None:
        self.queue.enqueue_script("head", "/h.js", [], "", False)
        self.queue.enqueue_script("foot", "/f.js", [], "", True)
        self.assertIn("head-js", self.queue.render_scripts(footer=False))
        self.assertNotIn("foot-js", self.queue.render_scripts(footer=False))
        self.assertIn("foot-js", self.queue.render_scripts(footer=True))
        both = self.queue.render_scripts()
        self.assertIn("head-js", both)
        self.assertIn("foot-js", both)

    def test_localization_and_inline_blocks_surround_script(self) -> None:
        self.queue.enqueue_script("app", "/app.js", [], "2", True)
        self.queue.localize_script("app", "appData", {"html": "</script>"})
        self.queue.add_inline_script("app", "before();", "before")
        self.queue.add_inline_script("app", "after();")
        html = str(self.queue.render_scripts())
        lines = html.split("\n")
        self.assertEqual(lines[0], '<script id="app-js-extra">var appData = {"html": "\\u003C/script\\u003E"};</script>')
        self.assertEqual(lines[1], '<script id="app-js-before">before();</script>')
        self.assertEqual(lines[2], '<script src="/app.js?ver=2" id="app-js"></script>')
        self.assertEqual(lines[3], '<script id="app-js-after">after();</script>')

    def test_invalid_localization_name_is_dropped(self) -> None:
        with self.assertLogs("enqueue.host", level="WARNING"):
            self.queue.localize_script("app", "not valid", {"a": 1})
        self.assertEqual(self.queue.localizations, {})

    def test_tag_filters_apply_to_matching_handle(self) -> None:
        self.queue.enqueue_script("lazy", "/lazy.js", [], "", True)
        self.queue.enqueue_script("plain", "/plain.js", [], "", True)
        self.queue.add_tag_filter(loading_attribute_filter("lazy", async_=True, defer=False))
        html = str(self.queue.render_scripts())
        self.assertIn('<script async src="/lazy.js" id="lazy-js"></script>', html)
        self.assertIn('<script src="/plain.js" id="plain-js"></script>', html)

    def test_dependencies_render_first(self) -> None:
        self.queue.enqueue_script("app", "/app.js", ["lib", "external"], "", True)
        self.queue.enqueue_script("lib", "/lib.js", [], "", True)
        html = str(self.queue.render_scripts())
        self.assertLess(html.index("lib-js"), html.index("app-js"))

    def test_dependency_cycle_is_reported(self) -> None:
        self.queue.enqueue_script("a", "/a.js", ["b"], "", True)
        self.queue.enqueue_script("b", "/b.js", ["a"], "", True)
        with self.assertLogs("enqueue.host", level="WARNING"):
            html = str(self.queue.render_scripts())
        self.assertIn("a-js", html)
        self.assertIn("b-js", html)

    def test_versioned_url(self) -> None:
        self.assertEqual(versioned_url("/a.js", ""), "/a.js")
        self.assertEqual(versioned_url("/a.js?x=1", "3"), "/a.js?x=1&ver=3")


class RequestRegistryTests(SimpleTestCase):
    def test_forwards_to_bound_queue(self) -> None:
        queue = AssetQueue()
        token = bind_queue(queue)
        try:
            self.assertIs(current_queue(), queue)
            RequestRegistry().enqueue_script("app", "/app.js", [], "1", True)
        finally:
            reset_queue(token)
        self.assertIn("app", queue.scripts)
        self.assertIsNone(current_queue())

    def test_without_request_calls_are_dropped(self) -> None:
        registry = RequestRegistry()
        registry.enqueue_style("site", "/site.css", [], "1", "all")
        registry.add_inline_script("app", "x();")
        self.assertIsNone(current_queue())


class TemplateTagTests(SimpleTestCase):
    def test_tags_render_request_queue(self) -> None:
        request = RequestFactory().get("/")
        request.asset_queue = AssetQueue()
        request.asset_queue.enqueue_style("site", "/site.css", [], "", "all")
        request.asset_queue.enqueue_script("app", "/app.js", [], "", True)
        template = Template(
            "{% load enqueue_tags %}[{% enqueued_styles %}][{% enqueued_scripts footer=False %}][{% enqueued_scripts %}]"
        )
        html = template.render(Context({"request": request}))
        self.assertEqual(
            html,
            '[<link rel="stylesheet" id="site-css" href="/site.css" media="all">][]'
            '[<script src="/app.js" id="app-js"></script>]',
        )

    def test_tags_without_queue_render_nothing(self) -> None:
        template = Template("{% load enqueue_tags %}{% enqueued_styles %}{% enqueued_scripts %}")
        self.assertEqual(template.render(Context({})), "")
