import tempfile
import unittest

import httpx

from notionhtml.models.blocks import Block, BlockType
from notionhtml.rendering.asset_cache import AssetCache
from notionhtml.rendering.blocks import _BY_TYPE
from notionhtml.rendering.options import CacheConfig, RenderConfig
from notionhtml.rendering.renderer import BlockRenderer, render_blocks
from notionhtml.rendering.renderer_iface import InMemoryBlockSource, RenderContext

from tests.helpers import blk, load_fixture, rt


class FakeAssets:
    def __init__(self, public="/images/notion/abc.png"):
        self.public = public
        self.resolved = []

    async def resolve(self, url):
        self.resolved.append(url)
        return self.public


class FakeText:
    def __init__(self, body):
        self.body = body
        self.calls = []

    async def __call__(self, url):
        self.calls.append(url)
        return self.body


def para(block_id, text, has_children=False):
    return blk(block_id, "paragraph", {"rich_text": rt(text)}, has_children)


def bullet(block_id, text, has_children=False):
    return blk(block_id, "bulleted_list_item", {"rich_text": rt(text)}, has_children)


def numbered(block_id, text):
    return blk(block_id, "numbered_list_item", {"rich_text": rt(text)})


class TestBlockTree(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.source = InMemoryBlockSource()

    async def render(self, blocks, **kwargs):
        renderer = BlockRenderer(self.source, **kwargs)
        return await renderer.render(blocks)

    async def test_groups_adjacent_list_items(self):
        out = await self.render(
            [bullet("1", "a"), bullet("2", "b"), para("3", "c"), numbered("4", "d")]
        )
        self.assertEqual(
            out, "<ul><li>a</li><li>b</li></ul><p>c</p><ol><li>d</li></ol>"
        )

    async def test_interrupted_list_makes_two_groups(self):
        out = await self.render([bullet("1", "a"), para("2", "x"), bullet("3", "b")])
        self.assertEqual(out.count("<ul>"), 2)
        self.assertEqual(out, "<ul><li>a</li></ul><p>x</p><ul><li>b</li></ul>")

    async def test_switching_list_type_closes_group(self):
        out = await self.render([bullet("1", "a"), numbered("2", "b")])
        self.assertEqual(out, "<ul><li>a</li></ul><ol><li>b</li></ol>")

    async def test_list_item_children_inside_li(self):
        self.source.children["1"] = [bullet("1a", "child")]
        out = await self.render([bullet("1", "parent", has_children=True)])
        self.assertEqual(out, "<ul><li>parent<ul><li>child</li></ul></li></ul>")

    async def test_numbered_item_children_inside_li(self):
        self.source.children["n1"] = [para("c", "detail")]
        out = await self.render(
            [
                blk("n1", "numbered_list_item", {"rich_text": rt("one")}, True),
                numbered("n2", "two"),
            ]
        )
        self.assertEqual(out, "<ol><li>one<p>detail</p></li><li>two</li></ol>")

    async def test_children_not_fetched_without_flag(self):
        self.source.children["1"] = [para("x", "never")]
        out = await self.render([para("1", "alone")])
        self.assertEqual(out, "<p>alone</p>")
        self.assertEqual(self.source.calls, [])

    async def test_unsupported_block_renders_children(self):
        self.source.children["s"] = [para("c", "inside")]
        synced = blk("s", "synced_block", {}, has_children=True)
        self.assertIs(synced.type, BlockType.UNSUPPORTED)
        self.assertEqual(synced.raw_type, "synced_block")
        self.assertEqual(await self.render([synced]), "<p>inside</p>")

    async def test_child_fetch_failure_is_empty(self):
        async def broken(block_id):
            raise RuntimeError("network down")

        renderer = BlockRenderer(broken)
        with self.assertLogs("notionhtml.rendering.renderer_iface", "WARNING"):
            out = await renderer.render([para("1", "top", has_children=True)])
        self.assertEqual(out, "<p>top</p>")

    async def test_empty_paragraph(self):
        self.assertEqual(await self.render([para("1", "   ")]), "")

    async def test_empty_input(self):
        self.assertEqual(await self.render([]), "")

    async def test_fixture_page(self):
        data = load_fixture("page_blocks.json")
        self.source.children = {
            k: [Block.model_validate(b) for b in v] for k, v in data["children"].items()
        }
        root = [Block.model_validate(b) for b in data["results"]]
        out = await self.render(root)
        self.assertTrue(out.startswith("<h1>Project notes</h1>"))
        self.assertIn("<ul><li>First<ul><li>Nested</li></ul></li><li>Second</li></ul>", out)
        self.assertIn('<table class="notion-table"><tbody>', out)
        self.assertIn("<details><summary>Details</summary><p>Hidden body</p></details>", out)
        self.assertIn("<p>Inside synced block</p>", out)
        self.assertIn("<hr />", out)


class TestBlockRenderer(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.source = InMemoryBlockSource()

    async def one(self, block, **kwargs):
        return await BlockRenderer(self.source, **kwargs).render_block(block)

    def test_every_block_type_has_a_renderer(self):
        self.assertEqual(set(_BY_TYPE), set(BlockType))

    async def test_headings(self):
        for level in (1, 2, 3):
            out = await self.one(blk("h", f"heading_{level}", {"rich_text": rt("T")}))
            self.assertEqual(out, f"<h{level}>T</h{level}>")

    async def test_list_item_alone_is_bare_li(self):
        self.assertEqual(await self.one(bullet("1", "a")), "<li>a</li>")

    async def test_code_is_escaped(self):
        out = await self.one(
            blk("c", "code", {"rich_text": rt("a < b && *c*"), "language": "python"})
        )
        self.assertEqual(out, "<pre><code>a &lt; b &amp;&amp; *c*</code></pre>")

    async def test_quote_with_children(self):
        self.source.children["q"] = [para("p", "more")]
        out = await self.one(blk("q", "quote", {"rich_text": rt("said")}, True))
        self.assertEqual(out, "<blockquote>said<p>more</p></blockquote>")

    async def test_divider(self):
        self.assertEqual(await self.one(blk("d", "divider")), "<hr />")

    async def test_callout_default_icon(self):
        out = await self.one(blk("c", "callout", {"rich_text": rt("note")}))
        self.assertIn('<span class="callout-icon">💡</span>', out)
        self.assertIn('<div class="callout-body">note</div>', out)

    async def test_callout_emoji_icon(self):
        payload = {"rich_text": rt("hot"), "icon": {"type": "emoji", "emoji": "🔥"}}
        out = await self.one(blk("c", "callout", payload))
        self.assertIn("🔥", out)
        self.assertNotIn("💡", out)

    async def test_callout_children_inside_body(self):
        self.source.children["c"] = [para("p", "child")]
        out = await self.one(blk("c", "callout", {"rich_text": rt("note")}, True))
        self.assertIn('<div class="callout-body">note<p>child</p></div>', out)
        self.assertTrue(out.endswith("</div></div>"))

    async def test_table_skips_non_row_children(self):
        self.source.children["t"] = [
            blk("r1", "table_row", {"cells": [rt("a")]}),
            para("p", "stray"),
        ]
        out = await self.one(blk("t", "table", {"table_width": 1}, True))
        self.assertEqual(
            out, '<table class="notion-table"><tbody><tr><td>a</td></tr></tbody></table>'
        )
        self.assertNotIn("stray", out)

    async def test_toggle(self):
        self.source.children["t"] = [para("p", "hidden")]
        out = await self.one(blk("t", "toggle", {"rich_text": rt("More")}, True))
        self.assertEqual(out, "<details><summary>More</summary><p>hidden</p></details>")

    async def test_columns(self):
        self.source.children["cl"] = [blk("c1", "column", {}, True)]
        self.source.children["c1"] = [para("p", "left")]
        out = await self.one(blk("cl", "column_list", {}, True))
        self.assertEqual(
            out, '<div class="column-list"><div class="column"><p>left</p></div></div>'
        )

    async def test_external_image_is_not_cached(self):
        assets = FakeAssets()
        payload = {
            "type": "external",
            "external": {"url": "https://cdn.example.com/a.png"},
            "caption": rt("Cap"),
        }
        out = await self.one(blk("i", "image", payload), assets=assets)
        self.assertIn('src="https://cdn.example.com/a.png"', out)
        self.assertIn('alt="Cap"', out)
        self.assertIn("<figcaption>Cap</figcaption>", out)
        self.assertEqual(assets.resolved, [])

    async def test_hosted_image_goes_through_cache(self):
        assets = FakeAssets()
        url = "https://s3.example.com/a.png?X-Amz-Signature=1"
        payload = {"type": "file", "file": {"url": url}, "caption": []}
        out = await self.one(blk("i", "image", payload), assets=assets)
        self.assertIn('src="/images/notion/abc.png"', out)
        self.assertEqual(assets.resolved, [url])

    async def test_hosted_image_falls_back_to_original_url(self):
        assets = FakeAssets()
        url = "https://s3.example.com/a.png?sig=1&x=2"
        assets.public = url
        payload = {"type": "file", "file": {"url": url}}
        out = await self.one(blk("i", "image", payload), assets=assets)
        self.assertIn('src="https://s3.example.com/a.png?sig=1&amp;x=2"', out)

    async def test_failed_download_keeps_remote_src(self):
        http = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(403))
        )
        self.addAsyncCleanup(http.aclose)
        with tempfile.TemporaryDirectory() as tmp:
            assets = AssetCache(CacheConfig(cache_dir=tmp), http=http)
            url = "https://s3.example.com/space/a.gif?X-Amz-Signature=1"
            payload = {"type": "file", "file": {"url": url}}
            out = await self.one(blk("i", "image", payload), assets=assets)
        self.assertIn('src="https://s3.example.com/space/a.gif?X-Amz-Signature=1"', out)

    async def test_table(self):
        self.source.children["t"] = [
            blk("r1", "table_row", {"cells": [rt("a"), rt("b & c")]}),
            blk("r2", "table_row", {"cells": [rt("1"), rt("2", bold=True)]}),
        ]
        out = await self.one(blk("t", "table", {"table_width": 2}, True))
        self.assertEqual(
            out,
            '<table class="notion-table"><tbody>'
            "<tr><td>a</td><td>b &amp; c</td></tr>"
            "<tr><td>1</td><td>2</td></tr>"
            "</tbody></table>",
        )

    async def test_table_row_alone(self):
        out = await self.one(blk("r", "table_row", {"cells": [rt("x")]}))
        self.assertEqual(out, "<tr><td>x</td></tr>")

    async def test_markdown_attachment(self):
        fetch = FakeText("# Hi\n\n- one")
        payload = {
            "type": "file",
            "file": {"url": "https://s3.example.com/notes.md?sig=1"},
            "caption": [],
            "name": "notes.md",
        }
        out = await self.one(blk("f", "file", payload), fetch_text=fetch)
        self.assertIn("📄 notes.md", out)
        self.assertIn(
            '<div class="markdown-body"><h2>Hi</h2>\n\n<ul><li>one</li></ul></div>', out
        )
        self.assertEqual(fetch.calls, ["https://s3.example.com/notes.md?sig=1"])

    async def test_markdown_attachment_fetch_failure(self):
        payload = {
            "type": "file",
            "file": {"url": "https://s3.example.com/notes.md"},
            "name": "notes.md",
        }
        out = await self.one(blk("f", "file", payload), fetch_text=FakeText(None))
        self.assertIn("notice warning", out)
        self.assertIn("Could not load notes.md", out)

    async def test_internal_attachment_is_not_fetched(self):
        fetch = FakeText("never")
        payload = {
            "type": "file",
            "file": {"url": "attachment:1234:notes.md"},
            "name": "notes.md",
        }
        out = await self.one(blk("f", "file", payload), fetch_text=fetch)
        self.assertIn("notice warning", out)
        self.assertIn(RenderConfig().unsupported_file_notice, out)
        self.assertEqual(fetch.calls, [])

    async def test_plain_file_download_link(self):
        payload = {
            "type": "external",
            "external": {"url": "https://example.com/report.zip"},
            "name": "report.zip",
        }
        out = await self.one(blk("f", "file", payload))
        self.assertIn('href="https://example.com/report.zip"', out)
        self.assertIn("📎 report.zip (Download)", out)

    async def test_file_default_label(self):
        payload = {"type": "external", "external": {"url": "https://example.com/x"}}
        out = await self.one(blk("f", "file", payload))
        self.assertIn("Attached File", out)

    async def test_pdf_and_video(self):
        pdf = {"type": "external", "external": {"url": "https://example.com/a.pdf"}}
        out = await self.one(blk("p", "pdf", pdf))
        self.assertIn("View PDF", out)
        video = {"type": "external", "external": {"url": "https://youtu.be/x"}}
        out = await self.one(blk("v", "video", video))
        self.assertIn("Watch Video", out)
        self.assertIn('href="https://youtu.be/x"', out)

    async def test_bookmark(self):
        out = await self.one(blk("b", "bookmark", {"url": "https://example.com"}))
        self.assertIn("🔖 https://example.com", out)

    async def test_embed(self):
        out = await self.one(blk("e", "embed", {"url": "https://maps.example.com"}))
        self.assertIn('<div class="embed"><iframe', out)
        self.assertIn('src="https://maps.example.com"', out)
        self.assertIn("height:400px", out)

    async def test_internal_embed(self):
        out = await self.one(blk("e", "embed", {"url": "attachment:abc"}))
        self.assertNotIn("<iframe", out)
        self.assertIn(RenderConfig().unsupported_embed_notice, out)

    async def test_missing_payload_fields(self):
        self.assertEqual(await self.one(blk("i", "image", {})), "")
        self.assertEqual(await self.one(blk("b", "bookmark", {})), "")
        out = await self.one(blk("p", "paragraph", {"rich_text": None}))
        self.assertEqual(out, "")


class TestRenderContext(unittest.IsolatedAsyncioTestCase):
    async def test_tree_renderer_function(self):
        ctx = RenderContext(fetch_children=InMemoryBlockSource())
        out = await render_blocks([para("1", "x")], ctx)
        self.assertEqual(out, "<p>x</p>")

    def test_full_page(self):
        renderer = BlockRenderer(InMemoryBlockSource())
        page = renderer.render_full_page("A & B", "<p>x</p>")
        self.assertIn("<title>A &amp; B</title>", page)
        self.assertIn('<article class="notion-content"><p>x</p></article>', page)


if __name__ == "__main__":
    unittest.main()
