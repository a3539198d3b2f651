"""
Block tree renderer tests

Tests headings, paragraphs, lists, tables, quotes, code, rules, unknown
kinds, page splitting and idempotence.
"""

import pytest

from pagedown.lib.metrics import Measurer
from pagedown.lib.parser import MarkdownParser
from pagedown.lib.styles import DEFAULT_STYLE
from pagedown.lib.tree import TreeRenderer, document_render
from pagedown.models.ast import MdNode
from pagedown.models.document import RectItem, RuleItem, TextItem
from pagedown.models.layout import LayoutState, RenderContext


def render_markdown(source: str):
    return document_render(MarkdownParser(source).parse())


def renderer_make():
    ctx = RenderContext(style=DEFAULT_STYLE, measurer=Measurer())
    return TreeRenderer(ctx), LayoutState.state_start(DEFAULT_STYLE.page)


class TestHeadings:
    """Test heading tiers"""

    @pytest.mark.parametrize("depth,tier", [(1, 1), (2, 2), (3, 3), (4, 3), (6, 3)])
    def test_tiers(self, depth, tier):
        """Depths beyond three fall back to the third tier"""
        doc = render_markdown("#" * depth + " Title")
        heading = doc.blocks_ofKind("heading")[0]
        assert heading.attrs["tier"] == tier

    def test_deep_heading_uses_tier_three_size(self):
        doc = render_markdown("##### Deep")
        text = [item for item in doc.blocks_ofKind("heading")[0].items if isinstance(item, TextItem)]
        assert text[0].size == DEFAULT_STYLE.h3.size

    def test_tier_one_bordered(self):
        doc = render_markdown("# Top\n\n## Second")
        first, second = doc.blocks_ofKind("heading")
        assert any(isinstance(item, RuleItem) for item in first.items)
        assert not any(isinstance(item, RuleItem) for item in second.items)

    def test_heading_kept_with_next_line(self):
        """A heading near the bottom moves to the next page"""
        renderer, state = renderer_make()
        state.y = state.limit - 20
        renderer.render(MdNode(kind="heading", depth=1, children=[MdNode(kind="text", value="Late")]), state)
        assert state.document.pages[0].blocks == []
        assert state.document.pages[1].blocks[0].kind == "heading"


class TestParagraphs:
    """Test paragraph layout and splitting"""

    def test_single_paragraph(self):
        doc = render_markdown("Hello **world**")
        paragraph = doc.blocks_ofKind("paragraph")[0]
        assert paragraph.text_plain() == "Hello world"
        assert paragraph.y == DEFAULT_STYLE.page.margin_top

    def test_long_paragraph_splits_across_pages(self):
        doc = render_markdown("word " * 4000)
        paragraphs = doc.blocks_ofKind("paragraph")
        assert doc.page_count > 1
        assert len(paragraphs) == doc.page_count
        assert paragraphs[0].key == "root-0"
        assert paragraphs[1].key == "root-0-cont-1"

    def test_blocks_stay_above_bottom_margin(self):
        doc = render_markdown("\n\n".join(["A paragraph of text. " * 12] * 40))
        limit = DEFAULT_STYLE.page.height - DEFAULT_STYLE.page.margin_bottom
        for block in doc.blocks_all():
            assert block.bottom <= limit + 1e-6

    def test_empty_tree(self):
        """An empty document still has one page and no blocks"""
        doc = render_markdown("")
        assert doc.page_count == 1
        assert doc.blocks_all() == []


class TestLists:
    """Test list bullets, ordering and nesting"""

    def test_unordered_two_items(self):
        """Two sibling items with the same bullet in source order"""
        doc = render_markdown("- one\n- two")
        items = doc.blocks_ofKind("list_item")
        assert len(items) == 2
        assert [item.attrs["bullet"] for item in items] == ["•", "•"]
        assert items[0].y < items[1].y
        assert [p.text_plain() for p in doc.blocks_ofKind("paragraph")] == ["one", "two"]

    def test_ordered_bullets(self):
        doc = render_markdown("1. first\n2. second\n3. third")
        bullets = [item.attrs["bullet"] for item in doc.blocks_ofKind("list_item")]
        assert bullets == ["1.", "2.", "3."]

    def test_ordered_start(self):
        doc = render_markdown("3. a\n4. b")
        bullets = [item.attrs["bullet"] for item in doc.blocks_ofKind("list_item")]
        assert bullets == ["3.", "4."]

    def test_item_content_in_gutter(self):
        """Item content sits one gutter to the right of its bullet"""
        doc = render_markdown("- one")
        item = doc.blocks_ofKind("list_item")[0]
        paragraph = doc.blocks_ofKind("paragraph")[0]
        assert paragraph.x == pytest.approx(item.x + DEFAULT_STYLE.lists.gutter)

    def test_deep_nesting_keeps_content(self):
        """Levels below the first nested one are flattened, never dropped"""
        doc = render_markdown("- a\n  - b\n    - c\n      - d")
        paragraphs = {p.text_plain(): p for p in doc.blocks_ofKind("paragraph")}
        assert set(paragraphs) == {"a", "b", "c", "d"}
        assert paragraphs["b"].x > paragraphs["a"].x
        assert paragraphs["c"].x == pytest.approx(paragraphs["b"].x)
        assert paragraphs["d"].x == pytest.approx(paragraphs["b"].x)

    def test_bullet_follows_first_child_to_next_page(self):
        """A bullet is never left behind when its first block moves to the next page"""
        renderer, state = renderer_make()
        state.y = state.limit - 20
        renderer.render(MarkdownParser("- ```\n  code line\n  ```").parse(), state)
        pages = state.document.pages
        assert pages[0].blocks == []
        bullet, code = pages[1].blocks[:2]
        assert bullet.kind == "list_item"
        assert code.kind == "code"
        assert bullet.y == code.y

    def test_empty_item_keeps_bullet(self):
        doc = render_markdown("-\n- two")
        items = doc.blocks_ofKind("list_item")
        assert len(items) == 2
        assert items[0].y < items[1].y


class TestContainers:
    """Test tables, quotes, code and rules"""

    def test_markdown_table(self):
        doc = render_markdown("| A | B |\n|---|:-:|\n| x | y |\n| z | w |")
        assert doc.blocks_ofKind("table_header")[0].attrs["cells"] == ["A", "B"]
        assert [row.attrs["cells"] for row in doc.blocks_ofKind("table_row")] == [["x", "y"], ["z", "w"]]

    def test_table_moves_when_header_does_not_fit(self):
        """A table starting near the bottom begins on a fresh page with its header"""
        renderer, state = renderer_make()
        state.y = state.limit - 40
        renderer.render(MarkdownParser("| A |\n|---|\n| 1 |").parse(), state)
        pages = state.document.pages
        assert len(pages) == 2
        assert pages[0].blocks == []
        header, row = pages[1].blocks
        assert header.kind == "table_header"
        assert header.y == DEFAULT_STYLE.page.margin_top
        assert row.kind == "table_row"

    def test_blockquote(self):
        doc = render_markdown("> quoted words")
        quote = doc.blocks_ofKind("blockquote")[0]
        paragraph = doc.blocks_ofKind("paragraph")[0]
        border = quote.items[0]
        assert isinstance(border, RuleItem)
        assert border.color == DEFAULT_STYLE.blockquote.border_color
        assert paragraph.x > border.x1
        assert border.y1 <= paragraph.y and border.y2 >= paragraph.bottom

    def test_long_blockquote_bordered_on_every_page(self):
        doc = render_markdown("> " + "quoted text " * 3000)
        quotes = doc.blocks_ofKind("blockquote")
        assert doc.page_count > 1
        assert len(quotes) == doc.page_count

    def test_code_block(self):
        doc = render_markdown("```python\nprint('hi')\n    indented\n```")
        code = doc.blocks_ofKind("code")[0]
        assert code.attrs["lang"] == "python"
        assert code.attrs["lines"] == ["print('hi')", "    indented"]
        assert isinstance(code.items[0], RectItem)
        assert code.items[0].fill == DEFAULT_STYLE.code.background
        texts = [item for item in code.items if isinstance(item, TextItem)]
        assert {item.font for item in texts} == {"Courier"}

    def test_thematic_break(self):
        doc = render_markdown("above\n\n---\n\nbelow")
        rule = doc.blocks_ofKind("rule")[0]
        above, below = doc.blocks_ofKind("paragraph")
        assert above.bottom < rule.y < below.y


class TestUnknownKinds:
    """Unrecognized kinds render nothing and do not raise"""

    def test_unknown_node_emits_nothing(self):
        renderer, state = renderer_make()
        blocks = renderer.render(MdNode(kind="html", value="<div>raw</div>"), state)
        assert blocks == []
        assert state.document.blocks_all() == []

    def test_raw_html_from_markdown(self):
        doc = render_markdown("<div>raw</div>")
        assert doc.blocks_all() == []

    def test_unknown_between_known(self):
        root = MdNode(kind="root", children=[
            MdNode(kind="paragraph", children=[MdNode(kind="text", value="a")]),
            MdNode(kind="mystery"),
            MdNode(kind="paragraph", children=[MdNode(kind="text", value="b")]),
        ])
        doc = document_render(root)
        assert [block.text_plain() for block in doc.blocks_all()] == ["a", "b"]
        assert [block.key for block in doc.blocks_all()] == ["root-0", "root-2"]


class TestIdempotence:
    """Rendering twice gives the same layout"""

    def test_same_layout_twice(self):
        source = "# T\n\n- a\n- b\n\n| H |\n|---|\n| 1 |\n\n> q\n\n```\ncode\n```\n\n" + "text " * 500
        root = MarkdownParser(source).parse()
        first = document_render(root)
        second = document_render(root)
        assert first.page_count == second.page_count
        assert first.layout_signature() == second.layout_signature()


class TestLogging:
    """Skipped kinds are reported at verbosity 2 and above"""

    def test_skip_logged(self):
        from types import SimpleNamespace
        from contextvars import copy_context
        from loguru import logger
        from pagedown.lib.log import state_connectToLogger

        messages = []
        sink = logger.add(messages.append, format="{message}")

        def run(verbosity):
            state_connectToLogger(SimpleNamespace(verbosity=verbosity))
            renderer, state = renderer_make()
            renderer.render(MdNode(kind="html"), state)

        try:
            copy_context().run(run, 1)
            assert messages == []
            copy_context().run(run, 2)
        finally:
            logger.remove(sink)
        assert any("Skipping unsupported block node 'html'" in str(m) for m in messages)

    def test_debug_mode_enables_level_three(self, monkeypatch):
        """Debug mode logs level 3 messages even when no state is bound"""
        from contextvars import copy_context
        from loguru import logger
        from pagedown.config import appsettings
        from pagedown.lib.log import LOG, state_connectToLogger, verbosity_get

        messages = []
        sink = logger.add(messages.append, format="{message}")

        def run():
            state_connectToLogger(None)
            LOG("parsed 4 block nodes", level=3)
            return verbosity_get()

        try:
            assert copy_context().run(run) == 0
            assert messages == []
            monkeypatch.setattr(appsettings, "debug_mode", True)
            assert copy_context().run(run) == 3
        finally:
            logger.remove(sink)
        assert any("parsed 4 block nodes" in str(m) for m in messages)
