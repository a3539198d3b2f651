"""
Block-level tree renderer

Maps block MdNodes (heading, paragraph, list, table, blockquote, code,
thematic break) onto vertically stacked, positioned blocks. Inline content
is delegated to the InlineRenderer and tables to the table layout engine.

Dispatch goes through a handler registry keyed by node kind. A kind with no
handler (raw html, images, stray table rows) renders nothing and is logged,
so the fallback is explicit rather than accidental.

Example:
    >>> ctx = RenderContext(style=style_resolve(), measurer=Measurer())
    >>> state = LayoutState.state_start(ctx.style.page)
    >>> blocks = TreeRenderer(ctx).render(root, state)
"""

from typing import Any, Callable, Dict, List, Optional

from ..config import appsettings
from ..models.ast import MdNode, NodeKind, TableData
from ..models.document import Block, InlineRun, RectItem, RenderedDocument, RuleItem, TextItem
from ..models.layout import LayoutState, RenderContext
from .inline import InlineRenderer, runs_flatten
from .log import LOG
from .metrics import Line, Measurer, lines_wrap, text_cut
from .styles import Style, style_resolve
from .table import baseline_get, headerBlock_height, table_render


BlockHandler = Callable[[MdNode, LayoutState, str], None]


def lines_items(lines: List[Line], x: float, top: float, line_height: float) -> List[Any]:
    """Text items for wrapped lines stacked from `top`"""
    items: List[Any] = []
    for index, line in enumerate(lines):
        baseline = baseline_get(top + index * line_height, line_height, line.size)
        fragment_x = x
        for span, width in zip(line.fragments, line.widths):
            items.append(TextItem(
                x=fragment_x, y=baseline, text=span.text, font=span.font,
                size=span.size, color=span.color, width=width,
                underline=span.underline, strike=span.strike,
                background=span.background,
            ))
            fragment_x += width
    return items


class TreeRenderer:
    """
    Renders an MdNode tree onto a LayoutState

    Responsibilities:
    - Dispatch block nodes to their handlers
    - Wrap inline content and split tall paragraphs and code across pages
    - Keep headings together with the line that follows them
    - Indent list items and block quotes
    """

    def __init__(self, ctx: RenderContext) -> None:
        """
        Initialize renderer

        Args:
            ctx: Resolved style and measurer, shared by every handler
        """
        self.ctx = ctx
        self.style: Style = ctx.style
        self.inline = InlineRenderer()
        self.handlers: Dict[str, BlockHandler] = {
            NodeKind.ROOT.value: self.root_handle,
            NodeKind.HEADING.value: self.heading_handle,
            NodeKind.PARAGRAPH.value: self.paragraph_handle,
            NodeKind.LIST.value: self.list_handle,
            NodeKind.LIST_ITEM.value: self.children_handle,
            NodeKind.TABLE.value: self.table_handle,
            NodeKind.BLOCKQUOTE.value: self.blockquote_handle,
            NodeKind.CODE.value: self.code_handle,
            NodeKind.THEMATIC_BREAK.value: self.thematicBreak_handle,
        }

    def render(self, node: MdNode, state: LayoutState, key: str = "root") -> List[Block]:
        """
        Render one node (and its subtree) at the cursor.

        Args:
            node: Block-level node
            state: Cursor, advanced past the rendered content
            key: Key of this node; children derive theirs from it

        Returns:
            Blocks placed while rendering the node, in page order
        """
        handler = self.handlers.get(node.kind)
        if handler is None:
            LOG(f"Skipping unsupported block node '{node.kind}' at {key}", level=2)
            return []
        mark = state.mark_get()
        handler(node, state, key)
        return state.blocks_since(mark)

    # ------------------------------------------------------------------
    # Shared helpers

    def children_handle(self, node: MdNode, state: LayoutState, key: str) -> None:
        for index, child in enumerate(node.children):
            self.render(child, state, appsettings.keyPath_make(key, index))

    def margin_add(self, state: LayoutState, amount: float) -> None:
        """Vertical gap before a block; dropped at the top of a page"""
        if not state.at_top:
            state.y += amount

    def inline_lines(
        self,
        nodes: List[MdNode],
        key: str,
        size: float,
        color: str,
        width: float,
        bold: bool = False,
    ) -> tuple:
        runs: List[InlineRun] = self.inline.render(nodes, key)
        spans = runs_flatten(runs, self.style, size, color, bold=bold)
        return runs, lines_wrap(spans, width, self.ctx.measurer)

    def lines_place(
        self,
        lines: List[Line],
        state: LayoutState,
        key: str,
        kind: str,
        line_height: float,
        attrs: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Place wrapped lines, continuing on new pages as needed.

        Each page's share of the lines becomes its own block; blocks after
        the first get a "cont" key segment.
        """
        start = 0
        part = 0
        while start < len(lines):
            fit = int((state.remaining + 1e-6) // line_height)
            if fit <= 0:
                if not state.at_top:
                    state.page_break()
                    continue
                fit = 1
            chunk = lines[start:start + fit]
            height = len(chunk) * line_height
            state.block_place(Block(
                kind=kind,
                key=key if part == 0 else appsettings.keyPath_make(key, part, "cont"),
                x=state.x, y=state.y, width=state.width, height=height,
                items=lines_items(chunk, state.x, state.y, line_height),
                attrs={**(attrs or {}), "lines": [line.text for line in chunk]},
            ))
            state.y += height
            start += len(chunk)
            part += 1

    # ------------------------------------------------------------------
    # Handlers

    def root_handle(self, node: MdNode, state: LayoutState, key: str) -> None:
        self.children_handle(node, state, key)

    def heading_handle(self, node: MdNode, state: LayoutState, key: str) -> None:
        """Three tiers; depth > 3 falls back to tier 3. Tier 1 gets a bottom border."""
        depth = node.depth or 1
        tier = min(max(depth, 1), 3)
        heading = self.style.heading_get(depth)
        runs, lines = self.inline_lines(
            node.children, key, heading.size, heading.color, state.width, bold=True
        )
        if not lines:
            return

        self.margin_add(state, heading.margin_top)
        line_height = heading.size * heading.line_height
        height = len(lines) * line_height + heading.padding_bottom
        paragraph = self.style.paragraph
        state.space_ensure(height + paragraph.size * paragraph.line_height)

        items = lines_items(lines, state.x, state.y, line_height)
        if heading.border_width:
            items.append(RuleItem(
                x1=state.x, y1=state.y + height, x2=state.x + state.width, y2=state.y + height,
                color=heading.border_color, width=heading.border_width,
            ))
        state.block_place(Block(
            kind="heading", key=key, x=state.x, y=state.y,
            width=state.width, height=height, items=items,
            attrs={"tier": tier, "depth": depth, "runs": runs,
                   "lines": [line.text for line in lines]},
        ))
        state.y += height + heading.margin_bottom

    def paragraph_handle(self, node: MdNode, state: LayoutState, key: str) -> None:
        paragraph = self.style.paragraph
        runs, lines = self.inline_lines(
            node.children, key, paragraph.size, paragraph.color, state.width
        )
        if not lines:
            return
        self.lines_place(
            lines, state, key, "paragraph",
            paragraph.size * paragraph.line_height, attrs={"runs": runs},
        )
        state.y += paragraph.margin_bottom

    def list_handle(self, node: MdNode, state: LayoutState, key: str) -> None:
        """
        Bullet or numbered items beside their content.

        The outer list and one nested level are indented; deeper lists are
        pulled back onto the nested level's indentation.
        """
        lists = self.style.lists
        if state.list_depth < 2:
            indent = lists.indent
        else:
            indent = -lists.gutter
        state.list_depth += 1
        try:
            with state.indented(indent):
                for index, item in enumerate(node.children):
                    if node.ordered:
                        bullet = f"{node.start + index}."
                    else:
                        bullet = lists.bullet
                    self.listItem_render(
                        item, bullet, index, state,
                        appsettings.keyPath_make(key, index, "item"),
                    )
        finally:
            state.list_depth -= 1

    def listItem_render(
        self, item: MdNode, bullet: str, index: int, state: LayoutState, key: str
    ) -> None:
        """
        Bullet in the gutter, children indented beside it.

        The bullet is placed after the children, next to the first block
        they produced, so it follows that block onto a new page.
        """
        lists = self.style.lists
        paragraph = self.style.paragraph
        line_height = paragraph.size * paragraph.line_height
        state.space_ensure(line_height)

        x = state.x
        mark = state.mark_get()
        with state.indented(lists.gutter):
            self.children_handle(item, state, key)

        first = state.mark_first(mark)
        if first is None:
            anchor_page, anchor_y = state.page_index, state.y
        else:
            anchor_page = first[0]
            anchor_y = state.document.pages[first[0]].blocks[first[1]].y

        font = self.style.fonts.regular
        bullet_width = self.ctx.measurer.width_get(bullet, font, paragraph.size)
        block = Block(
            kind="list_item", key=key, x=x, y=anchor_y,
            width=lists.gutter, height=line_height,
            items=[TextItem(
                x=x, y=baseline_get(anchor_y, line_height, paragraph.size),
                text=bullet, font=font, size=paragraph.size,
                color=paragraph.color, width=bullet_width,
            )],
            attrs={"bullet": bullet, "index": index},
        )
        if first is None:
            state.block_place(block)
        else:
            state.block_insert(block, first)

        if state.page_index == anchor_page and state.y < anchor_y + line_height:
            state.y = anchor_y + line_height
        state.y += lists.item_spacing

    def table_handle(self, node: MdNode, state: LayoutState, key: str) -> None:
        """
        First row is the header by position, whatever the source marks.

        A table whose header would be stranded at the bottom of a page
        starts on the next one.
        """
        table = TableData.fromNode(node)
        if not table.headers:
            return
        margin = self.style.table.margin_vertical
        self.margin_add(state, margin)
        state.space_ensure(headerBlock_height(table, state.width, self.ctx))
        table_render(table, state, self.ctx, key)
        state.y += margin

    def blockquote_handle(self, node: MdNode, state: LayoutState, key: str) -> None:
        """Children indented inside a left border drawn on every page they reach"""
        quote = self.style.blockquote
        self.margin_add(state, quote.margin_vertical)
        start_page, start_y = state.page_index, state.y
        border_x = state.x + quote.indent + quote.border_width / 2

        with state.indented(quote.indent + quote.border_width + quote.padding_left):
            self.children_handle(node, state, key)

        for page_index in range(start_page, state.page_index + 1):
            top = start_y if page_index == start_page else state.page.margin_top
            bottom = state.y if page_index == state.page_index else state.limit
            if bottom <= top:
                continue
            state.block_place(Block(
                kind="blockquote",
                key=key if page_index == start_page else appsettings.keyPath_make(
                    key, page_index - start_page, "cont"),
                x=border_x - quote.border_width / 2, y=top,
                width=quote.border_width, height=bottom - top,
                items=[RuleItem(
                    x1=border_x, y1=top, x2=border_x, y2=bottom,
                    color=quote.border_color, width=quote.border_width,
                )],
            ), page_index=page_index)
        state.y += quote.margin_vertical

    def code_handle(self, node: MdNode, state: LayoutState, key: str) -> None:
        """Verbatim monospace text on a shaded background, split across pages by line"""
        code = self.style.code
        font = self.style.fonts.mono
        usable = max(state.width - 2 * code.padding, 1.0)
        lines: List[str] = []
        for raw in (node.value or "").expandtabs(4).split("\n"):
            lines.extend(text_cut(raw, font, code.size, usable, self.ctx.measurer))

        self.margin_add(state, code.margin_vertical)
        line_height = code.size * code.line_height
        start = 0
        part = 0
        while start < len(lines):
            fit = int((state.remaining - 2 * code.padding + 1e-6) // line_height)
            if fit <= 0:
                if not state.at_top:
                    state.page_break()
                    continue
                fit = 1
            chunk = lines[start:start + fit]
            height = len(chunk) * line_height + 2 * code.padding
            items: List[Any] = [RectItem(
                x=state.x, y=state.y, width=state.width, height=height,
                fill=code.background, stroke=None,
            )]
            for index, text in enumerate(chunk):
                items.append(TextItem(
                    x=state.x + code.padding,
                    y=baseline_get(state.y + code.padding + index * line_height, line_height, code.size),
                    text=text, font=font, size=code.size, color=code.color,
                    width=self.ctx.measurer.width_get(text, font, code.size),
                ))
            state.block_place(Block(
                kind="code",
                key=key if part == 0 else appsettings.keyPath_make(key, part, "cont"),
                x=state.x, y=state.y, width=state.width, height=height,
                items=items, attrs={"lang": node.lang, "lines": chunk},
            ))
            state.y += height
            start += len(chunk)
            part += 1
        state.y += code.margin_vertical

    def thematicBreak_handle(self, node: MdNode, state: LayoutState, key: str) -> None:
        rule = self.style.rule
        state.y += rule.margin_vertical
        state.space_ensure(rule.width)
        state.block_place(Block(
            kind="rule", key=key, x=state.x, y=state.y,
            width=state.width, height=rule.width,
            items=[RuleItem(
                x1=state.x, y1=state.y, x2=state.x + state.width, y2=state.y,
                color=rule.color, width=rule.width,
            )],
        ))
        state.y += rule.width + rule.margin_vertical


def document_render(
    root: MdNode,
    style: Optional[Style] = None,
    measurer: Optional[Measurer] = None,
) -> RenderedDocument:
    """
    Render a Markdown tree into a fresh paginated document.

    Args:
        root: Tree to render (usually a "root" node)
        style: Resolved style (defaults to the built-in style)
        measurer: Width source (defaults to reportlab metrics)

    Returns:
        RenderedDocument with at least one page
    """
    ctx = RenderContext(style=style or style_resolve(), measurer=measurer or Measurer())
    state = LayoutState.state_start(ctx.style.page)
    TreeRenderer(ctx).render(root, state)
    return state.document
