"""
Markdown front end

Adapts markdown-it-py (commonmark preset with the GFM table and
strikethrough rules enabled) into the MdNode tree the renderers consume.

The parser operates in two phases:
1. Tokenizing: markdown-it produces a flat token stream, folded into a
   SyntaxTreeNode tree
2. Converting: each syntax node is mapped onto the mdast vocabulary
   (heading, paragraph, list, table, strong, emphasis, delete, ...)

Node types without an mdast counterpart keep their markdown-it name
(e.g. "html_block" becomes kind "html") so the renderers can skip them.

Example:
    >>> root = MarkdownParser("# Title\\n\\nSome *text*").parse()
    >>> [child.kind for child in root.children]
    ['heading', 'paragraph']
"""

from typing import List

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from ..models.ast import MdNode, NodeKind
from .log import LOG


# markdown-it names of inline wrappers and their mdast kinds
_INLINE_WRAPPERS = {
    "strong": NodeKind.STRONG.value,
    "em": NodeKind.EMPHASIS.value,
    "s": NodeKind.DELETE.value,
}


class MarkdownParser:
    """
    Parser for commonmark + GFM Markdown

    Handles:
    - ATX and setext headings, paragraphs, block quotes
    - Ordered and bullet lists (tight and loose)
    - Pipe tables with column alignment
    - Fenced and indented code blocks
    - Emphasis, strong, strikethrough, inline code, links, hard breaks
    """

    def __init__(self, source: str, html: bool = True) -> None:
        """
        Initialize parser with source text

        Args:
            source: Raw Markdown text
            html: Recognize raw HTML (emitted as "html" nodes, which the
                  renderers skip)
        """
        self.source = source or ""
        self.md = MarkdownIt("commonmark", {"html": html}).enable(["table", "strikethrough"])

    def parse(self) -> MdNode:
        """
        Parse the source into a root MdNode.

        Returns:
            MdNode of kind "root"; empty or blank source gives a root with
            no children
        """
        tokens = self.md.parse(self.source)
        tree = SyntaxTreeNode(tokens)
        root = MdNode(kind=NodeKind.ROOT.value, children=self.children_convert(tree.children))
        LOG(f"Parsed {len(root.children)} top-level Markdown blocks", level=3)
        return root

    def children_convert(self, nodes: List[SyntaxTreeNode]) -> List[MdNode]:
        """Convert sibling syntax nodes, merging adjacent text nodes"""
        converted: List[MdNode] = []
        for node in nodes:
            for child in self.node_convert(node):
                previous = converted[-1] if converted else None
                if (
                    previous is not None
                    and previous.kind == NodeKind.TEXT.value
                    and child.kind == NodeKind.TEXT.value
                ):
                    previous.value = (previous.value or "") + (child.value or "")
                else:
                    converted.append(child)
        return converted

    def node_convert(self, node: SyntaxTreeNode) -> List[MdNode]:
        """
        Convert one syntax node.

        Returns a list because markdown-it's "inline" container dissolves
        into its children.
        """
        kind = node.type

        if kind == "inline":
            return self.children_convert(node.children)

        if kind == "heading":
            depth = int(node.tag[1]) if node.tag and node.tag[1:].isdigit() else 1
            return [MdNode(
                kind=NodeKind.HEADING.value, depth=depth,
                children=self.children_convert(node.children),
            )]

        if kind == "paragraph":
            return [MdNode(kind=NodeKind.PARAGRAPH.value, children=self.children_convert(node.children))]

        if kind in ("bullet_list", "ordered_list"):
            start = node.attrs.get("start", 1)
            return [MdNode(
                kind=NodeKind.LIST.value,
                ordered=(kind == "ordered_list"),
                start=int(start) if start is not None else 1,
                children=self.children_convert(node.children),
            )]

        if kind == "list_item":
            return [MdNode(kind=NodeKind.LIST_ITEM.value, children=self.children_convert(node.children))]

        if kind == "table":
            return [self.table_convert(node)]

        if kind == "blockquote":
            return [MdNode(kind=NodeKind.BLOCKQUOTE.value, children=self.children_convert(node.children))]

        if kind in ("fence", "code_block"):
            info = (node.info or "").strip() if kind == "fence" else ""
            return [MdNode(
                kind=NodeKind.CODE.value,
                value=node.content.rstrip("\n"),
                lang=info.split()[0] if info else None,
            )]

        if kind == "hr":
            return [MdNode(kind=NodeKind.THEMATIC_BREAK.value)]

        # Inline
        if kind == "text":
            return [MdNode(kind=NodeKind.TEXT.value, value=node.content)]

        if kind == "softbreak":
            return [MdNode(kind=NodeKind.TEXT.value, value=" ")]

        if kind == "hardbreak":
            return [MdNode(kind=NodeKind.BREAK.value)]

        if kind in _INLINE_WRAPPERS:
            return [MdNode(kind=_INLINE_WRAPPERS[kind], children=self.children_convert(node.children))]

        if kind == "code_inline":
            return [MdNode(kind=NodeKind.INLINE_CODE.value, value=node.content)]

        if kind == "link":
            return [MdNode(
                kind=NodeKind.LINK.value,
                href=node.attrs.get("href"),
                title=node.attrs.get("title"),
                children=self.children_convert(node.children),
            )]

        if kind in ("html_block", "html_inline"):
            return [MdNode(kind="html", value=node.content)]

        if kind == "image":
            return [MdNode(kind="image", href=node.attrs.get("src"), value=node.content)]

        LOG(f"Unmapped Markdown node '{kind}' kept as-is", level=3)
        return [MdNode(kind=kind, value=node.content or None, children=self.children_convert(node.children))]

    def table_convert(self, node: SyntaxTreeNode) -> MdNode:
        """
        Flatten thead/tbody into rows and read column alignment.

        markdown-it marks alignment as a "text-align:<side>" style on
        every cell; the first row's cells define the table's alignment.
        """
        rows: List[MdNode] = []
        align: List = []
        for section in node.children:
            for tr in section.children:
                cells: List[MdNode] = []
                for cell in tr.children:
                    cells.append(MdNode(
                        kind=NodeKind.TABLE_CELL.value,
                        children=self.children_convert(cell.children),
                    ))
                    if not rows:
                        align.append(_alignment_read(str(cell.attrs.get("style", ""))))
                rows.append(MdNode(kind=NodeKind.TABLE_ROW.value, children=cells))
        return MdNode(kind=NodeKind.TABLE.value, children=rows, align=align)


def _alignment_read(style: str):
    """'text-align:center' -> 'center'; None when unset"""
    if "text-align:" not in style:
        return None
    side = style.split("text-align:", 1)[1].split(";", 1)[0].strip()
    return side if side in ("left", "center", "right") else None
