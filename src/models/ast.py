"""
Markdown tree and tabular input models

MdNode is the tree the renderers consume. It mirrors the mdast vocabulary
(root, heading, paragraph, list, ...) with one dataclass and a string tag,
so node kinds the renderers do not know about (raw html, images) can still
be represented and skipped.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional


class NodeKind(str, Enum):
    """
    Node kinds understood by the renderers

    Block kinds are handled by the tree renderer, inline kinds by the
    inline renderer. Anything else renders to nothing.
    """
    # Block level
    ROOT = "root"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "listItem"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_CELL = "tableCell"
    BLOCKQUOTE = "blockquote"
    CODE = "code"
    THEMATIC_BREAK = "thematicBreak"

    # Inline
    TEXT = "text"
    STRONG = "strong"
    EMPHASIS = "emphasis"
    DELETE = "delete"
    INLINE_CODE = "inlineCode"
    LINK = "link"
    BREAK = "break"


class Alignment(str, Enum):
    """Horizontal alignment of a table column"""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass
class MdNode:
    """
    A node of the Markdown tree

    Attributes:
        kind: Node tag (a NodeKind value, or any other string for kinds
              the renderers skip, e.g. "html")
        children: Child nodes in document order
        value: Literal content for text, inlineCode and code nodes
        depth: Heading depth (1-6)
        ordered: True for ordered lists
        start: First number of an ordered list
        href: Link target
        title: Link title
        lang: Info string of a fenced code block
        align: Per-column alignment of a table (None where unspecified)

    Example:
        "**bold** text" parses to:
        MdNode("root", [
            MdNode("paragraph", [
                MdNode("strong", [MdNode("text", value="bold")]),
                MdNode("text", value=" text"),
            ])
        ])
    """
    kind: str
    children: List['MdNode'] = field(default_factory=list)
    value: Optional[str] = None
    depth: Optional[int] = None
    ordered: bool = False
    start: int = 1
    href: Optional[str] = None
    title: Optional[str] = None
    lang: Optional[str] = None
    align: List[Optional[str]] = field(default_factory=list)

    def text_plain(self) -> str:
        """Concatenate the literal text below this node, dropping formatting"""
        if self.kind == NodeKind.BREAK:
            return "\n"
        if self.value is not None and not self.children:
            return self.value
        return "".join(child.text_plain() for child in self.children)


@dataclass
class TableData:
    """
    Tabular input for the table layout engine

    Rows are not checked against the header count: a short row draws fewer
    cells, a long one draws past the last column.

    Attributes:
        headers: Column titles
        rows: Data rows, each an ordered list of cell strings
        alignments: Optional alignment per column (left when missing)
    """
    headers: List[str]
    rows: List[List[str]] = field(default_factory=list)
    alignments: List[Alignment] = field(default_factory=list)

    def alignment_get(self, column: int) -> Alignment:
        """Alignment of a column, left when unspecified"""
        if column < len(self.alignments) and self.alignments[column]:
            return Alignment(self.alignments[column])
        return Alignment.LEFT

    @classmethod
    def fromNode(cls, node: MdNode) -> "TableData":
        """
        Build TableData from a table node.

        The first row becomes the header purely by position. Cell text is
        the plain text of the cell's inline content.
        """
        rows = [
            [cell.text_plain().strip() for cell in row.children]
            for row in node.children
        ]
        if not rows:
            return cls(headers=[])
        alignments = [Alignment(a) if a else Alignment.LEFT for a in node.align]
        return cls(headers=rows[0], rows=rows[1:], alignments=alignments)
