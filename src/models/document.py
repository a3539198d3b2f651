"""
Rendered output models

The renderers produce a RenderedDocument: an ordered list of pages, each an
ordered list of positioned blocks. Blocks carry plain draw items (rectangles,
rules and text fragments) in top-down page coordinates, so the output can be
inspected in tests and serialized by any writer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union


@dataclass
class InlineRun:
    """
    A styled run produced by the inline renderer

    Runs nest: a "bold" run wraps the runs of its children. Leaf runs
    ("literal", "code", "linebreak") carry text.

    Attributes:
        kind: One of literal, bold, italic, strike, code, link, linebreak
        key: Deterministic path key (e.g., "root-0-inline-1")
        text: Literal text for leaf runs
        children: Nested runs for wrapper kinds
        href: Link target, carried but not actionable
    """
    kind: str
    key: str
    text: Optional[str] = None
    children: List['InlineRun'] = field(default_factory=list)
    href: Optional[str] = None

    def text_plain(self) -> str:
        """Concatenated text of this run and its descendants"""
        if self.text is not None:
            return self.text
        return "".join(child.text_plain() for child in self.children)

    def keys_walk(self) -> Iterator[str]:
        """Yield the key of this run and every nested run"""
        yield self.key
        for child in self.children:
            yield from child.keys_walk()


@dataclass
class Span:
    """A flat, fully styled text fragment ready for measurement"""
    text: str
    font: str
    size: float
    color: str
    underline: bool = False
    strike: bool = False
    background: Optional[str] = None
    href: Optional[str] = None


@dataclass
class RectItem:
    """Rectangle with optional fill and stroke"""
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    line_width: float = 0.5


@dataclass
class RuleItem:
    """Straight line segment"""
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float = 1.0
    dashed: bool = False


@dataclass
class TextItem:
    """Single-line text fragment positioned by its baseline"""
    x: float
    y: float
    text: str
    font: str
    size: float
    color: str
    width: float = 0.0
    underline: bool = False
    strike: bool = False
    background: Optional[str] = None


DrawItem = Union[RectItem, RuleItem, TextItem]


@dataclass
class Block:
    """
    A positioned unit of rendered content

    Attributes:
        kind: Block kind (heading, paragraph, list_item, table_header,
              table_row, blockquote, code, rule, banner, footer, ...)
        key: Deterministic key derived from the source path
        x, y: Top-left corner in page coordinates (y grows downward)
        width, height: Extent of the block
        items: Draw items making up the block
        attrs: Kind-specific details (heading tier, bullet glyph, cells)
    """
    kind: str
    key: str
    x: float
    y: float
    width: float
    height: float
    items: List[DrawItem] = field(default_factory=list)
    attrs: Dict[str, Any] = field(default_factory=dict)

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def text_plain(self) -> str:
        """Text of all text items joined in draw order"""
        return "".join(item.text for item in self.items if isinstance(item, TextItem))


@dataclass
class Page:
    """One fixed-size page of the document"""
    index: int
    blocks: List[Block] = field(default_factory=list)


@dataclass
class RenderedDocument:
    """
    The finished paginated document

    Attributes:
        width, height: Page size in points
        pages: Pages in order
        title, author, subject, creator, producer: Document info
    """
    width: float
    height: float
    pages: List[Page] = field(default_factory=list)
    title: str = ""
    author: str = ""
    subject: str = ""
    creator: str = ""
    producer: str = ""

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def blocks_all(self) -> List[Block]:
        """All blocks across pages, in order"""
        return [block for page in self.pages for block in page.blocks]

    def blocks_ofKind(self, kind: str) -> List[Block]:
        """All blocks of a kind across pages, in order"""
        return [block for block in self.blocks_all() if block.kind == kind]

    def layout_signature(self) -> List[tuple]:
        """Page index and bounds of every block; equal signatures mean equal layouts"""
        return [
            (page.index, block.kind, block.key,
             round(block.x, 3), round(block.y, 3),
             round(block.width, 3), round(block.height, 3))
            for page in self.pages
            for block in page.blocks
        ]
