"""
Layout cursor threaded through a render

A LayoutState is created at the start of a render, passed explicitly to
every render call, and discarded at the end. It owns the document under
construction, so two renders never share a cursor or a page list.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, TYPE_CHECKING

from .document import Block, Page, RenderedDocument

if TYPE_CHECKING:
    from ..lib.metrics import Measurer
    from ..lib.styles import PageStyle, Style


@dataclass(frozen=True)
class RenderContext:
    """
    Read-only inputs of a render

    Attributes:
        style: Resolved style, fixed for the whole render
        measurer: Text width source
    """
    style: 'Style'
    measurer: 'Measurer'


@dataclass
class LayoutState:
    """
    Mutable render cursor

    Attributes:
        page: Page geometry the cursor moves over
        document: Document receiving placed blocks
        x: Left edge of the current column
        y: Top of the next block (grows downward)
        width: Width of the current column
        page_index: Index of the page blocks are placed on
        list_depth: Nesting depth of the list being rendered
    """
    page: 'PageStyle'
    document: RenderedDocument
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    page_index: int = 0
    list_depth: int = 0
    page_breaks: int = field(default=0)

    @classmethod
    def state_start(cls, page: 'PageStyle') -> "LayoutState":
        """Create a cursor at the top-left margin of a fresh one-page document"""
        document = RenderedDocument(width=page.width, height=page.height, pages=[Page(index=0)])
        return cls(
            page=page,
            document=document,
            x=page.margin_left,
            y=page.margin_top,
            width=page.content_width,
            page_index=0,
        )

    @property
    def limit(self) -> float:
        """Lowest y a block may reach on the current page"""
        return self.page.height - self.page.margin_bottom

    @property
    def remaining(self) -> float:
        """Vertical space left on the current page"""
        return self.limit - self.y

    @property
    def at_top(self) -> bool:
        return self.y <= self.page.margin_top

    def page_break(self) -> None:
        """Start a new page and move the cursor to its top margin"""
        self.page_index += 1
        self.page_breaks += 1
        self.document.pages.append(Page(index=self.page_index))
        self.y = self.page.margin_top

    def space_ensure(self, height: float) -> bool:
        """
        Break the page if a block of the given height does not fit.

        A block taller than a whole page is placed at the top of a page and
        allowed to overflow; breaking again would not help.

        Returns:
            True if a page break was triggered
        """
        if self.y + height > self.limit and not self.at_top:
            self.page_break()
            return True
        return False

    def block_place(self, block: Block, page_index: Optional[int] = None) -> Block:
        """Append a block to the current page, or to an earlier one by index"""
        index = self.page_index if page_index is None else page_index
        self.document.pages[index].blocks.append(block)
        return block

    def mark_get(self) -> Tuple[int, int]:
        """Position in the block stream, for collecting blocks placed after it"""
        return self.page_index, len(self.document.pages[self.page_index].blocks)

    def blocks_since(self, mark: Tuple[int, int]) -> List[Block]:
        """Blocks placed since `mark` was taken, in page order"""
        page_index, count = mark
        pages = self.document.pages
        blocks = list(pages[page_index].blocks[count:])
        for page in pages[page_index + 1:]:
            blocks.extend(page.blocks)
        return blocks

    def mark_first(self, mark: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        """Page index and position of the first block placed since `mark`, if any"""
        page_index, count = mark
        pages = self.document.pages
        if len(pages[page_index].blocks) > count:
            return page_index, count
        for page in pages[page_index + 1:]:
            if page.blocks:
                return page.index, 0
        return None

    def block_insert(self, block: Block, position: Tuple[int, int]) -> Block:
        """Insert a block ahead of the one at `position` (page index, list position)"""
        page_index, index = position
        self.document.pages[page_index].blocks.insert(index, block)
        return block

    @contextmanager
    def indented(self, amount: float) -> Iterator["LayoutState"]:
        """Narrow the column by `amount` from the left for the duration of the block"""
        saved_x, saved_width = self.x, self.width
        self.x += amount
        self.width = max(self.width - amount, 1.0)
        try:
            yield self
        finally:
            self.x, self.width = saved_x, saved_width
