"""
Inline content renderer

Turns inline MdNodes (text, strong, emphasis, delete, inlineCode, link,
break) into nested InlineRuns, then flattens runs into styled Spans for
measurement and drawing.

Every run gets a key built from its parent's key and its position
("root-0-inline-1-inline-0"), so the same tree always yields the same keys
and two renders never share a counter.
"""

from typing import Callable, Dict, List, Optional

from ..config import appsettings
from ..models.ast import MdNode, NodeKind
from ..models.document import InlineRun, Span
from .log import LOG
from .styles import Style


InlineHandler = Callable[[MdNode, str], Optional[InlineRun]]


class InlineRenderer:
    """
    Registry-driven renderer for inline nodes

    Maps inline node kinds to handlers. Kinds with no handler render to
    nothing.
    """

    def __init__(self) -> None:
        """Register the handlers for every supported inline kind"""
        self.handlers: Dict[str, InlineHandler] = {
            NodeKind.TEXT.value: self.text_handle,
            NodeKind.STRONG.value: self.wrapper_make("bold"),
            NodeKind.EMPHASIS.value: self.wrapper_make("italic"),
            NodeKind.DELETE.value: self.wrapper_make("strike"),
            NodeKind.INLINE_CODE.value: self.code_handle,
            NodeKind.LINK.value: self.link_handle,
            NodeKind.BREAK.value: self.break_handle,
        }

    def render(self, nodes: List[MdNode], parent_key: str) -> List[InlineRun]:
        """
        Render sibling inline nodes.

        Args:
            nodes: Inline children of a paragraph, heading, cell, ...
            parent_key: Key of the containing node

        Returns:
            Runs in order; unsupported nodes are dropped
        """
        runs: List[InlineRun] = []
        for index, node in enumerate(nodes):
            key = appsettings.keyPath_make(parent_key, index, "inline")
            handler = self.handlers.get(node.kind)
            if handler is None:
                LOG(f"Skipping unsupported inline node '{node.kind}' at {key}", level=2)
                continue
            run = handler(node, key)
            if run is not None:
                runs.append(run)
        return runs

    def text_handle(self, node: MdNode, key: str) -> InlineRun:
        return InlineRun(kind="literal", key=key, text=node.value or "")

    def wrapper_make(self, kind: str) -> InlineHandler:
        """Build a handler wrapping the recursively rendered children in `kind`"""

        def handler(node: MdNode, key: str) -> InlineRun:
            return InlineRun(kind=kind, key=key, children=self.render(node.children, key))

        return handler

    def code_handle(self, node: MdNode, key: str) -> InlineRun:
        """Inline code is verbatim; children are not rendered"""
        return InlineRun(kind="code", key=key, text=node.value or "")

    def link_handle(self, node: MdNode, key: str) -> InlineRun:
        return InlineRun(
            kind="link", key=key, href=node.href,
            children=self.render(node.children, key),
        )

    def break_handle(self, node: MdNode, key: str) -> InlineRun:
        return InlineRun(kind="linebreak", key=key, text="\n")


def runs_flatten(
    runs: List[InlineRun],
    style: Style,
    size: float,
    color: str,
    bold: bool = False,
    italic: bool = False,
    strike: bool = False,
    underline: bool = False,
    href: Optional[str] = None,
) -> List[Span]:
    """
    Flatten nested runs into styled spans.

    Wrapper runs toggle flags for their subtree; leaf runs become spans
    with the font chosen from the style's font family.

    Args:
        runs: Runs from InlineRenderer.render
        style: Resolved style (fonts, link and code tokens)
        size: Base font size of the containing block
        color: Base text color of the containing block
        bold, italic, strike, underline, href: Inherited formatting

    Returns:
        Spans in reading order
    """
    spans: List[Span] = []
    for run in runs:
        if run.kind == "literal" or run.kind == "linebreak":
            spans.append(Span(
                text=run.text or "",
                font=style.fonts.font_select(bold, italic),
                size=size, color=color,
                underline=underline, strike=strike, href=href,
            ))
        elif run.kind == "code":
            spans.append(Span(
                text=run.text or "",
                font=style.fonts.mono,
                size=min(size, style.inline.code_size),
                color=color, strike=strike,
                background=style.inline.code_background,
            ))
        elif run.kind == "bold":
            spans.extend(runs_flatten(run.children, style, size, color, True, italic, strike, underline, href))
        elif run.kind == "italic":
            spans.extend(runs_flatten(run.children, style, size, color, bold, True, strike, underline, href))
        elif run.kind == "strike":
            spans.extend(runs_flatten(run.children, style, size, color, bold, italic, True, underline, href))
        elif run.kind == "link":
            spans.extend(runs_flatten(
                run.children, style, size, style.inline.link_color,
                bold, italic, strike, True, run.href,
            ))
    return spans
