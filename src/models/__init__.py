"""
Models package for pagedown

Contains the Markdown tree, rendered document, layout cursor and program
state used by the rendering pipeline.
"""

from .state import ProgramState, pipeline
from .ast import MdNode, NodeKind, Alignment, TableData
from .document import Block, Page, RenderedDocument, InlineRun, Span
from .layout import LayoutState, RenderContext

__all__ = [
    "ProgramState",
    "pipeline",
    "MdNode",
    "NodeKind",
    "Alignment",
    "TableData",
    "Block",
    "Page",
    "RenderedDocument",
    "InlineRun",
    "Span",
    "LayoutState",
    "RenderContext",
]
