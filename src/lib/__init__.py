"""
pagedown - Markdown summaries and transcripts to paginated PDF

Rendering pipeline: styles, inline runs, block tree, table layout,
templates and the PDF writer.
"""

__version__ = "1.0.0"

from .log import LOG, state_connectToLogger
from .metrics import MeasurementError, Measurer
from .styles import DEFAULT_STYLE, Style, style_resolve
from .parser import MarkdownParser
from .inline import InlineRenderer, runs_flatten
from .table import table_render
from .tree import TreeRenderer, document_render
from .theme import Theme, ThemeError
from .templates import ExportError, ExportMetadata, TemplateDispatcher, template_resolve
from .writer import PdfWriter, pdf_export

__all__ = [
    "LOG",
    "state_connectToLogger",
    "MeasurementError",
    "Measurer",
    "DEFAULT_STYLE",
    "Style",
    "style_resolve",
    "MarkdownParser",
    "InlineRenderer",
    "runs_flatten",
    "table_render",
    "TreeRenderer",
    "document_render",
    "Theme",
    "ThemeError",
    "ExportError",
    "ExportMetadata",
    "TemplateDispatcher",
    "template_resolve",
    "PdfWriter",
    "pdf_export",
    "__version__",
]
