"""
pagedown - Markdown summaries and transcripts to paginated PDF

Composes AI-generated summaries, tables and transcripts into fixed-size,
themed pages.
"""

__version__ = "1.0.0"

from .lib import (
    MarkdownParser,
    TemplateDispatcher,
    ExportMetadata,
    ExportError,
    PdfWriter,
    document_render,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "MarkdownParser",
    "TemplateDispatcher",
    "ExportMetadata",
    "ExportError",
    "PdfWriter",
    "document_render",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
