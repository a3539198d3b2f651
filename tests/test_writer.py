"""
PDF writer tests

Tests that rendered documents serialize to PDF bytes with one page per
document page.
"""

import re

from pagedown.lib.parser import MarkdownParser
from pagedown.lib.templates import ExportMetadata, TemplateDispatcher
from pagedown.lib.tree import document_render
from pagedown.lib.writer import PdfWriter, pdf_export


PAGE_RE = re.compile(rb"/Type\s*/Page(?!s)")


class TestPdfWriter:
    """Test PDF serialization"""

    def test_pdf_header(self):
        doc = document_render(MarkdownParser("# Hi\n\nText with **bold** and `code`").parse())
        data = PdfWriter().document_write(doc)
        assert data.startswith(b"%PDF")
        assert data.rstrip().endswith(b"%%EOF")

    def test_page_count(self):
        doc = document_render(MarkdownParser("word " * 5000).parse())
        data = PdfWriter(compress=False).document_write(doc)
        assert doc.page_count > 1
        assert len(PAGE_RE.findall(data)) == doc.page_count

    def test_empty_document(self):
        doc = document_render(MarkdownParser("").parse())
        data = pdf_export(doc)
        assert len(PAGE_RE.findall(data)) == 1

    def test_composed_export(self):
        """Every draw item kind (dashed rules, links, strike, code) serializes"""
        summary = "## Notes\n\n[link](https://x.org) ~~old~~ `code`\n\n> quote\n\n---\n\n```\nblock\n```"
        meta = ExportMetadata(contentType="interview", modelId="m", fileName="Export Title")
        doc = TemplateDispatcher().compose(summary, "Q: hi\n\nA: hello", meta)
        data = pdf_export(doc, PdfWriter(compress=False))
        assert data.startswith(b"%PDF")
        assert b"Export Title" in data
