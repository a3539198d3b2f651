"""
PDF writer

Serializes a RenderedDocument into PDF bytes with a reportlab canvas. Layout
coordinates grow downward from the top of the page; PDF space grows upward
from the bottom, so every y is flipped against the page height.

The writer draws exactly what the blocks hold and makes no layout
decisions of its own. It performs no file I/O: callers decide where the
bytes go.
"""

from io import BytesIO
from typing import Optional

from reportlab.lib.colors import HexColor
from reportlab.pdfgen import canvas

from ..models.document import RectItem, RenderedDocument, RuleItem, TextItem
from .log import LOG


class PdfWriter:
    """Draws blocks page by page onto a reportlab canvas"""

    def __init__(self, compress: bool = True) -> None:
        self.compress = compress

    def document_write(self, doc: RenderedDocument) -> bytes:
        """
        Render the document to PDF.

        Args:
            doc: Paginated document from the renderers

        Returns:
            Complete PDF file contents
        """
        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(doc.width, doc.height), pageCompression=int(self.compress))
        pdf.setTitle(doc.title)
        pdf.setAuthor(doc.author)
        pdf.setSubject(doc.subject)
        pdf.setCreator(doc.creator)
        pdf.setProducer(doc.producer)

        for page in doc.pages:
            for block in page.blocks:
                for item in block.items:
                    if isinstance(item, RectItem):
                        self.rect_draw(pdf, item, doc.height)
                    elif isinstance(item, RuleItem):
                        self.rule_draw(pdf, item, doc.height)
                    elif isinstance(item, TextItem):
                        self.text_draw(pdf, item, doc.height)
            pdf.showPage()

        pdf.save()
        data = buffer.getvalue()
        LOG(f"Wrote {doc.page_count} page(s), {len(data)} bytes", level=2)
        return data

    def rect_draw(self, pdf: canvas.Canvas, item: RectItem, page_height: float) -> None:
        if item.fill is None and item.stroke is None:
            return
        pdf.saveState()
        if item.fill is not None:
            pdf.setFillColor(HexColor(item.fill))
        if item.stroke is not None:
            pdf.setStrokeColor(HexColor(item.stroke))
            pdf.setLineWidth(item.line_width)
        pdf.rect(
            item.x, page_height - item.y - item.height, item.width, item.height,
            stroke=int(item.stroke is not None), fill=int(item.fill is not None),
        )
        pdf.restoreState()

    def rule_draw(self, pdf: canvas.Canvas, item: RuleItem, page_height: float) -> None:
        pdf.saveState()
        pdf.setStrokeColor(HexColor(item.color))
        pdf.setLineWidth(item.width)
        if item.dashed:
            pdf.setDash(4, 3)
        pdf.line(item.x1, page_height - item.y1, item.x2, page_height - item.y2)
        pdf.restoreState()

    def text_draw(self, pdf: canvas.Canvas, item: TextItem, page_height: float) -> None:
        """Text at its baseline, with inline-code background and decorations"""
        if not item.text:
            return
        baseline = page_height - item.y
        pdf.saveState()
        if item.background:
            pdf.setFillColor(HexColor(item.background))
            pdf.rect(item.x, baseline - item.size * 0.25, item.width, item.size * 1.1, stroke=0, fill=1)
        color = HexColor(item.color)
        pdf.setFillColor(color)
        pdf.setFont(item.font, item.size)
        pdf.drawString(item.x, baseline, item.text)
        if item.underline or item.strike:
            pdf.setStrokeColor(color)
            pdf.setLineWidth(max(item.size / 18.0, 0.5))
            if item.underline:
                self.decoration_draw(pdf, item, baseline - item.size * 0.12)
            if item.strike:
                self.decoration_draw(pdf, item, baseline + item.size * 0.3)
        pdf.restoreState()

    def decoration_draw(self, pdf: canvas.Canvas, item: TextItem, y: float) -> None:
        pdf.line(item.x, y, item.x + item.width, y)


def pdf_export(doc: RenderedDocument, writer: Optional[PdfWriter] = None) -> bytes:
    """Shorthand for PdfWriter().document_write(doc)"""
    return (writer or PdfWriter()).document_write(doc)
