"""
Font-metric text measurement and line wrapping.

Widths come from reportlab's AFM/TTF metrics, so layout decisions match what
the PDF writer later draws. Wrapping is greedy over styled spans: words are
kept whole unless a single word is wider than the line, in which case it is
cut by characters.
"""

import re
from dataclasses import dataclass, field
from typing import List

from reportlab.pdfbase import pdfmetrics

from ..models.document import Span


_PIECE_SPLIT_RE = re.compile(r"(\n|[ \t]+)")


class MeasurementError(Exception):
    """Raised when text cannot be measured (e.g., no metrics for a font)"""
    pass


class Measurer:
    """
    Measures string widths with reportlab font metrics.

    The standard 14 PDF fonts are always available; any other font must be
    registered with reportlab.pdfbase.pdfmetrics before rendering.
    """

    def width_get(self, text: str, font: str, size: float) -> float:
        """
        Width of `text` in points.

        Raises:
            MeasurementError: If reportlab has no metrics for `font`
        """
        if not text:
            return 0.0
        try:
            return pdfmetrics.stringWidth(text, font, size)
        except KeyError as e:
            raise MeasurementError(f"No font metrics for '{font}'") from e


@dataclass
class Line:
    """A wrapped line: styled fragments and their measured widths"""
    fragments: List[Span] = field(default_factory=list)
    widths: List[float] = field(default_factory=list)

    @property
    def width(self) -> float:
        return sum(self.widths)

    @property
    def size(self) -> float:
        return max((span.size for span in self.fragments), default=0.0)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.fragments)

    def append(self, span: Span, width: float) -> None:
        # Merge with the previous fragment when the style is unchanged
        if self.fragments and _same_style(self.fragments[-1], span):
            last = self.fragments[-1]
            self.fragments[-1] = Span(
                text=last.text + span.text, font=last.font, size=last.size,
                color=last.color, underline=last.underline, strike=last.strike,
                background=last.background, href=last.href,
            )
            self.widths[-1] += width
        else:
            self.fragments.append(span)
            self.widths.append(width)

    def trailing_strip(self, measurer: Measurer) -> None:
        """Drop trailing whitespace so alignment uses the visible width"""
        while self.fragments:
            last = self.fragments[-1]
            stripped = last.text.rstrip(" \t")
            if stripped == last.text:
                return
            if stripped:
                self.fragments[-1] = _span_withText(last, stripped)
                self.widths[-1] = measurer.width_get(stripped, last.font, last.size)
                return
            self.fragments.pop()
            self.widths.pop()


def _same_style(a: Span, b: Span) -> bool:
    return (a.font, a.size, a.color, a.underline, a.strike, a.background, a.href) == \
        (b.font, b.size, b.color, b.underline, b.strike, b.background, b.href)


def _span_withText(span: Span, text: str) -> Span:
    return Span(
        text=text, font=span.font, size=span.size, color=span.color,
        underline=span.underline, strike=span.strike,
        background=span.background, href=span.href,
    )


def _word_split(span: Span, width: float, measurer: Measurer) -> List[Span]:
    """Cut a word wider than `width` into pieces that each fit"""
    pieces: List[Span] = []
    current = ""
    for char in span.text:
        candidate = current + char
        if current and measurer.width_get(candidate, span.font, span.size) > width:
            pieces.append(_span_withText(span, current))
            current = char
        else:
            current = candidate
    if current:
        pieces.append(_span_withText(span, current))
    return pieces


def text_cut(text: str, font: str, size: float, width: float, measurer: Measurer) -> List[str]:
    """
    Cut verbatim text into pieces no wider than `width`, keeping whitespace.

    Used for code, where indentation must survive and word boundaries do
    not matter.
    """
    if measurer.width_get(text, font, size) <= width:
        return [text]
    span = Span(text=text, font=font, size=size, color="")
    return [piece.text for piece in _word_split(span, width, measurer)]


def lines_wrap(spans: List[Span], width: float, measurer: Measurer) -> List[Line]:
    """
    Greedy word wrap of styled spans into lines no wider than `width`.

    "\\n" inside a span forces a line break. Leading whitespace of a wrapped
    line is dropped, trailing whitespace is stripped.

    Args:
        spans: Styled text in reading order
        width: Available line width in points
        measurer: Width source

    Returns:
        Lines in order; empty input gives an empty list
    """
    lines: List[Line] = []
    line = Line()
    forced = False

    def line_flush() -> Line:
        line.trailing_strip(measurer)
        lines.append(line)
        return Line()

    for span in spans:
        for piece in _PIECE_SPLIT_RE.split(span.text):
            if not piece:
                continue
            if piece == "\n":
                line = line_flush()
                forced = True
                continue
            piece_span = _span_withText(span, piece)
            piece_width = measurer.width_get(piece, span.font, span.size)
            if piece.isspace():
                if line.fragments:
                    line.append(piece_span, piece_width)
                continue
            if line.fragments and line.width + piece_width > width:
                line = line_flush()
            if piece_width > width:
                # Only reachable on an empty line: the word alone is too wide
                parts = _word_split(piece_span, width, measurer)
                for part in parts[:-1]:
                    line.append(part, measurer.width_get(part.text, part.font, part.size))
                    line = line_flush()
                piece_span = parts[-1]
                piece_width = measurer.width_get(piece_span.text, span.font, span.size)
            line.append(piece_span, piece_width)
            forced = False

    if line.fragments or forced:
        line_flush()
    return lines
