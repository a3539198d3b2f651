"""
Design tokens and default component styles for rendered documents.

Page geometry, the typography scale and color tokens are module constants.
Component styles are frozen pydantic models; a render resolves one Style by
merging caller overrides onto DEFAULT_STYLE and never mutates it afterwards.

Usage:
    from lib.styles import style_resolve

    style = style_resolve({"table": {"min_row_height": 30}})
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from reportlab.lib.pagesizes import A4


COLORS: Dict[str, str] = {
    "primary": "#0a47c2",
    "text": "#0f172a",
    "text_light": "#64748b",
    "border": "#e2e8f0",
    "background": "#ffffff",
    "background_light": "#f8fafc",
    "link": "#0066cc",
    "muted": "#666666",
    "rule": "#dddddd",
    "code_background": "#f5f5f5",
    "table_border": "#bfbfbf",
    "table_header": "#f0f0f0",
}

FONT_SIZES: Dict[str, float] = {
    "h1": 24,
    "h2": 18,
    "h3": 14,
    "body": 11,
    "caption": 9,
    "small": 8,
}

# Table rows use a fixed line height factor, independent of paragraph leading
TABLE_LINE_HEIGHT = 1.15


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class PageStyle(_Frozen):
    """Fixed page geometry in points"""
    width: float = A4[0]
    height: float = A4[1]
    margin_top: float = 60
    margin_right: float = 60
    margin_bottom: float = 50
    margin_left: float = 60

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_bottom(self) -> float:
        return self.height - self.margin_bottom


class FontFamily(_Frozen):
    """Font names for each style variant (must be known to reportlab)"""
    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    italic: str = "Helvetica-Oblique"
    bold_italic: str = "Helvetica-BoldOblique"
    mono: str = "Courier"

    def font_select(self, bold: bool = False, italic: bool = False) -> str:
        if bold and italic:
            return self.bold_italic
        if bold:
            return self.bold
        if italic:
            return self.italic
        return self.regular


class ParagraphStyle(_Frozen):
    size: float = FONT_SIZES["body"]
    line_height: float = 1.6
    color: str = COLORS["text"]
    margin_bottom: float = 8


class HeadingStyle(_Frozen):
    size: float
    margin_top: float
    margin_bottom: float
    color: str = COLORS["text"]
    line_height: float = 1.2
    border_width: float = 0
    border_color: str = COLORS["rule"]
    padding_bottom: float = 0


class ListStyle(_Frozen):
    indent: float = 15
    gutter: float = 20
    item_spacing: float = 4
    bullet: str = "•"


class TableStyle(_Frozen):
    padding: float = 5
    min_row_height: float = 25
    row_footprint: float = 60
    header_background: str = COLORS["background_light"]
    body_background: str = COLORS["background"]
    border_color: str = COLORS["border"]
    border_width: float = 0.5
    header_font: str = "Helvetica-Bold"
    header_font_size: float = FONT_SIZES["body"]
    body_font: str = "Helvetica"
    body_font_size: float = FONT_SIZES["body"]
    text_color: str = COLORS["text"]
    margin_vertical: float = 10


class BlockquoteStyle(_Frozen):
    indent: float = 15
    border_width: float = 3
    border_color: str = COLORS["muted"]
    padding_left: float = 10
    margin_vertical: float = 8


class CodeStyle(_Frozen):
    size: float = 9
    line_height: float = 1.3
    background: str = COLORS["code_background"]
    padding: float = 10
    margin_vertical: float = 8
    color: str = COLORS["text"]


class RuleStyle(_Frozen):
    color: str = COLORS["rule"]
    width: float = 1
    margin_vertical: float = 10


class InlineStyle(_Frozen):
    link_color: str = COLORS["link"]
    code_size: float = 10
    code_background: str = COLORS["code_background"]


class TemplateStyle(_Frozen):
    """Banner, highlight box, section titles, disclaimer and footer chrome"""
    line_height: float = 1.2
    label_size: float = 10
    title_size: float = FONT_SIZES["h1"]
    title_color: str = "#1a1a1a"
    metadata_size: float = 10
    metadata_color: str = COLORS["muted"]
    banner_margin_bottom: float = 20
    highlight_background: str = "#f8f9fa"
    highlight_padding: float = 10
    highlight_title_size: float = 11
    highlight_text_size: float = 10
    highlight_line_height: float = 1.4
    section_title_size: float = FONT_SIZES["h3"]
    section_title_color: str = "#444444"
    section_rule_color: str = "#eeeeee"
    section_margin_top: float = 20
    section_margin_bottom: float = 10
    disclaimer_size: float = FONT_SIZES["caption"]
    disclaimer_color: str = COLORS["text_light"]
    disclaimer_line_height: float = 1.4
    footer_size: float = FONT_SIZES["caption"]
    footer_color: str = "#999999"
    footer_rule_color: str = "#eeeeee"
    footer_offset: float = 30


class Style(_Frozen):
    """
    Complete set of tokens for one render.

    Attributes:
        page: Page geometry
        fonts: Font family variants
        paragraph: Body text
        h1, h2, h3: The three heading tiers (deeper headings use h3)
        lists: List gutter and bullet
        table: Table engine tokens
        blockquote, code, rule: Container blocks
        inline: Inline run colors and code styling
        template: Export chrome around the rendered content
    """
    page: PageStyle = PageStyle()
    fonts: FontFamily = FontFamily()
    paragraph: ParagraphStyle = ParagraphStyle()
    h1: HeadingStyle = HeadingStyle(
        size=20, margin_top=15, margin_bottom=10,
        border_width=1, padding_bottom=5,
    )
    h2: HeadingStyle = HeadingStyle(size=16, margin_top=12, margin_bottom=8)
    h3: HeadingStyle = HeadingStyle(size=14, margin_top=10, margin_bottom=6)
    lists: ListStyle = ListStyle()
    table: TableStyle = TableStyle()
    blockquote: BlockquoteStyle = BlockquoteStyle()
    code: CodeStyle = CodeStyle()
    rule: RuleStyle = RuleStyle()
    inline: InlineStyle = InlineStyle()
    template: TemplateStyle = TemplateStyle()

    def heading_get(self, depth: int) -> HeadingStyle:
        """Heading tier for a depth; anything deeper than 3 uses tier 3"""
        if depth <= 1:
            return self.h1
        if depth == 2:
            return self.h2
        return self.h3


DEFAULT_STYLE = Style()


def _dict_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _dict_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def style_resolve(
    overrides: Optional[Dict[str, Any]] = None,
    base: Style = DEFAULT_STYLE,
) -> Style:
    """
    Merge partial overrides onto a base style.

    Nested dicts merge field by field, so {"table": {"padding": 8}} keeps
    every other table token. Unknown keys and bad values raise
    pydantic.ValidationError.

    Args:
        overrides: Partial style as nested dicts
        base: Style to merge onto (DEFAULT_STYLE by default)

    Returns:
        New frozen Style
    """
    if not overrides:
        return base
    return Style.model_validate(_dict_merge(base.model_dump(), overrides))
