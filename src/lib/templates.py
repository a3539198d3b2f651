"""
Template dispatcher

Maps a content type onto one of four themed templates and composes the
whole export: header banner, optional highlight box, the rendered summary,
optional extracted sections, the transcript, an optional disclaimer and a
footer on every page.

The content type mapping is total: anything not listed (including an empty
or unknown type) resolves to the default template.

Example:
    >>> dispatcher = TemplateDispatcher()
    >>> doc = dispatcher.compose(
    ...     "# Summary\\n\\n- Ship the release",
    ...     "Alice: hello\\n\\nBob: hi",
    ...     {"contentType": "meeting", "modelId": "whisper-1"},
    ... )
    >>> doc.blocks_ofKind("banner")[0].attrs["template"]
    'meeting'
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config import appsettings
from ..models.ast import MdNode, NodeKind
from ..models.document import Block, RectItem, RenderedDocument, RuleItem, Span, TextItem
from ..models.layout import LayoutState, RenderContext
from .extract import (
    actionItems_extract,
    contentType_format,
    disclaimer_get,
    keyPoints_extract,
    topics_extract,
)
from .log import LOG
from .metrics import MeasurementError, Measurer, lines_wrap
from .parser import MarkdownParser
from .styles import style_resolve
from .theme import Theme, ThemeError
from .tree import TreeRenderer, lines_items


TEMPLATE_MAP: Dict[str, str] = {
    "meeting": "meeting",
    "daily-stand-up": "meeting",
    "focus-group": "meeting",
    "lecture": "lecture",
    "interview": "interview",
    "podcast": "interview",
}

# Extracted sections in display order: theme flag, title, extractor
EXTRACTED_SECTIONS = [
    ("key_points", "Key Points", keyPoints_extract),
    ("action_items", "Action Items", actionItems_extract),
    ("topics", "Topics Covered", topics_extract),
]

_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")


class ExportError(Exception):
    """Raised when a document cannot be composed; no partial output exists"""
    pass


class ExportMetadata(BaseModel):
    """
    Metadata shown in the banner and written to the document info.

    Accepts snake_case names or the camelCase keys used by callers
    (contentType, modelId, fileName, generatedAt).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content_type: str = "other"
    model_id: str = ""
    file_name: Optional[str] = None
    generated_at: datetime = Field(default_factory=datetime.now)


def template_resolve(content_type: Optional[str]) -> str:
    """Template name for a content type; unknown types get the default template"""
    return TEMPLATE_MAP.get((content_type or "").strip().lower(), appsettings.default_template)


class TemplateDispatcher:
    """
    Composes a themed document from summary Markdown and transcript text.

    One dispatcher can compose any number of documents; every call builds
    its own style, cursor and document.
    """

    def __init__(
        self,
        themes_dir: Optional[Union[str, Path]] = None,
        measurer: Optional[Measurer] = None,
    ) -> None:
        self.themes_dir = themes_dir
        self.measurer = measurer or Measurer()

    def compose(
        self,
        summary: str,
        transcript: str,
        metadata: Union[ExportMetadata, Dict[str, Any]],
        style_overrides: Optional[Dict[str, Any]] = None,
    ) -> RenderedDocument:
        """
        Compose the complete paginated document.

        Args:
            summary: Summary in Markdown
            transcript: Plain transcript text, paragraphs split on blank lines
            metadata: ExportMetadata or a dict with its (camelCase) keys
            style_overrides: Partial style merged over the template's style

        Returns:
            RenderedDocument with a footer on every page

        Raises:
            ExportError: If a theme cannot be loaded or text cannot be measured
            pydantic.ValidationError: If metadata or style overrides are invalid
        """
        if not isinstance(metadata, ExportMetadata):
            metadata = ExportMetadata.model_validate(metadata)

        template = template_resolve(metadata.content_type)
        LOG(f"Resolved template '{template}' for content type '{metadata.content_type}'", level=2)

        try:
            theme = Theme(template, self.themes_dir)
            style = style_resolve(theme.styleOverrides_get())
            style = style_resolve(style_overrides, base=style)
            ctx = RenderContext(style=style, measurer=self.measurer)
            state = LayoutState.state_start(style.page)
            tree = TreeRenderer(ctx)

            self.banner_render(theme, template, metadata, state, ctx)
            self.highlight_render(theme, state, ctx)
            self.summary_render(summary, theme, state, ctx, tree)
            self.extracted_render(summary, theme, state, ctx, tree)
            self.transcript_render(transcript, theme, state, ctx, tree)
            self.disclaimer_render(metadata.content_type, state, ctx, tree)
            self.footers_render(theme, state, ctx)
        except (ThemeError, MeasurementError) as e:
            raise ExportError(f"Export with template '{template}' failed: {e}") from e

        document = state.document
        document.title = metadata.file_name or theme.config_get("title", "")
        document.author = metadata.model_id
        document.subject = appsettings.pdf_subject
        document.creator = appsettings.pdf_creator
        document.producer = appsettings.pdf_producer
        LOG(f"Composed {document.page_count} page(s) with template '{template}'", level=2)
        return document

    # ------------------------------------------------------------------
    # Sections

    def banner_render(
        self,
        theme: Theme,
        template: str,
        metadata: ExportMetadata,
        state: LayoutState,
        ctx: RenderContext,
    ) -> None:
        """Label, title and metadata lines above a solid or dashed bottom border"""
        style = ctx.style
        chrome = style.template
        accent = theme.config_get("banner.accent", "#333333")
        label = theme.config_get("banner.label")
        title = metadata.file_name or theme.config_get("title", "")
        values = {
            "date": metadata.generated_at.strftime(appsettings.date_format),
            "type": contentType_format(metadata.content_type),
            "model": metadata.model_id or "Unknown",
        }
        meta_lines = [
            line.replace("{date}", values["date"])
                .replace("{type}", values["type"])
                .replace("{model}", values["model"])
            for line in theme.config_get("banner.metadata", []) or []
        ]

        top = state.y
        items: List[Any] = []
        if label:
            state.y = self.text_add(items, label, style.fonts.bold, chrome.label_size, accent, state, ctx)
            state.y += 4
        state.y = self.text_add(
            items, title, style.fonts.bold, chrome.title_size, chrome.title_color, state, ctx
        )
        state.y += 6
        for line in meta_lines:
            state.y = self.text_add(
                items, line, style.fonts.regular, chrome.metadata_size, chrome.metadata_color, state, ctx
            )
        state.y += 10

        border_width = float(theme.config_get("banner.border_width", 2))
        items.append(RuleItem(
            x1=state.x, y1=state.y, x2=state.x + state.width, y2=state.y,
            color=accent, width=border_width,
            dashed=theme.config_get("banner.border") == "dashed",
        ))
        state.block_place(Block(
            kind="banner", key="banner", x=state.x, y=top,
            width=state.width, height=state.y + border_width - top, items=items,
            attrs={"template": template, "label": label, "title": title, "metadata": meta_lines},
        ))
        state.y += border_width + chrome.banner_margin_bottom

    def highlight_render(self, theme: Theme, state: LayoutState, ctx: RenderContext) -> None:
        """Shaded box with a title and a short note (lecture study guide)"""
        highlight = theme.config_get("highlight")
        if not highlight:
            return
        style = ctx.style
        chrome = style.template
        padding = chrome.highlight_padding
        inner = max(state.width - 2 * padding, 1.0)
        title_lines = lines_wrap(
            [Span(text=highlight.get("title", ""), font=style.fonts.bold,
                  size=chrome.highlight_title_size, color=chrome.title_color)],
            inner, ctx.measurer,
        )
        text_lines = lines_wrap(
            [Span(text=highlight.get("text", ""), font=style.fonts.regular,
                  size=chrome.highlight_text_size, color=chrome.metadata_color)],
            inner, ctx.measurer,
        )
        title_step = chrome.highlight_title_size * chrome.highlight_line_height
        text_step = chrome.highlight_text_size * chrome.highlight_line_height
        title_height = len(title_lines) * title_step
        height = 2 * padding + title_height + len(text_lines) * text_step
        state.space_ensure(height)

        items: List[Any] = [RectItem(
            x=state.x, y=state.y, width=state.width, height=height,
            fill=chrome.highlight_background, stroke=None,
        )]
        items.extend(lines_items(title_lines, state.x + padding, state.y + padding, title_step))
        items.extend(lines_items(text_lines, state.x + padding, state.y + padding + title_height, text_step))
        state.block_place(Block(
            kind="highlight", key="highlight", x=state.x, y=state.y,
            width=state.width, height=height, items=items,
            attrs={"title": highlight.get("title", "")},
        ))
        state.y += height

    def sectionTitle_render(
        self, title: str, key: str, state: LayoutState, ctx: RenderContext, color: Optional[str] = None
    ) -> None:
        """Uppercase section title over a thin rule"""
        chrome = ctx.style.template
        size = chrome.section_title_size
        line_height = size * chrome.line_height
        height = line_height + 4
        if not state.at_top:
            state.y += chrome.section_margin_top
        # Keep the title with at least one line of what follows
        state.space_ensure(
            height + chrome.section_margin_bottom
            + ctx.style.paragraph.size * ctx.style.paragraph.line_height
        )
        lines = lines_wrap(
            [Span(text=title.upper(), font=ctx.style.fonts.bold, size=size,
                  color=color or chrome.section_title_color)],
            state.width, ctx.measurer,
        )
        items: List[Any] = lines_items(lines[:1], state.x, state.y, line_height)
        items.append(RuleItem(
            x1=state.x, y1=state.y + height, x2=state.x + state.width, y2=state.y + height,
            color=chrome.section_rule_color, width=1,
        ))
        state.block_place(Block(
            kind="section_title", key=key, x=state.x, y=state.y,
            width=state.width, height=height, items=items, attrs={"title": title},
        ))
        state.y += height + chrome.section_margin_bottom

    def summary_render(
        self, summary: str, theme: Theme, state: LayoutState, ctx: RenderContext, tree: TreeRenderer
    ) -> None:
        if not (summary or "").strip():
            return
        color = theme.config_get("banner.accent") if theme.config_get("sections.summary_accent") else None
        self.sectionTitle_render(
            theme.config_get("sections.summary", "Summary"), "summary-title", state, ctx, color
        )
        tree.render(MarkdownParser(summary).parse(), state, key="summary")

    def extracted_render(
        self, summary: str, theme: Theme, state: LayoutState, ctx: RenderContext, tree: TreeRenderer
    ) -> None:
        """Key points, action items and topics, each only when enabled and non-empty"""
        for flag, title, extractor in EXTRACTED_SECTIONS:
            if not theme.extract_enabled(flag):
                continue
            found = extractor(summary or "")
            LOG(f"Extracted {len(found)} item(s) for '{flag}'", level=3)
            if not found:
                continue
            key = flag.replace("_", "")
            self.sectionTitle_render(title, f"{key}-title", state, ctx)
            tree.render(items_toList(found), state, key=key)

    def transcript_render(
        self, transcript: str, theme: Theme, state: LayoutState, ctx: RenderContext, tree: TreeRenderer
    ) -> None:
        paragraphs = [p.strip() for p in _PARAGRAPH_SPLIT_RE.split(transcript or "") if p.strip()]
        if not paragraphs:
            return
        self.sectionTitle_render(
            theme.config_get("sections.transcript", "Transcript"), "transcript-title", state, ctx
        )
        root = MdNode(kind=NodeKind.ROOT.value, children=[
            MdNode(kind=NodeKind.PARAGRAPH.value, children=[
                MdNode(kind=NodeKind.TEXT.value, value=text)
            ])
            for text in paragraphs
        ])
        tree.render(root, state, key="transcript")

    def disclaimer_render(
        self, content_type: str, state: LayoutState, ctx: RenderContext, tree: TreeRenderer
    ) -> None:
        text = disclaimer_get(content_type)
        if not text:
            return
        chrome = ctx.style.template
        size = chrome.disclaimer_size
        lines = lines_wrap(
            [Span(text=text, font=ctx.style.fonts.italic, size=size, color=chrome.disclaimer_color)],
            state.width, ctx.measurer,
        )
        if not state.at_top:
            state.y += chrome.section_margin_top
        tree.lines_place(lines, state, "disclaimer", "disclaimer", size * chrome.disclaimer_line_height)

    def footers_render(self, theme: Theme, state: LayoutState, ctx: RenderContext) -> None:
        """Footer on every page, with {page} and {total} filled in"""
        page_style = ctx.style.page
        chrome = ctx.style.template
        size = chrome.footer_size
        height = size * 1.6
        top = page_style.height - chrome.footer_offset - height
        total = state.document.page_count
        footer_format = theme.config_get("footer", "{page} / {total}")
        for page in state.document.pages:
            text = footer_format.replace("{page}", str(page.index + 1)).replace("{total}", str(total))
            width = ctx.measurer.width_get(text, ctx.style.fonts.regular, size)
            x = page_style.margin_left + (page_style.content_width - width) / 2
            page.blocks.append(Block(
                kind="footer",
                key=appsettings.keyPath_make("footer", page.index),
                x=page_style.margin_left, y=top,
                width=page_style.content_width, height=height,
                items=[
                    RuleItem(
                        x1=page_style.margin_left, y1=top,
                        x2=page_style.margin_left + page_style.content_width, y2=top,
                        color=chrome.footer_rule_color, width=1,
                    ),
                    TextItem(
                        x=x, y=top + height - 2, text=text, font=ctx.style.fonts.regular,
                        size=size, color=chrome.footer_color, width=width,
                    ),
                ],
                attrs={"text": text},
            ))

    # ------------------------------------------------------------------
    # Helpers

    def text_add(
        self,
        items: List[Any],
        text: str,
        font: str,
        size: float,
        color: str,
        state: LayoutState,
        ctx: RenderContext,
    ) -> float:
        """Wrap `text` at the cursor into `items`; returns the y below it"""
        line_height = size * ctx.style.template.line_height
        lines = lines_wrap([Span(text=text, font=font, size=size, color=color)], state.width, ctx.measurer)
        items.extend(lines_items(lines, state.x, state.y, line_height))
        return state.y + len(lines) * line_height


def items_toList(items: List[str]) -> MdNode:
    """Bullet list node holding one plain paragraph per item"""
    return MdNode(kind=NodeKind.LIST.value, ordered=False, children=[
        MdNode(kind=NodeKind.LIST_ITEM.value, children=[
            MdNode(kind=NodeKind.PARAGRAPH.value, children=[
                MdNode(kind=NodeKind.TEXT.value, value=item)
            ])
        ])
        for item in items
    ])
