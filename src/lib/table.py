"""
Table layout engine

Lays out a header row and data rows with content-driven row heights and
automatic pagination. Columns share the available width equally. Before
each data row the engine checks whether the row still fits above the bottom
margin; if not it starts a new page and redraws the header there, so a
table draws exactly one header more than the page breaks it takes.

Rows are drawn exactly as given: a row shorter than the header draws fewer
cells, a longer one draws cells past the last column.
"""

import math
from typing import List

from ..config import appsettings
from ..models.ast import Alignment, TableData
from ..models.document import Block, RectItem, Span, TextItem
from ..models.layout import LayoutState, RenderContext
from .log import LOG
from .metrics import Measurer, lines_wrap
from .styles import TABLE_LINE_HEIGHT


def columnWidth_compute(total_width: float, header_count: int) -> float:
    """Equal share of `total_width` per column; 0 when there are no columns"""
    if header_count <= 0:
        return 0.0
    return total_width / header_count


def rowHeight_measure(
    cells: List[str],
    column_width: float,
    padding: float,
    font: str,
    font_size: float,
    measurer: Measurer,
    min_row_height: float = 0.0,
) -> float:
    """
    Height of a row from the measured width of its cells.

    Each cell needs ceil(text width / usable column width) lines of
    font_size * 1.15; the row is as tall as its tallest cell plus padding
    above and below, and never shorter than `min_row_height`.

    Raises:
        MeasurementError: If the font has no metrics
    """
    usable = max(column_width - 2 * padding, 1.0)
    line_height = font_size * TABLE_LINE_HEIGHT
    tallest = 0.0
    for cell in cells:
        lines = math.ceil(measurer.width_get(cell, font, font_size) / usable)
        tallest = max(tallest, lines * line_height)
    return max(tallest + 2 * padding, min_row_height)


def baseline_get(top: float, line_height: float, size: float) -> float:
    """Baseline of a line of `size` text vertically centred in `line_height`"""
    return top + (line_height - size) / 2 + size * 0.8


def row_render(
    cells: List[str],
    state: LayoutState,
    ctx: RenderContext,
    column_width: float,
    table: TableData,
    key: str,
    header: bool = False,
) -> float:
    """
    Draw one row at the cursor and advance it.

    Header rows get a background across the row; every cell gets a border
    and its text, wrapped to the cell and aligned per column. Text that
    needs more lines than the measured height allows is clipped.

    Returns:
        Cursor y after the row (cursorY + rowHeight)
    """
    style = ctx.style.table
    font = style.header_font if header else style.body_font
    size = style.header_font_size if header else style.body_font_size
    height = rowHeight_measure(
        cells, column_width, style.padding, font, size, ctx.measurer, style.min_row_height
    )
    x0, y0 = state.x, state.y
    usable = max(column_width - 2 * style.padding, 1.0)
    line_height = size * TABLE_LINE_HEIGHT
    max_lines = max(1, int((height - 2 * style.padding + 1e-6) // line_height))

    items = []
    if header:
        items.append(RectItem(
            x=x0, y=y0, width=column_width * len(cells), height=height,
            fill=style.header_background, stroke=style.border_color,
            line_width=style.border_width,
        ))

    for column, cell in enumerate(cells):
        cell_x = x0 + column * column_width
        items.append(RectItem(
            x=cell_x, y=y0, width=column_width, height=height,
            fill=None if header else style.body_background,
            stroke=style.border_color, line_width=style.border_width,
        ))
        alignment = Alignment.LEFT if header else table.alignment_get(column)
        lines = lines_wrap(
            [Span(text=cell, font=font, size=size, color=style.text_color)],
            usable, ctx.measurer,
        )
        for index, line in enumerate(lines[:max_lines]):
            if alignment == Alignment.CENTER:
                offset = (usable - line.width) / 2
            elif alignment == Alignment.RIGHT:
                offset = usable - line.width
            else:
                offset = 0.0
            baseline = baseline_get(y0 + style.padding + index * line_height, line_height, size)
            fragment_x = cell_x + style.padding + offset
            for span, width in zip(line.fragments, line.widths):
                items.append(TextItem(
                    x=fragment_x, y=baseline, text=span.text, font=span.font,
                    size=span.size, color=span.color, width=width,
                ))
                fragment_x += width

    state.block_place(Block(
        kind="table_header" if header else "table_row",
        key=key, x=x0, y=y0,
        width=column_width * len(cells), height=height,
        items=items,
        attrs={"cells": list(cells)},
    ))
    state.y = y0 + height
    return state.y


def headerBlock_height(table: TableData, width: float, ctx: RenderContext) -> float:
    """Space the header needs together with one row footprint beneath it"""
    style = ctx.style.table
    column_width = columnWidth_compute(width, len(table.headers))
    header_height = rowHeight_measure(
        table.headers, column_width, style.padding, style.header_font,
        style.header_font_size, ctx.measurer, style.min_row_height,
    )
    return header_height + style.row_footprint


def table_render(
    table: TableData,
    state: LayoutState,
    ctx: RenderContext,
    key: str = "table",
) -> float:
    """
    Lay out a whole table at the cursor across the current column width.

    With zero headers nothing is drawn and the cursor is returned unchanged.
    The header is drawn where the cursor stands; keeping it on the same page
    as the first row is left to the caller (see `headerBlock_height`).

    Args:
        table: Header and rows to draw
        state: Cursor, advanced past the table
        ctx: Style and measurer
        key: Key prefix for the emitted row blocks

    Returns:
        Cursor y after the last row
    """
    style = ctx.style.table
    headers = table.headers
    if not headers:
        LOG(f"Table {key} has no header cells, nothing to draw", level=2)
        return state.y

    column_width = columnWidth_compute(state.width, len(headers))
    header_count = 0
    row_render(headers, state, ctx, column_width, table,
               appsettings.keyPath_make(key, header_count, "header"), header=True)

    for index, row in enumerate(table.rows):
        row_height = rowHeight_measure(
            row, column_width, style.padding, style.body_font,
            style.body_font_size, ctx.measurer, style.min_row_height,
        )
        if state.y + max(style.row_footprint, row_height) > state.limit:
            state.page_break()
            header_count += 1
            LOG(f"Table {key}: page break before row {index}, header repeated", level=2)
            row_render(headers, state, ctx, column_width, table,
                       appsettings.keyPath_make(key, header_count, "header"), header=True)
        row_render(row, state, ctx, column_width, table,
                   appsettings.keyPath_make(key, index, "row"))

    return state.y
