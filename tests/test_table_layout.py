"""
Table layout engine tests

Tests row measurement, header/row emission, pagination with repeated
headers, ragged rows and error propagation.
"""

import pytest

from pagedown.lib.metrics import MeasurementError, Measurer
from pagedown.lib.styles import DEFAULT_STYLE, style_resolve
from pagedown.lib.table import columnWidth_compute, headerBlock_height, rowHeight_measure, table_render
from pagedown.models.ast import Alignment, TableData
from pagedown.models.document import RectItem, TextItem
from pagedown.models.layout import LayoutState, RenderContext


def context_make(overrides=None):
    style = style_resolve(overrides)
    return RenderContext(style=style, measurer=Measurer()), LayoutState.state_start(style.page)


class TestRowMeasurement:
    """Test row height and column width computation"""

    def test_single_line_row_height(self):
        """A cell fitting on one line is fontSize x 1.15 plus padding above and below"""
        height = rowHeight_measure(["x"], 200, 5, "Helvetica", 11, Measurer())
        assert height == pytest.approx(11 * 1.15 + 2 * 5)

    def test_minimum_row_height_clamps(self):
        """Short rows are never shorter than the configured minimum"""
        height = rowHeight_measure(["x"], 200, 5, "Helvetica", 11, Measurer(), min_row_height=25)
        assert height == 25

    def test_wrapping_cell_adds_lines(self):
        """A cell twice as wide as the column needs at least two lines"""
        measurer = Measurer()
        text = "wide " * 20
        column = measurer.width_get(text, "Helvetica", 11) / 2 + 10
        height = rowHeight_measure([text], column, 5, "Helvetica", 11, measurer)
        assert height >= 2 * 11 * 1.15 + 10

    def test_tallest_cell_wins(self):
        """Row height follows the tallest cell"""
        measurer = Measurer()
        short = rowHeight_measure(["a"], 100, 5, "Helvetica", 11, measurer)
        mixed = rowHeight_measure(["a", "long text " * 10], 100, 5, "Helvetica", 11, measurer)
        assert mixed > short

    def test_column_width_equal_share(self):
        """Columns share the width equally"""
        assert columnWidth_compute(300, 3) == 100
        assert columnWidth_compute(300, 0) == 0

    def test_unknown_font_raises(self):
        """Missing font metrics propagate as MeasurementError"""
        with pytest.raises(MeasurementError):
            rowHeight_measure(["x"], 100, 5, "NoSuchFont-Regular", 11, Measurer())


class TestSmallTables:
    """Test tables that fit on one page"""

    def test_two_by_one_table(self):
        """One header block and one data block on a single page"""
        ctx, state = context_make()
        table = TableData(headers=["A", "B"], rows=[["x", "y"]])
        end = table_render(table, state, ctx)

        doc = state.document
        assert doc.page_count == 1
        assert len(doc.blocks_ofKind("table_header")) == 1
        assert len(doc.blocks_ofKind("table_row")) == 1
        assert doc.blocks_ofKind("table_header")[0].attrs["cells"] == ["A", "B"]
        assert doc.blocks_ofKind("table_row")[0].attrs["cells"] == ["x", "y"]
        assert end == pytest.approx(DEFAULT_STYLE.page.margin_top + 2 * DEFAULT_STYLE.table.min_row_height)

    def test_zero_headers_is_noop(self):
        """No headers draws nothing and leaves the cursor alone"""
        ctx, state = context_make()
        start = state.y
        end = table_render(TableData(headers=[], rows=[["x"]]), state, ctx)
        assert end == start
        assert state.document.blocks_all() == []

    def test_header_has_background(self):
        """Header rows get a filled background across the row"""
        ctx, state = context_make()
        table_render(TableData(headers=["A", "B"], rows=[]), state, ctx)
        header = state.document.blocks_ofKind("table_header")[0]
        background = header.items[0]
        assert isinstance(background, RectItem)
        assert background.fill == DEFAULT_STYLE.table.header_background
        assert background.width == pytest.approx(state.width)

    def test_rows_respect_minimum_height(self):
        """Every emitted row is at least the minimum row height"""
        ctx, state = context_make({"table": {"min_row_height": 30}})
        rows = [["short"], ["a much longer cell " * 8], ["x"]]
        table_render(TableData(headers=["Only"], rows=rows), state, ctx)
        for block in state.document.blocks_ofKind("table_row"):
            assert block.height >= 30

    def test_right_alignment(self):
        """Right-aligned column text ends at the cell's inner right edge"""
        ctx, state = context_make()
        table = TableData(headers=["A", "B"], rows=[["1", "2"]],
                          alignments=[Alignment.LEFT, Alignment.RIGHT])
        table_render(table, state, ctx)
        row = state.document.blocks_ofKind("table_row")[0]
        texts = [item for item in row.items if isinstance(item, TextItem)]
        column = state.width / 2
        right = texts[1]
        assert right.x + right.width == pytest.approx(state.x + 2 * column - DEFAULT_STYLE.table.padding)


class TestRaggedRows:
    """Rows are drawn exactly as given"""

    def test_short_row_draws_fewer_cells(self):
        ctx, state = context_make()
        table_render(TableData(headers=["A", "B", "C"], rows=[["1"]]), state, ctx)
        row = state.document.blocks_ofKind("table_row")[0]
        borders = [item for item in row.items if isinstance(item, RectItem)]
        assert row.attrs["cells"] == ["1"]
        assert len(borders) == 1

    def test_long_row_draws_extra_cells(self):
        ctx, state = context_make()
        table_render(TableData(headers=["A", "B"], rows=[["1", "2", "3"]]), state, ctx)
        row = state.document.blocks_ofKind("table_row")[0]
        borders = [item for item in row.items if isinstance(item, RectItem)]
        assert len(borders) == 3


class TestPagination:
    """Test page breaks and header repetition"""

    def test_two_hundred_rows(self):
        """Long tables span pages, each starting with a fresh header"""
        ctx, state = context_make({"table": {"min_row_height": 35}})
        rows = [[f"row {i}"] for i in range(200)]
        table_render(TableData(headers=["Item"], rows=rows), state, ctx)

        doc = state.document
        assert doc.page_count > 1
        assert len(doc.blocks_ofKind("table_row")) == 200
        for page in doc.pages:
            assert page.blocks[0].kind == "table_header"

    def test_header_count_matches_page_breaks(self):
        """Header renders equal one plus the page breaks taken while drawing"""
        ctx, state = context_make()
        rows = [[f"r{i}", "value"] for i in range(120)]
        table_render(TableData(headers=["Key", "Value"], rows=rows), state, ctx)
        headers = state.document.blocks_ofKind("table_header")
        assert len(headers) == 1 + state.page_breaks

    def test_rows_stay_above_bottom_margin(self):
        """No row is placed past page height minus the bottom margin"""
        ctx, state = context_make()
        rows = [[f"line {i}"] for i in range(150)]
        table_render(TableData(headers=["H"], rows=rows), state, ctx)
        for block in state.document.blocks_all():
            assert block.bottom <= state.limit + 1e-6

    def test_rows_keep_order(self):
        """Data rows appear in input order across pages"""
        ctx, state = context_make()
        rows = [[str(i)] for i in range(90)]
        table_render(TableData(headers=["N"], rows=rows), state, ctx)
        drawn = [block.attrs["cells"][0] for block in state.document.blocks_ofKind("table_row")]
        assert drawn == [str(i) for i in range(90)]

    def test_header_count_when_started_near_bottom(self):
        """Starting low on the page still gives one header per page break taken"""
        ctx, state = context_make()
        state.y = state.limit - 40
        breaks_before = state.page_breaks
        rows = [[f"r{i}"] for i in range(60)]
        table_render(TableData(headers=["A"], rows=rows), state, ctx)
        headers = state.document.blocks_ofKind("table_header")
        assert len(headers) == 1 + (state.page_breaks - breaks_before)
        assert state.document.pages[0].blocks[0].kind == "table_header"

    def test_header_block_height(self):
        """Keep-together height is the header row plus one row footprint"""
        ctx, state = context_make()
        table = TableData(headers=["A", "B"], rows=[["1", "2"]])
        style = ctx.style.table
        header = rowHeight_measure(
            ["A", "B"], state.width / 2, style.padding, style.header_font,
            style.header_font_size, ctx.measurer, style.min_row_height,
        )
        assert headerBlock_height(table, state.width, ctx) == pytest.approx(header + style.row_footprint)

    def test_keys_unique(self):
        """Repeated headers and rows get distinct keys"""
        ctx, state = context_make()
        rows = [[str(i)] for i in range(80)]
        table_render(TableData(headers=["N"], rows=rows), state, ctx, key="t")
        keys = [block.key for block in state.document.blocks_all()]
        assert len(keys) == len(set(keys))
        assert keys[0] == "t-header-0"
        assert keys[1] == "t-row-0"
