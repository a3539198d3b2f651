"""
Style resolution and settings tests
"""

import pytest
from pydantic import ValidationError

from pagedown.config import AppSettings
from pagedown.lib.styles import DEFAULT_STYLE, style_resolve


class TestStyleResolve:
    """Test merging overrides onto the default style"""

    def test_no_overrides_is_default(self):
        assert style_resolve() is DEFAULT_STYLE
        assert style_resolve({}) is DEFAULT_STYLE

    def test_partial_override_keeps_siblings(self):
        style = style_resolve({"table": {"min_row_height": 30}})
        assert style.table.min_row_height == 30
        assert style.table.padding == DEFAULT_STYLE.table.padding
        assert DEFAULT_STYLE.table.min_row_height == 25

    def test_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_STYLE.table.padding = 8

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            style_resolve({"table": {"colour": "red"}})

    def test_page_geometry(self):
        page = DEFAULT_STYLE.page
        assert page.width == pytest.approx(595.2756, abs=1e-3)
        assert page.height == pytest.approx(841.8898, abs=1e-3)
        assert (page.margin_top, page.margin_right, page.margin_bottom, page.margin_left) == (60, 60, 50, 60)
        assert page.content_width == pytest.approx(page.width - 120)

    def test_heading_tiers(self):
        assert DEFAULT_STYLE.heading_get(1) is DEFAULT_STYLE.h1
        assert DEFAULT_STYLE.heading_get(2) is DEFAULT_STYLE.h2
        assert DEFAULT_STYLE.heading_get(6) is DEFAULT_STYLE.h3


class TestSettings:
    """Test key path construction"""

    def test_key_paths(self):
        settings = AppSettings()
        assert settings.keyPath_make("root", 0) == "root-0"
        assert settings.keyPath_make("root-0", 2, "inline") == "root-0-inline-2"

    def test_custom_separator(self):
        settings = AppSettings(key_separator=".")
        assert settings.keyPath_make("root", 1, "row") == "root.row.1"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("PAGEDOWN_DEFAULT_TEMPLATE", "lecture")
        assert AppSettings().default_template == "lecture"
