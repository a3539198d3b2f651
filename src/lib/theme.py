"""
Theme loader for export templates.

Each template (default, meeting, lecture, interview) has a theme: a
directory holding a theme.yaml with the banner text, accent color, section
titles, footer format, optional extracted sections and style overrides.

Themes ship inside the package under themes/; PAGEDOWN_THEMES_DIR points
the loader at another directory.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union

from ..config import appsettings


REQUIRED_KEYS: tuple = ("title", "sections.summary", "sections.transcript", "footer")


class ThemeError(Exception):
    """Raised when theme loading or validation fails"""
    pass


def themesDir_get() -> Path:
    """Configured themes directory, or the one packaged with pagedown"""
    if appsettings.themes_dir:
        return Path(appsettings.themes_dir)
    return Path(__file__).parent.parent / "themes"


class Theme:
    """
    Represents one template's theme.

    A theme consists of:
      - Banner configuration (label, title, metadata lines, border)
      - Section titles and optional extracted sections
      - Footer format with {page} / {total} placeholders
      - Style overrides merged onto the default style
    """

    def __init__(self, theme_name: str, themes_dir: Optional[Union[str, Path]] = None):
        """
        Load a theme by name.

        Args:
            theme_name: Name of the theme directory (e.g., "default", "meeting")
            themes_dir: Path to themes directory (default: configured/packaged dir)

        Raises:
            ThemeError: If theme directory or theme.yaml don't exist
        """
        self.name = theme_name
        self.themes_dir = Path(themes_dir) if themes_dir else themesDir_get()
        self.theme_dir = self.themes_dir / theme_name

        if not self.theme_dir.exists():
            raise ThemeError(
                f"Theme '{theme_name}' not found. "
                f"Expected directory: {self.theme_dir}"
            )

        self.config_path = self.theme_dir / "theme.yaml"
        if not self.config_path.exists():
            raise ThemeError(
                f"Theme '{theme_name}' missing theme.yaml"
            )

        self.config = self._config_load()

    def _config_load(self) -> Dict[str, Any]:
        """Load and parse theme.yaml"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ThemeError(f"Failed to parse theme.yaml: {e}") from e
        except OSError as e:
            raise ThemeError(f"Failed to load theme.yaml: {e}") from e
        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ThemeError(f"Theme '{self.name}': theme.yaml must hold a mapping")
        return config

    def config_get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from theme.yaml.

        Supports nested keys with dot notation:
          theme.config_get('banner.accent', '#333333')

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if key doesn't exist

        Returns:
            Configuration value or default
        """
        keys: list[str] = key.split('.')
        value: Any = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def styleOverrides_get(self) -> Dict[str, Any]:
        """Partial style merged onto the default style for this template"""
        return self.config_get('style', {}) or {}

    def extract_enabled(self, section: str) -> bool:
        """Whether an extracted section (key_points, action_items, topics) is on"""
        return bool(self.config_get(f'extract.{section}', False))

    def __repr__(self) -> str:
        return f"Theme(name='{self.name}', path='{self.theme_dir}')"


def themes_listAvailable(themes_dir: Optional[Union[str, Path]] = None) -> list[str]:
    """
    List all available theme names.

    Args:
        themes_dir: Path to themes directory

    Returns:
        List of theme names (directory names with valid theme.yaml)
    """
    themes_path: Path = Path(themes_dir) if themes_dir else themesDir_get()

    if not themes_path.exists():
        return []

    themes: list[str] = []
    for item in themes_path.iterdir():
        if item.is_dir():
            if (item / "theme.yaml").exists():
                themes.append(item.name)

    return sorted(themes)


def theme_validate(theme_name: str, themes_dir: Optional[Union[str, Path]] = None) -> tuple[bool, str]:
    """
    Validate a theme's structure and configuration.

    Args:
        theme_name: Name of theme to validate
        themes_dir: Path to themes directory

    Returns:
        Tuple of (is_valid, message)
    """
    try:
        theme: Theme = Theme(theme_name, themes_dir)

        if not theme.config:
            return False, f"Theme '{theme_name}' has empty configuration"

        missing = [key for key in REQUIRED_KEYS if theme.config_get(key) is None]
        if missing:
            return False, f"Theme '{theme_name}' is missing: {', '.join(missing)}"

        return True, f"Theme '{theme_name}' is valid"

    except ThemeError as e:
        return False, str(e)
