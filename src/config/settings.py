"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use PAGEDOWN_ prefix (e.g., PAGEDOWN_DEBUG_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use PAGEDOWN_ prefix.

    Examples:
        PAGEDOWN_KEY_SEPARATOR=.
        PAGEDOWN_THEMES_DIR=/srv/export/themes
        PAGEDOWN_DATE_FORMAT="%d %B %Y"
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGEDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Render identity configuration
    key_separator: str = Field(
        default="-",
        description="Separator joining path segments of block and inline render keys",
    )

    # Template configuration
    themes_dir: Optional[str] = Field(
        default=None,
        description="Directory holding template themes (defaults to the packaged themes/ dir)",
    )

    default_template: str = Field(
        default="default",
        description="Template used for content types without a dedicated template",
    )

    date_format: str = Field(
        default="%B %d, %Y %H:%M",
        description="strftime format for the generation date shown in the header banner",
    )

    # Document info written into the PDF
    pdf_creator: str = Field(default="Trammarise")
    pdf_producer: str = Field(default="Trammarise Audio Transcription")
    pdf_subject: str = Field(default="Audio Transcription and Summary")

    debug_mode: bool = Field(
        default=False,
        description="Log at debug verbosity (level 3) in every context",
    )

    def keyPath_make(self, parent: str, index: int, segment: Optional[str] = None) -> str:
        """
        Derive the render key of a child from its parent's key and position.

        Args:
            parent: Key of the parent node
            index: Zero-based position of the child among its siblings
            segment: Optional label inserted between parent and index

        Returns:
            Key string (e.g., "root-0-inline-2")

        Example:
            >>> settings = AppSettings()
            >>> settings.keyPath_make("root-0", 2, "inline")
            'root-0-inline-2'
        """
        sep = self.key_separator
        if segment:
            return f"{parent}{sep}{segment}{sep}{index}"
        return f"{parent}{sep}{index}"


# Singleton instance - import this in your code
appsettings = AppSettings()
