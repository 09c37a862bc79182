"""Configuration management for readpub using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from readpub.utils.logging import resolve_level

# pandoc writer name -> output file extension
OUTPUT_FORMATS: dict[str, str] = {
    "epub": "epub",
    "epub2": "epub",
    "epub3": "epub",
    "fb2": "fb2",
    "docx": "docx",
    "odt": "odt",
    "html": "html",
}

DEFAULT_STYLESHEET = Path(__file__).resolve().parent / "static" / "eink-optimized.css"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # File system settings
    output_dir: Path = Field(
        default=Path("epubs"),
        description="Shared directory for generated e-book files",
    )
    workspaces_dir: Path = Field(
        default=Path("workspaces"),
        description="Root directory holding one workspace per document",
    )
    write_raw_metadata: bool = Field(
        default=True,
        description="Also dump every extracted metadata field to metadata-raw.yaml",
    )

    # Converter settings
    pandoc_cmd: str = Field(
        default="pandoc",
        description="Path to pandoc binary",
    )
    output_format: str = Field(
        default="epub2",
        description="pandoc output format (epub, epub2, epub3, fb2, docx, odt, html)",
    )
    stylesheet_path: Path | None = Field(
        default=None,
        description="CSS passed to pandoc (defaults to the bundled e-ink stylesheet)",
    )
    conversion_timeout: float | None = Field(
        default=300.0,
        description="Seconds to wait for pandoc before giving up (unset for no limit)",
    )

    # Fetch settings
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for direct HTTP fetches",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0",
        description="User-Agent header sent by direct fetches",
    )
    browser_headless: bool = Field(
        default=True,
        description="Run the profile browser without a window",
    )
    navigation_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for browser page navigation",
    )

    # Extraction settings
    min_text_length: int = Field(
        default=140,
        description="Minimum characters of article text for a page to count as readable",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    environment: str = Field(
        default="development",
        description="Environment (development or production)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output format is one pandoc writer we know an extension for."""
        v = v.lower()
        if v not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output_format: {v}. Allowed values: {', '.join(OUTPUT_FORMATS)}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        v = v.upper()
        resolve_level(v)
        return v

    @property
    def output_extension(self) -> str:
        """File extension of generated e-books for the configured format."""
        return OUTPUT_FORMATS[self.output_format]

    @property
    def stylesheet(self) -> Path:
        """Stylesheet handed to the converter."""
        return self.stylesheet_path or DEFAULT_STYLESHEET


# Global settings instance
settings = Settings()
