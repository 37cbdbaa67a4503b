"""
Pydantic settings models for term-intel.

All configuration is defined here with defaults suited to a local
Ollama server and a single search request per query.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class LLMSettings(BaseModel):
    """Generative model (Ollama) configuration."""

    base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL of the Ollama server",
    )
    model: str = Field(
        default="llama3.2:latest",
        min_length=1,
        description="Model identifier used for synthesis",
    )
    timeout_seconds: float = Field(
        default=120.0,
        ge=1.0,
        le=1800.0,
        description="Read timeout for streamed model responses",
    )
    num_ctx: int | None = Field(
        default=None,
        ge=512,
        le=262144,
        description="Context window passed to the model. None uses the model default.",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended."""
        return v.rstrip("/")


class SearchSettings(BaseModel):
    """Web search configuration."""

    limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of search results requested",
    )
    language: str | None = Field(
        default=None,
        description="Interface language hint (hl). None derives it from the current locale.",
    )
    user_agent: str | None = Field(
        default=None,
        description="Custom user agent string. None uses the httpx default.",
    )


class KeywordSettings(BaseModel):
    """Keyword extraction configuration."""

    strategy: Literal["rule", "llm"] = Field(
        default="rule",
        description="Keyword extractor to use",
    )
    max_keywords: int = Field(
        default=8,
        ge=1,
        le=32,
        description="Maximum number of keywords passed to the search",
    )


class LoggingSettings(BaseModel):
    """Package log output, used by setup_logging()."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Level for the package logger and its handlers",
    )
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="logging.Formatter format string",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="logging.Formatter date format",
    )
    file_path: Path | None = Field(
        default=None,
        description="Rotating log file. None disables file output.",
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Size in MB at which the log file rotates",
    )
    backup_count: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Rotated files kept alongside the log file",
    )
    log_to_console: bool = Field(
        default=True,
        description="Also log to stderr",
    )

    @field_validator("file_path", mode="before")
    @classmethod
    def expand_user(cls, v: str | Path | None) -> Path | None:
        """Accept "~/..." paths from YAML and the environment."""
        return Path(v).expanduser() if v else None


class Settings(BaseModel):
    """
    Everything term-intel reads from configuration, one section per concern.

    Built by load_config() from defaults, YAML and TERM_INTEL__* variables.
    """

    llm: LLMSettings = Field(
        default_factory=LLMSettings,
        description="Generative model settings",
    )
    search: SearchSettings = Field(
        default_factory=SearchSettings,
        description="Web search settings",
    )
    keywords: KeywordSettings = Field(
        default_factory=KeywordSettings,
        description="Keyword extraction settings",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Log output settings",
    )

    model_config = {
        "extra": "forbid",
        "validate_default": True,
    }
