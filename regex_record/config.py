"""Configuration management using pydantic-settings."""
import logging
import sys
from functools import lru_cache
from typing import Any, Literal, Optional, TextIO

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from regex_record.models.extraction import FieldNaming, MissingFieldPolicy, NoMatchPolicy


class RegexRecordSettings(BaseSettings):
    """Library settings loaded from environment variables.

    All settings prefixed with REGEX_RECORD_ (e.g., REGEX_RECORD_NO_MATCH=raise)
    """

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level used by configure_logging()"
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON (false = human-readable console output)"
    )

    # Extraction behaviour
    no_match: NoMatchPolicy = Field(
        default=NoMatchPolicy.EMPTY,
        description="Return an empty mapping (empty) or fail (raise) when input does not match"
    )
    field_naming: FieldNaming = Field(
        default=FieldNaming.EXACT,
        description="Match group names to fields exactly or also via snake_case"
    )
    missing_fields: MissingFieldPolicy = Field(
        default=MissingFieldPolicy.ZERO,
        description="Fill required fields without a captured value with a zero value (zero) or fail (error)"
    )
    pattern_cache_size: int = Field(
        default=256,
        ge=0,
        le=100000,
        description="Number of compiled patterns kept in the LRU cache (0 disables caching)"
    )

    model_config = SettingsConfigDict(
        env_prefix="REGEX_RECORD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> RegexRecordSettings:
    """Get cached library settings.

    Settings are read from the environment once; call
    ``get_settings.cache_clear()`` to reload them.
    """
    return RegexRecordSettings()


def configure_logging(
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    stream: TextIO = sys.stderr,
) -> None:
    """Configure structlog for the calling application.

    The library never calls this on import; applications (and the CLI)
    opt in explicitly.

    Args:
        log_level: Overrides settings.log_level
        json_logs: Overrides settings.json_logs
        stream: Where stdlib logging writes to
    """
    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    use_json = settings.json_logs if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", stream=stream, level=level)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if use_json:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
