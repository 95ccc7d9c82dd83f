"""Error handling module."""
from regex_record.errors.exceptions import (
    RegexRecordError,
    PatternError,
    NoMatchError,
    ConversionError,
    NotSupportedError,
)

__all__ = [
    "RegexRecordError",
    "PatternError",
    "NoMatchError",
    "ConversionError",
    "NotSupportedError",
]
