"""Custom exception hierarchy for pattern extraction errors."""
from typing import Any, Dict, List, Optional


class RegexRecordError(Exception):
    """Base exception for all regex-record errors."""

    def __init__(self, message: str, *args, **kwargs):
        """Initialize error with message."""
        self.message = message
        super().__init__(message, *args, **kwargs)


class PatternError(RegexRecordError):
    """Raised when a pattern cannot be compiled by the regex engine."""

    def __init__(self, message: str, pattern: str, position: Optional[int] = None):
        self.pattern = pattern
        self.position = position
        super().__init__(message)


class NoMatchError(RegexRecordError):
    """Raised when the input does not match the pattern and a match is required."""

    def __init__(self, message: str, pattern: str, text: str):
        self.pattern = pattern
        self.text = text
        super().__init__(message)


class ConversionError(RegexRecordError):
    """Raised when a captured value cannot be converted into a field's type.

    Attributes:
        field: Name of the offending field, if known
        value: Raw captured value, if known
        target_type: Type being constructed
        errors: Pydantic error dicts when the failure came from validation
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        target_type: Optional[type] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.field = field
        self.value = value
        self.target_type = target_type
        self.errors = errors or []
        super().__init__(message)


class NotSupportedError(RegexRecordError, NotImplementedError):
    """Raised when a converter is used in a direction it does not support."""
    pass
