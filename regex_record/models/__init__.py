"""Data models for the extraction pipeline."""
from regex_record.models.extraction import (
    NoMatchPolicy,
    FieldNaming,
    FieldSpec,
    MissingFieldPolicy,
)

__all__ = [
    "NoMatchPolicy",
    "FieldNaming",
    "FieldSpec",
    "MissingFieldPolicy",
]
