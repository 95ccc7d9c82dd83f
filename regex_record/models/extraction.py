"""Models shared by the extraction and conversion pipeline.

Defines the policy enums that control extraction behaviour and the
field descriptions used to dispatch converters onto a target type.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class NoMatchPolicy(str, Enum):
    """What to do when the input does not match the pattern at all."""
    EMPTY = "empty"
    RAISE = "raise"


class FieldNaming(str, Enum):
    """How group names are matched against target field names.

    - exact: group name must equal the field name
    - snake_case: "FirstName" also fills a "first_name" field
    """
    EXACT = "exact"
    SNAKE_CASE = "snake_case"


class MissingFieldPolicy(str, Enum):
    """What to do with a field that has no default and no captured value.

    - zero: fill the type's zero value ("", 0, False, first enum member,
      None for Optional fields)
    - error: raise ConversionError
    """
    ZERO = "zero"
    ERROR = "error"


@dataclass(frozen=True)
class FieldSpec:
    """Description of one field of a target type."""
    name: str
    annotation: Any             # declared annotation, e.g. Optional[Sex]
    field_type: Any             # annotation with Optional[...] removed
    has_default: bool = False
    alias: Optional[str] = None  # pydantic validation alias, if any

    @property
    def input_key(self) -> str:
        """Key the structural mapper expects for this field."""
        return self.alias or self.name
