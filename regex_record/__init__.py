"""Extract named regex groups from text and map them onto typed records.

    >>> from regex_record import parse_group_names_with_values
    >>> parse_group_names_with_values("Connor, John (19)", r"(?<LastName>\\w+), (?<FirstName>\\w+)")
    {'LastName': 'Connor', 'FirstName': 'John'}
"""
from regex_record.services.extraction import (
    RecordParser,
    compile_pattern,
    group_names,
    parse_group_names_with_values,
)
from regex_record.services.conversion import (
    ConverterRegistry,
    EnumConverter,
    FunctionConverter,
    ValueConverter,
    deserialize_from_regex,
    deserialize_values,
    record_to_group_values,
    values_to_json,
)
from regex_record.errors import (
    ConversionError,
    NoMatchError,
    NotSupportedError,
    PatternError,
    RegexRecordError,
)
from regex_record.models import FieldNaming, MissingFieldPolicy, NoMatchPolicy
from regex_record.config import RegexRecordSettings, configure_logging, get_settings

__version__ = "0.1.0"

__all__ = [
    "parse_group_names_with_values",
    "deserialize_from_regex",
    "deserialize_values",
    "record_to_group_values",
    "values_to_json",
    "compile_pattern",
    "group_names",
    "RecordParser",
    "ValueConverter",
    "FunctionConverter",
    "EnumConverter",
    "ConverterRegistry",
    "RegexRecordError",
    "PatternError",
    "NoMatchError",
    "ConversionError",
    "NotSupportedError",
    "NoMatchPolicy",
    "FieldNaming",
    "MissingFieldPolicy",
    "RegexRecordSettings",
    "configure_logging",
    "get_settings",
]
