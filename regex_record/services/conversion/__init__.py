"""Conversion of named-capture results into typed records.

Key Components:
    - deserialize_from_regex: Match text and build a record in one call
    - deserialize_values: Build a record from an extracted mapping
    - record_to_group_values: Render a record back into text values
    - values_to_json: Flat JSON object of an extracted mapping
    - ValueConverter / FunctionConverter / EnumConverter: Converters
    - ConverterRegistry: Converter lookup by field name or type
"""
from regex_record.services.conversion.converters import (
    ValueConverter,
    FunctionConverter,
    EnumConverter,
    ConverterRegistry,
)
from regex_record.services.conversion.deserializer import (
    deserialize_from_regex,
    deserialize_values,
    record_to_group_values,
    values_to_json,
)
from regex_record.services.conversion.fields import describe_fields

__all__: list[str] = [
    "ValueConverter",
    "FunctionConverter",
    "EnumConverter",
    "ConverterRegistry",
    "deserialize_from_regex",
    "deserialize_values",
    "record_to_group_values",
    "values_to_json",
    "describe_fields",
]
