"""Named capture group extraction services.

Key Components:
    - parse_group_names_with_values: Match text, return name -> value dict
    - compile_pattern: Compile (and cache) a named-group pattern
    - group_names: Named groups of a compiled pattern in declaration order
    - RecordParser: Reusable pattern + target type + converters
"""
from regex_record.services.extraction.group_extractor import (
    compile_pattern,
    extract_groups,
    group_names,
    parse_group_names_with_values,
    to_python_syntax,
)
from regex_record.services.extraction.record_parser import RecordParser

__all__: list[str] = [
    "compile_pattern",
    "extract_groups",
    "group_names",
    "parse_group_names_with_values",
    "to_python_syntax",
    "RecordParser",
]
