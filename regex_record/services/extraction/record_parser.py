"""Reusable parser binding a pattern, a target type and converters.

Compiles the pattern once and parses any number of inputs with it:

    parser = RecordParser(
        r"^(?<LastName>\\w.*), (?<FirstName>\\w.*) \\((?<Age>\\d+)\\)",
        Person,
    )
    parser.parse("Connor, John (19)")
    # Person(FirstName='John', LastName='Connor', Age=19)
"""
import re
from typing import Dict, Generic, Iterable, List, Optional, Type, TypeVar, Union

import structlog

from regex_record.errors.exceptions import ConversionError, NoMatchError
from regex_record.models.extraction import FieldNaming, MissingFieldPolicy, NoMatchPolicy
from regex_record.services.conversion.converters import ConverterRegistry, ConvertersArg
from regex_record.services.conversion.deserializer import deserialize_values
from regex_record.services.extraction.group_extractor import (
    compile_pattern,
    extract_groups,
    group_names,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RecordParser(Generic[T]):
    """Parses strings into instances of one record type.

    Attributes:
        pattern: The compiled pattern
        target_type: Type built by parse()
        converters: Resolved converter registry
    """

    def __init__(
        self,
        pattern: Union[str, "re.Pattern[str]"],
        target_type: Type[T],
        converters: Union[ConvertersArg, ConverterRegistry] = None,
        *,
        no_match: Optional[NoMatchPolicy] = None,
        field_naming: Optional[FieldNaming] = None,
        missing_fields: Optional[MissingFieldPolicy] = None,
    ):
        """Compile the pattern and resolve converters.

        Raises:
            PatternError: If the pattern is invalid
        """
        self.pattern = compile_pattern(pattern)
        self.target_type = target_type
        self.converters = (
            converters if isinstance(converters, ConverterRegistry) else ConverterRegistry(converters)
        )
        self.no_match = no_match
        self.field_naming = field_naming
        self.missing_fields = missing_fields
        self._log = logger.bind(
            parser="RecordParser",
            pattern=self.pattern.pattern,
            target_type=getattr(target_type, "__name__", repr(target_type)),
        )

    @property
    def group_names(self) -> List[str]:
        """Named groups declared by the pattern, in order."""
        return group_names(self.pattern)

    def extract(self, text: str) -> Dict[str, str]:
        """Extract participating named groups from text."""
        return extract_groups(self.pattern, text, no_match=self.no_match)

    def parse(self, text: str) -> T:
        """Parse text into an instance of the target type.

        Raises:
            NoMatchError: If nothing matches and the policy is "raise"
            ConversionError: If a captured value does not fit its field
        """
        return deserialize_values(
            self.extract(text),
            self.target_type,
            self.converters,
            field_naming=self.field_naming,
            missing_fields=self.missing_fields,
        )

    def parse_many(self, lines: Iterable[str], skip_errors: bool = False) -> List[T]:
        """Parse every line into a record.

        Args:
            lines: Input strings
            skip_errors: Log and skip lines that fail to match or convert
                instead of raising

        Returns:
            Parsed records, in input order
        """
        records: List[T] = []
        skipped = 0
        for line_number, line in enumerate(lines, start=1):
            try:
                records.append(self.parse(line))
            except (NoMatchError, ConversionError) as e:
                if not skip_errors:
                    raise
                skipped += 1
                self._log.warning(
                    "record_parse_failed",
                    line_number=line_number,
                    error=e.message,
                )

        if skipped:
            self._log.info("records_parsed", parsed=len(records), skipped=skipped)
        return records

    def __repr__(self) -> str:
        return f"RecordParser({self.pattern.pattern!r}, {self.target_type!r})"
