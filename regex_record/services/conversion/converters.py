"""Value converters applied to captured text before record construction.

A converter turns the raw text of one captured group into a typed value
(read direction) and, optionally, a typed value back into text (write
direction). Converters are selected per field:

    1. by field name, e.g. {"Sex": parse_sex}
    2. by the field's declared type, e.g. {Sex: parse_sex}; Optional[Sex]
       fields are treated as Sex

Read-only converters raise NotSupportedError when asked to write.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, Union

from regex_record.errors.exceptions import NotSupportedError
from regex_record.models.extraction import FieldSpec


class ValueConverter(ABC):
    """Abstract base class for captured-value converters.

    Subclasses set ``target_type`` (or override can_convert) and implement
    read(). Returning None from read() means "no value": the field is left
    out and keeps its default.
    """

    target_type: Any = None
    can_write: bool = False

    def can_convert(self, field_type: Any) -> bool:
        """Check whether this converter handles fields of field_type."""
        return self.target_type is not None and field_type == self.target_type

    @abstractmethod
    def read(self, raw: str) -> Any:
        """Convert captured text into a typed value.

        Raises:
            ValueError: If the text cannot be converted
        """
        pass

    def write(self, value: Any) -> str:
        """Convert a typed value back into text.

        Raises:
            NotSupportedError: Unless the converter sets can_write
        """
        raise NotSupportedError(
            f"{type(self).__name__} is read-only and cannot write {value!r}"
        )


class FunctionConverter(ValueConverter):
    """Converter built from plain callables."""

    def __init__(
        self,
        reader: Callable[[str], Any],
        target_type: Any = None,
        writer: Optional[Callable[[Any], str]] = None,
    ):
        self.reader = reader
        self.target_type = target_type
        self.writer = writer
        self.can_write = writer is not None

    def read(self, raw: str) -> Any:
        return self.reader(raw)

    def write(self, value: Any) -> str:
        if self.writer is None:
            return super().write(value)
        return self.writer(value)

    def __repr__(self) -> str:
        name = getattr(self.reader, "__name__", repr(self.reader))
        return f"FunctionConverter({name}, target_type={self.target_type!r})"


class EnumConverter(ValueConverter):
    """Map captured text onto members of an Enum.

    Lookup order: aliases, member name, member value. Matching is
    case-insensitive unless case_sensitive is set. Empty text reads as
    "no value".

    Example:
        EnumConverter(Sex, aliases={"Female": Sex.F, "Male": Sex.M})
    """

    can_write = True

    def __init__(
        self,
        enum_type: Type[Enum],
        aliases: Optional[Mapping[str, Enum]] = None,
        case_sensitive: bool = False,
    ):
        self.target_type = enum_type
        self.case_sensitive = case_sensitive
        self.aliases: Dict[str, Enum] = dict(aliases or {})
        self._lookup: Dict[str, Enum] = {}
        for member in enum_type:
            self._lookup[self._key(str(member.value))] = member
            self._lookup[self._key(member.name)] = member
        for alias, member in self.aliases.items():
            self._lookup[self._key(alias)] = member

    def _key(self, text: str) -> str:
        return text if self.case_sensitive else text.casefold()

    def read(self, raw: str) -> Optional[Enum]:
        text = raw.strip()
        if not text:
            return None
        member = self._lookup.get(self._key(text))
        if member is None:
            choices = ", ".join(sorted(self.aliases) or [m.name for m in self.target_type])
            raise ValueError(
                f"{raw!r} is not a valid {self.target_type.__name__} (expected one of: {choices})"
            )
        return member

    def write(self, value: Any) -> str:
        member = self.target_type(value)
        for alias, aliased in self.aliases.items():
            if aliased is member:
                return alias
        return str(member.value)


ConverterKey = Union[str, Any]
ConvertersArg = Union[
    None,
    ValueConverter,
    Iterable[ValueConverter],
    Mapping[ConverterKey, Union[ValueConverter, Callable[[str], Any]]],
]


class ConverterRegistry:
    """Resolves which converter, if any, applies to a target field.

    Accepts a single ValueConverter, an iterable of them, or a mapping of
    field name / field type to a ValueConverter or a callable.
    """

    def __init__(self, converters: ConvertersArg = None):
        self._by_field: Dict[str, ValueConverter] = {}
        self._by_type: List[ValueConverter] = []

        if converters is None:
            return
        if isinstance(converters, ValueConverter):
            self._by_type.append(converters)
        elif isinstance(converters, Mapping):
            for key, value in converters.items():
                self.register(key, value)
        else:
            for converter in converters:
                if not isinstance(converter, ValueConverter):
                    raise TypeError(
                        f"Expected ValueConverter, got {type(converter).__name__}"
                    )
                self._by_type.append(converter)

    def register(
        self,
        key: ConverterKey,
        converter: Union[ValueConverter, Callable[[str], Any]],
    ) -> None:
        """Register a converter for a field name (str) or a field type.

        Raises:
            TypeError: If converter is neither a ValueConverter nor callable
        """
        if not isinstance(converter, ValueConverter) and not callable(converter):
            raise TypeError(
                f"Converter for {key!r} must be a ValueConverter or callable, "
                f"got {type(converter).__name__}"
            )

        if isinstance(key, str):
            if not isinstance(converter, ValueConverter):
                converter = FunctionConverter(converter)
            self._by_field[key] = converter
            return

        if isinstance(converter, ValueConverter):
            converter = FunctionConverter(
                converter.read,
                target_type=key,
                writer=converter.write if converter.can_write else None,
            )
        else:
            converter = FunctionConverter(converter, target_type=key)
        self._by_type.append(converter)

    def for_field(self, spec: FieldSpec) -> Optional[ValueConverter]:
        """Return the converter for a field: by name first, then by type."""
        converter = self._by_field.get(spec.name)
        if converter is None and spec.alias:
            converter = self._by_field.get(spec.alias)
        if converter is not None:
            return converter
        for candidate in self._by_type:
            if candidate.can_convert(spec.field_type):
                return candidate
        return None

    def __bool__(self) -> bool:
        return bool(self._by_field or self._by_type)
