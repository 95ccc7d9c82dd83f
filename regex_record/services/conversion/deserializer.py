"""Typed deserialization of named-capture results.

Turns the name -> value dict produced by the group extractor into an
instance of a record type:

    1. Group names are matched to field names (exact, alias, or snake_case)
    2. Converters registered for a field's name or type read the raw text
    3. Pydantic validates the resulting mapping into the target type,
       applying its standard lax coercion ("19" -> 19, "F" -> Sex.F, ...)

Fields with no captured group keep their default value. Required fields
with no captured group get the zero value of their type ("" for str,
0 for int, None for Optional) unless settings.missing_fields is "error".
NamedTuples and plain classes are built by calling their constructor with
each value validated against its parameter annotation.

Example:
    @dataclass
    class Person:
        FirstName: str
        LastName: str
        Age: int

    person = deserialize_from_regex("Connor, John (19)", PATTERN, Person)
    # Person(FirstName='John', LastName='Connor', Age=19)
"""
import re
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import structlog
from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from regex_record.config import get_settings
from regex_record.errors.exceptions import ConversionError
from regex_record.models.extraction import FieldNaming, FieldSpec, MissingFieldPolicy, NoMatchPolicy
from regex_record.services.conversion.converters import ConverterRegistry, ConvertersArg, ValueConverter
from regex_record.services.conversion.fields import (
    NO_ZERO_VALUE,
    describe_fields,
    find_field,
    is_namedtuple,
    is_plain_class,
    zero_value,
)
from regex_record.services.extraction.group_extractor import parse_group_names_with_values

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_JSON_ADAPTER = TypeAdapter(Dict[str, str])


@lru_cache(maxsize=128)
def _adapter(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", repr(target_type))


def values_to_json(values: Mapping[str, str]) -> str:
    """Render a named-capture result as a flat JSON object."""
    return _JSON_ADAPTER.dump_json(dict(values)).decode("utf-8")


def _conversion_error(exc: ValidationError, target_type: Any) -> ConversionError:
    errors = exc.errors(include_url=False)
    first = errors[0] if errors else {}
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else None
    value = first.get("input")
    return ConversionError(
        f"Cannot build {_type_name(target_type)}: "
        + "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in errors
        ),
        field=field,
        value=value,
        target_type=target_type,
        errors=errors,
    )


def _read(converter: ValueConverter, spec: FieldSpec, raw: str, target_type: Any) -> Any:
    try:
        return converter.read(raw)
    except (ValueError, TypeError) as e:
        raise ConversionError(
            f"Cannot convert {raw!r} for field '{spec.name}' of "
            f"{_type_name(target_type)}: {e}",
            field=spec.name,
            value=raw,
            target_type=target_type,
        ) from e


def _collect(
    values: Mapping[str, str],
    fields: Dict[str, FieldSpec],
    registry: ConverterRegistry,
    naming: FieldNaming,
    target_type: Any,
) -> Dict[str, Any]:
    """Map captured groups onto field input keys, applying converters."""
    data: Dict[str, Any] = {}
    for group, raw in values.items():
        if fields:
            spec = find_field(fields, group, naming)
            if spec is None:
                continue
        else:
            # No declared fields: only name-keyed converters can apply
            spec = FieldSpec(name=group, annotation=Any, field_type=Any)

        converter = registry.for_field(spec)
        if converter is None:
            data[spec.input_key] = raw
            continue

        value = _read(converter, spec, raw, target_type)
        # None means "no value": leave the field at its default
        if value is not None:
            data[spec.input_key] = value
    return data


def _fill_missing(data: Dict[str, Any], fields: Dict[str, FieldSpec]) -> None:
    """Give required fields without a value their type's zero value."""
    for spec in fields.values():
        if spec.has_default or spec.input_key in data:
            continue
        zero = zero_value(spec.annotation)
        if zero is not NO_ZERO_VALUE:
            data[spec.input_key] = zero


def _construct(data: Dict[str, Any], fields: Dict[str, FieldSpec], target_type: Any) -> Any:
    """Build a NamedTuple or plain class by validating each field and calling it."""
    kwargs: Dict[str, Any] = {}
    for spec in fields.values():
        if spec.input_key not in data:
            continue
        value = data[spec.input_key]
        try:
            kwargs[spec.name] = _adapter(spec.annotation).validate_python(value)
        except ValidationError as e:
            errors = [
                {**err, "loc": (spec.name, *err["loc"])}
                for err in e.errors(include_url=False)
            ]
            raise ConversionError(
                f"Cannot build {_type_name(target_type)}: {spec.name}: {errors[0]['msg']}",
                field=spec.name,
                value=value,
                target_type=target_type,
                errors=errors,
            ) from e
        except PydanticSchemaGenerationError:
            # Annotation pydantic knows nothing about: hand the value over as-is
            kwargs[spec.name] = value

    try:
        return target_type(**kwargs)
    except (TypeError, ValueError) as e:
        raise ConversionError(
            f"Cannot build {_type_name(target_type)}: {e}",
            target_type=target_type,
        ) from e


def deserialize_values(
    values: Mapping[str, str],
    target_type: Type[T],
    converters: Union[ConvertersArg, ConverterRegistry] = None,
    *,
    field_naming: Optional[FieldNaming] = None,
    missing_fields: Optional[MissingFieldPolicy] = None,
) -> T:
    """Build an instance of target_type from a named-capture result.

    Args:
        values: Group name -> captured text
        target_type: Pydantic model, dataclass, TypedDict, NamedTuple,
            plain class, or any type pydantic can validate from a dict
        converters: Converters by field name or field type
        field_naming: How group names map to field names
            (defaults to settings.field_naming)
        missing_fields: What to do with required fields that have no
            captured value (defaults to settings.missing_fields)

    Returns:
        A new instance of target_type

    Raises:
        ConversionError: If a value cannot be converted, the type cannot
            be built, or a required field has no value under the "error"
            policy
    """
    settings = get_settings()
    registry = converters if isinstance(converters, ConverterRegistry) else ConverterRegistry(converters)
    naming = FieldNaming(field_naming or settings.field_naming)
    missing = MissingFieldPolicy(missing_fields or settings.missing_fields)
    fields = describe_fields(target_type)

    data = _collect(values, fields, registry, naming, target_type)
    if missing is MissingFieldPolicy.ZERO:
        _fill_missing(data, fields)

    if is_namedtuple(target_type) or is_plain_class(target_type):
        return _construct(data, fields, target_type)

    try:
        instance = _adapter(target_type).validate_python(data)
    except PydanticSchemaGenerationError as e:
        raise ConversionError(
            f"Cannot build {_type_name(target_type)}: {e}",
            target_type=target_type,
        ) from e
    except ValidationError as e:
        error = _conversion_error(e, target_type)
        logger.debug(
            "conversion_failed",
            target_type=_type_name(target_type),
            field=error.field,
            error_count=len(error.errors),
        )
        raise error from e

    return instance


def deserialize_from_regex(
    text: str,
    pattern: Union[str, "re.Pattern[str]"],
    target_type: Type[T],
    converters: Union[ConvertersArg, ConverterRegistry] = None,
    *,
    no_match: Optional[NoMatchPolicy] = None,
    field_naming: Optional[FieldNaming] = None,
    missing_fields: Optional[MissingFieldPolicy] = None,
) -> T:
    """Parse text with a named-group pattern into an instance of target_type.

    Args:
        text: The string to be parsed
        pattern: Pattern with named capture groups matching field names
        target_type: Type to build from the captured values
        converters: Optional converters for fields needing custom parsing,
            e.g. {Sex: lambda s: Sex.M if s == "Male" else Sex.F}
        no_match: Policy when nothing matches (defaults to settings.no_match)
        field_naming: How group names map to field names
        missing_fields: Zero-fill (zero) or reject (error) required fields
            without a captured value

    Returns:
        A new instance of target_type with the captured values

    Raises:
        PatternError: If the pattern is invalid
        NoMatchError: If nothing matches and the policy is "raise"
        ConversionError: If a captured value does not fit its field
    """
    values = parse_group_names_with_values(text, pattern, no_match=no_match)
    return deserialize_values(
        values,
        target_type,
        converters,
        field_naming=field_naming,
        missing_fields=missing_fields,
    )


def record_to_group_values(
    instance: Any,
    converters: Union[ConvertersArg, ConverterRegistry] = None,
) -> Dict[str, str]:
    """Render a record back into a flat group name -> text mapping.

    Keys are field aliases where a field declares one, so the result
    lines up with the group names the record was parsed from.

    Fields covered by a converter are written with the converter's
    write path; None values are omitted.

    Raises:
        NotSupportedError: If a field's converter is read-only
    """
    registry = converters if isinstance(converters, ConverterRegistry) else ConverterRegistry(converters)

    if isinstance(instance, Mapping):
        items = dict(instance)
        fields: Dict[str, FieldSpec] = {}
    else:
        fields = describe_fields(type(instance))
        # Plain classes need not keep every constructor argument as an attribute
        items = {name: getattr(instance, name, None) for name in fields}

    rendered: Dict[str, str] = {}
    for name, value in items.items():
        if value is None:
            continue
        # Mappings carry no declared types; dispatch on the runtime type
        spec = fields.get(name) or FieldSpec(name=name, annotation=type(value), field_type=type(value))
        converter = registry.for_field(spec)
        if converter is not None:
            rendered[spec.input_key] = converter.write(value)
        elif isinstance(value, Enum):
            rendered[spec.input_key] = str(value.value)
        else:
            rendered[spec.input_key] = str(value)
    return rendered
