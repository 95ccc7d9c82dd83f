"""Field introspection for target record types."""
import dataclasses
import inspect
import types
import typing
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, TypeAdapter
from pydantic.errors import PydanticSchemaGenerationError
from pydantic.alias_generators import to_snake
from typing_extensions import is_typeddict

from regex_record.models.extraction import FieldNaming, FieldSpec

_NONE_TYPE = type(None)

# Returned by zero_value() for types without a natural zero
NO_ZERO_VALUE = object()

_ZERO_TYPES = (str, bytes, int, float, complex, Decimal, list, dict, set, frozenset, tuple)


def unwrap_optional(annotation: Any) -> Any:
    """Return X for Optional[X] / X | None, otherwise the annotation unchanged."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = [arg for arg in typing.get_args(annotation) if arg is not _NONE_TYPE]
        if len(args) == 1:
            return args[0]
    return annotation


def _type_hints(target_type: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(target_type)
    except (NameError, TypeError):
        return dict(getattr(target_type, "__annotations__", {}))


def _spec(name: str, annotation: Any, has_default: bool, alias: Optional[str] = None) -> FieldSpec:
    return FieldSpec(
        name=name,
        annotation=annotation,
        field_type=unwrap_optional(annotation),
        has_default=has_default,
        alias=alias,
    )


def describe_fields(target_type: Any) -> Dict[str, FieldSpec]:
    """Describe the fields of a record type, keyed by field name.

    Supports pydantic models, dataclasses (standard and pydantic),
    TypedDicts, NamedTuples and plain classes (through the __init__
    signature). Returns an empty dict for anything else (e.g. Dict[str, int]).
    """
    if isinstance(target_type, type) and issubclass(target_type, BaseModel):
        specs = {}
        for name, info in target_type.model_fields.items():
            alias = info.validation_alias if isinstance(info.validation_alias, str) else info.alias
            specs[name] = _spec(name, info.annotation, not info.is_required(), alias)
        return specs

    if dataclasses.is_dataclass(target_type) and isinstance(target_type, type):
        hints = _type_hints(target_type)
        return {
            f.name: _spec(
                f.name,
                hints.get(f.name, f.type),
                f.default is not dataclasses.MISSING
                or f.default_factory is not dataclasses.MISSING,
            )
            for f in dataclasses.fields(target_type)
            if f.init
        }

    if is_typeddict(target_type):
        required = getattr(target_type, "__required_keys__", frozenset())
        return {
            name: _spec(name, annotation, name not in required)
            for name, annotation in _type_hints(target_type).items()
        }

    if is_namedtuple(target_type):
        hints = _type_hints(target_type)
        return {
            name: _spec(name, hints.get(name, Any), name in target_type._field_defaults)
            for name in target_type._fields
        }

    if is_plain_class(target_type):
        return _constructor_fields(target_type)

    return {}


def is_namedtuple(target_type: Any) -> bool:
    """Check for a typing.NamedTuple / collections.namedtuple class."""
    return (
        isinstance(target_type, type)
        and issubclass(target_type, tuple)
        and hasattr(target_type, "_fields")
        and hasattr(target_type, "_field_defaults")
    )


def is_plain_class(target_type: Any) -> bool:
    """Check for a user class that pydantic cannot build by itself.

    Such classes are built by calling their constructor with keyword
    arguments taken from the __init__ signature.
    """
    return (
        isinstance(target_type, type)
        and target_type.__init__ is not object.__init__
        and not pydantic_can_build(target_type)
    )


@lru_cache(maxsize=128)
def pydantic_can_build(target_type: Any) -> bool:
    """Check whether pydantic can generate a validator for target_type."""
    try:
        TypeAdapter(target_type)
    except PydanticSchemaGenerationError:
        return False
    return True


def _constructor_fields(target_type: type) -> Dict[str, FieldSpec]:
    try:
        signature = inspect.signature(target_type)
    except (TypeError, ValueError):
        return {}
    hints = _type_hints(target_type.__init__)

    specs = {}
    for name, param in signature.parameters.items():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD, param.POSITIONAL_ONLY):
            continue
        annotation = hints.get(name, Any)
        if annotation is inspect.Parameter.empty:
            annotation = Any
        specs[name] = _spec(name, annotation, param.default is not param.empty)
    return specs


def zero_value(annotation: Any) -> Any:
    """Return the zero value of a field type.

    None for Optional fields, the empty/zero instance for scalars and
    containers, the first member for enums. Returns NO_ZERO_VALUE for
    anything else (e.g. datetime or a nested record).
    """
    if unwrap_optional(annotation) is not annotation or annotation is Any:
        return None

    origin = typing.get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return NO_ZERO_VALUE
    if issubclass(origin, Enum):
        return next(iter(origin), NO_ZERO_VALUE)
    if issubclass(origin, _ZERO_TYPES):
        return origin()
    return NO_ZERO_VALUE


def find_field(
    fields: Dict[str, FieldSpec],
    group: str,
    naming: FieldNaming = FieldNaming.EXACT,
) -> Optional[FieldSpec]:
    """Find the field a captured group fills.

    Exact field name first, then alias, then (in snake_case mode) the
    snake_case form of the group name.
    """
    spec = fields.get(group)
    if spec is not None:
        return spec
    for candidate in fields.values():
        if candidate.alias == group:
            return candidate
    if naming is FieldNaming.SNAKE_CASE:
        return fields.get(to_snake(group))
    return None
