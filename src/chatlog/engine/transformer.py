# src/chatlog/engine/transformer.py
"""Transform stage: untyped raw tree -> typed entity graph.

Walks the raw tree top-down. For every declared field of the target
entity it:

1. resolves the concrete nested type (via the field's Typed marker, which
   may inspect sibling keys of the still-raw parent node),
2. applies the same resolution per element for array fields,
3. recurses, then assigns the result.

Only declared fields are copied; every other raw key is dropped (unless
exclude_extraneous is switched off). Field constraints are NOT checked
here. The only failures are coercion failures, raised as TransformError:

- a nested entity whose raw value is not an object
- a nested array whose raw value is not a list
- a datetime that cannot be parsed

The raw input is never mutated and nothing is shared with it: scalar
values are deep-copied into the new graph.
"""

import copy
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from chatlog.contracts.entities import Entity
from chatlog.contracts.errors import TransformError
from chatlog.contracts.schema import FieldDescriptor
from chatlog.core.config import TransformOptions
from chatlog.core.logging import get_logger

E = TypeVar("E", bound=Entity)

logger = get_logger(__name__)

# Lax on purpose: ISO-8601 strings, epoch numbers and datetime instances
_DATETIME = TypeAdapter(datetime)


class _CoercionError(Exception):
    """Internal signal carrying the failing path up to Transformer.parse."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(reason)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _lookup_enum(enum_type: type[Enum], value: Any) -> Any:
    """Map a wire string to its enum member, keeping unknown values verbatim."""
    if isinstance(value, str):
        try:
            return enum_type(value)
        except ValueError:
            return value
    return value


def _coerce_scalar(base_type: Any, value: Any, path: str) -> Any:
    if base_type is datetime:
        try:
            return _DATETIME.validate_python(value)
        except PydanticValidationError as e:
            raise _CoercionError(path, e.errors()[0]["msg"]) from e
    if isinstance(base_type, type) and issubclass(base_type, Enum):
        return _lookup_enum(base_type, value)
    return copy.deepcopy(value)


class Transformer:
    """Builds typed entity graphs from raw trees.

    Holds only immutable options, so one instance may be shared across
    threads.

    Example:
        transformer = Transformer()
        session = transformer.parse(Session, raw)
    """

    def __init__(self, options: TransformOptions | None = None) -> None:
        self._options = options if options is not None else TransformOptions()

    @property
    def options(self) -> TransformOptions:
        return self._options

    def parse(self, entity_type: type[E], raw: Any) -> E:
        """Transform a raw tree into an instance of ``entity_type``.

        Args:
            entity_type: Root entity class
            raw: JSON-compatible tree

        Returns:
            Fully instantiated (but unvalidated) entity graph.

        Raises:
            TransformError: If any part of the tree cannot be coerced.
        """
        try:
            instance = self._build(entity_type, raw, "")
        except _CoercionError as e:
            path = e.path or None
            logger.error("transform_failed", target=entity_type.__name__, path=path, reason=e.reason)
            raise TransformError(entity_type.__name__, e.reason, path=path) from e
        return instance  # type: ignore[return-value]  # _build returns the requested class

    def _build(self, entity_type: type[Entity], raw: Any, path: str) -> Entity:
        if not isinstance(raw, Mapping):
            raise _CoercionError(path, f"expected an object for {entity_type.__name__}, got {type(raw).__name__}")

        values: dict[str, Any] = {}
        fields_set: set[str] = set()
        for descriptor in entity_type.schema_fields.values():
            wire_name = descriptor.wire_name
            if wire_name not in raw:
                if descriptor.required and self._options.expose_unset:
                    values[wire_name] = None
                continue
            values[wire_name] = self._convert(descriptor, raw[wire_name], raw, _join(path, wire_name))
            fields_set.add(descriptor.name)

        if not self._options.exclude_extraneous:
            values.update(self._extras(entity_type, raw))

        return entity_type.model_construct(fields_set, **values)

    def _convert(self, descriptor: FieldDescriptor, value: Any, parent: Mapping[str, Any], path: str) -> Any:
        if value is None:
            return None

        if descriptor.typed is not None:
            target = descriptor.typed.resolve(parent)
            if not descriptor.is_list:
                return self._build(target, value, path)
            if not isinstance(value, list):
                raise _CoercionError(path, f"expected an array of {target.__name__}, got {type(value).__name__}")
            return [None if item is None else self._build(target, item, f"{path}[{index}]") for index, item in enumerate(value)]

        if descriptor.is_list and isinstance(value, list):
            return [_coerce_scalar(descriptor.base_type, item, f"{path}[{index}]") for index, item in enumerate(value)]
        return _coerce_scalar(descriptor.base_type, value, path)

    @staticmethod
    def _extras(entity_type: type[Entity], raw: Mapping[str, Any]) -> dict[str, Any]:
        declared = {name for descriptor in entity_type.schema_fields.values() for name in (descriptor.name, descriptor.wire_name)}
        return {key: copy.deepcopy(value) for key, value in raw.items() if isinstance(key, str) and key not in declared}


def transform(entity_type: type[E], raw: Any, options: TransformOptions | None = None) -> E:
    """Transform-only primitive. See Transformer.parse."""
    return Transformer(options).parse(entity_type, raw)


def to_plain(instance: Entity, *, exclude_unset: bool = True) -> dict[str, Any]:
    """Project a typed entity back to a JSON-compatible dict.

    Uses wire names, renders enums as their values and datetimes as
    ISO-8601 strings. Extras (if any) follow the declared fields.
    Transforming the result again yields an equivalent graph.

    Args:
        instance: Entity to project
        exclude_unset: Omit fields that were absent from the original raw input
    """
    plain: dict[str, Any] = {}
    for descriptor in type(instance).schema_fields.values():
        if exclude_unset and descriptor.name not in instance.model_fields_set:
            continue
        plain[descriptor.wire_name] = _plain_value(getattr(instance, descriptor.name, None), exclude_unset)
    if instance.model_extra:
        for key, value in instance.model_extra.items():
            plain[key] = _plain_value(value, exclude_unset)
    return plain


def _plain_value(value: Any, exclude_unset: bool) -> Any:
    if isinstance(value, Entity):
        return to_plain(value, exclude_unset=exclude_unset)
    if isinstance(value, list):
        return [_plain_value(item, exclude_unset) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return copy.deepcopy(value)
