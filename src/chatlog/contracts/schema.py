# src/chatlog/contracts/schema.py
"""Per-entity schema descriptors.

Entities declare their fields with ordinary pydantic annotations. Fields
that hold nested entities additionally carry a ``Typed`` marker in their
``Annotated`` metadata:

    contents: Annotated[list[Content], Typed.of(Content)]
    data: Annotated[Payload, Typed(payload_type)]

At class creation each entity turns its ``model_fields`` into an ordered,
read-only mapping of FieldDescriptor. The Transformer, the Validator and
the plain-object projection all walk this mapping, so the three agree on
which fields exist, what they are called on the wire and how they nest.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType, NoneType, UnionType
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.fields import FieldInfo

# Validation never coerces: the Transformer already did all coercion that
# is allowed, so a wrong type at validation time is a violation.
_STRICT = ConfigDict(strict=True)

# Enum fields accept members or their wire strings ("AGENT" as well as
# Sender.AGENT). Unknown strings are still rejected.
_ENUM = ConfigDict(strict=False)


@dataclass(frozen=True)
class Typed:
    """Marks a field as holding nested entities.

    Attributes:
        resolver: Pure function of the raw parent node returning the
            entity class to instantiate. For array fields the same class
            is used for every element.
    """

    resolver: Callable[[Any], type[BaseModel]]

    @classmethod
    def of(cls, target: type[BaseModel]) -> "Typed":
        """Static form: the field always holds ``target``."""
        return cls(lambda _parent: target)

    def resolve(self, parent: Any) -> type[BaseModel]:
        return self.resolver(parent)


@dataclass(frozen=True)
class FieldDescriptor:
    """Everything the pipeline needs to know about one entity field.

    Attributes:
        name: Python attribute name
        wire_name: Key used in raw input and in violation paths
        required: True if the field has no default
        is_list: True for array fields (the marker/checker apply per element)
        base_type: Innermost declared type (Optional, list and Annotated stripped)
        typed: Nested-entity marker, or None for scalar fields
        checker: Constraint checker for scalar fields, None for nested.
            Strict, except that enum fields accept their wire strings
    """

    name: str
    wire_name: str
    required: bool
    is_list: bool
    base_type: Any
    typed: Typed | None
    checker: TypeAdapter[Any] | None


def _strip_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or isinstance(annotation, UnionType):
        members = [arg for arg in get_args(annotation) if arg is not NoneType]
        if len(members) == 1:
            return members[0]
    return annotation


def _strip_annotated(annotation: Any) -> Any:
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def _find_typed(info: FieldInfo) -> Typed | None:
    for item in info.metadata:
        if isinstance(item, Typed):
            return item
    return None


def _describe_field(name: str, info: FieldInfo) -> FieldDescriptor:
    typed = _find_typed(info)
    inner = _strip_annotated(_strip_optional(info.annotation))
    is_list = get_origin(inner) is list
    base_type = _strip_annotated(get_args(inner)[0]) if is_list else inner

    checker = None
    if typed is None:
        config = _ENUM if isinstance(base_type, type) and issubclass(base_type, Enum) else _STRICT
        checker = TypeAdapter(info.rebuild_annotation(), config=config)

    return FieldDescriptor(
        name=name,
        wire_name=info.alias or name,
        required=info.is_required(),
        is_list=is_list,
        base_type=base_type,
        typed=typed,
        checker=checker,
    )


def describe(model: type[BaseModel]) -> Mapping[str, FieldDescriptor]:
    """Build the ordered descriptor mapping for an entity class."""
    return MappingProxyType({name: _describe_field(name, info) for name, info in model.model_fields.items()})
