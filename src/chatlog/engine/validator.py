# src/chatlog/engine/validator.py
"""Validate stage: constraint checking over a typed entity graph.

Design:
- Runs only on graphs the Transformer already built; never coerces and
  never alters the instance (check() returns it unchanged)
- Descends into nested entities and arrays of them; a child's violation
  is reported under the parent's property path
- Aggregates: every violation across the whole graph is collected before
  reporting, unless stop_at_first_error is set
- Paths use wire names with dots and brackets:
  ``chatLogs[1].data.question._id``

Usage:
    validator = Validator()
    violations = validator.collect(session)     # structured, no raise
    validator.check(session)                    # raises ValidationError
"""

from collections.abc import Iterator
from itertools import islice
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from chatlog.contracts.entities import Entity
from chatlog.contracts.errors import DEFAULT_VALIDATION_TITLE, ValidationError, Violation
from chatlog.contracts.schema import FieldDescriptor
from chatlog.core.config import ValidatorOptions
from chatlog.core.logging import get_logger

E = TypeVar("E", bound=Entity)

logger = get_logger(__name__)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _loc_suffix(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location relative to the field path."""
    return "".join(f"[{part}]" if isinstance(part, int) else f".{part}" for part in loc)


class Validator:
    """Checks every declared constraint on a typed entity graph.

    Holds only immutable options, so one instance may be shared across
    threads.
    """

    def __init__(self, options: ValidatorOptions | None = None) -> None:
        self._options = options if options is not None else ValidatorOptions()

    @property
    def options(self) -> ValidatorOptions:
        return self._options

    def collect(self, instance: Entity) -> list[Violation]:
        """Return violations for ``instance`` (empty if valid).

        In fail-fast mode at most one violation is returned.
        """
        violations = self._iter_entity(instance, "")
        if self._options.stop_at_first_error:
            return list(islice(violations, 1))
        return list(violations)

    def check(self, instance: E, *, title: str = DEFAULT_VALIDATION_TITLE) -> E:
        """Validate ``instance`` and return it unchanged.

        Args:
            instance: Typed entity graph
            title: Prefix of the ValidationError message

        Raises:
            ValidationError: Carrying every violation found.
        """
        violations = self.collect(instance)
        if violations:
            properties = [violation.field for violation in violations]
            logger.error(
                "validation_failed",
                target=type(instance).__name__,
                violation_count=len(violations),
                properties=properties,
            )
            raise ValidationError(title, violations)
        return instance

    def _iter_entity(self, instance: Entity, path: str) -> Iterator[Violation]:
        for descriptor in type(instance).schema_fields.values():
            field_path = _join(path, descriptor.wire_name)
            if descriptor.name not in instance.model_fields_set:
                if descriptor.required:
                    yield Violation(field_path, "Field required")
                continue
            value = getattr(instance, descriptor.name, None)
            if descriptor.typed is not None:
                yield from self._iter_nested(descriptor, value, field_path)
            else:
                yield from self._iter_scalar(descriptor, value, field_path)

        if self._options.forbid_unknown_fields and instance.model_extra:
            for key, value in instance.model_extra.items():
                yield Violation(_join(path, key), "property should not exist", value)

    def _iter_nested(self, descriptor: FieldDescriptor, value: Any, path: str) -> Iterator[Violation]:
        if value is None:
            if descriptor.required:
                yield Violation(path, "Nested object must be defined", value)
            return

        if not descriptor.is_list:
            yield from self._iter_child(value, path)
            return

        if not isinstance(value, list):
            yield Violation(path, "Input should be a valid list", value)
            return
        for index, item in enumerate(value):
            yield from self._iter_child(item, f"{path}[{index}]")

    def _iter_child(self, value: Any, path: str) -> Iterator[Violation]:
        if isinstance(value, Entity):
            yield from self._iter_entity(value, path)
        else:
            yield Violation(path, "Nested property must be an object", value)

    @staticmethod
    def _iter_scalar(descriptor: FieldDescriptor, value: Any, path: str) -> Iterator[Violation]:
        if descriptor.checker is None:
            return
        try:
            descriptor.checker.validate_python(value)
        except PydanticValidationError as e:
            for error in e.errors():
                yield Violation(f"{path}{_loc_suffix(error['loc'])}", error["msg"], error.get("input"))


def validate(instance: E, options: ValidatorOptions | None = None, *, title: str = DEFAULT_VALIDATION_TITLE) -> E:
    """Validate-only primitive. See Validator.check."""
    return Validator(options).check(instance, title=title)
