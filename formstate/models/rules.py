"""Field rule sets supplied by the caller when a form is constructed."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from formstate.models.values import describe_type


class Trigger(str, Enum):
    """Event kind that makes a dirty, valid field eligible for re-validation."""

    CHANGE = "change"
    BLUR = "blur"


class FieldType(str, Enum):
    """Value types accepted by the ``type`` rule."""

    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    LIST = "list"
    MAPPING = "mapping"

    def matches(self, value: Any) -> bool:
        """Check whether ``value`` is of this type (``bool`` is not a number)."""
        return describe_type(value) == self.value


class ErrorCondition(str, Enum):
    """Structural rule that produced an error, passed to ``format_error``."""

    REQUIRED = "required"
    TYPE = "type"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"


@dataclass(frozen=True)
class ValidationContext:
    """Everything a custom test or error formatter may want to look at.

    Attributes:
        field: Name of the field being evaluated
        value: The field's current value (``MISSING`` when absent)
        rules: The field's rule set
        schema: The full schema (field name -> rules)
        model: The full, read-only model
        condition: The failing structural rule, set only for ``format_error``
    """

    field: str
    value: Any
    rules: "FieldRules"
    schema: Mapping[str, "FieldRules"]
    model: Mapping[str, Any]
    condition: Optional[ErrorCondition] = None


FailCallback = Callable[[str], None]
TestRule = Callable[[Any, FailCallback, ValidationContext], None]
ErrorFormatter = Callable[[ValidationContext], str]


@dataclass(frozen=True)
class FieldRules:
    """Validation rules and revalidation trigger for one field.

    Attributes:
        required: Value must be filled in
        type: Value must be of this type
        min_length: Value must have at least this many items/characters
        max_length: Value must not have more than this many items/characters
        test: Custom rule; calls ``fail(message)`` to report a failure
        update_on: Event kind that re-validates the field once it is dirty
        format_error: Builds messages for the structural rules
    """

    required: bool = False
    type: Optional[FieldType] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    test: Optional[TestRule] = field(default=None, compare=False)
    update_on: Trigger = Trigger.CHANGE
    format_error: Optional[ErrorFormatter] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # Accept plain strings for the enum-typed options
        if self.type is not None and not isinstance(self.type, FieldType):
            object.__setattr__(self, "type", FieldType(self.type))
        if not isinstance(self.update_on, Trigger):
            object.__setattr__(self, "update_on", Trigger(self.update_on))
        for name in ("min_length", "max_length"):
            limit = getattr(self, name)
            if limit is not None and (isinstance(limit, bool) or limit < 0):
                raise ValueError(f"{name} must be a non-negative integer, got {limit!r}")

    def describe(self) -> str:
        """Short human-readable summary, used in logs and the CLI."""
        parts = []
        if self.required:
            parts.append("required")
        if self.type is not None:
            parts.append(f"type={self.type.value}")
        if self.min_length is not None:
            parts.append(f"min_length={self.min_length}")
        if self.max_length is not None:
            parts.append(f"max_length={self.max_length}")
        if self.test is not None:
            parts.append(f"test={getattr(self.test, '__name__', 'custom')}")
        parts.append(f"update_on={self.update_on.value}")
        return ", ".join(parts)


Schema = Mapping[str, FieldRules]


def freeze_schema(schema: Mapping[str, Union[FieldRules, Mapping[str, Any]]]) -> Schema:
    """Return a read-only copy of a schema, building rules from plain dicts.

    Plain dict entries use the same keys as ``FieldRules``.
    """
    frozen = {}
    for name, rules in schema.items():
        frozen[name] = rules if isinstance(rules, FieldRules) else FieldRules(**rules)
    return MappingProxyType(frozen)
