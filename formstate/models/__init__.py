"""UI-agnostic data types for form state.

These classes carry no behaviour beyond small helpers, so they can be used
and tested without the engine: flag records, rule sets, input events and
validation results.
"""

from formstate.models.events import EventKind, InputEvent
from formstate.models.flags import INITIAL_FLAGS, FlagRecord
from formstate.models.results import FieldResult, FormFlags, FormSnapshot, SchemaResult
from formstate.models.rules import (
    ErrorCondition,
    FieldRules,
    FieldType,
    Schema,
    Trigger,
    ValidationContext,
    freeze_schema,
)
from formstate.models.values import MISSING, describe_type, is_empty

__all__ = [
    "EventKind",
    "InputEvent",
    "FlagRecord",
    "INITIAL_FLAGS",
    "FieldResult",
    "FormFlags",
    "FormSnapshot",
    "SchemaResult",
    "ErrorCondition",
    "FieldRules",
    "FieldType",
    "Schema",
    "Trigger",
    "ValidationContext",
    "freeze_schema",
    "MISSING",
    "describe_type",
    "is_empty",
]
