"""formstate: form-state management engine.

Tracks a form's model, derives per-field dirty/pristine/touched/untouched
flags and validates fields only when the revalidation policy allows it.

Example:
    from formstate import FieldRules, FormEngine

    engine = FormEngine({"username": FieldRules(required=True, max_length=8)})
    engine.schema_result.fields["username"].errors  # ('username is required',)
    engine.change("username", "ada")
    engine.schema_result.is_valid  # True
"""

from formstate.adapters import Bindings, Renderer
from formstate.engine import (
    CheckboxDescriptor,
    Decision,
    FormBuilder,
    FormEngine,
    InputDescriptor,
    ModelRule,
    Pipeline,
    SyncWith,
    aggregate,
    compose,
    evaluate,
    is_required,
    validate_model,
)
from formstate.lib.errors import (
    EngineDisposedError,
    FormStateError,
    InvalidEventError,
    ReentrantEventError,
    SchemaConfigError,
)
from formstate.models import (
    MISSING,
    ErrorCondition,
    EventKind,
    FieldResult,
    FieldRules,
    FieldType,
    FlagRecord,
    FormFlags,
    FormSnapshot,
    InputEvent,
    SchemaResult,
    Trigger,
    ValidationContext,
)

__version__ = "1.0.0"

__all__ = [
    "Bindings",
    "Renderer",
    "CheckboxDescriptor",
    "Decision",
    "FormBuilder",
    "FormEngine",
    "InputDescriptor",
    "ModelRule",
    "Pipeline",
    "SyncWith",
    "aggregate",
    "compose",
    "evaluate",
    "is_required",
    "validate_model",
    "EngineDisposedError",
    "FormStateError",
    "InvalidEventError",
    "ReentrantEventError",
    "SchemaConfigError",
    "MISSING",
    "ErrorCondition",
    "EventKind",
    "FieldResult",
    "FieldRules",
    "FieldType",
    "FlagRecord",
    "FormFlags",
    "FormSnapshot",
    "InputEvent",
    "SchemaResult",
    "Trigger",
    "ValidationContext",
]
