"""Field validator: runs one field's rule set against its current value.

Checks always run in the same order and every failure is reported:

1. required
2. type
3. min_length
4. max_length
5. custom test

Structural failures (1-4) get a default message unless the rule set supplies
``format_error``. The custom test reports its own message through the
``fail`` callback and never goes through ``format_error``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from formstate.models.flags import INITIAL_FLAGS, FlagRecord
from formstate.models.results import FieldResult
from formstate.models.rules import ErrorCondition, FieldRules, ValidationContext
from formstate.models.values import MISSING, describe_type, is_empty, value_length

logger = logging.getLogger(__name__)

__all__ = ["evaluate", "default_message", "run_test"]


def default_message(condition: ErrorCondition, context: ValidationContext) -> str:
    """Templated message for a structural rule failure."""
    name = context.field
    rules = context.rules
    if condition is ErrorCondition.REQUIRED:
        return f"{name} is required"
    if condition is ErrorCondition.TYPE:
        expected = rules.type.value if rules.type is not None else "?"
        return f"{name} must be of type {expected}, but got {describe_type(context.value)}"
    if condition is ErrorCondition.MIN_LENGTH:
        return f"{name} must have at least {rules.min_length} characters"
    return f"{name} must not have more than {rules.max_length} characters"


def missing_message(name: str) -> str:
    """Message for a schema field whose key is absent from the model."""
    return f"{name} has no value"


def _render_error(condition: ErrorCondition, context: ValidationContext) -> str:
    formatter = context.rules.format_error
    if formatter is None:
        return default_message(condition, context)
    return formatter(
        ValidationContext(
            field=context.field,
            value=context.value,
            rules=context.rules,
            schema=context.schema,
            model=context.model,
            condition=condition,
        )
    )


def run_test(rules: FieldRules, value: Any, context: ValidationContext) -> Optional[str]:
    """Run the custom test rule and return its failure message, if any.

    The test must call ``fail`` synchronously. If it calls it more than once
    the last non-empty message wins. Exceptions raised by the test propagate.
    """
    if rules.test is None:
        return None

    failure: List[str] = []

    def fail(message: str) -> None:
        if message:
            failure[:] = [message]

    rules.test(value, fail, context)
    return failure[0] if failure else None


def evaluate(
    name: str,
    rules: FieldRules,
    value: Any = MISSING,
    *,
    schema: Optional[Mapping[str, FieldRules]] = None,
    model: Optional[Mapping[str, Any]] = None,
    flags: FlagRecord = INITIAL_FLAGS,
) -> FieldResult:
    """Evaluate ``rules`` against ``value`` for field ``name``.

    Pure for pure rules: the same rules, value and context always give the
    same result.

    Args:
        name: Field name, used in default messages
        rules: The field's rule set
        value: Current value, ``MISSING`` when the key is absent
        schema: Full schema, passed through to tests and formatters
        model: Full model, passed through to tests and formatters
        flags: Flag Record to attach to the result

    Returns:
        FieldResult with every failing rule's message, in check order
    """
    context = ValidationContext(
        field=name,
        value=value,
        rules=rules,
        schema=schema if schema is not None else {name: rules},
        model=model if model is not None else {},
    )
    errors: List[str] = []

    if rules.required and is_empty(value):
        errors.append(_render_error(ErrorCondition.REQUIRED, context))

    if rules.type is not None and not rules.type.matches(value):
        errors.append(_render_error(ErrorCondition.TYPE, context))

    # A limit of 0 is no limit
    length = value_length(value)
    if rules.min_length:
        if length is None or length < rules.min_length:
            errors.append(_render_error(ErrorCondition.MIN_LENGTH, context))

    if rules.max_length:
        if length is not None and length > rules.max_length:
            errors.append(_render_error(ErrorCondition.MAX_LENGTH, context))

    failure = run_test(rules, value, context)
    if failure:
        errors.append(failure)

    if errors:
        logger.debug("Field %s invalid: %s", name, errors)
    return FieldResult(is_valid=not errors, errors=tuple(errors), flags=flags)
