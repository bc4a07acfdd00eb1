"""YAML loader for form schemas, models and recorded event streams.

Lets a schema live next to the application's other configuration.

Example YAML (signup.yaml):
    name: signup
    fields:
      username:
        required: true
        maxLength: 8
        messages:
          required: "Pick a {field}"
      password:
        test: password_strength
        updateOn: blur

Usage:
    from formstate.lib.config_loader import load_schema
    document = load_schema("signup.yaml", tests={"password_strength": check_password})
    engine = FormEngine(document.fields, name=document.name)

Custom tests cannot be written in YAML; they are referenced by name and looked
up in the ``tests`` registry passed by the caller.
"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from formstate.engine.validator import default_message
from formstate.lib.env import expand_value
from formstate.lib.errors import SchemaConfigError
from formstate.models.events import InputEvent
from formstate.models.rules import (
    ErrorCondition,
    ErrorFormatter,
    FieldRules,
    FieldType,
    TestRule,
    Trigger,
    ValidationContext,
)
from formstate.models.values import is_empty

logger = logging.getLogger(__name__)

__all__ = [
    "FieldRulesConfig",
    "SchemaDocument",
    "load_schema",
    "schema_from_dict",
    "load_model_file",
    "load_events_file",
    "read_yaml",
]

MESSAGE_PLACEHOLDERS = frozenset(
    {"field", "value", "condition", "type", "min_length", "max_length"}
)

# Accept the snake_case spelling of the camelCase condition names
_CONDITION_ALIASES = {
    "min_length": ErrorCondition.MIN_LENGTH.value,
    "max_length": ErrorCondition.MAX_LENGTH.value,
}


class FieldRulesConfig(BaseModel):
    """Pydantic model for one field's rules in a schema file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    required: bool = False
    type: Optional[FieldType] = None
    min_length: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("min_length", "minLength")
    )
    max_length: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("max_length", "maxLength")
    )
    update_on: Optional[Trigger] = Field(
        default=None, validation_alias=AliasChoices("update_on", "updateOn")
    )
    test: Optional[str] = Field(default=None, description="Name of a registered custom test")
    messages: Dict[ErrorCondition, str] = Field(default_factory=dict)

    @field_validator("messages", mode="before")
    @classmethod
    def normalize_message_keys(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {_CONDITION_ALIASES.get(str(k), k): msg for k, msg in v.items()}

    @field_validator("messages")
    @classmethod
    def validate_placeholders(cls, v: Dict[ErrorCondition, str]) -> Dict[ErrorCondition, str]:
        for condition, template in v.items():
            names = {
                name for _, name, _, _ in string.Formatter().parse(template) if name
            }
            unknown = names - MESSAGE_PLACEHOLDERS
            if unknown:
                raise ValueError(
                    f"message for {condition.value} uses unknown placeholders "
                    f"{sorted(unknown)}; allowed: {sorted(MESSAGE_PLACEHOLDERS)}"
                )
        return v

    @model_validator(mode="after")
    def validate_length_bounds(self) -> "FieldRulesConfig":
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError(
                f"min_length ({self.min_length}) is greater than max_length ({self.max_length})"
            )
        return self


class SchemaFileConfig(BaseModel):
    """Pydantic model for a whole schema file."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    fields: Dict[str, FieldRulesConfig] = Field(default_factory=dict)


@dataclass
class SchemaDocument:
    """A schema loaded from configuration."""

    name: Optional[str]
    fields: Dict[str, FieldRules] = field(default_factory=dict)
    source: Optional[str] = None


def _message_formatter(messages: Mapping[ErrorCondition, str]) -> ErrorFormatter:
    """Build a ``format_error`` that fills templates, falling back to defaults."""

    def format_error(context: ValidationContext) -> str:
        if context.condition is None:
            raise ValueError(
                f"format_error for {context.field!r} needs a failing condition"
            )
        template = messages.get(context.condition)
        if template is None:
            return default_message(context.condition, context)
        rules = context.rules
        return template.format(
            field=context.field,
            value="" if is_empty(context.value) else context.value,
            condition=context.condition.value,
            type=rules.type.value if rules.type is not None else "",
            min_length=rules.min_length,
            max_length=rules.max_length,
        )

    return format_error


def _build_rules(
    name: str,
    config: FieldRulesConfig,
    tests: Mapping[str, TestRule],
    default_update_on: Trigger,
    source: Optional[str],
) -> FieldRules:
    test: Optional[TestRule] = None
    if config.test is not None:
        if config.test not in tests:
            raise SchemaConfigError(
                f"Unknown test '{config.test}'",
                field=name,
                path=source,
                suggestion=(
                    f"Register it in the tests mapping; known tests: {sorted(tests) or 'none'}"
                ),
            )
        test = tests[config.test]

    return FieldRules(
        required=config.required,
        type=config.type,
        min_length=config.min_length,
        max_length=config.max_length,
        test=test,
        update_on=config.update_on or default_update_on,
        format_error=_message_formatter(config.messages) if config.messages else None,
    )


def schema_from_dict(
    config: Mapping[str, Any],
    *,
    tests: Optional[Mapping[str, TestRule]] = None,
    default_update_on: Union[Trigger, str] = Trigger.CHANGE,
    source: Optional[str] = None,
) -> SchemaDocument:
    """Validate a parsed schema document and build field rules from it.

    Raises:
        SchemaConfigError: If the document is malformed or names an unknown test
    """
    try:
        parsed = SchemaFileConfig.model_validate(expand_value(dict(config)))
    except ValidationError as exc:
        raise SchemaConfigError(
            "Invalid schema configuration",
            path=source,
            details={
                ".".join(str(p) for p in err["loc"]): err["msg"] for err in exc.errors()
            },
        ) from exc

    trigger = Trigger(default_update_on)
    registry = tests or {}
    fields = {
        name: _build_rules(name, rules, registry, trigger, source)
        for name, rules in parsed.fields.items()
    }
    logger.debug("Loaded schema %s with %d fields", parsed.name or "<unnamed>", len(fields))
    return SchemaDocument(name=parsed.name, fields=fields, source=source)


def read_yaml(path: Union[str, Path]) -> Any:
    """Parse a YAML (or JSON) file, wrapping I/O, encoding and syntax errors."""
    path = Path(path)
    if not path.exists():
        raise SchemaConfigError(f"File not found: {path}", path=str(path))
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise SchemaConfigError(f"Invalid YAML in {path.name}: {exc}", path=str(path)) from exc
    except UnicodeDecodeError as exc:
        raise SchemaConfigError(
            f"{path.name} is not valid UTF-8: {exc.reason}",
            path=str(path),
            suggestion="Save the file with UTF-8 encoding",
        ) from exc
    except OSError as exc:
        raise SchemaConfigError(f"Cannot read {path.name}: {exc}", path=str(path)) from exc


def load_schema(
    path: Union[str, Path],
    *,
    tests: Optional[Mapping[str, TestRule]] = None,
    default_update_on: Union[Trigger, str] = Trigger.CHANGE,
) -> SchemaDocument:
    """Load a schema file. The form name defaults to the file's stem."""
    path = Path(path)
    data = read_yaml(path)
    if not isinstance(data, dict):
        raise SchemaConfigError("Schema file must contain a mapping", path=str(path))
    document = schema_from_dict(
        data, tests=tests, default_update_on=default_update_on, source=str(path)
    )
    if document.name is None:
        document.name = path.stem
    return document


def load_model_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a model (field name -> value) from a YAML or JSON file."""
    data = read_yaml(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaConfigError("Model file must contain a mapping", path=str(path))
    return {str(k): v for k, v in data.items()}


def load_events_file(path: Union[str, Path]) -> List[InputEvent]:
    """Load a recorded event stream.

    The file holds either a list of events or a mapping with an ``events``
    list. Each event is a mapping with ``name``, ``kind`` and optionally
    ``value`` and ``checked``.
    """
    data = read_yaml(path)
    if isinstance(data, dict):
        data = data.get("events")
    if not isinstance(data, list):
        raise SchemaConfigError("Events file must contain a list of events", path=str(path))

    events: List[InputEvent] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict) or "name" not in item:
            raise SchemaConfigError(
                f"Event #{index + 1} must be a mapping with a 'name'", path=str(path)
            )
        events.append(InputEvent.from_dict(item))
    return events
