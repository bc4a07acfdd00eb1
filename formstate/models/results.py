"""Validation results for single fields, the whole schema and the form."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from formstate.models.flags import INITIAL_FLAGS, FlagRecord


@dataclass(frozen=True)
class FieldResult:
    """Outcome of evaluating one field, paired with its flags.

    The flags are a copy of the field's Flag Record at the time the result was
    produced or last reused, so cached errors always travel with the current
    dirty/touched state.
    """

    is_valid: bool
    errors: Tuple[str, ...] = ()
    flags: FlagRecord = INITIAL_FLAGS

    @property
    def dirty(self) -> bool:
        return self.flags.dirty

    @property
    def pristine(self) -> bool:
        return self.flags.pristine

    @property
    def touched(self) -> bool:
        return self.flags.touched

    @property
    def untouched(self) -> bool:
        return self.flags.untouched

    @property
    def first_error(self) -> str | None:
        return self.errors[0] if self.errors else None

    def with_flags(self, flags: FlagRecord) -> "FieldResult":
        """Return this result with only its flags replaced."""
        if flags == self.flags:
            return self
        return replace(self, flags=flags)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"is_valid": self.is_valid, "errors": list(self.errors)}
        data.update(self.flags.to_dict())
        return data


@dataclass(frozen=True)
class FormFlags:
    """Form-level roll-up of the per-field results."""

    is_valid: bool = True
    dirty: bool = False
    pristine: bool = True
    touched: bool = False
    untouched: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "dirty": self.dirty,
            "pristine": self.pristine,
            "touched": self.touched,
            "untouched": self.untouched,
        }


@dataclass(frozen=True)
class SchemaResult:
    """Form-wide validation summary.

    A derived view: always rebuilt from the full set of field results by the
    aggregator, never patched in place.
    """

    is_valid: bool = True
    form: FormFlags = field(default_factory=FormFlags)
    fields: Mapping[str, FieldResult] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def errors(self) -> Dict[str, Tuple[str, ...]]:
        """Errors of the invalid fields, keyed by field name."""
        return {name: result.errors for name, result in self.fields.items() if result.errors}

    def __getitem__(self, name: str) -> FieldResult:
        return self.fields[name]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "form": self.form.to_dict(),
            "fields": {name: result.to_dict() for name, result in self.fields.items()},
        }


@dataclass(frozen=True)
class FormSnapshot:
    """What the rendering layer sees after every event.

    Attributes:
        model: Read-only current model
        schema: Schema result for the current model and flags
        extras: Values contributed by pipeline stages
    """

    model: Mapping[str, Any]
    schema: SchemaResult
    extras: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_valid(self) -> bool:
        """Schema validity combined with any ``is_valid`` a stage reported."""
        return self.schema.is_valid and bool(self.extras.get("is_valid", True))

    def with_extras(self, **values: Any) -> "FormSnapshot":
        """Return a copy with ``values`` merged into ``extras``."""
        merged = dict(self.extras)
        merged.update(values)
        return replace(self, extras=MappingProxyType(merged))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": dict(self.model),
            "schema": self.schema.to_dict(),
            "extras": dict(self.extras),
        }
