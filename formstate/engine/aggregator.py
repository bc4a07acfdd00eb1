"""Schema aggregator: rolls field results up into one form-level summary."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from formstate.models.results import FieldResult, FormFlags, SchemaResult

__all__ = ["aggregate"]


def aggregate(fields: Mapping[str, FieldResult]) -> SchemaResult:
    """Build the Schema Result from the full per-field map.

    ``is_valid``, ``pristine`` and ``untouched`` are ANDed (any false wins);
    ``dirty`` and ``touched`` are ORed (any true wins). With no fields the
    form is valid, pristine and untouched.
    """
    results = list(fields.values())
    form = FormFlags(
        is_valid=all(r.is_valid for r in results),
        dirty=any(r.dirty for r in results),
        pristine=all(r.pristine for r in results),
        touched=any(r.touched for r in results),
        untouched=all(r.untouched for r in results),
    )
    return SchemaResult(
        is_valid=form.is_valid,
        form=form,
        fields=MappingProxyType(dict(fields)),
    )
