"""Whole-model validation rules.

Complements per-field schemas with rules that look at the full model, such
as "at least one contact method". A rule is a predicate over the model and a
message (or a function of the model producing one).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Union

from formstate.engine.pipeline import Stage
from formstate.models.results import FormSnapshot

logger = logging.getLogger(__name__)

__all__ = ["ModelRule", "is_required", "collect_errors", "validate_model"]

Message = Union[str, Callable[[Mapping[str, Any]], str]]


@dataclass(frozen=True)
class ModelRule:
    """A predicate over the whole model plus the message used when it fails."""

    predicate: Callable[[Mapping[str, Any]], bool]
    message: Message

    def check(self, model: Mapping[str, Any]) -> Optional[str]:
        """Return the failure message, or None when the predicate holds."""
        if self.predicate(model):
            return None
        return self.message(model) if callable(self.message) else self.message


def is_required(prop: str, message: Optional[Message] = None) -> ModelRule:
    """Rule that fails while ``prop`` is missing or falsy."""
    return ModelRule(
        predicate=lambda model: bool(model.get(prop)),
        message=message if message is not None else f"{prop} is a required field",
    )


def collect_errors(rules: Iterable[ModelRule], model: Mapping[str, Any]) -> List[str]:
    """Messages of all failing rules, in rule order."""
    errors = []
    for rule in rules:
        message = rule.check(model)
        if message is not None:
            errors.append(message)
    return errors


def validate_model(rules: Sequence[ModelRule]) -> Stage:
    """Stage adding ``is_valid`` and ``validation_errors`` to the snapshot extras."""
    rules = tuple(rules)

    def validate_model_stage(snapshot: FormSnapshot) -> FormSnapshot:
        errors = collect_errors(rules, snapshot.model)
        if errors:
            logger.debug("Model rules failed: %s", errors)
        return snapshot.with_extras(
            is_valid=not errors,
            validation_errors=tuple(errors),
        )

    return validate_model_stage
