"""Revalidation policy: re-run the validator or reuse the cached result.

Rules are checked in a fixed order and the first match wins:

1. the field has no cached result                  -> evaluate
2. the field is pristine                           -> evaluate
3. the event is for this field and its kind is the
   field's ``update_on`` trigger                    -> evaluate
4. the event is for this field and the cached
   result is invalid                               -> evaluate
5. anything else                                   -> reuse, refreshing flags

Rule 2 keeps untouched required fields reporting their errors from mount
onwards. Rule 4 keeps re-checking an invalid field on every event for it, so
a ``blur``-configured field clears its error as soon as the input is fixed.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from formstate.models.events import InputEvent
from formstate.models.flags import FlagRecord
from formstate.models.results import FieldResult
from formstate.models.rules import FieldRules

__all__ = ["Decision", "decide", "is_trigger"]


class Decision(str, Enum):
    """Why a field was (or was not) re-evaluated."""

    FIRST_EVALUATION = "first_evaluation"
    PRISTINE = "pristine"
    TRIGGER_MATCHED = "trigger_matched"
    CURRENTLY_INVALID = "currently_invalid"
    REUSE = "reuse"

    @property
    def evaluates(self) -> bool:
        return self is not Decision.REUSE


def is_trigger(rules: FieldRules, event: InputEvent) -> bool:
    """True when the event kind is the field's configured trigger."""
    return event.kind.value == rules.update_on.value


def decide(
    name: str,
    rules: FieldRules,
    flags: FlagRecord,
    cached: Optional[FieldResult],
    event: Optional[InputEvent] = None,
) -> Decision:
    """Decide whether field ``name`` must be re-evaluated.

    Args:
        name: Field under consideration
        rules: Its rule set
        flags: Its current Flag Record (after the event was applied)
        cached: Its previous result, or None if it was never evaluated
        event: The incoming event; None for programmatic model updates

    Returns:
        The first matching Decision
    """
    if cached is None:
        return Decision.FIRST_EVALUATION
    if flags.pristine:
        return Decision.PRISTINE
    if event is not None and event.name == name:
        if is_trigger(rules, event):
            return Decision.TRIGGER_MATCHED
        if not cached.is_valid:
            return Decision.CURRENTLY_INVALID
    return Decision.REUSE
