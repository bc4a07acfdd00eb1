"""Form state engine.

Model store, interaction tracker, field validator, revalidation policy and
schema aggregator, tied together by ``FormEngine``.
"""

from formstate.engine.aggregator import aggregate
from formstate.engine.bindings import CheckboxDescriptor, InputDescriptor
from formstate.engine.builder import FormBuilder
from formstate.engine.form import FormEngine
from formstate.engine.model_rules import ModelRule, collect_errors, is_required, validate_model
from formstate.engine.model_store import ModelStore
from formstate.engine.pipeline import Pipeline, Stage, compose
from formstate.engine.policy import Decision, decide
from formstate.engine.sync import SyncWith
from formstate.engine.tracker import InteractionTracker, toggle_option
from formstate.engine.validator import evaluate

__all__ = [
    "aggregate",
    "CheckboxDescriptor",
    "InputDescriptor",
    "FormBuilder",
    "FormEngine",
    "ModelRule",
    "collect_errors",
    "is_required",
    "validate_model",
    "ModelStore",
    "Pipeline",
    "Stage",
    "compose",
    "Decision",
    "decide",
    "SyncWith",
    "InteractionTracker",
    "toggle_option",
    "evaluate",
]
