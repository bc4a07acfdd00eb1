"""Form engine: one instance per mounted form.

Owns the model store, the flag records and the per-field result cache. Each
incoming event runs through the same steps:

1. the interaction tracker updates the field's flags (and the model on change)
2. the revalidation policy decides, per schema field, whether to evaluate
3. the validator runs, or the cached result is reused with fresh flags
4. the aggregator rebuilds the schema result from all field results
5. the stage pipeline turns (model, schema result) into the published snapshot
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Union,
)

from formstate.engine.aggregator import aggregate
from formstate.engine.bindings import (
    CheckboxDescriptor,
    InputDescriptor,
    bind_checkbox,
    bind_input,
)
from formstate.engine.model_store import ModelStore
from formstate.engine.pipeline import Pipeline, Stage
from formstate.engine.policy import decide
from formstate.engine.sync import SyncWith
from formstate.engine.tracker import InteractionTracker
from formstate.engine.validator import evaluate, missing_message
from formstate.lib.errors import EngineDisposedError, ReentrantEventError
from formstate.lib.logging import get_form_logger
from formstate.models.events import InputEvent
from formstate.models.flags import FlagRecord
from formstate.models.results import FieldResult, FormSnapshot, SchemaResult
from formstate.models.rules import FieldRules, freeze_schema
from formstate.models.values import MISSING

if TYPE_CHECKING:
    from formstate.adapters import Renderer

__all__ = ["FormEngine"]


class FormEngine:
    """Tracks model, flags and validation for a single form.

    Example:
        engine = FormEngine({"username": FieldRules(required=True, max_length=8)})
        engine.schema_result.is_valid  # False: username is required
        engine.change("username", "ada")
        engine.schema_result.is_valid  # True

    The engine is synchronous and not re-entrant: the adapter layer must
    deliver one event at a time.
    """

    def __init__(
        self,
        schema: Mapping[str, Union[FieldRules, Mapping[str, Any]]],
        initial_model: Optional[Mapping[str, Any]] = None,
        *,
        name: str = "form",
        stages: Union[Pipeline, Iterable[Stage]] = (),
        sync: Optional[SyncWith] = None,
    ) -> None:
        self.name = name
        self._schema = freeze_schema(schema)
        self._pipeline = stages if isinstance(stages, Pipeline) else Pipeline(stages)
        self._store = ModelStore(initial_model)
        self._tracker = InteractionTracker(self._store)
        self._results: Dict[str, FieldResult] = {}
        self._schema_result = SchemaResult()
        self._sync = sync
        self._busy = False
        self._disposed = False
        self._logger = get_form_logger(__name__, form=name)

        for field_name in self._schema:
            self._tracker.ensure_initialized(field_name)

        if sync is not None:
            sync.attach(self._store)

        self._logger.debug(
            "Mounted form with %d fields: %s", len(self._schema), ", ".join(self._schema)
        )
        self._snapshot = self._publish(None)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def schema(self) -> Mapping[str, FieldRules]:
        return self._schema

    @property
    def model(self) -> Mapping[str, Any]:
        return self._store.model

    @property
    def flags(self) -> Mapping[str, FlagRecord]:
        return self._tracker.snapshot()

    @property
    def schema_result(self) -> SchemaResult:
        return self._schema_result

    @property
    def snapshot(self) -> FormSnapshot:
        return self._snapshot

    @property
    def disposed(self) -> bool:
        return self._disposed

    def get_value(self, name: str) -> Any:
        """Model value for ``name``, or ``MISSING``."""
        return self._store.get(name)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def handle_event(self, event: InputEvent) -> FormSnapshot:
        """Apply one input event and return the new snapshot.

        A ``save`` error from storage sync propagates, but only after the
        schema result has been rebuilt for the already-updated model.
        """
        with self._transition(event.name):
            try:
                self._tracker.record_event(event)
            finally:
                self._publish(event)
            return self._snapshot

    def change(self, name: str, value: Any) -> FormSnapshot:
        return self.handle_event(InputEvent.change(name, value))

    def check(self, name: str, option: str, checked: bool = True) -> FormSnapshot:
        return self.handle_event(InputEvent.toggle(name, option, checked))

    def blur(self, name: str) -> FormSnapshot:
        return self.handle_event(InputEvent.blur(name))

    def focus(self, name: str) -> FormSnapshot:
        return self.handle_event(InputEvent.focus(name))

    # ------------------------------------------------------------------
    # Programmatic updates
    # ------------------------------------------------------------------

    def set_model(self, model: Mapping[str, Any]) -> FormSnapshot:
        """Replace the model without marking any field dirty.

        Only first-time and pristine fields are re-evaluated; dirty fields keep
        their cached results until their next event.
        """
        with self._transition(None):
            try:
                self._store.set_model(model)
            finally:
                self._publish(None)
            return self._snapshot

    def set_property(self, name: str, value: Any) -> FormSnapshot:
        """Replace one model key without marking the field dirty."""
        with self._transition(name):
            try:
                self._store.set_property(name, value)
            finally:
                self._publish(None)
            return self._snapshot

    def refresh(self) -> FormSnapshot:
        """Re-run policy, aggregation and stages with no triggering event."""
        with self._transition(None):
            return self._publish(None)

    # ------------------------------------------------------------------
    # Adapter boundary
    # ------------------------------------------------------------------

    def bind_input(self, name: str) -> InputDescriptor:
        self._check_alive()
        self._tracker.ensure_initialized(name)
        return bind_input(self, name)

    def bind_checkbox(self, name: str, option: str) -> CheckboxDescriptor:
        self._check_alive()
        self._tracker.ensure_initialized(name)
        return bind_checkbox(self, name, option)

    def render(self, renderer: "Renderer") -> Any:
        """Hand the current snapshot and this engine's bindings to ``renderer``."""
        self._check_alive()
        return renderer.render(self.snapshot, self)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """Release listeners, flags and cached results. Safe to call twice."""
        if self._disposed:
            return
        if self._sync is not None:
            self._sync.detach()
        self._store.clear_listeners()
        self._tracker.clear()
        self._results.clear()
        self._disposed = True
        self._logger.debug("Disposed form")

    def __enter__(self) -> "FormEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else ("valid" if self._schema_result.is_valid else "invalid")
        return f"FormEngine(name={self.name!r}, fields={len(self._schema)}, {state})"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_alive(self) -> None:
        if self._disposed:
            raise EngineDisposedError(self.name)

    @contextmanager
    def _transition(self, field_name: Optional[str]) -> Iterator[None]:
        self._check_alive()
        if self._busy:
            raise ReentrantEventError(self.name, field_name)
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _resolve(self, name: str, rules: FieldRules, event: Optional[InputEvent]) -> FieldResult:
        flags = self._tracker.flags(name)
        cached = self._results.get(name)
        decision = decide(name, rules, flags, cached, event)

        if cached is not None and not decision.evaluates:
            return cached.with_flags(flags)

        self._logger.debug(
            "Evaluating %s (%s)", name, decision.value, extra={"field": name}
        )
        value = self._store.get(name)
        result = evaluate(
            name,
            rules,
            value,
            schema=self._schema,
            model=self._store.model,
            flags=flags,
        )
        if value is MISSING and result.is_valid:
            # A schema field absent from the model has nothing to validate
            return FieldResult(is_valid=False, errors=(missing_message(name),), flags=flags)
        return result

    def _publish(self, event: Optional[InputEvent]) -> FormSnapshot:
        for name, rules in self._schema.items():
            self._results[name] = self._resolve(name, rules, event)

        self._schema_result = aggregate(self._results)
        snapshot = FormSnapshot(
            model=self._store.model,
            schema=self._schema_result,
            extras=MappingProxyType({}),
        )
        self._snapshot = self._pipeline(snapshot)
        return self._snapshot
