"""Fluent assembly of a ``FormEngine`` and its stage pipeline.

Example:
    engine = (
        FormBuilder()
        .named("signup")
        .with_schema({"email": FieldRules(required=True, update_on="blur")})
        .with_rules([is_required("email")])
        .sync_with("signup", storage.load, storage.save)
        .build()
    )

Stages run in the order they were added. ``with_rules`` adds a stage at the
point it is called, so later stages see its ``validation_errors``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from formstate.engine.form import FormEngine
from formstate.engine.model_rules import ModelRule, validate_model
from formstate.engine.pipeline import Pipeline, Stage
from formstate.engine.sync import Loader, Saver, SyncWith
from formstate.models.rules import FieldRules

__all__ = ["FormBuilder"]


class FormBuilder:
    """Collects form configuration and builds engines from it.

    A builder can be reused: each ``build()`` returns an independent engine
    with its own model, flags and caches.
    """

    def __init__(self) -> None:
        self._name = "form"
        self._schema: Dict[str, Union[FieldRules, Mapping[str, Any]]] = {}
        self._initial_model: Optional[Mapping[str, Any]] = None
        self._stages: List[Stage] = []
        self._sync: Optional[tuple[str, Loader, Saver]] = None

    def named(self, name: str) -> "FormBuilder":
        self._name = name
        return self

    def with_schema(
        self, schema: Mapping[str, Union[FieldRules, Mapping[str, Any]]]
    ) -> "FormBuilder":
        """Add field rules; later calls override earlier rules for the same field."""
        self._schema.update(schema)
        return self

    def with_field(self, name: str, rules: Optional[FieldRules] = None, **options: Any) -> "FormBuilder":
        self._schema[name] = rules if rules is not None else FieldRules(**options)
        return self

    def with_initial_model(self, model: Mapping[str, Any]) -> "FormBuilder":
        self._initial_model = dict(model)
        return self

    def with_rules(self, rules: Sequence[ModelRule]) -> "FormBuilder":
        return self.with_stage(validate_model(rules))

    def with_stage(self, stage: Union[Stage, Pipeline]) -> "FormBuilder":
        if isinstance(stage, Pipeline):
            self._stages.extend(stage.stages)
        else:
            self._stages.append(stage)
        return self

    def sync_with(self, key: str, load: Loader, save: Saver) -> "FormBuilder":
        self._sync = (key, load, save)
        return self

    @property
    def pipeline(self) -> Pipeline:
        return Pipeline(self._stages)

    def build(self) -> FormEngine:
        sync = SyncWith(*self._sync) if self._sync is not None else None
        return FormEngine(
            self._schema,
            self._initial_model,
            name=self._name,
            stages=self.pipeline,
            sync=sync,
        )
