"""Ordered post-processing stages applied to every published snapshot.

A stage is any callable that takes a ``FormSnapshot`` and returns one. Stages
run in the order they were declared. Each sees the output of the previous
stage and may add ``extras`` (for example model-level rule results) without
touching the engine's own state.

Example:
    pipeline = compose(validate_model([is_required("first_name")]), log_snapshot)
    engine = FormEngine(schema, stages=pipeline)
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Tuple, Union

from formstate.models.results import FormSnapshot

logger = logging.getLogger(__name__)

__all__ = ["Stage", "Pipeline", "compose"]

Stage = Callable[[FormSnapshot], FormSnapshot]


class Pipeline:
    """An immutable, ordered list of stages."""

    def __init__(self, stages: Iterable[Stage] = ()) -> None:
        self._stages: Tuple[Stage, ...] = tuple(stages)
        for stage in self._stages:
            if not callable(stage):
                raise TypeError(f"Pipeline stage must be callable, got {stage!r}")

    @property
    def stages(self) -> Tuple[Stage, ...]:
        return self._stages

    def then(self, stage: Union[Stage, "Pipeline"]) -> "Pipeline":
        """Return a new pipeline with ``stage`` (or another pipeline) appended."""
        if isinstance(stage, Pipeline):
            return Pipeline(self._stages + stage.stages)
        return Pipeline(self._stages + (stage,))

    def __call__(self, snapshot: FormSnapshot) -> FormSnapshot:
        for stage in self._stages:
            result = stage(snapshot)
            if not isinstance(result, FormSnapshot):
                raise TypeError(
                    f"Stage {getattr(stage, '__name__', stage)!r} returned "
                    f"{type(result).__name__}, expected FormSnapshot"
                )
            snapshot = result
        return snapshot

    def __iter__(self) -> Iterator[Stage]:
        return iter(self._stages)

    def __len__(self) -> int:
        return len(self._stages)

    def __repr__(self) -> str:
        names = [getattr(s, "__name__", type(s).__name__) for s in self._stages]
        return f"Pipeline({', '.join(names)})"


def compose(*stages: Union[Stage, Pipeline]) -> Pipeline:
    """Build a pipeline that applies ``stages`` left to right."""
    pipeline = Pipeline()
    for stage in stages:
        pipeline = pipeline.then(stage)
    return pipeline
