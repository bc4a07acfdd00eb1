"""Model store: the current field-value mapping of one form."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional

from formstate.models.values import MISSING

logger = logging.getLogger(__name__)

__all__ = ["ModelStore", "ModelListener"]

ModelListener = Callable[[Mapping[str, Any], Mapping[str, Any]], None]


class ModelStore:
    """Holds the model and notifies listeners when it is replaced.

    The stored mapping is never mutated: every update produces a new
    read-only copy, so a model handed out earlier stays as it was.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._model: Mapping[str, Any] = MappingProxyType(dict(initial or {}))
        self._listeners: List[ModelListener] = []

    @property
    def model(self) -> Mapping[str, Any]:
        return self._model

    def get(self, name: str) -> Any:
        """Current value of ``name``, or ``MISSING`` if it was never set."""
        return self._model.get(name, MISSING)

    def set_model(self, model: Mapping[str, Any]) -> Mapping[str, Any]:
        """Replace the whole model and notify listeners with (previous, next)."""
        previous = self._model
        self._model = MappingProxyType(dict(model))
        logger.debug("Model replaced (%d keys)", len(self._model))
        for listener in list(self._listeners):
            listener(previous, self._model)
        return self._model

    def set_property(self, name: str, value: Any) -> Mapping[str, Any]:
        """Replace exactly one key, leaving the others untouched."""
        updated = dict(self._model)
        updated[name] = value
        return self.set_model(updated)

    def subscribe(self, listener: ModelListener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._model

    def __len__(self) -> int:
        return len(self._model)
