"""Keep a form's model in sync with a caller-supplied storage.

The engine does not know how models are stored. ``SyncWith`` takes two
synchronous callables: ``load(key)`` is called once when the form mounts,
and ``save(key, model)`` after every model change. Neither is retried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

if TYPE_CHECKING:
    from formstate.engine.model_store import ModelStore

logger = logging.getLogger(__name__)

__all__ = ["SyncWith", "Loader", "Saver"]

Loader = Callable[[str], Optional[Mapping[str, Any]]]
Saver = Callable[[str, Mapping[str, Any]], None]


class SyncWith:
    """Load-on-mount and save-on-change hooks for one storage key.

    Example:
        storage = JsonFileStorage("./.forms")
        engine = FormEngine(schema, sync=SyncWith("signup", storage.load, storage.save))
    """

    def __init__(self, key: str, load: Loader, save: Saver) -> None:
        self.key = key
        self._load = load
        self._save = save
        self._unsubscribe: Optional[Callable[[], None]] = None

    @classmethod
    def to(cls, key: str, storage: Any) -> "SyncWith":
        """Build from any object with ``load(key)`` and ``save(key, model)``."""
        return cls(key, storage.load, storage.save)

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def load(self) -> Optional[Mapping[str, Any]]:
        """Read the stored model; a failing loader counts as "nothing stored"."""
        try:
            stored = self._load(self.key)
        except Exception:
            logger.warning(
                "Loading stored model for %r failed; starting from the initial model",
                self.key,
                exc_info=True,
            )
            return None
        if not stored:
            logger.debug("No stored model for %r", self.key)
            return None
        if not isinstance(stored, Mapping):
            logger.warning(
                "Ignoring stored model for %r: expected a mapping, got %s",
                self.key,
                type(stored).__name__,
            )
            return None
        return stored

    def attach(self, store: "ModelStore") -> None:
        """Load into ``store`` and start saving its changes."""
        if self.attached:
            raise RuntimeError(f"SyncWith({self.key!r}) is already attached")
        stored = self.load()
        if stored is not None:
            store.set_model(stored)
            logger.debug("Loaded stored model for %r (%d keys)", self.key, len(stored))
        self._unsubscribe = store.subscribe(self._on_change)

    def _on_change(self, previous: Mapping[str, Any], model: Mapping[str, Any]) -> None:
        self._save(self.key, dict(model))

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
