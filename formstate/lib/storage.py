"""Model storage backends usable with ``SyncWith``.

The engine only needs two callables, ``load(key)`` and ``save(key, model)``.
These backends provide them for tests (in memory) and for simple local
persistence (one JSON file per key).
"""

from __future__ import annotations

import copy
import json
import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)

__all__ = ["ModelStorage", "MemoryStorage", "JsonFileStorage"]

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class ModelStorage(ABC):
    """Abstract base for model storage backends."""

    @abstractmethod
    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored model for ``key``, or None if nothing is stored."""

    @abstractmethod
    def save(self, key: str, model: Mapping[str, Any]) -> None:
        """Store ``model`` under ``key``, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``; returns True if something was removed."""

    @abstractmethod
    def keys(self) -> List[str]:
        """All stored keys, sorted."""


class MemoryStorage(ModelStorage):
    """Keeps deep copies of models in a dict.

    Example:
        >>> storage = MemoryStorage()
        >>> storage.save("signup", {"email": "a@b.c"})
        >>> storage.load("signup")
        {'email': 'a@b.c'}
    """

    def __init__(self, initial: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self._data: Dict[str, Dict[str, Any]] = {
            key: copy.deepcopy(dict(model)) for key, model in (initial or {}).items()
        }
        self.save_count = 0

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        stored = self._data.get(key)
        return copy.deepcopy(stored) if stored is not None else None

    def save(self, key: str, model: Mapping[str, Any]) -> None:
        self._data[key] = copy.deepcopy(dict(model))
        self.save_count += 1

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> List[str]:
        return sorted(self._data)


class JsonFileStorage(ModelStorage):
    """Stores each model as ``<directory>/<key>.json``.

    Not safe for several engines sharing one key at the same time: the last
    save wins.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(
                f"Invalid storage key {key!r}: use letters, digits, '.', '_' or '-'"
            )
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self._path(key)

        if not path.exists():
            logger.debug("No stored model for %s", key)
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning("Invalid model file for %s: %s", key, exc)
            return None

        model = data.get("model") if isinstance(data, dict) else None
        if not isinstance(model, dict):
            logger.warning("Model file for %s has no 'model' object", key)
            return None

        logger.debug("Loaded model for %s (saved %s)", key, data.get("saved_at", "unknown"))
        return model

    def save(self, key: str, model: Mapping[str, Any]) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        data = {
            "key": key,
            "model": dict(model),
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.debug("Saved model for %s", key)

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if path.exists():
            path.unlink()
            logger.info("Deleted stored model for %s", key)
            return True
        return False

    def keys(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))
