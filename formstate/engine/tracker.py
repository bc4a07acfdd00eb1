"""Interaction tracker: dirty/touched flags per field."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from formstate.engine.model_store import ModelStore
from formstate.models.events import EventKind, InputEvent
from formstate.models.flags import INITIAL_FLAGS, FlagRecord

logger = logging.getLogger(__name__)

__all__ = ["InteractionTracker", "toggle_option"]


def toggle_option(current: Any, option: Any, checked: bool) -> List[Any]:
    """New checkbox-group value after ``option`` is (un)checked.

    A current value that is not a list counts as an empty group. Checking an
    option that is already present leaves the list unchanged; unchecking
    removes every occurrence.
    """
    values = list(current) if isinstance(current, (list, tuple)) else []
    if checked:
        if option not in values:
            values.append(option)
        return values
    return [v for v in values if v != option]


class InteractionTracker:
    """Maintains a Flag Record for every field that has been seen.

    Records are created on first use and never removed while the form
    lives. A ``change`` event also writes the new value into the model store.
    """

    def __init__(self, store: ModelStore) -> None:
        self._store = store
        self._flags: Dict[str, FlagRecord] = {}

    def ensure_initialized(self, name: str) -> FlagRecord:
        """Create the default record for ``name`` if it does not exist yet."""
        record = self._flags.get(name)
        if record is None:
            record = INITIAL_FLAGS
            self._flags[name] = record
        return record

    def flags(self, name: str) -> FlagRecord:
        return self.ensure_initialized(name)

    def snapshot(self) -> Mapping[str, FlagRecord]:
        return MappingProxyType(dict(self._flags))

    def record_event(self, event: InputEvent) -> FlagRecord:
        """Apply one input event to the field's flags (and the model on change)."""
        record = self.ensure_initialized(event.name)

        if event.kind is EventKind.CHANGE:
            if event.checkable:
                record = record.mark_touched().mark_dirty()
                value = toggle_option(
                    self._store.get(event.name), event.value, bool(event.checked)
                )
            else:
                record = record.mark_dirty()
                value = event.value
            # Flags first, so model listeners see the post-event state
            self._flags[event.name] = record
            self._store.set_property(event.name, value)
        elif event.kind is EventKind.BLUR:
            record = record.mark_touched()
            self._flags[event.name] = record

        logger.debug("%s -> %s", event, record)
        return record

    def clear(self) -> None:
        self._flags.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._flags
