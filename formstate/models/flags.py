"""Per-field interaction flags."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict


@dataclass(frozen=True)
class FlagRecord:
    """Interaction state for a single field.

    Only ``dirty`` and ``touched`` are stored. ``pristine`` and ``untouched``
    are always computed from them, so the two pairs can never disagree.

    Attributes:
        dirty: The user has changed the field's value
        touched: The field has lost focus (or a checkbox was toggled)
    """

    dirty: bool = False
    touched: bool = False

    @property
    def pristine(self) -> bool:
        return not self.dirty

    @property
    def untouched(self) -> bool:
        return not self.touched

    def mark_dirty(self) -> "FlagRecord":
        """Return a copy with ``dirty`` set."""
        if self.dirty:
            return self
        return replace(self, dirty=True)

    def mark_touched(self) -> "FlagRecord":
        """Return a copy with ``touched`` set."""
        if self.touched:
            return self
        return replace(self, touched=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "dirty": self.dirty,
            "pristine": self.pristine,
            "touched": self.touched,
            "untouched": self.untouched,
        }

    def __str__(self) -> str:
        state = ["dirty" if self.dirty else "pristine"]
        state.append("touched" if self.touched else "untouched")
        return ", ".join(state)


INITIAL_FLAGS = FlagRecord()
