"""Input lifecycle events routed into the engine by the adapter layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from formstate.lib.errors import InvalidEventError


class EventKind(str, Enum):
    """Kind of input lifecycle event."""

    CHANGE = "change"
    BLUR = "blur"
    FOCUS = "focus"

    @classmethod
    def parse(cls, value: Union[str, "EventKind"]) -> "EventKind":
        """Convert a string such as ``"Blur"`` into an event kind.

        Raises:
            InvalidEventError: If the value is not a known event kind
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidEventError(value) from None


@dataclass(frozen=True)
class InputEvent:
    """A single user interaction with one field.

    Attributes:
        name: Field name the event belongs to
        kind: change, blur or focus
        value: Raw input value, or the option value for checkbox groups
        checked: Checked state for checkbox-style inputs
        checkable: True when the input is a checkbox in a group
    """

    name: str
    kind: EventKind
    value: Any = None
    checked: Optional[bool] = None
    checkable: bool = False

    @classmethod
    def change(cls, name: str, value: Any) -> "InputEvent":
        return cls(name=name, kind=EventKind.CHANGE, value=value)

    @classmethod
    def toggle(cls, name: str, option: str, checked: bool) -> "InputEvent":
        return cls(
            name=name,
            kind=EventKind.CHANGE,
            value=option,
            checked=checked,
            checkable=True,
        )

    @classmethod
    def blur(cls, name: str) -> "InputEvent":
        return cls(name=name, kind=EventKind.BLUR)

    @classmethod
    def focus(cls, name: str) -> "InputEvent":
        return cls(name=name, kind=EventKind.FOCUS)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InputEvent":
        """Create from a recorded event such as ``{"name": "a", "kind": "blur"}``.

        ``type`` is accepted as an alias for ``kind``. A ``checked`` key marks
        the event as coming from a checkbox.
        """
        kind = EventKind.parse(data.get("kind", data.get("type", "")))
        checked = data.get("checked")
        return cls(
            name=str(data["name"]),
            kind=kind,
            value=data.get("value"),
            checked=None if checked is None else bool(checked),
            checkable=bool(data.get("checkable", checked is not None)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: Dict[str, Any] = {"name": self.name, "kind": self.kind.value}
        if self.value is not None:
            data["value"] = self.value
        if self.checkable:
            data["checked"] = bool(self.checked)
        return data

    def __str__(self) -> str:
        return f"{self.kind.value}({self.name})"
