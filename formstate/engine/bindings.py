"""Input descriptors handed to the adapter layer.

A descriptor carries what a concrete widget needs to render one input and
the handlers it should call. Every handler turns into an ``InputEvent`` and
goes through the engine, so flags, model and validation stay in step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Protocol

from formstate.models.events import InputEvent
from formstate.models.values import MISSING

if TYPE_CHECKING:
    from formstate.models.results import FormSnapshot

__all__ = ["EventSink", "InputDescriptor", "CheckboxDescriptor", "bind_input", "bind_checkbox"]


class EventSink(Protocol):
    """Anything that accepts input events (normally a ``FormEngine``)."""

    def handle_event(self, event: InputEvent) -> "FormSnapshot": ...

    def get_value(self, name: str) -> Any: ...


@dataclass(frozen=True)
class InputDescriptor:
    """Binding for a text-like input.

    Attributes:
        name: Field name
        value: Current model value, or "" when unset
        on_change: Call with the new raw value
        on_blur: Call when the input loses focus
        on_focus: Call when the input gains focus
    """

    name: str
    value: Any
    on_change: Callable[[Any], "FormSnapshot"]
    on_blur: Callable[[], "FormSnapshot"]
    on_focus: Callable[[], "FormSnapshot"]

    def as_props(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "on_change": self.on_change,
            "on_blur": self.on_blur,
            "on_focus": self.on_focus,
        }


@dataclass(frozen=True)
class CheckboxDescriptor:
    """Binding for one checkbox in a group stored as a list of strings.

    Attributes:
        name: Field name of the group
        value: The option this checkbox adds to or removes from the group
        checked: Whether the option is currently in the group
        on_change: Call with the new checked state
        on_blur: Call when the checkbox loses focus
        on_focus: Call when the checkbox gains focus
    """

    name: str
    value: str
    checked: bool
    on_change: Callable[[bool], "FormSnapshot"]
    on_blur: Callable[[], "FormSnapshot"]
    on_focus: Callable[[], "FormSnapshot"]

    def as_props(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "checked": self.checked,
            "on_change": self.on_change,
            "on_blur": self.on_blur,
            "on_focus": self.on_focus,
        }


def bind_input(sink: EventSink, name: str) -> InputDescriptor:
    value = sink.get_value(name)
    return InputDescriptor(
        name=name,
        value="" if value is MISSING or value is None else value,
        on_change=lambda raw: sink.handle_event(InputEvent.change(name, raw)),
        on_blur=lambda: sink.handle_event(InputEvent.blur(name)),
        on_focus=lambda: sink.handle_event(InputEvent.focus(name)),
    )


def bind_checkbox(sink: EventSink, name: str, option: str) -> CheckboxDescriptor:
    current = sink.get_value(name)
    checked = isinstance(current, (list, tuple)) and option in current
    return CheckboxDescriptor(
        name=name,
        value=option,
        checked=checked,
        on_change=lambda state: sink.handle_event(InputEvent.toggle(name, option, state)),
        on_blur=lambda: sink.handle_event(InputEvent.blur(name)),
        on_focus=lambda: sink.handle_event(InputEvent.focus(name)),
    )
