"""Boundary to the host UI framework.

The engine never imports a UI toolkit. A host framework implements
``Renderer`` and is handed the current snapshot plus an object that can
produce input bindings (normally the ``FormEngine`` itself).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from formstate.engine.bindings import CheckboxDescriptor, InputDescriptor
from formstate.models.results import FormSnapshot

__all__ = ["Bindings", "Renderer"]


@runtime_checkable
class Bindings(Protocol):
    """Source of input descriptors for the renderer."""

    def bind_input(self, name: str) -> InputDescriptor: ...

    def bind_checkbox(self, name: str, option: str) -> CheckboxDescriptor: ...


@runtime_checkable
class Renderer(Protocol):
    """Implemented by the host UI framework."""

    def render(self, snapshot: FormSnapshot, bindings: Bindings) -> Any: ...
