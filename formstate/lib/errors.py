"""Exceptions raised by formstate.

A field failing its rules is not an error: it shows up as data in
``FieldResult.errors``. Exceptions are reserved for bad configuration and for
using an engine the wrong way.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

__all__ = [
    "FormStateError",
    "SchemaConfigError",
    "InvalidEventError",
    "EngineDisposedError",
    "ReentrantEventError",
]


class FormStateError(Exception):
    """Base class for formstate exceptions.

    Carries the form and field involved, free-form details and a hint for
    fixing the problem. ``str()`` renders all of them; ``message`` is the bare
    description.
    """

    def __init__(
        self,
        message: str,
        *,
        form: Optional[str] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.form = form
        self.field = field
        self.details: Dict[str, Any] = dict(details or {})
        self.suggestion = suggestion

    def __str__(self) -> str:
        head = self.message
        if self.form or self.field:
            head = f"[{self.form or '?'}.{self.field or '*'}] {head}"
        lines: List[str] = [head]
        if self.details:
            lines.append("Details:")
            lines.extend(f"  {key}: {value}" for key, value in self.details.items())
        if self.suggestion:
            lines.append(f"Suggestion: {self.suggestion}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form, used by the CLI and structured logs."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "form": self.form,
            "field": self.field,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class SchemaConfigError(FormStateError):
    """A schema file or rule mapping cannot be turned into field rules.

    Examples: an unknown rule key, ``minLength`` above ``maxLength``, or a
    ``test`` name missing from the registry.
    """

    def __init__(self, message: str, *, path: Optional[str] = None, **kwargs: Any) -> None:
        details = dict(kwargs.pop("details", None) or {})
        if path:
            details["path"] = path
        super().__init__(message, details=details, **kwargs)
        self.path = path


class InvalidEventError(FormStateError):
    """An input event kind other than change, blur or focus."""

    def __init__(self, kind: Any, **kwargs: Any) -> None:
        super().__init__(
            f"Unknown input event kind: {kind!r}",
            suggestion="Use one of: change, blur, focus",
            **kwargs,
        )
        self.kind = kind


class EngineDisposedError(FormStateError):
    """The form engine was used after ``dispose()``."""

    def __init__(self, form: str) -> None:
        super().__init__(
            "Form engine has been disposed",
            form=form,
            suggestion="Create a new FormEngine for a newly mounted form",
        )


class ReentrantEventError(FormStateError):
    """An event arrived while the engine was still handling another one.

    Happens when a stage or a storage callback feeds an event back into the
    engine. The adapter layer must deliver events one at a time.
    """

    def __init__(self, form: str, field: Optional[str] = None) -> None:
        super().__init__(
            "Event received while a previous event is still being handled",
            form=form,
            field=field,
            suggestion="Queue the event and dispatch it after the current one returns",
        )
