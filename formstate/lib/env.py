"""Environment variables in schema files.

Schema values may reference the environment as ``${NAME}``, ``$NAME`` or
``${NAME:-fallback}``. ``load_env_file`` (python-dotenv) can populate the
environment from a file first, for example from the CLI's ``--env-file``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Union

from dotenv import load_dotenv

__all__ = ["expand_env_vars", "expand_value", "load_env_file"]

_REFERENCE = re.compile(
    r"\$\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<fallback>[^}]*))?\}"
    r"|\$(?P<bare>[A-Za-z_][A-Za-z0-9_]*)"
)


def load_env_file(path: Union[str, Path], *, override: bool = False) -> bool:
    """Read ``NAME=value`` lines from ``path`` into ``os.environ``.

    Existing variables win unless ``override`` is set. Returns False when
    the file is missing or defines nothing.
    """
    return load_dotenv(dotenv_path=path, override=override)


def expand_env_vars(value: str, *, strict: bool = False) -> str:
    """Substitute environment references in ``value``.

    An unset variable without a fallback is left as written, or raises
    ``KeyError`` when ``strict`` is set.

    Example:
        >>> os.environ["NICK_MAX"] = "12"
        >>> expand_env_vars("${NICK_MAX}-${NICK_MIN:-3}")
        '12-3'
    """

    def substitute(match: "re.Match[str]") -> str:
        name = match.group("braced") or match.group("bare")
        if name in os.environ:
            return os.environ[name]
        fallback = match.group("fallback")
        if fallback is not None:
            return fallback
        if strict:
            raise KeyError(f"Environment variable not set: {name}")
        return match.group(0)

    return _REFERENCE.sub(substitute, value)


def expand_value(value: Any, *, strict: bool = False) -> Any:
    """Apply ``expand_env_vars`` to every string inside nested dicts and lists."""
    if isinstance(value, str):
        return expand_env_vars(value, strict=strict)
    if isinstance(value, dict):
        return {key: expand_value(item, strict=strict) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_value(item, strict=strict) for item in value]
    return value
