"""Supporting library modules: errors, logging, environment and storage.

Schema loading and settings live in ``formstate.lib.config_loader`` and
``formstate.lib.settings``; they depend on the models and engine packages and
are imported from there directly.
"""

from formstate.lib.env import expand_env_vars, load_env_file
from formstate.lib.errors import (
    EngineDisposedError,
    FormStateError,
    InvalidEventError,
    ReentrantEventError,
    SchemaConfigError,
)
from formstate.lib.logging import FormLogger, JSONFormatter, get_form_logger, setup_logging
from formstate.lib.storage import JsonFileStorage, MemoryStorage, ModelStorage

__all__ = [
    "expand_env_vars",
    "load_env_file",
    "EngineDisposedError",
    "FormStateError",
    "InvalidEventError",
    "ReentrantEventError",
    "SchemaConfigError",
    "FormLogger",
    "JSONFormatter",
    "get_form_logger",
    "setup_logging",
    "JsonFileStorage",
    "MemoryStorage",
    "ModelStorage",
]
