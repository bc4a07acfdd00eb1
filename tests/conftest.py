"""Shared fixtures for formstate tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest

from formstate.lib.storage import MemoryStorage
from formstate.models.rules import FieldRules, ValidationContext


def password_length(value: Any, fail: Callable[[str], None], context: ValidationContext) -> None:
    """Custom test used across the suite: passwords are 5-12 characters."""
    text = value or ""
    if len(text) < 5:
        fail("Password must be at least 5 characters")
    elif len(text) > 12:
        fail("Password must not be longer than 12 characters")


@pytest.fixture
def password_test() -> Callable[..., None]:
    return password_length


@pytest.fixture
def signup_schema() -> Dict[str, FieldRules]:
    """A small signup form covering every rule kind and both triggers."""
    return {
        "username": FieldRules(required=True, max_length=8),
        "email": FieldRules(required=True, type="string", update_on="blur"),
        "password": FieldRules(test=password_length),
        "interests": FieldRules(min_length=1),
    }


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def schema_yaml(tmp_path: Path) -> Generator[Path, None, None]:
    """A schema file with camelCase keys, messages and a named test."""
    schema_file = tmp_path / "signup.yaml"
    schema_file.write_text(
        """
name: signup
fields:
  username:
    required: true
    maxLength: 8
    messages:
      required: "Pick a {field}"
      maxLength: "{field} is limited to {max_length} characters"
  email:
    required: true
    type: string
    updateOn: blur
  password:
    test: password_length
""",
        encoding="utf-8",
    )
    yield schema_file


@pytest.fixture
def plain_schema_yaml(tmp_path: Path) -> Generator[Path, None, None]:
    """A schema file without custom tests, usable from the CLI."""
    schema_file = tmp_path / "profile.yaml"
    schema_file.write_text(
        """
fields:
  nickname:
    required: true
    max_length: 8
    update_on: blur
  bio:
    maxLength: 20
""",
        encoding="utf-8",
    )
    yield schema_file


@pytest.fixture
def events_yaml(tmp_path: Path) -> Generator[Path, None, None]:
    """A recorded session for the profile schema."""
    events_file = tmp_path / "session.yaml"
    events_file.write_text(
        """
events:
  - {name: nickname, kind: focus}
  - {name: nickname, kind: change, value: "ada"}
  - {name: nickname, kind: blur}
  - {name: bio, kind: change, value: "hello"}
""",
        encoding="utf-8",
    )
    yield events_file
