"""Tests for the formstate command line."""

from __future__ import annotations

import json
import logging

import pytest

from formstate.__main__ import format_result, main
from formstate.engine.aggregator import aggregate
from formstate.models import FieldResult, FlagRecord


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep settings and log handlers from leaking between CLI runs."""
    monkeypatch.chdir(tmp_path)
    for var in ("FORMSTATE_LOG_FORMAT", "FORMSTATE_LOG_FILE", "FORMSTATE_DEFAULT_UPDATE_ON"):
        monkeypatch.delenv(var, raising=False)

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestFormatResult:
    """Tests for format_result()."""

    def test_lists_fields_and_errors(self) -> None:
        result = aggregate(
            {
                "nickname": FieldResult(
                    is_valid=False,
                    errors=("nickname is required",),
                    flags=FlagRecord(touched=True),
                ),
                "bio": FieldResult(is_valid=True),
            }
        )

        lines = format_result(result).splitlines()

        assert lines[0] == "Form: INVALID (pristine, touched)"
        assert lines[1].startswith("  [!!] nickname")
        assert lines[1].endswith("pristine, touched")
        assert lines[2] == "         - nickname is required"
        assert lines[3].startswith("  [ok] bio")

    def test_empty_form(self) -> None:
        assert format_result(aggregate({})).splitlines() == [
            "Form: VALID (pristine, untouched)",
            "  (no fields)",
        ]


class TestCheckCommand:
    """Tests for ``formstate check``."""

    def test_empty_model_is_invalid(self, plain_schema_yaml, capsys) -> None:
        code = main(["check", "--schema", str(plain_schema_yaml)])

        assert code == 1
        out = capsys.readouterr().out
        assert "Form: INVALID" in out
        assert "nickname is required" in out

    def test_valid_model(self, plain_schema_yaml, tmp_path, capsys) -> None:
        model = tmp_path / "draft.yaml"
        model.write_text("nickname: ada\nbio: hi\n", encoding="utf-8")

        code = main(["check", "--schema", str(plain_schema_yaml), "--model", str(model)])

        assert code == 0
        assert "Form: VALID" in capsys.readouterr().out

    def test_json_output(self, plain_schema_yaml, capsys) -> None:
        main(["check", "--schema", str(plain_schema_yaml), "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data["is_valid"] is False
        assert data["fields"]["nickname"]["errors"] == ["nickname is required"]
        assert data["form"]["pristine"] is True

    def test_missing_schema_exits_2(self, tmp_path, capsys) -> None:
        code = main(["check", "--schema", str(tmp_path / "nope.yaml")])

        assert code == 2
        assert "File not found" in capsys.readouterr().err

    def test_non_utf8_model_exits_2(self, plain_schema_yaml, tmp_path, capsys) -> None:
        model = tmp_path / "draft.yaml"
        model.write_bytes(b"nickname: caf\xe9\n")

        code = main(["check", "--schema", str(plain_schema_yaml), "--model", str(model)])

        assert code == 2
        assert "not valid UTF-8" in capsys.readouterr().err

    def test_unknown_test_exits_2(self, schema_yaml, capsys) -> None:
        code = main(["check", "--schema", str(schema_yaml)])

        assert code == 2
        assert "Unknown test 'password_length'" in capsys.readouterr().err


class TestReplayCommand:
    """Tests for ``formstate replay``."""

    def test_replay_text(self, plain_schema_yaml, events_yaml, capsys) -> None:
        code = main(
            ["replay", "--schema", str(plain_schema_yaml), "--events", str(events_yaml)]
        )

        assert code == 0
        out = capsys.readouterr().out
        assert "== mount" in out
        assert "== #3 blur(nickname)" in out
        assert out.rstrip().splitlines()[-3].startswith("Form: VALID (dirty, touched)")

    def test_replay_json(self, plain_schema_yaml, events_yaml, capsys) -> None:
        main(
            [
                "replay",
                "--schema",
                str(plain_schema_yaml),
                "--events",
                str(events_yaml),
                "--json",
            ]
        )

        data = json.loads(capsys.readouterr().out)
        steps = data["steps"]
        assert len(steps) == 5
        assert steps[0]["event"] is None
        assert steps[0]["schema"]["is_valid"] is False
        assert steps[2]["event"] == {"name": "nickname", "kind": "change", "value": "ada"}
        assert steps[2]["schema"]["fields"]["nickname"]["is_valid"] is True
        assert data["model"] == {"nickname": "ada", "bio": "hello"}

    def test_default_update_on_from_env(
        self, plain_schema_yaml, tmp_path, monkeypatch, capsys
    ) -> None:
        monkeypatch.setenv("FORMSTATE_DEFAULT_UPDATE_ON", "blur")
        model = tmp_path / "draft.yaml"
        model.write_text("bio: short\n", encoding="utf-8")
        events = tmp_path / "events.yaml"
        events.write_text(
            "- {name: nickname, kind: change, value: ada}\n"
            "- {name: bio, kind: change, value: this bio is far too long}\n",
            encoding="utf-8",
        )

        code = main(
            [
                "replay",
                "--schema",
                str(plain_schema_yaml),
                "--events",
                str(events),
                "--model",
                str(model),
                "--json",
            ]
        )

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["steps"][-1]["schema"]["fields"]["bio"]["is_valid"] is True

    def test_bad_event_kind_exits_2(self, plain_schema_yaml, tmp_path, capsys) -> None:
        events = tmp_path / "events.yaml"
        events.write_text("- {name: nickname, kind: submit}\n", encoding="utf-8")

        code = main(
            ["replay", "--schema", str(plain_schema_yaml), "--events", str(events)]
        )

        assert code == 2
        assert "Unknown input event kind" in capsys.readouterr().err


class TestEnvFile:
    """Tests for ``--env-file``."""

    def test_env_file_feeds_schema_expansion(self, tmp_path, monkeypatch, capsys) -> None:
        monkeypatch.setenv("FORMSTATE_TEST_NICK_MAX", "unset")
        env_file = tmp_path / "forms.env"
        env_file.write_text("FORMSTATE_TEST_NICK_MAX=3\n", encoding="utf-8")
        schema = tmp_path / "short.yaml"
        schema.write_text(
            "fields:\n  nickname:\n    maxLength: ${FORMSTATE_TEST_NICK_MAX}\n",
            encoding="utf-8",
        )
        model = tmp_path / "draft.yaml"
        model.write_text("nickname: abcd\n", encoding="utf-8")

        code = main(
            [
                "--env-file",
                str(env_file),
                "check",
                "--schema",
                str(schema),
                "--model",
                str(model),
            ]
        )

        assert code == 1
        assert "must not have more than 3 characters" in capsys.readouterr().out
