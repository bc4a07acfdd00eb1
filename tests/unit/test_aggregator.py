"""Tests for the schema aggregator."""

from __future__ import annotations

import pytest

from formstate.engine.aggregator import aggregate
from formstate.models import FieldResult, FlagRecord


def _result(valid: bool, dirty: bool = False, touched: bool = False) -> FieldResult:
    return FieldResult(
        is_valid=valid,
        errors=() if valid else ("bad",),
        flags=FlagRecord(dirty=dirty, touched=touched),
    )


class TestAggregate:
    """Tests for aggregate()."""

    def test_empty_form_is_valid_and_pristine(self) -> None:
        result = aggregate({})

        assert result.is_valid is True
        assert result.form.pristine is True
        assert result.form.untouched is True
        assert result.form.dirty is False
        assert result.form.touched is False

    def test_any_invalid_field_makes_form_invalid(self) -> None:
        result = aggregate({"a": _result(True), "b": _result(False)})

        assert result.is_valid is False
        assert result.form.is_valid is False

    def test_dirty_and_touched_are_ored(self) -> None:
        result = aggregate({"a": _result(True, dirty=True), "b": _result(True, touched=True)})

        assert result.form.dirty is True
        assert result.form.pristine is False
        assert result.form.touched is True
        assert result.form.untouched is False

    @pytest.mark.parametrize(
        "validity",
        [(True,), (False,), (True, True), (True, False), (False, False, True)],
    )
    def test_valid_iff_every_field_valid(self, validity) -> None:
        fields = {f"f{i}": _result(v) for i, v in enumerate(validity)}

        assert aggregate(fields).is_valid is all(validity)

    def test_fields_are_copied_read_only(self) -> None:
        fields = {"a": _result(True)}
        result = aggregate(fields)
        fields["b"] = _result(False)

        assert list(result.fields) == ["a"]
        with pytest.raises(TypeError):
            result.fields["c"] = _result(True)  # type: ignore[index]
