"""Tests for the field validator."""

from __future__ import annotations

import pytest

from formstate.engine.validator import default_message, evaluate, run_test
from formstate.models import (
    MISSING,
    ErrorCondition,
    FieldRules,
    FlagRecord,
    ValidationContext,
)


class TestRequired:
    """Tests for the required rule."""

    def test_missing_value_fails(self) -> None:
        result = evaluate("username", FieldRules(required=True), MISSING)

        assert result.is_valid is False
        assert result.errors == ("username is required",)

    @pytest.mark.parametrize("value", ["", None, [], False])
    def test_empty_values_fail(self, value) -> None:
        assert evaluate("f", FieldRules(required=True), value).is_valid is False

    @pytest.mark.parametrize("value", ["x", 0, ["a"], True])
    def test_filled_values_pass(self, value) -> None:
        assert evaluate("f", FieldRules(required=True), value).is_valid is True

    def test_not_required_missing_passes(self) -> None:
        assert evaluate("f", FieldRules(), MISSING).is_valid is True


class TestTypeRule:
    """Tests for the type rule."""

    def test_wrong_type(self) -> None:
        result = evaluate("age", FieldRules(type="number"), "12")

        assert result.errors == ("age must be of type number, but got string",)

    def test_missing_value_is_wrong_type(self) -> None:
        result = evaluate("age", FieldRules(type="number"))

        assert result.errors == ("age must be of type number, but got missing",)

    def test_matching_type(self) -> None:
        assert evaluate("tags", FieldRules(type="list"), ["a"]).is_valid is True


class TestLengthRules:
    """Tests for min_length and max_length."""

    def test_too_short(self) -> None:
        result = evaluate("code", FieldRules(min_length=3), "ab")

        assert result.errors == ("code must have at least 3 characters",)

    def test_missing_value_fails_min_length(self) -> None:
        assert evaluate("code", FieldRules(min_length=1)).is_valid is False

    def test_unsized_value_fails_min_length(self) -> None:
        assert evaluate("code", FieldRules(min_length=1), 5).is_valid is False

    def test_too_long(self) -> None:
        result = evaluate("username", FieldRules(max_length=8), "abcdefghi")

        assert result.errors == ("username must not have more than 8 characters",)

    def test_missing_value_passes_max_length(self) -> None:
        assert evaluate("username", FieldRules(max_length=8)).is_valid is True

    def test_lists_use_item_count(self) -> None:
        rules = FieldRules(min_length=1, max_length=2)

        assert evaluate("tags", rules, []).is_valid is False
        assert evaluate("tags", rules, ["a", "b"]).is_valid is True
        assert evaluate("tags", rules, ["a", "b", "c"]).is_valid is False

    def test_exact_bounds_pass(self) -> None:
        rules = FieldRules(min_length=2, max_length=2)

        assert evaluate("f", rules, "ab").is_valid is True

    def test_zero_limits_are_not_enforced(self) -> None:
        rules = FieldRules(min_length=0, max_length=0)

        assert evaluate("bio", rules).errors == ()
        assert evaluate("bio", rules, 5).is_valid is True
        assert evaluate("bio", rules, "hello").is_valid is True


class TestCustomTest:
    """Tests for the custom test rule."""

    def test_password_too_short(self, password_test) -> None:
        result = evaluate("password", FieldRules(test=password_test), "ab")

        assert result.is_valid is False
        assert result.errors == ("Password must be at least 5 characters",)

    def test_password_ok(self, password_test) -> None:
        assert evaluate("password", FieldRules(test=password_test), "secret").is_valid

    def test_not_calling_fail_passes(self) -> None:
        rules = FieldRules(test=lambda value, fail, ctx: None)

        assert evaluate("f", rules, "anything").is_valid is True

    def test_last_message_wins(self) -> None:
        def noisy(value, fail, ctx):
            fail("first")
            fail("")
            fail("second")

        assert run_test(FieldRules(test=noisy), "x", None) == "second"  # type: ignore[arg-type]

    def test_receives_context(self) -> None:
        seen = {}

        def capture(value, fail, ctx):
            seen["ctx"] = ctx

        schema = {"confirm": FieldRules(test=capture)}
        evaluate(
            "confirm",
            schema["confirm"],
            "pw",
            schema=schema,
            model={"password": "pw", "confirm": "pw"},
        )

        ctx = seen["ctx"]
        assert ctx.field == "confirm"
        assert ctx.value == "pw"
        assert ctx.model["password"] == "pw"
        assert ctx.schema is schema
        assert ctx.condition is None

    def test_cross_field_check(self) -> None:
        def matches_password(value, fail, ctx):
            if value != ctx.model.get("password"):
                fail("Passwords do not match")

        result = evaluate(
            "confirm",
            FieldRules(test=matches_password),
            "nope",
            model={"password": "secret"},
        )

        assert result.errors == ("Passwords do not match",)

    def test_exceptions_propagate(self) -> None:
        def broken(value, fail, ctx):
            raise ZeroDivisionError

        with pytest.raises(ZeroDivisionError):
            evaluate("f", FieldRules(test=broken), "x")


class TestErrorOrderingAndFormatting:
    """Tests for check order and format_error."""

    def test_all_failures_reported_in_order(self) -> None:
        rules = FieldRules(
            required=True,
            type="string",
            min_length=2,
            test=lambda value, fail, ctx: fail("custom"),
        )

        result = evaluate("f", rules, MISSING)

        assert result.errors == (
            "f is required",
            "f must be of type string, but got missing",
            "f must have at least 2 characters",
            "custom",
        )

    def test_format_error_receives_condition(self) -> None:
        conditions = []

        def format_error(ctx: ValidationContext) -> str:
            conditions.append(ctx.condition)
            return f"{ctx.condition.value}:{ctx.field}"

        rules = FieldRules(required=True, max_length=1, format_error=format_error)
        assert evaluate("f", rules, MISSING).errors == ("required:f",)

        result = evaluate("f", rules, "abc")
        assert result.errors == ("maxLength:f",)
        assert conditions == [ErrorCondition.REQUIRED, ErrorCondition.MAX_LENGTH]

    def test_custom_test_bypasses_format_error(self) -> None:
        rules = FieldRules(
            test=lambda value, fail, ctx: fail("own message"),
            format_error=lambda ctx: "formatted",
        )

        assert evaluate("f", rules, "x").errors == ("own message",)

    def test_default_message_templates(self) -> None:
        rules = FieldRules(type="boolean", min_length=3, max_length=5)
        ctx = ValidationContext(field="f", value=1, rules=rules, schema={}, model={})

        assert default_message(ErrorCondition.REQUIRED, ctx) == "f is required"
        assert default_message(ErrorCondition.TYPE, ctx) == (
            "f must be of type boolean, but got number"
        )
        assert default_message(ErrorCondition.MIN_LENGTH, ctx) == (
            "f must have at least 3 characters"
        )
        assert default_message(ErrorCondition.MAX_LENGTH, ctx) == (
            "f must not have more than 5 characters"
        )


class TestPurity:
    """evaluate() is a pure function of its inputs."""

    def test_same_inputs_same_result(self, password_test) -> None:
        rules = FieldRules(required=True, max_length=8, test=password_test)
        model = {"password": "abc"}

        first = evaluate("password", rules, "abc", model=model)
        second = evaluate("password", rules, "abc", model=model)

        assert first == second

    def test_attaches_given_flags(self) -> None:
        flags = FlagRecord(dirty=True, touched=True)

        result = evaluate("f", FieldRules(), "x", flags=flags)

        assert result.flags is flags
