import logging
import re

import pytest

from rvframework import (
    AsyncValidator,
    ControlView,
    FormControl,
    FormGroup,
    ValidationResult,
    Validator,
    ValidatorError,
    compose,
)
from rvframework.validators import (
    email,
    fields_differ,
    forbidden_name,
    max_length,
    max_value,
    min_length,
    min_value,
    pattern,
    required,
    required_true,
)


class TestValidationResult:
    def test_valid_and_invalid(self):
        assert ValidationResult.valid().is_valid
        assert ValidationResult.of(None) == ValidationResult.valid()
        assert ValidationResult.of({}) == ValidationResult.valid()
        result = ValidationResult.of({"required": True})
        assert result.is_invalid
        assert result.errors == {"required": True}
        with pytest.raises(ValueError):
            ValidationResult.invalid({})

    def test_unsupported_return_value(self):
        with pytest.raises(TypeError):
            ValidationResult.of("not valid")

    def test_merge_last_wins(self, caplog):
        first = ValidationResult.invalid({"a": 1, "shared": "first"})
        second = ValidationResult.invalid({"b": 2, "shared": "second"})
        with caplog.at_level(logging.WARNING, logger="rvframework.result"):
            merged = first.merge(second)
        assert merged.errors == {"a": 1, "b": 2, "shared": "second"}
        assert "shared" in caplog.text

    def test_merge_all(self):
        merged = ValidationResult.merge_all(
            [ValidationResult.valid(), ValidationResult.invalid({"a": 1}), ValidationResult.valid()]
        )
        assert merged.errors == {"a": 1}


class TestCompose:
    def test_all_validators_run_in_order(self):
        calls = []

        def first(view):
            calls.append("first")
            return {"first": True}

        def second(view):
            calls.append("second")
            return None

        composed = compose([Validator(first), Validator(second)])
        control = FormControl("x")

        assert composed(ControlView(control)).errors == {"first": True}
        assert calls == ["first", "second"]

    def test_failing_validator(self):
        def broken(view):
            return 1 / 0

        with pytest.raises(ValidatorError) as exc_info:
            FormControl("x", [broken])
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

    def test_async_functions_are_rejected_as_sync_validators(self):
        async def check(view):
            return None

        with pytest.raises(TypeError):
            Validator(check)
        with pytest.raises(TypeError):
            FormControl("x", [AsyncValidator(check)])
        with pytest.raises(TypeError):
            FormControl("x", async_validators=[required])

    def test_validators_cannot_mutate_the_control(self):
        def sneaky(view):
            view.value = "changed"

        with pytest.raises(ValidatorError) as exc_info:
            FormControl("x", [sneaky])
        assert isinstance(exc_info.value.__cause__, AttributeError)


class TestBuiltInValidators:
    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(None, {"required": True}, id="none"),
            pytest.param("", {"required": True}, id="empty string"),
            pytest.param([], {"required": True}, id="empty list"),
            pytest.param("x", {}, id="set"),
            pytest.param(0, {}, id="zero"),
            pytest.param(False, {}, id="false"),
        ],
    )
    def test_required(self, value, expected):
        assert FormControl(value, [required]).errors == expected

    def test_required_true(self):
        assert FormControl(False, [required_true]).errors == {"required": True}
        assert FormControl(True, [required_true]).valid

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param("", {"minlength": {"requiredLength": 2, "actualLength": 0}}, id="empty"),
            pytest.param("a", {"minlength": {"requiredLength": 2, "actualLength": 1}}, id="too short"),
            pytest.param("ab", {}, id="long enough"),
            pytest.param(None, {}, id="none"),
            pytest.param(5, {}, id="no length"),
        ],
    )
    def test_min_length(self, value, expected):
        assert FormControl(value, [min_length(2)]).errors == expected

    def test_max_length(self):
        assert FormControl("abc", [max_length(2)]).errors == {"maxlength": {"requiredLength": 2, "actualLength": 3}}
        assert FormControl(["a", "b"], [max_length(2)]).valid

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(-1, {"min": {"min": 0, "actual": -1}}, id="below"),
            pytest.param(0, {}, id="equal"),
            pytest.param(10.5, {"max": {"max": 10, "actual": 10.5}}, id="above"),
            pytest.param("11", {}, id="not a number"),
            pytest.param(None, {}, id="none"),
        ],
    )
    def test_range(self, value, expected):
        assert FormControl(value, [min_value(0), max_value(10)]).errors == expected

    def test_pattern(self):
        zip_code = pattern(r"\d{5}")
        assert FormControl("12345", [zip_code]).valid
        assert FormControl("", [zip_code]).valid
        assert FormControl("123456", [zip_code]).errors == {
            "pattern": {"requiredPattern": r"\d{5}", "actualValue": "123456"}
        }

    @pytest.mark.parametrize(
        "value, is_valid",
        [
            pytest.param("hero@example.com", True, id="plain"),
            pytest.param("first.last+tag@sub.example.org", True, id="dots and plus"),
            pytest.param("", True, id="empty"),
            pytest.param("hero", False, id="no at"),
            pytest.param("hero@", False, id="no domain"),
            pytest.param("he ro@example.com", False, id="space"),
        ],
    )
    def test_email(self, value, is_valid):
        assert FormControl(value, [email]).valid is is_valid

    def test_forbidden_name(self):
        no_bob = forbidden_name(re.compile("bob", re.IGNORECASE))
        assert FormControl("BOBBY", [no_bob]).errors == {"forbiddenName": {"value": "BOBBY"}}
        assert FormControl("alice", [no_bob]).valid
        assert FormControl("BOBBY", [forbidden_name("bob")]).valid

    def test_fields_differ_without_one_of_the_fields(self):
        group = FormGroup({"name": FormControl("X")}, [fields_differ("name", "alterEgo", "identityRevealed")])
        assert group.valid
        group.add_control("alterEgo", FormControl("X"))
        assert group.errors == {"identityRevealed": True}

    def test_fields_differ_ignores_empty_values(self):
        group = FormGroup(
            {"name": FormControl(""), "alterEgo": FormControl("")},
            [fields_differ("name", "alterEgo", "identityRevealed")],
        )
        assert group.valid
