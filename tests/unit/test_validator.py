"""Unit tests for the structured response validator."""

from __future__ import annotations

import json

import pytest

from proxybench.config.benchmark import CheckType, ResponseValidationConfig, ValidationCheck
from proxybench.errors import (
    MalformedPayload,
    NotAnObject,
    PathNotFound,
    TypeMismatch,
    ValidationError,
    ValueMismatch,
)
from proxybench.validation.validator import JsonKind, ResponseValidator, kind_of, resolve_path

# Response shape served by https://jsonplaceholder.typicode.com/posts/1
_POST = json.dumps(
    {
        "userId": 1,
        "id": 1,
        "title": "Sample title",
        "body": "Sample body text",
        "meta": {"tags": ["a", "b"], "published": True, "score": 4.5},
    }
).encode()


def _validator(*checks: ValidationCheck, enabled: bool = True) -> ResponseValidator:
    return ResponseValidator(ResponseValidationConfig(enabled=enabled, checks=list(checks)))


def _check(path: str, type_: str, value=None) -> ValidationCheck:
    return ValidationCheck(path=path, type=CheckType(type_), value=value)


class TestKindOf:
    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            (None, JsonKind.NULL),
            (True, JsonKind.BOOLEAN),
            (0, JsonKind.NUMBER),
            (1.5, JsonKind.NUMBER),
            ("x", JsonKind.STRING),
            ([], JsonKind.ARRAY),
            ({}, JsonKind.OBJECT),
        ],
    )
    def test_classifies_json_values(self, value, kind):
        assert kind_of(value) is kind

    def test_bool_is_not_a_number(self):
        assert kind_of(False) is JsonKind.BOOLEAN


class TestResolvePath:
    def test_nested_path(self):
        assert resolve_path({"a": {"b": {"c": 5}}}, "a.b.c") == 5

    def test_missing_key(self):
        with pytest.raises(PathNotFound, match="path not found: c"):
            resolve_path({"a": {"b": {}}}, "a.b.c")

    def test_non_object_intermediate(self):
        with pytest.raises(NotAnObject, match="non-object at c"):
            resolve_path({"a": {"b": 5}}, "a.b.c")

    def test_arrays_are_not_navigable(self):
        with pytest.raises(NotAnObject):
            resolve_path({"a": [{"b": 1}]}, "a.0")


class TestResponseValidator:
    def test_existing_fields_pass(self):
        validator = _validator(
            _check("userId", "number"),
            _check("id", "number", 1),
            _check("title", "string"),
            _check("body", "string"),
        )
        validator.validate(_POST)

    def test_nested_number_passes(self):
        _validator(_check("a.b.c", "number")).validate(b'{"a": {"b": {"c": 5}}}')

    def test_missing_nested_key_fails(self):
        with pytest.raises(PathNotFound) as exc_info:
            _validator(_check("a.b.c", "number")).validate(b'{"a": {"b": {}}}')
        assert exc_info.value.path == "a.b.c"

    def test_navigating_through_number_fails(self):
        with pytest.raises(NotAnObject):
            _validator(_check("a.b.c", "number")).validate(b'{"a": {"b": 5}}')

    def test_type_mismatch(self):
        with pytest.raises(TypeMismatch, match="expected number, got string"):
            _validator(_check("title", "number")).validate(_POST)

    def test_boolean_is_not_accepted_as_number(self):
        with pytest.raises(TypeMismatch):
            _validator(_check("meta.published", "number")).validate(_POST)

    def test_value_mismatch(self):
        with pytest.raises(ValueMismatch):
            _validator(_check("id", "number", 1)).validate(b'{"id": 2}')

    def test_integer_and_float_compare_equal(self):
        _validator(_check("id", "number", 1.0)).validate(b'{"id": 1}')
        _validator(_check("score", "number", 4)).validate(b'{"score": 4.0}')

    def test_string_and_boolean_values(self):
        _validator(
            _check("title", "string", "Sample title"),
            _check("meta.published", "boolean", True),
        ).validate(_POST)
        with pytest.raises(ValueMismatch):
            _validator(_check("meta.published", "boolean", False)).validate(_POST)

    def test_array_and_object_check_shape_only(self):
        _validator(_check("meta.tags", "array"), _check("meta", "object")).validate(_POST)
        with pytest.raises(TypeMismatch):
            _validator(_check("meta", "array")).validate(_POST)

    def test_fails_fast_on_first_violation(self):
        validator = _validator(
            _check("missing", "string"),
            _check("title", "number"),
        )
        with pytest.raises(PathNotFound):
            validator.validate(_POST)

    def test_malformed_body_fails_when_enabled(self):
        with pytest.raises(MalformedPayload):
            _validator(_check("id", "number")).validate(b"<html>not json</html>")

    def test_non_object_document_is_malformed(self):
        with pytest.raises(MalformedPayload):
            _validator(_check("id", "number")).validate(b"[1, 2, 3]")

    def test_disabled_validation_never_inspects_body(self):
        _validator(_check("id", "number"), enabled=False).validate(b"\xff\xfe not json")

    def test_no_config_never_inspects_body(self):
        validator = ResponseValidator(None)
        assert validator.enabled is False
        validator.validate(b"garbage")

    def test_all_failures_are_validation_errors(self):
        for exc_type in (MalformedPayload, PathNotFound, NotAnObject, TypeMismatch, ValueMismatch):
            assert issubclass(exc_type, ValidationError)
