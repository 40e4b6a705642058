"""Structured response validation.

Confirms that a proxied request really reached the intended target by
checking the JSON response body against an ordered list of path/type/value
assertions. Validation stops at the first failing check.

Parsed JSON values are classified into a closed set of kinds (null, boolean,
number, string, array, object). Paths are dot-separated keys resolved by a
recursive walk that only descends through the object kind.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any

from proxybench.config.benchmark import CheckType, ResponseValidationConfig, ValidationCheck
from proxybench.errors import (
    MalformedPayload,
    NotAnObject,
    PathNotFound,
    TypeMismatch,
    ValueMismatch,
)

logger = logging.getLogger(__name__)


class JsonKind(str, Enum):
    """Kinds of value a parsed JSON document can hold."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Any) -> JsonKind:
    """Classify a value produced by ``json.loads``."""
    if value is None:
        return JsonKind.NULL
    # bool is a subclass of int, so it must be tested first
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def resolve_path(document: Any, path: str) -> Any:
    """Resolve a dot-separated *path* inside *document*.

    Raises ``PathNotFound`` when a key is missing and ``NotAnObject`` when a
    segment has to be looked up in something that is not an object.
    """
    return _descend(document, path.split("."), path)


def _descend(node: Any, segments: list[str], path: str) -> Any:
    if not segments:
        return node

    key, rest = segments[0], segments[1:]
    if kind_of(node) is not JsonKind.OBJECT:
        raise NotAnObject(f"cannot navigate through non-object at {key}", path=path)
    if key not in node:
        raise PathNotFound(f"path not found: {key}", path=path)
    return _descend(node[key], rest, path)


def check_value(value: Any, check: ValidationCheck) -> None:
    """Verify the shape of *value* and, for scalar checks, its expected value."""
    actual = kind_of(value)
    expected = JsonKind(check.type.value)
    if actual is not expected:
        raise TypeMismatch(
            f"expected {expected.value}, got {actual.value}",
            path=check.path,
        )

    # Arrays and objects are shape-only checks
    if check.value is None or check.type in (CheckType.ARRAY, CheckType.OBJECT):
        return

    if check.type is CheckType.NUMBER:
        matches = float(value) == float(check.value)
    else:
        matches = value == check.value

    if not matches:
        raise ValueMismatch(
            f"expected value {check.value!r}, got {value!r}",
            path=check.path,
        )


class ResponseValidator:
    """Validates response bodies against a ``ResponseValidationConfig``.

    A validator built from ``None`` or from a disabled config accepts every
    body without looking at it.
    """

    def __init__(self, config: ResponseValidationConfig | None) -> None:
        self._config = config

    @property
    def enabled(self) -> bool:
        return self._config is not None and self._config.enabled

    def validate(self, body: bytes | str) -> None:
        """Run every configured check against *body*, failing fast.

        Raises a ``ValidationError`` subclass on the first violation.
        """
        if not self.enabled:
            return

        try:
            document = json.loads(body)
        except (ValueError, UnicodeDecodeError) as exc:
            raise MalformedPayload(f"failed to parse JSON response: {exc}") from exc

        if kind_of(document) is not JsonKind.OBJECT:
            raise MalformedPayload("response body is not a JSON object")

        for check in self._config.checks:
            value = resolve_path(document, check.path)
            check_value(value, check)
