"""Syntax checks for testable examples, keyed by language.

A validator takes the example body and returns the text to highlight. Valid
sources come back unchanged; invalid ones come back with a leading comment
describing the problem so the reader sees it next to the example. Languages
without a validator pass through untouched.
"""

from __future__ import annotations

import ast
import json
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

Validator = typ.Callable[[str], str]


def validate_python(source: str) -> str:
    """Return ``source``, annotated with the first syntax error when invalid."""
    try:
        ast.parse(source)
    except SyntaxError as exc:
        return f"# SyntaxError: {exc.msg} (line {exc.lineno})\n{source}"
    return source


def validate_yaml(source: str) -> str:
    loader = YAML(typ="safe")
    try:
        loader.load(source)
    except YAMLError as exc:
        problem = getattr(exc, "problem", None) or str(exc).splitlines()[0]
        return f"# Invalid YAML: {problem}\n{source}"
    return source


def validate_json(source: str) -> str:
    try:
        json.loads(source)
    except json.JSONDecodeError as exc:
        return f"// Invalid JSON: {exc.msg} (line {exc.lineno})\n{source}"
    return source


DEFAULT_VALIDATORS: dict[str, Validator] = {
    "python": validate_python,
    "py": validate_python,
    "python3": validate_python,
    "yaml": validate_yaml,
    "yml": validate_yaml,
    "json": validate_json,
}


class ValidatorRegistry:
    """Look up the validator for an example language."""

    def __init__(self, validators: cabc.Mapping[str, Validator] | None = None) -> None:
        self._validators: dict[str, Validator] = dict(
            DEFAULT_VALIDATORS if validators is None else validators
        )

    def register(self, language: str, validator: Validator) -> None:
        self._validators[language.lower()] = validator

    def validate(self, source: str, language: str) -> str:
        validator = self._validators.get(language.lower())
        if validator is None:
            return source
        return validator(source)


__all__ = [
    "DEFAULT_VALIDATORS",
    "Validator",
    "ValidatorRegistry",
    "validate_json",
    "validate_python",
    "validate_yaml",
]
