from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from httpfixture.headers import Headers
from httpfixture.logger import get_logger
from httpfixture.pattern import (
    DOUBLE_ALIASES,
    AnyWildcard,
    ArrayPattern,
    Expression,
    Literal,
    ObjectPattern,
    Pattern,
    PredicateCall,
    TypeWildcard,
)
from httpfixture.predicates import default_registry, same_value
from httpfixture.sanitization import describe_value, is_sensitive_name
from httpfixture.util import display_path, is_number, join_index, join_key, json_kind

KIND_MISMATCH = "kind_mismatch"
VALUE_MISMATCH = "value_mismatch"
MISSING_KEY = "missing_key"
LENGTH_MISMATCH = "length_mismatch"
PREDICATE_FAILED = "predicate_failed"

_REDACTED_VALUE = "[REDACTED]"


@dataclass(slots=True)
class MatchConfig:
    strict_numeric_kinds: bool = True
    max_failures: int = 0


@dataclass(frozen=True, slots=True)
class MatchFailure:
    path: str
    expected: str
    actual: Any
    reason: str
    sensitive: bool = False

    def describe(self) -> str:
        where = display_path(self.path)
        if self.reason == MISSING_KEY:
            return f"{where}: expected {self.expected}, but it is missing"
        actual = _REDACTED_VALUE if self.sensitive else describe_value(self.actual)
        return f"{where}: expected {self.expected}, got {actual}"


@dataclass(frozen=True, slots=True)
class MatchResult:
    failures: tuple[MatchFailure, ...] = ()

    @property
    def success(self) -> bool:
        return not self.failures

    def __bool__(self) -> bool:
        return self.success

    def describe(self) -> str:
        if not self.failures:
            return "match"
        return "\n".join(f.describe() for f in self.failures)

    def prefixed(self, prefix: str) -> MatchResult:
        return MatchResult(tuple(dataclasses.replace(f, path=_prefix_path(prefix, f.path)) for f in self.failures))

    @staticmethod
    def combine(*results: MatchResult) -> MatchResult:
        return MatchResult(tuple(f for r in results for f in r.failures))


def _prefix_path(prefix: str, path: str) -> str:
    if not prefix:
        return path
    if not path:
        return prefix
    if path.startswith("["):
        return prefix + path
    return f"{prefix}.{path}"


def _normalize_match_config(config: MatchConfig | None) -> MatchConfig:
    if config is None:
        return MatchConfig()
    max_failures = int(getattr(config, "max_failures", 0) or 0)
    return MatchConfig(
        strict_numeric_kinds=bool(getattr(config, "strict_numeric_kinds", True)),
        max_failures=max(max_failures, 0),
    )


def kind_matches(kind: str, actual: Any) -> bool:
    # "number" and "double" name the same kind: values decoded as floats.
    if kind in DOUBLE_ALIASES:
        return json_kind(actual) == "double"
    return json_kind(actual) == kind


class PatternMatcher:
    def __init__(self, config: MatchConfig | None = None) -> None:
        self._config = _normalize_match_config(config)

    @property
    def config(self) -> MatchConfig:
        return self._config

    def match(self, pattern: Pattern, actual: Any) -> MatchResult:
        failures: list[MatchFailure] = []
        self._match(pattern, actual, "", failures)
        return self._result(failures, "pattern.matched")

    def match_headers(self, patterns: Mapping[str, Pattern], actual: Mapping[str, Any] | None) -> MatchResult:
        headers = Headers.from_actual(actual)
        failures: list[MatchFailure] = []
        for name, pattern in patterns.items():
            path = join_key("", name)
            if name not in headers:
                if isinstance(pattern, AnyWildcard):
                    continue
                failures.append(MatchFailure(path, f"header {name!r}", None, MISSING_KEY))
                continue
            found: list[MatchFailure] = []
            self._match(pattern, headers[name], path, found)
            if is_sensitive_name(name):
                found = [dataclasses.replace(f, sensitive=True) for f in found]
            failures.extend(found)
        return self._result(failures, "headers.matched")

    def _result(self, failures: list[MatchFailure], event: str) -> MatchResult:
        cap = self._config.max_failures
        if cap > 0:
            failures = failures[:cap]
        result = MatchResult(tuple(failures))
        get_logger().debug(event, {"success": result.success, "failures": len(result.failures)})
        return result

    def _match(self, pattern: Pattern, actual: Any, path: str, out: list[MatchFailure]) -> None:
        if isinstance(pattern, AnyWildcard):
            return
        if isinstance(pattern, Literal):
            self._literal(pattern, actual, path, out)
            return
        if isinstance(pattern, TypeWildcard):
            if not kind_matches(pattern.kind, actual):
                out.append(MatchFailure(path, pattern.describe(), actual, KIND_MISMATCH))
            return
        if isinstance(pattern, Expression):
            self._expression(pattern, actual, path, out)
            return
        if isinstance(pattern, ObjectPattern):
            self._object(pattern, actual, path, out)
            return
        if isinstance(pattern, ArrayPattern):
            self._array(pattern, actual, path, out)
            return
        raise TypeError(f"not a pattern: {type(pattern).__name__}")

    def _literal(self, pattern: Literal, actual: Any, path: str, out: list[MatchFailure]) -> None:
        expected = pattern.value
        if not self._config.strict_numeric_kinds and is_number(expected) and is_number(actual):
            if expected != actual:
                out.append(MatchFailure(path, pattern.describe(), actual, VALUE_MISMATCH))
            return
        if json_kind(expected) != json_kind(actual):
            out.append(MatchFailure(path, f"{json_kind(expected)} {pattern.describe()}", actual, KIND_MISMATCH))
            return
        if not same_value(expected, actual):
            out.append(MatchFailure(path, pattern.describe(), actual, VALUE_MISMATCH))

    def _expression(self, pattern: Expression, actual: Any, path: str, out: list[MatchFailure]) -> None:
        if not kind_matches(pattern.kind, actual):
            out.append(MatchFailure(path, pattern.describe(), actual, KIND_MISMATCH))
            return
        for call in pattern.predicates:
            if not _evaluate(call, actual, self._config.strict_numeric_kinds):
                out.append(MatchFailure(path, f"{pattern.kind}.{call.describe()}", actual, PREDICATE_FAILED))

    def _object(self, pattern: ObjectPattern, actual: Any, path: str, out: list[MatchFailure]) -> None:
        if not isinstance(actual, dict):
            out.append(MatchFailure(path, pattern.describe(), actual, KIND_MISMATCH))
            return
        for key, child in pattern.fields:
            child_path = join_key(path, key)
            if key not in actual:
                if isinstance(child, AnyWildcard):
                    continue
                out.append(MatchFailure(child_path, f"key {key!r}", None, MISSING_KEY))
                continue
            self._match(child, actual[key], child_path, out)

    def _array(self, pattern: ArrayPattern, actual: Any, path: str, out: list[MatchFailure]) -> None:
        if not isinstance(actual, list):
            out.append(MatchFailure(path, pattern.describe(), actual, KIND_MISMATCH))
            return
        expected_len = len(pattern.items)
        if len(actual) < expected_len or (not pattern.open_tail and len(actual) > expected_len):
            out.append(MatchFailure(path, pattern.describe(), actual, LENGTH_MISMATCH))
        for i, (child, value) in enumerate(zip(pattern.items, actual)):
            self._match(child, value, join_index(path, i), out)


_builtin_predicates = default_registry()


def _evaluate(call: PredicateCall, actual: Any, strict_numbers: bool) -> bool:
    spec = call.spec if call.spec is not None else _builtin_predicates.get(call.name)
    if spec is None:
        return False
    return spec.evaluate(actual, call.args, strict_numbers=strict_numbers)


_default_matcher = PatternMatcher()


def match(pattern: Pattern, actual: Any) -> MatchResult:
    return _default_matcher.match(pattern, actual)


def match_headers(patterns: Mapping[str, Pattern], actual: Mapping[str, Any] | None) -> MatchResult:
    return _default_matcher.match_headers(patterns, actual)
