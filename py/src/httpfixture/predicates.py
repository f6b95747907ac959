"""Predicates usable in expression placeholders such as ``@string@.startsWith('Test')``.

Each predicate is described by a :class:`PredicateSpec`: its name, how many
literal arguments it takes, which placeholder kinds it can follow, the test
itself, and an optional argument validator run at compile time. Projects can
extend the vocabulary by registering their own specs on a
:class:`PredicateRegistry` and handing it to the compiler.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from httpfixture.pattern import NUMERIC_KINDS
from httpfixture.util import is_number, json_kind

_identifier = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

STRING_KINDS = frozenset({"string"})
SIZED_KINDS = frozenset({"string", "array", "object"})


@dataclass(frozen=True, slots=True)
class PredicateSpec:
    name: str
    arity: int | None
    kinds: frozenset[str]
    test: Callable[[Any, tuple[Any, ...]], bool]
    validate: Callable[[tuple[Any, ...]], None] | None = None
    relaxed: Callable[[Any, tuple[Any, ...]], bool] | None = None

    def applies_to(self, kind: str) -> bool:
        return not self.kinds or kind in self.kinds

    def evaluate(self, actual: Any, args: tuple[Any, ...], *, strict_numbers: bool = True) -> bool:
        """Run the test, using the value-based variant when numeric kinds are relaxed."""
        test = self.test if strict_numbers or self.relaxed is None else self.relaxed
        return bool(test(actual, args))

    def check_args(self, args: tuple[Any, ...]) -> None:
        if self.arity is None:
            if not args:
                raise ValueError(f"{self.name}() expects at least one argument")
        elif len(args) != self.arity:
            raise ValueError(f"{self.name}() expects {self.arity} argument(s), got {len(args)}")
        if self.validate is not None:
            self.validate(args)


class PredicateRegistry:
    def __init__(self, specs: Iterable[PredicateSpec] = ()) -> None:
        self._specs: dict[str, PredicateSpec] = {}
        for spec in specs:
            self.register(spec)

    def register(self, spec: PredicateSpec) -> PredicateRegistry:
        name = str(spec.name or "").strip()
        if not _identifier.match(name):
            raise ValueError(f"invalid predicate name {spec.name!r}")
        self._specs[name] = spec
        return self

    def get(self, name: str) -> PredicateSpec | None:
        return self._specs.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def names(self) -> list[str]:
        return sorted(self._specs)

    def copy(self) -> PredicateRegistry:
        return PredicateRegistry(self._specs.values())


def same_value(expected: Any, actual: Any, *, strict_numbers: bool = True) -> bool:
    """JSON equality: ``1``, ``1.0`` and ``True`` are three different values.

    With ``strict_numbers=False`` integers and doubles compare by value, so
    ``1`` equals ``1.0``. Booleans are never numbers.
    """
    if not strict_numbers and is_number(expected) and is_number(actual):
        return expected == actual
    if json_kind(expected) != json_kind(actual):
        return False
    if isinstance(expected, list):
        return len(expected) == len(actual) and all(
            same_value(e, a, strict_numbers=strict_numbers) for e, a in zip(expected, actual)
        )
    if isinstance(expected, dict):
        return expected.keys() == actual.keys() and all(
            same_value(v, actual[k], strict_numbers=strict_numbers) for k, v in expected.items()
        )
    return expected == actual


def _string_arg(args: tuple[Any, ...]) -> None:
    if not isinstance(args[0], str):
        raise ValueError("expected a string argument")


def _number_arg(args: tuple[Any, ...]) -> None:
    if not is_number(args[0]):
        raise ValueError("expected a numeric argument")


def _regex_arg(args: tuple[Any, ...]) -> None:
    _string_arg(args)
    try:
        re.compile(args[0])
    except re.error as exc:
        raise ValueError(f"invalid regular expression: {exc}") from exc


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, tuple[Any, ...]], bool]:
    def test(actual: Any, args: tuple[Any, ...]) -> bool:
        return is_number(actual) and op(actual, args[0])

    return test


_BUILTINS: tuple[PredicateSpec, ...] = (
    PredicateSpec(
        "startsWith", 1, STRING_KINDS, lambda a, args: isinstance(a, str) and a.startswith(args[0]), _string_arg
    ),
    PredicateSpec("endsWith", 1, STRING_KINDS, lambda a, args: isinstance(a, str) and a.endswith(args[0]), _string_arg),
    PredicateSpec("contains", 1, STRING_KINDS, lambda a, args: isinstance(a, str) and args[0] in a, _string_arg),
    PredicateSpec(
        "equals",
        1,
        frozenset(),
        lambda a, args: same_value(args[0], a),
        relaxed=lambda a, args: same_value(args[0], a, strict_numbers=False),
    ),
    PredicateSpec("greaterThan", 1, NUMERIC_KINDS, _compare(lambda a, b: a > b), _number_arg),
    PredicateSpec("lessThan", 1, NUMERIC_KINDS, _compare(lambda a, b: a < b), _number_arg),
    PredicateSpec("greaterThanOrEqual", 1, NUMERIC_KINDS, _compare(lambda a, b: a >= b), _number_arg),
    PredicateSpec("lessThanOrEqual", 1, NUMERIC_KINDS, _compare(lambda a, b: a <= b), _number_arg),
    PredicateSpec(
        "matchRegex", 1, STRING_KINDS, lambda a, args: isinstance(a, str) and re.search(args[0], a) is not None, _regex_arg
    ),
    PredicateSpec("isEmpty", 0, SIZED_KINDS, lambda a, _args: isinstance(a, (str, list, dict)) and len(a) == 0),
    PredicateSpec("isNotEmpty", 0, SIZED_KINDS, lambda a, _args: isinstance(a, (str, list, dict)) and len(a) > 0),
    PredicateSpec(
        "oneOf",
        None,
        frozenset(),
        lambda a, args: any(same_value(v, a) for v in args),
        relaxed=lambda a, args: any(same_value(v, a, strict_numbers=False) for v in args),
    ),
)


def default_registry() -> PredicateRegistry:
    return PredicateRegistry(_BUILTINS)
