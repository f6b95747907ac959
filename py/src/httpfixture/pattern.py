from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from httpfixture.sanitization import describe_value

if TYPE_CHECKING:
    from httpfixture.predicates import PredicateSpec

KINDS = frozenset({"integer", "number", "double", "string", "boolean", "array", "object", "null"})
ANY_TOKENS = frozenset({"*", "wildcard"})
TAIL_TOKEN = "..."

NUMERIC_KINDS = frozenset({"integer", "number", "double"})
DOUBLE_ALIASES = frozenset({"number", "double"})


@dataclass(frozen=True, slots=True)
class Literal:
    value: Any

    def describe(self) -> str:
        return describe_value(self.value)


@dataclass(frozen=True, slots=True)
class TypeWildcard:
    kind: str

    def describe(self) -> str:
        return f"any {self.kind}"


@dataclass(frozen=True, slots=True)
class AnyWildcard:
    def describe(self) -> str:
        return "any value"


@dataclass(frozen=True, slots=True)
class PredicateCall:
    name: str
    args: tuple[Any, ...] = ()
    spec: PredicateSpec | None = field(default=None, compare=False, repr=False)

    def describe(self) -> str:
        return f"{self.name}({', '.join(describe_value(a) for a in self.args)})"


@dataclass(frozen=True, slots=True)
class Expression:
    kind: str
    predicates: tuple[PredicateCall, ...]

    def describe(self) -> str:
        chain = "".join("." + p.describe() for p in self.predicates)
        return f"{self.kind}{chain}"


@dataclass(frozen=True, slots=True)
class ObjectPattern:
    fields: tuple[tuple[str, Pattern], ...]

    def describe(self) -> str:
        if not self.fields:
            return "object"
        return "object with keys " + ", ".join(repr(k) for k, _ in self.fields)

    def get(self, key: str) -> Pattern | None:
        for k, p in self.fields:
            if k == key:
                return p
        return None


@dataclass(frozen=True, slots=True)
class ArrayPattern:
    items: tuple[Pattern, ...]
    open_tail: bool = False

    def describe(self) -> str:
        if self.open_tail:
            return f"array of at least {len(self.items)} element(s)"
        return f"array of {len(self.items)} element(s)"


Pattern = Union[Literal, TypeWildcard, AnyWildcard, Expression, ObjectPattern, ArrayPattern]
