from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from httpfixture.errors import malformed_pattern
from httpfixture.logger import get_logger
from httpfixture.pattern import (
    ANY_TOKENS,
    KINDS,
    TAIL_TOKEN,
    AnyWildcard,
    ArrayPattern,
    Expression,
    Literal,
    ObjectPattern,
    Pattern,
    PredicateCall,
    TypeWildcard,
)
from httpfixture.predicates import PredicateRegistry, default_registry
from httpfixture.util import join_index, join_key

_head = re.compile(r"^@([A-Za-z_][A-Za-z0-9_-]*|\*|\.\.\.)(@?)")
_name = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_bare = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?|true|false|null")

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


class _Tail:
    __slots__ = ()


_TAIL = _Tail()


class _ChainParser:
    """Parses the ``.name(args)`` chain following ``@kind@``."""

    def __init__(self, text: str, kind: str, path: str, predicates: PredicateRegistry) -> None:
        self.text = text
        self.kind = kind
        self.path = path
        self.predicates = predicates
        self.pos = 0

    def fail(self, message: str) -> Exception:
        return malformed_pattern(message, self.path)

    def parse(self) -> tuple[PredicateCall, ...]:
        calls: list[PredicateCall] = []
        while self.pos < len(self.text):
            if self.text[self.pos] != ".":
                raise self.fail(f"unexpected {self.text[self.pos:]!r} after @{self.kind}@")
            self.pos += 1
            m = _name.match(self.text, self.pos)
            if m is None:
                raise self.fail("expected a predicate name after '.'")
            name = m.group(0)
            self.pos = m.end()
            if self.pos >= len(self.text) or self.text[self.pos] != "(":
                raise self.fail(f"expected '(' after {name}")
            self.pos += 1
            args = self._args()
            calls.append(self._call(name, args))
        return tuple(calls)

    def _call(self, name: str, args: tuple[Any, ...]) -> PredicateCall:
        spec = self.predicates.get(name)
        if spec is None:
            raise self.fail(f"unknown predicate {name!r}")
        if not spec.applies_to(self.kind):
            raise self.fail(f"{name}() cannot be applied to @{self.kind}@")
        try:
            spec.check_args(args)
        except ValueError as exc:
            raise self.fail(str(exc)) from exc
        return PredicateCall(name=name, args=args, spec=spec)

    def _skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self) -> str:
        if self.pos >= len(self.text):
            raise self.fail("unterminated argument list")
        return self.text[self.pos]

    def _args(self) -> tuple[Any, ...]:
        args: list[Any] = []
        self._skip_ws()
        if self._peek() == ")":
            self.pos += 1
            return ()
        while True:
            self._skip_ws()
            args.append(self._literal())
            self._skip_ws()
            ch = self._peek()
            self.pos += 1
            if ch == ",":
                continue
            if ch == ")":
                return tuple(args)
            raise self.fail(f"unexpected {ch!r} in argument list")

    def _literal(self) -> Any:
        ch = self._peek()
        if ch in "'\"":
            return self._quoted(ch)
        m = _bare.match(self.text, self.pos)
        if m is None:
            raise self.fail(f"cannot parse argument at {self.text[self.pos:]!r}")
        self.pos = m.end()
        token = m.group(0)
        if token == "true":
            return True
        if token == "false":
            return False
        if token == "null":
            return None
        if any(c in token for c in ".eE"):
            return float(token)
        return int(token)

    def _quoted(self, quote: str) -> str:
        self.pos += 1
        out: list[str] = []
        while True:
            ch = self._peek()
            self.pos += 1
            if ch == quote:
                return "".join(out)
            if ch == "\\":
                nxt = self._peek()
                self.pos += 1
                out.append(_ESCAPES.get(nxt, nxt))
                continue
            out.append(ch)


class PatternCompiler:
    def __init__(self, predicates: PredicateRegistry | None = None) -> None:
        self._predicates = predicates if predicates is not None else default_registry()

    @property
    def predicates(self) -> PredicateRegistry:
        return self._predicates

    def compile(self, value: Any) -> Pattern:
        pattern = self._compile(value, "")
        get_logger().debug("pattern.compiled", {"root": type(pattern).__name__})
        return pattern

    def compile_headers(self, headers: Mapping[str, str]) -> dict[str, Pattern]:
        out: dict[str, Pattern] = {}
        for name, value in (headers or {}).items():
            out[str(name)] = self._compile(str(value), join_key("", str(name)))
        return out

    def _compile(self, value: Any, path: str) -> Pattern:
        node = self._node(value, path)
        if node is _TAIL:
            raise malformed_pattern(f"'@{TAIL_TOKEN}@' is only allowed as the last element of an array", path)
        return node

    def _node(self, value: Any, path: str) -> Pattern | _Tail:
        if isinstance(value, dict):
            return ObjectPattern(fields=tuple((str(k), self._compile(v, join_key(path, k))) for k, v in value.items()))
        if isinstance(value, list):
            return self._array(value, path)
        if isinstance(value, str):
            return self._string(value, path)
        if value is None or isinstance(value, (bool, int, float)):
            return Literal(value)
        raise TypeError(f"cannot compile a pattern from {type(value).__name__}")

    def _array(self, values: list[Any], path: str) -> ArrayPattern:
        items: list[Pattern] = []
        for i, item in enumerate(values):
            item_path = join_index(path, i)
            node = self._node(item, item_path)
            if node is _TAIL:
                if i != len(values) - 1:
                    raise malformed_pattern(
                        f"'@{TAIL_TOKEN}@' is only allowed as the last element of an array", item_path
                    )
                return ArrayPattern(items=tuple(items), open_tail=True)
            items.append(node)
        return ArrayPattern(items=tuple(items))

    def _string(self, value: str, path: str) -> Pattern | _Tail:
        m = _head.match(value)
        if m is None:
            return Literal(value)
        token, closed = m.group(1), m.group(2)
        if not closed:
            if token in KINDS or token in ANY_TOKENS:
                raise malformed_pattern(f"unbalanced '@' in placeholder {value!r}", path)
            return Literal(value)

        rest = value[m.end() :]
        if token == TAIL_TOKEN:
            if rest:
                raise malformed_pattern(f"'@{TAIL_TOKEN}@' takes no predicates", path)
            return _TAIL
        if token in ANY_TOKENS:
            if rest:
                raise malformed_pattern(f"'@{token}@' takes no predicates", path)
            return AnyWildcard()
        if token not in KINDS:
            raise malformed_pattern(f"unknown placeholder kind {token!r}", path)
        if not rest:
            return TypeWildcard(kind=token)
        return Expression(kind=token, predicates=_ChainParser(rest, token, path, self._predicates).parse())


_default_compiler = PatternCompiler()


def compile_pattern(value: Any) -> Pattern:
    return _default_compiler.compile(value)


def compile_headers(headers: Mapping[str, str]) -> dict[str, Pattern]:
    return _default_compiler.compile_headers(headers)
