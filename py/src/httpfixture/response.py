from __future__ import annotations

import json as jsonlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from httpfixture.compiler import PatternCompiler
from httpfixture.headers import Headers
from httpfixture.logger import get_logger
from httpfixture.matcher import KIND_MISMATCH, VALUE_MISMATCH, MatchFailure, MatchResult, PatternMatcher
from httpfixture.message import EMPTY, HttpMessage


@dataclass(frozen=True, slots=True)
class ObservedResponse:
    """The response actually produced for a fixture's request."""

    status_code: int
    headers: Headers = field(default_factory=Headers)
    body: Any = EMPTY
    protocol_version: str = ""

    @classmethod
    def from_raw(
        cls,
        status_code: int,
        headers: Mapping[str, Any] | None = None,
        body: Any = EMPTY,
        protocol_version: str = "",
    ) -> ObservedResponse:
        return cls(
            status_code=int(status_code),
            headers=Headers.from_actual(headers),
            body=decode_body(body),
            protocol_version=str(protocol_version or "").strip(),
        )


def decode_body(body: Any) -> Any:
    """Decode a raw bytes/str body as JSON, keeping it as text when it is not JSON."""
    if isinstance(body, (bytes, bytearray, memoryview)):
        raw = bytes(body)
        if not raw:
            return EMPTY
        try:
            body = raw.decode("utf-8")
        except UnicodeDecodeError:
            return raw
    if isinstance(body, str):
        if not body.strip():
            return EMPTY
        try:
            return jsonlib.loads(body)
        except jsonlib.JSONDecodeError:
            return body
    return body


def match_response(
    expected: HttpMessage,
    observed: ObservedResponse,
    *,
    compiler: PatternCompiler | None = None,
    matcher: PatternMatcher | None = None,
) -> MatchResult:
    if not expected.is_response:
        raise ValueError("expected message must be a response")
    compiler = compiler or PatternCompiler()
    matcher = matcher or PatternMatcher()

    results: list[MatchResult] = []

    if expected.status_code != observed.status_code:
        results.append(
            MatchResult((MatchFailure("status", str(expected.status_code), observed.status_code, VALUE_MISMATCH),))
        )

    version = str(observed.protocol_version or "").strip()
    if version and version != expected.protocol_version:
        results.append(
            MatchResult((MatchFailure("protocol_version", repr(expected.protocol_version), version, VALUE_MISMATCH),))
        )

    if len(expected.headers):
        patterns = compiler.compile_headers(expected.headers)
        results.append(matcher.match_headers(patterns, observed.headers).prefixed("headers"))

    if expected.has_body:
        if observed.body is EMPTY:
            results.append(MatchResult((MatchFailure("body", "a body", None, KIND_MISMATCH),)))
        else:
            results.append(matcher.match(compiler.compile(expected.body), observed.body).prefixed("body"))

    result = MatchResult.combine(*results)
    get_logger().debug(
        "response.matched",
        {"status": observed.status_code, "success": result.success, "failures": len(result.failures)},
    )
    return result
