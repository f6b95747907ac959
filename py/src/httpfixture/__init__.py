"""httpfixture: markdown HTTP fixtures and response pattern matching."""

from __future__ import annotations

from httpfixture.blocks import Section, SectionBlocks, find_blocks, split_sections
from httpfixture.compiler import PatternCompiler, compile_headers, compile_pattern
from httpfixture.errors import (
    DuplicateHeaderError,
    FixtureError,
    MalformedBodyError,
    MalformedFixtureError,
    MalformedHeaderError,
    MalformedPatternError,
    MalformedStartLineError,
)
from httpfixture.fixture import parse_fixture, render_fixture, render_message
from httpfixture.headers import Headers
from httpfixture.http_parser import parse_message
from httpfixture.logger import NoOpLogger, StdlibLogger, StructuredLogger, get_logger, set_logger
from httpfixture.matcher import MatchConfig, MatchFailure, MatchResult, PatternMatcher, match, match_headers
from httpfixture.message import EMPTY, FixtureDocument, HttpMessage, RequestLine, StatusLine
from httpfixture.pattern import (
    AnyWildcard,
    ArrayPattern,
    Expression,
    Literal,
    ObjectPattern,
    Pattern,
    PredicateCall,
    TypeWildcard,
)
from httpfixture.predicates import PredicateRegistry, PredicateSpec, default_registry
from httpfixture.response import ObservedResponse, match_response

__all__ = [
    "EMPTY",
    "AnyWildcard",
    "ArrayPattern",
    "DuplicateHeaderError",
    "Expression",
    "FixtureDocument",
    "FixtureError",
    "Headers",
    "HttpMessage",
    "Literal",
    "MalformedBodyError",
    "MalformedFixtureError",
    "MalformedHeaderError",
    "MalformedPatternError",
    "MalformedStartLineError",
    "MatchConfig",
    "MatchFailure",
    "MatchResult",
    "NoOpLogger",
    "ObjectPattern",
    "ObservedResponse",
    "Pattern",
    "PatternCompiler",
    "PatternMatcher",
    "PredicateCall",
    "PredicateRegistry",
    "PredicateSpec",
    "RequestLine",
    "Section",
    "SectionBlocks",
    "StatusLine",
    "StdlibLogger",
    "StructuredLogger",
    "TypeWildcard",
    "compile_headers",
    "compile_pattern",
    "default_registry",
    "find_blocks",
    "get_logger",
    "match",
    "match_headers",
    "match_response",
    "parse_fixture",
    "parse_message",
    "render_fixture",
    "render_message",
    "set_logger",
]
