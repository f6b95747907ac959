from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from httpfixture.errors import (  # noqa: E402
    DuplicateHeaderError,
    MalformedBodyError,
    MalformedHeaderError,
    MalformedStartLineError,
)
from httpfixture.http_parser import parse_message, parse_request_line, parse_status_line  # noqa: E402
from httpfixture.message import EMPTY, RequestLine, StatusLine  # noqa: E402


class TestStartLines(unittest.TestCase):
    def test_request_line(self) -> None:
        self.assertEqual(parse_request_line("POST /api/examples"), RequestLine("POST", "/api/examples"))
        self.assertEqual(parse_request_line("GET  /a b?c=1   "), RequestLine("GET", "/a b?c=1"))

    def test_request_line_requires_target(self) -> None:
        with self.assertRaises(MalformedStartLineError) as ctx:
            parse_request_line("GET", line_no=3)
        self.assertEqual(ctx.exception.line, 3)
        self.assertTrue(str(ctx.exception).startswith("fixture.start_line:"))

    def test_status_line(self) -> None:
        self.assertEqual(parse_status_line("HTTP/1.1 200 OK"), StatusLine("1.1", 200))
        self.assertEqual(parse_status_line("HTTP/2.0 404 Not Found"), StatusLine("2.0", 404))
        self.assertEqual(parse_status_line("HTTP/1.0 204"), StatusLine("1.0", 204))

    def test_status_line_rejects_bad_version_and_code(self) -> None:
        with self.assertRaisesRegex(MalformedStartLineError, "invalid protocol version"):
            parse_status_line("HTTP/1 200 OK")
        with self.assertRaisesRegex(MalformedStartLineError, "invalid status code"):
            parse_status_line("HTTP/1.1 2x0 OK")
        with self.assertRaisesRegex(MalformedStartLineError, "invalid status code"):
            parse_status_line("HTTP/1.1 -200 OK")
        with self.assertRaises(MalformedStartLineError):
            parse_status_line("POST /api")


class TestParseMessage(unittest.TestCase):
    def test_request_with_headers_and_body(self) -> None:
        msg = parse_message("POST /api/examples\nAccept: application/json", '{"title":"Test"}', "request")
        self.assertTrue(msg.is_request)
        self.assertEqual(msg.method, "POST")
        self.assertEqual(msg.target, "/api/examples")
        self.assertEqual(dict(msg.headers), {"Accept": "application/json"})
        self.assertEqual(msg.body, {"title": "Test"})

    def test_response_without_body(self) -> None:
        msg = parse_message("HTTP/1.1 200 OK", None, "response")
        self.assertTrue(msg.is_response)
        self.assertEqual(msg.status_code, 200)
        self.assertEqual(msg.protocol_version, "1.1")
        self.assertEqual(len(msg.headers), 0)
        self.assertIs(msg.body, EMPTY)
        self.assertFalse(msg.has_body)

    def test_role_decides_start_line_shape(self) -> None:
        with self.assertRaises(MalformedStartLineError):
            parse_message("GET /", None, "response")
        msg = parse_message("HTTP/1.1 200 OK", None, "request")
        self.assertEqual(msg.start_line, RequestLine("HTTP/1.1", "200 OK"))

    def test_unknown_role_is_a_programming_error(self) -> None:
        with self.assertRaises(ValueError):
            parse_message("GET /", None, "reply")

    def test_header_values_keep_colons_and_are_trimmed(self) -> None:
        msg = parse_message("HTTP/1.1 302 Found\n  Location :  http://example.com:8080/x  ", None, "response")
        self.assertEqual(msg.headers["location"], "http://example.com:8080/x")
        self.assertEqual(list(msg.headers), ["Location"])

    def test_leading_and_trailing_blank_lines_are_ignored(self) -> None:
        msg = parse_message("\n\nGET /\nAccept: */*\n\n", None, "request")
        self.assertEqual(msg.target, "/")
        self.assertEqual(msg.headers["Accept"], "*/*")

    def test_header_without_colon(self) -> None:
        with self.assertRaises(MalformedHeaderError) as ctx:
            parse_message("GET /\nAccept application/json", None, "request", head_line=5)
        self.assertEqual(ctx.exception.line, 6)

    def test_header_after_blank_line(self) -> None:
        with self.assertRaisesRegex(MalformedHeaderError, "after a blank line"):
            parse_message("GET /\nA: 1\n\nB: 2", None, "request")

    def test_header_name_must_not_contain_whitespace(self) -> None:
        with self.assertRaisesRegex(MalformedHeaderError, "invalid header name"):
            parse_message("GET /\nX Custom: 1", None, "request")
        with self.assertRaisesRegex(MalformedHeaderError, "invalid header name"):
            parse_message("GET /\n: 1", None, "request")

    def test_duplicate_headers_are_case_insensitive(self) -> None:
        with self.assertRaises(DuplicateHeaderError) as ctx:
            parse_message("GET /\nAccept: a\naccept: b", None, "request")
        self.assertEqual(ctx.exception.name, "accept")
        self.assertEqual(ctx.exception.line, 3)

    def test_invalid_json_body_carries_position(self) -> None:
        with self.assertRaises(MalformedBodyError) as ctx:
            parse_message("GET /", '{\n  "a": }', "request", body_line=10)
        self.assertEqual(ctx.exception.position, 9)
        self.assertEqual(ctx.exception.line, 11)
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_blank_json_block_is_malformed(self) -> None:
        with self.assertRaisesRegex(MalformedBodyError, "empty"):
            parse_message("GET /", "  \n", "request")

    def test_explicit_null_body_is_not_empty(self) -> None:
        msg = parse_message("HTTP/1.1 200 OK", "null", "response")
        self.assertIsNone(msg.body)
        self.assertTrue(msg.has_body)

    def test_empty_head_block(self) -> None:
        with self.assertRaisesRegex(MalformedStartLineError, "head block is empty"):
            parse_message("\n  \n", None, "request")


if __name__ == "__main__":
    unittest.main()
