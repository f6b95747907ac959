from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from httpfixture.fixture import parse_fixture  # noqa: E402
from httpfixture.matcher import (  # noqa: E402
    KIND_MISMATCH,
    LENGTH_MISMATCH,
    MISSING_KEY,
    PREDICATE_FAILED,
    VALUE_MISMATCH,
    MatchConfig,
    PatternMatcher,
)
from httpfixture.message import EMPTY  # noqa: E402
from httpfixture.response import ObservedResponse, decode_body, match_response  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"

CREATED_BODY = {
    "id": 7,
    "title": "Test",
    "slug": "test-7",
    "tags": ["new", "draft"],
    "createdAt": "2026-01-01T00:00:00Z",
}


def _created(**overrides: object) -> ObservedResponse:
    raw = {
        "status_code": 201,
        "headers": {"content-type": ["application/json"], "location": ["/api/examples/7"]},
        "body": json.dumps(CREATED_BODY).encode("utf-8"),
        "protocol_version": "1.1",
    }
    raw.update(overrides)
    return ObservedResponse.from_raw(**raw)  # type: ignore[arg-type]


class TestMatchResponse(unittest.TestCase):
    def setUp(self) -> None:
        self.doc = parse_fixture((FIXTURES / "create_example.md").read_text(encoding="utf-8"))

    def test_matching_response(self) -> None:
        result = match_response(self.doc.response, _created())
        self.assertTrue(result.success, result.describe())

    def test_status_mismatch(self) -> None:
        result = match_response(self.doc.response, _created(status_code=200))
        self.assertEqual([(f.path, f.reason) for f in result.failures], [("status", VALUE_MISMATCH)])
        self.assertEqual(result.describe(), "status: expected 201, got 200")

    def test_protocol_version_is_checked_only_when_observed(self) -> None:
        self.assertTrue(match_response(self.doc.response, _created(protocol_version="")))
        result = match_response(self.doc.response, _created(protocol_version="2.0"))
        self.assertEqual([f.path for f in result.failures], ["protocol_version"])

    def test_header_failures_are_prefixed(self) -> None:
        result = match_response(
            self.doc.response,
            _created(headers={"Content-Type": "application/json", "Location": "/elsewhere/7"}),
        )
        self.assertEqual([(f.path, f.reason) for f in result.failures], [("headers.Location", PREDICATE_FAILED)])

        result = match_response(self.doc.response, _created(headers={"Location": "/api/examples/7"}))
        self.assertEqual([(f.path, f.reason) for f in result.failures], [("headers.Content-Type", MISSING_KEY)])

    def test_body_failures_are_prefixed(self) -> None:
        body = dict(CREATED_BODY, id="7", tags=[], slug="other")
        del body["createdAt"]
        result = match_response(self.doc.response, _created(body=json.dumps(body)))
        self.assertEqual(
            [(f.path, f.reason) for f in result.failures],
            [
                ("body.id", KIND_MISMATCH),
                ("body.slug", PREDICATE_FAILED),
                ("body.tags", LENGTH_MISMATCH),
            ],
        )

    def test_missing_body(self) -> None:
        result = match_response(self.doc.response, _created(body=b""))
        self.assertEqual([(f.path, f.reason) for f in result.failures], [("body", KIND_MISMATCH)])
        self.assertEqual(result.describe(), "body: expected a body, got null")

    def test_non_json_body_is_compared_as_text(self) -> None:
        result = match_response(self.doc.response, _created(body="<html></html>"))
        self.assertEqual([(f.path, f.reason) for f in result.failures], [("body", KIND_MISMATCH)])

    def test_failures_across_sections_are_combined(self) -> None:
        result = match_response(self.doc.response, _created(status_code=500, headers={}, body=b"{}"))
        paths = [f.path for f in result.failures]
        self.assertEqual(paths[0], "status")
        self.assertIn("headers.Content-Type", paths)
        self.assertIn("headers.Location", paths)
        self.assertIn("body.id", paths)
        self.assertNotIn("body.createdAt", paths)

    def test_custom_matcher_configuration(self) -> None:
        doc = parse_fixture(
            "```http request\nGET /n\n```\n---\n```http request\nHTTP/1.1 200 OK\n```\n```json\n{\"n\": 1}\n```\n"
        )
        observed = ObservedResponse.from_raw(200, {}, b'{"n": 1.0}')
        self.assertFalse(match_response(doc.response, observed))
        relaxed = PatternMatcher(MatchConfig(strict_numeric_kinds=False))
        self.assertTrue(match_response(doc.response, observed, matcher=relaxed))

    def test_bodyless_expectation_ignores_observed_body(self) -> None:
        doc = parse_fixture((FIXTURES / "delete_example.md").read_text(encoding="utf-8"))
        self.assertTrue(match_response(doc.response, ObservedResponse.from_raw(204)))
        self.assertTrue(match_response(doc.response, ObservedResponse.from_raw(204, body=b'{"x": 1}')))

    def test_request_messages_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            match_response(self.doc.request, _created())


class TestDecodeBody(unittest.TestCase):
    def test_decode_body(self) -> None:
        self.assertIs(decode_body(b""), EMPTY)
        self.assertIs(decode_body("  \n"), EMPTY)
        self.assertEqual(decode_body(b'{"a": [1]}'), {"a": [1]})
        self.assertEqual(decode_body("null"), None)
        self.assertEqual(decode_body("not json"), "not json")
        self.assertEqual(decode_body(b"\xff\xfe"), b"\xff\xfe")
        self.assertEqual(decode_body({"already": "decoded"}), {"already": "decoded"})


if __name__ == "__main__":
    unittest.main()
