from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from httpfixture.sanitization import (  # noqa: E402
    describe_value,
    is_sensitive_name,
    sanitize_field_value,
    sanitize_log_string,
)


class TestSanitization(unittest.TestCase):
    def test_sanitize_log_string_strips_newlines(self) -> None:
        self.assertEqual(sanitize_log_string("a\nb\r\nc"), "abc")
        self.assertEqual(sanitize_log_string(""), "")

    def test_sensitive_names(self) -> None:
        for name in ("Authorization", "cookie", "Set-Cookie", "X-Api-Key", "client_secret", "X-Auth-Token"):
            self.assertTrue(is_sensitive_name(name), name)
        for name in ("Content-Type", "Location", "", "card_bin"):
            self.assertFalse(is_sensitive_name(name), name)

    def test_sanitize_field_value_masks(self) -> None:
        self.assertEqual(sanitize_field_value("authorization", "Bearer secret"), "[REDACTED]")
        self.assertEqual(sanitize_field_value("Cookie", "session=1"), "[REDACTED]")

        nested = sanitize_field_value(
            "root",
            {
                "password": "p\nw",
                "ok": "a\r\nb",
                "list": [{"api_key": "x"}, "fine"],
            },
        )
        self.assertEqual(
            nested,
            {
                "password": "[REDACTED]",
                "ok": "ab",
                "list": [{"api_key": "[REDACTED]"}, "fine"],
            },
        )

    def test_sanitize_field_value_edge_cases(self) -> None:
        self.assertEqual(sanitize_field_value("root", b"a\nb"), "ab")
        self.assertIsNone(sanitize_field_value("root", None))
        self.assertEqual(sanitize_field_value("n", 3), 3)
        self.assertTrue(sanitize_field_value("o", object()).startswith("<object"))

    def test_describe_value(self) -> None:
        self.assertEqual(describe_value("x"), '"x"')
        self.assertEqual(describe_value(None), "null")
        self.assertEqual(describe_value({"b": 1, "a": [True]}), '{"a": [true], "b": 1}')
        self.assertEqual(describe_value(b"raw"), "b'raw'")
        self.assertEqual(describe_value("x" * 50, limit=10), '"xxxxxx...')
        self.assertEqual(len(describe_value(list(range(500)))), 120)


if __name__ == "__main__":
    unittest.main()
