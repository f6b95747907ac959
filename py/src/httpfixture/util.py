from __future__ import annotations

import re
from typing import Any

_plain_key = re.compile(r"^[^.\[\]\s\"]+$")


def json_kind(value: Any) -> str:
    # bool is a subclass of int, so it is checked first.
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "double"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def join_key(path: str, key: str) -> str:
    k = str(key)
    if not _plain_key.match(k):
        escaped = k.replace("\\", "\\\\").replace('"', '\\"')
        return f'{path}["{escaped}"]'
    return f"{path}.{k}" if path else k


def join_index(path: str, index: int) -> str:
    return f"{path}[{int(index)}]"


def display_path(path: str) -> str:
    return path or "(root)"


def split_lines(text: str) -> list[str]:
    return str(text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")


def is_blank(line: str) -> bool:
    return not str(line or "").strip()
