from __future__ import annotations

import json as jsonlib
import re
from typing import Any

from httpfixture.errors import (
    DuplicateHeaderError,
    MalformedBodyError,
    MalformedHeaderError,
    MalformedStartLineError,
)
from httpfixture.headers import Headers
from httpfixture.logger import get_logger
from httpfixture.message import EMPTY, HttpMessage, RequestLine, StatusLine
from httpfixture.util import is_blank, split_lines

ROLES = ("request", "response")

_request_line = re.compile(r"^(\S+)\s+(.+?)\s*$")
_status_line = re.compile(r"^HTTP/(\S*)\s+(\S+)(?:\s+.*)?$")
_version = re.compile(r"^\d+\.\d+$")
_status_code = re.compile(r"^[0-9]+$")


def parse_request_line(line: str, *, line_no: int | None = None) -> RequestLine:
    m = _request_line.match(str(line or "").strip())
    if m is None:
        raise MalformedStartLineError(message=f"expected '<METHOD> <TARGET>', got {line!r}", line=line_no)
    return RequestLine(method=m.group(1), target=m.group(2))


def parse_status_line(line: str, *, line_no: int | None = None) -> StatusLine:
    m = _status_line.match(str(line or "").strip())
    if m is None:
        raise MalformedStartLineError(
            message=f"expected 'HTTP/<version> <status> <reason>', got {line!r}", line=line_no
        )
    version, code = m.group(1), m.group(2)
    if not _version.match(version):
        raise MalformedStartLineError(message=f"invalid protocol version {version!r}", line=line_no)
    if not _status_code.match(code):
        raise MalformedStartLineError(message=f"invalid status code {code!r}", line=line_no)
    return StatusLine(protocol_version=version, status_code=int(code))


def parse_headers(lines: list[str], *, first_line: int = 1) -> Headers:
    pairs: list[tuple[str, str]] = []
    seen: set[str] = set()
    blank_seen = False
    for offset, line in enumerate(lines):
        line_no = first_line + offset
        if is_blank(line):
            blank_seen = True
            continue
        if blank_seen:
            raise MalformedHeaderError(message="header line after a blank line", line=line_no)
        if ":" not in line:
            raise MalformedHeaderError(message=f"expected '<Name>: <Value>', got {line.strip()!r}", line=line_no)
        name, value = line.split(":", 1)
        name = name.strip()
        if not name or any(ch.isspace() for ch in name):
            raise MalformedHeaderError(message=f"invalid header name {name!r}", line=line_no)
        key = name.lower()
        if key in seen:
            raise DuplicateHeaderError(message=f"duplicate header {name!r}", line=line_no, name=name)
        seen.add(key)
        pairs.append((name, value.strip()))
    return Headers(pairs)


def parse_body(body: str | None, *, first_line: int = 1) -> Any:
    if body is None:
        return EMPTY
    if is_blank(body):
        raise MalformedBodyError(message="json block is empty", line=first_line, position=0)
    try:
        return jsonlib.loads(body)
    except jsonlib.JSONDecodeError as exc:
        raise MalformedBodyError(
            message=f"invalid JSON body: {exc.msg}",
            line=first_line + exc.lineno - 1,
            position=exc.pos,
        ) from exc


def parse_message(
    head: str,
    body: str | None,
    role: str,
    *,
    head_line: int = 1,
    body_line: int = 1,
) -> HttpMessage:
    if role not in ROLES:
        raise ValueError(f"role must be one of {ROLES}, got {role!r}")

    lines = split_lines(head)
    idx = 0
    while idx < len(lines) and is_blank(lines[idx]):
        idx += 1
    if idx >= len(lines):
        raise MalformedStartLineError(message=f"{role} head block is empty", line=head_line)

    line_no = head_line + idx
    if role == "request":
        start_line: RequestLine | StatusLine = parse_request_line(lines[idx], line_no=line_no)
    else:
        start_line = parse_status_line(lines[idx], line_no=line_no)

    headers = parse_headers(lines[idx + 1 :], first_line=line_no + 1)
    parsed_body = parse_body(body, first_line=body_line)

    get_logger().debug(
        "fixture.message.parsed",
        {"role": role, "line": line_no, "headers": len(headers), "has_body": parsed_body is not EMPTY},
    )
    return HttpMessage(start_line=start_line, headers=headers, body=parsed_body)
