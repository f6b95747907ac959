"""Fixture documents: markdown text in, :class:`FixtureDocument` out (and back).

A fixture is two sections separated by a ``---`` line. Each section holds one
fenced block tagged ``http request`` (start line plus headers) and, optionally,
a ``json`` block carrying the body::

    ```http request
    POST /api/examples
    Accept: application/json
    ```

    ```json
    {"title": "Test"}
    ```

    ---

    ```http request
    HTTP/1.1 201 Created
    ```
"""

from __future__ import annotations

import json as jsonlib
from http import HTTPStatus

from httpfixture.blocks import BODY_TAG, HEAD_TAG, SEPARATOR, find_blocks, split_sections
from httpfixture.errors import malformed_fixture
from httpfixture.http_parser import parse_message
from httpfixture.logger import get_logger
from httpfixture.message import FixtureDocument, HttpMessage, RequestLine, StatusLine


def parse_fixture(text: str | bytes) -> FixtureDocument:
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise malformed_fixture(f"fixture is not valid UTF-8: {exc.reason}") from exc

    request_section, response_section = split_sections(str(text))

    request_blocks = find_blocks(request_section.text, first_line=request_section.first_line)
    request = parse_message(
        request_blocks.head,
        request_blocks.body,
        "request",
        head_line=request_blocks.head_line,
        body_line=request_blocks.body_line,
    )

    response_blocks = find_blocks(response_section.text, first_line=response_section.first_line)
    response = parse_message(
        response_blocks.head,
        response_blocks.body,
        "response",
        head_line=response_blocks.head_line,
        body_line=response_blocks.body_line,
    )

    get_logger().debug(
        "fixture.parsed",
        {"title": request_blocks.title, "method": request.method, "target": request.target},
    )
    return FixtureDocument(request=request, response=response, title=request_blocks.title)


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"


def render_message(message: HttpMessage) -> str:
    start = message.start_line
    if isinstance(start, RequestLine):
        first = f"{start.method} {start.target}"
    elif isinstance(start, StatusLine):
        first = f"HTTP/{start.protocol_version} {start.status_code} {_reason_phrase(start.status_code)}"
    else:
        raise TypeError("message start line must be a RequestLine or StatusLine")

    head = [first] + [f"{name}: {value}" for name, value in message.headers.items()]
    out = ["```" + HEAD_TAG, *head, "```"]
    if message.has_body:
        out += ["", "```" + BODY_TAG, jsonlib.dumps(message.body, indent=4, ensure_ascii=False), "```"]
    return "\n".join(out)


def render_fixture(document: FixtureDocument) -> str:
    parts: list[str] = []
    if document.title:
        parts += [f"# {document.title}", ""]
    parts += [render_message(document.request), "", SEPARATOR, "", render_message(document.response)]
    return "\n".join(parts) + "\n"
