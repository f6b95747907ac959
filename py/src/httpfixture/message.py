from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from httpfixture.errors import malformed_fixture
from httpfixture.headers import Headers


class _Empty:
    """Marker for a message written without a body block.

    Distinct from ``None``, which is what an explicit JSON ``null`` body
    parses to.
    """

    __slots__ = ()
    _instance: _Empty | None = None

    def __new__(cls) -> _Empty:
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "EMPTY"

    def __reduce__(self) -> str:
        return "EMPTY"


EMPTY = _Empty()


@dataclass(frozen=True, slots=True)
class RequestLine:
    method: str
    target: str


@dataclass(frozen=True, slots=True)
class StatusLine:
    protocol_version: str
    status_code: int


@dataclass(frozen=True, slots=True)
class HttpMessage:
    start_line: RequestLine | StatusLine
    headers: Headers = field(default_factory=Headers)
    body: Any = EMPTY

    @property
    def is_request(self) -> bool:
        return isinstance(self.start_line, RequestLine)

    @property
    def is_response(self) -> bool:
        return isinstance(self.start_line, StatusLine)

    @property
    def has_body(self) -> bool:
        return self.body is not EMPTY

    @property
    def method(self) -> str:
        return self.start_line.method if isinstance(self.start_line, RequestLine) else ""

    @property
    def target(self) -> str:
        return self.start_line.target if isinstance(self.start_line, RequestLine) else ""

    @property
    def status_code(self) -> int | None:
        return self.start_line.status_code if isinstance(self.start_line, StatusLine) else None

    @property
    def protocol_version(self) -> str:
        return self.start_line.protocol_version if isinstance(self.start_line, StatusLine) else ""


@dataclass(frozen=True, slots=True)
class FixtureDocument:
    request: HttpMessage
    response: HttpMessage
    title: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if self.request is None or self.response is None:
            raise malformed_fixture("fixture requires both a request and a response")
        if not self.request.is_request:
            raise malformed_fixture("first section must describe a request")
        if not self.response.is_response:
            raise malformed_fixture("second section must describe a response")
