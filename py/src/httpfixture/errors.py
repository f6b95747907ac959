from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(slots=True)
class FixtureError(Exception):
    message: str
    line: int | None = None

    code: ClassVar[str] = "fixture.invalid"

    def __str__(self) -> str:
        if self.line:
            return f"{self.code}: {self.message} (line {self.line})"
        return f"{self.code}: {self.message}"


class MalformedFixtureError(FixtureError):
    code = "fixture.malformed"


class MalformedStartLineError(FixtureError):
    code = "fixture.start_line"


class MalformedHeaderError(FixtureError):
    code = "fixture.header"


@dataclass(slots=True)
class DuplicateHeaderError(FixtureError):
    name: str = ""

    code: ClassVar[str] = "fixture.duplicate_header"


@dataclass(slots=True)
class MalformedBodyError(FixtureError):
    position: int | None = None

    code: ClassVar[str] = "fixture.body"


@dataclass(slots=True)
class MalformedPatternError(FixtureError):
    path: str = ""

    code: ClassVar[str] = "pattern.malformed"

    def __str__(self) -> str:
        where = self.path or "(root)"
        return f"{self.code}: {self.message} at {where}"


def malformed_fixture(message: str, line: int | None = None) -> MalformedFixtureError:
    return MalformedFixtureError(message=str(message), line=line)


def malformed_pattern(message: str, path: str = "") -> MalformedPatternError:
    return MalformedPatternError(message=str(message), path=str(path or ""))
