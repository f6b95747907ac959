from __future__ import annotations

import re
from dataclasses import dataclass

from httpfixture.errors import malformed_fixture
from httpfixture.util import is_blank, split_lines

HEAD_TAG = "http request"
BODY_TAG = "json"
SEPARATOR = "---"

_fence_open = re.compile(r"^(`{3,})\s*([^`]*)$")
_fence_close = re.compile(r"^(`{3,})$")
_top_heading = re.compile(r"^#(?:\s|$)")
_any_heading = re.compile(r"^#{1,6}\s+(.+?)\s*#*\s*$")


@dataclass(frozen=True, slots=True)
class Section:
    text: str
    first_line: int


@dataclass(frozen=True, slots=True)
class Fence:
    tag: str
    start: int
    end: int
    content: str


@dataclass(frozen=True, slots=True)
class SectionBlocks:
    head: str
    body: str | None
    head_line: int
    body_line: int
    title: str = ""


def _fences(lines: list[str], first_line: int) -> list[Fence]:
    out: list[Fence] = []
    i = 0
    while i < len(lines):
        m = _fence_open.match(lines[i].strip())
        if m is None:
            i += 1
            continue
        ticks = len(m.group(1))
        tag = " ".join(m.group(2).split())
        j = i + 1
        while j < len(lines):
            close = _fence_close.match(lines[j].strip())
            if close is not None and len(close.group(1)) >= ticks:
                break
            j += 1
        else:
            raise malformed_fixture("unterminated code fence", line=first_line + i)
        out.append(Fence(tag=tag, start=i, end=j, content="\n".join(lines[i + 1 : j])))
        i = j + 1
    return out


def _inside(fences: list[Fence], index: int) -> bool:
    return any(f.start <= index <= f.end for f in fences)


def split_sections(text: str) -> tuple[Section, Section]:
    lines = split_lines(text)
    fences = _fences(lines, 1)

    separators = [
        i for i, line in enumerate(lines) if line.rstrip() == SEPARATOR and not _inside(fences, i)
    ]
    if not separators:
        raise malformed_fixture(f"missing {SEPARATOR!r} separator between request and response")
    if len(separators) > 1:
        raise malformed_fixture(f"separator {SEPARATOR!r} appears more than once", line=separators[1] + 1)

    sep = separators[0]
    request = lines[:sep]
    response = lines[sep + 1 :]
    if all(is_blank(line) for line in request):
        raise malformed_fixture("request section is empty", line=1)
    if all(is_blank(line) for line in response):
        raise malformed_fixture("response section is empty", line=sep + 1)

    return (
        Section(text="\n".join(request), first_line=1),
        Section(text="\n".join(response), first_line=sep + 2),
    )


def find_blocks(section: str, *, first_line: int = 1) -> SectionBlocks:
    lines = split_lines(section)
    fences = _fences(lines, first_line)

    head = next((f for f in fences if f.tag == HEAD_TAG), None)
    if head is None:
        raise malformed_fixture(f"section has no {HEAD_TAG!r} code block", line=first_line)

    title = ""
    for i, line in enumerate(lines[: head.start]):
        if _inside(fences, i):
            continue
        m = _any_heading.match(line.strip())
        if m is not None:
            title = m.group(1)
            break

    body: Fence | None = None
    for i in range(head.end + 1, len(lines)):
        fence = next((f for f in fences if f.start == i), None)
        if fence is not None:
            if fence.tag == BODY_TAG:
                body = fence
                break
            continue
        if not _inside(fences, i) and _top_heading.match(lines[i]):
            break

    return SectionBlocks(
        head=head.content,
        body=body.content if body is not None else None,
        head_line=first_line + head.start + 1,
        body_line=first_line + body.start + 1 if body is not None else 0,
        title=title,
    )
