"""
Single-pass tokenization of the structural markers the splitter relies on:
ATX headers, fenced code blocks and "Sources" front-matter blocks.
"""

from __future__ import annotations

import re
from typing import List, NamedTuple, Optional

from ..core.errors import StructuralWarning
from ..core.logging import log
from ..core.models import SplitOptions
from .models import CodeFence, HeaderToken, SourceRange, Tokens

# Up to 3 leading spaces per CommonMark; an optional closing run of '#'
# must be separated from the text by whitespace.
HEADER_RE = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$", re.MULTILINE)
FENCE_OPEN_RE = re.compile(r"^\s{0,3}([`~]{3,})(.*)$")

_DASH_LINE_RE = re.compile(r"^\s*---\s*$")
_SOURCES_LABEL_RE = re.compile(r"^\s*Sources:\s*$", re.IGNORECASE)
_BULLET_RE = re.compile(r"^\s*[-*]\s+(\S+)")
_ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
_BLANK_RE = re.compile(r"^\s*$")


def tokenize(text: str, options: SplitOptions) -> Tokens:
    """Scan ``text`` once for headers, code fences and source ranges."""
    fences = find_code_fences(text, options)
    headers = [
        header
        for header in find_headers(text)
        if not any(
            header.start >= fence.start and header.end <= fence.end and not fence.breakable
            for fence in fences
        )
    ]
    return Tokens(headers=headers, fences=fences, source_ranges=parse_source_ranges(text))


def find_headers(text: str) -> List[HeaderToken]:
    """All non-empty ATX header candidates, in document order, ignoring fences."""
    return [
        HeaderToken(
            level=len(match.group(1)),
            text=match.group(2).strip(),
            start=match.start(),
            end=match.end(),
        )
        for match in HEADER_RE.finditer(text)
        if match.group(2).strip()
    ]


class _OpenFence(NamedTuple):
    start: int
    fence_char: str
    fence_len: int
    info: Optional[str]


def _open_fence(match: re.Match, start: int) -> _OpenFence:
    run = match.group(1)
    return _OpenFence(
        start=start,
        fence_char=run[0],
        fence_len=len(run),
        info=match.group(2).strip() or None,
    )


def _closes(line: str, fence: _OpenFence) -> bool:
    pattern = r"^\s{0,3}(" + re.escape(fence.fence_char) + "{" + str(fence.fence_len) + r",})\s*$"
    return re.match(pattern, line) is not None


def find_code_fences(text: str, options: SplitOptions) -> List[CodeFence]:
    """
    Locate fenced code blocks line by line.

    A closer must repeat the opener's character at least as many times. An
    opener seen inside an open fence force-closes the previous fence at the end
    of the prior line when ``fallback_close_on_nested_open`` is set. A fence
    still open at end of input runs to the end. Both malformed cases, and any
    closed fence longer than ``options.fence_size_limit``, are breakable.
    """
    fences: List[CodeFence] = []
    current: Optional[_OpenFence] = None
    position = 0

    for line in text.split("\n"):
        opener = FENCE_OPEN_RE.match(line)

        if current is None:
            if opener:
                current = _open_fence(opener, position)
        elif _closes(line, current):
            fences.append(
                CodeFence(
                    start=current.start,
                    end=position + len(line),
                    fence_char=current.fence_char,
                    fence_len=current.fence_len,
                    closed=True,
                    breakable=False,
                    info=current.info,
                )
            )
            current = None
        elif options.fallback_close_on_nested_open and opener:
            log.warning(
                StructuralWarning.NESTED_FENCE_REOPEN.value,
                fence_start=current.start,
                reopen_at=position,
            )
            fences.append(
                CodeFence(
                    start=current.start,
                    end=max(0, position - 1),
                    fence_char=current.fence_char,
                    fence_len=current.fence_len,
                    closed=False,
                    breakable=True,
                    info=current.info,
                )
            )
            current = _open_fence(opener, position)

        position += len(line) + 1

    if current is not None:
        log.warning(
            StructuralWarning.UNCLOSED_FENCE.value,
            fence_start=current.start,
            message="Unclosed code block at end of input; marking as breakable",
        )
        fences.append(
            CodeFence(
                start=current.start,
                end=len(text),
                fence_char=current.fence_char,
                fence_len=current.fence_len,
                closed=False,
                breakable=True,
                info=current.info,
            )
        )

    limit = options.fence_size_limit
    return [
        fence._replace(breakable=True) if fence.closed and fence.length > limit else fence
        for fence in fences
    ]


class _SourcesBlock(NamedTuple):
    first_line: int
    last_line: int
    url: Optional[str]


def parse_source_ranges(text: str) -> List[SourceRange]:
    """
    Parse "Sources" blocks into the ranges they cite.

    Format::

        ---
        Sources:
        - https://example.com/a
        - https://example.com/b
        ---

    The first absolute URL of a block applies from just after its closing
    ``---`` line until the opening line of the next block (or end of input).
    """
    lines = text.split("\n")
    line_starts: List[int] = []
    offset = 0
    for line in lines:
        line_starts.append(offset)
        offset += len(line) + 1

    blocks: List[_SourcesBlock] = []
    i = 0
    while i < len(lines):
        if not _DASH_LINE_RE.match(lines[i]):
            i += 1
            continue

        j = i + 1
        while j < len(lines) and _BLANK_RE.match(lines[j]):
            j += 1
        if j < len(lines) and _SOURCES_LABEL_RE.match(lines[j]):
            k = j + 1
            while k < len(lines) and not _DASH_LINE_RE.match(lines[k]):
                k += 1
            if k < len(lines):
                blocks.append(_SourcesBlock(i, k, _first_url(lines[j + 1 : k])))
                i = k
        i += 1

    ranges: List[SourceRange] = []
    for index, block in enumerate(blocks):
        start = line_starts[block.last_line] + len(lines[block.last_line]) + 1
        if index + 1 < len(blocks):
            end = line_starts[blocks[index + 1].first_line]
        else:
            end = len(text)
        if block.url and start < end:
            ranges.append(SourceRange(start=start, end=end, url=block.url))
    return ranges


def _first_url(lines: List[str]) -> Optional[str]:
    for line in lines:
        bullet = _BULLET_RE.match(line)
        if bullet and _ABSOLUTE_URL_RE.match(bullet.group(1)):
            return bullet.group(1)
    return None
