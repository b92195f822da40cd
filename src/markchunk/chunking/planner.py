"""
Recursive segment planning under a character budget.

Strategy order:
1. Header boundaries at the configured split levels
2. Paragraph boundaries (blank lines)
3. Line boundaries, greedily packed

Planned segments tile the input exactly. A segment no strategy can split is
kept whole and reported, never truncated.
"""

from __future__ import annotations

import re
from typing import List, Sequence

from ..core.errors import SegmentCoverageError, StructuralWarning
from ..core.logging import log
from ..core.models import SplitOptions
from .boundaries import can_break_at, guarded_fences
from .models import CodeFence, HeaderToken, Segment, Tokens

PARAGRAPH_BREAK_RE = re.compile(r"\n\n+")


def plan_segments(
    segment: Segment, text: str, tokens: Tokens, options: SplitOptions
) -> List[Segment]:
    """
    Split ``segment`` until every piece fits ``options.max_chars`` or cannot be split.

    Args:
        segment: Range of ``text`` to plan, usually the whole document
        text: Normalized document text
        tokens: Output of ``tokenize`` for ``text``
        options: Validated split options

    Returns:
        Contiguous, gap-free segments covering ``segment`` in order
    """
    if segment.length <= options.max_chars:
        return [segment]

    fences = guarded_fences(tokens.fences, options)

    for pieces in (
        lambda: split_by_headers(segment, tokens.headers, options),
        lambda: split_by_paragraphs(segment, text, fences),
        lambda: split_by_lines(segment, text, fences, options.max_chars),
    ):
        parts = pieces()
        if len(parts) > 1:
            planned: List[Segment] = []
            for part in parts:
                planned.extend(plan_segments(part, text, tokens, options))
            return planned

    in_code_block = any(
        fence.start <= segment.start and fence.end >= segment.end for fence in tokens.fences
    )
    log.warning(
        StructuralWarning.OVERSIZE_SEGMENT.value,
        start=segment.start,
        end=segment.end,
        length=segment.length,
        max_chars=options.max_chars,
        code_block=in_code_block,
    )
    return [segment]


def split_by_headers(
    segment: Segment, headers: Sequence[HeaderToken], options: SplitOptions
) -> List[Segment]:
    """Split immediately before each configured-level header inside ``segment``."""
    split_headers = sorted(
        (
            h
            for h in headers
            if h.start >= segment.start
            and h.end <= segment.end
            and h.level in options.header_levels
        ),
        key=lambda h: h.start,
    )
    if not split_headers:
        return [segment]

    parts: List[Segment] = []
    if split_headers[0].start > segment.start:
        parts.append(Segment(segment.start, split_headers[0].start))

    for i, header in enumerate(split_headers):
        section_end = (
            split_headers[i + 1].start if i + 1 < len(split_headers) else segment.end
        )
        parts.append(Segment(header.start, section_end))

    _assert_tiles(segment, parts)
    return parts if len(parts) > 1 else [segment]


def _assert_tiles(segment: Segment, parts: Sequence[Segment]) -> None:
    if parts[0].start != segment.start:
        raise SegmentCoverageError(
            f"First segment doesn't start at segment beginning: {parts[0].start} vs {segment.start}"
        )
    if parts[-1].end != segment.end:
        raise SegmentCoverageError(
            f"Last segment doesn't end at segment end: {parts[-1].end} vs {segment.end}"
        )
    for previous, current in zip(parts, parts[1:]):
        if current.start != previous.end:
            raise SegmentCoverageError(
                f"Gap or overlap detected between segments: {previous.end} to {current.start}"
            )


def split_by_paragraphs(
    segment: Segment, text: str, fences: Sequence[CodeFence]
) -> List[Segment]:
    """Split after each run of blank lines that is not inside a protected fence."""
    segment_text = text[segment.start : segment.end]

    split_points = [
        match.end()
        for match in PARAGRAPH_BREAK_RE.finditer(segment_text)
        if can_break_at(segment.start + match.end(), fences)
    ]

    parts: List[Segment] = []
    current_start = 0
    for split_point in split_points:
        parts.append(Segment(segment.start + current_start, segment.start + split_point))
        current_start = split_point

    if current_start < len(segment_text):
        parts.append(Segment(segment.start + current_start, segment.end))

    return parts if len(parts) > 1 else [segment]


def split_by_lines(
    segment: Segment, text: str, fences: Sequence[CodeFence], max_chars: int
) -> List[Segment]:
    """Greedily pack whole lines, never breaking inside a protected fence."""
    lines = text[segment.start : segment.end].split("\n")

    parts: List[Segment] = []
    current_start = segment.start
    current_length = 0
    line_start = segment.start

    for line in lines:
        line_length = len(line) + 1  # newline

        if (
            current_length + line_length > max_chars
            and current_length > 0
            and can_break_at(line_start, fences)
        ):
            parts.append(Segment(current_start, line_start))
            current_start = line_start
            current_length = line_length
        else:
            current_length += line_length

        line_start += line_length

    if current_start < segment.end:
        parts.append(Segment(current_start, segment.end))

    return parts if len(parts) > 1 else [segment]
