"""
Glue pass: coalesce undersized segments, then snap boundaries out of fences.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.models import SplitOptions
from .models import CodeFence, Segment

# A trailing segment still under min_chars may be folded into its predecessor
# as long as the result stays within this multiple of max_chars.
FINAL_MERGE_SLACK = 1.5


def merge_small_segments(
    segments: Sequence[Segment], options: SplitOptions, fences: Sequence[CodeFence]
) -> List[Segment]:
    """
    Merge segments shorter than ``options.min_chars`` into their neighbours.

    Args:
        segments: Planned, contiguous segments in document order
        options: Validated split options
        fences: Fences whose non-breakable members boundaries must avoid

    Returns:
        Ordered, non-overlapping segments with no boundary inside a protected fence
    """
    if len(segments) <= 1:
        return list(segments)

    min_chars = options.min_chars
    max_chars = options.max_chars

    merged: List[Segment] = []
    current: Optional[Segment] = None

    for i, segment in enumerate(segments):
        is_last = i == len(segments) - 1

        if current is None:
            current = segment
            continue

        combined = current.length + segment.length
        should_merge = (
            (segment.length < min_chars or current.length < min_chars)
            and combined <= max_chars
        ) or (is_last and segment.length < min_chars)

        if should_merge:
            current = Segment(current.start, segment.end)
        else:
            merged.append(current)
            current = segment

    if current is not None:
        if current.length < min_chars and merged:
            previous = merged[-1]
            if previous.length + current.length <= max_chars * FINAL_MERGE_SLACK:
                merged[-1] = Segment(previous.start, current.end)
            else:
                merged.append(current)
        else:
            merged.append(current)

    return snap_to_fences(merged, fences)


def snap_to_fences(segments: Sequence[Segment], fences: Sequence[CodeFence]) -> List[Segment]:
    """Push boundaries inside non-breakable fences to the fence end, keeping order."""
    snapped: List[Segment] = []
    previous_end: Optional[int] = None

    for segment in segments:
        start, end = segment

        for fence in fences:
            if fence.start < end < fence.end and not fence.breakable:
                end = fence.end
                break

        for fence in fences:
            if fence.start < start < fence.end and not fence.breakable:
                start = fence.end
                break

        if previous_end is not None and start < previous_end:
            start = previous_end

        if start < end:
            snapped.append(Segment(start, end))
            previous_end = end

    return snapped
