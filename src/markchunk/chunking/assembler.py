"""
Turn final segments into raw chunks with backward overlap.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.models import SplitOptions
from .boundaries import protected_fence
from .models import CodeFence, RawChunk, Segment


def overlap_start_for(
    previous: Segment, overlap: int, fences: Sequence[CodeFence]
) -> int:
    """Where a chunk following ``previous`` should begin to carry ``overlap`` chars back."""
    desired = max(previous.end - min(overlap, previous.length), previous.start)
    fence = protected_fence(desired, fences)
    if fence is not None:
        return fence.end
    return desired


def assemble_chunks(
    segments: Sequence[Segment],
    text: str,
    options: SplitOptions,
    fences: Sequence[CodeFence],
) -> List[RawChunk]:
    """
    Slice ``text`` into raw chunks, prepending overlap from the previous segment.

    ``overlap_start`` marks where each chunk's own share of the text begins, so
    the source can be rebuilt from ``text[overlap_start:end]``. For later chunks
    that is their segment start. Chunks whose content is blank are dropped and
    their text is handed to the next emitted chunk, which then records the
    dropped segment's start (the first chunk included). Blank text after the
    last emitted chunk extends that chunk's end. Trimming touches only
    ``content``; offsets always describe the untrimmed slice.
    """
    chunks: List[RawChunk] = []
    dropped_from: Optional[int] = None  # start of blank text not yet owned by a chunk

    for i, segment in enumerate(segments):
        start = segment.start
        if i > 0 and options.overlap > 0:
            start = overlap_start_for(segments[i - 1], options.overlap, fences)

        content = text[start : segment.end]
        if not content.strip():
            if dropped_from is None:
                dropped_from = segment.start
            continue

        boundary = segment.start if i > 0 else None
        if dropped_from is not None:
            boundary = dropped_from
            dropped_from = None

        chunks.append(
            RawChunk(
                content=_shape(content, options),
                start=start,
                end=segment.end,
                overlap_start=boundary,
            )
        )

    if dropped_from is not None and chunks:
        last = chunks[-1]
        end = segments[-1].end
        chunks[-1] = last._replace(content=_shape(text[last.start : end], options), end=end)

    return chunks


def _shape(content: str, options: SplitOptions) -> str:
    return content.strip() if options.trim else content
