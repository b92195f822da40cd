"""
Metadata attachment: titles, header paths, stable ids and source links.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.logging import log
from ..core.models import SplitOptions
from .models import Chunk, HeaderToken, RawChunk, SourceRange

ROOT_TITLE = "ROOT"


def slugify(text: str) -> str:
    """Convert a title to an id/anchor slug."""
    slug = text.lower()
    slug = re.sub(r"[^A-Za-z0-9_\s-]", "", slug)  # ASCII word characters only
    slug = re.sub(r"\s+", "-", slug)  # Replace whitespace with hyphens
    slug = re.sub(r"-+", "-", slug)  # Collapse repeated hyphens
    return slug.strip("-")


def outline_at(position: int, headers: Sequence[HeaderToken]) -> List[HeaderToken]:
    """The nested header stack in effect for content ending at ``position``.

    Headers starting exactly at ``position`` belong to what follows and are excluded.
    """
    stack: List[HeaderToken] = []
    for header in headers:
        if header.start >= position:
            continue
        while stack and stack[-1].level >= header.level:
            stack.pop()
        stack.append(header)
    return stack


def pick_title(stack: Sequence[HeaderToken], header_levels: Sequence[int]) -> str:
    """Deepest header at a configured level, else the deepest header, else ROOT."""
    for header in reversed(stack):
        if header.level in header_levels:
            return header.text
    if stack:
        return stack[-1].text
    return ROOT_TITLE


def resolve_source_link(
    chunk: RawChunk, source_ranges: Sequence[SourceRange]
) -> Optional[str]:
    """
    Pick the source URL for a chunk.

    1. A range containing the chunk's anchor (the later of its start and
       ``overlap_start``)
    2. Otherwise the latest-starting range that starts inside the chunk
    3. Otherwise the latest-starting range overlapping the chunk at all
    """
    if not source_ranges:
        return None

    anchor = chunk.start
    if chunk.overlap_start is not None:
        anchor = max(anchor, chunk.overlap_start)

    for source in source_ranges:
        if source.start <= anchor < source.end:
            return source.url

    starting_inside = [s for s in source_ranges if chunk.start <= s.start < chunk.end]
    if starting_inside:
        return max(starting_inside, key=lambda s: s.start).url

    overlapping = [s for s in source_ranges if s.start < chunk.end and s.end > chunk.start]
    if overlapping:
        return max(overlapping, key=lambda s: s.start).url

    return None


def attach_metadata(
    raw_chunks: Sequence[RawChunk],
    headers: Sequence[HeaderToken],
    source_ranges: Sequence[SourceRange],
    options: SplitOptions,
) -> List[Chunk]:
    """Attach title, header path, per-title numbering, unique id and source link."""
    chunks: List[Chunk] = []
    title_counts: Dict[str, int] = {}
    ordered_headers: Tuple[HeaderToken, ...] = tuple(sorted(headers, key=lambda h: h.start))

    for raw in raw_chunks:
        stack = outline_at(raw.end, ordered_headers)
        title = pick_title(stack, options.header_levels)

        chunk_number = title_counts.get(title, 0)
        title_counts[title] = chunk_number + 1

        slug = slugify(title)
        unique_id = (
            f"{options.id_prefix}-{slug}-{chunk_number}"
            if options.id_prefix
            else f"{slug}-{chunk_number}"
        )

        source_link = resolve_source_link(raw, source_ranges)
        log.debug("chunk.metadata", title=title, unique_id=unique_id, source_link=source_link)

        chunks.append(
            Chunk(
                content=raw.content,
                title=title,
                chunk_number=chunk_number,
                unique_id=unique_id,
                start_char=raw.start,
                end_char=raw.end,
                header_path=[h.text for h in stack],
                source_link=source_link,
                overlap_start=raw.overlap_start,
            )
        )

    return chunks
