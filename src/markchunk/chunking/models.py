"""
Positional types shared by the chunking stages.

Offsets are Python string indices (code points) into the line-ending
normalized document text. Intervals are half-open: ``[start, end)``.
"""

from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional


class HeaderToken(NamedTuple):
    """An ATX header line."""

    level: int
    text: str
    start: int
    end: int


class CodeFence(NamedTuple):
    """A fenced code block. Only breakable fences may be split through."""

    start: int
    end: int
    fence_char: str
    fence_len: int
    closed: bool
    breakable: bool
    info: Optional[str] = None

    @property
    def length(self) -> int:
        return self.end - self.start


class SourceRange(NamedTuple):
    """Span of the document whose citation URL comes from a Sources block."""

    start: int
    end: int
    url: str


class Tokens(NamedTuple):
    headers: List[HeaderToken]
    fences: List[CodeFence]
    source_ranges: List[SourceRange]


class Segment(NamedTuple):
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


class RawChunk(NamedTuple):
    """Assembled chunk before metadata. ``text[overlap_start:end]`` is its own share of the text."""

    content: str
    start: int
    end: int
    overlap_start: Optional[int] = None


class Chunk(NamedTuple):
    """A retrieval-sized chunk with its metadata."""

    content: str
    title: str
    chunk_number: int
    unique_id: str
    start_char: int
    end_char: int
    header_path: List[str]
    source_link: Optional[str] = None
    overlap_start: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape consumed by the persistence layer."""
        data: Dict[str, Any] = {
            "content": self.content,
            "title": self.title,
            "chunkNumber": self.chunk_number,
            "uniqueId": self.unique_id,
            "startChar": self.start_char,
            "endChar": self.end_char,
            "headerPath": list(self.header_path),
        }
        if self.source_link is not None:
            data["sourceLink"] = self.source_link
        if self.overlap_start is not None:
            data["overlapStart"] = self.overlap_start
        return data
