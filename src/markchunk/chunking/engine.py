"""
Main chunking engine: recursive Markdown splitting with overlap and metadata.
"""

from __future__ import annotations

from typing import Any, List, Optional

from ..core.logging import log
from ..core.models import SplitOptions
from .assembler import assemble_chunks
from .boundaries import guarded_fences, normalize_text
from .merger import merge_small_segments
from .metadata import attach_metadata
from .models import Chunk, Segment
from .planner import plan_segments
from .tokens import tokenize


def split_markdown(
    text: str, options: Optional[SplitOptions] = None, **overrides: Any
) -> List[Chunk]:
    """
    Split Markdown into retrieval-sized chunks with metadata.

    Pipeline: tokenize -> plan segments -> merge small segments ->
    assemble with overlap -> attach metadata.

    Args:
        text: Markdown document
        options: Validated split options (defaults when omitted)
        **overrides: Option fields to override, e.g. ``max_chars=1024``

    Returns:
        Chunks in document order; empty for blank input

    Raises:
        ConfigurationError: If the options are invalid. Raised before any
            text is processed.
    """
    if options is None:
        options = SplitOptions.build(**overrides)
    elif overrides:
        options = options.with_overrides(**overrides)

    if not text or not text.strip():
        return []

    document = normalize_text(text)
    tokens = tokenize(document, options)
    fences = guarded_fences(tokens.fences, options)

    segments = plan_segments(Segment(0, len(document)), document, tokens, options)
    merged = merge_small_segments(segments, options, fences)
    raw_chunks = assemble_chunks(merged, document, options, fences)
    chunks = attach_metadata(raw_chunks, tokens.headers, tokens.source_ranges, options)

    log.debug(
        "chunk.split.complete",
        chars=len(document),
        headers=len(tokens.headers),
        fences=len(tokens.fences),
        segments=len(segments),
        merged_segments=len(merged),
        chunks=len(chunks),
    )
    return chunks


class MarkdownSplitter:
    """Holds validated options for splitting many documents."""

    def __init__(self, options: Optional[SplitOptions] = None, **overrides: Any):
        if options is None:
            options = SplitOptions.build(**overrides)
        elif overrides:
            options = options.with_overrides(**overrides)
        self.options = options

    def split(self, text: str) -> List[Chunk]:
        return split_markdown(text, self.options)
