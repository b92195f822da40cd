"""
Recursive Markdown chunking.

This package splits Markdown into retrieval-sized chunks with:
- Structural tokenization (headers, code fences, Sources blocks)
- Layered splitting (headers, paragraphs, lines) under a character cap
- Bottom-end glue pass with a bounded relaxation for tiny tails
- Backward overlap that never starts inside a protected code fence
- Titles, header paths, stable ids and source links per chunk
- Reconstruction and coverage verification
"""

from .assembler import assemble_chunks
from .boundaries import normalize_text
from .engine import MarkdownSplitter, split_markdown
from .merger import FINAL_MERGE_SLACK, merge_small_segments, snap_to_fences
from .metadata import ROOT_TITLE, attach_metadata, resolve_source_link, slugify
from .models import (
    Chunk,
    CodeFence,
    HeaderToken,
    RawChunk,
    Segment,
    SourceRange,
    Tokens,
)
from .planner import plan_segments, split_by_headers, split_by_lines, split_by_paragraphs
from .tokens import find_code_fences, find_headers, parse_source_ranges, tokenize
from .verify import calculate_coverage, reconstruct_text, verify_chunks

__all__ = [
    "Chunk",
    "CodeFence",
    "FINAL_MERGE_SLACK",
    "HeaderToken",
    "MarkdownSplitter",
    "ROOT_TITLE",
    "RawChunk",
    "Segment",
    "SourceRange",
    "Tokens",
    "assemble_chunks",
    "attach_metadata",
    "calculate_coverage",
    "find_code_fences",
    "find_headers",
    "merge_small_segments",
    "normalize_text",
    "parse_source_ranges",
    "plan_segments",
    "reconstruct_text",
    "resolve_source_link",
    "slugify",
    "snap_to_fences",
    "split_by_headers",
    "split_by_lines",
    "split_by_paragraphs",
    "split_markdown",
    "tokenize",
    "verify_chunks",
]
