"""
Chunk verification: reconstruction, coverage and policy checks for one document.
"""

import statistics
from collections import Counter
from typing import Dict, List, Sequence, Tuple

from ..core.models import SplitOptions
from .boundaries import guarded_fences, normalize_text, protected_fence
from .models import Chunk
from .tokens import tokenize


def reconstruct_text(chunks: Sequence[Chunk], text: str) -> str:
    """
    Rebuild the source from chunk offsets, skipping overlap.

    Every chunk contributes ``text[overlap_start:end_char]``; a first chunk
    without ``overlap_start`` contributes its whole span. With ``trim`` disabled
    this reproduces the normalized input exactly.
    """
    parts = []
    last_end = 0
    for i, chunk in enumerate(chunks):
        if chunk.overlap_start is not None:
            begin = chunk.overlap_start
        elif i == 0:
            begin = chunk.start_char
        else:
            begin = last_end
        parts.append(text[begin : chunk.end_char])
        last_end = chunk.end_char
    return "".join(parts)


def calculate_coverage(
    chunks: Sequence[Chunk], text_length: int
) -> Tuple[float, List[Tuple[int, int]]]:
    """
    Calculate text coverage from chunks and identify gaps.

    Args:
        chunks: Chunks with start_char/end_char
        text_length: Length of the normalized document text

    Returns:
        Tuple of (coverage_percentage, list_of_gaps)
        where gaps are (start, end) tuples of uncovered ranges
    """
    if text_length == 0:
        return 100.0, []

    covered_ranges = sorted(
        (chunk.start_char, chunk.end_char)
        for chunk in chunks
        if chunk.start_char < chunk.end_char
    )
    if not covered_ranges:
        return 0.0, [(0, text_length)]

    # Merge overlapping ranges
    merged_ranges = []
    current_start, current_end = covered_ranges[0]

    for start, end in covered_ranges[1:]:
        if start <= current_end:  # Overlapping or adjacent
            current_end = max(current_end, end)
        else:
            merged_ranges.append((current_start, current_end))
            current_start, current_end = start, end

    merged_ranges.append((current_start, current_end))

    covered_chars = sum(end - start for start, end in merged_ranges)
    coverage_pct = (covered_chars / text_length) * 100

    # Find gaps
    gaps = []
    last_end = 0

    for start, end in merged_ranges:
        if start > last_end:
            gaps.append((last_end, start))
        last_end = end

    if last_end < text_length:
        gaps.append((last_end, text_length))

    return coverage_pct, gaps


def _percentile(values: List[int], pct: float) -> int:
    ordered = sorted(values)
    index = min(len(ordered) - 1, int(round(pct * (len(ordered) - 1))))
    return ordered[index]


def verify_chunks(text: str, chunks: Sequence[Chunk], options: SplitOptions) -> Dict:
    """
    Verify a document's chunks against the policy they were produced with.

    Checks:
    - chunk spans exceeding max_chars + overlap (only unsplittable content may)
    - non-final chunks shorter than min_chars
    - chunks starting strictly inside a protected code fence
    - duplicate unique ids
    - coverage of the normalized text and, when untrimmed, exact reconstruction

    Returns:
        Report dictionary with a PASS/FAIL ``status``
    """
    document = normalize_text(text)
    fences = guarded_fences(tokenize(document, options).fences, options)

    spans = [chunk.end_char - chunk.start_char for chunk in chunks]
    oversize = [
        {"uniqueId": chunk.unique_id, "span": span}
        for chunk, span in zip(chunks, spans)
        if span > options.max_chars + options.overlap
    ]
    small = [
        {"uniqueId": chunk.unique_id, "chars": len(chunk.content)}
        for chunk in list(chunks)[:-1]
        if len(chunk.content) < options.min_chars
    ]
    fence_violations = []
    for chunk in chunks:
        fence = protected_fence(chunk.start_char, fences)
        if fence is not None:
            fence_violations.append(
                {
                    "uniqueId": chunk.unique_id,
                    "startChar": chunk.start_char,
                    "fence": [fence.start, fence.end],
                }
            )
    duplicates = sorted(
        uid for uid, count in Counter(c.unique_id for c in chunks).items() if count > 1
    )

    coverage_pct, gaps = calculate_coverage(chunks, len(document))
    # Blank chunks are dropped on purpose; only gaps holding text count
    content_gaps = [gap for gap in gaps if document[gap[0] : gap[1]].strip()]

    reconstruction_ok = None
    if not options.trim and chunks:
        reconstruction_ok = reconstruct_text(chunks, document) == document

    char_stats = {"min": 0, "median": 0, "p95": 0, "max": 0}
    if spans:
        char_stats = {
            "min": min(spans),
            "median": int(statistics.median(spans)),
            "p95": _percentile(spans, 0.95),
            "max": max(spans),
        }

    failed = bool(fence_violations or duplicates or content_gaps) or reconstruction_ok is False

    return {
        "chunkCount": len(chunks),
        "charStats": char_stats,
        "oversize": {"count": len(oversize), "examples": oversize[:10]},
        "belowMinChars": {"count": len(small), "examples": small[:10]},
        "fenceViolations": fence_violations,
        "duplicateIds": duplicates,
        "coverage": {"pct": round(coverage_pct, 2), "contentGaps": content_gaps[:10]},
        "reconstructionOk": reconstruction_ok,
        "status": "FAIL" if failed else "PASS",
    }
