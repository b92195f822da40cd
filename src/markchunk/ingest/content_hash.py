"""Content hashing utilities for incremental upserts."""

import hashlib


def compute_content_hash(content: str) -> str:
    """
    Compute the SHA256 hash of chunk content.

    Stored alongside each chunk's unique id so a persistence layer can tell
    changed content from metadata-only changes.

    Args:
        content: Chunk content exactly as stored

    Returns:
        SHA256 hex string
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
