"""Helpers around the chunker for loaders and persistence collaborators."""

from .content_hash import compute_content_hash
from .records import build_chunk_records, load_markdown
from .sync import ChunkSyncPlan, plan_chunk_sync

__all__ = [
    "ChunkSyncPlan",
    "build_chunk_records",
    "compute_content_hash",
    "load_markdown",
    "plan_chunk_sync",
]
