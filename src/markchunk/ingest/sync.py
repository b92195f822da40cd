"""
Incremental sync planning between freshly built and previously stored chunks.
"""

from typing import Any, Dict, List, Mapping, NamedTuple, Sequence

from ..core.logging import log

# Keys that never count as metadata: the hash covers content already
_NON_METADATA_KEYS = {"content", "contentHash"}


class ChunkSyncPlan(NamedTuple):
    """What the persistence layer must do to match the fresh chunk set."""

    content_changed: List[Dict[str, Any]]  # new or changed content: re-embed + upsert
    metadata_only_changed: List[Dict[str, Any]]  # same content: update metadata only
    to_remove: List[str]  # stored unique ids absent from the fresh set

    @property
    def is_empty(self) -> bool:
        return not (self.content_changed or self.metadata_only_changed or self.to_remove)


def plan_chunk_sync(
    fresh: Sequence[Mapping[str, Any]], stored: Sequence[Mapping[str, Any]]
) -> ChunkSyncPlan:
    """
    Compare fresh chunk records with stored ones by ``uniqueId``.

    Args:
        fresh: Records from ``build_chunk_records``
        stored: Previously persisted records (same shape)

    Returns:
        ChunkSyncPlan listing content changes, metadata-only changes and removals
    """
    stored_by_id = {record["uniqueId"]: record for record in stored}
    fresh_ids = {record["uniqueId"] for record in fresh}

    content_changed: List[Dict[str, Any]] = []
    metadata_only_changed: List[Dict[str, Any]] = []

    for record in fresh:
        previous = stored_by_id.get(record["uniqueId"])
        if previous is None or previous.get("contentHash") != record.get("contentHash"):
            content_changed.append(dict(record))
            continue

        keys = (set(previous) | set(record)) - _NON_METADATA_KEYS
        if any(previous.get(key) != record.get(key) for key in keys):
            metadata_only_changed.append(dict(record))

    to_remove = [record["uniqueId"] for record in stored if record["uniqueId"] not in fresh_ids]

    log.info(
        "chunk.sync.plan",
        stored=len(stored),
        fresh=len(fresh),
        content_changed=len(content_changed),
        metadata_only_changed=len(metadata_only_changed),
        removed=len(to_remove),
    )
    return ChunkSyncPlan(content_changed, metadata_only_changed, to_remove)
