"""Chunk records as handed to the persistence layer."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..chunking.models import Chunk
from .content_hash import compute_content_hash


def load_markdown(path: Union[str, Path]) -> str:
    """Read a Markdown document as UTF-8 text."""
    return Path(path).read_text(encoding="utf-8")


def build_chunk_records(
    chunks: Sequence[Chunk], source: str = "", page_name: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Serialize chunks into flat records keyed by ``uniqueId``.

    Args:
        chunks: Output of ``split_markdown``
        source: Source system or corpus name recorded on every record
        page_name: Optional document name recorded on every record

    Returns:
        One dict per chunk with the chunk fields, ``contentHash`` and ``source``
    """
    records = []
    for chunk in chunks:
        record = chunk.to_dict()
        record["contentHash"] = compute_content_hash(chunk.content)
        record["source"] = source
        if page_name is not None:
            record["name"] = page_name
        records.append(record)
    return records
