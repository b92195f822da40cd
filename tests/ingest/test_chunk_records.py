"""Tests for chunk records, content hashing and incremental sync planning."""

import hashlib

import pytest
from structlog.testing import capture_logs

from markchunk import split_markdown
from markchunk.ingest import (
    ChunkSyncPlan,
    build_chunk_records,
    compute_content_hash,
    load_markdown,
    plan_chunk_sync,
)

pytestmark = pytest.mark.unit


def test_content_hash_is_sha256_of_utf8():
    assert compute_content_hash("héllo") == hashlib.sha256("héllo".encode("utf-8")).hexdigest()
    assert compute_content_hash("a") != compute_content_hash("b")


def test_records_carry_hash_source_and_name():
    chunks = split_markdown("# Intro\n\nHello there.")

    records = build_chunk_records(chunks, source="docs", page_name="intro")

    assert len(records) == 1
    record = records[0]
    assert record["uniqueId"] == "intro-0"
    assert record["contentHash"] == compute_content_hash(record["content"])
    assert record["source"] == "docs"
    assert record["name"] == "intro"
    assert record["headerPath"] == ["Intro"]
    assert "sourceLink" not in record


def test_records_without_page_name():
    records = build_chunk_records(split_markdown("text"), source="docs")

    assert "name" not in records[0]


def test_load_markdown_reads_utf8(tmp_path):
    path = tmp_path / "page.md"
    path.write_text("# Über\n", encoding="utf-8")

    assert load_markdown(path) == "# Über\n"
    assert load_markdown(str(path)) == "# Über\n"


class TestPlanChunkSync:
    def _record(self, uid, content, title="T"):
        return {
            "uniqueId": uid,
            "content": content,
            "contentHash": compute_content_hash(content),
            "title": title,
        }

    def test_classifies_changes(self):
        stored = [
            self._record("a", "alpha"),
            self._record("b", "beta"),
            self._record("c", "gamma"),
        ]
        fresh = [
            self._record("a", "alpha", title="Renamed"),
            self._record("b", "beta v2"),
            self._record("d", "delta"),
        ]

        with capture_logs() as logs:
            plan = plan_chunk_sync(fresh, stored)

        assert [r["uniqueId"] for r in plan.content_changed] == ["b", "d"]
        assert [r["uniqueId"] for r in plan.metadata_only_changed] == ["a"]
        assert plan.to_remove == ["c"]
        assert not plan.is_empty
        assert logs[-1]["event"] == "chunk.sync.plan"
        assert logs[-1]["removed"] == 1

    def test_identical_sets_need_nothing(self):
        records = [self._record("a", "alpha"), self._record("b", "beta")]

        plan = plan_chunk_sync(records, [dict(r) for r in records])

        assert plan == ChunkSyncPlan([], [], [])
        assert plan.is_empty

    def test_first_sync_embeds_everything(self):
        fresh = build_chunk_records(split_markdown("# A\n\none\n\n# B\n\ntwo", max_chars=10, min_chars=0, overlap=0))

        plan = plan_chunk_sync(fresh, [])

        assert len(plan.content_changed) == len(fresh)
        assert plan.to_remove == []
