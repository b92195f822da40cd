"""Tests for chunk assembly with backward overlap."""

import pytest

from markchunk.chunking.assembler import assemble_chunks, overlap_start_for
from markchunk.chunking.models import CodeFence, Segment
from markchunk.core.models import SplitOptions

pytestmark = pytest.mark.unit

TEXT = "a" * 10 + "b" * 10


def test_first_chunk_has_no_overlap():
    options = SplitOptions(max_chars=100, min_chars=0, overlap=4)
    chunks = assemble_chunks([Segment(0, 10), Segment(10, 20)], TEXT, options, [])

    assert chunks[0].content == "a" * 10
    assert chunks[0].start == 0
    assert chunks[0].overlap_start is None


def test_later_chunks_carry_overlap():
    options = SplitOptions(max_chars=100, min_chars=0, overlap=4)
    chunks = assemble_chunks([Segment(0, 10), Segment(10, 20)], TEXT, options, [])

    assert chunks[1].content == "aaaa" + "b" * 10
    assert (chunks[1].start, chunks[1].end) == (6, 20)
    assert chunks[1].overlap_start == 10


def test_overlap_is_capped_by_previous_segment():
    options = SplitOptions(max_chars=100, min_chars=0, overlap=50)

    assert overlap_start_for(Segment(5, 10), options.overlap, []) == 5


def test_overlap_never_starts_inside_a_protected_fence():
    fences = [CodeFence(4, 8, "`", 3, closed=True, breakable=False)]
    options = SplitOptions(max_chars=100, min_chars=0, overlap=4)

    chunks = assemble_chunks([Segment(0, 10), Segment(10, 20)], TEXT, options, fences)

    assert chunks[1].start == 8
    assert chunks[1].content == TEXT[8:20]


def test_zero_overlap_starts_at_segment():
    options = SplitOptions(max_chars=100, min_chars=0, overlap=0)
    chunks = assemble_chunks([Segment(0, 10), Segment(10, 20)], TEXT, options, [])

    assert chunks[1].start == 10
    assert chunks[1].content == "b" * 10


def test_blank_chunks_are_dropped():
    text = "aaa\n\n   \n"
    options = SplitOptions(max_chars=100, min_chars=0, overlap=0)

    chunks = assemble_chunks([Segment(0, 4), Segment(4, 9)], text, options, [])

    assert [c.content for c in chunks] == ["aaa"]


def test_trim_only_touches_content():
    text = "\n\nbody\n\n"
    trimmed = assemble_chunks(
        [Segment(0, len(text))], text, SplitOptions(max_chars=100, min_chars=0, overlap=0), []
    )
    raw = assemble_chunks(
        [Segment(0, len(text))],
        text,
        SplitOptions(max_chars=100, min_chars=0, overlap=0, trim=False),
        [],
    )

    assert trimmed[0].content == "body"
    assert raw[0].content == text
    assert (trimmed[0].start, trimmed[0].end) == (raw[0].start, raw[0].end) == (0, len(text))


class TestDroppedBlankSegments:
    """Text of a dropped blank segment stays owned by a neighbouring chunk."""

    OPTIONS = SplitOptions(max_chars=100, min_chars=0, overlap=0, trim=False)

    def test_leading_blank_is_owned_by_first_chunk(self):
        text = "   \n\nbody"
        chunks = assemble_chunks([Segment(0, 5), Segment(5, 9)], text, self.OPTIONS, [])

        assert len(chunks) == 1
        assert (chunks[0].start, chunks[0].end) == (5, 9)
        assert chunks[0].overlap_start == 0

    def test_middle_blank_is_owned_by_next_chunk(self):
        text = "one\n" + "\n" * 6 + "two\n"
        segments = [Segment(0, 4), Segment(4, 10), Segment(10, 14)]

        chunks = assemble_chunks(segments, text, self.OPTIONS, [])

        assert [c.content for c in chunks] == ["one\n", "two\n"]
        assert chunks[1].start == 10
        assert chunks[1].overlap_start == 4

    def test_trailing_blank_extends_last_chunk(self):
        text = "one\n" + " " * 6
        chunks = assemble_chunks([Segment(0, 4), Segment(4, 10)], text, self.OPTIONS, [])

        assert len(chunks) == 1
        assert chunks[0].end == 10
        assert chunks[0].content == text
