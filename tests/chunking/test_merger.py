"""Tests for the glue pass that coalesces undersized segments."""

import pytest

from markchunk.chunking.merger import FINAL_MERGE_SLACK, merge_small_segments, snap_to_fences
from markchunk.chunking.models import CodeFence, Segment
from markchunk.core.models import SplitOptions

pytestmark = pytest.mark.unit

OPTIONS = SplitOptions(max_chars=100, min_chars=30, overlap=0)


def _fence(start, end, breakable=False):
    return CodeFence(start, end, "`", 3, closed=not breakable, breakable=breakable)


def test_single_segment_is_untouched():
    assert merge_small_segments([Segment(0, 5)], OPTIONS, []) == [Segment(0, 5)]


def test_small_neighbours_coalesce():
    segments = [Segment(0, 10), Segment(10, 20), Segment(20, 30)]

    assert merge_small_segments(segments, OPTIONS, []) == [Segment(0, 30)]


def test_large_neighbours_stay_apart():
    segments = [Segment(0, 50), Segment(50, 100)]

    assert merge_small_segments(segments, OPTIONS, []) == segments


def test_merge_never_exceeds_max_chars_before_the_tail():
    segments = [Segment(0, 20), Segment(20, 100), Segment(100, 150), Segment(150, 200)]

    merged = merge_small_segments(segments, OPTIONS, [])

    assert merged == [Segment(0, 100), Segment(100, 150), Segment(150, 200)]


def test_small_tail_folds_into_previous_within_slack():
    segments = [Segment(0, 95), Segment(95, 105), Segment(105, 110)]

    merged = merge_small_segments(segments, OPTIONS, [])

    assert merged == [Segment(0, 110)]
    assert merged[0].length <= OPTIONS.max_chars * FINAL_MERGE_SLACK


def test_small_tail_stays_separate_beyond_slack():
    segments = [Segment(0, 140), Segment(140, 150), Segment(150, 155)]

    merged = merge_small_segments(segments, OPTIONS, [])

    assert merged == [Segment(0, 140), Segment(140, 155)]


def test_snap_moves_boundaries_out_of_protected_fences():
    fences = [_fence(10, 30)]
    segments = [Segment(0, 20), Segment(20, 40)]

    assert snap_to_fences(segments, fences) == [Segment(0, 30), Segment(30, 40)]


def test_snap_ignores_breakable_fences():
    fences = [_fence(10, 30, breakable=True)]
    segments = [Segment(0, 20), Segment(20, 40)]

    assert snap_to_fences(segments, fences) == segments


def test_snap_drops_segments_swallowed_by_a_fence():
    fences = [_fence(5, 50)]
    segments = [Segment(0, 10), Segment(10, 20), Segment(20, 60)]

    assert snap_to_fences(segments, fences) == [Segment(0, 50), Segment(50, 60)]
