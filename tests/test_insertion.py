"""Tests for insertion module (Layer 2b)."""

import random
from dataclasses import replace

import pytest

from timeline_studio.constants import NEW_SEGMENT_TITLE
from timeline_studio.editor import initial_state
from timeline_studio.insertion import (
    add_segment,
    add_speakers,
    add_sub_segments,
    delete_segment,
    delete_sub_segment,
    update_segment_details,
)
from timeline_studio.models import CatalogEntry, EditorState, Interaction, Kind, Mode, Selection
from timeline_studio.normalize import find_violations
from conftest import make_segment, make_sub, random_hierarchy


# --- add_segment ---

def test_add_segment_after_last(two_segments):
    state = add_segment(two_segments)
    new = state.segments[-1]
    assert (new.start, new.end) == (120.0, 180.0)
    assert new.title == NEW_SEGMENT_TITLE
    assert state.selection == Selection(Kind.SEGMENT, new.id)


def test_add_segment_empty_timeline():
    state = add_segment(EditorState(), title="Opening")
    seg = state.segments[0]
    assert (seg.start, seg.end) == (0.0, 60.0)
    assert seg.title == "Opening"


def test_add_segment_unique_ids(two_segments):
    state = add_segment(add_segment(two_segments))
    ids = [s.id for s in state.segments]
    assert len(set(ids)) == len(ids)


# --- add_sub_segments ---

def test_add_sub_segments_extends_and_shifts(two_segments, catalog):
    """A[0,60) + three 30s speakers grows to [0,90); B moves to [90,150)."""
    state = add_sub_segments(two_segments, "a", catalog[:3])
    a, b = state.segments
    assert (a.start, a.end) == (0.0, 90.0)
    assert (b.start, b.end) == (90.0, 150.0)
    assert [(s.start, s.end) for s in a.sub_segments] == [(0.0, 30.0), (30.0, 60.0), (60.0, 90.0)]
    assert [s.identity_id for s in a.sub_segments] == ["p1", "p2", "p3"]
    assert a.sub_segments[0].name == "Ada"
    assert find_violations(state.segments) == []


def test_add_sub_segments_fits_without_growth(two_segments, catalog):
    state = add_sub_segments(two_segments, "a", catalog[:1])
    assert state.segments[0].end == 60.0
    assert state.segments[1].start == 60.0


def test_add_sub_segments_after_existing(gapped_segments, catalog):
    """New speakers start after the last existing speaker end."""
    state = add_sub_segments(gapped_segments, "c", catalog[:1])
    new = state.segments[2].sub_segments[-1]
    assert (new.start, new.end) == (70.0, 100.0)
    assert new.order == 2


def test_add_sub_segments_shifts_only_later_segments(gapped_segments, catalog):
    """Segments before the grown one never move."""
    state = add_sub_segments(gapped_segments, "b", catalog[:2])
    a, b, c = state.segments
    assert (a.start, a.end) == (0.0, 20.0)
    assert (b.start, b.end) == (30.0, 90.0)
    assert c.start == 90.0
    # C's speakers travel with it
    assert c.sub_segments[0].start == 90.0
    assert find_violations(state.segments) == []


def test_add_sub_segments_skips_assigned(gapped_segments, catalog):
    state = add_sub_segments(gapped_segments, "a", catalog[:1])
    again = add_sub_segments(state, "a", catalog[:1])
    assert again is state


def test_add_sub_segments_empty_list_is_noop(two_segments):
    assert add_sub_segments(two_segments, "a", []) is two_segments


def test_add_sub_segments_unknown_parent(two_segments, catalog):
    assert add_sub_segments(two_segments, "zzz", catalog) is two_segments


def test_add_speakers_uses_category(two_segments, catalog):
    state = replace(two_segments, catalog=tuple(catalog), category="analysts")
    state = add_speakers(state, "b")
    assert [s.identity_id for s in state.segments[1].sub_segments] == ["p4"]


def test_no_overlap_after_many_insertions(gapped_segments, catalog):
    state = gapped_segments
    for seg_id in ["a", "b", "c", "a"]:
        state = add_sub_segments(state, seg_id, catalog)
    assert find_violations(state.segments) == []


# --- delete ---

def test_delete_segment_leaves_gap(gapped_segments):
    state = delete_segment(gapped_segments, "b")
    assert [s.id for s in state.segments] == ["a", "c"]
    assert state.segments[1].start == 40.0


def test_delete_segment_clears_selection_and_interaction(gapped_segments):
    state = replace(
        gapped_segments,
        selection=Selection(Kind.SUB_SEGMENT, "s1"),
        interaction=Interaction(mode=Mode.DRAG, kind=Kind.SEGMENT, target_id="c"),
    )
    state = delete_segment(state, "c")
    assert state.selection is None
    assert state.interaction is None


def test_delete_sub_segment(gapped_segments):
    state = delete_sub_segment(gapped_segments, "s1")
    c = state.segments[2]
    assert [s.id for s in c.sub_segments] == ["s2"]
    assert (c.start, c.end) == (40.0, 100.0)


def test_delete_unknown_is_noop(gapped_segments):
    assert delete_segment(gapped_segments, "zzz") is gapped_segments
    assert delete_sub_segment(gapped_segments, "zzz") is gapped_segments


# --- update_segment_details ---

def test_update_segment_details(two_segments):
    state = update_segment_details(two_segments, "a", title="Welcome", description="Opening remarks")
    a = state.segments[0]
    assert a.title == "Welcome"
    assert a.description == "Opening remarks"
    assert (a.start, a.end) == (0.0, 60.0)


def test_update_segment_details_partial(two_segments):
    state = update_segment_details(two_segments, "a", description="Only this")
    assert state.segments[0].title == "Chapter a"


# --- Seeded random insertions ---

@pytest.mark.parametrize("seed", range(20))
def test_random_insertions_never_overlap(seed):
    """Adding chapters and speakers anywhere keeps the hierarchy valid."""
    rng = random.Random(seed)
    pool = [CatalogEntry(id=f"p{i}", name=f"Speaker {i}", category_id="executives") for i in range(12)]
    for _ in range(10):
        state = initial_state(random_hierarchy(rng))
        for _ in range(8):
            if not state.segments or rng.random() < 0.15:
                state = add_segment(state)
                continue
            parent = rng.choice(state.segments)
            picks = rng.sample(pool, rng.randint(0, 5))
            state = add_sub_segments(state, parent.id, picks)
            assert find_violations(state.segments) == []
            grown = [s for s in state.segments if s.id == parent.id][0]
            assert grown.end >= parent.end
