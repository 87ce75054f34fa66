"""Shared fixtures for timeline studio tests."""

import json

import pytest

from timeline_studio.catalog import category_id
from timeline_studio.models import CatalogEntry, EditorState, Segment, SubSegment


def make_sub(sub_id, parent_id, start, end, identity_id=""):
    return SubSegment(
        id=sub_id,
        parent_id=parent_id,
        start=start,
        end=end,
        name=sub_id.upper(),
        identity_id=identity_id or sub_id,
    )


def make_segment(seg_id, start, end, subs=()):
    return Segment(id=seg_id, start=start, end=end, title=f"Chapter {seg_id}", sub_segments=tuple(subs))


def random_hierarchy(rng, max_segments=6, max_subs=5):
    """Unsorted, overlapping, badly sized chapters and speakers from a seeded Random."""
    segments = []
    for i in range(rng.randint(0, max_segments)):
        start = rng.uniform(0.0, 400.0)
        end = start + rng.choice([0.0, rng.uniform(0.0, 2.0), rng.uniform(0.0, 120.0)])
        subs = []
        for j in range(rng.randint(0, max_subs)):
            sub_start = rng.uniform(start - 20.0, end + 20.0)
            sub_end = sub_start + rng.choice([0.0, 0.1, rng.uniform(0.0, 40.0)])
            subs.append(make_sub(f"s{i}_{j}", f"seg{i}", sub_start, sub_end))
        segments.append(make_segment(f"seg{i}", start, end, subs))
    return segments


@pytest.fixture
def two_segments():
    """A[0,60) and B[60,120), no speakers."""
    return EditorState(segments=(make_segment("a", 0.0, 60.0), make_segment("b", 60.0, 120.0)))


@pytest.fixture
def gapped_segments():
    """A[0,20), B[30,40), C[40,100) with two speakers in C."""
    subs = (make_sub("s1", "c", 40.0, 50.0), make_sub("s2", "c", 60.0, 70.0))
    return EditorState(segments=(
        make_segment("a", 0.0, 20.0),
        make_segment("b", 30.0, 40.0),
        make_segment("c", 40.0, 100.0, subs),
    ))


@pytest.fixture
def catalog():
    """Three executives and one analyst."""
    execs = category_id("executives")
    return [
        CatalogEntry(id="p1", name="Ada", title="CEO", category_id=execs),
        CatalogEntry(id="p2", name="Brian", title="CFO", category_id=execs),
        CatalogEntry(id="p3", name="Chen", title="COO", category_id=execs),
        CatalogEntry(id="p4", name="Dana", title="Analyst", category_id=category_id("analysts")),
    ]


@pytest.fixture
def chapters_payload():
    """Ingested payload with an overlap between the two chapters."""
    return {
        "id": "m1",
        "title": "Q3 Earnings Call",
        "chapters": [
            {"id": "c1", "title": "Intro", "in_time": "0:00", "out_time": "0:50", "order": 0},
            {"id": "c2", "title": "Results", "in_time": "0:40", "out_time": "1:40", "order": 1},
        ],
        "speakers": [
            {"id": "sp1", "parent_chapter_id": "c1", "name": "Ada", "identity_id": "p1",
             "in_time": "0:05", "out_time": "0:20", "category_id": "executives"},
            {"id": "sp2", "parent_chapter_id": "c2", "name": "Brian", "identity_id": "p2",
             "in_time": 45, "out_time": 70, "category_id": "executives"},
            {"id": "sp3", "parent_chapter_id": "missing", "name": "Ghost",
             "in_time": 0, "out_time": 5},
        ],
    }


@pytest.fixture
def chapters_file(tmp_path, chapters_payload):
    path = tmp_path / "Earnings Call.json"
    path.write_text(json.dumps(chapters_payload))
    return path


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([
        {"id": "p1", "name": "Ada", "title": "CEO", "category_id": "executives"},
        {"id": "p2", "name": "Brian", "title": "CFO", "category_id": "executives"},
        {"id": "p4", "name": "Dana", "title": "Analyst", "category_id": "analysts"},
    ]))
    return path
