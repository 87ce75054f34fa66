"""Tests for commands module (Layer 2b)."""

import pytest

from timeline_studio import commands
from timeline_studio.commands import command_from_dict
from timeline_studio.models import Edge, Kind


def test_begin_drag_from_dict():
    cmd = command_from_dict({"type": "begin_drag", "kind": "sub_segment", "id": "s1", "x": 120})
    assert cmd == commands.BeginDrag(Kind.SUB_SEGMENT, "s1", 120.0)


def test_kind_defaults_to_segment():
    cmd = command_from_dict({"type": "delete", "id": "a"})
    assert cmd == commands.Delete(Kind.SEGMENT, "a")


def test_begin_resize_from_dict():
    cmd = command_from_dict({"type": "begin_resize", "id": "a", "edge": "R"})
    assert cmd == commands.BeginResize(Kind.SEGMENT, "a", Edge.RIGHT)


@pytest.mark.parametrize("data,expected", [
    ({"type": "pointer_move", "x": 10}, commands.PointerMove(10.0)),
    ({"type": "pointer_up"}, commands.PointerUp()),
    ({"type": "add_segment"}, commands.AddSegment(None)),
    ({"type": "add_segment", "title": "Q&A"}, commands.AddSegment("Q&A")),
    ({"type": "add_sub_segments", "parent_id": "a"}, commands.AddSubSegments("a", None)),
    ({"type": "add_sub_segments", "parent_id": "a", "identities": ["p1", 2]},
     commands.AddSubSegments("a", ("p1", "2"))),
    ({"type": "select", "kind": "segment", "id": "a"}, commands.Select(Kind.SEGMENT, "a")),
    ({"type": "zoom", "factor": 1.2}, commands.Zoom(1.2)),
    ({"type": "seek", "x": 300}, commands.Seek(300.0)),
    ({"type": "position", "time": 12.5}, commands.UpdatePosition(12.5, None)),
    ({"type": "position", "time": 12.5, "viewport_width": 800}, commands.UpdatePosition(12.5, 800.0)),
    ({"type": "edit_details", "id": "a", "description": "d"}, commands.EditDetails("a", None, "d")),
    ({"type": "change_category", "category": "analysts"}, commands.ChangeCategory("analysts")),
])
def test_command_types(data, expected):
    assert command_from_dict(data) == expected


def test_unknown_type():
    with pytest.raises(ValueError, match="Unknown command type"):
        command_from_dict({"type": "explode"})


def test_missing_field():
    with pytest.raises(ValueError, match="missing 'x'"):
        command_from_dict({"type": "pointer_move"})


def test_bad_kind_and_edge():
    with pytest.raises(ValueError, match="Unknown kind"):
        command_from_dict({"type": "delete", "kind": "chapter", "id": "a"})
    with pytest.raises(ValueError, match="Unknown edge"):
        command_from_dict({"type": "begin_resize", "id": "a", "edge": "top"})


def test_not_an_object():
    with pytest.raises(ValueError):
        command_from_dict(["pointer_up"])


def test_begin_drag_current_start():
    """A script can pass the item's on-screen start with the drag."""
    cmd = command_from_dict({"type": "begin_drag", "id": "b", "x": 200, "start": 35})
    assert cmd == commands.BeginDrag(Kind.SEGMENT, "b", 200.0, 35.0)
