"""Pointer-driven move/resize state machine and the command dispatcher.

One interaction at a time: Idle -> Dragging -> Idle or Idle -> Resizing
-> Idle. Starting a new drag or resize while one is active cancels the old
one and replaces it. Every pointer move recomputes bounds from the other
items' current positions, so each intermediate state keeps chapters
apart, speakers inside their chapter and speakers apart.
"""

import logging
from dataclasses import replace

from timeline_studio import commands
from timeline_studio.bounds import (
    fit_children,
    place,
    resolve_move,
    resolve_resize_left,
    resolve_resize_right,
    segment_move_bounds,
    segment_neighbors,
    segment_resize_left_bounds,
    segment_resize_right_bounds,
    sub_segment_move_bounds,
    sub_segment_neighbors,
    sub_segment_resize_left_bounds,
    sub_segment_resize_right_bounds,
)
from timeline_studio.catalog import category_id, change_category
from timeline_studio.constants import DEFAULT_CATEGORY, DEFAULT_DURATION_SEC, OVERLAP_WARNING
from timeline_studio.insertion import (
    add_segment,
    add_speakers,
    add_sub_segments,
    delete_segment,
    delete_sub_segment,
    update_segment_details,
)
from timeline_studio.models import (
    Edge,
    EditorState,
    Interaction,
    Kind,
    Mode,
    Segment,
    Selection,
    find_segment,
    find_sub_segment,
    replace_segment,
)
from timeline_studio.normalize import normalize_segments
from timeline_studio.view import (
    seek,
    state_duration,
    to_pixels,
    to_seconds,
    update_position,
    zoom,
)

logger = logging.getLogger(__name__)


def _locate(state: EditorState, kind: Kind, target_id: str):
    """(item, parent id) for a segment or sub-segment, or (None, "")."""
    if kind == Kind.SEGMENT:
        return find_segment(state, target_id), ""
    found = find_sub_segment(state, target_id)
    if found is None:
        return None, ""
    parent, sub = found
    return sub, parent.id


def _start_interaction(state: EditorState, interaction: Interaction) -> EditorState:
    if state.interaction is not None:
        logger.debug("Cancelling %s of %s", state.interaction.mode.value, state.interaction.target_id)
    return replace(state, interaction=interaction)


def begin_drag(
    state: EditorState,
    kind: Kind,
    target_id: str,
    pointer_x: float,
    current_start: float | None = None,
) -> EditorState:
    """Start dragging; the pointer keeps its offset from the item's start."""
    item, parent_id = _locate(state, kind, target_id)
    if item is None:
        logger.debug("begin_drag: unknown %s %s", kind.value, target_id)
        return state
    start = item.start if current_start is None else current_start
    return _start_interaction(state, Interaction(
        mode=Mode.DRAG,
        kind=kind,
        target_id=target_id,
        parent_id=parent_id,
        pointer_offset=pointer_x - to_pixels(start, state.scale),
    ))


def begin_resize(state: EditorState, kind: Kind, target_id: str, edge: Edge) -> EditorState:
    item, parent_id = _locate(state, kind, target_id)
    if item is None:
        logger.debug("begin_resize: unknown %s %s", kind.value, target_id)
        return state
    return _start_interaction(state, Interaction(
        mode=Mode.RESIZE,
        kind=kind,
        target_id=target_id,
        parent_id=parent_id,
        edge=edge,
    ))


def _reframe(segment: Segment, start: float, end: float, delta: float) -> Segment:
    """Give a segment new bounds, carrying its sub-segments along by delta.

    The translated sub-segments are then re-clamped into [start, end].
    """
    carried = sorted(
        (s.moved_to(s.start + delta, s.end + delta) if delta else s for s in segment.sub_segments),
        key=lambda s: s.start,
    )
    return replace(
        segment,
        start=start,
        end=end,
        sub_segments=fit_children(carried, start, end),
    )


def _move_segment(state: EditorState, segment: Segment, t: float) -> Segment:
    total = state_duration(state)
    start = resolve_move(t, segment_move_bounds(state.segments, segment, total))
    _, next_start = segment_neighbors(state.segments, segment, total)
    end = place(start, segment.width, next_start)
    return _reframe(segment, start, end, start - segment.start)


def _resize_segment(state: EditorState, segment: Segment, edge: Edge, t: float) -> Segment:
    total = state_duration(state)
    if edge == Edge.LEFT:
        start = resolve_resize_left(t, segment_resize_left_bounds(state.segments, segment, total))
        return _reframe(segment, start, segment.end, start - segment.start)
    end = resolve_resize_right(t, segment_resize_right_bounds(state.segments, segment, total))
    return _reframe(segment, segment.start, end, 0.0)


def _edit_sub_segment(parent: Segment, sub, interaction: Interaction, t: float) -> Segment:
    if interaction.mode == Mode.DRAG:
        start = resolve_move(t, sub_segment_move_bounds(parent, sub))
        _, next_start = sub_segment_neighbors(parent, sub)
        moved = sub.moved_to(start, place(start, sub.width, next_start))
    elif interaction.edge == Edge.LEFT:
        start = resolve_resize_left(t, sub_segment_resize_left_bounds(parent, sub))
        moved = sub.moved_to(start, sub.end)
    else:
        end = resolve_resize_right(t, sub_segment_resize_right_bounds(parent, sub))
        moved = sub.moved_to(sub.start, end)
    return replace(
        parent,
        sub_segments=tuple(moved if s.id == sub.id else s for s in parent.sub_segments),
    )


def on_pointer_move(state: EditorState, pointer_x: float) -> EditorState:
    """Apply the active interaction for a new pointer position."""
    interaction = state.interaction
    if interaction is None:
        return state

    if interaction.mode == Mode.DRAG:
        t = to_seconds(pointer_x - interaction.pointer_offset, state.scale)
    else:
        t = to_seconds(pointer_x, state.scale)

    if interaction.kind == Kind.SEGMENT:
        segment = find_segment(state, interaction.target_id)
        if segment is None:
            return state
        if interaction.mode == Mode.DRAG:
            updated = _move_segment(state, segment, t)
        else:
            updated = _resize_segment(state, segment, interaction.edge, t)
        return replace_segment(state, updated)

    found = find_sub_segment(state, interaction.target_id)
    if found is None:
        return state
    parent, sub = found
    return replace_segment(state, _edit_sub_segment(parent, sub, interaction, t))


def on_pointer_up(state: EditorState) -> EditorState:
    if state.interaction is None:
        return state
    return replace(state, interaction=None)


def _delete(state: EditorState, kind: Kind, target_id: str) -> EditorState:
    if kind == Kind.SEGMENT:
        return delete_segment(state, target_id)
    return delete_sub_segment(state, target_id)


def _select(state: EditorState, kind: Kind, target_id: str) -> EditorState:
    item, _ = _locate(state, kind, target_id)
    if item is None:
        return state
    return replace(state, selection=Selection(kind, target_id))


def _add_sub_segments(state: EditorState, cmd: commands.AddSubSegments) -> EditorState:
    if cmd.identity_ids is None:
        return add_speakers(state, cmd.parent_id)
    by_id = {e.id: e for e in state.catalog}
    picks = [by_id[i] for i in cmd.identity_ids if i in by_id]
    return add_sub_segments(state, cmd.parent_id, picks)


_HANDLERS = {
    commands.BeginDrag: lambda s, c: begin_drag(s, c.kind, c.target_id, c.pointer_x, c.current_start),
    commands.BeginResize: lambda s, c: begin_resize(s, c.kind, c.target_id, c.edge),
    commands.PointerMove: lambda s, c: on_pointer_move(s, c.pointer_x),
    commands.PointerUp: lambda s, c: on_pointer_up(s),
    commands.AddSegment: lambda s, c: add_segment(s, c.title),
    commands.AddSubSegments: _add_sub_segments,
    commands.Delete: lambda s, c: _delete(s, c.kind, c.target_id),
    commands.Select: lambda s, c: _select(s, c.kind, c.target_id),
    commands.Zoom: lambda s, c: replace(s, scale=zoom(s.scale, c.factor)),
    commands.Seek: lambda s, c: seek(s, c.pointer_x),
    commands.UpdatePosition: lambda s, c: update_position(s, c.time, c.viewport_width),
    commands.EditDetails: lambda s, c: update_segment_details(s, c.segment_id, c.title, c.description),
    commands.ChangeCategory: lambda s, c: change_category(s, c.category),
}


def apply_command(state: EditorState, command) -> EditorState:
    """The single state transition: apply one command, return the new state."""
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unsupported command: {command!r}")
    return handler(state, command)


def apply_commands(state: EditorState, command_list) -> EditorState:
    for command in command_list:
        state = apply_command(state, command)
    return state


def initial_state(
    raw_segments,
    catalog=(),
    duration_sec: float = DEFAULT_DURATION_SEC,
    category=DEFAULT_CATEGORY,
) -> EditorState:
    """Normalize an ingested hierarchy and open an editor on it."""
    segments, corrected = normalize_segments(raw_segments)
    return EditorState(
        segments=tuple(segments),
        duration_sec=duration_sec,
        category=category_id(category),
        catalog=tuple(catalog),
        overlap_warning=OVERLAP_WARNING if corrected else None,
    )
