"""Add and delete chapters and speakers, growing chapters when needed."""

import logging
import uuid
from dataclasses import replace

from timeline_studio.catalog import eligible_entries
from timeline_studio.constants import (
    NEW_SEGMENT_DURATION,
    NEW_SEGMENT_TITLE,
    SUB_SEGMENT_DURATION,
)
from timeline_studio.models import (
    EditorState,
    Kind,
    Segment,
    Selection,
    SubSegment,
    find_segment,
    find_sub_segment,
    replace_segment,
    sort_segments,
)
from timeline_studio.view import state_duration

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def add_segment(state: EditorState, title: str | None = None) -> EditorState:
    """Append a NEW_SEGMENT_DURATION chapter after the last one.

    It starts at the latest existing end (or 0), so it never overlaps.
    The new chapter becomes the selection.
    """
    start = max((s.end for s in state.segments), default=0.0)
    segment = Segment(
        id=_new_id(),
        start=start,
        end=start + NEW_SEGMENT_DURATION,
        title=title or NEW_SEGMENT_TITLE,
    )
    return replace(
        state,
        segments=sort_segments(state.segments + (segment,)),
        selection=Selection(Kind.SEGMENT, segment.id),
    )


def _cascade_shift(segments, parent_id: str, old_end: float, extension: float, total: float):
    """Shift every segment starting at or after the next segment's start.

    The next segment is the earliest other one starting at or after the
    parent's pre-extension end (total when there is none).
    """
    after = [s.start for s in segments if s.id != parent_id and s.start >= old_end]
    next_start = min(after) if after else total
    shifted = []
    for seg in segments:
        if seg.id != parent_id and seg.start >= next_start:
            seg = seg.shifted(extension)
        shifted.append(seg)
    return shifted, next_start


def add_sub_segments(state: EditorState, parent_id: str, identities) -> EditorState:
    """Place catalog identities back to back at the end of a chapter.

    Each speaker lasts SUB_SEGMENT_DURATION and starts where the previous
    one ended, beginning at the later of the chapter start and the last
    existing speaker end. Identities already in the chapter are skipped;
    if none remain the state is returned unchanged.

    When the speakers run past the chapter end, the chapter grows by the
    overflow and every chapter from the next one onward shifts by the same
    amount, so no overlap appears.
    """
    parent = find_segment(state, parent_id)
    if parent is None:
        logger.debug("add_sub_segments: unknown segment %s", parent_id)
        return state

    assigned = {s.identity_id for s in parent.sub_segments}
    picks = []
    for entry in identities:
        if entry.id in assigned:
            continue
        assigned.add(entry.id)
        picks.append(entry)
    if not picks:
        return state

    cursor = max([parent.start] + [s.end for s in parent.sub_segments])
    order = len(parent.sub_segments)
    new_subs = []
    for entry in picks:
        new_subs.append(SubSegment(
            id=_new_id(),
            parent_id=parent.id,
            start=cursor,
            end=cursor + SUB_SEGMENT_DURATION,
            name=entry.name,
            title=entry.title,
            avatar_url=entry.avatar_url,
            order=order,
            identity_id=entry.id,
            category_id=entry.category_id,
        ))
        cursor += SUB_SEGMENT_DURATION
        order += 1

    required_end = cursor
    grown = replace(parent, sub_segments=parent.sub_segments + tuple(new_subs))
    if required_end <= parent.end:
        return replace_segment(state, grown)

    extension = required_end - parent.end
    grown = replace(grown, end=required_end)
    others, next_start = _cascade_shift(
        state.segments, parent.id, parent.end, extension, state_duration(state),
    )
    logger.debug(
        "Segment %s grew by %.1fs; shifting segments from %.1fs",
        parent.id, extension, next_start,
    )
    segments = [grown if s.id == parent.id else s for s in others]
    return replace(state, segments=sort_segments(segments))


def add_speakers(state: EditorState, parent_id: str, catalog=None) -> EditorState:
    """Add every eligible speaker of the active category to a chapter."""
    parent = find_segment(state, parent_id)
    if parent is None:
        return state
    entries = state.catalog if catalog is None else catalog
    return add_sub_segments(state, parent_id, eligible_entries(entries, parent, state.category))


def _clear_refs(state: EditorState, removed_ids: set) -> EditorState:
    """Drop selection and interaction pointing at removed items."""
    selection = state.selection
    if selection and selection.id in removed_ids:
        selection = None
    interaction = state.interaction
    if interaction and interaction.target_id in removed_ids:
        interaction = None
    return replace(state, selection=selection, interaction=interaction)


def delete_segment(state: EditorState, segment_id: str) -> EditorState:
    """Remove a chapter and all of its speakers. The gap stays open."""
    segment = find_segment(state, segment_id)
    if segment is None:
        return state
    removed = {segment.id} | {s.id for s in segment.sub_segments}
    state = replace(state, segments=tuple(s for s in state.segments if s.id != segment_id))
    return _clear_refs(state, removed)


def delete_sub_segment(state: EditorState, sub_id: str) -> EditorState:
    found = find_sub_segment(state, sub_id)
    if found is None:
        return state
    parent, _ = found
    parent = replace(parent, sub_segments=tuple(s for s in parent.sub_segments if s.id != sub_id))
    return _clear_refs(replace_segment(state, parent), {sub_id})


def update_segment_details(
    state: EditorState,
    segment_id: str,
    title: str | None = None,
    description: str | None = None,
) -> EditorState:
    """Edit a chapter's title and/or description. Timing is untouched."""
    segment = find_segment(state, segment_id)
    if segment is None:
        return state
    changes = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    return replace_segment(state, replace(segment, **changes))
