"""Neighbor-aware movement bounds, edge snapping and containment clamps.

Every function here is total: given any hierarchy it returns a position,
never an error. Bounds are recomputed from the other items' current
positions on each call.
"""

from timeline_studio.constants import (
    SEGMENT_MIN_WIDTH,
    SNAP_THRESHOLD_SEC,
    SUB_SEGMENT_MIN_WIDTH,
)
from timeline_studio.models import Segment, SubSegment

# Float slack when comparing a width against its minimum
WIDTH_TOLERANCE = 1e-9


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def snap(value: float, bound: float, threshold: float = SNAP_THRESHOLD_SEC) -> float:
    """Return bound if value lies within threshold of it, else value."""
    if abs(value - bound) <= threshold:
        return bound
    return value


def neighbor_bounds(
    others,
    start: float,
    end: float,
    lower: float,
    upper: float,
) -> tuple[float, float]:
    """(prev_end, next_start) around the interval [start, end].

    prev_end is the latest end among others ending at or before start,
    next_start the earliest start among others beginning at or after end.
    lower/upper are returned when no such neighbor exists.
    """
    prev_end = lower
    next_start = upper
    for o in others:
        if o.end <= start and o.end > prev_end:
            prev_end = o.end
        if o.start >= end and o.start < next_start:
            next_start = o.start
    return prev_end, next_start


def min_segment_width(segment: Segment) -> float:
    """Narrowest a segment may get while still holding its sub-segments."""
    return max(SEGMENT_MIN_WIDTH, len(segment.sub_segments) * SUB_SEGMENT_MIN_WIDTH)


def _others(items, item_id):
    return [o for o in items if o.id != item_id]


def segment_neighbors(segments, segment: Segment, total: float) -> tuple[float, float]:
    """(prev_end, next_start) among the other segments, within [0, total]."""
    return neighbor_bounds(
        _others(segments, segment.id), segment.start, segment.end, 0.0, total,
    )


def sub_segment_neighbors(parent: Segment, sub: SubSegment) -> tuple[float, float]:
    """(prev_end, next_start) among siblings, within the parent."""
    prev_end, next_start = neighbor_bounds(
        _others(parent.sub_segments, sub.id), sub.start, sub.end, parent.start, parent.end,
    )
    return max(prev_end, parent.start), min(next_start, parent.end)


def segment_move_bounds(segments, segment: Segment, total: float) -> tuple[float, float]:
    """[min_start, max_start] for dragging a segment."""
    prev_end, next_start = segment_neighbors(segments, segment, total)
    return prev_end, max(prev_end, next_start - segment.width)


def sub_segment_move_bounds(parent: Segment, sub: SubSegment) -> tuple[float, float]:
    """[min_start, max_start] for dragging a sub-segment among its siblings."""
    prev_end, next_start = sub_segment_neighbors(parent, sub)
    return prev_end, max(prev_end, next_start - sub.width)


def resolve_move(proposed: float, bounds: tuple[float, float]) -> float:
    """Snap a proposed start to either bound, then clamp into them."""
    min_start, max_start = bounds
    proposed = snap(proposed, min_start)
    proposed = snap(proposed, max_start)
    return clamp(proposed, min_start, max_start)


def segment_resize_left_bounds(segments, segment: Segment, total: float) -> tuple[float, float]:
    """[lower, upper] for a segment's new start."""
    prev_end, _ = segment_neighbors(segments, segment, total)
    return prev_end, max(prev_end, segment.end - min_segment_width(segment))


def segment_resize_right_bounds(segments, segment: Segment, total: float) -> tuple[float, float]:
    """[lower, upper] for a segment's new end."""
    _, next_start = segment_neighbors(segments, segment, total)
    # A minimum-width item touching its neighbor must not round past it
    lower = min(segment.start + min_segment_width(segment), next_start)
    return lower, max(lower, next_start)


def sub_segment_resize_left_bounds(parent: Segment, sub: SubSegment) -> tuple[float, float]:
    prev_end, _ = sub_segment_neighbors(parent, sub)
    return prev_end, max(prev_end, sub.end - SUB_SEGMENT_MIN_WIDTH)


def sub_segment_resize_right_bounds(parent: Segment, sub: SubSegment) -> tuple[float, float]:
    _, next_start = sub_segment_neighbors(parent, sub)
    lower = min(sub.start + SUB_SEGMENT_MIN_WIDTH, next_start)
    return lower, max(lower, next_start)


def resolve_resize_left(proposed: float, bounds: tuple[float, float]) -> float:
    """Clamp a proposed start, snapping onto the left neighbor's end."""
    lower, upper = bounds
    return snap(clamp(proposed, lower, upper), lower)


def resolve_resize_right(proposed: float, bounds: tuple[float, float]) -> float:
    """Clamp a proposed end, snapping onto the right neighbor's start."""
    lower, upper = bounds
    return snap(clamp(proposed, lower, upper), upper)


def fit_children(children, start: float, end: float, min_width: float = SUB_SEGMENT_MIN_WIDTH) -> tuple[SubSegment, ...]:
    """Squeeze start-ordered sub-segments into [start, end] without overlap.

    A backward pass pulls items left of end (and of their right neighbor),
    a forward pass pushes them right of start (and of their left neighbor).
    Requires end - start >= len(children) * min_width.
    Items already in place come back unchanged.
    """
    subs = list(children)

    limit = end
    for i in reversed(range(len(subs))):
        s = subs[i]
        new_end = min(s.end, limit)
        new_start = s.start
        if new_end - new_start < min_width - WIDTH_TOLERANCE:
            new_start = new_end - min_width
        if (new_start, new_end) != (s.start, s.end):
            subs[i] = s.moved_to(new_start, new_end)
        limit = subs[i].start

    limit = start
    for i, s in enumerate(subs):
        new_start = max(s.start, limit)
        new_end = s.end
        if new_end - new_start < min_width - WIDTH_TOLERANCE:
            new_end = min(new_start + min_width, end)
        if (new_start, new_end) != (s.start, s.end):
            subs[i] = s.moved_to(new_start, new_end)
        limit = subs[i].end

    return tuple(subs)


def place(start: float, width: float, limit: float) -> float:
    """End of an item of the given width placed at start.

    An end past limit by no more than float rounding is pulled back onto
    limit, so an item snapped against its right neighbor touches it exactly.
    """
    end = start + width
    if limit < end <= limit + WIDTH_TOLERANCE:
        return limit
    return end
