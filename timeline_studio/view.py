"""Read-only projections for the presentation layer, and the position feed.

Nothing here changes the hierarchy. update_position() and seek() only
touch the playhead and scroll fields of the state.
"""

import math
from dataclasses import replace

import numpy as np

from timeline_studio.bounds import clamp
from timeline_studio.constants import (
    FOLLOW_MARGIN_PX,
    INITIAL_VISIBLE_SEC,
    MAX_SCALE,
    MIN_SCALE,
    TICK_CANDIDATES,
    TICK_MIN_PX,
    VISIBLE_BUFFER_SEC,
)
from timeline_studio.models import EditorState, Segment


def total_duration(segments, fallback: float) -> float:
    """Timeline length: the last segment end, or fallback if that is longer."""
    max_end = max((s.end for s in segments), default=0.0)
    return max(max_end, fallback)


def state_duration(state: EditorState) -> float:
    return total_duration(state.segments, state.duration_sec)


def to_pixels(seconds: float, scale: float) -> float:
    return seconds * scale


def to_seconds(pixels: float, scale: float) -> float:
    return pixels / scale


def zoom(scale: float, factor: float) -> float:
    return clamp(scale * factor, MIN_SCALE, MAX_SCALE)


def tick_step(scale: float) -> int:
    """Smallest candidate step whose ticks are at least TICK_MIN_PX apart."""
    for step in TICK_CANDIDATES:
        if to_pixels(step, scale) >= TICK_MIN_PX:
            return step
    return TICK_CANDIDATES[-1]


def ruler_ticks(start: float, end: float, step: float) -> list[float]:
    """Tick times (multiples of step) covering [start, end]."""
    first = math.floor(start / step) * step
    ticks = np.arange(first, end + step, step, dtype=float)
    return [float(t) for t in ticks if start <= t <= end]


def duration_label(total: float) -> str:
    """Header label like "10h 0m"."""
    return f"{int(total // 3600)}h {int(total // 60) % 60}m"


def visible_range(
    scroll_left: float,
    viewport_width: float | None,
    scale: float,
    total: float,
) -> tuple[float, float]:
    """Time window shown in the viewport, padded by VISIBLE_BUFFER_SEC."""
    if viewport_width is None:
        return 0.0, min(INITIAL_VISIBLE_SEC, total)
    start = to_seconds(scroll_left, scale)
    end = to_seconds(scroll_left + viewport_width, scale)
    return max(0.0, start - VISIBLE_BUFFER_SEC), min(total, end + VISIBLE_BUFFER_SEC)


def _intersects(item, window: tuple[float, float]) -> bool:
    return item.end >= window[0] and item.start <= window[1]


def visible_segments(segments, window: tuple[float, float]) -> list[Segment]:
    return [s for s in segments if _intersects(s, window)]


def visible_sub_segments(segment: Segment, window: tuple[float, float]) -> list:
    return [s for s in segment.sub_segments if _intersects(s, window)]


def is_active_interval(t: float, start: float, end: float) -> bool:
    return start <= t < end


def active_items(state: EditorState) -> tuple[Segment | None, list]:
    """(segment, sub-segments) under the playhead."""
    t = state.current_time
    for seg in state.segments:
        if is_active_interval(t, seg.start, seg.end):
            subs = [s for s in seg.sub_segments if is_active_interval(t, s.start, s.end)]
            return seg, subs
    return None, []


def follow_playhead(
    scroll_left: float,
    viewport_width: float,
    current_time: float,
    scale: float,
    margin: float = FOLLOW_MARGIN_PX,
) -> float:
    """Scroll offset that keeps the playhead margin pixels inside the viewport."""
    x = to_pixels(current_time, scale)
    left = scroll_left
    right = left + viewport_width
    if x > right - margin:
        scroll_left = x - viewport_width + margin
    if x < left + margin:
        scroll_left = max(0.0, x - margin)
    return scroll_left


def update_position(
    state: EditorState,
    t: float,
    viewport_width: float | None = None,
) -> EditorState:
    """Take one reading of the external media clock.

    Last writer wins. With a viewport width the view auto-scrolls to keep
    the playhead in sight.
    """
    current = clamp(t, 0.0, state_duration(state))
    scroll_left = state.scroll_left
    if viewport_width is not None:
        scroll_left = follow_playhead(scroll_left, viewport_width, current, state.scale)
    return replace(state, current_time=current, scroll_left=scroll_left)


def seek(state: EditorState, x: float) -> EditorState:
    """Move the playhead to a ruler pixel position."""
    t = clamp(to_seconds(x, state.scale), 0.0, state_duration(state))
    return replace(state, current_time=t)
