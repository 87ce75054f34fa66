"""One-time repair of an ingested hierarchy, plus the invariant checker."""

import logging
from dataclasses import replace

from timeline_studio.bounds import WIDTH_TOLERANCE, clamp, fit_children, min_segment_width
from timeline_studio.constants import NORMALIZE_MIN_WIDTH, SUB_SEGMENT_MIN_WIDTH
from timeline_studio.models import Segment

logger = logging.getLogger(__name__)


def _widen_segments(segments) -> tuple[list[Segment], bool]:
    """Grow segments too narrow to exist (or to hold their sub-segments)."""
    result = []
    corrected = False
    for seg in segments:
        need = min_segment_width(seg)
        if seg.width < need - WIDTH_TOLERANCE:
            seg = replace(seg, end=seg.start + need)
            corrected = True
        result.append(seg)
    return result, corrected


def _separate_segments(segments) -> tuple[list[Segment], bool]:
    """Sort by start and push each overlapping segment past its predecessor.

    The whole segment moves, sub-segments included, keeping its width and
    their offsets.
    """
    ordered = sorted(segments, key=lambda s: s.start)
    corrected = False
    for i in range(1, len(ordered)):
        prev = ordered[i - 1]
        cur = ordered[i]
        if cur.start < prev.end:
            moved = cur.shifted(prev.end - cur.start)
            if moved.start < prev.end:
                moved = replace(moved, start=prev.end)
            ordered[i] = moved
            corrected = True
    return ordered, corrected


def _normalize_children(seg: Segment) -> tuple[Segment, bool]:
    subs = sorted(seg.sub_segments, key=lambda s: s.start)
    corrected = False

    # Overlapping siblings: move the later one after its predecessor
    for i in range(1, len(subs)):
        prev = subs[i - 1]
        cur = subs[i]
        if cur.start < prev.end:
            width = max(NORMALIZE_MIN_WIDTH, cur.width)
            new_start = min(prev.end, seg.end - width)
            subs[i] = cur.moved_to(new_start, new_start + width)
            corrected = True

    # Anything still sticking out of the parent gets clamped inside it
    for i, sub in enumerate(subs):
        if sub.start < seg.start or sub.end > seg.end:
            width = min(max(NORMALIZE_MIN_WIDTH, sub.width), seg.width)
            new_start = clamp(sub.start, seg.start, seg.end - width)
            subs[i] = sub.moved_to(new_start, new_start + width)
            corrected = True

    # Relocation can leave leftovers when the parent is crowded
    subs.sort(key=lambda s: s.start)
    fitted = fit_children(subs, seg.start, seg.end)
    if list(fitted) != subs:
        corrected = True

    return replace(seg, sub_segments=fitted), corrected


def normalize_segments(segments) -> tuple[list[Segment], bool]:
    """Return (corrected hierarchy, corrected flag).

    Applied once at ingestion. Output is sorted by start, segments do not
    overlap, every sub-segment sits inside its parent and siblings do not
    overlap. Running it on its own output changes nothing and reports False.
    """
    widened, corrected = _widen_segments(segments)
    ordered, shifted = _separate_segments(widened)
    corrected = corrected or shifted

    result = []
    for seg in ordered:
        seg, changed = _normalize_children(seg)
        corrected = corrected or changed
        result.append(seg)

    if corrected:
        logger.warning("Overlapping timecodes detected in ingested data; positions adjusted")
    return result, corrected


def find_violations(segments) -> list[str]:
    """Describe every broken ordering, containment or width rule."""
    problems = []
    ordered = list(segments)

    for i, seg in enumerate(ordered):
        if seg.width < min_segment_width(seg) - WIDTH_TOLERANCE:
            problems.append(f"segment {seg.id}: too narrow ({seg.width:.3f}s)")
        if i and seg.start < ordered[i - 1].start:
            problems.append(f"segment {seg.id}: out of order")
        if i and seg.start < ordered[i - 1].end:
            problems.append(f"segment {seg.id}: overlaps {ordered[i - 1].id}")

        subs = list(seg.sub_segments)
        for j, sub in enumerate(subs):
            if sub.width < SUB_SEGMENT_MIN_WIDTH - WIDTH_TOLERANCE:
                problems.append(f"sub-segment {sub.id}: too narrow ({sub.width:.3f}s)")
            if sub.start < seg.start or sub.end > seg.end:
                problems.append(f"sub-segment {sub.id}: outside segment {seg.id}")
            if j and sub.start < subs[j - 1].start:
                problems.append(f"sub-segment {sub.id}: out of order")
            if j and sub.start < subs[j - 1].end:
                problems.append(f"sub-segment {sub.id}: overlaps {subs[j - 1].id}")

    return problems
