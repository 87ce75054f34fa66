"""Parse ingested chapter/speaker records into the segment hierarchy."""

import logging

from timeline_studio.catalog import category_id
from timeline_studio.models import Segment, SubSegment
from timeline_studio.timecode import parse_time

logger = logging.getLogger(__name__)


def extract_metadata(data: dict) -> tuple[str, str]:
    """Return (media id, media title) from the ingested payload.

    Falls back to ("", "Untitled").
    """
    if not isinstance(data, dict):
        return "", "Untitled"
    return str(data.get("id", "")), data.get("title") or "Untitled"


def _sub_segment_from_record(record: dict) -> SubSegment:
    return SubSegment(
        id=str(record.get("id", "")),
        parent_id=str(record.get("parent_chapter_id", "")),
        start=parse_time(record.get("in_time")),
        end=parse_time(record.get("out_time")),
        name=record.get("name", ""),
        title=record.get("title", ""),
        avatar_url=record.get("avatar_url", ""),
        order=record.get("order") or 0,
        identity_id=str(record.get("identity_id", "")),
        category_id=category_id(record.get("category_id")),
    )


def _segment_from_record(record: dict, subs: list[SubSegment]) -> Segment:
    return Segment(
        id=str(record.get("id", "")),
        start=parse_time(record.get("in_time")),
        end=parse_time(record.get("out_time")),
        title=record.get("title", ""),
        description=record.get("description") or "",
        order=record.get("order") or 0,
        source=record.get("source", ""),
        sub_segments=tuple(subs),
    )


def _records(data: dict, *keys) -> list:
    """First list found under any of the keys."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, list):
            return value
    return []


def parse_media(data: dict) -> list[Segment]:
    """Join the flat segment and sub-segment lists into a hierarchy.

    Sub-segments are attached to the segment whose id matches their
    parent_chapter_id; those without a parent are dropped. The result is
    raw: it may still overlap and must go through normalize_segments().
    """
    if not isinstance(data, dict):
        return []
    segment_records = [r for r in _records(data, "chapters", "segments") if isinstance(r, dict)]
    sub_records = [r for r in _records(data, "speakers", "sub_segments") if isinstance(r, dict)]

    children = {}
    for record in sub_records:
        sub = _sub_segment_from_record(record)
        children.setdefault(sub.parent_id, []).append(sub)

    segments = []
    for record in segment_records:
        seg_id = str(record.get("id", ""))
        segments.append(_segment_from_record(record, children.pop(seg_id, [])))

    orphans = sum(len(subs) for subs in children.values())
    if orphans:
        logger.debug("Dropped %d sub-segments with no matching parent", orphans)

    return segments
