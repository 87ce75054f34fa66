"""Data models for the chapter/speaker timeline."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import NewType

from timeline_studio.constants import (
    DEFAULT_CATEGORY,
    DEFAULT_DURATION_SEC,
    DEFAULT_SCALE,
)

# Interned category tag, see catalog.category_id()
CategoryId = NewType("CategoryId", str)


class Kind(str, Enum):
    SEGMENT = "segment"
    SUB_SEGMENT = "sub_segment"


class Mode(str, Enum):
    DRAG = "drag"
    RESIZE = "resize"


class Edge(str, Enum):
    LEFT = "L"
    RIGHT = "R"


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    name: str
    title: str = ""
    avatar_url: str = ""
    category_id: CategoryId = CategoryId("")


@dataclass(frozen=True)
class SubSegment:
    id: str
    parent_id: str
    start: float
    end: float
    name: str = ""
    title: str = ""
    avatar_url: str = ""
    order: int = 0
    identity_id: str = ""
    category_id: CategoryId = CategoryId("")

    @property
    def width(self) -> float:
        return self.end - self.start

    def moved_to(self, start: float, end: float) -> "SubSegment":
        return replace(self, start=start, end=end)


@dataclass(frozen=True)
class Segment:
    id: str
    start: float
    end: float
    title: str = ""
    description: str = ""
    order: int = 0
    source: str = ""
    sub_segments: tuple[SubSegment, ...] = ()

    @property
    def width(self) -> float:
        return self.end - self.start

    def shifted(self, delta: float) -> "Segment":
        """Translate the segment and every sub-segment by delta seconds."""
        return replace(
            self,
            start=self.start + delta,
            end=self.end + delta,
            sub_segments=tuple(
                s.moved_to(s.start + delta, s.end + delta) for s in self.sub_segments
            ),
        )


@dataclass(frozen=True)
class Interaction:
    """The one pointer interaction in progress (drag or resize)."""
    mode: Mode
    kind: Kind
    target_id: str
    parent_id: str = ""    # owning segment, sub-segments only
    pointer_offset: float = 0.0
    edge: Edge | None = None


@dataclass(frozen=True)
class Selection:
    kind: Kind
    id: str


@dataclass(frozen=True)
class EditorState:
    """Everything the editor owns. Operations return a new state."""
    segments: tuple[Segment, ...] = ()
    interaction: Interaction | None = None
    selection: Selection | None = None
    scale: float = DEFAULT_SCALE
    current_time: float = 0.0
    scroll_left: float = 0.0
    duration_sec: float = DEFAULT_DURATION_SEC
    category: CategoryId = CategoryId(DEFAULT_CATEGORY)
    overlap_warning: str | None = None
    catalog: tuple[CatalogEntry, ...] = field(default=(), repr=False)


def sort_segments(segments) -> tuple[Segment, ...]:
    return tuple(sorted(segments, key=lambda s: s.start))


def find_segment(state: EditorState, segment_id: str) -> Segment | None:
    for seg in state.segments:
        if seg.id == segment_id:
            return seg
    return None


def find_sub_segment(state: EditorState, sub_id: str) -> tuple[Segment, SubSegment] | None:
    """Return (parent, sub-segment) for a sub-segment id, or None."""
    for seg in state.segments:
        for sub in seg.sub_segments:
            if sub.id == sub_id:
                return seg, sub
    return None


def replace_segment(state: EditorState, segment: Segment) -> EditorState:
    """Swap in a new version of the segment with the same id."""
    return replace(
        state,
        segments=tuple(segment if s.id == segment.id else s for s in state.segments),
    )
