"""Editor commands, and their JSON form used by command scripts."""

from dataclasses import dataclass

from timeline_studio.models import Edge, Kind


@dataclass(frozen=True)
class BeginDrag:
    kind: Kind
    target_id: str
    pointer_x: float
    current_start: float | None = None


@dataclass(frozen=True)
class BeginResize:
    kind: Kind
    target_id: str
    edge: Edge


@dataclass(frozen=True)
class PointerMove:
    pointer_x: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class AddSegment:
    title: str | None = None


@dataclass(frozen=True)
class AddSubSegments:
    parent_id: str
    identity_ids: tuple[str, ...] | None = None   # None: every eligible catalog entry


@dataclass(frozen=True)
class Delete:
    kind: Kind
    target_id: str


@dataclass(frozen=True)
class Select:
    kind: Kind
    target_id: str


@dataclass(frozen=True)
class Zoom:
    factor: float


@dataclass(frozen=True)
class Seek:
    pointer_x: float


@dataclass(frozen=True)
class UpdatePosition:
    time: float
    viewport_width: float | None = None


@dataclass(frozen=True)
class EditDetails:
    segment_id: str
    title: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class ChangeCategory:
    category: str


def _require(data: dict, key: str):
    if key not in data:
        raise ValueError(f"Command '{data.get('type')}' is missing '{key}'")
    return data[key]


def _kind(data: dict) -> Kind:
    try:
        return Kind(data.get("kind", Kind.SEGMENT.value))
    except ValueError:
        raise ValueError(f"Unknown kind: {data.get('kind')}")


def _edge(data: dict) -> Edge:
    try:
        return Edge(_require(data, "edge"))
    except ValueError:
        raise ValueError(f"Unknown edge: {data.get('edge')}")


def command_from_dict(data: dict):
    """Build a command from a script entry like {"type": "pointer_move", "x": 120}.

    Raises ValueError for unknown types or missing fields.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Command must be an object, got: {data!r}")
    kind = data.get("type")

    if kind == "begin_drag":
        start = data.get("start")
        return BeginDrag(
            _kind(data),
            str(_require(data, "id")),
            float(_require(data, "x")),
            float(start) if start is not None else None,
        )
    if kind == "begin_resize":
        return BeginResize(_kind(data), str(_require(data, "id")), _edge(data))
    if kind == "pointer_move":
        return PointerMove(float(_require(data, "x")))
    if kind == "pointer_up":
        return PointerUp()
    if kind == "add_segment":
        return AddSegment(data.get("title"))
    if kind == "add_sub_segments":
        ids = data.get("identities")
        return AddSubSegments(
            str(_require(data, "parent_id")),
            tuple(str(i) for i in ids) if ids is not None else None,
        )
    if kind == "delete":
        return Delete(_kind(data), str(_require(data, "id")))
    if kind == "select":
        return Select(_kind(data), str(_require(data, "id")))
    if kind == "zoom":
        return Zoom(float(_require(data, "factor")))
    if kind == "seek":
        return Seek(float(_require(data, "x")))
    if kind == "position":
        width = data.get("viewport_width")
        return UpdatePosition(float(_require(data, "time")), float(width) if width is not None else None)
    if kind == "edit_details":
        return EditDetails(str(_require(data, "id")), data.get("title"), data.get("description"))
    if kind == "change_category":
        return ChangeCategory(str(_require(data, "category")))

    raise ValueError(f"Unknown command type: {kind}")
