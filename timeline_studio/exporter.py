"""Export the edited hierarchy as a plain JSON snapshot."""

import os

from timeline_studio.artifacts import write_artifact
from timeline_studio.models import EditorState, SubSegment


def _sub_segment_record(sub: SubSegment) -> dict:
    return {
        "id": sub.identity_id or sub.id,
        "name": sub.name,
        "startTime": float(sub.start),
        "endTime": float(sub.end),
    }


def export_snapshot(state: EditorState) -> dict:
    """Project the state into the exported shape.

    Times are numeric seconds. Sub-segments are identified by the catalog
    identity they were created from, falling back to their own id.
    """
    return {
        "segments": [
            {
                "id": seg.id,
                "title": seg.title,
                "startTime": float(seg.start),
                "endTime": float(seg.end),
                "subSegments": [_sub_segment_record(s) for s in seg.sub_segments],
            }
            for seg in state.segments
        ],
    }


def export(state: EditorState, output_path: str) -> str:
    """Write the snapshot to output_path, creating its directory.

    Returns path to the written file.
    """
    project_dir = os.path.dirname(output_path) or "."
    os.makedirs(project_dir, exist_ok=True)
    return write_artifact(project_dir, os.path.basename(output_path), export_snapshot(state))
