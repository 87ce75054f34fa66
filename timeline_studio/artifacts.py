"""Input/output files: JSON artifacts, the ingested hierarchy, media length."""

import json
import logging
import os
import re

from pydub import AudioSegment

from timeline_studio.constants import OUTPUT_DIR
from timeline_studio.models import Segment
from timeline_studio.parser import parse_media

logger = logging.getLogger(__name__)


def slug_from_path(media_path: str) -> str:
    """Convert a media/chapters filename to an output directory slug.

    "Board Meeting 2024.json" → "board_meeting_2024"
    "/path/to/chapters.json" → "chapters"
    """
    basename = os.path.splitext(os.path.basename(media_path))[0]
    # Replace non-alphanumeric with underscore, collapse multiples, strip edges
    slug = re.sub(r"[^a-zA-Z0-9]+", "_", basename).strip("_").lower()
    return slug


def init_output_dir(media_path: str, output_base: str = OUTPUT_DIR) -> str:
    """Create output/<slug>/ and return it."""
    project_dir = os.path.join(output_base, slug_from_path(media_path))
    os.makedirs(project_dir, exist_ok=True)
    return project_dir


def write_artifact(project_dir: str, filename: str, data: dict) -> str:
    """Write JSON artifact to project_dir/filename.

    Returns path to the written file.
    """
    path = os.path.join(project_dir, filename)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    return path


def load_artifact(project_dir: str, filename: str) -> dict | list | None:
    """Read JSON artifact. Returns None if file doesn't exist or is malformed."""
    path = os.path.join(project_dir, filename)
    if not os.path.exists(path):
        return None
    try:
        with open(path) as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError):
        logger.warning("Malformed JSON file: %s", path)
        return None


def load_media(path: str) -> tuple[dict, list[Segment]]:
    """Load the ingested payload and its raw (unnormalized) hierarchy.

    A missing or unreadable file gives an empty hierarchy so the editor
    still starts in a valid state.
    """
    data = load_artifact(os.path.dirname(path) or ".", os.path.basename(path))
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Chapters file is not an object: %s", path)
        else:
            logger.warning("Could not load chapters from %s, starting empty", path)
        return {}, []
    return data, parse_media(data)


def probe_media_duration(media_path: str) -> float:
    """Length of an audio/video file in seconds (decoded with ffmpeg)."""
    audio = AudioSegment.from_file(media_path)
    return len(audio) / 1000.0
