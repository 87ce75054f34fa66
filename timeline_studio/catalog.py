"""Speaker catalog loading, category tags, and eligibility filtering."""

import json
import logging
import os
import sys
from dataclasses import replace

from timeline_studio.models import CatalogEntry, CategoryId, EditorState, Kind, Segment

logger = logging.getLogger(__name__)


def category_id(value) -> CategoryId:
    """Intern a category tag so equal categories share one identity."""
    return CategoryId(sys.intern(str(value or "")))


def entry_from_record(record: dict) -> CatalogEntry:
    return CatalogEntry(
        id=str(record.get("id", "")),
        name=record.get("name", ""),
        title=record.get("title", ""),
        avatar_url=record.get("avatar_url", ""),
        category_id=category_id(record.get("category_id")),
    )


def load_catalog(path: str) -> list[CatalogEntry]:
    """Load the speaker catalog (a JSON list of records).

    Returns an empty list if the file is missing or malformed.
    """
    if not os.path.exists(path):
        logger.warning("Speaker catalog not found: %s, starting with none", path)
        return []
    try:
        with open(path) as f:
            records = json.load(f)
    except (json.JSONDecodeError, OSError):
        logger.warning("Malformed speaker catalog: %s, starting with none", path)
        return []
    if not isinstance(records, list):
        logger.warning("Speaker catalog is not a list: %s", path)
        return []
    return [entry_from_record(r) for r in records if isinstance(r, dict)]


def categories(catalog) -> list[CategoryId]:
    """Unique category ids in first-seen order."""
    seen = []
    for entry in catalog:
        if entry.category_id not in seen:
            seen.append(entry.category_id)
    return seen


def eligible_entries(catalog, segment: Segment, category) -> list[CatalogEntry]:
    """Catalog entries of the category not yet assigned inside the segment."""
    assigned = {s.identity_id for s in segment.sub_segments}
    wanted = category_id(category)
    return [
        e for e in catalog
        if e.category_id == wanted and e.id not in assigned
    ]


def change_category(state: EditorState, category) -> EditorState:
    """Switch the active category, clearing every sub-segment.

    Speakers from the old category make no sense under the new one, so all
    of them are removed. Selecting the current category is a no-op.
    """
    new_category = category_id(category)
    if new_category == state.category:
        return state
    logger.debug("Category %s -> %s: clearing speakers", state.category, new_category)
    return replace(
        state,
        category=new_category,
        segments=tuple(replace(s, sub_segments=()) for s in state.segments),
        selection=state.selection if state.selection and state.selection.kind == Kind.SEGMENT else None,
        interaction=None,
    )
