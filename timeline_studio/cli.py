"""CLI interface: inspect, edit and export chapter/speaker timelines."""

import argparse
import logging
import os
import shutil
import sys

from timeline_studio.artifacts import (
    init_output_dir,
    load_artifact,
    load_media,
    probe_media_duration,
)
from timeline_studio.catalog import categories, load_catalog
from timeline_studio.commands import command_from_dict
from timeline_studio.constants import (
    DEFAULT_CATEGORY,
    DEFAULT_DURATION_SEC,
    DEFAULT_SCALE,
    VERSION,
    ZOOM_STEP,
)
from timeline_studio.editor import apply_commands, initial_state
from timeline_studio.exporter import export
from timeline_studio.normalize import find_violations, normalize_segments
from timeline_studio.parser import extract_metadata
from timeline_studio.timecode import format_ruler_time, format_time
from timeline_studio.view import (
    active_items,
    duration_label,
    ruler_ticks,
    state_duration,
    tick_step,
    update_position,
    visible_range,
    visible_segments,
    visible_sub_segments,
    zoom,
)


def _check_ffmpeg():
    """Verify ffmpeg is installed."""
    if not shutil.which("ffmpeg"):
        print("Error: ffmpeg is required but not found.", file=sys.stderr)
        print("Install with: brew install ffmpeg", file=sys.stderr)
        raise SystemExit(1)


def _load_or_exit(path: str):
    """Load a chapters file, exiting with an error if it doesn't exist."""
    if not os.path.exists(path):
        print(f"Error: File not found: {path}", file=sys.stderr)
        raise SystemExit(1)
    data, segments = load_media(path)
    if not data:
        print(f"Error: Could not read chapters from: {path}", file=sys.stderr)
        raise SystemExit(1)
    return data, segments


def _load_script(path: str) -> list:
    """Read a JSON command script and build its commands."""
    script = load_artifact(os.path.dirname(path) or ".", os.path.basename(path))
    if script is None:
        print(f"Error: Could not read command script: {path}", file=sys.stderr)
        raise SystemExit(1)
    if not isinstance(script, list):
        print(f"Error: Command script must be a JSON list: {path}", file=sys.stderr)
        raise SystemExit(1)
    try:
        return [command_from_dict(entry) for entry in script]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)


def _resolve_duration(args) -> float:
    if args.duration is not None:
        return args.duration
    if args.media:
        _check_ffmpeg()
        try:
            return probe_media_duration(args.media)
        except Exception as e:
            print(f"Error: Could not read media duration from {args.media}: {e}", file=sys.stderr)
            raise SystemExit(1)
    return DEFAULT_DURATION_SEC


def _print_segments(segments):
    for seg in segments:
        print(f"  {format_time(seg.start)}-{format_time(seg.end)}  {seg.title or seg.id}")
        for sub in seg.sub_segments:
            print(f"      {format_time(sub.start)}-{format_time(sub.end)}  {sub.name or sub.id}")


def cmd_check(args):
    """Report invariant violations in a chapters file and how it normalizes."""
    data, raw = _load_or_exit(args.file)
    _, title = extract_metadata(data)
    sub_count = sum(len(s.sub_segments) for s in raw)
    print(f"{title}: {len(raw)} chapters, {sub_count} speakers")

    problems = find_violations(sorted(raw, key=lambda s: s.start))
    if not problems:
        print("No problems found.")
        return

    print(f"{len(problems)} problem(s):")
    for problem in problems:
        print(f"  {problem}")

    segments, _ = normalize_segments(raw)
    remaining = find_violations(segments)
    print(f"After normalization: {len(remaining)} problem(s)")
    _print_segments(segments)


def cmd_export(args):
    """Load, normalize, replay a command script and write the snapshot."""
    _, raw = _load_or_exit(args.file)
    catalog = load_catalog(args.catalog) if args.catalog else []
    state = initial_state(
        raw,
        catalog=catalog,
        duration_sec=_resolve_duration(args),
        category=args.category,
    )
    if state.overlap_warning:
        print(f"Warning: {state.overlap_warning}", file=sys.stderr)

    if args.script:
        try:
            state = apply_commands(state, _load_script(args.script))
        except (ValueError, TypeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            raise SystemExit(1)

    output_path = args.output
    if not output_path:
        output_path = os.path.join(init_output_dir(args.file), "chapters.json")
    export(state, output_path)

    sub_count = sum(len(s.sub_segments) for s in state.segments)
    print(f"Exported {len(state.segments)} chapters, {sub_count} speakers to {output_path}")


def cmd_view(args):
    """Print the ruler and the chapters visible in a viewport."""
    data, raw = _load_or_exit(args.file)
    _, title = extract_metadata(data)
    state = initial_state(raw)
    if args.at is not None:
        state = update_position(state, args.at)
    scale = zoom(DEFAULT_SCALE, ZOOM_STEP ** args.zoom)
    total = state_duration(state)

    window = visible_range(args.scroll, args.width, scale, total)
    step = tick_step(scale)
    print(f"{title} ({duration_label(total)}) at {scale:.2f} px/s")
    print(f"Window: {format_time(window[0])} - {format_time(window[1])}")
    print("Ruler: " + " ".join(format_ruler_time(t) for t in ruler_ticks(window[0], window[1], step)))

    if args.at is not None:
        seg, subs = active_items(state)
        speaking = ", ".join(s.name or s.id for s in subs) or "nobody"
        print(f"At {format_time(state.current_time)}: {seg.title if seg else 'no chapter'} ({speaking})")

    shown = visible_segments(state.segments, window)
    if not shown:
        print("No chapters in view.")
        return
    for seg in shown:
        print(f"  {format_time(seg.start)}-{format_time(seg.end)}  {seg.title or seg.id}")
        for sub in visible_sub_segments(seg, window):
            print(f"      {format_time(sub.start)}-{format_time(sub.end)}  {sub.name or sub.id}")


def cmd_categories(args):
    """List speaker categories in a catalog."""
    if not os.path.exists(args.catalog):
        print(f"Error: File not found: {args.catalog}", file=sys.stderr)
        raise SystemExit(1)
    catalog = load_catalog(args.catalog)
    for cat in categories(catalog):
        if args.filter and args.filter.lower() not in cat.lower():
            continue
        names = [e.name for e in catalog if e.category_id == cat]
        print(f"  {cat:<20} {len(names):>3}  {', '.join(names)}")


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="studio",
        description="Timeline Studio: edit chapter and speaker timecodes",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check
    check_parser = subparsers.add_parser("check", help="Check a chapters file for overlaps")
    check_parser.add_argument("file", help="Path to the chapters JSON file")
    check_parser.set_defaults(func=cmd_check)

    # export
    export_parser = subparsers.add_parser("export", help="Normalize, apply edits and export")
    export_parser.add_argument("file", help="Path to the chapters JSON file")
    export_parser.add_argument("-o", "--output", help="Output path (default: output/<slug>/chapters.json)")
    export_parser.add_argument("--script", help="JSON list of editor commands to apply")
    export_parser.add_argument("--catalog", help="Speaker catalog JSON file")
    export_parser.add_argument("--category", default=DEFAULT_CATEGORY, help="Active speaker category")
    export_parser.add_argument("--duration", type=float, help="Timeline length in seconds")
    export_parser.add_argument("--media", help="Media file to take the timeline length from")
    export_parser.set_defaults(func=cmd_export)

    # view
    view_parser = subparsers.add_parser("view", help="Show the ruler and visible chapters")
    view_parser.add_argument("file", help="Path to the chapters JSON file")
    view_parser.add_argument("--zoom", type=int, default=0, help="Zoom steps (negative zooms out)")
    view_parser.add_argument("--scroll", type=float, default=0.0, help="Scroll offset in pixels")
    view_parser.add_argument("--width", type=float, help="Viewport width in pixels")
    view_parser.add_argument("--at", type=float, help="Playhead time in seconds")
    view_parser.set_defaults(func=cmd_view)

    # categories
    categories_parser = subparsers.add_parser("categories", help="List speaker categories")
    categories_parser.add_argument("catalog", help="Speaker catalog JSON file")
    categories_parser.add_argument("--filter", help="Filter categories by substring")
    categories_parser.set_defaults(func=cmd_categories)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    args.func(args)
