#!/usr/bin/env python3
"""
basepaint.py
Prepare BasePaint stroke lists from images, offline.

Usage:
  python basepaint.py strokes IMAGE [--filter] [--split N] [--preview]
  python basepaint.py render STROKES.txt
  python basepaint.py animate FRAME... | FOLDER
  python basepaint.py palette IMAGE
  python basepaint.py replace IMAGE --map OLD=NEW [--map OLD=NEW ...]
  python basepaint.py theme
  python basepaint.py canvas

Common options:
  --day D        canvas day (default: today's day number)
  --palette HEX  use these colours instead of fetching the day's theme
  --outdir DIR   where artifacts are written (default: current directory)
  --no-proxy     do not retry a failed fetch through the CORS proxy
  --skip-canvas  treat the current canvas as empty instead of fetching it
  --debug        verbose details

Output:
  Stroke lists are JSON arrays of {"point": {"x", "y"}, "color"} written as
  .txt files. Images are PNG.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from basepaint_tools.artifacts import ArtifactWriter
from basepaint_tools.canvas_state import CanvasState
from basepaint_tools.colour_replace import (
    colour_counts,
    parse_colour_pairs,
    replace_colours_png,
)
from basepaint_tools.constants import DEFAULT_SECTION_SIZE, FRAME_EXTS
from basepaint_tools.core_types import AnimationFrame, Theme, normalise_hex
from basepaint_tools.errors import BasepaintError, FrameSequenceError
from basepaint_tools.frames import process_animation_frames, sort_frame_names
from basepaint_tools.image_io import (
    encode_png,
    load_image,
    palette_swatch,
    validate_canvas_size,
)
from basepaint_tools.palette_index import PaletteIndex
from basepaint_tools.remote import (
    Fetcher,
    day_index,
    fetch_canvas_image,
    fetch_current_canvas_state,
    fetch_direct,
    fetch_theme,
    fetch_with_fallback,
)
from basepaint_tools.strokes import (
    extract_strokes,
    extract_strokes_filtered,
    info_filename,
    info_text,
    render_strokes,
    section_filename,
    split_strokes,
    strokes_from_json,
    strokes_to_json,
)
from basepaint_tools.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    print_progress_line,
    warn,
)

# CLI args


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--day", type=int, default=None, help="Canvas day number")
    common.add_argument(
        "--palette",
        nargs="+",
        default=None,
        metavar="HEX",
        help="Palette colours; skips the theme fetch",
    )
    common.add_argument(
        "--outdir", type=Path, default=Path("."), help="Output directory"
    )
    common.add_argument(
        "--no-proxy", action="store_true", help="No proxy fallback for fetches"
    )
    common.add_argument(
        "--skip-canvas",
        action="store_true",
        help="Continue without the current canvas (nothing is filtered out)",
    )
    common.add_argument("--debug", action="store_true", help="Verbose details")

    parser = argparse.ArgumentParser(
        prog="basepaint",
        description="Convert images to BasePaint stroke lists.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("strokes", parents=[common], help="Image to stroke list")
    p.add_argument("image", type=Path, help="256x256 image")
    p.add_argument(
        "--filter",
        action="store_true",
        help="Drop pixels the current canvas already shows",
    )
    p.add_argument(
        "--split",
        nargs="?",
        const=DEFAULT_SECTION_SIZE,
        type=int,
        default=None,
        metavar="N",
        help="Write sections of N strokes (default %(const)s); implies --filter",
    )
    p.add_argument("--preview", action="store_true", help="Also write a PNG render")

    p = sub.add_parser("render", parents=[common], help="Stroke list to PNG")
    p.add_argument("strokes", type=Path, help="Saved stroke list (.txt JSON)")

    p = sub.add_parser("animate", parents=[common], help="Frames to per-frame diffs")
    p.add_argument("frames", type=Path, nargs="+", help="Frame images or a folder")

    p = sub.add_parser("palette", parents=[common], help="List an image's colours")
    p.add_argument("image", type=Path)

    p = sub.add_parser("replace", parents=[common], help="Replace colours in an image")
    p.add_argument("image", type=Path)
    p.add_argument(
        "--map",
        dest="pairs",
        action="append",
        default=[],
        metavar="OLD=NEW",
        help="Colour pair, repeatable",
    )
    p.add_argument("--out", type=Path, default=None, help="Output PNG path")

    sub.add_parser("theme", parents=[common], help="Show theme and write swatch")
    sub.add_parser("canvas", parents=[common], help="Download the canvas PNG")
    return parser


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


# Shared steps


def _fetcher(args: argparse.Namespace) -> Fetcher:
    return fetch_direct if args.no_proxy else fetch_with_fallback


def _resolve_day(args: argparse.Namespace) -> int:
    today = day_index()
    if args.day is None:
        return today
    if args.day < 0 or args.day > today:
        raise ValueError(f"Please enter a valid day (0-{today}), got {args.day}")
    return args.day


def _resolve_theme(args: argparse.Namespace, day: int) -> Theme:
    """--palette when given, otherwise the day's theme from the service."""
    if args.palette:
        return Theme(
            day=day,
            theme="custom",
            palette=tuple(normalise_hex(hx) for hx in args.palette),
        )
    theme = fetch_theme(day, _fetcher(args))
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [("Day", day), ("Theme", theme.theme), ("Colours", len(theme.palette))]
            )
        )
    return theme


def _current_canvas(
    args: argparse.Namespace, day: int, palette: PaletteIndex
) -> CanvasState:
    if args.skip_canvas:
        warn("canvas skipped; every stroke is treated as new")
        return CanvasState()
    log("Fetching current canvas...")
    state = fetch_current_canvas_state(day, palette, _fetcher(args))
    if args.debug:
        debug_log(f"canvas painted pixels: {len(state):,}")
    return state


def _collect_frame_paths(paths: List[Path]) -> List[Path]:
    out: List[Path] = []
    for p in paths:
        if p.is_dir():
            out.extend(
                q
                for q in p.iterdir()
                if q.is_file() and q.suffix.lower() in FRAME_EXTS
            )
        else:
            out.append(p)
    return out


# Commands


def cmd_strokes(args: argparse.Namespace) -> None:
    print_banner(args.image.name)
    if args.split is not None and args.split < 1:
        raise ValueError("Please enter a valid number (minimum 1)")
    image = validate_canvas_size(load_image(args.image))

    day = _resolve_day(args)
    theme = _resolve_theme(args, day)
    palette = PaletteIndex(theme.palette)
    filtered = args.filter or args.split is not None
    print_config_line(
        "strokes",
        [("Day", day), ("Palette", len(palette)), ("Filter", filtered)],
        debug=args.debug,
    )

    if filtered:
        log(f"All pixels: {len(extract_strokes(image, palette)):,}")
        strokes = extract_strokes_filtered(
            image, palette, _current_canvas(args, day, palette)
        )
    else:
        strokes = extract_strokes(image, palette)

    writer = ArtifactWriter(args.outdir, debug=args.debug)
    if args.split is not None:
        sections = split_strokes(strokes, args.split)
        writer(
            info_filename(day),
            info_text(len(sections), args.split, len(strokes), day, theme.theme),
        )
        for i, section in enumerate(sections, start=1):
            writer(section_filename(i, len(sections)), strokes_to_json(section))
        log(f"Wrote {len(sections)} section(s) to {args.outdir}")
    else:
        path = writer(f"{args.image.stem}-strokes.txt", strokes_to_json(strokes))
        log(f"Wrote {path.name}")

    if args.preview:
        path = writer(
            f"{args.image.stem}-preview.png",
            encode_png(render_strokes(strokes, palette)),
        )
        log(f"Wrote {path.name}")
    label = "Filtered pixels" if filtered else "Total pixels"
    log(f"{label}: {len(strokes):,}")


def cmd_render(args: argparse.Namespace) -> None:
    print_banner(args.strokes.name)
    strokes = strokes_from_json(args.strokes.read_text(encoding="utf-8"))
    day = _resolve_day(args)
    palette = PaletteIndex(_resolve_theme(args, day).palette)
    path = ArtifactWriter(args.outdir, debug=args.debug)(
        f"{args.strokes.stem}-preview.png",
        encode_png(render_strokes(strokes, palette)),
    )
    log(f"Wrote {path.name} | strokes={len(strokes):,}")


def cmd_animate(args: argparse.Namespace) -> None:
    paths = _collect_frame_paths(args.frames)
    if not paths:
        raise ValueError("no frame images given")
    by_name = {p.name: p for p in paths}
    if len(by_name) != len(paths):
        raise ValueError("frame names must be unique")

    # Load and validate everything before any fetch or output.
    frames = [
        AnimationFrame(name, validate_canvas_size(load_image(by_name[name])))
        for name in sort_frame_names(by_name)
    ]
    print_banner(f"{len(frames)} frame(s)")
    if args.debug:
        debug_log("order: " + ", ".join(f.name for f in frames))

    day = _resolve_day(args)
    theme = _resolve_theme(args, day)
    palette = PaletteIndex(theme.palette)
    canvas = _current_canvas(args, day, palette)
    writer = ArtifactWriter(args.outdir, debug=args.debug)

    def on_progress(i: int, n: int) -> None:
        print_progress_line(f"Processing frame {i}/{n}...", final=(i == n))

    t0 = time.perf_counter()
    try:
        total = process_animation_frames(
            frames, palette, canvas, on_progress, writer, debug=args.debug
        )
    except FrameSequenceError as exc:
        print_progress_line("", final=True)
        warn(
            f"stopped after {exc.completed_frames} frame(s), "
            f"{exc.total_pixels:,} pixels written"
        )
        raise
    log(f"Done! {len(frames)} frames processed")
    log(f"Total pixels processed: {total:,}")
    log(f"Total time {format_total_duration_compact(time.perf_counter() - t0)}")


def cmd_palette(args: argparse.Namespace) -> None:
    print_banner(args.image.name)
    counts = colour_counts(load_image(args.image))
    if not counts:
        log("No visible pixels")
        return
    log(f"Colours used: {len(counts)}")
    for hex_code, count in counts:
        log(f"  {hex_code}: {count:,}")


def cmd_replace(args: argparse.Namespace) -> None:
    print_banner(args.image.name)
    colour_map = parse_colour_pairs(args.pairs)
    image = load_image(args.image)
    data = replace_colours_png(image, colour_map)
    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_bytes(data)
        path = args.out
    else:
        path = ArtifactWriter(args.outdir, debug=args.debug)("color-replaced.png", data)
    log(f"Wrote {path.name} | replaced={len(colour_map)}")


def cmd_theme(args: argparse.Namespace) -> None:
    day = _resolve_day(args)
    theme = _resolve_theme(args, day)
    print_banner(f"Day {day}: {theme.theme}")
    for i, hx in enumerate(theme.palette):
        log(f"  {i:2d}  {hx}")
    path = ArtifactWriter(args.outdir, debug=args.debug)(
        f"palette-day-{day}-{theme.theme.replace('/', '-')}.png",
        encode_png(palette_swatch(theme.palette)),
    )
    log(f"Wrote {path.name}")


def cmd_canvas(args: argparse.Namespace) -> None:
    day = _resolve_day(args)
    print_banner(f"Day {day}")
    data = fetch_canvas_image(day, _fetcher(args))
    path = ArtifactWriter(args.outdir, debug=args.debug)(f"canvas-day-{day}.png", data)
    log(f"Wrote {path.name}")


COMMANDS = {
    "strokes": cmd_strokes,
    "render": cmd_render,
    "animate": cmd_animate,
    "palette": cmd_palette,
    "replace": cmd_replace,
    "theme": cmd_theme,
    "canvas": cmd_canvas,
}


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns 0 on success, 2 on a reported failure."""
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)
    try:
        COMMANDS[args.command](args)
    except (BasepaintError, ValueError, OSError) as exc:
        cause = exc.__cause__
        error(f"{exc} ({cause})" if isinstance(exc, FrameSequenceError) else str(exc))
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
