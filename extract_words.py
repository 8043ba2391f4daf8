#!/usr/bin/env python3
"""
Word box extraction — CLI entry point.

Reads an already laid-out PDF and writes every word (and optionally
every delimiter and whitespace glyph) with its page-space bounding box
to a JSON file.  A group token for each text block (or each line, with
--group-by line) follows the words it encloses.  Optionally renders the
merged pages to PNG, with and without the boxes drawn on top.

Usage::

    python extract_words.py input.pdf words.json
    python extract_words.py input.pdf words.json --include-delimiters
    python extract_words.py input.pdf words.json -r page.png --render-boxes boxes.png
    python extract_words.py input.pdf words.json --pages 2-3 --scale 2 -v 2

Verbosity levels::

    -v 0   Quiet — warnings and errors only.
    -v 1   Normal — phase summaries and progress bars (default).
    -v 2   Debug — every token, all internal decisions.
"""

import argparse
import logging
import sys
from pathlib import Path

from typeset.page.text_layer import GROUP_BY_BLOCK, GROUPINGS
from wordboxes.pipeline import ExtractionConfig, WordBoxPipeline
from wordboxes.render.rasterizer import PageTooLargeError, cm_to_pt

logger = logging.getLogger("wordboxes")

# --verbose value → (level, format, date format)
_LOG_SETTINGS = {
    0: (logging.WARNING, "%(levelname)s: %(message)s", None),
    1: (logging.INFO, "%(message)s", None),
    2: (logging.DEBUG, "%(asctime)s %(name)s %(levelname)s: %(message)s", "%H:%M:%S"),
}


# ------------------------------------------------------------------
# Argument parsing
# ------------------------------------------------------------------


def _parse_page_range(value: str):
    """Turn ``"N"`` or ``"N-M"`` (1-based) into a 0-based ``(start, end)``."""
    first, _, last = value.partition("-")
    try:
        start = int(first)
        end = int(last) if last else start
    except ValueError:
        raise argparse.ArgumentTypeError(f"Page range '{value}' is not N or N-M")
    if start < 1 or end < start:
        raise argparse.ArgumentTypeError(
            f"Page range '{value}' must start at 1 or later and not run backwards"
        )
    return (start - 1, end - 1)


def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser with all pipeline options."""
    p = argparse.ArgumentParser(
        description="Extract words and their bounding boxes from a laid-out PDF.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python extract_words.py paper.pdf words.json\n"
            "  python extract_words.py paper.pdf words.json --include-delimiters\n"
            "  python extract_words.py paper.pdf words.json --render-boxes boxes.png\n"
        ),
    )

    # -- Positional --------------------------------------------------------
    p.add_argument("input", help="Path to the input PDF file")
    p.add_argument("output", help="Path for the output JSON file")

    # -- Tokens ------------------------------------------------------------
    tokens = p.add_argument_group("tokens")
    tokens.add_argument(
        "--include-whitespace",
        action="store_true",
        help="Emit boxes for whitespace glyphs",
    )
    tokens.add_argument(
        "--include-delimiters",
        action="store_true",
        help="Emit boxes for punctuation glyphs",
    )
    tokens.add_argument(
        "--trim-words",
        action="store_true",
        help="Strip surrounding whitespace from word labels",
    )
    tokens.add_argument(
        "--group-by",
        choices=GROUPINGS,
        default=GROUP_BY_BLOCK,
        help="Emit one group token per text block, per line, or none (default: block)",
    )
    tokens.add_argument(
        "--with-kind",
        action="store_true",
        help="Add token kind and group scope to each JSON record",
    )

    # -- Pages -------------------------------------------------------------
    p.add_argument(
        "--pages",
        type=_parse_page_range,
        default=None,
        metavar="N-M",
        help="Page range, 1-based inclusive (e.g. 1-10). Default: all.",
    )

    # -- Rendering ---------------------------------------------------------
    render = p.add_argument_group("rendering")
    render.add_argument(
        "-r",
        "--render",
        default=None,
        metavar="PNG",
        help="Render the merged pages to PNG",
    )
    render.add_argument(
        "--render-boxes",
        default=None,
        metavar="PNG",
        help="Render the merged pages with word boxes drawn on top",
    )
    render.add_argument(
        "--scale",
        type=float,
        default=1.0,
        metavar="FLOAT",
        help="Pixels per point for rendering (default: 1.0)",
    )
    render.add_argument(
        "--page-gap",
        type=float,
        default=1.0,
        metavar="PT",
        help="Gap between stacked pages in points (default: 1.0)",
    )
    render.add_argument(
        "--max-page-cm",
        type=float,
        default=100.0,
        metavar="CM",
        help="Refuse to render pages larger than this per side (default: 100)",
    )

    # -- Output control ----------------------------------------------------
    debug = p.add_argument_group("output control")
    debug.add_argument(
        "-v",
        "--verbose",
        type=int,
        choices=[0, 1, 2],
        default=1,
        help="Verbosity: 0=quiet, 1=normal (default), 2=debug",
    )
    debug.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars",
    )

    return p


# ------------------------------------------------------------------
# Logging setup
# ------------------------------------------------------------------


def _configure_logging(verbosity: int) -> None:
    """Attach one stderr handler to the ``wordboxes`` and ``typeset`` loggers."""
    level, fmt, datefmt = _LOG_SETTINGS.get(verbosity, _LOG_SETTINGS[1])

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    for name in ("wordboxes", "typeset"):
        package_logger = logging.getLogger(name)
        package_logger.setLevel(level)
        package_logger.handlers.clear()
        package_logger.addHandler(handler)

    logging.getLogger("PIL").setLevel(logging.WARNING)


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def main():
    """Parse arguments, configure logging, and run the pipeline."""
    parser = _build_parser()
    args = parser.parse_args()

    _configure_logging(args.verbose)

    input_path = Path(args.input)
    if not input_path.exists():
        parser.error(f"Input file not found: {input_path}")
    if input_path.suffix.lower() != ".pdf":
        parser.error(f"Input must be a PDF file: {input_path}")
    if args.scale <= 0:
        parser.error("--scale must be positive")

    config = ExtractionConfig(
        include_whitespace=args.include_whitespace,
        include_delimiters=args.include_delimiters,
        trim_words=args.trim_words,
        grouping=args.group_by,
        page_gap=args.page_gap,
        pixel_per_pt=args.scale,
        max_page_size=cm_to_pt(args.max_page_cm),
        page_range=args.pages,
        include_kind=args.with_kind,
        disable_tqdm=args.no_progress or args.verbose == 0,
    )

    logger.info("Word box extraction")
    logger.info("  Input:  %s", input_path)
    logger.info("  Output: %s", args.output)
    if config.page_range:
        s, e = config.page_range
        logger.info("  Pages:  %d–%d", s + 1, e + 1)

    pipeline = WordBoxPipeline(config)
    try:
        result = pipeline.run(
            str(input_path),
            args.output,
            render_path=args.render,
            render_boxes_path=args.render_boxes,
        )
    except PageTooLargeError as e:
        logger.error("%s", e)
        sys.exit(2)

    if result.word_count == 0:
        logger.warning("No words were found")


if __name__ == "__main__":
    main()
