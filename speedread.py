#!/usr/bin/env python3
"""
Speed reader — CLI entry point.

Shows a plain-text file one word at a time at an adaptive pace, or
prints the pacing timeline without waiting.

Usage::

    python speedread.py book.txt
    python speedread.py book.txt --mode study
    python speedread.py book.txt --wpm 450 --no-adaptive
    python speedread.py book.txt --preview --limit 200
    python speedread.py book.txt --chapters toc.json --chapter 3

Verbosity levels::

    -v 0   Quiet — warnings and errors only.
    -v 1   Normal — load and session summaries (default).
    -v 2   Debug — per-word scheduling detail.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from pacing.playback import (
    MAX_WPM,
    MIN_WPM,
    AsyncioScheduler,
    Chapter,
    PacingConfig,
    ReadingEngine,
    ReadingMode,
    chapters_from_json,
    flatten_chapters,
    parse_mode,
    preview_timeline,
    simulate_timeline,
)
from pacing.text import tokenize

logger = logging.getLogger("pacing")

# Mapping from --verbose integer to logging level
_VERBOSITY_MAP = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


# ------------------------------------------------------------------
# Argument parsing
# ------------------------------------------------------------------


def _parse_mode(value: str) -> ReadingMode:
    try:
        return parse_mode(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _parse_non_negative(value: str) -> float:
    try:
        f = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number '{value}'.")
    if f < 0:
        raise argparse.ArgumentTypeError(f"Value must be >= 0, got {value}.")
    return f


def _parse_positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer '{value}'.")
    if n < 1:
        raise argparse.ArgumentTypeError(f"Value must be >= 1, got {value}.")
    return n


def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser with all reader options."""
    p = argparse.ArgumentParser(
        description="Read a text file one word at a time with adaptive pacing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python speedread.py book.txt --mode skim\n"
            "  python speedread.py book.txt --wpm 450 --no-adaptive\n"
            "  python speedread.py book.txt --preview --limit 200\n"
        ),
    )

    p.add_argument("input", help="Path to a UTF-8 text file")

    # -- Pacing ------------------------------------------------------------
    pacing = p.add_argument_group("pacing")
    pacing.add_argument(
        "--mode",
        type=_parse_mode,
        default=ReadingMode.NORMAL,
        metavar="MODE",
        help="Reading mode preset: skim, normal or study (default: normal)",
    )
    pacing.add_argument(
        "--wpm",
        type=int,
        default=None,
        metavar="N",
        help=f"Override the mode's words per minute ({MIN_WPM}-{MAX_WPM})",
    )
    pacing.add_argument(
        "--intensity",
        type=_parse_non_negative,
        default=None,
        metavar="FLOAT",
        help="Override adaptive pacing intensity (0 = off, 1 = normal, 2 = aggressive)",
    )
    pacing.add_argument(
        "--no-adaptive",
        action="store_true",
        help="Disable complexity-based slowdown",
    )
    pacing.add_argument(
        "--no-punctuation-pause",
        action="store_true",
        help="Do not hold sentence and clause endings longer",
    )

    # -- Position ----------------------------------------------------------
    position = p.add_argument_group("position")
    position.add_argument(
        "--start",
        type=int,
        default=0,
        metavar="N",
        help="Word offset to start from (default: 0)",
    )
    position.add_argument(
        "--chapters",
        default=None,
        metavar="FILE",
        help="JSON chapter list: [{title, startWordIndex, children}, ...]",
    )
    position.add_argument(
        "--chapter",
        type=int,
        default=None,
        metavar="K",
        help="Start at chapter K (1-based, nested chapters counted in order)",
    )
    position.add_argument(
        "--list-chapters",
        action="store_true",
        help="List chapters from --chapters, then exit",
    )

    # -- Output control ----------------------------------------------------
    out = p.add_argument_group("output")
    out.add_argument(
        "--preview",
        action="store_true",
        help="Print the pacing timeline instead of playing in real time",
    )
    out.add_argument(
        "--limit",
        type=_parse_positive_int,
        default=None,
        metavar="N",
        help="Stop after N words",
    )
    out.add_argument(
        "-v",
        "--verbose",
        type=int,
        choices=[0, 1, 2],
        default=1,
        help="Verbosity: 0=quiet, 1=normal (default), 2=debug",
    )
    out.add_argument(
        "--no-progress",
        action="store_true",
        help="Print words line by line instead of on a progress bar",
    )

    return p


# ------------------------------------------------------------------
# Logging setup
# ------------------------------------------------------------------


def _configure_logging(verbosity: int) -> None:
    """
    Set up the root ``pacing`` logger.

    At verbosity 0 (WARNING), uses a minimal format.  At 2 (DEBUG),
    includes timestamps and the module name.
    """
    level = _VERBOSITY_MAP.get(verbosity, logging.INFO)

    if level <= logging.DEBUG:
        fmt = "%(asctime)s %(name)s %(levelname)s: %(message)s"
        datefmt = "%H:%M:%S"
    elif level <= logging.INFO:
        fmt = "%(message)s"
        datefmt = None
    else:
        fmt = "%(levelname)s: %(message)s"
        datefmt = None

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger("pacing")
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _build_config(args: argparse.Namespace) -> PacingConfig:
    config = PacingConfig.from_mode(args.mode)
    if args.wpm is not None:
        config.words_per_minute = args.wpm
    if args.intensity is not None:
        config.adaptive_pacing_intensity = args.intensity
    if args.no_adaptive:
        config.adaptive_pacing_enabled = False
    if args.no_punctuation_pause:
        config.pause_on_punctuation = False
    return config


def _load_chapters(parser: argparse.ArgumentParser, path: str) -> List[Chapter]:
    chapter_path = Path(path)
    if not chapter_path.exists():
        parser.error(f"Chapter file not found: {chapter_path}")
    try:
        return chapters_from_json(chapter_path.read_text(encoding="utf-8"))
    except (ValueError, KeyError, TypeError) as e:
        parser.error(f"Invalid chapter file {chapter_path}: {e}")


def _cmd_list_chapters(chapters: List[Chapter], total_words: int) -> None:
    """Print the chapter list with start offsets, then exit."""
    for k, chapter in enumerate(flatten_chapters(chapters), start=1):
        percent = int(chapter.progress_fraction(total_words) * 100)
        logger.info(
            "  %3d  %-40s word %-8d %3d%%",
            k,
            chapter.title[:40],
            chapter.start_word_index,
            percent,
        )


# ------------------------------------------------------------------
# Sub-commands
# ------------------------------------------------------------------


def _run_preview(words: List[str], config: PacingConfig, start: int, limit) -> None:
    timeline = simulate_timeline(words, config, start_index=start, limit=limit)
    print(preview_timeline(timeline))
    print(timeline.summary())


async def _run_live(
    words: List[str],
    config: PacingConfig,
    start: int,
    limit,
    show_progress: bool,
) -> None:
    """Play the words in real time until the end, *limit*, or Ctrl-C."""
    finished = asyncio.Event()
    engine = ReadingEngine(
        AsyncioScheduler(),
        config,
        on_progress=lambda *_: finished.set(),
    )
    engine.load_words(words)
    engine.seek(start)

    bar = tqdm(
        total=engine.total_words,
        initial=engine.current_index,
        unit="word",
        disable=not show_progress,
        dynamic_ncols=True,
    )
    shown = 0

    def on_change(e: ReadingEngine) -> None:
        nonlocal shown
        if not e.is_playing:
            return
        shown += 1
        if show_progress:
            bar.n = e.current_index
            bar.set_postfix_str(e.current_word, refresh=False)
            bar.refresh()
        else:
            print(e.current_word, flush=True)
        if limit is not None and shown >= limit:
            e.pause()

    engine.add_listener(on_change)
    engine.play()
    if not engine.is_playing:
        logger.warning("Nothing to read from word %d", engine.current_index)
        bar.close()
        return

    try:
        await finished.wait()
    finally:
        # Ctrl-C cancels the wait; pausing closes the session and logs it
        engine.pause()
        bar.close()


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def main():
    """Parse arguments, configure logging, and run the reader."""
    parser = _build_parser()
    args = parser.parse_args()

    _configure_logging(args.verbose)

    input_path = Path(args.input)
    if not input_path.exists():
        parser.error(f"Input file not found: {input_path}")

    words = tokenize(input_path.read_text(encoding="utf-8", errors="replace"))
    config = _build_config(args)

    chapters: List[Chapter] = []
    if args.chapters:
        chapters = _load_chapters(parser, args.chapters)
    elif args.chapter is not None or args.list_chapters:
        parser.error("--chapter and --list-chapters require --chapters FILE")

    # --list-chapters exits early
    if args.list_chapters:
        _cmd_list_chapters(chapters, len(words))
        return

    start = args.start
    if args.chapter is not None:
        flat = flatten_chapters(chapters)
        if not 1 <= args.chapter <= len(flat):
            parser.error(f"--chapter must be between 1 and {len(flat)}")
        start = flat[args.chapter - 1].start_word_index

    logger.info("Speed reader")
    logger.info("  Input:  %s (%d words)", input_path, len(words))
    logger.info(
        "  Mode:   %s (%s)", config.mode.display_name, config.mode.description
    )
    logger.info("  Speed:  %d wpm", config.words_per_minute)
    if not config.adaptive_pacing_enabled:
        logger.info("  Adaptive pacing off")
    elif config.adaptive_pacing_intensity != 1.0:
        logger.info("  Adaptive intensity: %.2f", config.adaptive_pacing_intensity)

    if not words:
        logger.warning("No words found in %s", input_path)
        sys.exit(1)

    if args.preview:
        _run_preview(words, config, start, args.limit)
        return

    show_progress = not args.no_progress and sys.stderr.isatty()
    try:
        with logging_redirect_tqdm(loggers=[logger]):
            asyncio.run(_run_live(words, config, start, args.limit, show_progress))
    except KeyboardInterrupt:
        logger.info("Stopped.")


if __name__ == "__main__":
    main()
