"""CLI entrypoint for the crossword grid generator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

from crossbreed.core.exceptions import WordListError
from crossbreed.engine.generator import CrosswordGenerator, GeneratorConfig
from crossbreed.io.render import CrosswordPrinter, render_grid
from crossbreed.io.word_list import WordEntry, load_word_list, parse_lines
from crossbreed.utils.logger import configure_logging
from crossbreed.utils.pretty import print_grid_stats


def parse_settings(pairs: List[str]) -> Dict[str, int]:
    """Turn ``KEY=VALUE`` strings into a settings mapping."""
    settings: Dict[str, int] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        settings[key.strip()] = int(value)
    return settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate crossword grids from a list of answer words",
    )
    parser.add_argument(
        "--words",
        nargs="+",
        metavar="WORD",
        help="Explicit seed words (format: WORD, WORD:Clue, optionally ending in [A] or [D])",
    )
    parser.add_argument(
        "--words-file",
        type=Path,
        metavar="FILE",
        help="File with one WORD or WORD:Clue entry per line (# comments and blank lines ignored)",
    )
    parser.add_argument(
        "--set",
        dest="settings",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a generator setting, e.g. --set max-rounds=5 (repeatable)",
    )
    parser.add_argument("--num-output", type=int, default=1, help="Number of grids to print")
    parser.add_argument("--latex", type=Path, help="Write the best grid as a cwpuzzle LaTeX document")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--hide-answers",
        action="store_true",
        help="Leave answers out of the clue lists",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if not args.words and not args.words_file:
        parser.error("provide --words and/or --words-file")

    try:
        settings = parse_settings(args.settings)
    except ValueError as exc:
        parser.error(str(exc))

    entries: List[WordEntry] = []
    try:
        if args.words:
            entries.extend(parse_lines(args.words))
        if args.words_file:
            entries.extend(load_word_list(args.words_file))
    except WordListError as exc:
        parser.error(str(exc))

    config = GeneratorConfig.from_mapping(settings)
    generator = CrosswordGenerator.from_entries(entries, config)
    generator.generate()
    best = generator.complete[: max(args.num_output, 0)]

    for index, attempt in enumerate(best, start=1):
        print_grid_stats(attempt.grid, attempt.score)
        if index < len(best):
            print()

    if args.latex and best:
        CrosswordPrinter(best[0].grid, show_answers=not args.hide_answers).print_to_file(args.latex)

    if args.output:
        payload: Dict[str, Any] = {
            "settings": settings,
            "grids": [],
        }
        for attempt in best:
            rendered = render_grid(attempt.grid, show_answers=not args.hide_answers)
            payload["grids"].append(
                {
                    "text": attempt.grid.to_string(),
                    "grid": attempt.grid.to_jsonable(),
                    "score": attempt.score.summary,
                    "across": [asdict(entry) for entry in rendered.across],
                    "down": [asdict(entry) for entry in rendered.down],
                    "move_counts": {move.value: count for move, count in attempt.move_counts.items()},
                }
            )
        output_text = json.dumps(payload, ensure_ascii=False, indent=2)
        args.output.write_text(output_text, encoding="utf-8")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
