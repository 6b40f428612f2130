"""Seed word list parsing.

One entry per line: ``ANSWER`` or ``ANSWER:clue text``, optionally ending with a
direction marker ``[A]``, ``[ACROSS]``, ``[D]`` or ``[DOWN]``. Blank lines and lines
starting with ``#`` are skipped.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional

from ..core.constants import VALID_CHARS, Direction
from ..core.exceptions import WordListError
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DIRECTION_MARKER = re.compile(r"\s*\[(A|ACROSS|D|DOWN)\]\s*$", re.IGNORECASE)
MIN_ANSWER_LENGTH = 2


class WordEntry(NamedTuple):
    answer: str
    clue: str = ""
    required_direction: Optional[Direction] = None


def sanitise_answer(text: str) -> str:
    return "".join(char for char in text.upper() if char in VALID_CHARS)


def parse_entry(line: str) -> WordEntry:
    required_direction: Optional[Direction] = None
    marker = DIRECTION_MARKER.search(line)
    if marker:
        required_direction = Direction.ACROSS if marker.group(1).upper().startswith("A") else Direction.DOWN
        line = line[: marker.start()]

    answer_text, _, clue = line.partition(":")
    answer = sanitise_answer(answer_text)
    if len(answer) < MIN_ANSWER_LENGTH:
        raise WordListError(f"Answer {answer_text.strip()!r} has fewer than {MIN_ANSWER_LENGTH} letters")
    return WordEntry(answer, clue.strip(), required_direction)


def parse_lines(lines: Iterable[str]) -> List[WordEntry]:
    entries: List[WordEntry] = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(parse_entry(line))
    return entries


def parse_word_list(text: str) -> List[WordEntry]:
    return parse_lines(text.splitlines())


def load_word_list(path: Path | str) -> List[WordEntry]:
    """Read entries from a file, one entry per line."""

    entries = parse_word_list(Path(path).read_text(encoding="utf-8"))
    LOGGER.info("Loaded %s words from %s", len(entries), path)
    return entries
