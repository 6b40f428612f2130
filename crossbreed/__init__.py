"""Crossword grid synthesis from an unordered list of answer words.

This package exposes the public API surface via:

- ``crossbreed.engine.generator.CrosswordGenerator``: evolves grids from a word list.
- ``crossbreed.engine.grid.CrosswordGrid``: placement, validity and merging of one grid.
- ``crossbreed.io.word_list`` and ``crossbreed.io.render``: seed lists in, rendered grids out.
"""

from .engine.generator import CrosswordGenerator, GeneratorConfig
from .engine.grid import CrosswordGrid
from .io.word_list import WordEntry, load_word_list, parse_word_list

__all__ = [
    "CrosswordGenerator",
    "CrosswordGrid",
    "GeneratorConfig",
    "WordEntry",
    "load_word_list",
    "parse_word_list",
]

__version__ = "0.1.0"
