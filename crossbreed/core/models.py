"""Data models supporting the crossword grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .constants import CellType, Direction, Location
from .exceptions import CellIsBoundaryError, CellLetterMismatchError, CellWordIdMismatchError


@dataclass
class Cell:
    """Grid cell: empty, black (word boundary) or filled with a letter and its owners."""

    type: CellType = CellType.EMPTY
    letter: Optional[str] = None
    across_word_id: Optional[int] = None
    down_word_id: Optional[int] = None

    @classmethod
    def filled(
        cls,
        letter: str,
        across_word_id: Optional[int] = None,
        down_word_id: Optional[int] = None,
    ) -> "Cell":
        return cls(CellType.FILLED, letter, across_word_id, down_word_id)

    def is_empty(self) -> bool:
        return self.type == CellType.EMPTY

    def is_black(self) -> bool:
        return self.type == CellType.BLACK

    def contains_letter(self) -> bool:
        return self.type == CellType.FILLED

    def is_intersection(self) -> bool:
        return self.across_word_id is not None and self.down_word_id is not None

    def word_id(self, direction: Direction) -> Optional[int]:
        if direction is Direction.ACROSS:
            return self.across_word_id
        return self.down_word_id

    def to_char(self) -> str:
        if self.type == CellType.FILLED and self.letter:
            return self.letter
        return " "

    def set_black(self) -> None:
        self._clear(CellType.BLACK)

    def set_empty(self) -> None:
        self._clear(CellType.EMPTY)

    def _clear(self, cell_type: CellType) -> None:
        self.type = cell_type
        self.letter = None
        self.across_word_id = None
        self.down_word_id = None

    def add_word(self, word_id: int, letter: str, direction: Direction) -> None:
        """Claim this cell for ``word_id`` in ``direction``.

        Raises a :class:`~crossbreed.core.exceptions.CellError` subclass and leaves the
        cell untouched when the letter or the existing owner in ``direction`` disagree.
        """

        if self.type == CellType.BLACK:
            raise CellIsBoundaryError(f"Cannot place letter {letter} on a boundary cell")
        if self.type == CellType.FILLED:
            if self.letter != letter:
                raise CellLetterMismatchError(
                    f"Existing letter {self.letter} doesn't match new letter {letter}"
                )
            existing = self.word_id(direction)
            if existing is not None and existing != word_id:
                raise CellWordIdMismatchError(
                    f"Existing {direction.value.lower()} word {existing} doesn't match new word {word_id}"
                )
        self.type = CellType.FILLED
        self.letter = letter
        if direction is Direction.ACROSS:
            self.across_word_id = word_id
        else:
            self.down_word_id = word_id

    def remove_word(self, word_id: int) -> None:
        if self.type != CellType.FILLED:
            return
        if self.across_word_id == word_id:
            self.across_word_id = None
        if self.down_word_id == word_id:
            self.down_word_id = None
        if self.across_word_id is None and self.down_word_id is None:
            self.set_empty()

    def update_word_id(self, old_word_id: int, new_word_id: int) -> None:
        if self.across_word_id == old_word_id:
            self.across_word_id = new_word_id
        if self.down_word_id == old_word_id:
            self.down_word_id = new_word_id


@dataclass(frozen=True)
class WordPlacement:
    start: Location
    end: Location
    direction: Direction


@dataclass
class Word:
    """An answer with its clue and, once placed, where it sits in the grid."""

    text: str
    clue: str = ""
    required_direction: Optional[Direction] = None
    placement: Optional[WordPlacement] = None

    def __len__(self) -> int:
        return len(self.text)

    def is_placed(self) -> bool:
        return self.placement is not None

    def allows_direction(self, direction: Direction) -> bool:
        return self.required_direction is None or self.required_direction is direction

    def place(self, start: Location, direction: Direction) -> None:
        end = start.step(len(self.text) - 1, direction)
        self.placement = WordPlacement(start, end, direction)

    def remove_placement(self) -> None:
        self.placement = None

    def extend(self, letter: str) -> None:
        """Append a letter, pushing the end of an existing placement one step further."""

        self.text += letter
        if self.placement is not None:
            self.placement = WordPlacement(
                self.placement.start,
                self.placement.end.step(1, self.placement.direction),
                self.placement.direction,
            )

    def locations(self) -> List[Location]:
        if self.placement is None:
            return []
        start, direction = self.placement.start, self.placement.direction
        return [start.step(i, direction) for i in range(len(self.text))]
