"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from src.core.exceptions import invalid_position

# Chess board is always 8x8: (files, ranks)
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


@dataclass(frozen=True)
class Coordinate:
    """Zero-based rank/file pair: a1 is (0, 0), h8 is (7, 7)"""

    rank: int
    file: int

    def __post_init__(self) -> None:
        if not is_within_bounds(self.rank, self.file):
            raise invalid_position(
                f"Coordinate out of range: rank={self.rank}, file={self.file}"
            )

    @classmethod
    def from_algebraic(cls, text: str) -> Coordinate:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(text) != 2 or text[0] not in FILE_NAMES or text[1] not in RANK_NAMES:
            raise invalid_position(f"Cannot interpret {text!r} as a square name.")
        return cls(rank=RANK_NAMES.index(text[1]), file=FILE_NAMES.index(text[0]))

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.file]}{RANK_NAMES[self.rank]}"

    def offset(self, d_rank: int, d_file: int) -> Optional[Coordinate]:
        """The square a step of (d_rank, d_file) away, or None if that falls off the board."""
        rank, file = self.rank + d_rank, self.file + d_file
        if not is_within_bounds(rank, file):
            return None
        return Coordinate(rank, file)

    @property
    def is_light(self) -> bool:
        # a1 is a dark square
        return (self.rank + self.file) % 2 == 1

    @classmethod
    def all(cls) -> Iterator[Coordinate]:
        """All 64 squares, a1, b1, ..., h1, a2, ..., h8"""
        for rank in range(BOARD_DIMENSIONS[1]):
            for file in range(BOARD_DIMENSIONS[0]):
                yield cls(rank, file)

    def __str__(self) -> str:
        return self.to_algebraic()


def is_within_bounds(rank: int, file: int) -> bool:
    return (0 <= file < BOARD_DIMENSIONS[0]) and (0 <= rank < BOARD_DIMENSIONS[1])
