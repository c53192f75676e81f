"""Defines the chess pieces"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.core.exceptions import invalid_position
from src.core.shared_types import Color, PieceType

if TYPE_CHECKING:
    from src.chess.coordinate import Coordinate
    from src.chess.moves import Board

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


@dataclass(frozen=True)
class Piece:
    """
    Immutable once placed. A promotion replaces the pawn by a new Piece instead of changing it.
    Identity is given by the square the piece stands on, so two white pawns compare equal.
    """

    color: Color
    type: PieceType

    @classmethod
    def from_fen(cls, character: str) -> Piece:
        # lower case: Black pieces, upper case: White pieces
        if character.lower() not in FEN_TO_PIECE:
            raise invalid_position(f"Unknown piece character: {character!r}")
        color = Color.WHITE if character.isupper() else Color.BLACK
        return cls(color, FEN_TO_PIECE[character.lower()])

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def candidate_moves(self, board: Board, at: Coordinate) -> list[Coordinate]:
        """Pseudo-legal destinations of this piece standing on `at` (king safety is checked by the Board)."""
        # imported here: moves.py needs Piece for its own type hints
        from src.chess.moves import MOVEMENT_RULES

        return MOVEMENT_RULES[self.type](self.color, at, board)
