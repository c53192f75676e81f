"""
Type definitions used across layers
"""

from enum import StrEnum


class GameStatus(StrEnum):
    ACTIVE = "active"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        """No further moves are accepted once the game reached one of these."""
        return self in (GameStatus.CHECKMATE, GameStatus.STALEMATE, GameStatus.DRAW)


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
