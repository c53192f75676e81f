"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.chess.coordinate import Coordinate
from src.core.shared_types import Color, GameStatus, PieceType


# --- REQUEST MODELS ---
class MoveRequest(BaseModel):
    """Squares in algebraic notation, as split up by whatever reads the player's input."""

    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        # raises ChessError (INVALID_POSITION), which pydantic lets through untouched
        Coordinate.from_algebraic(value)
        return value

    def coordinates(self) -> tuple[Coordinate, Coordinate]:
        return (
            Coordinate.from_algebraic(self.from_square),
            Coordinate.from_algebraic(self.to_square),
        )


# --- RESPONSE MODELS ---
class PieceView(BaseModel):
    color: Color
    type: PieceType


class GameResponse(BaseModel):
    status: GameStatus
    turn: Color
    # board[rank][file], rank 0 is white's back rank. None for an empty square.
    board: list[list[Optional[PieceView]]]
    move_history: list[str]
    winner: Optional[Color]
    white_remaining: float
    black_remaining: float
    flag_fallen: Optional[Color]
