"""Orchestration of communication from the presentation loop to the rules engine (and the reverse direction)."""

from typing import Optional

from src.api.models import GameResponse, MoveRequest, PieceView
from src.chess.board import BoardSnapshot
from src.chess.coordinate import Coordinate
from src.chess.game import GameState
from src.core.config import ClockConfig
from src.core.shared_types import Color


class ChessService:
    """Owns a single game and translates requests into GameState commands."""

    def __init__(self, config: Optional[ClockConfig] = None) -> None:
        self.game = GameState.new(config)

    # -- Commands ---
    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt. ChessError propagates to the caller, who can show it and ask again."""
        from_square, to_square = request.coordinates()
        self.game.submit_move(from_square, to_square)
        return self.get_state()

    def undo(self) -> GameResponse:
        self.game.undo()
        return self.get_state()

    def restart(self) -> GameResponse:
        self.game.restart()
        return self.get_state()

    def agree_draw(self) -> GameResponse:
        self.game.agree_draw()
        return self.get_state()

    def start_clock(self) -> GameResponse:
        self.game.clock.start()
        return self.get_state()

    def stop_clock(self) -> GameResponse:
        self.game.clock.stop()
        return self.get_state()

    # -- Queries ---
    def legal_moves(self, square: Optional[str] = None) -> list[str]:
        """
        Legal moves (UCI notation) of the side to move.
        ----
        When a square is given, only the moves of the piece standing there (used to highlight destinations).
        """
        if square is None:
            return [move.to_uci() for move in self.game.legal_moves()]

        coordinate = Coordinate.from_algebraic(square)
        piece = self.game.board.piece(coordinate)
        if (
            self.game.status.is_terminal
            or piece is None
            or piece.color != self.game.turn_color
        ):
            return []
        return [move.to_uci() for move in self.game.board.legal_moves_from(coordinate)]

    def get_state(self) -> GameResponse:
        game = self.game
        return GameResponse(
            status=game.status,
            turn=game.turn_color,
            board=self._board_view(game.snapshot()),
            move_history=[move.to_uci() for move in game.history],
            winner=game.winner,
            white_remaining=game.clock.remaining(Color.WHITE),
            black_remaining=game.clock.remaining(Color.BLACK),
            flag_fallen=game.flag_fallen(),
        )

    # -- Internal helpers --
    def _board_view(self, snapshot: BoardSnapshot) -> list[list[Optional[PieceView]]]:
        return [
            [
                None if square is None else PieceView(color=square[0], type=square[1])
                for square in rank
            ]
            for rank in snapshot
        ]
