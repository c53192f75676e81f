"""
The GameState will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game:
whose turn it is, the history of moves, taking moves back, and the status of the game.

NOTE: Not thread safe. A single caller submits one move at a time. Only the Clock is shared with another thread.
"""

import logging
from dataclasses import dataclass, field
from typing import NoReturn, Optional, Self

from src.chess.board import Board, BoardSnapshot
from src.chess.clock import Clock
from src.chess.coordinate import Coordinate
from src.chess.moves import Move
from src.core.config import ClockConfig
from src.core.exceptions import ChessError, illegal_operation, invalid_move
from src.core.shared_types import Color, GameStatus

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    board: Board
    clock: Clock
    turn_color: Color = Color.WHITE
    history: list[Move] = field(default_factory=list)
    undo_stack: list[Move] = field(default_factory=list)
    status: GameStatus = GameStatus.ACTIVE

    @classmethod
    def new(cls, config: Optional[ClockConfig] = None) -> Self:
        """To start a new game from the standard starting position."""
        return cls(board=Board.standard(), clock=Clock(config))

    # --- COMMANDS ---
    def submit_move(self, from_square: Coordinate, to_square: Coordinate) -> Move:
        """
        Attempt to make a move
        -----

        1. make sure the game is (still) going on
        2. make sure there is a piece of your own color on the starting square
        3. check if the move is legal
        4. update the board, the (history of) moves, the turn, and the clock
        5. update game status (if needed)

        Nothing changes when the move gets rejected.
        """
        if self.status.is_terminal:
            self._reject(illegal_operation(f"Game is over. status: {self.status}"))

        piece = self.board.piece(from_square)
        if piece is None:
            self._reject(invalid_move(f"There is no piece on {from_square}."))
        if piece.color != self.turn_color:
            self._reject(
                invalid_move(
                    f"It is not your turn. Waiting for {self.turn_color} to make a move first."
                )
            )

        move = next(
            (
                legal_move
                for legal_move in self.board.legal_moves_from(from_square)
                if legal_move.to_square == to_square
            ),
            None,
        )
        if move is None:
            self._reject(
                invalid_move(f"Move not allowed: {from_square}{to_square}")
            )

        self.board.execute_move(move)
        self.history.append(move)
        self.undo_stack.append(move)
        self._pass_turn()
        logger.info("%s played %s", move.moved_piece.color, move.to_uci())

        self._update_game_status()
        return move

    def undo(self) -> Move:
        """
        Take back the last move. There is no redo: the move is gone from the undo stack.
        The history keeps every move ever played, including the ones taken back.

        NOTE undoing a game-ending move reopens the game, but a clock stopped at the end stays stopped.
        """
        if not self.undo_stack:
            self._reject(illegal_operation("There is no move to take back."))

        move = self.undo_stack.pop()
        self.board.undo_move(move)
        self.turn_color = move.moved_piece.color
        self.clock.set_active(self.turn_color)
        logger.info("Took back %s", move.to_uci())

        self._update_game_status()
        return move

    def restart(self) -> None:
        """Standard starting position, empty history, white to move, clock back to its initial time."""
        self.board = Board.standard()
        self.history.clear()
        self.undo_stack.clear()
        self.turn_color = Color.WHITE
        self.status = GameStatus.ACTIVE
        self.clock.reset()
        logger.info("Game restarted")

    def agree_draw(self) -> None:
        """Both players agree to a draw."""
        if self.status.is_terminal:
            self._reject(illegal_operation(f"Game is over. status: {self.status}"))
        self._change_status(GameStatus.DRAW)

    # --- QUERIES ---
    def legal_moves(self) -> list[Move]:
        """Legal moves for the side to move (none once the game is over)."""
        if self.status.is_terminal:
            return []
        return self.board.legal_moves(self.turn_color)

    @property
    def winner(self) -> Optional[Color]:
        """
        Only defined for checkmate.
        Given we know it is checkmate, the player who is to move just got mated and the opponent must be the winner
        """
        if self.status != GameStatus.CHECKMATE:
            return None
        return self.turn_color.opposite

    def flag_fallen(self) -> Optional[Color]:
        """The color that ran out of time, if any. Advisory: moves are still accepted."""
        return next(
            (color for color in Color if self.clock.is_flag_fallen(color)), None
        )

    def snapshot(self) -> BoardSnapshot:
        return self.board.snapshot()

    # -- PRIVATE HELPERS ---
    def _pass_turn(self) -> None:
        self.turn_color = self.turn_color.opposite
        self.clock.switch_player()

    def _update_game_status(self) -> None:
        """
        Performs checks to see if game has ended and changes status accordingly.

        NOTE the turn has already been passed. At this point the turn player is the opponent of the player that just moved.
        """
        color = self.turn_color
        in_check = self.board.is_in_check(color)
        if not self.board.has_any_legal_move(color):
            new_status = GameStatus.CHECKMATE if in_check else GameStatus.STALEMATE
        elif self.board.is_insufficient_material():
            new_status = GameStatus.DRAW
        elif in_check:
            new_status = GameStatus.CHECK
        else:
            new_status = GameStatus.ACTIVE
        self._change_status(new_status)

    def _change_status(self, new_status: GameStatus) -> None:
        self.status = new_status
        if new_status.is_terminal:
            self.clock.stop()
            logger.info("Game over: %s", new_status)

    def _reject(self, error: ChessError) -> NoReturn:
        logger.info("Rejected: %s", error)
        raise error
