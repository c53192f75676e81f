"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Iterator

import pytest

from src.chess.board import Board
from src.chess.clock import Clock
from src.chess.coordinate import Coordinate
from src.chess.game import GameState
from src.chess.pieces import Piece
from src.core.config import ClockConfig

BoardFactory = Callable[[dict[str, str]], Board]


@pytest.fixture
def clock_config() -> ClockConfig:
    """Ticks once per second: the worker never fires during a quick unit test, so tests drive `tick()` themselves."""
    return ClockConfig(initial_seconds=60.0, tick_seconds=1.0)


@pytest.fixture
def make_board() -> BoardFactory:
    """Call the inner function with a mapping of square names to FEN piece characters, e.g. {"e1": "K", "e8": "k"}"""

    def _create_board(pieces: dict[str, str]) -> Board:
        board = Board.empty()
        for square_name, character in pieces.items():
            board.place_piece(
                Piece.from_fen(character), Coordinate.from_algebraic(square_name)
            )
        return board

    return _create_board


@pytest.fixture
def game(clock_config: ClockConfig) -> Iterator[GameState]:
    """A new game in the standard starting position. Makes sure the clock worker never outlives the test."""
    game = GameState.new(clock_config)
    try:
        yield game
    finally:
        game.clock.stop()


@pytest.fixture
def game_from_board(
    clock_config: ClockConfig,
) -> Iterator[Callable[[Board], GameState]]:
    """Start a game (white to move) from a custom position"""
    clocks: list[Clock] = []

    def _create_game(board: Board) -> GameState:
        clock = Clock(clock_config)
        clocks.append(clock)
        return GameState(board=board, clock=clock)

    try:
        yield _create_game
    finally:
        for clock in clocks:
            clock.stop()
