"""Unit tests for /src/chess/moves.py"""

from typing import Callable

import pytest

from src.chess.board import Board
from src.chess.coordinate import Coordinate
from src.chess.moves import (
    Color,
    Move,
    Piece,
    PieceType,
    candidate_bishop_moves,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    candidate_rook_moves,
    is_attacked_by_pawn,
    is_square_attacked,
    raycasting_move,
)


BoardFactory = Callable[[dict[str, str]], Board]


def squares(*names: str) -> set[Coordinate]:
    return {Coordinate.from_algebraic(name) for name in names}


def sq(name: str) -> Coordinate:
    return Coordinate.from_algebraic(name)


# -- MOVE RECORD, UCI NOTATION ---
@pytest.mark.parametrize(
    "from_name, to_name, uci",
    [("e2", "e4", "e2e4"), ("a1", "a5", "a1a5"), ("g8", "f6", "g8f6")],
)
def test_converting_into_uci(from_name: str, to_name: str, uci: str) -> None:
    move = Move(sq(from_name), sq(to_name), Piece(Color.WHITE, PieceType.ROOK))
    assert move.to_uci() == uci


def test_converting_into_uci_incl_promotion() -> None:
    """Pawns are always promoted to a queen"""
    move = Move(
        sq("e7"), sq("e8"), Piece(Color.WHITE, PieceType.PAWN), is_promotion=True
    )
    assert move.to_uci() == "e7e8q"


# --- MOVEMENT RULES ---
def test_raycasting_move_empty_board() -> None:
    """On an empty board, movements should be unrestricted. Should only be restricted by board dimensions"""
    board = Board.empty()
    horizontal = [(0, 1), (0, -1)]
    targets = raycasting_move(Color.WHITE, sq("a5"), board, horizontal)
    assert set(targets) == squares("b5", "c5", "d5", "e5", "f5", "g5", "h5")


def test_raycasting_move_w_enemy_blocker(make_board: BoardFactory) -> None:
    """When running into enemy piece, still include it (it can be captured)"""
    board = make_board({"d2": "R", "d5": "p"})
    vertical = [(1, 0), (-1, 0)]
    targets = raycasting_move(Color.WHITE, sq("d2"), board, vertical)
    assert set(targets) == squares("d1", "d3", "d4", "d5")


def test_raycasting_move_w_own_blocker(make_board: BoardFactory) -> None:
    """Stop right before your own piece"""
    board = make_board({"d2": "R", "d5": "P"})
    vertical = [(1, 0), (-1, 0)]
    targets = raycasting_move(Color.WHITE, sq("d2"), board, vertical)
    assert set(targets) == squares("d1", "d3", "d4")


@pytest.mark.parametrize(
    "rule, square_name, expected_count",
    [
        (candidate_rook_moves, "d4", 14),
        (candidate_rook_moves, "a1", 14),
        (candidate_bishop_moves, "d4", 13),
        (candidate_bishop_moves, "a1", 7),
        (candidate_queen_moves, "d4", 27),
        (candidate_queen_moves, "a1", 21),
        (candidate_knight_moves, "d4", 8),
        (candidate_knight_moves, "a1", 2),
        (candidate_knight_moves, "b1", 3),
        (candidate_king_moves, "d4", 8),
        (candidate_king_moves, "e1", 5),
        (candidate_king_moves, "h8", 3),
    ],
)
def test_number_of_moves_on_empty_board(rule, square_name: str, expected_count: int) -> None:
    """A lone piece can only be restricted by the edges of the board"""
    targets = rule(Color.WHITE, sq(square_name), Board.empty())
    assert len(targets) == expected_count
    assert len(set(targets)) == expected_count


def test_knight_jumps_over_pieces_but_not_onto_own() -> None:
    """Standard position: the knight on b1 is surrounded, but can still jump to a3 and c3. d2 holds its own pawn."""
    board = Board.standard()
    targets = candidate_knight_moves(Color.WHITE, sq("b1"), board)
    assert set(targets) == squares("a3", "c3")


def test_king_captures_but_does_not_step_on_own_pieces(make_board: BoardFactory) -> None:
    board = make_board({"e1": "K", "d1": "Q", "d2": "p", "f2": "P"})
    targets = candidate_king_moves(Color.WHITE, sq("e1"), board)
    assert set(targets) == squares("d2", "e2", "f1")


def test_queen_combines_rook_and_bishop(make_board: BoardFactory) -> None:
    board = make_board({"d4": "q", "d6": "P", "f6": "p", "b4": "N"})
    queen = set(candidate_queen_moves(Color.BLACK, sq("d4"), board))
    rook = set(candidate_rook_moves(Color.BLACK, sq("d4"), board))
    bishop = set(candidate_bishop_moves(Color.BLACK, sq("d4"), board))
    assert queen == rook | bishop
    assert sq("d6") in queen  # capture
    assert sq("f6") not in queen  # own piece
    assert sq("b4") in queen and sq("a4") not in queen


# --- PAWNS ---
@pytest.mark.parametrize(
    "color, start, expected",
    [
        (Color.WHITE, "e2", ("e3", "e4")),
        (Color.BLACK, "e7", ("e6", "e5")),
        (Color.WHITE, "e3", ("e4",)),
        (Color.BLACK, "d5", ("d4",)),
    ],
)
def test_pawn_pushes(color: Color, start: str, expected: tuple[str, ...]) -> None:
    """Two squares forward only from the starting rank"""
    board = Board.empty()
    pawn = Piece(color, PieceType.PAWN)
    board.place_piece(pawn, sq(start))
    assert set(candidate_pawn_moves(color, sq(start), board)) == squares(*expected)


@pytest.mark.parametrize(
    "blocker, expected",
    [
        ("e3", ()),  # blocks both pushes
        ("e4", ("e3",)),  # only blocks the double push
    ],
)
@pytest.mark.parametrize("blocking_piece", ["n", "N"])
def test_pawn_double_push_blocked(
    make_board: BoardFactory, blocker: str, expected: tuple[str, ...], blocking_piece: str
) -> None:
    """Any piece (own or opponent's) on either square in front stops the double push. Pawns never capture forward."""
    board = make_board({"e2": "P", blocker: blocking_piece})
    assert set(candidate_pawn_moves(Color.WHITE, sq("e2"), board)) == squares(*expected)


def test_pawn_captures_diagonally(make_board: BoardFactory) -> None:
    """Only an opponent's piece can be taken. Diagonal onto an empty square or own piece is not allowed."""
    board = make_board({"e4": "P", "d5": "p", "f5": "N"})
    assert set(candidate_pawn_moves(Color.WHITE, sq("e4"), board)) == squares(
        "e5", "d5"
    )


def test_black_pawn_captures_down_the_board(make_board: BoardFactory) -> None:
    board = make_board({"e5": "p", "d4": "P", "f4": "P", "e4": "B"})
    assert set(candidate_pawn_moves(Color.BLACK, sq("e5"), board)) == squares(
        "d4", "f4"
    )


def test_pawn_on_edge_file(make_board: BoardFactory) -> None:
    board = make_board({"a2": "P", "b3": "p"})
    assert set(candidate_pawn_moves(Color.WHITE, sq("a2"), board)) == squares(
        "a3", "a4", "b3"
    )


def test_pawn_push_to_last_rank_is_still_a_pawn_move(make_board: BoardFactory) -> None:
    """Generation reports the square. The promotion itself happens when the board executes the move."""
    board = make_board({"e7": "P"})
    assert candidate_pawn_moves(Color.WHITE, sq("e7"), board) == [sq("e8")]
    assert board.piece(sq("e7")) == Piece(Color.WHITE, PieceType.PAWN)


def test_generation_ignores_whose_turn_it_is() -> None:
    """Both colors generate their moves from the same board"""
    board = Board.standard()
    assert set(candidate_pawn_moves(Color.BLACK, sq("d7"), board)) == squares("d6", "d5")
    assert set(candidate_pawn_moves(Color.WHITE, sq("d2"), board)) == squares("d3", "d4")


# --- ATTACKING RULES ---
def test_pawn_attacks(make_board: BoardFactory) -> None:
    board = make_board({"d4": "P", "d5": "p"})
    assert is_attacked_by_pawn(sq("e5"), Color.WHITE, board)
    assert is_attacked_by_pawn(sq("c5"), Color.WHITE, board)
    assert not is_attacked_by_pawn(sq("d5"), Color.WHITE, board)
    assert is_attacked_by_pawn(sq("e4"), Color.BLACK, board)
    assert not is_attacked_by_pawn(sq("e6"), Color.BLACK, board)


def test_sliding_attack_is_blocked(make_board: BoardFactory) -> None:
    board = make_board({"a1": "R", "a4": "p", "h8": "B", "e5": "n"})
    assert is_square_attacked(sq("a4"), Color.WHITE, board)
    assert not is_square_attacked(sq("a5"), Color.WHITE, board)
    assert is_square_attacked(sq("e5"), Color.WHITE, board)
    assert not is_square_attacked(sq("d4"), Color.WHITE, board)


def test_queen_attacks_along_both_lines(make_board: BoardFactory) -> None:
    board = make_board({"d1": "q"})
    assert is_square_attacked(sq("d8"), Color.BLACK, board)
    assert is_square_attacked(sq("h5"), Color.BLACK, board)
    assert is_square_attacked(sq("a1"), Color.BLACK, board)
    assert not is_square_attacked(sq("e3"), Color.BLACK, board)
    assert not is_square_attacked(sq("d8"), Color.WHITE, board)


@pytest.mark.parametrize(
    "placement",
    [
        "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR",
        "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR",
        "4k3/8/8/8/8/8/3n4/4K3",
        "4k3/5P2/8/8/8/8/8/4K3",
        "4k3/8/8/1B6/8/8/8/4K3",
        "4k3/8/8/8/8/8/8/R3K3",
    ],
)
@pytest.mark.parametrize("color", [Color.WHITE, Color.BLACK])
def test_attack_rules_match_candidate_moves(placement: str, color: Color) -> None:
    """Is the king attacked <==> does any opponent's piece have the king's square among its candidate moves"""
    board = Board.from_fen(placement)
    king_square = board.king_square(color)
    assert king_square is not None

    opponent = color.opposite
    by_candidates = any(
        king_square in board.piece(square).candidate_moves(board, square)
        for square in board.locate_color(opponent)
    )
    assert is_square_attacked(king_square, opponent, board) == by_candidates
