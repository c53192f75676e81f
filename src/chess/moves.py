"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define candidate move sets for each piece type.


Legality (not leaving your own king in check) is checked later by the Board
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.chess.coordinate import BOARD_DIMENSIONS, Coordinate
from src.chess.pieces import PIECE_TO_FEN, Piece
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, at: Coordinate) -> Optional[Piece]: ...


Vector = tuple[int, int]  # (d_rank, d_file)

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
KNIGHT_JUMPS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_STEPS: list[Vector] = STRAIGHTS + DIAGONALS


@dataclass(frozen=True)
class Move:
    """
    Record of an accepted (or simulated) move. Never mutated once created.

    captured_piece is set iff the destination held an opposing piece before the move.
    """

    from_square: Coordinate
    to_square: Coordinate
    moved_piece: Piece
    captured_piece: Optional[Piece] = None
    is_promotion: bool = False

    def to_uci(self) -> str:
        """
        Universal Chess Interface notation, e.g. "e2e4", or "e7e8q" for a pawn that got promoted to a queen.
        """
        promotion = PIECE_TO_FEN[PieceType.QUEEN] if self.is_promotion else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{promotion}"


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_starting_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 2


def promotion_rank(color: Color) -> int:
    """The farthest rank, seen from the player with the `color` pieces"""
    return BOARD_DIMENSIONS[1] - 1 if color == Color.WHITE else 0


# --- MOVEMENT RULES ---
def raycasting_move(
    color: Color, square: Coordinate, board: Board, directions: list[Vector]
) -> list[Coordinate]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.

    * own piece: stop before it
    * opponent's piece: stop on it (it can be captured)
    """
    targets: list[Coordinate] = []
    for dr, df in directions:
        target = square.offset(dr, df)
        while target is not None:
            occupant = board.piece(target)
            if occupant is not None:
                if occupant.color != color:
                    targets.append(target)
                break
            targets.append(target)
            target = target.offset(dr, df)
    return targets


def single_step_move(
    color: Color, square: Coordinate, board: Board, deltas: list[Vector]
) -> list[Coordinate]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    targets: list[Coordinate] = []
    for dr, df in deltas:
        target = square.offset(dr, df)
        if target is None:
            continue
        occupant = board.piece(target)
        if occupant is None or occupant.color != color:
            targets.append(target)
    return targets


def candidate_pawn_moves(
    color: Color, square: Coordinate, board: Board
) -> list[Coordinate]:
    """
    A pawn:
    - moves by a single square forward (only onto an empty square).
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally (only when an opponent's piece stands there)

    NOTE: reaching the last rank is still reported as a plain pawn move. Promotion happens when the Board executes it.
    """
    targets: list[Coordinate] = []
    direction = pawn_direction(color)

    one_step = square.offset(direction, 0)
    if one_step is not None and board.piece(one_step) is None:
        targets.append(one_step)
        two_steps = one_step.offset(direction, 0)
        if (
            square.rank == pawn_starting_rank(color)
            and two_steps is not None
            and board.piece(two_steps) is None
        ):
            targets.append(two_steps)

    for df in (-1, 1):
        target = square.offset(direction, df)
        if target is None:
            continue
        occupant = board.piece(target)
        if occupant is not None and occupant.color != color:
            targets.append(target)
    return targets


def candidate_knight_moves(
    color: Color, square: Coordinate, board: Board
) -> list[Coordinate]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(color, square, board, KNIGHT_JUMPS)


def candidate_bishop_moves(
    color: Color, square: Coordinate, board: Board
) -> list[Coordinate]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(color, square, board, DIAGONALS)


def candidate_rook_moves(
    color: Color, square: Coordinate, board: Board
) -> list[Coordinate]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(color, square, board, STRAIGHTS)


def candidate_queen_moves(
    color: Color, square: Coordinate, board: Board
) -> list[Coordinate]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(color, square, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(
    color: Color, square: Coordinate, board: Board
) -> list[Coordinate]:
    """The king can move by a single square at the time."""
    return single_step_move(color, square, board, KING_STEPS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Color, Coordinate, Board], list[Coordinate]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Coordinate,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    ---
    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color that
    is allowed to move along the given direction?"_

    ---
    Returns TRUE if the first piece encountered along a direction is one of the attackers.
    """
    for dr, df in directions:
        target = square.offset(dr, df)
        while target is not None:
            piece_found = board.piece(target)
            if piece_found is not None:
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
            target = target.offset(dr, df)
    return False


def single_step_attack(
    square: Coordinate,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """Single step version of `raycasting_attack()` for pawns, kings, and knights."""
    for dr, df in deltas:
        target = square.offset(dr, df)
        if target is None:
            continue
        piece_found = board.piece(target)
        if piece_found == Piece(by_color, by_piece_type):
            return True
    return False


def is_attacked_by_pawn(square: Coordinate, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. Hence, the vectors point opposite to the ones in `candidate_pawn_moves()`
    """
    back = -pawn_direction(by_color)
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, [(back, 1), (back, -1)]
    )


def is_attacked_by_knight(square: Coordinate, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_JUMPS)


def is_attacked_by_king(square: Coordinate, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_STEPS)


def is_attacked_along_diagonals(
    square: Coordinate, by_color: Color, board: Board
) -> bool:
    """Bishops and the queen"""
    return raycasting_attack(
        square, by_color, (PieceType.BISHOP, PieceType.QUEEN), board, DIAGONALS
    )


def is_attacked_along_straights(
    square: Coordinate, by_color: Color, board: Board
) -> bool:
    """Rooks and the queen"""
    return raycasting_attack(
        square, by_color, (PieceType.ROOK, PieceType.QUEEN), board, STRAIGHTS
    )


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Coordinate, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_by_king,
    is_attacked_along_diagonals,
    is_attacked_along_straights,
]


def is_square_attacked(square: Coordinate, by_color: Color, board: Board) -> bool:
    """
    For a square holding a piece of the other color (e.g. a king) this is the same as asking if any of the
    `by_color` pieces has `square` among its candidate moves. Pawn pushes never capture, so they never attack.
    """
    return any(rule(square, by_color, board) for rule in ATTACK_RULES)
