"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass
from typing import Iterator, Optional, Self

from src.chess.coordinate import BOARD_DIMENSIONS, Coordinate
from src.chess.moves import Move, is_square_attacked, promotion_rank
from src.chess.pieces import FEN_TO_PIECE, Piece
from src.core.exceptions import invalid_move, invalid_position
from src.core.shared_types import Color, PieceType

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
MINOR_PIECES = (PieceType.BISHOP, PieceType.KNIGHT)

SquareView = Optional[tuple[Color, PieceType]]
BoardSnapshot = tuple[tuple[SquareView, ...], ...]


@dataclass
class Board:
    """64 optional slots. Every square is a key; an empty square maps to None."""

    position: dict[Coordinate, Optional[Piece]]

    @classmethod
    def empty(cls) -> Self:
        return cls({square: None for square in Coordinate.all()})

    @classmethod
    def standard(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces, again read from a1 to h1.
        """
        num_files, num_ranks = BOARD_DIMENSIONS
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != num_ranks:
            raise invalid_position(
                f"Expected {num_ranks} ranks in board string: {fen_str!r}"
            )

        board = cls.empty()
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = num_ranks - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in fen_one_rank:
                if character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                elif character.lower() in FEN_TO_PIECE:
                    if file >= num_files:
                        raise invalid_position(
                            f"Rank {fen_one_rank!r} describes more than {num_files} squares."
                        )
                    board.position[Coordinate(rank, file)] = Piece.from_fen(character)
                    file += 1
                else:
                    raise invalid_position(
                        f"Unknown character {character!r} in board string: {fen_str!r}"
                    )
            if file != num_files:
                raise invalid_position(
                    f"Rank {fen_one_rank!r} does not describe exactly {num_files} squares."
                )
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece(Coordinate(rank, file))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Self:
        """Pieces are immutable, so a copy of the slots is all a scratch board needs."""
        return type(self)(dict(self.position))

    # --- SQUARES AND PIECES ---
    def piece(self, at: Coordinate) -> Optional[Piece]:
        return self.position[at]

    def place_piece(self, piece: Piece, at: Coordinate) -> None:
        self.position[at] = piece

    def remove_piece(self, at: Coordinate) -> Optional[Piece]:
        removed = self.position[at]
        self.position[at] = None
        return removed

    def locate_color(self, color: Color) -> list[Coordinate]:
        return [
            square
            for square, piece in self.position.items()
            if piece is not None and piece.color == color
        ]

    def king_square(self, color: Color) -> Optional[Coordinate]:
        king = Piece(color, PieceType.KING)
        return next(
            (square for square, piece in self.position.items() if piece == king),
            None,
        )

    def snapshot(self) -> BoardSnapshot:
        """Read-only 8x8 view for rendering: snapshot[rank][file], rank 0 (white's back rank) first."""
        return tuple(
            tuple(
                self._square_view(Coordinate(rank, file))
                for file in range(BOARD_DIMENSIONS[0])
            )
            for rank in range(BOARD_DIMENSIONS[1])
        )

    def _square_view(self, at: Coordinate) -> SquareView:
        piece = self.piece(at)
        return None if piece is None else (piece.color, piece.type)

    # --- CHECK AND LEGALITY ---
    def is_in_check(self, color: Color) -> bool:
        """
        Is the king of `color` attacked by any of the opponent's pieces?

        NOTE: a board without a king for this color (partial test positions) is never in check.
        """
        king_square = self.king_square(color)
        if king_square is None:
            return False
        return is_square_attacked(king_square, color.opposite, self)

    def build_move(self, from_square: Coordinate, to_square: Coordinate) -> Move:
        """Record the moving piece, the piece it would capture, and whether it promotes, before anything changes."""
        moved_piece = self.piece(from_square)
        if moved_piece is None:
            raise invalid_move(f"No piece on {from_square} to build a move for.")
        return Move(
            from_square=from_square,
            to_square=to_square,
            moved_piece=moved_piece,
            captured_piece=self.piece(to_square),
            is_promotion=self._is_promotion(moved_piece, to_square),
        )

    def legal_moves(self, color: Color) -> list[Move]:
        """
        List of legal moves for the player with the `color` pieces
        ----

        1. generate candidate moves, using the basic movement rules for all pieces
        2. remove illegal options --> a move that would put you in check or you are in check and the move does not get you out of it.
        """
        return list(self._iter_legal_moves(color))

    def legal_moves_from(self, square: Coordinate) -> list[Move]:
        """The legal moves of the piece standing on `square` (empty list for an empty square)."""
        piece = self.piece(square)
        if piece is None:
            return []
        return list(self._iter_legal_moves(piece.color, [square]))

    def has_any_legal_move(self, color: Color) -> bool:
        """Stops at the first legal move found."""
        return next(self._iter_legal_moves(color), None) is not None

    def _iter_legal_moves(
        self, color: Color, squares: Optional[list[Coordinate]] = None
    ) -> Iterator[Move]:
        """
        Every candidate move gets played on a scratch copy of the board and taken back again.
        If your own king is in check in between, the move is illegal.
        """
        scratch = self.copy()
        for square in squares if squares is not None else self.locate_color(color):
            piece = self.piece(square)
            assert piece is not None
            for target in piece.candidate_moves(self, square):
                move = self.build_move(square, target)
                scratch.execute_move(move)
                leaves_king_in_check = scratch.is_in_check(color)
                scratch.undo_move(move)
                if not leaves_king_in_check:
                    yield move

    # --- MAKING AND TAKING BACK MOVES ---
    def execute_move(self, move: Move) -> Optional[Piece]:
        """
        Update the position on the board. Legality is the caller's responsibility.

        A pawn reaching the last rank is replaced (in place) by a queen of the same color.
        Returns the captured piece, if any.
        """
        moving_piece = self.remove_piece(move.from_square)
        assert moving_piece is not None, f"No piece on {move.from_square}"
        captured_piece = self.remove_piece(move.to_square)
        if self._is_promotion(moving_piece, move.to_square):
            moving_piece = Piece(moving_piece.color, PieceType.QUEEN)
        self.place_piece(moving_piece, move.to_square)
        return captured_piece

    def undo_move(self, move: Move) -> None:
        """Exact inverse of `execute_move()`. The original pawn comes back if the move had promoted it."""
        self.position[move.from_square] = move.moved_piece
        self.position[move.to_square] = move.captured_piece

    def _is_promotion(self, piece: Piece, to_square: Coordinate) -> bool:
        return piece.type == PieceType.PAWN and to_square.rank == promotion_rank(
            piece.color
        )

    # --- DRAW BY MATERIAL ---
    def is_insufficient_material(self) -> bool:
        """
        Neither side can ever deliver checkmate:
        * King vs King
        * King + Bishop or King + Knight vs King
        * King + Bishop vs King + Bishop, with both bishops on squares of the same color
        """
        others = [
            (square, piece)
            for square, piece in self.position.items()
            if piece is not None and piece.type != PieceType.KING
        ]
        if not others:
            return True

        if len(others) == 1:
            _, piece = others[0]
            return piece.type in MINOR_PIECES

        if len(others) == 2:
            (square_a, piece_a), (square_b, piece_b) = others
            return (
                piece_a.type == piece_b.type == PieceType.BISHOP
                and piece_a.color != piece_b.color
                and square_a.is_light == square_b.is_light
            )
        return False
