"""
Errors raised by the domain layer.

One exception type carries an `ErrorKind`, so callers match on `error.kind` instead of catching a class hierarchy.
NOTE: ChessError is not a ValueError on purpose. Pydantic would otherwise wrap it into a ValidationError inside validators.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    INVALID_POSITION = "invalid position"
    INVALID_MOVE = "invalid move"
    ILLEGAL_OPERATION = "illegal operation"


class ChessError(Exception):
    """Validation failure reported to the caller. State is never mutated when one is raised."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(f"{kind}: {message}")
        self.kind = kind
        self.message = message


def invalid_position(message: str) -> ChessError:
    return ChessError(ErrorKind.INVALID_POSITION, message)


def invalid_move(message: str) -> ChessError:
    return ChessError(ErrorKind.INVALID_MOVE, message)


def illegal_operation(message: str) -> ChessError:
    return ChessError(ErrorKind.ILLEGAL_OPERATION, message)
