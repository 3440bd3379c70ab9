"""
Move application and a small game wrapper around a Board.

Move generation never mutates the board; this module is the one place that
does.  It keeps each piece's ``position`` in step with the square the board
stores it under.  Turn order, check and game end are not tracked: either
side may move at any time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from xiangqi_rules.board import (
    INITIAL_LAYOUT,
    Board,
    Layout,
    OffBoardError,
    Piece,
    Square,
    in_bounds,
)
from xiangqi_rules.move_gen import legal_moves

logger = logging.getLogger(__name__)


class NoPieceError(ValueError):
    """Raised when a move starts from an empty square."""


class IllegalMoveError(ValueError):
    """Raised when the destination is not among the piece's legal moves."""


@dataclass
class MoveRecord:
    piece: Piece
    src: Square
    dst: Square
    captured: Optional[Piece] = None


# ---------------------------------------------------------------------------
# Move application
# ---------------------------------------------------------------------------

def apply_move(board: Board, src: Square, dst: Square) -> MoveRecord:
    """Move the piece on *src* to *dst*, capturing whatever stands there.

    Raises
    ------
    OffBoardError
        If either square is outside the grid.
    NoPieceError
        If *src* is empty.
    IllegalMoveError
        If *dst* is not a legal destination for the piece.
    """
    for square in (src, dst):
        if not in_bounds(square):
            raise OffBoardError(f"Square {square} is off the board.")

    piece = board.get_occupant(src)
    if piece is None:
        raise NoPieceError(f"No piece on {src}.")

    if dst not in legal_moves(board, piece):
        raise IllegalMoveError(
            f"{piece.side.value} {piece.kind.value} cannot move {src} -> {dst}."
        )

    captured = board.get_occupant(dst)
    board.set_occupant(src, None)
    board.set_occupant(dst, piece)
    piece.position = dst
    if captured is not None:
        # A captured piece is off the board; its position is left as-is.
        logger.debug("%r captures %r", piece, captured)
    logger.debug("Moved %s %s %s -> %s", piece.side.value, piece.kind.value, src, dst)
    return MoveRecord(piece=piece, src=src, dst=dst, captured=captured)


def find_desynced(board: Board) -> List[Square]:
    """Return squares whose occupant's ``position`` disagrees with the square.

    Diagnostic helper; the engine itself never calls it.
    """
    return [square for square, piece in board.pieces() if piece.position != square]


# ---------------------------------------------------------------------------
# Game
# ---------------------------------------------------------------------------

class Game:
    """A board plus a move counter and the last move played."""

    def __init__(self, layout: Optional[Layout] = None) -> None:
        self.layout: Layout = dict(INITIAL_LAYOUT if layout is None else layout)
        self.board: Board = Board.from_layout(self.layout)
        self.move_count: int = 0
        self.last_move: Optional[MoveRecord] = None

    def reset(self) -> None:
        """Restore the layout the game was created with."""
        self.board = Board.from_layout(self.layout)
        self.move_count = 0
        self.last_move = None

    def occupant_at(self, square: Square) -> Optional[Piece]:
        return self.board.get_occupant(square)

    def legal_moves_at(self, square: Square) -> List[Square]:
        """Destinations for the piece on *square*.

        Raises NoPieceError if the square is empty.
        """
        piece = self.board.get_occupant(square)
        if piece is None:
            raise NoPieceError(f"No piece on {square}.")
        return legal_moves(self.board, piece)

    def move(self, src: Square, dst: Square) -> MoveRecord:
        record = apply_move(self.board, src, dst)
        self.move_count += 1
        self.last_move = record
        return record

    def clone(self) -> Game:
        """Independent copy; pieces in the copy are new objects."""
        new = Game.__new__(Game)
        new.layout = dict(self.layout)
        new.board = self.board.copy()
        new.move_count = self.move_count
        if self.last_move is None:
            new.last_move = None
        else:
            new.last_move = MoveRecord(
                piece=new.board.get_occupant(self.last_move.dst),
                src=self.last_move.src,
                dst=self.last_move.dst,
                captured=self.last_move.captured,
            )
        return new

    def __repr__(self) -> str:
        return f"Game(pieces={len(self.board)}, move={self.move_count})"
