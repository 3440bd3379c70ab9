"""
Board representation for the 11x11 Chinese-Chess-style rules engine.

Defines the coordinate system, the closed set of sides and piece kinds,
the Piece record, the Board occupancy grid, the default start layout and
a compact text codec used for configuration and display.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BOARD_SIZE: int = 11
NUM_SQUARES: int = BOARD_SIZE * BOARD_SIZE  # 121

MIN_COORD: int = 0
MAX_COORD: int = BOARD_SIZE - 1  # 10

# Row 5 is the river.  Soldiers gain sideways steps strictly past it.
RIVER_ROW: int = 5

Square = Tuple[int, int]  # (x, y)


# ---------------------------------------------------------------------------
# Sides and piece kinds
# ---------------------------------------------------------------------------

class Side(Enum):
    BLACK = "black"
    RED = "red"


class PieceKind(Enum):
    GENERAL = "general"
    GUARD = "guard"
    ELEPHANT = "elephant"
    HORSE = "horse"
    CHARIOT = "chariot"
    CANNON = "cannon"
    SOLDIER = "soldier"


# Direction of travel along y for each side's soldiers.
FORWARD: Dict[Side, int] = {
    Side.BLACK: 1,   # toward row 10
    Side.RED: -1,    # toward row 0
}


class OffBoardError(ValueError):
    """Raised when a square outside [0, 10] x [0, 10] is accessed."""


# ---------------------------------------------------------------------------
# Piece
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Piece:
    """One game piece.

    Pieces compare by identity: two black soldiers are different pieces.
    ``position`` is only changed by move application (see ``game.apply_move``).
    """

    kind: PieceKind
    side: Side
    position: Square

    def __repr__(self) -> str:
        return f"Piece({self.side.value} {self.kind.value} @ {self.position})"


# ---------------------------------------------------------------------------
# Coordinate helpers
# ---------------------------------------------------------------------------

def in_bounds(square: Square) -> bool:
    """True iff both coordinates lie in [0, 10]."""
    x, y = square
    return MIN_COORD <= x <= MAX_COORD and MIN_COORD <= y <= MAX_COORD


def xy_to_index(square: Square) -> int:
    """Convert (x, y) to a flat index into the board list."""
    x, y = square
    return y * BOARD_SIZE + x


def index_to_xy(index: int) -> Square:
    """Convert a flat index (0..120) back to (x, y)."""
    y, x = divmod(index, BOARD_SIZE)
    return x, y


# ---------------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------------

Layout = Dict[Square, Tuple[PieceKind, Side]]


class Board:
    """Occupancy grid: each square holds at most one Piece.

    The caller keeps ``piece.position`` and the square a piece is stored
    under in sync; the board does not re-validate this on reads.
    """

    def __init__(self) -> None:
        self._cells: List[Optional[Piece]] = [None] * NUM_SQUARES

    @classmethod
    def from_layout(cls, layout: Layout) -> Board:
        """Build a board with a fresh Piece on every square of *layout*."""
        board = cls()
        for square, (kind, side) in layout.items():
            board.set_occupant(square, Piece(kind, side, square))
        return board

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------

    def get_occupant(self, square: Square) -> Optional[Piece]:
        if not in_bounds(square):
            raise OffBoardError(f"Square {square} is off the board.")
        return self._cells[xy_to_index(square)]

    def set_occupant(self, square: Square, piece: Optional[Piece]) -> None:
        if not in_bounds(square):
            raise OffBoardError(f"Square {square} is off the board.")
        self._cells[xy_to_index(square)] = piece

    def pieces(self) -> Iterator[Tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every occupied square, row by row."""
        for index, piece in enumerate(self._cells):
            if piece is not None:
                yield index_to_xy(index), piece

    def locate(self, piece: Piece) -> Optional[Square]:
        """Return the square holding *piece* (by identity), or None."""
        for square, occupant in self.pieces():
            if occupant is piece:
                return square
        return None

    def copy(self) -> Board:
        """Deep copy: every piece is a new object at the same square."""
        new = Board()
        for square, piece in self.pieces():
            new.set_occupant(square, Piece(piece.kind, piece.side, piece.position))
        return new

    def __len__(self) -> int:
        return sum(1 for _ in self.pieces())

    def __repr__(self) -> str:
        return f"Board({len(self)} pieces)"


def occupant_at(board: Board, square: Square) -> Optional[Piece]:
    """Read-only occupancy query for rendering/input collaborators."""
    return board.get_occupant(square)


# ---------------------------------------------------------------------------
# Initial layout
# ---------------------------------------------------------------------------

_BACK_RANK: List[Tuple[int, PieceKind]] = [
    (1, PieceKind.CHARIOT),
    (2, PieceKind.HORSE),
    (3, PieceKind.ELEPHANT),
    (4, PieceKind.GUARD),
    (5, PieceKind.GENERAL),
    (6, PieceKind.GUARD),
    (7, PieceKind.ELEPHANT),
    (8, PieceKind.HORSE),
    (9, PieceKind.CHARIOT),
]
_CANNON_FILES: Tuple[int, ...] = (2, 8)
_SOLDIER_FILES: Tuple[int, ...] = (1, 3, 5, 7, 9)


def _build_initial_layout() -> Layout:
    """
    Black occupies rows 0-4 and advances toward row 10; Red mirrors it on
    rows 6-10.  The traditional nine files sit on x = 1..9.
    """
    layout: Layout = {}
    for side, back, cannon, soldier in (
        (Side.BLACK, 0, 2, 3),
        (Side.RED, MAX_COORD, MAX_COORD - 2, MAX_COORD - 3),
    ):
        for x, kind in _BACK_RANK:
            layout[(x, back)] = (kind, side)
        for x in _CANNON_FILES:
            layout[(x, cannon)] = (PieceKind.CANNON, side)
        for x in _SOLDIER_FILES:
            layout[(x, soldier)] = (PieceKind.SOLDIER, side)
    return layout


INITIAL_LAYOUT: Layout = _build_initial_layout()


def initial_board() -> Board:
    """Return a new board set up with ``INITIAL_LAYOUT`` (32 pieces)."""
    return Board.from_layout(INITIAL_LAYOUT)


# ---------------------------------------------------------------------------
# Text codec
# ---------------------------------------------------------------------------
# 11 rows (y = 0 first) of 11 characters, rows joined by "/".
# Upper case is Red, lower case is Black, "." is empty.

EMPTY_CHAR: str = "."

_KIND_CHAR: Dict[PieceKind, str] = {
    PieceKind.GENERAL: "k",
    PieceKind.GUARD: "a",
    PieceKind.ELEPHANT: "e",
    PieceKind.HORSE: "h",
    PieceKind.CHARIOT: "r",
    PieceKind.CANNON: "c",
    PieceKind.SOLDIER: "s",
}
_CHAR_KIND: Dict[str, PieceKind] = {v: k for k, v in _KIND_CHAR.items()}


def piece_char(piece: Optional[Piece]) -> str:
    """Single-character token for a square's occupant."""
    if piece is None:
        return EMPTY_CHAR
    ch = _KIND_CHAR[piece.kind]
    return ch.upper() if piece.side is Side.RED else ch


def layout_from_string(text: str) -> Layout:
    """Parse the compact text form into a layout mapping.

    Raises ValueError if the text does not describe an 11x11 grid of known
    tokens.
    """
    rows = text.strip().split("/")
    if len(rows) != BOARD_SIZE:
        raise ValueError(f"Expected {BOARD_SIZE} rows, got {len(rows)}.")

    layout: Layout = {}
    for y, row in enumerate(rows):
        if len(row) != BOARD_SIZE:
            raise ValueError(
                f"Row {y} has {len(row)} squares, expected {BOARD_SIZE}: {row!r}"
            )
        for x, ch in enumerate(row):
            if ch == EMPTY_CHAR:
                continue
            kind = _CHAR_KIND.get(ch.lower())
            if kind is None:
                raise ValueError(f"Unknown piece token {ch!r} at {(x, y)}.")
            layout[(x, y)] = (kind, Side.RED if ch.isupper() else Side.BLACK)
    return layout


def board_from_string(text: str) -> Board:
    return Board.from_layout(layout_from_string(text))


def board_to_string(board: Board) -> str:
    """Compact text form, the inverse of ``board_from_string``."""
    return "/".join(
        "".join(piece_char(board.get_occupant((x, y))) for x in range(BOARD_SIZE))
        for y in range(BOARD_SIZE)
    )


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def display_board(board: Board, highlight: Optional[List[Square]] = None) -> str:
    """
    Print and return a labelled grid.  Row 0 (Black's back rank) is at the
    top.  Squares listed in *highlight* that are empty show as ``*``.

    Example output (initial position, first rows):

          0  1  2  3  4  5  6  7  8  9 10
       +---------------------------------
     0 |  .  r  h  e  a  k  a  e  h  r  .
     1 |  .  .  .  .  .  .  .  .  .  .  .
    """
    marks = set(highlight or [])
    lines: List[str] = []
    lines.append("    " + "".join(f"{x:>3}" for x in range(BOARD_SIZE)))
    lines.append("   +" + "-" * (3 * BOARD_SIZE))
    for y in range(BOARD_SIZE):
        cells = []
        for x in range(BOARD_SIZE):
            ch = piece_char(board.get_occupant((x, y)))
            if ch == EMPTY_CHAR and (x, y) in marks:
                ch = "*"
            cells.append(f"{ch:>3}")
        lines.append(f"{y:>2} |" + "".join(cells))
    text = "\n".join(lines)
    print(text)
    return text
