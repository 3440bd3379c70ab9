"""
Move generator: the squares a piece may move to from its current square.

One rule per PieceKind.  Every candidate square is bounds-checked before
its occupant is read, and "empty" is tested before "capturable".  Check,
checkmate and turn order are not considered.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from xiangqi_rules.board import (
    FORWARD,
    RIVER_ROW,
    Board,
    Piece,
    PieceKind,
    Side,
    Square,
    in_bounds,
)

# ---------------------------------------------------------------------------
# Direction tables
# ---------------------------------------------------------------------------

# Sliding order for chariot and cannon: up, down, left, right.
SLIDE_DIRS: List[Tuple[int, int]] = [
    (0, -1),
    (0, 1),
    (-1, 0),
    (1, 0),
]

GENERAL_STEPS: List[Tuple[int, int]] = [(0, 1), (0, -1), (1, 0), (-1, 0)]
GUARD_STEPS: List[Tuple[int, int]] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
ELEPHANT_STEPS: List[Tuple[int, int]] = [(2, 2), (2, -2), (-2, 2), (-2, -2)]

# Horse: (leg offset, [two landing offsets]) -- a blocked leg disables both.
HORSE_LEGS: List[Tuple[Tuple[int, int], List[Tuple[int, int]]]] = [
    ((1, 0), [(2, 1), (2, -1)]),
    ((-1, 0), [(-2, 1), (-2, -1)]),
    ((0, 1), [(1, 2), (-1, 2)]),
    ((0, -1), [(1, -2), (-1, -2)]),
]


# ---------------------------------------------------------------------------
# Shared predicates
# ---------------------------------------------------------------------------

def is_empty(board: Board, square: Square) -> bool:
    """True if *square* has no occupant.  Only valid for in-bounds squares."""
    return board.get_occupant(square) is None


def is_capturable(board: Board, mover: Piece, square: Square) -> bool:
    """True if *square* holds a piece of the other side.

    Only valid for non-empty squares; always evaluate ``is_empty`` first.
    """
    return board.get_occupant(square).side is not mover.side


def crossed_river(piece: Piece) -> bool:
    """True once a soldier stands strictly past the river in its direction."""
    y = piece.position[1]
    if piece.side is Side.BLACK:
        return y > RIVER_ROW
    return y < RIVER_ROW


# ---------------------------------------------------------------------------
# MoveGenerator
# ---------------------------------------------------------------------------

class MoveGenerator:
    """Produces the ordered destination list for one piece at a time.

    The scratch list is reset at the start of every call, so one instance
    can be reused for successive pieces (but not concurrently).
    """

    def __init__(self) -> None:
        self._board: Board = Board()
        self._moves: List[Square] = []
        self._rules: Dict[PieceKind, Callable[[Piece], None]] = {
            PieceKind.GENERAL: self._general,
            PieceKind.GUARD: self._guard,
            PieceKind.ELEPHANT: self._elephant,
            PieceKind.HORSE: self._horse,
            PieceKind.CHARIOT: self._chariot,
            PieceKind.CANNON: self._cannon,
            PieceKind.SOLDIER: self._soldier,
        }
        missing = set(PieceKind) - set(self._rules)
        if missing:
            raise TypeError(f"No move rule for {sorted(k.value for k in missing)}")

    def generate(self, board: Board, piece: Piece) -> List[Square]:
        """Return the legal destinations of *piece* on *board*.

        *piece* must sit on *board* at ``piece.position``; this is checked
        with an assertion only.
        """
        assert board.get_occupant(piece.position) is piece, (
            f"{piece!r} is not on the board at {piece.position}"
        )
        self._board = board
        self._moves = []
        self._rules[piece.kind](piece)
        return list(self._moves)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _add_if_legal(self, mover: Piece, square: Square) -> None:
        # Order matters: bounds, then empty, then capturable.
        if in_bounds(square) and (
            is_empty(self._board, square) or is_capturable(self._board, mover, square)
        ):
            self._moves.append(square)

    def _add_steps(self, piece: Piece, steps: List[Tuple[int, int]]) -> None:
        px, py = piece.position
        for dx, dy in steps:
            self._add_if_legal(piece, (px + dx, py + dy))

    def _slide(self, start: Square, dx: int, dy: int) -> Square:
        """Add every empty square from *start* along (dx, dy).

        Returns the first square that is occupied or off the board.
        """
        x, y = start[0] + dx, start[1] + dy
        while in_bounds((x, y)) and is_empty(self._board, (x, y)):
            self._moves.append((x, y))
            x, y = x + dx, y + dy
        return x, y

    def _skip_empty(self, start: Square, dx: int, dy: int) -> Square:
        """Like ``_slide`` but records nothing."""
        x, y = start[0] + dx, start[1] + dy
        while in_bounds((x, y)) and is_empty(self._board, (x, y)):
            x, y = x + dx, y + dy
        return x, y

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _general(self, piece: Piece) -> None:
        self._add_steps(piece, GENERAL_STEPS)

    def _guard(self, piece: Piece) -> None:
        self._add_steps(piece, GUARD_STEPS)

    def _elephant(self, piece: Piece) -> None:
        # No blocking-point check on the intermediate diagonal square.
        self._add_steps(piece, ELEPHANT_STEPS)

    def _horse(self, piece: Piece) -> None:
        px, py = piece.position
        for (lx, ly), landings in HORSE_LEGS:
            leg = (px + lx, py + ly)
            if in_bounds(leg) and is_empty(self._board, leg):
                for dx, dy in landings:
                    self._add_if_legal(piece, (px + dx, py + dy))

    def _chariot(self, piece: Piece) -> None:
        for dx, dy in SLIDE_DIRS:
            stop = self._slide(piece.position, dx, dy)
            self._add_if_legal(piece, stop)

    def _cannon(self, piece: Piece) -> None:
        for dx, dy in SLIDE_DIRS:
            screen = self._slide(piece.position, dx, dy)
            target = self._skip_empty(screen, dx, dy)
            self._add_if_legal(piece, target)

    def _soldier(self, piece: Piece) -> None:
        px, py = piece.position
        self._add_if_legal(piece, (px, py + FORWARD[piece.side]))
        if crossed_river(piece):
            self._add_if_legal(piece, (px + 1, py))
            self._add_if_legal(piece, (px - 1, py))


# ---------------------------------------------------------------------------
# Top-level entry points
# ---------------------------------------------------------------------------

def legal_moves(board: Board, piece: Piece) -> List[Square]:
    """Return the ordered list of squares *piece* may move to on *board*."""
    return MoveGenerator().generate(board, piece)


def all_legal_moves(board: Board, side: Side) -> Dict[Square, List[Square]]:
    """Map each square holding a *side* piece to that piece's destinations.

    Pieces with no legal destination are omitted.  Keys follow row-major
    board order.
    """
    generator = MoveGenerator()
    result: Dict[Square, List[Square]] = {}
    for square, piece in list(board.pieces()):
        if piece.side is not side:
            continue
        moves = generator.generate(board, piece)
        if moves:
            result[square] = moves
    return result
