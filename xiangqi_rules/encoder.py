"""
NumPy encoders for board positions and destination sets.

Plane layout for ``encode_board`` (shape (14, 11, 11), float32, indexed
``[plane, y, x]``)
-----------------------------------------------------------------------
  0 - 6  : Black pieces, one plane per PieceKind in declaration order
  7 - 13 : Red pieces, same order
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from xiangqi_rules.board import BOARD_SIZE, Board, PieceKind, Side, Square

NUM_KINDS: int = len(PieceKind)
NUM_PLANES: int = len(Side) * NUM_KINDS  # 14

_KIND_INDEX = {kind: i for i, kind in enumerate(PieceKind)}
_SIDE_INDEX = {side: i for i, side in enumerate(Side)}


def plane_index(side: Side, kind: PieceKind) -> int:
    """Plane holding pieces of *kind* belonging to *side*."""
    return _SIDE_INDEX[side] * NUM_KINDS + _KIND_INDEX[kind]


def encode_board(board: Board) -> np.ndarray:
    """Encode piece occupancy as a (14, 11, 11) float32 array."""
    planes = np.zeros((NUM_PLANES, BOARD_SIZE, BOARD_SIZE), dtype=np.float32)
    for (x, y), piece in board.pieces():
        planes[plane_index(piece.side, piece.kind), y, x] = 1.0
    return planes


def encode_move_mask(moves: Iterable[Square]) -> np.ndarray:
    """Return an (11, 11) bool mask, True at ``[y, x]`` for each destination."""
    mask = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=bool)
    coords = np.array(list(moves), dtype=np.intp).reshape(-1, 2)
    mask[coords[:, 1], coords[:, 0]] = True
    return mask
