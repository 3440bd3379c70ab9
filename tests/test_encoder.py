"""
Tests for xiangqi_rules.encoder -- occupancy planes and destination masks.
"""

from __future__ import annotations

import numpy as np

from xiangqi_rules.board import Board, PieceKind, Side, initial_board
from xiangqi_rules.encoder import (
    NUM_PLANES,
    encode_board,
    encode_move_mask,
    plane_index,
)
from xiangqi_rules.move_gen import legal_moves


class TestPlaneIndex:

    def test_layout(self):
        assert NUM_PLANES == 14
        assert plane_index(Side.BLACK, PieceKind.GENERAL) == 0
        assert plane_index(Side.BLACK, PieceKind.SOLDIER) == 6
        assert plane_index(Side.RED, PieceKind.GENERAL) == 7
        assert plane_index(Side.RED, PieceKind.SOLDIER) == 13

    def test_unique(self):
        indices = {plane_index(s, k) for s in Side for k in PieceKind}
        assert indices == set(range(NUM_PLANES))


class TestEncodeBoard:

    def test_shape_and_dtype(self):
        obs = encode_board(initial_board())
        assert obs.shape == (14, 11, 11)
        assert obs.dtype == np.float32

    def test_empty_board(self):
        assert not encode_board(Board()).any()

    def test_initial_counts(self):
        obs = encode_board(initial_board())
        assert obs.sum() == 32.0
        assert obs[plane_index(Side.BLACK, PieceKind.SOLDIER)].sum() == 5.0
        assert obs[plane_index(Side.RED, PieceKind.CANNON)].sum() == 2.0

    def test_indexed_y_then_x(self):
        obs = encode_board(initial_board())
        assert obs[plane_index(Side.BLACK, PieceKind.GENERAL), 0, 5] == 1.0
        assert obs[plane_index(Side.RED, PieceKind.GENERAL), 10, 5] == 1.0
        assert obs[plane_index(Side.BLACK, PieceKind.CANNON), 2, 8] == 1.0

    def test_at_most_one_piece_per_square(self):
        obs = encode_board(initial_board())
        assert obs.sum(axis=0).max() == 1.0


class TestEncodeMoveMask:

    def test_empty(self):
        mask = encode_move_mask([])
        assert mask.shape == (11, 11)
        assert mask.dtype == bool
        assert not mask.any()

    def test_marks_destinations(self):
        mask = encode_move_mask([(3, 2), (1, 2)])
        assert mask[2, 3] and mask[2, 1]
        assert mask.sum() == 2

    def test_matches_legal_moves(self):
        board = initial_board()
        moves = legal_moves(board, board.get_occupant((2, 2)))
        mask = encode_move_mask(moves)
        assert mask.sum() == len(moves)
        for x, y in moves:
            assert mask[y, x]
