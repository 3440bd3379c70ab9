"""
Tests for xiangqi_rules.board -- coordinates, occupancy, initial layout and
the compact text codec.
"""

from __future__ import annotations

import pytest

from xiangqi_rules.board import (
    BOARD_SIZE,
    INITIAL_LAYOUT,
    MAX_COORD,
    NUM_SQUARES,
    Board,
    OffBoardError,
    Piece,
    PieceKind,
    Side,
    board_from_string,
    board_to_string,
    display_board,
    in_bounds,
    index_to_xy,
    initial_board,
    layout_from_string,
    occupant_at,
    xy_to_index,
)


# ===================================================================
# Coordinates
# ===================================================================

class TestInBounds:

    def test_matches_closed_range_on_both_axes(self):
        for x in range(-2, BOARD_SIZE + 2):
            for y in range(-2, BOARD_SIZE + 2):
                expected = 0 <= x <= 10 and 0 <= y <= 10
                assert in_bounds((x, y)) is expected, (x, y)

    def test_corners(self):
        assert in_bounds((0, 0))
        assert in_bounds((10, 10))
        assert not in_bounds((11, 0))
        assert not in_bounds((0, -1))


class TestIndexConversion:

    def test_round_trip_all_squares(self):
        for index in range(NUM_SQUARES):
            assert xy_to_index(index_to_xy(index)) == index

    def test_known_squares(self):
        assert xy_to_index((0, 0)) == 0
        assert xy_to_index((10, 0)) == 10
        assert xy_to_index((0, 1)) == 11
        assert index_to_xy(120) == (10, 10)


# ===================================================================
# Occupancy
# ===================================================================

class TestOccupancy:

    def test_new_board_is_empty(self):
        board = Board()
        assert len(board) == 0
        assert board.get_occupant((5, 5)) is None

    def test_set_and_get(self):
        board = Board()
        piece = Piece(PieceKind.HORSE, Side.RED, (3, 4))
        board.set_occupant((3, 4), piece)
        assert board.get_occupant((3, 4)) is piece
        assert occupant_at(board, (3, 4)) is piece

    def test_set_overwrites_and_clears(self):
        board = Board()
        first = Piece(PieceKind.HORSE, Side.RED, (3, 4))
        second = Piece(PieceKind.CANNON, Side.BLACK, (3, 4))
        board.set_occupant((3, 4), first)
        board.set_occupant((3, 4), second)
        assert board.get_occupant((3, 4)) is second
        board.set_occupant((3, 4), None)
        assert board.get_occupant((3, 4)) is None

    @pytest.mark.parametrize("square", [(-1, 0), (0, -1), (11, 5), (5, 11)])
    def test_off_board_query_fails_fast(self, square):
        board = Board()
        with pytest.raises(OffBoardError):
            board.get_occupant(square)
        with pytest.raises(OffBoardError):
            board.set_occupant(square, None)

    def test_off_board_error_is_value_error(self):
        assert issubclass(OffBoardError, ValueError)

    def test_pieces_row_major(self):
        board = Board()
        a = Piece(PieceKind.GUARD, Side.RED, (9, 0))
        b = Piece(PieceKind.GUARD, Side.RED, (0, 1))
        board.set_occupant(b.position, b)
        board.set_occupant(a.position, a)
        assert list(board.pieces()) == [((9, 0), a), ((0, 1), b)]


# ===================================================================
# Piece identity / locate / copy
# ===================================================================

class TestPieceIdentity:

    def test_same_attributes_are_different_pieces(self):
        a = Piece(PieceKind.SOLDIER, Side.BLACK, (1, 3))
        b = Piece(PieceKind.SOLDIER, Side.BLACK, (1, 3))
        assert a != b
        assert a == a

    def test_locate_by_identity(self):
        board = initial_board()
        soldier = board.get_occupant((7, 3))
        assert board.locate(soldier) == (7, 3)
        stray = Piece(PieceKind.SOLDIER, Side.BLACK, (7, 3))
        assert board.locate(stray) is None

    def test_copy_is_independent(self):
        board = initial_board()
        clone = board.copy()
        assert board_to_string(clone) == board_to_string(board)
        assert clone.get_occupant((5, 0)) is not board.get_occupant((5, 0))
        clone.set_occupant((5, 0), None)
        assert board.get_occupant((5, 0)) is not None


# ===================================================================
# Initial layout
# ===================================================================

class TestInitialBoard:

    def test_piece_count(self):
        board = initial_board()
        assert len(board) == 32
        sides = [p.side for _, p in board.pieces()]
        assert sides.count(Side.BLACK) == 16
        assert sides.count(Side.RED) == 16

    def test_positions_match_squares(self):
        for square, piece in initial_board().pieces():
            assert piece.position == square

    def test_generals(self):
        board = initial_board()
        black = board.get_occupant((5, 0))
        red = board.get_occupant((5, MAX_COORD))
        assert (black.kind, black.side) == (PieceKind.GENERAL, Side.BLACK)
        assert (red.kind, red.side) == (PieceKind.GENERAL, Side.RED)

    def test_soldiers(self):
        board = initial_board()
        for x in (1, 3, 5, 7, 9):
            assert board.get_occupant((x, 3)).kind is PieceKind.SOLDIER
            assert board.get_occupant((x, 3)).side is Side.BLACK
            assert board.get_occupant((x, 7)).kind is PieceKind.SOLDIER
            assert board.get_occupant((x, 7)).side is Side.RED

    def test_river_row_is_empty(self):
        board = initial_board()
        assert all(board.get_occupant((x, 5)) is None for x in range(BOARD_SIZE))

    def test_layout_is_mirror_symmetric(self):
        for (x, y), (kind, side) in INITIAL_LAYOUT.items():
            other_side = Side.RED if side is Side.BLACK else Side.BLACK
            assert INITIAL_LAYOUT[(x, MAX_COORD - y)] == (kind, other_side)

    def test_each_call_builds_new_pieces(self):
        assert initial_board().get_occupant((5, 0)) is not initial_board().get_occupant((5, 0))


# ===================================================================
# Text codec and display
# ===================================================================

class TestTextCodec:

    def test_initial_rows(self):
        rows = board_to_string(initial_board()).split("/")
        assert len(rows) == BOARD_SIZE
        assert rows[0] == ".rheakaehr."
        assert rows[2] == "..c.....c.."
        assert rows[3] == ".s.s.s.s.s."
        assert rows[5] == "..........."
        assert rows[7] == ".S.S.S.S.S."
        assert rows[10] == ".RHEAKAEHR."

    def test_round_trip_initial(self):
        text = board_to_string(initial_board())
        assert board_to_string(board_from_string(text)) == text

    def test_layout_from_string_sides(self):
        rows = ["..........."] * BOARD_SIZE
        rows[4] = "....c...R.."
        layout = layout_from_string("/".join(rows))
        assert layout == {
            (4, 4): (PieceKind.CANNON, Side.BLACK),
            (8, 4): (PieceKind.CHARIOT, Side.RED),
        }

    def test_wrong_row_count(self):
        with pytest.raises(ValueError, match="rows"):
            layout_from_string("/".join(["..........."] * 10))

    def test_wrong_row_width(self):
        rows = ["..........."] * BOARD_SIZE
        rows[6] = ".........."
        with pytest.raises(ValueError, match="Row 6"):
            layout_from_string("/".join(rows))

    def test_unknown_token(self):
        rows = ["..........."] * BOARD_SIZE
        rows[0] = "x.........."
        with pytest.raises(ValueError, match="Unknown piece token"):
            layout_from_string("/".join(rows))

    def test_display_marks_highlighted_empty_squares(self, capsys):
        board = initial_board()
        text = display_board(board, highlight=[(5, 1), (5, 0)])
        printed = capsys.readouterr().out
        assert text in printed
        lines = text.splitlines()
        assert len(lines) == BOARD_SIZE + 2
        assert lines[2].split("|")[1].split() == list(".rheakaehr.")
        assert lines[3].split("|")[1].split()[5] == "*"
