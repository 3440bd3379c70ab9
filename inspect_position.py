#!/usr/bin/env python3
"""Print a position and the legal destinations of its pieces from the terminal."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from xiangqi_rules.board import (
    Side,
    Square,
    board_to_string,
    display_board,
    layout_from_string,
)
from xiangqi_rules.game import Game
from xiangqi_rules.move_gen import all_legal_moves

SIDE_BY_NAME = {side.value: side for side in Side}


def parse_square(text: str) -> Square:
    """Parse ``"x,y"`` into a square tuple."""
    try:
        x_str, y_str = text.split(",")
        return int(x_str), int(y_str)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected x,y but got {text!r}.") from None


def fmt_square(square: Square) -> str:
    return f"({square[0]},{square[1]})"


def fmt_moves(moves: List[Square]) -> str:
    return " ".join(fmt_square(sq) for sq in moves) if moves else "(none)"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "square",
        nargs="?",
        type=parse_square,
        help="Square x,y whose piece's destinations are shown.",
    )
    parser.add_argument(
        "--layout",
        type=str,
        default=None,
        help="Compact layout (11 rows of 11 chars joined by '/'). Default: start position.",
    )
    parser.add_argument(
        "--layout-file",
        type=Path,
        default=None,
        help="Read the compact layout from a file instead.",
    )
    parser.add_argument(
        "--move",
        nargs=2,
        type=parse_square,
        action="append",
        default=[],
        metavar=("SRC", "DST"),
        help="Apply a move before inspecting (repeatable).",
    )
    parser.add_argument(
        "--side",
        choices=sorted(SIDE_BY_NAME),
        default=None,
        help="List destinations for every piece of this side.",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the compact layout of the final position.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log applied moves.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    text = args.layout
    if args.layout_file is not None:
        text = args.layout_file.read_text(encoding="utf-8")
    try:
        game = Game(layout_from_string(text) if text is not None else None)
        for src, dst in args.move:
            game.move(src, dst)
    except ValueError as exc:
        print(f"error: {exc}")
        return 2

    highlight: List[Square] = []
    piece = None
    if args.square is not None:
        try:
            piece = game.occupant_at(args.square)
            if piece is not None:
                highlight = game.legal_moves_at(args.square)
        except ValueError as exc:
            print(f"error: {exc}")
            return 2

    display_board(game.board, highlight)
    print()

    if args.square is not None:
        if piece is None:
            print(f"{fmt_square(args.square)} is empty.")
        else:
            print(
                f"{piece.side.value} {piece.kind.value} at {fmt_square(args.square)}: "
                f"{fmt_moves(highlight)}"
            )

    if args.side is not None:
        side_moves = all_legal_moves(game.board, SIDE_BY_NAME[args.side])
        for square, moves in side_moves.items():
            occupant = game.occupant_at(square)
            print(f"{occupant.kind.value:>9} {fmt_square(square):>8}: {fmt_moves(moves)}")

    if args.dump:
        print(board_to_string(game.board))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
