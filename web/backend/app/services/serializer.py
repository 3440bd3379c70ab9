from __future__ import annotations

from typing import Optional

from xiangqi_rules.board import Piece, Square, board_to_string
from xiangqi_rules.encoder import encode_move_mask

from .session import Session


def piece_to_payload(piece: Optional[Piece]) -> Optional[dict]:
    if piece is None:
        return None
    x, y = piece.position
    return {"kind": piece.kind.value, "side": piece.side.value, "x": x, "y": y}


def session_to_payload(session_id: str, session: Session) -> dict:
    """Convert a Session into the standard game-state response payload."""
    game = session.game
    last = game.last_move
    return {
        "session_id": session_id,
        "board":      board_to_string(game.board),
        "pieces":     [piece_to_payload(p) for _, p in game.board.pieces()],
        "move_count": game.move_count,
        "last_move":  None if last is None else {
            "src":      last.src,
            "dst":      last.dst,
            "captured": piece_to_payload(last.captured),
        },
    }


def moves_to_payload(session_id: str, piece: Piece, moves: list[Square]) -> dict:
    return {
        "session_id": session_id,
        "piece":      piece_to_payload(piece),
        "moves":      moves,
        "mask":       encode_move_mask(moves).tolist(),
    }
