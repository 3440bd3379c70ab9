from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel


class CreateGameRequest(BaseModel):
    layout: Optional[str] = None   # compact text layout, default start position


class MoveRequest(BaseModel):
    src: Tuple[int, int]           # (x, y)
    dst: Tuple[int, int]


class PiecePayload(BaseModel):
    kind: str
    side: str
    x: int
    y: int


class LastMovePayload(BaseModel):
    src: Tuple[int, int]
    dst: Tuple[int, int]
    captured: Optional[PiecePayload]


class GameStateResponse(BaseModel):
    session_id: str
    board: str
    pieces: list[PiecePayload]
    move_count: int
    last_move: Optional[LastMovePayload]


class OccupantResponse(BaseModel):
    session_id: str
    x: int
    y: int
    piece: Optional[PiecePayload]


class LegalMovesResponse(BaseModel):
    session_id: str
    piece: PiecePayload
    moves: list[Tuple[int, int]]
    mask: list[list[bool]]         # 11x11, indexed [y][x]
