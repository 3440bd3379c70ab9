from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from xiangqi_rules.board import in_bounds, layout_from_string
from xiangqi_rules.game import IllegalMoveError, NoPieceError

from ..schemas.game import (
    CreateGameRequest, MoveRequest, GameStateResponse,
    OccupantResponse, LegalMovesResponse,
)
from ..services.session import session_manager
from ..services.serializer import (
    moves_to_payload, piece_to_payload, session_to_payload,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games")


# ---------------------------------------------------------------------------
# Error helpers (returns the exact contract: {error_code, message, details})
# ---------------------------------------------------------------------------

def _err(status: int, error_code: str, message: str, details: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or {},
        },
    )


def _get_session_or_404(session_id: str):
    session = session_manager.get(session_id)
    if session is None:
        return None, _err(
            404, "SESSION_NOT_FOUND",
            f"Session '{session_id}' not found.",
        )
    return session, None


def _off_board(*squares: tuple[int, int]) -> JSONResponse | None:
    for square in squares:
        if not in_bounds(square):
            return _err(
                422, "OFF_BOARD",
                f"Square {tuple(square)} is off the board.",
                {"x": square[0], "y": square[1]},
            )
    return None


# ---------------------------------------------------------------------------
# POST /api/games -- create a new session
# ---------------------------------------------------------------------------

@router.post("", response_model=GameStateResponse)
def create_game(req: CreateGameRequest):
    layout = None
    if req.layout is not None:
        try:
            layout = layout_from_string(req.layout)
        except ValueError as exc:
            return _err(422, "INVALID_LAYOUT", str(exc))

    session_id, session = session_manager.create(layout)
    with session.lock:
        return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# GET /api/games/{session_id} -- fetch current state
# ---------------------------------------------------------------------------

@router.get("/{session_id}", response_model=GameStateResponse)
def get_game(session_id: str):
    session, err = _get_session_or_404(session_id)
    if err:
        return err
    with session.lock:
        return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# GET /api/games/{session_id}/squares/{x}/{y} -- occupant of one square
# ---------------------------------------------------------------------------

@router.get("/{session_id}/squares/{x}/{y}", response_model=OccupantResponse)
def get_occupant(session_id: str, x: int, y: int):
    session, err = _get_session_or_404(session_id)
    if err:
        return err
    err = _off_board((x, y))
    if err:
        return err

    with session.lock:
        piece = session.game.occupant_at((x, y))
        return {
            "session_id": session_id,
            "x": x,
            "y": y,
            "piece": piece_to_payload(piece),
        }


# ---------------------------------------------------------------------------
# GET /api/games/{session_id}/squares/{x}/{y}/moves -- legal destinations
# ---------------------------------------------------------------------------

@router.get("/{session_id}/squares/{x}/{y}/moves", response_model=LegalMovesResponse)
def get_legal_moves(session_id: str, x: int, y: int):
    session, err = _get_session_or_404(session_id)
    if err:
        return err
    err = _off_board((x, y))
    if err:
        return err

    with session.lock:
        try:
            moves = session.game.legal_moves_at((x, y))
        except NoPieceError as exc:
            return _err(422, "NO_PIECE", str(exc), {"x": x, "y": y})
        piece = session.game.occupant_at((x, y))
        return moves_to_payload(session_id, piece, moves)


# ---------------------------------------------------------------------------
# POST /api/games/{session_id}/move -- apply one move
# ---------------------------------------------------------------------------

@router.post("/{session_id}/move", response_model=GameStateResponse)
def make_move(session_id: str, req: MoveRequest):
    session, err = _get_session_or_404(session_id)
    if err:
        return err
    err = _off_board(req.src, req.dst)
    if err:
        return err

    details = {"src": list(req.src), "dst": list(req.dst)}
    with session.lock:
        try:
            session.game.move(req.src, req.dst)
        except NoPieceError as exc:
            return _err(422, "NO_PIECE", str(exc), details)
        except IllegalMoveError as exc:
            return _err(422, "ILLEGAL_MOVE", str(exc), details)
        return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# POST /api/games/{session_id}/reset -- restart the session
# ---------------------------------------------------------------------------

@router.post("/{session_id}/reset", response_model=GameStateResponse)
def reset_game(session_id: str):
    session, err = _get_session_or_404(session_id)
    if err:
        return err

    with session.lock:
        session.game.reset()
        return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# DELETE /api/games/{session_id} -- clean up a session
# ---------------------------------------------------------------------------

@router.delete("/{session_id}", status_code=204)
def delete_game(session_id: str):
    session_manager.delete(session_id)
