from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error import (
    engine_error_handler,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import GameSession, InMemorySessionStore
from ...config import ServerConfig
from ...engine.errors import EngineError, PreconditionError
from ...engine.game import Game
from ...engine.piece import Color, Piece, PieceType
from ...engine.square import Square


logger = logging.getLogger(__name__)


class SquareModel(BaseModel):
    file: int = Field(..., ge=0, le=7, description="0 = a-file")
    rank: int = Field(..., ge=0, le=7, description="0 = White's back rank")

    @classmethod
    def of(cls, square: Square) -> "SquareModel":
        return cls(file=square.file, rank=square.rank)

    def to_square(self) -> Square:
        return Square(self.file, self.rank)


class PieceModel(BaseModel):
    piece_type: PieceType
    color: Color
    square: SquareModel
    has_moved: bool

    @classmethod
    def of(cls, piece: Piece) -> "PieceModel":
        return cls(
            piece_type=piece.piece_type,
            color=piece.color,
            square=SquareModel.of(piece.square),
            has_moved=piece.has_moved,
        )


class MoveRequest(BaseModel):
    from_square: SquareModel
    to_square: SquareModel


class PromoteRequest(BaseModel):
    square: SquareModel
    piece_type: PieceType = Field(..., description="queen, rook, bishop or knight")


class LegalDestinations(BaseModel):
    square: SquareModel
    destinations: List[SquareModel]


class GameState(BaseModel):
    game_id: str
    pieces: List[PieceModel]
    active_color: Color
    in_check: bool
    checking_square: Optional[SquareModel]
    game_over: bool
    winner: Optional[Color]
    stalemate: bool
    pending_promotion: Optional[SquareModel]
    history_length: int


def create_app(
    config: Optional[ServerConfig] = None,
    store: Optional[InMemorySessionStore] = None,
) -> FastAPI:
    config = config or ServerConfig.from_env()
    app = FastAPI(title="chesstwist", version="0.1.0")

    logging.basicConfig(level=config.logging_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(EngineError, engine_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    sessions = store if store is not None else InMemorySessionStore()

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=GameState)
    async def create_game() -> GameState:
        game_id = sessions.create(Game.new())
        with _require_session(sessions, game_id) as game:
            logger.info("game created", extra={"game_id": game_id})
            return _state(game_id, game)

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        with _require_session(sessions, game_id) as game:
            return _state(game_id, game)

    @app.delete("/api/games/{game_id}", status_code=204)
    async def delete_game(game_id: str) -> Response:
        if not sessions.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return Response(status_code=204)

    @app.get("/api/games/{game_id}/legal-destinations", response_model=LegalDestinations)
    async def legal_destinations(
        game_id: str,
        file: int = Query(..., ge=0, le=7),
        rank: int = Query(..., ge=0, le=7),
    ) -> LegalDestinations:
        square = Square(file, rank)
        with _require_session(sessions, game_id) as game:
            targets = sorted(game.legal_destinations(square))
        return LegalDestinations(
            square=SquareModel.of(square),
            destinations=[SquareModel.of(s) for s in targets],
        )

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        from_sq, to_sq = req.from_square.to_square(), req.to_square.to_square()
        with _require_session(sessions, game_id) as game:
            if game.is_game_over():
                raise HTTPException(status_code=409, detail="game is over")
            if game.pending_promotion is not None:
                raise HTTPException(status_code=409, detail="promotion pending")
            if not game.is_legal(from_sq, to_sq):
                raise HTTPException(status_code=400, detail="illegal move")
            game.apply_move(from_sq, to_sq)
            return _state(game_id, game)

    @app.post("/api/games/{game_id}/promote", response_model=GameState)
    async def promote(game_id: str, req: PromoteRequest) -> GameState:
        with _require_session(sessions, game_id) as game:
            if game.is_game_over() and game.pending_promotion is None:
                raise HTTPException(status_code=409, detail="game is over")
            try:
                game.promote(req.square.to_square(), req.piece_type)
            except PreconditionError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return _state(game_id, game)

    @app.post("/api/games/{game_id}/reset", response_model=GameState)
    async def reset(game_id: str) -> GameState:
        with _require_session(sessions, game_id) as game:
            game.reset()
            return _state(game_id, game)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        with _require_session(sessions, game_id) as game:
            try:
                game.undo()
            except PreconditionError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return _state(game_id, game)

    return app


def _require_session(store: InMemorySessionStore, game_id: str) -> GameSession:
    try:
        return store.session(game_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="game not found") from None


def _state(game_id: str, game: Game) -> GameState:
    checking = game.checking_square
    pending = game.pending_promotion
    return GameState(
        game_id=game_id,
        pieces=[PieceModel.of(p) for p in game.pieces()],
        active_color=game.active_color,
        in_check=game.is_in_check(),
        checking_square=SquareModel.of(checking) if checking is not None else None,
        game_over=game.is_game_over(),
        winner=game.winner(),
        stalemate=game.is_stalemate(),
        pending_promotion=SquareModel.of(pending) if pending is not None else None,
        history_length=len(game.history),
    )


# Default app for non-factory servers
app = create_app()
