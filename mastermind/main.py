'''
Mastermind HTTP service (the remote side of `mastermind-online`)

Endpoints:
POST   /game             -> start a game
GET    /game             -> ids of in-progress games
DELETE /game/{id}        -> delete an in-progress game (204)
POST   /guess            -> submit a guess {"game_id", "guess": "1234"}

Extras:
GET    /history          -> archived (won) game ids
GET    /history/{id}     -> secret + guess trace of an archived game

Errors are returned as {"error": "..."} with a 400/404 status.
Clients keep their own "active game"; the service never sets one.

Run: uvicorn mastermind.main:app
'''

import logging
from functools import lru_cache

from fastapi import FastAPI, Depends, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .archive import build_archive
from .config import get_settings
from .engine import parse_code, is_win
from .interpreter import NOT_FOUND, trace_response
from .store import GameStore
from .schemas import (
    GameStartResponse,
    GuessRequest,
    GuessResponse,
    ErrorResponse,
    GameListResponse,
    HistoryResponse,
    GameTraceResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Mastermind API", version="3.0.0")

# Allow everything in dev so the docs and other clients work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# One store per process, shared by all requests (it locks internally)
@lru_cache(maxsize=1)
def get_store() -> GameStore:
    return GameStore(archive=build_archive(get_settings()))

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())

_errors = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}

# ---------------- Routes ----------------

@app.post("/game", response_model=GameStartResponse, summary="Start a new game")
def start_game(store: GameStore = Depends(get_store)) -> GameStartResponse:
    game = store.create_game(activate=False)
    return GameStartResponse(game_id=game.id)

@app.get("/game", response_model=GameListResponse, summary="List in-progress games")
def list_games(store: GameStore = Depends(get_store)) -> GameListResponse:
    listing = store.list_games()
    return GameListResponse(active=listing.active, games=listing.games)

@app.delete("/game/{game_id}", status_code=204, responses=_errors, summary="Delete a game")
def delete_game(game_id: str, store: GameStore = Depends(get_store)):
    if not store.delete_game(game_id):
        return error_response(404, NOT_FOUND)
    return Response(status_code=204)

@app.post("/guess", response_model=GuessResponse, responses=_errors, summary="Submit a guess")
def submit_guess(payload: GuessRequest, store: GameStore = Depends(get_store)):
    try:
        code = parse_code(payload.guess)
    except ValueError as ve:
        return error_response(400, str(ve))

    game = store.get_game(payload.game_id)
    entry = store.record_guess(payload.game_id, code) if game is not None else None
    if game is None or entry is None:
        return error_response(404, NOT_FOUND)

    if is_win(game.secret, code):
        logger.info("Game %s solved after %d guesses", game.id, len(game.guesses))
        store.archive_and_delete(game)

    return GuessResponse(black=entry.black, white=entry.white)

@app.get("/history", response_model=HistoryResponse, summary="Archived game ids")
def get_history(store: GameStore = Depends(get_store)) -> HistoryResponse:
    return HistoryResponse(history=store.history_ids())

@app.get("/history/{game_id}", response_model=GameTraceResponse, responses=_errors, summary="Archived game trace")
def get_archived_game(game_id: str, store: GameStore = Depends(get_store)):
    game = store.get_archived(game_id)
    if game is None:
        return error_response(404, NOT_FOUND)
    return trace_response(game)
