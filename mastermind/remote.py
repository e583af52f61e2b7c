"""
Online variant: the same commands, forwarded to the Mastermind HTTP service.

- MastermindAPI: thin requests-based client, one blocking call per operation.
- RemoteCommandInterpreter: keeps the "active game" on the client side and
  renders every result with the same JSON shapes as the offline terminal.
"""

import logging
from typing import List, Optional, TextIO, Tuple, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from .config import DEFAULT_API_URL
from .engine import parse_code, format_code
from .errors import RemoteAPIError
from .interpreter import Interpreter, NOT_FOUND, NO_ACTIVE_GAME, congratulations
from .types import CODE_LENGTH
from .schemas import (
    GameStartResponse,
    GuessRequest,
    GuessResponse,
    MessageResponse,
    ErrorResponse,
    GameListResponse,
    HistoryResponse,
    GameTraceResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class MastermindAPI:
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 5.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise RemoteAPIError(f"Cannot reach {self.base_url}: {exc}") from exc

    @staticmethod
    def _raise_for_error(response: requests.Response, fallback: str) -> None:
        if response.status_code < 400:
            return
        # the service answers errors as {"error": "..."}
        try:
            message = ErrorResponse.model_validate_json(response.content).error
        except ValidationError:
            message = fallback
        raise RemoteAPIError(message, status_code=response.status_code)

    def _decode(self, response: requests.Response, model: Type[T]) -> T:
        self._raise_for_error(response, f"Unexpected status {response.status_code}")
        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise RemoteAPIError(f"Malformed response: {exc}", status_code=response.status_code) from exc

    # --- Operations ---

    def create_game(self) -> str:
        response = self._request("POST", "/game")
        return self._decode(response, GameStartResponse).game_id

    def make_guess(self, game_id: str, guess: str) -> Tuple[int, int]:
        body = GuessRequest(game_id=game_id, guess=guess).model_dump()
        response = self._request("POST", "/guess", json=body)
        result = self._decode(response, GuessResponse)
        return (result.black, result.white)

    def delete_game(self, game_id: str) -> None:
        response = self._request("DELETE", f"/game/{game_id}")
        self._raise_for_error(response, "Failed to delete game")

    def list_games(self) -> List[str]:
        response = self._request("GET", "/game")
        return self._decode(response, GameListResponse).games

    def history(self) -> List[str]:
        response = self._request("GET", "/history")
        return self._decode(response, HistoryResponse).history

    def archived_game(self, game_id: str) -> GameTraceResponse:
        response = self._request("GET", f"/history/{game_id}")
        return self._decode(response, GameTraceResponse)


class RemoteCommandInterpreter(Interpreter):
    """Online interpreter: game commands are answered by the HTTP service."""

    banner = "Mastermind - online terminal\nType 'help' for commands. Type 'exit' to quit."

    def __init__(self, api: MastermindAPI, out: Optional[TextIO] = None) -> None:
        super().__init__(out)
        self.api = api
        self.active: Optional[str] = None

    def cmd_game(self) -> None:
        try:
            game_id = self.api.create_game()
        except RemoteAPIError as exc:
            self.error(str(exc))
            return
        self.active = game_id
        self.emit(GameStartResponse(game_id=game_id))

    def cmd_guess(self, text: str) -> None:
        try:
            code = parse_code(text)
        except ValueError as ve:
            self.error(str(ve))
            return
        if self.active is None:
            self.error(NO_ACTIVE_GAME)
            return

        game_id = self.active
        try:
            black, white = self.api.make_guess(game_id, format_code(code))
        except RemoteAPIError as exc:
            # the service forgot the game (deleted elsewhere, restarted)
            if exc.status_code == 404:
                self.active = None
            self.error(str(exc))
            return
        self.emit(GuessResponse(black=black, white=white))

        # a win is archived by the service; the game is gone from its list
        if black == CODE_LENGTH:
            self.emit(MessageResponse(message=congratulations(game_id)))
            self.active = None

    def cmd_delete(self, game_id: str) -> None:
        try:
            self.api.delete_game(game_id)
        except RemoteAPIError as exc:
            self.error(str(exc))
            return
        if self.active == game_id:
            self.active = None
        self.emit(MessageResponse(message="Game deleted"))

    def cmd_list(self) -> None:
        try:
            games = self.api.list_games()
        except RemoteAPIError as exc:
            self.error(str(exc))
            return
        if self.active not in games:
            self.active = None
        self.emit(GameListResponse(active=self.active, games=games))

    def cmd_switch(self, game_id: str) -> None:
        try:
            games = self.api.list_games()
        except RemoteAPIError as exc:
            self.error(str(exc))
            return
        if game_id not in games:
            self.error(NOT_FOUND)
            return
        self.active = game_id
        self.emit(MessageResponse(message=f"Switched to game {game_id}"))

    def cmd_history(self, game_id: Optional[str] = None) -> None:
        try:
            if game_id is None:
                self.emit(HistoryResponse(history=self.api.history()))
            else:
                self.emit(self.api.archived_game(game_id))
        except RemoteAPIError as exc:
            self.error(str(exc))
