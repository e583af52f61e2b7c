"""
Pydantic models for every structured payload
- Every structured response the terminal or the HTTP service emits is one of these.
- Core code (engine/store) returns plain values; we only pick a shape here, at the edge.
- The archive file is read/written through ArchivedGameRecord as well.
"""

from typing import Annotated, List, Optional
from pydantic import BaseModel, Field

from .types import CODE_LENGTH, MIN_DIGIT, MAX_DIGIT

# Exactly 4 digits, each 1..6; anything else fails validation
DigitField = Annotated[int, Field(ge=MIN_DIGIT, le=MAX_DIGIT)]
CodeField = Annotated[List[DigitField], Field(min_length=CODE_LENGTH, max_length=CODE_LENGTH)]
PegCount = Annotated[int, Field(ge=0, le=CODE_LENGTH)]

# 1. Response when a new game is started
class GameStartResponse(BaseModel):
    game_id: str = Field(..., description="Unique ID for the game; secret is never returned")

# 2. Feedback for one guess
class GuessResponse(BaseModel):
    black: int = Field(..., description="Right digit in the right position")
    white: int = Field(..., description="Right digit in the wrong position")

# 3. Generic success / error messages
class MessageResponse(BaseModel):
    message: str

class ErrorResponse(BaseModel):
    error: str

# 4. Snapshot of in-progress games
class GameListResponse(BaseModel):
    active: Optional[str] = Field(None, description="Game currently receiving guesses")
    games: List[str] = Field(default_factory=list, description="IDs of games still in progress")

# 5. Archived (won) games
class HistoryResponse(BaseModel):
    history: List[str] = Field(default_factory=list, description="Archived game IDs, oldest first")

class GuessEntryOut(BaseModel):
    guess: CodeField = Field(..., description="The player's guess")
    black: PegCount
    white: PegCount
    timestamp: float = Field(0.0, description="When the guess was made")

class GameTraceResponse(BaseModel):
    game_id: str
    secret: CodeField = Field(..., description="Only exposed for archived games")
    guesses: List[GuessEntryOut] = Field(default_factory=list)

# 6. Request body for the HTTP service
class GuessRequest(BaseModel):
    game_id: str
    guess: str = Field(..., description="4 digits, each between 1 and 6, e.g. '1234'")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"game_id": "3f0c2c1e-8a61-4c3e-9b9b-6c1f9f0e2a11", "guess": "1234"},
            ]
        }
    }

# 7. On-disk shape of one archived game.
#    Old history files only have id + secret, so guesses defaults to empty.
class ArchivedGameRecord(BaseModel):
    id: str
    secret: CodeField
    guesses: List[GuessEntryOut] = Field(default_factory=list)
