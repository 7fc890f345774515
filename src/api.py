import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field, PositiveInt
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

import game_rules
import move_engine
from settings import load_settings

logger = logging.getLogger(__name__)

settings = load_settings()

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="2048 Game API",
    description="A stateless API for playing the 2048 game. "\
                "Manage your game state (board, score, win_tile) on the client side. "\
                "Empty cells are sent and returned as null.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Empty cells are null; every tile is a positive integer.
Board = List[List[Optional[PositiveInt]]]

# --- Pydantic Models for API requests and responses ---

class NewGameSettings(BaseModel):
    """Settings for creating a new game."""
    size: int = Field(
        default=settings.board_size,
        gt=1, # Board size must be at least 2x2
        description="Size of the N x N game board (e.g., 4 for a 4x4 board)."
    )
    win_tile: int = Field(
        default=settings.win_tile,
        gt=0,
        description="The tile value to achieve for winning the game (e.g., 128)."
    )

class GameStateData(BaseModel):
    """Represents the complete state of a game instance."""
    board: Board = Field(..., description="The game board, as a list of rows. Empty cells are null.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    progress: game_rules.GameProgressState = Field(
        ...,
        description="Current progress state of the game (IN_PROGRESS, GAME_WON, GAME_OVER)."
    )
    win_tile: int = Field(..., gt=0, description="The tile value required to win this game instance.")
    board_size: int = Field(..., gt=0, description="The number of rows of the board.")


class MoveRequestData(BaseModel):
    """Data required to make a move."""
    board: Board = Field(..., description="Current game board state before the move.")
    score: int = Field(..., ge=0, description="Current score before the move.")
    direction: move_engine.Direction = Field(
        ...,
        description="Direction of the move (up, down, left, right)."
    )
    win_tile: int = Field(default=settings.win_tile, gt=0, description="The win condition tile for this game instance.")

class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move resulted in a change to the board state, False otherwise."
    )
    gained: int = Field(..., ge=0, description="Points earned from merges during this move.")
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g., if a move was invalid, game ended, or other info."
    )

class ValidMovesRequestData(BaseModel):
    board: Board = Field(..., description="The board to inspect.")

class ValidMovesResponseData(BaseModel):
    directions: List[move_engine.Direction] = Field(
        ...,
        description="Directions that would change the board."
    )

# --- API Endpoints ---

@app.post("/game/new", response_model=GameStateData, summary="Start a New 2048 Game")
@limiter.limit(settings.rate_limit)
async def start_new_game(request: Request, game_settings: NewGameSettings):
    """
    Initializes a new 2048 game based on the provided settings (size and win_tile).

    - **size**: Dimension of the N x N board (e.g., 4 for 4x4). Default is 4.
    - **win_tile**: Tile value to reach to win (e.g., 128). Default is 128.

    Returns the initial game state, including the board with two random tiles,
    score (0), progress status and the specified win_tile.
    """
    try:
        initial_board = game_rules.initialize_board(game_settings.size)
        current_progress = game_rules.determine_game_status(initial_board, game_settings.win_tile)

        return GameStateData(
            board=initial_board,
            score=0,
            progress=current_progress,
            win_tile=game_settings.win_tile,
            board_size=game_settings.size
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error in /game/new: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred during game creation: {str(e)}")


@app.post("/game/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit(settings.rate_limit)
async def make_move(request: Request, request_data: MoveRequestData):
    """
    Processes a player's move in the game.

    Requires the current `board` state, `score`, the `direction` of the move,
    and the `win_tile` for this game instance.

    The API will:
    1. Attempt to process the move (slide tiles, merge).
    2. If the move changed the board, add a new random tile (2 or 4).
    3. Determine the new game status (IN_PROGRESS, GAME_WON, GAME_OVER).

    Returns the updated game state, whether the move was effective, the points
    gained and an optional message.
    """
    current_board = request_data.board
    win_tile = request_data.win_tile
    message_for_client: Optional[str] = None

    try:
        result = move_engine.move(current_board, request_data.direction)
    except move_engine.ShapeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid board structure in request: {str(e)}")

    try:
        final_board = current_board
        final_score = request_data.score

        if result.moved:
            final_board = game_rules.add_random_tile(result.grid)
            final_score += result.gained
        else:
            message_for_client = "Move was not effective; board state unchanged by slide."

        current_progress = game_rules.determine_game_status(final_board, win_tile)

        if current_progress == game_rules.GameProgressState.GAME_WON:
            message_for_client = "Congratulations! You won!"
        elif current_progress == game_rules.GameProgressState.GAME_OVER:
            message_for_client = "Game Over. No more valid moves."

        return MoveResponseData(
            board=final_board,
            score=final_score,
            progress=current_progress,
            win_tile=win_tile,
            board_size=len(final_board),
            move_was_effective=result.moved,
            gained=result.gained,
            message=message_for_client
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Error processing move: {str(e)}")
    except Exception as e:
        logger.error("Unexpected error in /game/move: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while processing the move: {str(e)}")


@app.post("/game/valid-moves", response_model=ValidMovesResponseData, summary="List Effective Directions")
@limiter.limit(settings.rate_limit)
async def list_valid_moves(request: Request, request_data: ValidMovesRequestData):
    """Returns every direction that would change the given board."""
    try:
        directions = game_rules.valid_directions(request_data.board)
    except move_engine.ShapeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid board structure in request: {str(e)}")
    return ValidMovesResponseData(directions=directions)
