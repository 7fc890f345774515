# game_rules.py
# Board construction, random tiles and end-of-game checks that sit around the move engine.

import logging
import random
from enum import Enum
from typing import List, Optional, Tuple

from move_engine import Direction, Grid, ShapeError, move, validate_grid

logger = logging.getLogger(__name__)

DEFAULT_BOARD_SIZE = 4
DEFAULT_WIN_TILE = 128


class GameProgressState(Enum):
    """Represents the current progress state of the game."""
    IN_PROGRESS = 1
    GAME_OVER = 2  # Lost
    GAME_WON = 3

# --- Board Helper Functions ---

def empty_board(rows: int = DEFAULT_BOARD_SIZE, columns: Optional[int] = None) -> Grid:
    """
    Builds a board with no tiles.
    Args:
        rows (int): Number of rows.
        columns (Optional[int]): Number of columns. Defaults to rows (square board).
    Returns:
        Grid: A new rows x columns board of empty cells.
    Raises:
        ValueError: If either dimension is not a positive integer.
    """
    if columns is None:
        columns = rows
    for dimension in (rows, columns):
        if not isinstance(dimension, int) or dimension <= 0:
            raise ValueError("Board dimensions must be positive integers.")
    return [[None] * columns for _ in range(rows)]


def get_empty_cells(grid: Grid) -> List[Tuple[int, int]]:
    """
    Get coordinates of empty cells in the given grid.
    Args:
        grid (Grid): The grid to check.
    Returns:
        List[Tuple[int, int]]: List of (row, col) tuples for empty cells.
    """
    return [
        (r, c)
        for r, row in enumerate(grid)
        for c, cell in enumerate(row)
        if cell is None
    ]


def add_random_tile(grid: Grid, rng: Optional[random.Random] = None) -> Grid:
    """
    Adds a new tile (90% chance of 2, 10% chance of 4) to a random empty cell on a copy of the grid.
    Args:
        grid (Grid): The current grid. Never modified.
        rng (Optional[random.Random]): Source of randomness. Defaults to the random module.
    Returns:
        Grid: A new grid with the added tile, or an unchanged copy if no cell is empty.
    """
    rng = rng or random
    new_grid = [list(row) for row in grid]
    empty_cells = get_empty_cells(grid)
    if not empty_cells:
        return new_grid

    row, col = rng.choice(empty_cells)
    new_grid[row][col] = 4 if rng.random() < 0.1 else 2
    return new_grid


def initialize_board(rows: int = DEFAULT_BOARD_SIZE,
                     columns: Optional[int] = None,
                     rng: Optional[random.Random] = None) -> Grid:
    """Creates a new board holding two random tiles."""
    board = empty_board(rows, columns)
    board = add_random_tile(board, rng)
    return add_random_tile(board, rng)


def sum_board(grid: Grid) -> int:
    return sum(cell for row in grid for cell in row if cell is not None)

# --- Game State Checks ---

def has_tile(grid: Grid, value: int) -> bool:
    return any(cell == value for row in grid for cell in row)


def can_move(grid: Grid) -> bool:
    """
    Checks whether any move is still possible.
    Args:
        grid (Grid): The grid to check.
    Returns:
        bool: True if a cell is empty or two horizontally or vertically
              adjacent cells hold the same value.
    """
    for r, row in enumerate(grid):
        for c, cell in enumerate(row):
            if cell is None:
                return True
            if r + 1 < len(grid) and grid[r + 1][c] == cell:
                return True
            if c + 1 < len(row) and row[c + 1] == cell:
                return True
    return False


def is_terminal(grid: Grid, win_tile: int = DEFAULT_WIN_TILE) -> bool:
    """True once the win tile exists or no move remains."""
    return has_tile(grid, win_tile) or not can_move(grid)


def determine_game_status(grid: Grid, win_tile: int = DEFAULT_WIN_TILE) -> GameProgressState:
    """
    Determines the current progress state of the game based on the grid.
    Args:
        grid (Grid): The current grid.
        win_tile (int): The tile value that signifies a win.
    Returns:
        GameProgressState: The current state (IN_PROGRESS, GAME_WON, GAME_OVER).
    Raises:
        ShapeError: If the grid is empty or not rectangular.
    """
    if not validate_grid(grid):
        raise ShapeError("Grid must be a non-empty N x M matrix.")
    if has_tile(grid, win_tile):
        return GameProgressState.GAME_WON
    if not can_move(grid):
        return GameProgressState.GAME_OVER
    return GameProgressState.IN_PROGRESS


def valid_directions(grid: Grid) -> List[Direction]:
    """Lists the directions that would change the grid."""
    allowed = [direction for direction in Direction if move(grid, direction).moved]
    logger.debug("valid directions: %s", [d.value for d in allowed])
    return allowed
