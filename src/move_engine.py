# move_engine.py
# This file is the stateless board-transformation engine for a 2048 game.
# Every direction is normalized onto a single "move left" merge by rotating the grid.

import logging
from enum import Enum
from functools import reduce
from typing import Dict, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

Cell = Optional[int]  # None marks an empty cell
Grid = List[List[Cell]]


class Direction(Enum):
    """Represents the possible move directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class ShapeError(ValueError):
    """Raised when a grid is empty or its rows have unequal lengths."""


class RowMergeResult(NamedTuple):
    row: List[Cell]
    moved: bool
    gained: int


class MoveResult(NamedTuple):
    grid: Grid
    moved: bool
    gained: int


# Counter-clockwise degrees that bring each direction into the "left" orientation,
# and the degrees that undo that rotation afterwards.
ROTATE_DEGREES: Dict[Direction, int] = {
    Direction.UP: 90,
    Direction.RIGHT: 180,
    Direction.DOWN: 270,
    Direction.LEFT: 0,
}
REVERT_DEGREES: Dict[Direction, int] = {
    Direction.UP: 270,
    Direction.RIGHT: 180,
    Direction.DOWN: 90,
    Direction.LEFT: 0,
}

# --- Grid Validation ---

def validate_grid(grid: Grid) -> bool:
    """
    Checks that a grid is rectangular.
    Args:
        grid (Grid): The grid to check.
    Returns:
        bool: True if the grid has at least one row and one column and every
              row has the same length as the first one.
    """
    if not grid or not grid[0]:
        return False
    first_row_length = len(grid[0])
    return all(len(row) == first_row_length for row in grid)

# --- Rotation ---

def rotate_counter_clockwise(grid: Grid, degrees: int) -> Grid:
    """
    Rotates a rectangular grid counter-clockwise by a multiple of 90 degrees.
    Args:
        grid (Grid): The grid to rotate. Never modified.
        degrees (int): One of 0, 90, 180 or 270.
    Returns:
        Grid: A new grid. 90 and 270 degree rotations swap the dimensions.
    Raises:
        ValueError: If degrees is not a supported rotation.
    """
    row_length = len(grid)
    column_length = len(grid[0]) if grid else 0

    if degrees == 0:
        return [list(row) for row in grid]
    if degrees == 90:
        return [
            [grid[r][column_length - 1 - c] for r in range(row_length)]
            for c in range(column_length)
        ]
    if degrees == 180:
        return [
            [grid[row_length - 1 - r][column_length - 1 - c] for c in range(column_length)]
            for r in range(row_length)
        ]
    if degrees == 270:
        return [
            [grid[row_length - 1 - r][c] for r in range(row_length)]
            for c in range(column_length)
        ]
    raise ValueError(f"Unsupported rotation: {degrees} degrees.")

# --- Row Merging ---

# (pending cell, cells already emitted, points gained so far)
_MergeState = Tuple[Cell, Tuple[int, ...], int]


def _fold_cell(state: _MergeState, cell: Cell) -> _MergeState:
    pending, output, gained = state
    if cell is None:
        return state
    if pending is None:
        return cell, output, gained
    if pending == cell:
        # The doubled tile goes to the output, so it cannot merge again this pass.
        merged_value = pending * 2
        return None, output + (merged_value,), gained + merged_value
    return cell, output + (pending,), gained


def merge_row_left(row: List[Cell]) -> RowMergeResult:
    """
    Slides and merges one row towards index 0 using classic 2048 rules.
    Each tile takes part in at most one merge per call.
    Args:
        row (List[Cell]): The row to process. Never modified.
    Returns:
        RowMergeResult: The new row padded with empty cells to the original
                        length, whether any position changed, and the sum of
                        the merged values.
    """
    pending, output, gained = reduce(_fold_cell, row, (None, (), 0))
    if pending is not None:
        output = output + (pending,)

    new_row: List[Cell] = list(output) + [None] * (len(row) - len(output))
    moved = any(before != after for before, after in zip(row, new_row))
    return RowMergeResult(new_row, moved, gained)

# --- Move Orchestration ---

def move(grid: Grid, direction: Direction) -> MoveResult:
    """
    Applies a move in the given direction to a copy of the grid.
    Args:
        grid (Grid): The current grid. Never modified.
        direction (Direction): The direction to move.
    Returns:
        MoveResult: The grid after the move (same dimensions as the input),
                    whether any tile moved, and the score gained from merges.
    Raises:
        ShapeError: If the grid is empty or not rectangular.
    """
    if not validate_grid(grid):
        logger.warning("Refusing to move a non-rectangular grid: row lengths %s",
                       [len(row) for row in grid])
        raise ShapeError("Grid must be a non-empty N x M matrix.")

    rotated = rotate_counter_clockwise(grid, ROTATE_DEGREES[direction])
    merged_rows = [merge_row_left(row) for row in rotated]

    moved = any(merged.moved for merged in merged_rows)
    gained = sum(merged.gained for merged in merged_rows)
    result = rotate_counter_clockwise([merged.row for merged in merged_rows],
                                      REVERT_DEGREES[direction])

    logger.debug("move %s: moved=%s gained=%d", direction.value, moved, gained)
    return MoveResult(result, moved, gained)
