# session.py
# A single player's game: current board, score, undo history and persistence.

import logging
import random
from collections import deque
from typing import Deque, Optional, Tuple

from game_rules import has_tile, initialize_board, add_random_tile, is_terminal
from move_engine import Direction, Grid, MoveResult, move
from settings import Settings
from storage import JsonFileStore, MemoryStore, load_game, save_game

logger = logging.getLogger(__name__)

Snapshot = Tuple[Grid, int]


def store_from_settings(settings: Settings):
    if settings.store_path:
        return JsonFileStore(settings.store_path)
    return MemoryStore()


class GameSession:
    """
    Drives one game on top of the stateless move engine.

    The board and score are reloaded from the store when a saved game exists
    and written back after every change. Each effective move pushes the
    previous (board, score) onto the undo history.
    """

    def __init__(self, settings: Optional[Settings] = None, store=None,
                 rng: Optional[random.Random] = None) -> None:
        self.settings = settings or Settings()
        self.store = store if store is not None else store_from_settings(self.settings)
        self.rng = rng
        self._history: Deque[Snapshot] = deque(maxlen=self.settings.undo_depth)

        saved_board, saved_score = load_game(self.store)
        if saved_board is not None:
            logger.info("Resuming saved game from %s", type(self.store).__name__)
            self._board = saved_board
        else:
            self._board = initialize_board(self.settings.board_size, rng=self.rng)
        self._score = saved_score if saved_score is not None else 0
        self._game_over = is_terminal(self._board, self.settings.win_tile)
        self._save()

    @property
    def board(self) -> Grid:
        return [list(row) for row in self._board]

    @property
    def score(self) -> int:
        return self._score

    @property
    def history_depth(self) -> int:
        return len(self._history)

    @property
    def game_over(self) -> bool:
        return self._game_over

    @property
    def won(self) -> bool:
        return has_tile(self._board, self.settings.win_tile)

    def _save(self) -> None:
        save_game(self.store, self._board, self._score)

    def play(self, direction: Direction) -> MoveResult:
        """
        Applies a move, then adds a random tile if anything moved.
        Args:
            direction (Direction): The direction to move.
        Returns:
            MoveResult: The engine's result for the move (before the new tile).
                        A finished game always yields a result with moved=False.
        """
        if self._game_over:
            return MoveResult(self.board, False, 0)

        result = move(self._board, direction)
        if not result.moved:
            return result

        self._history.append((self._board, self._score))
        self._board = add_random_tile(result.grid, self.rng)
        self._score += result.gained
        self._game_over = is_terminal(self._board, self.settings.win_tile)
        if self._game_over:
            logger.info("Game finished with score %d (won=%s)", self._score, self.won)
        self._save()
        return result

    def undo(self) -> bool:
        """Restores the state before the last effective move. False when there is nothing to undo."""
        if not self._history:
            return False
        self._board, self._score = self._history.pop()
        self._game_over = False
        self._save()
        return True

    def new_game(self) -> None:
        self._board = initialize_board(self.settings.board_size, rng=self.rng)
        self._score = 0
        self._history.clear()
        self._game_over = False
        self._save()
