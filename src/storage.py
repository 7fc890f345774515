# storage.py
# Persists the board and score under fixed string keys, like browser local storage.

import json
import logging
import os
import tempfile
from typing import Dict, Optional, Tuple

from move_engine import Grid, validate_grid

logger = logging.getLogger(__name__)

BOARD_KEY = "board-2048"
SCORE_KEY = "score-2048"


class MemoryStore:
    """Key/value store kept in memory only."""

    def __init__(self) -> None:
        self._values: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def set_many(self, items: Dict[str, str]) -> None:
        self._values.update(items)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileStore:
    """
    Key/value store backed by a single JSON object on disk.
    A missing file is an empty store. Writes replace the file atomically.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: expected a JSON object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, values: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".game2048-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(values, fh)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, items: Dict[str, str]) -> None:
        """Writes several keys with a single file replacement."""
        values = self._read_all()
        values.update(items)
        self._write_all(values)

    def delete(self, key: str) -> None:
        values = self._read_all()
        if values.pop(key, None) is not None:
            self._write_all(values)


def save_game(store, grid: Grid, score: int) -> None:
    store.set_many({BOARD_KEY: json.dumps(grid), SCORE_KEY: str(score)})


def _parse_board(raw: str) -> Optional[Grid]:
    try:
        board = json.loads(raw)
    except ValueError:
        logger.warning("Saved board is not valid JSON; starting over")
        return None
    if not isinstance(board, list) or not all(isinstance(row, list) for row in board):
        logger.warning("Saved board is not a list of rows; starting over")
        return None
    if not validate_grid(board):
        logger.warning("Saved board is not rectangular; starting over")
        return None
    for row in board:
        for cell in row:
            if cell is not None and (isinstance(cell, bool) or not isinstance(cell, int) or cell <= 0):
                logger.warning("Saved board holds an invalid cell %r; starting over", cell)
                return None
    return board


def load_game(store) -> Tuple[Optional[Grid], Optional[int]]:
    """
    Reads the saved board and score.
    Args:
        store: Any object with get(key) -> Optional[str].
    Returns:
        Tuple[Optional[Grid], Optional[int]]: The board and score, each None when
                                              missing or unusable.
    """
    raw_board = store.get(BOARD_KEY)
    board = _parse_board(raw_board) if raw_board is not None else None

    raw_score = store.get(SCORE_KEY)
    score: Optional[int] = None
    if raw_score is not None:
        try:
            score = int(raw_score)
        except ValueError:
            logger.warning("Saved score %r is not an integer; resetting it", raw_score)
        else:
            if score < 0:
                logger.warning("Saved score %d is negative; resetting it", score)
                score = None
    return board, score
