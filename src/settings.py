# settings.py
# Runtime configuration for the game session, CLI and API, read from environment variables.

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

from game_rules import DEFAULT_BOARD_SIZE, DEFAULT_WIN_TILE

ENV_PREFIX = "GAME2048_"
DEFAULT_STORE_PATH = os.path.join(os.path.expanduser("~"), ".game2048.json")


class Settings(BaseModel):
    """Settings shared by every entry point."""
    board_size: int = Field(
        default=DEFAULT_BOARD_SIZE,
        gt=1,
        description="Dimension N of the N x N board."
    )
    win_tile: int = Field(
        default=DEFAULT_WIN_TILE,
        gt=0,
        description="Tile value that ends the game as a win."
    )
    undo_depth: Optional[int] = Field(
        default=None,
        ge=1,
        description="How many moves can be undone. None keeps the whole history."
    )
    store_path: Optional[str] = Field(
        default=DEFAULT_STORE_PATH,
        description="JSON file used to persist the board and score. None disables persistence."
    )
    rate_limit: str = Field(
        default="100/minute",
        description="slowapi rate limit applied to every API endpoint."
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Builds Settings from GAME2048_* environment variables.
    Args:
        environ (Optional[Mapping[str, str]]): Variables to read. Defaults to os.environ.
    Returns:
        Settings: Validated settings; unset variables keep their defaults.
    Raises:
        pydantic.ValidationError: If a variable holds an invalid value.
    """
    if environ is None:
        environ = os.environ

    values = {}
    for field_name in ("board_size", "win_tile", "undo_depth", "store_path", "rate_limit", "log_level"):
        raw = environ.get(ENV_PREFIX + field_name.upper())
        if raw is None:
            continue
        raw = raw.strip()
        if field_name in ("undo_depth", "store_path") and raw == "":
            values[field_name] = None
        else:
            values[field_name] = raw

    if "log_level" in values:
        values["log_level"] = values["log_level"].upper()
    return Settings(**values)
