"""
Configuration - Environment settings and match configuration.

Environment variables:
    TILEBREAK_ENV                   development | production
    TILEBREAK_LOG_LEVEL             logging level name (default INFO)
    ALLOWED_ORIGINS                 comma separated CORS origins
    TILEBREAK_BOARD_WIDTH           default board width
    TILEBREAK_BOARD_HEIGHT          default board height
    TILEBREAK_OPPONENT_MOVE_DELAY   seconds before the opponent moves
    TILEBREAK_OPPONENT_BREAK_DELAY  seconds after the opponent breaks
"""

import logging
import os

from pydantic import BaseModel, Field, field_validator

from .engine_core.board import DEFAULT_SIZE, MIN_SIZE

TILEBREAK_ENV = os.getenv("TILEBREAK_ENV", "development")
TILEBREAK_LOG_LEVEL = os.getenv("TILEBREAK_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

DEFAULT_BOARD_WIDTH = int(os.getenv("TILEBREAK_BOARD_WIDTH", DEFAULT_SIZE))
DEFAULT_BOARD_HEIGHT = int(os.getenv("TILEBREAK_BOARD_HEIGHT", DEFAULT_SIZE))
DEFAULT_MOVE_DELAY = float(os.getenv("TILEBREAK_OPPONENT_MOVE_DELAY", "0.5"))
DEFAULT_BREAK_DELAY = float(os.getenv("TILEBREAK_OPPONENT_BREAK_DELAY", "0.2"))

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class MatchConfig(BaseModel):
    """
    Board and pacing settings for one match.

    Width and height below 3 are clamped up to 3, not rejected.
    """
    width: int = Field(DEFAULT_BOARD_WIDTH, description="Board width in cells")
    height: int = Field(DEFAULT_BOARD_HEIGHT, description="Board height in cells")
    opponent_move_delay: float = Field(DEFAULT_MOVE_DELAY, ge=0.0)
    opponent_break_delay: float = Field(DEFAULT_BREAK_DELAY, ge=0.0)

    @field_validator("width", "height")
    @classmethod
    def clamp_size(cls, value: int) -> int:
        return max(MIN_SIZE, value)


def configure_logging(level: str | None = None):
    """Configure root logging from TILEBREAK_LOG_LEVEL unless a level is given."""
    level_name = (level or TILEBREAK_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
