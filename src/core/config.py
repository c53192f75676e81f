"""Configuration of the game clock"""

import os
from typing import Self

from pydantic import BaseModel, ConfigDict, PositiveFloat

INITIAL_SECONDS_ENV = "CHESS_CLOCK_INITIAL_SECONDS"
TICK_SECONDS_ENV = "CHESS_CLOCK_TICK_SECONDS"


class ClockConfig(BaseModel):
    """
    Time control for both players.

    * initial_seconds: time each player starts with (10 minutes by default)
    * tick_seconds: how often the clock worker wakes up. Each tick also removes exactly this amount from the active player.
    """

    model_config = ConfigDict(frozen=True)

    initial_seconds: PositiveFloat = 600.0
    tick_seconds: PositiveFloat = 1.0

    @classmethod
    def from_env(cls) -> Self:
        """Override the defaults with environment variables (if set). Pydantic validates the strings."""
        overrides: dict[str, str] = {}
        if (initial := os.getenv(INITIAL_SECONDS_ENV)) is not None:
            overrides["initial_seconds"] = initial
        if (tick := os.getenv(TICK_SECONDS_ENV)) is not None:
            overrides["tick_seconds"] = tick
        return cls.model_validate(overrides)
