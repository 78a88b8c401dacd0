"""State definitions for the wave runtime and the battle simulation."""

from enum import Enum


class WaveState(str, Enum):
    IDLE = "idle"
    SPAWNING = "spawning"
    CLEARING = "clearing"


class GameState(str, Enum):
    BUILD_PHASE = "build_phase"
    WAVE_RUNNING = "wave_running"
    GAME_OVER = "game_over"


class UnitState(str, Enum):
    ALIVE = "alive"
    DEAD = "dead"
    ESCAPED = "escaped"
