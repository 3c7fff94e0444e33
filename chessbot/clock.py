"""
Turn clock: how long the bot has spent on this move and how much game time is left.

The search only asks one question of the clock, ``turn_time_exceeded``: has this
turn already used 1/TIME_DIVISOR of the remaining game time? The host can also
request an early stop (UCI "stop"); the search sees that at the same move
boundaries where it checks time.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from chessbot.constants import TIME_DIVISOR


@runtime_checkable
class Clock(Protocol):
    """
    What the search reads from a turn clock.

    TurnClock is the wall-clock implementation; tests substitute a clock that
    runs out after a fixed number of checks.
    """

    @property
    def milliseconds_elapsed_this_turn(self) -> int: ...

    @property
    def milliseconds_remaining(self) -> int: ...

    @property
    def stop_requested(self) -> bool: ...


@dataclass
class TurnClock:
    """
    Wall-clock timer for one turn.

    Attributes:
        game_remaining_ms: Game time left when the turn started.
        stop_event:        Set by the host to end the search at the next check.
        start_time:        Monotonic timestamp when the turn started.
    """

    game_remaining_ms: int
    stop_event: threading.Event = field(default_factory=threading.Event)
    start_time: float = field(default_factory=time.monotonic)

    @classmethod
    def for_move_time(cls, move_time_ms: int, stop_event: threading.Event | None = None) -> "TurnClock":
        """Clock whose per-turn budget comes out at roughly ``move_time_ms``."""
        return cls(
            game_remaining_ms=max(1, move_time_ms) * TIME_DIVISOR,
            stop_event=stop_event or threading.Event(),
        )

    @property
    def milliseconds_elapsed_this_turn(self) -> int:
        return int((time.monotonic() - self.start_time) * 1000)

    @property
    def milliseconds_remaining(self) -> int:
        return max(0, self.game_remaining_ms - self.milliseconds_elapsed_this_turn)

    @property
    def stop_requested(self) -> bool:
        return self.stop_event.is_set()


def turn_time_exceeded(clock: Clock) -> bool:
    """True once the turn has used its share of the remaining time, or a stop was requested."""
    if clock.stop_requested:
        return True
    return clock.milliseconds_elapsed_this_turn >= clock.milliseconds_remaining // TIME_DIVISOR
