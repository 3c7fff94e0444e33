import chess
import pytest

from chessbot.search import Searcher


class FakeClock:
    """
    Deterministic turn clock.

    Reports the turn as over after ``checks_allowed`` time checks (never, when
    None). The millisecond readings are fixed values for turn_time_exceeded tests.
    """

    def __init__(self, checks_allowed=None, elapsed_ms=0, remaining_ms=60_000):
        self.checks_allowed = checks_allowed
        self.checks = 0
        self.milliseconds_elapsed_this_turn = elapsed_ms
        self.milliseconds_remaining = remaining_ms

    @property
    def stop_requested(self):
        self.checks += 1
        return self.checks_allowed is not None and self.checks > self.checks_allowed


@pytest.fixture
def fake_clock():
    return FakeClock


@pytest.fixture
def searcher():
    return Searcher(tt_entries=1 << 16)


@pytest.fixture
def back_rank_mate():
    # White plays Ra8#.
    return chess.Board("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
