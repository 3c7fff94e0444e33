"""
Engine constants: score bounds, table sizes, ordering priorities, and time control.

All numeric constants used throughout the bot are defined here so that the
search, evaluation, and ordering modules never need to introduce magic numbers.

A handful of operational knobs (table size, time divisor, depth caps) can be
overridden from the environment, e.g. ``CHESSBOT_TT_ENTRIES=65536``. Scores and
the MVV-LVA matrix are fixed: changing them changes which moves the bot plays.
"""

import os

import chess


def _env_int(key: str, default: int) -> int:
    """Get an integer from the environment, falling back to ``default``."""
    val = os.environ.get(key)
    if val is None:
        return default
    return int(val)


# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# MIN_VAL / MAX_VAL play the role of -INF / +INF. Mate scores are encoded as
# MIN_VAL + ply, so they always sit far outside the evaluation range.

MIN_VAL: int = -999_999
MAX_VAL: int = 999_999
DRAW_SCORE: int = 0

# Any |score| above this is a mate score (the ply cap keeps the mate distance small).
MATE_THRESHOLD: int = MAX_VAL - 1_000

# ---------------------------------------------------------------------------
# Transposition table
# ---------------------------------------------------------------------------
# 2^20 entries. Slots are addressed with key % TT_ENTRIES.
TT_ENTRIES: int = _env_int("CHESSBOT_TT_ENTRIES", 1 << 20)

# ---------------------------------------------------------------------------
# Search limits
# ---------------------------------------------------------------------------
# MAX_DEPTH caps iterative deepening. The turn budget ends the search long
# before this in real games.
MAX_DEPTH: int = _env_int("CHESSBOT_MAX_DEPTH", 64)

# MAX_PLY bounds recursion when quiescence follows a long chain of captures.
# Nodes at this distance from the root are scored statically.
MAX_PLY: int = _env_int("CHESSBOT_MAX_PLY", 96)

# ---------------------------------------------------------------------------
# Time management
# ---------------------------------------------------------------------------
# A turn is over once the time spent on it reaches 1/30 of the clock.
TIME_DIVISOR: int = _env_int("CHESSBOT_TIME_DIVISOR", 30)

# ---------------------------------------------------------------------------
# Tapered evaluation
# ---------------------------------------------------------------------------
# Phase of a full starting set (both colours): 4 minors x1, 4 rooks x2, 2 queens x4.
MAX_PHASE: int = 24

# Base material added to every PST entry: 47 << piece_index (pawn = 0).
BASE_VALUE: int = 47

# ---------------------------------------------------------------------------
# MVV-LVA ordering
# ---------------------------------------------------------------------------
# Indexed by [victim][attacker]; index 0 = no piece, 1..6 = pawn..king, which
# lines up with chess.PAWN..chess.KING. Used for ordering only.

MVV_LVA: tuple[tuple[int, ...], ...] = (
    (0, 0, 0, 0, 0, 0, 0),          # victim None, attacker None, P, N, B, R, Q, K
    (0, 15, 14, 13, 12, 11, 10),    # victim P
    (0, 25, 24, 23, 22, 21, 20),    # victim N
    (0, 35, 34, 33, 32, 31, 30),    # victim B
    (0, 45, 44, 43, 42, 41, 40),    # victim R
    (0, 55, 54, 53, 52, 51, 50),    # victim Q
    (0, 0, 0, 0, 0, 0, 0),          # victim K
)

PIECE_TYPES: tuple[int, ...] = (
    chess.PAWN,
    chess.KNIGHT,
    chess.BISHOP,
    chess.ROOK,
    chess.QUEEN,
    chess.KING,
)
