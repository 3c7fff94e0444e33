"""
chessbot: a time-budgeted chess move chooser.

This package picks one move per turn with iterative-deepening negamax,
alpha-beta pruning, quiescence search over captures, a fixed-size transposition
table, and a tapered evaluation driven by compressed piece-square tables.
Board rules, move generation and hashing come from python-chess.

Modules:
    constants      — Score bounds, table sizes, MVV-LVA matrix, time divisor
    tables         — Packed piece-square data and its one-time decode
    evaluate       — Tapered static evaluation (side-to-move perspective)
    move_ordering  — Captures first, by MVV-LVA
    transposition  — Fixed-capacity transposition table
    board          — Draw/repetition predicates and scoped make/undo
    clock          — Turn clock and the time-budget check
    search         — Negamax, quiescence, iterative deepening
"""

from chessbot.clock import Clock, TurnClock
from chessbot.search import Searcher, SearchStats

__all__ = ["Clock", "Searcher", "SearchStats", "TurnClock"]
