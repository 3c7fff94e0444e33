"""
Move search: negamax with alpha-beta pruning, quiescence search, a transposition
table, capture-first ordering, and iterative deepening under a turn clock.

The public entry point is ``Searcher.choose_move(board, clock)``. One Searcher
is one agent: it owns its transposition table for its whole lifetime, so
results from earlier turns keep speeding up later ones.

Time is only looked at between moves (in the root loop and in every node's
child loop), never per node. When the turn is over mid-search, the node that
notices sets ``Searcher.aborted`` and returns the MAX_VAL sentinel; every frame
above it returns straight away without touching the transposition table, and
the root discards the score. Aborted scores are never compared against real
ones.

Board discipline: every child is searched inside ``applied(board, move)``, so
the position is restored on every exit path, including aborts.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

import chess

from chessbot.board import applied, is_draw, is_repeated_position, zobrist_key
from chessbot.clock import Clock, turn_time_exceeded
from chessbot.constants import DRAW_SCORE, MAX_DEPTH, MAX_PLY, MAX_VAL, MIN_VAL, TT_ENTRIES
from chessbot.evaluate import evaluate
from chessbot.move_ordering import order_moves
from chessbot.transposition import TranspositionTable, TTFlag

_log = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """
    Counters for the most recent search, reset by every choose_move().

    Attributes:
        nodes:       Positions visited (negamax and quiescence).
        evaluations: Calls to the static evaluator.
        tt_hits:     Nodes answered from the transposition table.
        depth:       Deepest iteration that finished every root move.
        score:       Score of the chosen move, side-to-move perspective, or
                     None when no root move was scored before time ran out.
        best_move:   The chosen move (null until one is recorded).
    """

    nodes: int = 0
    evaluations: int = 0
    tt_hits: int = 0
    depth: int = 0
    score: int | None = None
    best_move: chess.Move = field(default_factory=chess.Move.null)


class Searcher:
    """
    Iterative-deepening alpha-beta searcher with its own transposition table.

    Args:
        tt_entries: Transposition table capacity.
        evaluator:  Static evaluation, side-to-move perspective.
        max_depth:  Cap on iterative deepening.
    """

    def __init__(
        self,
        tt_entries: int = TT_ENTRIES,
        evaluator: Callable[[chess.Board], int] = evaluate,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        self.tt = TranspositionTable(tt_entries)
        self.evaluator = evaluator
        self.max_depth = max_depth
        self.stats = SearchStats()
        self.aborted = False
        self._clock: Clock | None = None

    def choose_move(self, board: chess.Board, clock: Clock, max_depth: int | None = None) -> chess.Move:
        """
        Pick a move for the side to move within the turn budget.

        The root move list is ordered once and kept in that order for every
        iteration. Each root move is scored with a full-window search at the
        current depth; the best score seen across the whole run wins. Moves
        scored before the clock ran out still count, the interrupted one does
        not.

        Args:
            board:     Current position. Restored before returning.
            clock:     Turn clock (see chessbot.clock).
            max_depth: Overrides the searcher's depth cap for this call.

        Returns:
            The best move found, or the first root move if no root move was
            scored before time ran out.

        Raises:
            ValueError: if the position has no legal moves.
        """
        root_moves = order_moves(board, captures_only=False)
        if not root_moves:
            raise ValueError(f"no legal moves in position {board.fen()}")

        self.stats = SearchStats()
        self.aborted = False
        self._clock = clock
        depth_limit = self.max_depth if max_depth is None else max_depth

        best_move = chess.Move.null()
        best_eval = MIN_VAL

        for depth in range(1, depth_limit + 1):
            if self._time_exceeded():
                break

            completed = True
            for move in root_moves:
                if self._time_exceeded():
                    completed = False
                    break

                with applied(board, move):
                    score = -self._negamax(board, depth, MIN_VAL, MAX_VAL, 0)

                if self.aborted:
                    completed = False
                    break

                if score > best_eval:
                    best_move = move
                    best_eval = score

            if not completed:
                break

            self.stats.depth = depth
            _log.debug(
                "depth %d best %s score %d nodes %d tt_hits %d",
                depth, best_move, best_eval, self.stats.nodes, self.stats.tt_hits,
            )

        self._clock = None

        if not best_move:
            _log.debug("no root move scored before time ran out; playing %s", root_moves[0])
            self.stats.best_move = root_moves[0]
            return root_moves[0]

        self.stats.best_move = best_move
        self.stats.score = best_eval
        _log.info(
            "chose %s score %d depth %d nodes %d",
            best_move, best_eval, self.stats.depth, self.stats.nodes,
        )
        return best_move

    def search(
        self,
        board: chess.Board,
        depth: int,
        alpha: int,
        beta: int,
        ply: int = 0,
        clock: Clock | None = None,
    ) -> int:
        """
        Score ``board`` for the side to move with a (depth, alpha, beta) search.

        ``ply`` is the distance from the root. Ply 0 skips the repetition check
        and the transposition probe. Without a clock the search never aborts.
        """
        self.aborted = False
        self._clock = clock
        try:
            return self._negamax(board, depth, alpha, beta, ply)
        finally:
            self._clock = None

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------

    def _time_exceeded(self) -> bool:
        return self._clock is not None and turn_time_exceeded(self._clock)

    def _evaluate(self, board: chess.Board) -> int:
        self.stats.evaluations += 1
        return self.evaluator(board)

    def _negamax(self, board: chess.Board, depth: int, alpha: int, beta: int, ply: int) -> int:
        self.stats.nodes += 1

        if (ply > 0 and is_repeated_position(board)) or is_draw(board):
            return DRAW_SCORE

        # Side to move is mated. Closer mates are worse for it, so the winner
        # prefers the fastest one.
        if board.is_checkmate():
            return MIN_VAL + ply

        if ply >= MAX_PLY:
            return self._evaluate(board)

        quiescence = depth <= 0
        best_eval = MIN_VAL

        # Stand pat: the side to move may decline every capture.
        if quiescence:
            best_eval = self._evaluate(board)
            alpha = max(alpha, best_eval)
            if alpha >= beta:
                return best_eval

        key = zobrist_key(board)
        if ply > 0:
            cached = self.tt.probe(key, depth, alpha, beta)
            if cached is not None:
                self.stats.tt_hits += 1
                return cached

        # Nothing beat alpha yet.
        flag = TTFlag.UPPER

        for move in order_moves(board, captures_only=quiescence):
            if self._time_exceeded():
                self.aborted = True
                return MAX_VAL

            with applied(board, move):
                score = -self._negamax(board, depth - 1, -beta, -alpha, ply + 1)

            if self.aborted:
                return score

            if score > best_eval:
                best_eval = score

                if score > alpha:
                    flag = TTFlag.EXACT
                    alpha = score

                if alpha >= beta:
                    flag = TTFlag.LOWER
                    break

        self.tt.store(key, depth, best_eval, flag)
        return best_eval
