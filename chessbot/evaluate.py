"""
Tapered evaluation over the compressed piece-square tables.

Every piece contributes a midgame and an endgame value (PST entry + base value
+ per-piece offset) and a phase weight. The two totals are blended by the
phase: a full set of pieces is pure midgame (phase = 24), bare kings and pawns
are pure endgame (phase = 0).

The score is returned from the perspective of the side to move (negamax
convention): positive means the side to move is ahead.

The arithmetic order matters. White is accumulated first, both totals are
negated, Black is accumulated, and both are negated again, leaving White minus
Black. The blend divides with truncation toward zero before the side-to-move
sign flip, so results agree exactly with the reference tables.
"""

import chess

from chessbot.constants import BASE_VALUE, MAX_PHASE, PIECE_TYPES
from chessbot.tables import TABLES, EvaluationTables


def _truncating_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero (Python's ``//`` floors)."""
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


def evaluate(board: chess.Board, tables: EvaluationTables = TABLES) -> int:
    """
    Tapered centipawn evaluation from the side-to-move's perspective.

    Args:
        board:  The position to score. Not modified.
        tables: Decoded evaluation tables; defaults to the built-in set.

    Returns:
        Score for the side to move. The starting position scores 0.
    """
    mid_game = 0
    end_game = 0
    phase = 0

    for eval_white in (True, False):
        flip = 56 if eval_white else 0
        color = chess.WHITE if eval_white else chess.BLACK

        for piece_type in PIECE_TYPES:
            piece = piece_type - 1
            base = BASE_VALUE << piece
            mg_bonus = base + tables.mg_offsets[piece]
            eg_bonus = base + tables.eg_offsets[piece]

            for square in chess.scan_forward(board.pieces_mask(piece_type, color)):
                phase += tables.phase_weights[piece]
                index = 64 * piece + (square ^ flip)
                mid_game += tables.mg_pst[index] + mg_bonus
                end_game += tables.eg_pst[index] + eg_bonus

        mid_game = -mid_game
        end_game = -end_game

    score = _truncating_div(mid_game * phase + end_game * (MAX_PHASE - phase), MAX_PHASE)
    return score if board.turn == chess.WHITE else -score
