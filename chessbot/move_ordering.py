"""
Capture-first move ordering.

Captures are sorted by MVV-LVA (Most Valuable Victim - Least Valuable
Attacker): PxQ is tried before QxP. Quiet moves follow in the order the move
generator produced them. There is deliberately nothing else here: no killer
moves, no history heuristic, no principal-variation move first.
"""

import chess

from chessbot.constants import MVV_LVA


def capture_priority(board: chess.Board, move: chess.Move) -> int:
    """
    MVV-LVA priority of a capture on the current board.

    The board must be in the position *before* ``move`` is made. An en passant
    capture lands on an empty square; its victim is a pawn.
    """
    attacker = board.piece_type_at(move.from_square) or 0
    if board.is_en_passant(move):
        victim = chess.PAWN
    else:
        victim = board.piece_type_at(move.to_square) or 0
    return MVV_LVA[victim][attacker]


def order_moves(board: chess.Board, captures_only: bool = False) -> list[chess.Move]:
    """
    Legal moves of ``board``, captures first.

    Args:
        board:         The current position. Not modified.
        captures_only: Return only the sorted captures (quiescence search).

    Returns:
        Captures sorted by descending MVV-LVA priority (ties keep generator
        order), followed, unless ``captures_only``, by every non-capture in
        generator order.
    """
    captures: list[chess.Move] = []
    quiet: list[chess.Move] = []
    for move in board.legal_moves:
        if board.is_capture(move):
            captures.append(move)
        elif not captures_only:
            quiet.append(move)

    # sorted() is stable, also with reverse=True.
    captures = sorted(captures, key=lambda m: capture_priority(board, m), reverse=True)

    if captures_only:
        return captures
    return captures + quiet
