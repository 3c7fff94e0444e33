"""
Board predicates and scoped move application on top of python-chess.

python-chess supplies legality, make/undo and hashing. This module pins down
the few board questions the search asks, so their exact meaning lives in one
place:

    is_repeated_position  the position already occurred earlier in the game
                          (twofold). Used to steer away from shuffling.
    is_draw               a draw by rule: stalemate, insufficient material,
                          fifty-move rule, or threefold repetition.
    zobrist_key           the 64-bit Polyglot Zobrist hash.
    applied               push a move and guarantee the matching pop.
"""

from contextlib import contextmanager
from typing import Iterator

import chess
import chess.polyglot


def is_repeated_position(board: chess.Board) -> bool:
    """True if the current position already occurred earlier in the game."""
    return board.is_repetition(2)


def is_draw(board: chess.Board) -> bool:
    """True for a draw by rule. Twofold repetition alone does not count."""
    return (
        board.is_stalemate()
        or board.is_insufficient_material()
        or board.is_fifty_moves()
        or board.is_repetition(3)
    )


def zobrist_key(board: chess.Board) -> int:
    """Polyglot Zobrist hash of the position, used as the transposition key."""
    return chess.polyglot.zobrist_hash(board)


@contextmanager
def applied(board: chess.Board, move: chess.Move) -> Iterator[chess.Board]:
    """
    Make ``move`` for the duration of the block.

    The move is always taken back when the block exits, including on an early
    return or an exception, so the caller sees the board exactly as before.
    """
    board.push(move)
    try:
        yield board
    finally:
        board.pop()
