"""
Fixed-capacity transposition table.

Search results are cached by Zobrist key in a flat list addressed with
``key % capacity``. There is no bucket or chain: one slot per index.

Replacement rule: a slot is written only when it is empty (``INVALID``), or
when it already holds the *same* key searched to a strictly shallower depth.
An entry for a different position that happens to share the slot is never
evicted, and stays until the table is cleared. Search results depend on
this rule, so it must not be swapped for "always replace" or
"depth-preferred".
"""

import enum
from typing import NamedTuple


class TTFlag(enum.IntEnum):
    """Kind of score held by a slot."""

    INVALID = 0  # unused slot
    UPPER = 1    # fail low: score is an upper bound, nothing beat alpha
    LOWER = 2    # fail high: score is a lower bound, a move reached beta
    EXACT = 3    # alpha < score < beta


class TTEntry(NamedTuple):
    """One slot: the full key, the depth searched, the score and its bound type."""

    key: int
    depth: int
    score: int
    flag: TTFlag


EMPTY_ENTRY = TTEntry(0, 0, 0, TTFlag.INVALID)


class TranspositionTable:
    """
    Hash table of prior search results, owned by one searcher.

    Attributes:
        capacity: Number of slots; a power of two in practice.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"transposition table capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._slots: list[TTEntry] = [EMPTY_ENTRY] * capacity

    def __len__(self) -> int:
        return self.capacity

    def entry(self, key: int) -> TTEntry:
        """Raw slot contents for ``key`` (may belong to another position)."""
        return self._slots[key % self.capacity]

    def probe(self, key: int, depth: int, alpha: int, beta: int) -> int | None:
        """
        Cached score usable as a cutoff at this node, or None.

        The stored key must match (slots are shared between positions) and the
        stored search must be at least as deep as requested. Bounds only count
        when they already settle the window: a lower bound at or above beta,
        or an upper bound at or below alpha.
        """
        stored = self._slots[key % self.capacity]
        if stored.key != key or stored.depth < depth:
            return None

        if (
            stored.flag == TTFlag.EXACT
            or (stored.flag == TTFlag.LOWER and stored.score >= beta)
            or (stored.flag == TTFlag.UPPER and stored.score <= alpha)
        ):
            return stored.score
        return None

    def store(self, key: int, depth: int, score: int, flag: TTFlag) -> bool:
        """Write a result if the replacement rule allows it. Returns True when written."""
        index = key % self.capacity
        existing = self._slots[index]
        if existing.flag == TTFlag.INVALID or (existing.key == key and existing.depth < depth):
            self._slots[index] = TTEntry(key, depth, score, flag)
            return True
        return False

    def clear(self) -> None:
        """Empty every slot. Used between games, never during a search."""
        self._slots = [EMPTY_ENTRY] * self.capacity
