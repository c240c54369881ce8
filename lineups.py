# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Lineup enumeration and identity hashing.

Every ordered 9-player lineup from a roster is produced exactly once, in
two nested stages: size-9 combinations of roster indices in lexicographic
order, then every ordering of each combination by in-place swapping.

Generation is lazy. Both stages are available as generators and as
visit-callback functions where a callback returning ``False`` stops the
whole enumeration immediately. ``LineupEnumerator`` wraps the two stages
into one iterator of player tuples with an explicit ``stop()``.
"""

from __future__ import annotations

import math
from typing import Callable, Iterator, Sequence

from models import Player


LINEUP_SIZE = 9

FNV64_OFFSET = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
FNV64_MASK = 0xFFFFFFFFFFFFFFFF

Lineup = tuple[Player, ...]


class RosterSizeError(ValueError):
    """Raised when a roster is too small to fill a lineup."""

    def __init__(self, size: int, required: int = LINEUP_SIZE):
        self.size = size
        self.required = required
        super().__init__(f"Need at least {required} players, have {size}")


def require_roster_size(n: int, size: int = LINEUP_SIZE) -> None:
    if n < size:
        raise RosterSizeError(n, size)


def lineup_count(n: int, size: int = LINEUP_SIZE) -> int:
    """Number of distinct ordered lineups of *size* from *n* players."""
    require_roster_size(n, size)
    return math.comb(n, size) * math.factorial(size)


# ---------------------------------------------------------------------------
# Combination / permutation stages
# ---------------------------------------------------------------------------

def iter_combinations(n: int, k: int) -> Iterator[tuple[int, ...]]:
    """Yield all k-subsets of range(n) in lexicographic order."""
    idx = [0] * k

    def rec(i: int, start: int) -> Iterator[tuple[int, ...]]:
        if i == k:
            yield tuple(idx)
            return
        for s in range(start, n - (k - i) + 1):
            idx[i] = s
            yield from rec(i + 1, s + 1)

    return rec(0, 0)


def iter_permutations(indices: Sequence[int]) -> Iterator[tuple[int, ...]]:
    """Yield every ordering of *indices* by recursive in-place swapping.

    Order follows the swap sequence, not lexicographic order.
    """
    perm = list(indices)
    n = len(perm)

    def rec(i: int) -> Iterator[tuple[int, ...]]:
        if i == n:
            yield tuple(perm)
            return
        for j in range(i, n):
            perm[i], perm[j] = perm[j], perm[i]
            try:
                yield from rec(i + 1)
            finally:
                perm[i], perm[j] = perm[j], perm[i]

    return rec(0)


def visit_combinations(n: int, k: int,
                       visit: Callable[[tuple[int, ...]], bool]) -> bool:
    """Call *visit* with each k-combination; returns False if *visit* stopped it."""
    for comb in iter_combinations(n, k):
        if visit(comb) is False:
            return False
    return True


def visit_permutations(indices: Sequence[int],
                       visit: Callable[[tuple[int, ...]], bool]) -> bool:
    """Call *visit* with each ordering; returns False if *visit* stopped it."""
    for order in iter_permutations(indices):
        if visit(order) is False:
            return False
    return True


# ---------------------------------------------------------------------------
# Lineup enumerator
# ---------------------------------------------------------------------------

class LineupEnumerator:
    """Lazy iterator over every ordered lineup of a roster.

    The stop flag is checked after each emitted lineup; once set, iteration
    ends and no more lineups are produced. Enumeration is not resumable:
    iterating again starts from the first lineup.
    """

    def __init__(self, roster: Sequence[Player], size: int = LINEUP_SIZE):
        require_roster_size(len(roster), size)
        self.roster = list(roster)
        self.size = size
        self._stopped = False

    def __len__(self) -> int:
        return lineup_count(len(self.roster), self.size)

    def stop(self) -> None:
        self._stopped = True

    @property
    def stopped(self) -> bool:
        return self._stopped

    def orders(self) -> Iterator[tuple[int, ...]]:
        """Yield each lineup as a tuple of roster indices."""
        self._stopped = False
        for comb in iter_combinations(len(self.roster), self.size):
            for order in iter_permutations(comb):
                yield order
                if self._stopped:
                    return

    def lineup(self, order: Sequence[int]) -> Lineup:
        return tuple(self.roster[i] for i in order)

    def __iter__(self) -> Iterator[Lineup]:
        for order in self.orders():
            yield self.lineup(order)


# ---------------------------------------------------------------------------
# Identity hashing
# ---------------------------------------------------------------------------

def lineup_key(lineup: Sequence[Player]) -> str:
    """Order-sensitive identity key: ``0:Last,First|1:Last,First|...``."""
    return "|".join(
        f"{i}:{p.last_name},{p.first_name}" for i, p in enumerate(lineup)
    )


def fnv1a_64(data: bytes) -> int:
    h = FNV64_OFFSET
    for b in data:
        h ^= b
        h = (h * FNV64_PRIME) & FNV64_MASK
    return h


def lineup_hash(lineup: Sequence[Player]) -> int:
    """Stable 64-bit FNV-1a hash of the ordered lineup."""
    return fnv1a_64(lineup_key(lineup).encode("utf-8"))


def short_hash(h: int, width: int = 6) -> str:
    """Fixed-width hex prefix of a lineup hash for display."""
    return f"{h:016x}"[:width]
