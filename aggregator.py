# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Thread-safe lineup rankings and cumulative per-lineup statistics.

Workers hand each finished lineup to a shared ``LineupAggregator``. It keeps
a bounded ranking of the highest mean-run lineups, a bounded ranking of the
lowest, and a map of cumulative games/runs/hits keyed by lineup hash.

Rankings only replace an entry when the newcomer is strictly better, so the
final contents do not depend on the order workers finish in (up to ties).
"""

from __future__ import annotations

import heapq
import itertools
import threading
from dataclasses import dataclass, field


DEFAULT_TOP_K = 256
DEFAULT_BOTTOM_K = 10


@dataclass(frozen=True)
class LineupResult:
    """Summary of all games played by one ordered lineup."""
    mean: float
    order: tuple[str, ...]  # last names in batting order
    hash: int


@dataclass
class Agg:
    games: int = 0
    runs: int = 0
    hits: int = 0

    @property
    def mean_runs(self) -> float:
        return self.runs / self.games if self.games else 0.0

    def to_dict(self) -> dict:
        return {"games": self.games, "runs": self.runs, "hits": self.hits}


# ---------------------------------------------------------------------------
# Bounded rankings
# ---------------------------------------------------------------------------

class BoundedRanking:
    """Keeps the *capacity* highest (or lowest) lineups by mean runs.

    Backed by a heap whose root is the worst entry still kept: a min-heap
    for ``keep="highest"``, a max-heap (negated means) for ``keep="lowest"``.
    """

    def __init__(self, capacity: int, keep: str = "highest"):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if keep not in ("highest", "lowest"):
            raise ValueError(f"keep must be 'highest' or 'lowest', got {keep!r}")
        self.capacity = capacity
        self.keep = keep
        self._sign = 1.0 if keep == "highest" else -1.0
        self._heap: list[tuple[float, int, LineupResult]] = []
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._heap)

    def offer(self, result: LineupResult) -> bool:
        """Insert *result* if it ranks; returns True when kept."""
        key = self._sign * result.mean
        with self._lock:
            entry = (key, next(self._seq), result)
            if len(self._heap) < self.capacity:
                heapq.heappush(self._heap, entry)
                return True
            if self._heap[0][0] < key:
                heapq.heapreplace(self._heap, entry)
                return True
            return False

    def threshold(self) -> float | None:
        """Mean of the worst entry still kept, or None while empty."""
        with self._lock:
            if not self._heap:
                return None
            return self._sign * self._heap[0][0]

    def sorted(self) -> list[LineupResult]:
        """Entries best first: descending means for highest, ascending for lowest."""
        with self._lock:
            entries = list(self._heap)
        entries.sort(key=lambda e: (-e[0], e[1]))
        return [e[2] for e in entries]


# ---------------------------------------------------------------------------
# Cumulative per-lineup statistics
# ---------------------------------------------------------------------------

class LineupStats:
    """Map of lineup hash -> Agg. Safe for concurrent use.

    Each ordered lineup appears once per enumeration, so within a single run
    every key is recorded once; ``merge`` combines results across runs.
    """

    def __init__(self):
        self._data: dict[int, Agg] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: int) -> bool:
        with self._lock:
            return key in self._data

    def record(self, key: int, games: int, runs: int, hits: int) -> Agg:
        with self._lock:
            agg = self._data.get(key)
            if agg is None:
                agg = self._data[key] = Agg()
            agg.games += games
            agg.runs += runs
            agg.hits += hits
            return Agg(agg.games, agg.runs, agg.hits)

    def get(self, key: int) -> Agg | None:
        with self._lock:
            agg = self._data.get(key)
            return None if agg is None else Agg(agg.games, agg.runs, agg.hits)

    def snapshot(self) -> dict[int, Agg]:
        with self._lock:
            return {k: Agg(a.games, a.runs, a.hits) for k, a in self._data.items()}

    def merge(self, other: LineupStats) -> None:
        for key, agg in other.snapshot().items():
            self.record(key, agg.games, agg.runs, agg.hits)


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------

@dataclass
class LineupAggregator:
    """Shared sink for finished lineups."""
    top_k: int = DEFAULT_TOP_K
    bottom_k: int = DEFAULT_BOTTOM_K
    stats: LineupStats = field(default_factory=LineupStats)

    def __post_init__(self):
        self.top_ranking = BoundedRanking(self.top_k, keep="highest")
        self.bottom_ranking = BoundedRanking(self.bottom_k, keep="lowest")
        self._processed = 0
        self._count_lock = threading.Lock()

    @property
    def processed(self) -> int:
        with self._count_lock:
            return self._processed

    def add(self, result: LineupResult, games: int, runs: int, hits: int) -> int:
        """Fold one lineup's totals in; returns the running lineup count."""
        self.top_ranking.offer(result)
        self.bottom_ranking.offer(result)
        self.stats.record(result.hash, games, runs, hits)
        with self._count_lock:
            self._processed += 1
            return self._processed

    def top(self) -> list[LineupResult]:
        return self.top_ranking.sorted()

    def bottom(self) -> list[LineupResult]:
        return self.bottom_ranking.sorted()
