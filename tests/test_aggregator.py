# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0"]
# ///
"""Tests for the lineup rankings and per-lineup statistics.

Verifies:
1. Top-K keeps min(K, M) entries, each at least as good as any dropped one
2. Bottom-K is the mirror image
3. Replacement only happens on a strictly better mean
4. Cumulative stats accumulate and merge by lineup hash
5. Concurrent updates lose nothing and never duplicate ranking entries
"""

import random
import sys
import threading
from pathlib import Path

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from aggregator import (
    Agg,
    BoundedRanking,
    LineupAggregator,
    LineupResult,
    LineupStats,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_result(mean, key):
    return LineupResult(mean=mean, order=tuple(f"P{key}-{i}" for i in range(9)), hash=key)


def make_results(n, seed=0):
    rng = random.Random(seed)
    return [make_result(round(rng.uniform(2.0, 6.0), 4), key) for key in range(n)]


# ===========================================================================
# Test: Bounded rankings
# ===========================================================================

@pytest.mark.parametrize("m", [0, 1, 5, 10, 11, 300])
def test_top_ranking_keeps_min_k_m(m):
    k = 10
    ranking = BoundedRanking(k, keep="highest")
    results = make_results(m)
    for r in results:
        ranking.offer(r)
    kept = ranking.sorted()
    assert len(kept) == min(k, m)
    kept_hashes = {r.hash for r in kept}
    dropped = [r for r in results if r.hash not in kept_hashes]
    if kept and dropped:
        assert min(r.mean for r in kept) >= max(r.mean for r in dropped)


@pytest.mark.parametrize("m", [0, 3, 10, 250])
def test_bottom_ranking_keeps_min_k_m(m):
    k = 10
    ranking = BoundedRanking(k, keep="lowest")
    results = make_results(m, seed=1)
    for r in results:
        ranking.offer(r)
    kept = ranking.sorted()
    assert len(kept) == min(k, m)
    kept_hashes = {r.hash for r in kept}
    dropped = [r for r in results if r.hash not in kept_hashes]
    if kept and dropped:
        assert max(r.mean for r in kept) <= min(r.mean for r in dropped)


def test_sorted_order():
    top = BoundedRanking(5, keep="highest")
    bottom = BoundedRanking(5, keep="lowest")
    for r in make_results(50, seed=2):
        top.offer(r)
        bottom.offer(r)
    top_means = [r.mean for r in top.sorted()]
    bottom_means = [r.mean for r in bottom.sorted()]
    assert top_means == sorted(top_means, reverse=True)
    assert bottom_means == sorted(bottom_means)


def test_tie_does_not_replace():
    ranking = BoundedRanking(2, keep="highest")
    assert ranking.offer(make_result(4.0, 1))
    assert ranking.offer(make_result(5.0, 2))
    assert not ranking.offer(make_result(4.0, 3))
    assert {r.hash for r in ranking.sorted()} == {1, 2}
    assert ranking.offer(make_result(4.5, 4))
    assert {r.hash for r in ranking.sorted()} == {2, 4}


def test_threshold():
    ranking = BoundedRanking(2, keep="lowest")
    assert ranking.threshold() is None
    ranking.offer(make_result(3.0, 1))
    ranking.offer(make_result(2.0, 2))
    assert ranking.threshold() == 3.0
    ranking.offer(make_result(1.0, 3))
    assert ranking.threshold() == 2.0


def test_ranking_rejects_bad_arguments():
    with pytest.raises(ValueError):
        BoundedRanking(0)
    with pytest.raises(ValueError):
        BoundedRanking(5, keep="middle")


# ===========================================================================
# Test: Cumulative stats
# ===========================================================================

class TestLineupStats:

    def test_record_accumulates(self):
        stats = LineupStats()
        stats.record(7, games=200, runs=850, hits=1700)
        agg = stats.record(7, games=200, runs=900, hits=1750)
        assert agg == Agg(games=400, runs=1750, hits=3450)
        assert stats.get(7) == agg
        assert agg.mean_runs == pytest.approx(4.375)
        assert len(stats) == 1
        assert 7 in stats

    def test_get_missing(self):
        assert LineupStats().get(123) is None

    def test_get_returns_copy(self):
        stats = LineupStats()
        stats.record(1, 10, 40, 80)
        stats.get(1).runs = 0
        assert stats.get(1).runs == 40

    def test_merge_by_identity(self):
        a, b = LineupStats(), LineupStats()
        a.record(1, 10, 40, 90)
        a.record(2, 10, 30, 80)
        b.record(2, 10, 50, 85)
        b.record(3, 10, 20, 70)
        a.merge(b)
        snap = a.snapshot()
        assert set(snap) == {1, 2, 3}
        assert snap[2] == Agg(games=20, runs=80, hits=165)
        assert snap[3].to_dict() == {"games": 10, "runs": 20, "hits": 70}

    def test_empty_agg_mean(self):
        assert Agg().mean_runs == 0.0


# ===========================================================================
# Test: Aggregator
# ===========================================================================

def test_aggregator_add_updates_everything():
    agg = LineupAggregator(top_k=3, bottom_k=2)
    for i, r in enumerate(make_results(20, seed=4), start=1):
        assert agg.add(r, games=10, runs=int(r.mean * 10), hits=90) == i
    assert agg.processed == 20
    assert len(agg.top()) == 3
    assert len(agg.bottom()) == 2
    assert len(agg.stats) == 20


def test_aggregator_independent_of_completion_order():
    results = make_results(500, seed=5)
    shuffled = list(results)
    random.Random(9).shuffle(shuffled)

    a = LineupAggregator(top_k=25, bottom_k=10)
    b = LineupAggregator(top_k=25, bottom_k=10)
    for r in results:
        a.add(r, 1, 0, 0)
    for r in shuffled:
        b.add(r, 1, 0, 0)
    assert [r.mean for r in a.top()] == [r.mean for r in b.top()]
    assert [r.mean for r in a.bottom()] == [r.mean for r in b.bottom()]


def test_concurrent_updates_lose_nothing():
    n_threads = 8
    per_thread = 500
    results = make_results(n_threads * per_thread, seed=6)
    agg = LineupAggregator(top_k=50, bottom_k=10)
    barrier = threading.Barrier(n_threads)

    def worker(chunk):
        barrier.wait()
        for r in chunk:
            agg.add(r, games=2, runs=3, hits=5)

    threads = [
        threading.Thread(target=worker, args=(results[i::n_threads],))
        for i in range(n_threads)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert agg.processed == len(results)
    assert len(agg.stats) == len(results)
    snap = agg.stats.snapshot()
    assert all(a == Agg(games=2, runs=3, hits=5) for a in snap.values())

    top = agg.top()
    assert len(top) == 50
    assert len({r.hash for r in top}) == 50
    expected_top = sorted((r.mean for r in results), reverse=True)[:50]
    assert [r.mean for r in top] == expected_top

    bottom = agg.bottom()
    assert len({r.hash for r in bottom}) == 10
    assert [r.mean for r in bottom] == sorted(r.mean for r in results)[:10]
