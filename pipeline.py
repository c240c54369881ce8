# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Concurrent lineup simulation pipeline.

A producer thread walks the lineup enumeration and feeds a bounded
``multiprocessing`` queue with roster-index orders; a fixed pool of worker
processes pulls them, plays ``games_per_lineup`` games for each with a
privately seeded engine, and sends the per-lineup totals back. The parent
folds every result into a shared ``LineupAggregator``.

The task queue provides backpressure in both directions: the producer
blocks when it is full, workers block when it is empty. Each lineup is
delivered to exactly one worker.

Worker processes are started with the ``spawn`` method, so a pitcher
policy factory must be picklable (a module-level class or function).
"""

from __future__ import annotations

import logging
import multiprocessing
import pickle
import queue
import random
import threading
import time
from typing import Callable, Sequence

from aggregator import LineupAggregator, LineupResult
from config import SimConfig
from lineups import LineupEnumerator, lineup_hash, short_hash
from models import Player, RankedLineup, SimulationReport
from simulation import GameEngine, PitcherPolicy

logger = logging.getLogger(__name__)

WORKER_SEED_STRIDE = 9973

# Seconds between liveness checks while blocked on a queue
POLL_INTERVAL = 0.2

ProgressCallback = Callable[[int], None]
PolicyFactory = Callable[[], PitcherPolicy]

# Worker -> parent message tags
_RESULT = "result"
_ERROR = "error"
_DONE = "done"


class SimulationError(RuntimeError):
    """Raised when a worker fails while simulating a lineup."""


def log_progress(count: int) -> None:
    logger.info("Processed %d lineups...", count)


def simulate_lineup(engine: GameEngine, lineup: Sequence[Player],
                    games: int) -> tuple[LineupResult, int, int]:
    """Play *games* games for *lineup*; returns (result, runs_sum, hits_sum)."""
    runs_sum = 0
    hits_sum = 0
    for _ in range(games):
        game = engine.play_game(lineup)
        runs_sum += game.runs
        hits_sum += game.hits
    result = LineupResult(
        mean=runs_sum / games,
        order=tuple(p.last_name for p in lineup),
        hash=lineup_hash(lineup),
    )
    return result, runs_sum, hits_sum


def rank_results(results: Sequence[LineupResult]) -> list[RankedLineup]:
    return [
        RankedLineup(
            rank=i,
            short_hash=short_hash(r.hash),
            mean_runs=r.mean,
            order=list(r.order),
        )
        for i, r in enumerate(results, start=1)
    ]


# ---------------------------------------------------------------------------
# Worker process
# ---------------------------------------------------------------------------

def _portable(exc: BaseException) -> BaseException:
    """Return *exc* if it survives pickling, else a RuntimeError describing it."""
    try:
        pickle.dumps(exc)
    except Exception:
        return RuntimeError(f"{type(exc).__name__}: {exc}")
    return exc


def _worker_main(worker_id: int, roster: list[Player], seed: int, games: int,
                 policy_factory: PolicyFactory | None,
                 tasks, results, failed) -> None:
    """Simulate lineups from *tasks* until the ``None`` end marker arrives.

    After any failure (here or in another worker, signalled by *failed*)
    the worker keeps draining tasks without simulating them so the producer
    never blocks on a full queue.
    """
    engine = None
    try:
        policy = policy_factory() if policy_factory is not None else None
        engine = GameEngine(seed=seed, pitcher_policy=policy)
    except Exception as exc:
        results.put((_ERROR, worker_id, _portable(exc), []))
        failed.set()

    while True:
        order = tasks.get()
        if order is None:
            break
        if engine is None or failed.is_set():
            continue
        lineup = tuple(roster[i] for i in order)
        try:
            result, runs_sum, hits_sum = simulate_lineup(engine, lineup, games)
        except Exception as exc:
            results.put((_ERROR, worker_id, _portable(exc), [p.last_name for p in lineup]))
            failed.set()
            continue
        results.put((_RESULT, worker_id, result, runs_sum, hits_sum))

    results.put((_DONE, worker_id))


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------

class LineupSimulator:
    """Runs the producer/worker pipeline over every lineup of a roster.

    Args:
        roster: Players to build lineups from (at least nine).
        config: Run parameters; ``SimConfig()`` defaults when omitted.
        aggregator: Shared result sink. A new one sized from *config* is
            created when omitted; pass an existing one to accumulate
            statistics across runs.
        pitcher_policy_factory: Builds one pitcher policy per worker.
            Right-handed pitching throughout when omitted. Must be picklable.
        on_progress: Called in the parent with the running lineup count
            every ``config.progress_every`` lineups.

    Raises:
        RosterSizeError: roster has fewer than nine players. Raised on
            construction, before any worker starts.

    ``run()`` may be called more than once; each call enumerates from the
    first lineup and reports only its own lineups.
    """

    def __init__(self, roster: Sequence[Player], config: SimConfig | None = None,
                 aggregator: LineupAggregator | None = None,
                 pitcher_policy_factory: PolicyFactory | None = None,
                 on_progress: ProgressCallback | None = log_progress):
        self.config = config or SimConfig()
        self.enumerator = LineupEnumerator(roster)
        self.aggregator = aggregator or LineupAggregator(
            top_k=self.config.top_k, bottom_k=self.config.bottom_k,
        )
        self.pitcher_policy_factory = pitcher_policy_factory
        self.on_progress = on_progress
        self.base_seed = (
            self.config.seed if self.config.seed is not None
            else random.randint(0, 2**31 - 1)
        )
        self._context = multiprocessing.get_context("spawn")
        self._reset()

    def _reset(self) -> None:
        self.produced = 0
        self.processed = 0
        self._failed = self._context.Event()
        self._aborted = threading.Event()
        self._errors: list[BaseException] = []
        self._errors_lock = threading.Lock()

    def _record_error(self, exc: BaseException) -> None:
        with self._errors_lock:
            self._errors.append(exc)
        self._failed.set()
        self.enumerator.stop()

    # -------------------------------------------------------------------
    # Producer
    # -------------------------------------------------------------------

    def _put(self, tasks, item) -> bool:
        while True:
            try:
                tasks.put(item, timeout=POLL_INTERVAL)
                return True
            except queue.Full:
                if self._aborted.is_set():
                    return False

    def _produce(self, tasks) -> None:
        limit = self.config.max_lineups
        try:
            for order in self.enumerator.orders():
                if self._failed.is_set():
                    self.enumerator.stop()
                    continue
                if not self._put(tasks, order):
                    return
                self.produced += 1
                if limit is not None and self.produced >= limit:
                    self.enumerator.stop()
        except Exception as exc:
            logger.error("Lineup producer failed: %s", exc)
            self._record_error(exc)
        finally:
            for _ in range(self.config.workers):
                if not self._put(tasks, None):
                    break

    # -------------------------------------------------------------------
    # Result collection
    # -------------------------------------------------------------------

    def _collect(self, results, workers: list) -> None:
        every = self.config.progress_every
        done: set[int] = set()
        while len(done) < len(workers):
            try:
                message = results.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                for i, proc in enumerate(workers):
                    if i not in done and proc.exitcode is not None:
                        raise SimulationError(
                            f"Worker {i} exited unexpectedly with code {proc.exitcode}"
                        )
                continue

            kind, worker_id = message[0], message[1]
            if kind == _RESULT:
                _, _, result, runs_sum, hits_sum = message
                self.processed += 1
                count = self.aggregator.add(result, self.config.games_per_lineup,
                                            runs_sum, hits_sum)
                if self.on_progress is not None and count % every == 0:
                    self.on_progress(count)
            elif kind == _ERROR:
                _, _, exc, order = message
                logger.error("Worker %d failed on lineup %s: %s", worker_id, order, exc)
                self._record_error(exc)
            elif kind == _DONE:
                done.add(worker_id)

    # -------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------

    def run(self) -> SimulationReport:
        """Simulate every lineup and return the ranked report."""
        cfg = self.config
        self._reset()
        total = len(self.enumerator)
        if cfg.max_lineups is not None:
            total = min(total, cfg.max_lineups)
        logger.info(
            "Simulating %d lineups x %d games with %d workers (seed %d)",
            total, cfg.games_per_lineup, cfg.workers, self.base_seed,
        )
        start = time.monotonic()

        ctx = self._context
        tasks = ctx.Queue(maxsize=cfg.queue_size)
        results = ctx.Queue()
        workers = []
        for i in range(cfg.workers):
            seed = self.base_seed + i * WORKER_SEED_STRIDE
            workers.append(ctx.Process(
                target=_worker_main,
                args=(i, self.enumerator.roster, seed, cfg.games_per_lineup,
                      self.pitcher_policy_factory, tasks, results, self._failed),
                name=f"lineup-worker-{i}",
                daemon=True,
            ))
            logger.debug("Worker %d seeded with %d", i, seed)
        producer = threading.Thread(target=self._produce, args=(tasks,),
                                    name="lineup-producer", daemon=True)

        for proc in workers:
            proc.start()
        producer.start()
        completed = False
        try:
            self._collect(results, workers)
            completed = True
        finally:
            if not completed:
                self._failed.set()
                self._aborted.set()
                self.enumerator.stop()
                tasks.cancel_join_thread()
                for proc in workers:
                    if proc.is_alive():
                        proc.terminate()
            producer.join()
            for proc in workers:
                proc.join()

        if self._errors:
            raise SimulationError(
                f"{len(self._errors)} worker error(s); first: {self._errors[0]}"
            ) from self._errors[0]

        elapsed = time.monotonic() - start
        logger.info("Finished %d lineups in %.1fs", self.processed, elapsed)
        return SimulationReport(
            top=rank_results(self.aggregator.top()),
            bottom=rank_results(self.aggregator.bottom()),
            lineups_processed=self.processed,
            games_per_lineup=cfg.games_per_lineup,
            elapsed_seconds=elapsed,
        )


def run_lineup_search(roster: Sequence[Player], config: SimConfig | None = None,
                      **kwargs) -> SimulationReport:
    """Convenience wrapper: build a ``LineupSimulator`` and run it."""
    return LineupSimulator(roster, config=config, **kwargs).run()
