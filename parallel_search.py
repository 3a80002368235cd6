"""Prime proximity search spread over a process pool.

Every task gets its own copy of the digits and its own seeded RNG, runs a
batch of perturb/test/rollback trials and reports either the prime it found
or nothing.  The first prime reported wins; the pool is terminated and all
other in-flight batches are abandoned.  Nothing is shared between tasks, so
abandoning them has no side effects.
"""

import os
import random
import time
from multiprocessing import Pool
from typing import Optional, Tuple

from tqdm import tqdm

from digit_sequence import DigitSequence
from primality import DEFAULT_ROUNDS, is_probably_prime
from prime_search import (SearchExhausted, SearchResult, check_search_args,
                          find_nearby_prime, perturb, rollback)

DEFAULT_BATCH = 64


def default_workers() -> int:
    # Leave one core for the system, cap at 8
    cpus = os.cpu_count() or 1
    return min(max(1, cpus - 1), 8)


def run_trials(task: Tuple) -> Tuple[int, Optional[DigitSequence]]:
    """Worker entry point: up to ``batch`` trials on a private copy.

    Returns ``(tests_done, prime_digits_or_None)``.
    """
    digits, start_pos, positions, rounds, batch, seed, deadline = task
    rng = random.Random(seed)
    work = digits.copy()
    eligible = range(start_pos, len(work))
    for done in range(1, batch + 1):
        changes = perturb(work, eligible, positions, rng)
        if is_probably_prime(work.to_integer(), rounds):
            return done, work
        rollback(work, changes)
        if deadline is not None and time.time() >= deadline:
            return done, None
    return batch, None


def find_nearby_prime_parallel(digits: DigitSequence,
                               *,
                               rounds: int = DEFAULT_ROUNDS,
                               positions: int = 1,
                               preserve_leading: bool = True,
                               max_iterations: Optional[int] = None,
                               time_limit: Optional[float] = None,
                               workers: Optional[int] = None,
                               batch: int = DEFAULT_BATCH,
                               seed: Optional[int] = None,
                               progress: bool = False) -> SearchResult:
    """Parallel counterpart of :func:`prime_search.find_nearby_prime`.

    Same check-first policy, budgets and result.  ``iterations`` counts the
    primality tests of every batch that reported back, including the
    initial check.
    """
    workers = workers or default_workers()
    if batch < 1:
        raise ValueError(f"batch must be at least 1, got {batch}")
    if workers == 1:
        return find_nearby_prime(digits, rounds=rounds, positions=positions,
                                 preserve_leading=preserve_leading,
                                 max_iterations=max_iterations,
                                 time_limit=time_limit,
                                 rng=random.Random(seed), progress=progress)

    eligible = check_search_args(digits, positions, preserve_leading)
    start = time.perf_counter()
    iterations = 1
    if is_probably_prime(digits.to_integer(), rounds):
        result = digits.copy()
        return SearchResult(result, result.to_integer(), iterations, [],
                            time.perf_counter() - start)
    if not eligible:
        raise ValueError("No digit positions are eligible for perturbation")

    seeds = random.Random(seed)
    deadline = time.time() + time_limit if time_limit is not None else None

    with Pool(processes=workers) as pool, \
            tqdm(desc=f"Searching with {workers} workers", unit="trial",
                 disable=not progress, leave=False) as bar:
        while True:
            elapsed = time.perf_counter() - start
            if max_iterations is not None and iterations >= max_iterations:
                raise SearchExhausted(iterations, elapsed)
            if time_limit is not None and elapsed >= time_limit:
                raise SearchExhausted(iterations, elapsed)

            budget = None if max_iterations is None else max_iterations - iterations
            tasks = []
            for _ in range(workers):
                size = batch if budget is None else min(batch, budget)
                if size <= 0:
                    break
                if budget is not None:
                    budget -= size
                tasks.append((digits, eligible.start, positions, rounds, size,
                              seeds.getrandbits(64), deadline))

            # Leaving the with-block terminates the pool and drops the
            # remaining batches of this round.
            for done, found in pool.imap_unordered(run_trials, tasks):
                iterations += done
                bar.update(done)
                if found is not None:
                    return SearchResult(found, found.to_integer(), iterations,
                                        digits.diff(found),
                                        time.perf_counter() - start)
