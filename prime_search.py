"""Randomized prime proximity search over digit sequences.

The search keeps a working copy of the digit sequence, overwrites a few
random positions with random digits, and tests the resulting integer.  A
prime ends the search; anything else is rolled back exactly and the next
trial starts from the original digits again.  Exhaustive enumeration is out
of reach at hundreds of digits, so this is a memoryless hill-climb whose
expected cost is governed by the density of primes near the value.
"""

import random
import time
from typing import List, NamedTuple, Optional, Tuple

from tqdm import tqdm

from digit_sequence import DigitSequence, LengthOverflow
from primality import DEFAULT_ROUNDS, is_probably_prime, next_prime

Change = Tuple[int, int]


class SearchExhausted(RuntimeError):
    """The iteration or time budget ran out before a prime turned up."""

    def __init__(self, iterations: int, elapsed: float):
        super().__init__(
            f"No prime found after {iterations} primality tests ({elapsed:.2f}s)"
        )
        self.iterations = iterations
        self.elapsed = elapsed


class SearchResult(NamedTuple):
    digits: DigitSequence
    value: object
    iterations: int
    changed: List[int]
    elapsed: float


# ─────────────────────────────────────────────────────────────────────────────
# Trial primitives
# ─────────────────────────────────────────────────────────────────────────────

def eligible_positions(length: int, preserve_leading: bool = True) -> range:
    return range(1 if preserve_leading else 0, length)


def perturb(seq: DigitSequence, positions: range, count: int,
            rng: random.Random) -> List[Change]:
    """Overwrite ``count`` random positions with random digits.

    Returns ``(position, previous_digit)`` records in application order.
    The same position may be drawn twice.
    """
    changes: List[Change] = []
    for _ in range(count):
        pos = rng.choice(positions)
        changes.append((pos, seq.substitute(pos, rng.randint(0, 9))))
    return changes


def rollback(seq: DigitSequence, changes: List[Change]) -> None:
    """Undo ``changes``; reverse order restores repeated positions correctly."""
    for pos, previous in reversed(changes):
        seq.substitute(pos, previous)


def check_search_args(digits: DigitSequence, positions: int,
                      preserve_leading: bool) -> range:
    if positions < 1:
        raise ValueError(f"positions must be at least 1, got {positions}")
    return eligible_positions(len(digits), preserve_leading)


# ─────────────────────────────────────────────────────────────────────────────
# Serial search
# ─────────────────────────────────────────────────────────────────────────────

def find_nearby_prime(digits: DigitSequence,
                      *,
                      rounds: int = DEFAULT_ROUNDS,
                      positions: int = 1,
                      preserve_leading: bool = True,
                      max_iterations: Optional[int] = None,
                      time_limit: Optional[float] = None,
                      rng: Optional[random.Random] = None,
                      progress: bool = False) -> SearchResult:
    """Find a prime of the same length as ``digits`` by perturbing few digits.

    The input is never modified.  An already-prime input is returned
    unchanged after a single test.  With ``max_iterations`` or
    ``time_limit`` set, :class:`SearchExhausted` is raised once either
    budget is spent; without them the search runs until it succeeds.
    """
    eligible = check_search_args(digits, positions, preserve_leading)
    rng = rng or random.Random()
    work = digits.copy()
    start = time.perf_counter()

    iterations = 1
    if is_probably_prime(work.to_integer(), rounds):
        return SearchResult(work, work.to_integer(), iterations, [],
                            time.perf_counter() - start)
    if not eligible:
        raise ValueError("No digit positions are eligible for perturbation")

    with tqdm(desc="Searching for a nearby prime", unit="trial",
              disable=not progress, leave=False) as bar:
        while True:
            elapsed = time.perf_counter() - start
            if max_iterations is not None and iterations >= max_iterations:
                raise SearchExhausted(iterations, elapsed)
            if time_limit is not None and elapsed >= time_limit:
                raise SearchExhausted(iterations, elapsed)

            changes = perturb(work, eligible, positions, rng)
            iterations += 1
            bar.update(1)
            value = work.to_integer()
            if is_probably_prime(value, rounds):
                return SearchResult(work, value, iterations, digits.diff(work),
                                    time.perf_counter() - start)
            rollback(work, changes)


# ─────────────────────────────────────────────────────────────────────────────
# Deterministic variant
# ─────────────────────────────────────────────────────────────────────────────

def next_prime_digits(digits: DigitSequence,
                      *,
                      rounds: int = DEFAULT_ROUNDS) -> SearchResult:
    """Smallest prime at or above the value, zero-padded to the same length.

    Only the trailing digits change for any realistic image, but every digit
    after the first changed one may differ.  Raises :class:`LengthOverflow`
    when the next prime needs an extra digit.
    """
    start = time.perf_counter()
    value = digits.to_integer()
    if not is_probably_prime(value, rounds):
        value = next_prime(value)
    try:
        result = DigitSequence.from_integer(value, len(digits))
    except LengthOverflow:
        raise LengthOverflow(
            f"The next prime after a {len(digits)}-digit value needs {len(str(value))} digits"
        ) from None
    return SearchResult(result, value, 1, digits.diff(result),
                        time.perf_counter() - start)
