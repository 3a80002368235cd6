"""
Tests for the process-pool prime search.
"""

import random

import gmpy2
import pytest

from digit_sequence import DigitSequence
from parallel_search import (default_workers, find_nearby_prime_parallel,
                             run_trials)
from prime_search import SearchExhausted


class TestRunTrials:
    def test_finds_prime_on_private_copy(self):
        digits = DigitSequence.from_string("14")
        done, found = run_trials((digits, 1, 1, 2, 500, 3, None))
        assert found is not None
        assert found.to_integer() in (11, 13, 17, 19)
        assert 1 <= done <= 500
        assert str(digits) == "14"

    def test_reports_full_batch_without_prime(self):
        done, found = run_trials((DigitSequence.from_string("200"), 1, 1, 2, 25, 0, None))
        assert found is None
        assert done == 25

    def test_stops_at_deadline(self):
        done, found = run_trials((DigitSequence.from_string("200"), 1, 1, 2, 1000, 0, 0.0))
        assert found is None
        assert done == 1


class TestParallelSearch:
    def test_two_workers_find_teen_prime(self):
        result = find_nearby_prime_parallel(DigitSequence.from_string("14"),
                                            workers=2, batch=8, seed=1)
        assert result.value in (11, 13, 17, 19)
        assert result.digits[0] == 1
        assert result.changed == [1]
        assert result.iterations >= 2

    def test_already_prime_skips_the_pool(self):
        start = DigitSequence.from_string("13")
        result = find_nearby_prime_parallel(start, workers=2)
        assert result.digits == start
        assert result.iterations == 1
        assert result.changed == []

    def test_iteration_budget_is_exact(self):
        with pytest.raises(SearchExhausted) as exc_info:
            find_nearby_prime_parallel(DigitSequence.from_string("200"),
                                       workers=2, batch=8, max_iterations=40,
                                       seed=0)
        assert exc_info.value.iterations == 40

    def test_time_budget(self):
        with pytest.raises(SearchExhausted):
            find_nearby_prime_parallel(DigitSequence.from_string("200"),
                                       workers=2, batch=8, time_limit=0.2,
                                       seed=0)

    def test_longer_value(self):
        rng = random.Random(77)
        start = DigitSequence([rng.randint(1, 9)] + [rng.randint(0, 9) for _ in range(58)] + [3])
        result = find_nearby_prime_parallel(start, workers=2, batch=16, seed=5)
        assert len(result.digits) == len(start)
        assert result.digits[0] == start[0]
        assert gmpy2.is_prime(result.value, 25)
        assert result.changed == start.diff(result.digits)

    def test_single_worker_runs_serially(self):
        start = DigitSequence.from_string("3" + "1" * 38 + "7")
        a = find_nearby_prime_parallel(start, workers=1, seed=42)
        b = find_nearby_prime_parallel(start, workers=1, seed=42)
        assert a.digits == b.digits
        assert a.iterations == b.iterations

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            find_nearby_prime_parallel(DigitSequence.from_string("14"), workers=2, batch=0)
        with pytest.raises(ValueError):
            find_nearby_prime_parallel(DigitSequence.from_string("14"), workers=2, positions=0)
        with pytest.raises(ValueError):
            find_nearby_prime_parallel(DigitSequence.from_string("8"), workers=2)


def test_default_workers():
    assert 1 <= default_workers() <= 8
