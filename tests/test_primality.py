"""
Tests for the primality oracle.
"""

import gmpy2
import pytest
from gmpy2 import mpz

from primality import (SMALL_PRIMES, TRIAL_LIMIT, has_small_factor,
                       is_probably_prime, next_prime)

GOOGOL_PRIME = mpz(10) ** 100 + 267
MERSENNE_127 = mpz(2) ** 127 - 1


class TestKnownValues:
    @pytest.mark.parametrize("n, expected", [
        (0, False),
        (1, False),
        (2, True),
        (3, True),
        (4, False),
        (97, True),
        (100, False),
        (561, False),   # Carmichael number
        (997, True),
        (1009, True),
        (1001, False),
    ])
    def test_small_values(self, n, expected):
        assert is_probably_prime(n) is expected

    def test_small_values_match_sympy_table(self):
        for n in range(TRIAL_LIMIT):
            assert is_probably_prime(n) == (n in SMALL_PRIMES)

    def test_large_primes(self):
        assert is_probably_prime(MERSENNE_127)
        assert is_probably_prime(GOOGOL_PRIME, rounds=10)

    def test_large_composites(self):
        assert not is_probably_prime((mpz(2) ** 61 - 1) * (mpz(2) ** 89 - 1))
        assert not is_probably_prime(GOOGOL_PRIME + 2)
        assert not is_probably_prime(mpz(10) ** 1500)

    def test_thousand_digit_value(self):
        n = gmpy2.next_prime(mpz(7) * mpz(10) ** 1000)
        assert is_probably_prime(n)
        assert not is_probably_prime(n * 3)

    def test_plain_ints_accepted(self):
        assert is_probably_prime(2 ** 31 - 1)

    def test_rounds_must_be_positive(self):
        with pytest.raises(ValueError):
            is_probably_prime(7, rounds=0)


class TestHelpers:
    def test_has_small_factor(self):
        assert has_small_factor(1003)      # 17 * 59
        assert not has_small_factor(1009)
        assert not has_small_factor(7)

    def test_next_prime(self):
        assert next_prime(13) == 17
        assert next_prime(14) == 17
        assert next_prime(0) == 2
        assert next_prime(mpz(10) ** 100) == GOOGOL_PRIME
