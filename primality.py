"""Probabilistic primality testing for digit-image integers.

Candidates are first screened against a table of small primes, which rejects
most composites without any modular exponentiation.  Survivors go through
``gmpy2.is_prime`` with the requested number of Miller–Rabin rounds; each
round lowers the false-positive bound by a factor of four.
"""

import gmpy2
from gmpy2 import mpz
from sympy import primerange

DEFAULT_ROUNDS = 2
TRIAL_LIMIT = 1000

SMALL_PRIMES = tuple(primerange(2, TRIAL_LIMIT))
_SMALL_PRIME_SET = frozenset(SMALL_PRIMES)


# ─────────────────────────────────────────────────────────────────────────────
# Trial division screen
# ─────────────────────────────────────────────────────────────────────────────

def has_small_factor(n) -> bool:
    """``True`` if a prime below ``TRIAL_LIMIT`` properly divides ``n``."""
    for p in SMALL_PRIMES:
        if n % p == 0:
            return n != p
    return False


# ─────────────────────────────────────────────────────────────────────────────
# Miller–Rabin
# ─────────────────────────────────────────────────────────────────────────────

def is_probably_prime(n, rounds: int = DEFAULT_ROUNDS) -> bool:
    """Probabilistic primality test.

    ``0`` and ``1`` are never prime and values below ``TRIAL_LIMIT`` are
    answered exactly.  Larger values are composite with certainty when the
    test says so; a ``True`` answer is wrong with probability at most
    ``4 ** -rounds``.
    """
    if rounds < 1:
        raise ValueError(f"rounds must be at least 1, got {rounds}")
    n = mpz(n)
    if n < 2:
        return False
    if n < TRIAL_LIMIT:
        return int(n) in _SMALL_PRIME_SET
    if has_small_factor(n):
        return False
    return bool(gmpy2.is_prime(n, rounds))


def next_prime(n) -> mpz:
    """Smallest (probable) prime strictly greater than ``n``."""
    n = mpz(n)
    if n < 2:
        return mpz(2)
    return gmpy2.next_prime(n)
