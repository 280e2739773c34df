from __future__ import annotations
from bisect import bisect_right
from typing import List
import logging
import math

import numpy as np

import numeric

logger = logging.getLogger(__name__)

INITIAL_PRIMES = (2, 3)
# smallest step the sieve grows by, so repeated small lookups don't re-sieve
SIEVE_CHUNK = 1024


class PrimeCache:
    """Ascending list of primes, grown on demand.

    The cache is plain instance state: whoever needs factorizations creates
    one (or receives one) and keeps it for as long as the lookups should be
    shared.
    """

    def __init__(self, limit: int = 0) -> None:
        self._primes: List[int] = list(INITIAL_PRIMES)
        self._limit = self._primes[-1]
        if limit > self._limit:
            self.extend(limit)

    @property
    def limit(self) -> int:
        """Every prime <= limit is cached."""
        return self._limit

    def __len__(self) -> int:
        return len(self._primes)

    def extend(self, limit: int) -> None:
        if limit <= self._limit:
            return
        new_limit = max(int(limit), self._limit + SIEVE_CHUNK)
        sieve = np.ones(new_limit + 1, dtype=bool)
        sieve[:2] = False
        for p in range(2, math.isqrt(new_limit) + 1):
            if sieve[p]:
                sieve[p * p :: p] = False
        found = np.nonzero(sieve[self._limit + 1 :])[0] + self._limit + 1
        self._primes.extend(int(p) for p in found)
        logger.debug(
            "prime cache extended from %d to %d (%d primes)",
            self._limit,
            new_limit,
            len(self._primes),
        )
        self._limit = new_limit

    def primes_up_to(self, n: int) -> List[int]:
        self.extend(n)
        return self._primes[: bisect_right(self._primes, n)]

    def is_prime(self, n: int) -> bool:
        if not numeric.is_integral(n) or n < 2:
            return False
        n = int(n)
        if n <= self._limit:
            i = bisect_right(self._primes, n)
            return i > 0 and self._primes[i - 1] == n
        return self.factor(n) == [n]

    def factor(self, n: int) -> List[int]:
        """Prime factors of |n| in ascending order, with multiplicity.

        Non-integers, 0 and +-1 have no prime factors and give [].
        """
        if not numeric.is_integral(n):
            return []
        n = abs(int(n))
        if n < 2:
            return []
        self.extend(math.isqrt(n))
        out: List[int] = []
        for p in self._primes:
            if p * p > n:
                break
            while n % p == 0:
                out.append(p)
                n //= p
        if n > 1:
            out.append(n)
        return out
