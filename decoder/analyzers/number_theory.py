"""
Number Theory Classifier
=========================

Classifies a positive integer against the divisor, primality, figurate
and recreational properties shown in the decoder's number analyzer.

Input normalisation: the value is floored, then made positive. Zero
after normalisation is rejected with :class:`InvalidInputError`.

Neighbor searches (previous / next prime, triangular, Fibonacci and
palindromic numbers) scan outward one integer at a time and stop after
a fixed number of candidates. A scan that runs out of budget reports
``None`` rather than continuing, which keeps the cost of a single call
bounded for large inputs.

The prime index is counted by testing every integer up to *n* with
trial division, O(n) primality tests, and is only computed when *n* is
prime. The ``"sieve"`` method returns the same count from a NumPy sieve.

References:
    - Hardy, G. H. & Wright, E. M. (2008). An Introduction to the
      Theory of Numbers. 6th ed. Oxford University Press.
    - Gessel, I. (1972). Fibonacci is a Square. Fibonacci Quarterly,
      10(4), 417-419.
    - Kaprekar, D. R. (1955). Multidigital numbers. Scripta Math.,
      21, 27. (Harshad numbers)
    - Guy, R. K. (2004). Unsolved Problems in Number Theory. 3rd ed.
      Springer. Section E34 (happy numbers).
"""

from __future__ import annotations

import math
import numbers
from typing import Callable, Optional, Union

from shared.math_utils import (
    count_primes_upto,
    digit_square_sum,
    digit_sum,
    digital_root,
    is_palindrome,
    is_perfect_cube,
    is_perfect_square,
    is_prime,
    to_base,
)
from shared.logger import DecoderLogger
from decoder.core.errors import InvalidInputError
from decoder.core.models import (
    BasicProperties,
    Classification,
    IdentityProperties,
    NumberReport,
)


# Neighbor scan budgets (candidates examined in each direction)
PRIME_SEARCH_LIMIT: int = 1000
TRIANGULAR_SEARCH_LIMIT: int = 1000
FIBONACCI_SEARCH_LIMIT: int = 1000
PALINDROME_SEARCH_LIMIT: int = 2000

# Orders of the magic squares whose constants are recognised
MAGIC_ORDERS: range = range(3, 11)

PRIME_INDEX_METHODS: tuple[str, ...] = ("trial", "sieve")


# ===================================================================== #
#  Predicates
# ===================================================================== #


def is_triangular(n: int) -> bool:
    """``n`` is triangular iff ``8n + 1`` is a perfect square."""
    return n > 0 and is_perfect_square(8 * n + 1)


def triangular_index(n: int) -> Optional[int]:
    """Index *k* with ``k(k+1)/2 == n``, recovered from ``sqrt(8n + 1)``."""
    if not is_triangular(n):
        return None
    return (math.isqrt(8 * n + 1) - 1) // 2


def is_fibonacci(n: int) -> bool:
    """``n`` is Fibonacci iff ``5n^2 + 4`` or ``5n^2 - 4`` is a perfect square."""
    if n <= 0:
        return False
    square = 5 * n * n
    return is_perfect_square(square + 4) or is_perfect_square(square - 4)


def fibonacci_index(n: int) -> Optional[int]:
    """Position of *n* in 1, 1, 2, 3, 5, ... by iterative generation.

    The first occurrence wins, so ``fibonacci_index(1) == 1``.
    """
    if not is_fibonacci(n):
        return None
    prev, current, idx = 0, 1, 1
    while current <= n:
        if current == n:
            return idx
        prev, current = current, prev + current
        idx += 1
    return None


def is_pentagonal(n: int) -> bool:
    """``n`` is pentagonal iff ``(1 + sqrt(1 + 24n)) / 6`` is an integer."""
    disc = 1 + 24 * n
    if not is_perfect_square(disc):
        return False
    return (1 + math.isqrt(disc)) % 6 == 0


def is_tetrahedral(n: int) -> bool:
    """Search ``k(k+1)(k+2)/6`` upward from ``k = 1``."""
    k = 1
    while True:
        value = k * (k + 1) * (k + 2) // 6
        if value == n:
            return True
        if value > n:
            return False
        k += 1


def is_harshad(n: int) -> bool:
    """``n`` is divisible by the sum of its digits."""
    return n % digit_sum(n) == 0


def is_happy(n: int) -> bool:
    """Iterate the digit-square sum until 1 or a repeated value."""
    seen: set[int] = set()
    while n != 1 and n not in seen:
        seen.add(n)
        n = digit_square_sum(n)
    return n == 1


def magic_order(n: int) -> Optional[int]:
    """Order *k* in 3..10 whose magic constant ``k(k^2+1)/2`` equals *n*."""
    for order in MAGIC_ORDERS:
        if n == order * (order * order + 1) // 2:
            return order
    return None


def divisors(n: int) -> list[int]:
    """All positive divisors of *n* by paired trial division to ``sqrt(n)``."""
    found: list[int] = []
    for candidate in range(1, math.isqrt(n) + 1):
        if n % candidate == 0:
            found.append(candidate)
            partner = n // candidate
            if partner != candidate:
                found.append(partner)
    return sorted(found)


# ===================================================================== #
#  Classifier
# ===================================================================== #


class NumberTheoryClassifier:
    """Builds a :class:`NumberReport` for a single integer.

    The four neighbor budgets and the prime-index method are named
    constants that can be overridden per instance (usually from
    :class:`~shared.config.NumberTheoryConfig`).

    Usage::

        classifier = NumberTheoryClassifier()
        report = classifier.classify(28)
        report.basic.divisors            # [1, 2, 4, 7, 14, 28]
        report.classification.is_triangular  # True
    """

    def __init__(
        self,
        *,
        prime_search_limit: int = PRIME_SEARCH_LIMIT,
        triangular_search_limit: int = TRIANGULAR_SEARCH_LIMIT,
        fibonacci_search_limit: int = FIBONACCI_SEARCH_LIMIT,
        palindrome_search_limit: int = PALINDROME_SEARCH_LIMIT,
        prime_index_method: str = "trial",
        logger: Optional[DecoderLogger] = None,
    ) -> None:
        if prime_index_method not in PRIME_INDEX_METHODS:
            raise ValueError(
                f"prime_index_method must be one of {PRIME_INDEX_METHODS}, "
                f"got {prime_index_method!r}"
            )
        self.prime_search_limit = prime_search_limit
        self.triangular_search_limit = triangular_search_limit
        self.fibonacci_search_limit = fibonacci_search_limit
        self.palindrome_search_limit = palindrome_search_limit
        self.prime_index_method = prime_index_method
        self.logger = logger or DecoderLogger("number_theory")

    # ------------------------------------------------------------------ #
    #  Public API
    # ------------------------------------------------------------------ #

    def classify(self, n: Union[int, float]) -> NumberReport:
        """Classify *n* after flooring and taking the absolute value.

        Raises:
            InvalidInputError: If *n* is not a finite number or is zero
                after normalisation.
        """
        num = self.normalize(n)
        self.logger.debug("Classifying %d", num)

        prime = is_prime(num)
        divs = divisors(num)
        order = magic_order(num)

        basic = BasicProperties(
            divisors=divs,
            sum_divisors=sum(divs),
            is_prime=prime,
            prev_prime=self._scan_down(num, is_prime, self.prime_search_limit, floor=2),
            next_prime=self._scan_up(num, is_prime, self.prime_search_limit),
            prev_triangular=self._scan_down(num, is_triangular, self.triangular_search_limit),
            next_triangular=self._scan_up(num, is_triangular, self.triangular_search_limit),
            prev_fibonacci=self._scan_down(num, is_fibonacci, self.fibonacci_search_limit),
            next_fibonacci=self._scan_up(num, is_fibonacci, self.fibonacci_search_limit),
            prev_palindrome=self._scan_down(num, is_palindrome, self.palindrome_search_limit),
            next_palindrome=self._scan_up(num, is_palindrome, self.palindrome_search_limit),
        )

        root = digital_root(num)
        identity = IdentityProperties(
            digital_root=root,
            reduced_sum=root,
            binary=to_base(num, 2),
            octal=to_base(num, 8),
            decimal=to_base(num, 10),
            duodecimal=to_base(num, 12),
            hexadecimal=to_base(num, 16),
            is_magic_constant=order is not None,
            magic_order=order,
        )

        tri_index = triangular_index(num)
        fib_index = fibonacci_index(num)
        classification = Classification(
            prime_index=self.prime_index(num) if prime else None,
            is_triangular=tri_index is not None,
            triangular_index=tri_index,
            is_square=is_perfect_square(num),
            is_cube=is_perfect_cube(num),
            is_fibonacci=fib_index is not None,
            fibonacci_index=fib_index,
            is_harshad=is_harshad(num),
            is_happy=is_happy(num),
            is_pentagonal=is_pentagonal(num),
            is_tetrahedral=is_tetrahedral(num),
        )

        return NumberReport(
            number=num,
            basic=basic,
            identity=identity,
            classification=classification,
        )

    def prime_index(self, p: int) -> int:
        """1-based index of the prime *p* among the primes (2 -> 1, 97 -> 25).

        The ``"trial"`` method tests every integer in ``2..p``.
        """
        if self.prime_index_method == "sieve":
            return count_primes_upto(p)
        return sum(1 for candidate in range(2, p + 1) if is_prime(candidate))

    @staticmethod
    def normalize(n: Union[int, float]) -> int:
        """Floor *n*, then take its absolute value.

        Raises:
            InvalidInputError: For non-numeric, non-finite or zero input.
        """
        if isinstance(n, bool) or not isinstance(n, numbers.Real):
            raise InvalidInputError(f"Expected a number, got {type(n).__name__}")
        if not isinstance(n, numbers.Integral) and not math.isfinite(n):
            raise InvalidInputError(f"Number must be finite, got {n}")
        num = abs(math.floor(n))
        if num == 0:
            raise InvalidInputError("Number must be non-zero")
        return num

    # ------------------------------------------------------------------ #
    #  Neighbor scans
    # ------------------------------------------------------------------ #

    @staticmethod
    def _scan_up(
        n: int, predicate: Callable[[int], bool], limit: int
    ) -> Optional[int]:
        """First match in ``n+1 .. n+limit``."""
        for candidate in range(n + 1, n + limit + 1):
            if predicate(candidate):
                return candidate
        return None

    @staticmethod
    def _scan_down(
        n: int, predicate: Callable[[int], bool], limit: int, floor: int = 1
    ) -> Optional[int]:
        """First match in ``n-1 .. max(floor, n-limit)``, descending."""
        lowest = max(floor, n - limit)
        for candidate in range(n - 1, lowest - 1, -1):
            if predicate(candidate):
                return candidate
        return None
