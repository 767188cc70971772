"""
DecoderCore Mathematical Utilities
===================================

Integer helpers shared by every decoder analyzer: digit sums, the two
digit-reduction variants, zero-dropping, exact integer roots, base
conversion, palindrome tests and a NumPy-backed prime sieve.

Two reducers live here on purpose and must stay distinct:

- :func:`digital_root` -- ``1 + (n - 1) mod 9``. Never stops early.
  Used by the Reduction cipher and the number classifier.
- :func:`reduce_with_masters` -- repeated digit summing that stops as
  soon as it reaches one of the master numbers 11, 22 or 33. Used by the
  chronology matcher and the date numerology helpers.

References:
    - Ghannam, T. (2011). The Mystery of Numbers: Revealed Through
      Their Digital Root. CreateSpace.
    - Hardy, G. H. & Wright, E. M. (2008). An Introduction to the
      Theory of Numbers. 6th ed. Oxford University Press.
    - Sorenson, J. (1990). An Introduction to Prime Number Sieves.
      University of Wisconsin Technical Report #909.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


# ---------------------------------------------------------------------------
#  Constants
# ---------------------------------------------------------------------------
MASTER_NUMBERS: frozenset[int] = frozenset({11, 22, 33})

_DIGITS: str = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

BoolArray = NDArray[np.bool_]


# ========================== Digit Arithmetic ===============================


def digit_sum(n: int) -> int:
    """Sum the decimal digits of ``|n|`` once (no recursion)."""
    return sum(int(ch) for ch in str(abs(n)))


def digital_root(n: int) -> int:
    """Return the digital root ``1 + (n - 1) mod 9`` of a positive integer.

    No master-number exception: 33 reduces to 6 and 29 reduces to 2.

    Args:
        n: A positive integer.

    Returns:
        An integer in ``1..9``.
    """
    return 1 + (n - 1) % 9


def reduce_with_masters(n: int) -> int:
    """Repeatedly sum digits until one digit or a master number remains.

    The loop exits early on 11, 22 or 33, so ``reduce_with_masters(33)``
    is ``33`` and ``reduce_with_masters(2024)`` is ``8``. Values ``<= 9``
    are returned unchanged.

    Args:
        n: A non-negative integer.

    Returns:
        A value in ``0..9`` or one of :data:`MASTER_NUMBERS`.
    """
    current = n
    while current > 9 and current not in MASTER_NUMBERS:
        current = digit_sum(current)
    return current


def drop_zeros(n: int) -> int:
    """Delete every ``'0'`` from the decimal form of *n* and reparse.

    ``drop_zeros(20605) == 265``. A number made only of zeros yields 0.
    """
    stripped = str(n).replace("0", "")
    if not stripped or stripped == "-":
        return 0
    return int(stripped)


def digit_square_sum(n: int) -> int:
    """Sum of the squares of the decimal digits of *n*."""
    return sum(int(ch) ** 2 for ch in str(abs(n)))


def is_palindrome(n: int) -> bool:
    """Return ``True`` when the decimal form of *n* reads the same reversed."""
    text = str(n)
    return text == text[::-1]


# ========================== Exact Roots ====================================


def is_perfect_square(n: int) -> bool:
    """Exact perfect-square test using :func:`math.isqrt`."""
    if n < 0:
        return False
    root = math.isqrt(n)
    return root * root == n


def integer_cube_root(n: int) -> int:
    """Return ``floor(cbrt(n))`` for ``n >= 0`` using exact integer arithmetic.

    A floating-point estimate is refined with integer comparisons so the
    result is correct for arbitrarily large integers.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    if n < 2:
        return n

    # Start above the true root; integer Newton iterates decrease monotonically.
    root = 1 << ((n.bit_length() + 2) // 3)
    while True:
        nxt = (2 * root + n // (root * root)) // 3
        if nxt >= root:
            return root
        root = nxt


def is_perfect_cube(n: int) -> bool:
    """Exact perfect-cube test for non-negative integers."""
    if n < 0:
        return False
    root = integer_cube_root(n)
    return root ** 3 == n


# ========================== Base Conversion ================================


def to_base(n: int, base: int) -> str:
    """Render *n* in *base* (2..36) using upper-case digits.

    ``to_base(255, 16) == "FF"``; ``to_base(144, 12) == "100"``.

    Raises:
        ValueError: If *base* is outside ``2..36``.
    """
    if not 2 <= base <= 36:
        raise ValueError(f"base must be in 2..36, got {base}")
    if n == 0:
        return "0"

    sign = "-" if n < 0 else ""
    n = abs(n)
    digits: list[str] = []
    while n:
        n, rem = divmod(n, base)
        digits.append(_DIGITS[rem])
    return sign + "".join(reversed(digits))


# ========================== Primes =========================================


def is_prime(n: int) -> bool:
    """Primality by trial division up to ``sqrt(n)``.

    Numbers below 2 are not prime.
    """
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    limit = math.isqrt(n)
    for divisor in range(3, limit + 1, 2):
        if n % divisor == 0:
            return False
    return True


def prime_sieve(limit: int) -> BoolArray:
    """Sieve of Eratosthenes returning a boolean primality mask ``[0..limit]``.

    Reference:
        Sorenson, J. (1990). An Introduction to Prime Number Sieves.

    Args:
        limit: Largest integer to include in the mask.

    Returns:
        NumPy boolean array where ``mask[k]`` is ``True`` iff *k* is prime.
    """
    if limit < 2:
        return np.zeros(max(limit + 1, 0), dtype=np.bool_)

    mask = np.ones(limit + 1, dtype=np.bool_)
    mask[:2] = False
    for candidate in range(2, math.isqrt(limit) + 1):
        if mask[candidate]:
            mask[candidate * candidate :: candidate] = False
    return mask


def count_primes_upto(limit: int) -> int:
    """Count primes ``<= limit`` with :func:`prime_sieve`."""
    if limit < 2:
        return 0
    return int(np.count_nonzero(prime_sieve(limit)))
