"""Tests for the number-theory classifier."""

import math

import pytest

from decoder.analyzers.number_theory import (
    NumberTheoryClassifier,
    divisors,
    fibonacci_index,
    is_pentagonal,
    is_tetrahedral,
    magic_order,
    triangular_index,
)
from decoder.core.errors import InvalidInputError


@pytest.fixture
def classifier():
    return NumberTheoryClassifier()


class TestClassify:

    def test_prime(self, classifier):
        report = classifier.classify(97)
        assert report.basic.is_prime
        assert report.basic.divisors == [1, 97]
        assert report.basic.sum_divisors == 98
        assert report.basic.prev_prime == 89
        assert report.basic.next_prime == 101
        assert report.classification.prime_index == 25
        assert report.identity.digital_root == 7
        assert report.identity.binary == "1100001"
        assert report.identity.hexadecimal == "61"

    def test_one(self, classifier):
        report = classifier.classify(1)
        assert not report.basic.is_prime
        assert report.basic.divisors == [1]
        assert report.basic.prev_prime is None
        assert report.basic.next_prime == 2
        assert report.classification.prime_index is None
        assert report.classification.is_triangular
        assert report.classification.is_fibonacci
        assert report.classification.fibonacci_index == 1
        assert report.classification.is_square
        assert report.classification.is_cube

    def test_perfect_number(self, classifier):
        report = classifier.classify(28)
        assert report.basic.divisors == [1, 2, 4, 7, 14, 28]
        assert report.basic.sum_divisors == 56
        assert report.classification.is_triangular
        assert report.classification.triangular_index == 7
        assert report.classification.is_happy
        assert not report.classification.is_harshad
        assert report.classification.prime_index is None

    def test_neighbors(self, classifier):
        basic = classifier.classify(28).basic
        assert (basic.prev_prime, basic.next_prime) == (23, 29)
        assert (basic.prev_triangular, basic.next_triangular) == (21, 36)
        assert (basic.prev_fibonacci, basic.next_fibonacci) == (21, 34)
        assert (basic.prev_palindrome, basic.next_palindrome) == (22, 33)

    def test_magic_constant(self, classifier):
        identity = classifier.classify(65).identity
        assert identity.is_magic_constant
        assert identity.magic_order == 5


class TestNormalization:

    def test_floor_then_absolute(self, classifier):
        assert classifier.classify(28.9).number == 28
        assert classifier.classify(-28.7).number == 29

    @pytest.mark.parametrize("value", [0, 0.5, -0.0])
    def test_zero_rejected(self, classifier, value):
        with pytest.raises(InvalidInputError):
            classifier.classify(value)

    @pytest.mark.parametrize("value", [math.nan, math.inf, "12", True, None])
    def test_non_numbers_rejected(self, classifier, value):
        with pytest.raises(InvalidInputError):
            classifier.classify(value)

    def test_invalid_input_is_value_error(self, classifier):
        with pytest.raises(ValueError):
            classifier.classify(0)


class TestSearchLimits:

    def test_limit_exhausted_reports_none(self):
        basic = NumberTheoryClassifier(prime_search_limit=3).classify(97).basic
        assert basic.prev_prime is None
        assert basic.next_prime is None

    def test_limit_is_inclusive(self):
        basic = NumberTheoryClassifier(prime_search_limit=4).classify(97).basic
        assert basic.next_prime == 101

    def test_palindrome_limit(self):
        basic = NumberTheoryClassifier(palindrome_search_limit=5).classify(1234).basic
        assert basic.prev_palindrome is None
        assert basic.next_palindrome is None

    def test_previous_neighbor_beyond_default_limit(self):
        basic = NumberTheoryClassifier().classify(1_000_000).basic
        assert basic.prev_triangular is None
        assert basic.next_triangular == 1_000_405

        wider = NumberTheoryClassifier(triangular_search_limit=2000).classify(1_000_000).basic
        assert wider.prev_triangular == 998_991


class TestPrimeIndex:

    @pytest.mark.parametrize("p,expected", [(2, 1), (3, 2), (97, 25), (997, 168)])
    def test_methods_agree(self, p, expected):
        trial = NumberTheoryClassifier(prime_index_method="trial")
        sieve = NumberTheoryClassifier(prime_index_method="sieve")
        assert trial.prime_index(p) == expected
        assert sieve.prime_index(p) == expected

    def test_unknown_method_rejected(self):
        with pytest.raises(ValueError):
            NumberTheoryClassifier(prime_index_method="guess")


class TestPredicates:

    def test_indices(self):
        assert triangular_index(28) == 7
        assert triangular_index(29) is None
        assert fibonacci_index(2) == 3
        assert fibonacci_index(144) == 12
        assert fibonacci_index(4) is None

    def test_figurate(self):
        assert is_pentagonal(22)
        assert not is_pentagonal(23)
        assert is_tetrahedral(20)
        assert not is_tetrahedral(21)

    def test_magic_order(self):
        assert magic_order(15) == 3
        assert magic_order(34) == 4
        assert magic_order(16) is None

    def test_divisors(self):
        assert divisors(36) == [1, 2, 3, 4, 6, 9, 12, 18, 36]
