"""Test the math helpers."""
import logging
import math
import time

import pytest

from postfix_calculator.common import mathlib
from postfix_calculator.common.errors import InvalidArgument, NegativeFactorial


@pytest.mark.parametrize("a,b,expected", [
    (12, 18, 6),
    (-12, 18, 6),
    (0, 5, 5),
    (7, 0, 7),
    (0, 0, 0),
])
def test_gcd(a, b, expected) -> None:
    assert mathlib.gcd(a, b) == expected


@pytest.mark.parametrize("a,b,expected", [
    (4, 6, 12),
    (-4, 6, 12),
    (0, 5, 5),
    (0, 0, 0),
])
def test_lcm(a, b, expected) -> None:
    assert mathlib.lcm(a, b) == expected


def test_gcd_of_zeros_is_reported(caplog) -> None:
    """gcd(0, 0) logs a warning instead of failing."""
    with caplog.at_level(logging.WARNING, logger="postfix_calculator"):
        mathlib.gcd(0, 0)
    assert "gcd(0, 0)" in caplog.text


def test_factorial() -> None:
    assert mathlib.factorial(0) == 1
    assert mathlib.factorial(10) == 3628800
    with pytest.raises(NegativeFactorial):
        mathlib.factorial(-1)


@pytest.mark.parametrize("n,k,perm,comb", [
    (5, 2, 20, 10),
    (5, 5, 120, 1),
    (5, 0, 1, 1),
    (2, 5, 0, 0),
    (5, -1, 0, 0),
])
def test_permutation_and_combination(n, k, perm, comb) -> None:
    assert mathlib.permutation(n, k) == perm
    assert mathlib.combination(n, k) == comb


@pytest.mark.parametrize("n,expected", [
    (-7, False), (0, False), (1, False), (2, True), (9, False), (97, True), (7919, True),
])
def test_is_prime(n, expected) -> None:
    assert mathlib.is_prime(n) is expected


@pytest.mark.parametrize("n,expected", [
    (360, "[2^3] * [3^2] * 5"),
    (8, "[2^3]"),
    (97, "97"),
    (-12, "-1 * [2^2] * 3"),
    (1, "1"),
    (0, "0"),
])
def test_prime_factors(n, expected) -> None:
    assert mathlib.prime_factors(n) == expected


def test_largest_32_bit_integers() -> None:
    """The ends of the accepted range are handled quickly."""
    start = time.perf_counter()
    assert mathlib.is_prime(mathlib.INT_MAX) is True
    assert mathlib.prime_factors(mathlib.INT_MAX) == "2147483647"
    assert mathlib.prime_factors(mathlib.INT_MIN) == "-1 * [2^31]"
    assert time.perf_counter() - start < 2.0


@pytest.mark.parametrize("n", [mathlib.INT_MAX + 1, mathlib.INT_MIN - 1, 9007199254740881])
def test_prime_and_factor_reject_large_integers(n) -> None:
    """Integers beyond 32 bits are refused instead of trial-divided."""
    with pytest.raises(InvalidArgument):
        mathlib.is_prime(n)
    with pytest.raises(InvalidArgument):
        mathlib.prime_factors(n)


@pytest.mark.parametrize("x,expected", [
    (0.75, "3/4"),
    (0.1, "1/10"),
    (2.0, "2/1"),
    (-1.5, "-3/2"),
    (1 / 3, "1/3"),
])
def test_to_fraction(x, expected) -> None:
    assert mathlib.to_fraction(x) == expected


def test_to_fraction_respects_max_denominator() -> None:
    assert mathlib.to_fraction(math.pi, max_denominator=10) == "22/7"


def test_to_fraction_rejects_nan() -> None:
    with pytest.raises(InvalidArgument):
        mathlib.to_fraction(math.nan)


@pytest.mark.parametrize("x,expected", [
    (0.0, "0"),
    (math.pi, "π"),
    (2 * math.pi, "2π"),
    (1.75 * math.pi, "π + (3/4)π"),
    (2.5 * math.pi, "2π + (1/2)π"),
    (0.5 * math.pi, "(1/2)π"),
    (-math.pi, "-π"),
    (-2 * math.pi, "-2π"),
    (-0.5 * math.pi, "-(1/2)π"),
    (-1.75 * math.pi, "-π - (3/4)π"),
])
def test_pify(x, expected) -> None:
    assert mathlib.pify(x) == expected


def test_inverse_hyperbolic_domains() -> None:
    """Out-of-domain inputs give NaN, the poles of arth give infinities."""
    assert mathlib.arsh(1.0) == pytest.approx(math.log(1 + math.sqrt(2)))
    assert mathlib.arch(2.0) == pytest.approx(math.log(2 + math.sqrt(3)))
    assert math.isnan(mathlib.arch(0.5))
    assert mathlib.arth(0.5) == pytest.approx(0.5 * math.log(3))
    assert mathlib.arth(-1.0) == -math.inf
    assert math.isnan(mathlib.arth(1.5))
